"""
XP Module - scoring filters for courses.

Components:
- rules: rule value objects and their JSON payload format
- filters: Filter, FilterSet, DefaultFilterSet (course id 0)
- catalog: the static five-filter catalog
- repository: persistence port over a SQLAlchemy session
- seeder: StaticFilterSeeder, transactional seeding into courses
"""

from src.xp.catalog import StaticFilter, get_static_filters
from src.xp.errors import RuleDefinitionError, XPFilterError
from src.xp.filters import DEFAULT_COURSEID, CourseFilterSet, DefaultFilter, DefaultFilterSet, Filter, FilterSet
from src.xp.repository import FilterRepository
from src.xp.seeder import SeedResult, SeedStatus, StaticFilterSeeder

__all__ = [
    "DEFAULT_COURSEID",
    "CourseFilterSet",
    "DefaultFilter",
    "DefaultFilterSet",
    "Filter",
    "FilterRepository",
    "FilterSet",
    "RuleDefinitionError",
    "SeedResult",
    "SeedStatus",
    "StaticFilter",
    "StaticFilterSeeder",
    "XPFilterError",
    "get_static_filters",
]
