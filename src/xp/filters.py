"""
Filters and filter sets.

A filter binds a rule to a point value and a sort order inside a course.
A filter set is the ordered collection of filters for one course; the
default set (course id 0) is the template new courses are compared with.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterator

from src.xp.rules import Rule, dump_rule, load_rule

if TYPE_CHECKING:
    from src.db.models import XPFilter
    from src.xp.repository import FilterRepository

DEFAULT_COURSEID = 0


@dataclass
class Filter:
    """A scoring filter: rule payload + points + sort order."""

    editable: bool = False
    ruledata: str | None = None
    points: int = 0
    courseid: int = 0
    sortorder: int = 0
    id: int | None = None

    @property
    def rule(self) -> Rule | None:
        """Decoded rule, None when the filter has no payload yet."""
        if self.ruledata is None:
            return None
        return load_rule(self.ruledata)

    def set_rule(self, rule: Rule) -> None:
        self.ruledata = dump_rule(rule)

    def load_record(self, row: XPFilter) -> Filter:
        self.id = row.id
        self.ruledata = row.ruledata
        self.points = row.points
        self.courseid = row.courseid
        self.sortorder = row.sortorder
        return self

    def to_record(self) -> dict[str, Any]:
        return {
            "ruledata": self.ruledata,
            "points": self.points,
            "courseid": self.courseid,
            "sortorder": self.sortorder,
        }


@dataclass
class DefaultFilter(Filter):
    """Filter belonging to the default/template scope."""

    courseid: int = DEFAULT_COURSEID


class FilterSet(ABC):
    """Ordered filters of one course. Subclasses decide the filter type."""

    courseid: int

    def __init__(self, editable: bool = False):
        self._editable = editable
        self._filters: list[Filter] = []

    def is_editable(self) -> bool:
        return self._editable

    @abstractmethod
    def create_filter(self) -> Filter:
        """Return a new, empty filter for this set."""

    def add_filter(self, filter_: Filter) -> Filter:
        """Attach a filter to this set's course, appending it when unordered."""
        filter_.courseid = self.courseid
        if not filter_.sortorder:
            filter_.sortorder = max((f.sortorder for f in self._filters), default=0) + 1
        self._filters.append(filter_)
        return filter_

    def get_filters(self) -> list[Filter]:
        return sorted(self._filters, key=lambda f: f.sortorder)

    def load(self, repository: FilterRepository) -> FilterSet:
        """Replace the in-memory filters with the course's stored ones."""
        self._filters = [self.create_filter().load_record(row) for row in repository.get_filters(self.courseid)]
        return self

    def __iter__(self) -> Iterator[Filter]:
        return iter(self.get_filters())

    def __len__(self) -> int:
        return len(self._filters)


class CourseFilterSet(FilterSet):
    def __init__(self, courseid: int, editable: bool = False):
        self.courseid = courseid
        super().__init__(editable)

    def create_filter(self) -> Filter:
        return Filter(editable=self.is_editable(), courseid=self.courseid)


class DefaultFilterSet(FilterSet):
    """Filters of the default/template scope (course id 0)."""

    def __init__(self, editable: bool = False):
        self.courseid = DEFAULT_COURSEID
        super().__init__(editable)

    def create_filter(self) -> DefaultFilter:
        return DefaultFilter(editable=self.is_editable())
