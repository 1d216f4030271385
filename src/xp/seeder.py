"""
Static Filter Seeder.

Copies the static rule catalog into courses:
- seed_all_courses: every configured course lacking filters, one transaction
- seed_course: a single course, optionally forcing an append

Courses that already have filters are skipped unless forced. New filters
continue the course's sort order from max(existing) + 1.

Usage:
    with session_scope() as session:
        seeder = StaticFilterSeeder(FilterRepository(session))
        result = seeder.seed_all_courses()
        if not result:
            ...  # result.error holds the cause
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from loguru import logger

from src.xp.catalog import StaticFilter, get_static_filters
from src.xp.repository import FilterRepository


class FilterPayload(Protocol):
    def to_record(self) -> dict[str, Any]: ...


class SeedStatus(str, Enum):
    """Outcome of a seeding call."""

    INSERTED = "inserted"  # At least one filter written
    SKIPPED = "skipped"  # Every course already had filters
    FAILED = "failed"  # Rolled back, see SeedResult.error


@dataclass
class SeedResult:
    """Result of a transactional seeding call. Falsy only when it failed."""

    status: SeedStatus
    courses: dict[int, int] = field(default_factory=dict)  # courseid -> filters inserted
    error: Exception | None = None

    @property
    def inserted(self) -> int:
        return sum(self.courses.values())

    @property
    def skipped_courses(self) -> list[int]:
        return [courseid for courseid, count in self.courses.items() if count == 0]

    def __bool__(self) -> bool:
        return self.status is not SeedStatus.FAILED

    @classmethod
    def from_counts(cls, courses: dict[int, int]) -> SeedResult:
        status = SeedStatus.INSERTED if any(courses.values()) else SeedStatus.SKIPPED
        return cls(status=status, courses=dict(courses))

    @classmethod
    def failed(cls, error: Exception) -> SeedResult:
        return cls(status=SeedStatus.FAILED, error=error)


class StaticFilterSeeder:
    """
    Seeds static filters into courses through an injected repository.

    Holds no state besides its collaborators; safe to build per request.
    """

    def __init__(
        self,
        repository: FilterRepository,
        rules_provider: Callable[[], Sequence[FilterPayload]] = get_static_filters,
        dry_run: bool = False,
    ):
        self.repository = repository
        self.rules_provider = rules_provider
        self.dry_run = dry_run

    def seed_all_courses(self) -> SeedResult:
        """Add the catalog to every configured course that has no filters."""
        counts: dict[int, int] = {}

        def work() -> None:
            courseids = self.repository.list_course_ids()
            logger.info(f"Seeding static filters into {len(courseids)} course(s)")
            for courseid in courseids:
                counts[courseid] = self.save_filters(self.rules_provider(), courseid)

        return self._execute_as_transaction(work, counts)

    def seed_course(self, courseid: int, force: bool = False) -> SeedResult:
        """Add the catalog to one course; force appends even when filters exist."""
        counts: dict[int, int] = {}

        def work() -> None:
            counts[courseid] = self.save_filters(self.rules_provider(), courseid, force=force)

        return self._execute_as_transaction(work, counts)

    def _execute_as_transaction(self, work: Callable[[], None], counts: dict[int, int]) -> SeedResult:
        transaction = None
        try:
            try:
                transaction = self.repository.begin()
                work()
                if self.dry_run:
                    transaction.rollback()
                    logger.info(f"Dry run - rolled back {sum(counts.values())} filter(s)")
                else:
                    transaction.commit()
            except Exception as e:  # Any failure aborts the whole unit of work
                logger.warning(f"Transaction exception, doing rollback: {e}")
                if transaction is not None and not self.repository.is_finalized(transaction):
                    transaction.rollback()
                return SeedResult.failed(e)
        except Exception as e:  # Rollback itself can fail
            logger.error(f"Rollback exception: {e}")
            return SeedResult.failed(e)

        return SeedResult.from_counts(counts)

    def save_filters(self, rules: Sequence[FilterPayload], courseid: int, force: bool = False) -> int:
        """
        Insert rules into a course unless it already has filters.

        Returns:
            Number of filters inserted; 0 when the course was skipped.
        """
        if not force and self.has_filters(courseid):
            logger.debug(f"Course {courseid} already has filters, skipping")
            return 0

        sortorder = self.next_sort_order(courseid)
        for rule in rules:
            self.insert_filter(rule, sortorder, courseid)
            sortorder += 1

        logger.info(f"Added {len(rules)} static filter(s) to course {courseid}")
        return len(rules)

    def next_sort_order(self, courseid: int) -> int:
        last = self.repository.max_sortorder(courseid)
        return (last or 0) + 1

    def has_filters(self, courseid: int) -> bool:
        return self.repository.count_filters(courseid) > 0

    def insert_filter(self, rule: FilterPayload, sortorder: int, courseid: int) -> None:
        """Persist one filter: the rule payload plus course and sort order."""
        record = rule.to_record()
        record["courseid"] = courseid
        record["sortorder"] = sortorder
        self.repository.insert_filter(record)
        logger.debug(f"Inserted filter sortorder={sortorder} points={record.get('points')} into course {courseid}")


__all__ = [
    "FilterPayload",
    "SeedResult",
    "SeedStatus",
    "StaticFilter",
    "StaticFilterSeeder",
]
