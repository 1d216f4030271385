"""
Persistence port for XP filters.

Wraps a SQLAlchemy session so the seeder never touches a global database
handle. The session is injected by the caller, who also owns its lifetime.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session, SessionTransaction

from src.db.models import XPConfig, XPFilter


class FilterRepository:
    """Record store over the block_xp_config and block_xp_filters tables."""

    def __init__(self, session: Session):
        self.session = session

    def begin(self) -> SessionTransaction:
        """
        Start a delegated transaction.

        Nested inside an already-open transaction this is a SAVEPOINT, and only
        the outermost owner really commits.
        """
        if self.session.in_transaction():
            return self.session.begin_nested()
        return self.session.begin()

    def is_finalized(self, transaction: SessionTransaction) -> bool:
        """True once the transaction has been committed or rolled back."""
        if transaction.is_active:
            return False
        # A failed flush deactivates the transaction without closing it
        return transaction not in (
            self.session.get_transaction(),
            self.session.get_nested_transaction(),
        )

    def list_course_ids(self) -> list[int]:
        stmt = select(XPConfig.courseid).order_by(XPConfig.courseid)
        return list(self.session.scalars(stmt).all())

    def count_filters(self, courseid: int) -> int:
        stmt = select(func.count()).select_from(XPFilter).where(XPFilter.courseid == courseid)
        return self.session.execute(stmt).scalar_one()

    def max_sortorder(self, courseid: int) -> int | None:
        """Highest sort order in the course, None when it has no filters."""
        stmt = select(func.max(XPFilter.sortorder)).where(XPFilter.courseid == courseid)
        return self.session.execute(stmt).scalar()

    def insert_filter(self, record: dict[str, Any]) -> XPFilter:
        # Flush so constraint violations surface inside the caller's transaction
        row = XPFilter(**record)
        self.session.add(row)
        self.session.flush()
        return row

    def get_filters(self, courseid: int) -> list[XPFilter]:
        stmt = (
            select(XPFilter)
            .where(XPFilter.courseid == courseid)
            .order_by(XPFilter.sortorder, XPFilter.id)
        )
        return list(self.session.scalars(stmt).all())
