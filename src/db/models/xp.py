"""
XP block models.

Two tables back the scoring filters:
- block_xp_config: one row per course that uses XP
- block_xp_filters: rule + points + sort order, per course

Course id 0 is the default/template scope.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, Index, Integer, Text, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class XPConfig(Base):
    """Per-course XP configuration row."""

    __tablename__ = "block_xp_config"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    courseid: Mapped[int] = mapped_column(Integer, nullable=False, unique=True)
    enabled: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())

    def __repr__(self) -> str:
        return f"<XPConfig courseid={self.courseid}>"


class XPFilter(Base):
    """
    A scoring filter bound to a course.

    Attributes:
        ruledata: JSON-serialized rule definition (see src.xp.rules)
        points: XP awarded when the rule matches
        sortorder: evaluation/display order within the course
    """

    __tablename__ = "block_xp_filters"
    __table_args__ = (
        # Concurrent seeders of one course collide here instead of duplicating
        UniqueConstraint("courseid", "sortorder", name="uq_block_xp_filters_course_sort"),
        Index("ix_block_xp_filters_courseid", "courseid"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    courseid: Mapped[int] = mapped_column(Integer, nullable=False)
    ruledata: Mapped[str | None] = mapped_column(Text)
    points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    sortorder: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<XPFilter courseid={self.courseid} sortorder={self.sortorder} points={self.points}>"
