"""
SessionPlan and SessionPlanAllocation models.

A session plan is a reusable class outline (warm-up, asanas, pranayama...).
An allocation schedules one plan in one slot on one date.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy import String, Boolean, Date, Text, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.database.base_class import Base
from app.models.mixins import UUIDPrimaryKeyMixin, TimestampMixin
from app.models.enums import AllocationStatus, SessionPlanLevel
from app.models.types import JSONBCompatible, enum_column


class SessionPlan(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """
    Class outline.

    Attributes:
        name: Plan name
        level: beginner, intermediate, advanced
        sections: Ordered list of {"name", "duration_minutes", "items"}
    """

    __tablename__ = "session_plans"
    __table_args__ = {
        "comment": "Reusable class outlines"
    }

    name: Mapped[str] = mapped_column(String(200), nullable=False)

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    level: Mapped[SessionPlanLevel] = mapped_column(
        enum_column(SessionPlanLevel, "session_plan_level_enum"),
        nullable=False,
        default=SessionPlanLevel.BEGINNER
    )

    sections: Mapped[list] = mapped_column(
        JSONBCompatible,
        nullable=False,
        default=list,
        doc="Ordered class sections"
    )

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def __repr__(self) -> str:
        return f"<SessionPlan(id={self.id}, name='{self.name}')>"


class SessionPlanAllocation(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """
    Plan scheduled in a slot on a date.

    Unique per (slot_id, date): allocating again replaces the plan.
    """

    __tablename__ = "session_plan_allocations"
    __table_args__ = (
        UniqueConstraint("slot_id", "date", name="uq_allocation_slot_date"),
        {"comment": "Session plans allocated to slots"},
    )

    session_plan_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("session_plans.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    slot_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("session_slots.id", ondelete="CASCADE"),
        nullable=False
    )

    date: Mapped[date] = mapped_column(Date, nullable=False, index=True)

    status: Mapped[AllocationStatus] = mapped_column(
        enum_column(AllocationStatus, "allocation_status_enum"),
        nullable=False,
        default=AllocationStatus.SCHEDULED
    )

    execution_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        nullable=True,
        doc="Execution record once the class was taught"
    )

    allocated_by: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<SessionPlanAllocation(plan={self.session_plan_id}, slot={self.slot_id}, date={self.date})>"
