"""
SlotSubscription model - a member's standing slot assignment.

At most one active row per member. Creating a membership or transferring
it to another slot moves this row.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy import String, Boolean, Date, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from app.database.base_class import Base
from app.models.mixins import UUIDPrimaryKeyMixin, TimestampMixin


class SlotSubscription(UUIDPrimaryKeyMixin, TimestampMixin, Base):

    __tablename__ = "slot_subscriptions"
    __table_args__ = {
        "comment": "Standing slot assignment of members"
    }

    member_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("members.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    slot_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("session_slots.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    start_date: Mapped[date] = mapped_column(Date, nullable=False)

    end_date: Mapped[Optional[date]] = mapped_column(
        Date,
        nullable=True,
        doc="None while the assignment is open-ended"
    )

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    is_exception: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        doc="True when the member occupies an exception place"
    )

    def __repr__(self) -> str:
        return f"<SlotSubscription(member={self.member_id}, slot={self.slot_id}, active={self.is_active})>"
