"""
TrialBooking model - a lead's trial class in a slot on a date.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy import String, Boolean, Date, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from app.database.base_class import Base
from app.models.mixins import UUIDPrimaryKeyMixin, TimestampMixin
from app.models.enums import TrialStatus
from app.models.types import enum_column


class TrialBooking(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """
    Trial class booking.

    Attributes:
        lead_id: Prospect attending
        slot_id: Slot booked
        date: Day of the trial
        status: pending, confirmed, attended, no-show, cancelled
        is_exception: Booked on exception capacity
    """

    __tablename__ = "trial_bookings"
    __table_args__ = {
        "comment": "Trial class bookings of leads"
    }

    lead_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("leads.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    slot_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("session_slots.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    date: Mapped[date] = mapped_column(Date, nullable=False, index=True)

    status: Mapped[TrialStatus] = mapped_column(
        enum_column(TrialStatus, "trial_status_enum"),
        nullable=False,
        default=TrialStatus.PENDING
    )

    is_exception: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    confirmation_sent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    reminder_sent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<TrialBooking(lead={self.lead_id}, slot={self.slot_id}, date={self.date}, status={self.status})>"
