"""
SessionSlot model - recurring time-of-day classes.

Each slot has a regular capacity plus a small "exception" capacity that
may be used once the regular places are taken.
"""

from __future__ import annotations

from sqlalchemy import String, Integer, Boolean
from sqlalchemy.orm import Mapped, mapped_column

from app.database.base_class import Base
from app.models.mixins import UUIDPrimaryKeyMixin, TimestampMixin
from app.models.enums import SessionType
from app.models.types import enum_column


class SessionSlot(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """
    Recurring session slot.

    Attributes:
        start_time / end_time: "HH:MM"
        display_name: Label shown to members ("Morning 7:30 AM")
        capacity: Regular places
        exception_capacity: Overflow places beyond capacity
        session_type: online, offline, hybrid
        is_active: Inactive slots accept no new bookings

    Example:
        >>> SessionSlot(start_time="07:30", end_time="08:30",
        ...             display_name="Morning 7:30 AM", capacity=10)
    """

    __tablename__ = "session_slots"
    __table_args__ = {
        "comment": "Recurring session slots"
    }

    start_time: Mapped[str] = mapped_column(
        String(5),
        nullable=False,
        doc="Start time (HH:MM)",
        info={"example": "07:30"}
    )

    end_time: Mapped[str] = mapped_column(
        String(5),
        nullable=False,
        doc="End time (HH:MM)",
        info={"example": "08:30"}
    )

    display_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        doc="Display label"
    )

    capacity: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=10,
        doc="Regular capacity"
    )

    exception_capacity: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=1,
        doc="Extra places usable once regular capacity is full"
    )

    session_type: Mapped[SessionType] = mapped_column(
        enum_column(SessionType, "session_type_enum"),
        nullable=False,
        default=SessionType.OFFLINE
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        index=True
    )

    @property
    def total_capacity(self) -> int:
        return self.capacity + self.exception_capacity

    def __repr__(self) -> str:
        return f"<SessionSlot(id={self.id}, name='{self.display_name}', capacity={self.capacity}+{self.exception_capacity})>"
