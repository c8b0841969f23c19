"""
MembershipSubscription model - one purchase of a plan by a member.

A member holds at most one current subscription. Renewals are booked as
``scheduled`` subscriptions starting after the current one ends.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import String, Integer, Boolean, Date, Numeric, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from app.database.base_class import Base
from app.models.mixins import UUIDPrimaryKeyMixin, TimestampMixin
from app.models.enums import SubscriptionStatus, SubscriptionPaymentStatus
from app.models.types import enum_column


class MembershipSubscription(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """
    Member subscription to a plan in a slot.

    Attributes:
        member_id / plan_id / slot_id: Links
        start_date / end_date: Covered range (end = start + plan months + extensions)
        original_amount: Plan price at purchase
        discount_amount / discount_reason: Discount granted
        payable_amount: max(0, original - discount)
        status: active, scheduled, expired, cancelled, pending, suspended
        payment_status: pending, partial, paid (follows the invoice)
        extension_days: Days added by extensions
        extra_days: Administrator adjustable days added to the end date
        invoice_id: Invoice generated at creation
    """

    __tablename__ = "membership_subscriptions"
    __table_args__ = {
        "comment": "Plan purchases by members"
    }

    # === Links ===

    member_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("members.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    plan_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("membership_plans.id", ondelete="RESTRICT"),
        nullable=False
    )

    slot_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("session_slots.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )

    # === Period ===

    start_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    end_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)

    # === Amounts ===

    original_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    discount_amount: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        default=Decimal("0")
    )

    discount_reason: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    payable_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    # === Status ===

    status: Mapped[SubscriptionStatus] = mapped_column(
        enum_column(SubscriptionStatus, "subscription_status_enum"),
        nullable=False,
        default=SubscriptionStatus.ACTIVE,
        index=True,
        info={"enum": [e.value for e in SubscriptionStatus]}
    )

    payment_status: Mapped[SubscriptionPaymentStatus] = mapped_column(
        enum_column(SubscriptionPaymentStatus, "subscription_payment_status_enum"),
        nullable=False,
        default=SubscriptionPaymentStatus.PENDING
    )

    # === Extensions ===

    is_extension: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    previous_subscription_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)

    extension_days: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    extra_days: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        doc="Absolute number of extra days added to the end date"
    )

    extra_days_reason: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # === Billing ===

    invoice_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("invoices.id", ondelete="SET NULL"),
        nullable=True
    )

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def covers(self, day: date) -> bool:
        """True when ``day`` falls inside [start_date, end_date]."""
        return self.start_date <= day <= self.end_date

    def append_note(self, note: str) -> None:
        self.notes = f"{self.notes}\n{note}" if self.notes else note

    def __repr__(self) -> str:
        return f"<MembershipSubscription(id={self.id}, member={self.member_id}, {self.start_date}..{self.end_date}, status={self.status})>"
