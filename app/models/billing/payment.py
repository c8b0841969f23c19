"""
Payment model - money received against one invoice.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import String, Date, Numeric, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from app.database.base_class import Base
from app.models.mixins import UUIDPrimaryKeyMixin, TimestampMixin
from app.models.enums import PaymentMethod, PaymentStatus
from app.models.types import enum_column


class Payment(UUIDPrimaryKeyMixin, TimestampMixin, Base):

    __tablename__ = "payments"
    __table_args__ = {
        "comment": "Payments applied to invoices"
    }

    invoice_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("invoices.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    member_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("members.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )

    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    payment_method: Mapped[PaymentMethod] = mapped_column(
        enum_column(PaymentMethod, "payment_method_enum"),
        nullable=False,
        default=PaymentMethod.CASH
    )

    payment_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)

    transaction_reference: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
        doc="UPI / bank / cheque reference"
    )

    status: Mapped[PaymentStatus] = mapped_column(
        enum_column(PaymentStatus, "payment_status_enum"),
        nullable=False,
        default=PaymentStatus.COMPLETED
    )

    receipt_number: Mapped[Optional[str]] = mapped_column(
        String(30),
        unique=True,
        nullable=True,
        info={"example": "RCP-00007"}
    )

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    recorded_by: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    def __repr__(self) -> str:
        return f"<Payment(receipt='{self.receipt_number}', amount={self.amount}, invoice={self.invoice_id})>"
