"""
Invoice model - membership and product-sale invoices.

``amount_paid`` is the running total of the payments applied to the
invoice. Status is recomputed from it by ``BillingService``.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import String, Date, Numeric, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from app.database.base_class import Base
from app.models.mixins import UUIDPrimaryKeyMixin, TimestampMixin
from app.models.enums import InvoiceStatus, InvoiceType, PaymentMethod
from app.models.types import JSONBCompatible, enum_column


class Invoice(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """
    Invoice.

    Attributes:
        invoice_number: Unique number ("INV-00001")
        invoice_type: membership, product-sale
        amount: Gross amount
        tax / discount: Adjustments
        total_amount: Amount due
        amount_paid: Sum of applied payments
        status: draft, sent, paid, partially-paid, overdue, cancelled
        items: [{"description", "quantity", "unit_price", "total"}]
        subscription_id: Subscription billed (membership invoices)
    """

    __tablename__ = "invoices"
    __table_args__ = {
        "comment": "Invoices"
    }

    invoice_number: Mapped[str] = mapped_column(
        String(30),
        unique=True,
        nullable=False,
        index=True,
        info={"example": "INV-00042"}
    )

    invoice_type: Mapped[InvoiceType] = mapped_column(
        enum_column(InvoiceType, "invoice_type_enum"),
        nullable=False,
        default=InvoiceType.MEMBERSHIP
    )

    member_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("members.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )

    # === Amounts ===

    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    tax: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    discount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    discount_reason: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    amount_paid: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        default=Decimal("0"),
        doc="Sum of applied payments"
    )

    # === Dates ===

    invoice_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    due_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    paid_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    # === Status ===

    status: Mapped[InvoiceStatus] = mapped_column(
        enum_column(InvoiceStatus, "invoice_status_enum"),
        nullable=False,
        default=InvoiceStatus.DRAFT,
        index=True,
        info={"enum": [e.value for e in InvoiceStatus]}
    )

    items: Mapped[list] = mapped_column(
        JSONBCompatible,
        nullable=False,
        default=list,
        doc="Invoice lines"
    )

    subscription_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        nullable=True,
        index=True,
        doc="Subscription billed by this invoice"
    )

    payment_method: Mapped[Optional[PaymentMethod]] = mapped_column(
        enum_column(PaymentMethod, "payment_method_enum"),
        nullable=True,
        doc="Method of the last payment"
    )

    payment_reference: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    @property
    def balance_due(self) -> Decimal:
        return max(Decimal("0"), Decimal(self.total_amount) - Decimal(self.amount_paid))

    def __repr__(self) -> str:
        return f"<Invoice(number='{self.invoice_number}', total={self.total_amount}, status={self.status})>"
