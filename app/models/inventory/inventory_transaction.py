"""
InventoryTransaction model - one stock movement of a product.

``quantity`` is signed: purchases are positive, sales and consumption
are negative.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import String, Integer, Date, Numeric, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from app.database.base_class import Base
from app.models.mixins import UUIDPrimaryKeyMixin, TimestampMixin
from app.models.enums import InventoryTransactionType
from app.models.types import enum_column


class InventoryTransaction(UUIDPrimaryKeyMixin, TimestampMixin, Base):

    __tablename__ = "inventory_transactions"
    __table_args__ = {
        "comment": "Stock movements"
    }

    product_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    type: Mapped[InventoryTransactionType] = mapped_column(
        enum_column(InventoryTransactionType, "inventory_transaction_type_enum"),
        nullable=False,
        index=True
    )

    quantity: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        doc="Signed quantity (negative for stock out)"
    )

    unit_cost: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    total_value: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))

    previous_stock: Mapped[int] = mapped_column(Integer, nullable=False)
    new_stock: Mapped[int] = mapped_column(Integer, nullable=False)

    transaction_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)

    invoice_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    vendor_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<InventoryTransaction(product={self.product_id}, type={self.type}, qty={self.quantity})>"
