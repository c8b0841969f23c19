"""
Product model - items sold or consumed by the studio (mats, blocks, books...).

``current_stock`` is only changed through ``InventoryService`` so that
every movement leaves an ``InventoryTransaction``.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from sqlalchemy import String, Integer, Boolean, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.database.base_class import Base
from app.models.mixins import UUIDPrimaryKeyMixin, TimestampMixin
from app.models.enums import ProductCategory
from app.models.types import enum_column


class Product(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """
    Stock item.

    Example:
        >>> Product(name="Cork block", sku="YEQ-001",
        ...         category=ProductCategory.YOGA_EQUIPMENT,
        ...         cost_price=Decimal("250"), selling_price=Decimal("400"))
    """

    __tablename__ = "products"
    __table_args__ = {
        "comment": "Products and stock levels"
    }

    name: Mapped[str] = mapped_column(String(200), nullable=False)

    sku: Mapped[str] = mapped_column(
        String(30),
        unique=True,
        nullable=False,
        index=True,
        doc="Stock keeping unit",
        info={"example": "YEQ-001"}
    )

    category: Mapped[ProductCategory] = mapped_column(
        enum_column(ProductCategory, "product_category_enum"),
        nullable=False,
        default=ProductCategory.OTHER,
        info={"enum": [e.value for e in ProductCategory]}
    )

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    cost_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    selling_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))

    current_stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    low_stock_threshold: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=5,
        doc="Stock at or below this level is reported as low"
    )

    unit: Mapped[str] = mapped_column(String(20), nullable=False, default="piece")

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)

    barcode: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    @property
    def is_low_stock(self) -> bool:
        return self.current_stock <= self.low_stock_threshold

    def __repr__(self) -> str:
        return f"<Product(sku='{self.sku}', stock={self.current_stock})>"
