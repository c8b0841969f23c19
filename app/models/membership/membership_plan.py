"""
MembershipPlan model - purchasable plans (Monthly, Quarterly...).
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from sqlalchemy import String, Integer, Boolean, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.database.base_class import Base
from app.models.mixins import UUIDPrimaryKeyMixin, TimestampMixin
from app.models.enums import PlanType
from app.models.types import JSONBCompatible, enum_column


class MembershipPlan(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """
    Membership plan.

    Attributes:
        name: Plan name ("Quarterly")
        type: trial, monthly, quarterly, semi-annual, yearly, drop-in, class-pack
        price: Price in studio currency
        duration_months: Calendar months covered by one purchase
        classes_included: None for unlimited
        allowed_session_types: ["offline", "online", ...]
        is_active: Only active plans can be sold

    Example:
        >>> MembershipPlan(name="Monthly", type=PlanType.MONTHLY,
        ...                price=Decimal("2100"), duration_months=1)
    """

    __tablename__ = "membership_plans"
    __table_args__ = {
        "comment": "Purchasable membership plans"
    }

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    type: Mapped[PlanType] = mapped_column(
        enum_column(PlanType, "plan_type_enum"),
        nullable=False,
        default=PlanType.MONTHLY,
        info={"enum": [e.value for e in PlanType]}
    )

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    price: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
        doc="Plan price"
    )

    duration_months: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=1,
        doc="Duration in calendar months"
    )

    classes_included: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        doc="Number of classes (None = unlimited)"
    )

    allowed_session_types: Mapped[list] = mapped_column(
        JSONBCompatible,
        nullable=False,
        default=list
    )

    features: Mapped[list] = mapped_column(
        JSONBCompatible,
        nullable=False,
        default=list,
        doc="Marketing bullet points"
    )

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)

    def __repr__(self) -> str:
        return f"<MembershipPlan(id={self.id}, name='{self.name}', price={self.price})>"
