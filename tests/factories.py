"""
Test object factories.

Each factory builds a valid entity with sensible defaults and stores it
through the given repository. Keyword arguments override the defaults.
"""

from datetime import date
from decimal import Decimal

from app.models import (
    Lead,
    LeadSource,
    LeadStatus,
    Member,
    MemberSource,
    MemberStatus,
    MembershipPlan,
    PlanType,
    Product,
    ProductCategory,
    SessionSlot,
    SessionType,
)
from app.repositories import Repository

# 2025-01-08 is a Wednesday
TODAY = date(2025, 1, 8)


def make_slot(repo: Repository, start: str = "07:30", end: str = "08:30", capacity: int = 10,
              exception_capacity: int = 1, **kwargs) -> SessionSlot:
    slot = SessionSlot(
        start_time=start,
        end_time=end,
        display_name=kwargs.pop("display_name", f"Morning {start}"),
        capacity=capacity,
        exception_capacity=exception_capacity,
        session_type=kwargs.pop("session_type", SessionType.OFFLINE),
        is_active=kwargs.pop("is_active", True),
        **kwargs,
    )
    return repo.add(slot)


def make_plan(repo: Repository, name: str = "Monthly", price: str = "2100", months: int = 1,
              plan_type: PlanType = PlanType.MONTHLY, **kwargs) -> MembershipPlan:
    plan = MembershipPlan(
        name=name,
        type=plan_type,
        price=Decimal(price),
        duration_months=months,
        allowed_session_types=["offline"],
        features=[],
        is_active=kwargs.pop("is_active", True),
        **kwargs,
    )
    return repo.add(plan)


def make_member(repo: Repository, first_name: str = "Asha", email: str = None, **kwargs) -> Member:
    member = Member(
        first_name=first_name,
        last_name=kwargs.pop("last_name", "Rao"),
        email=email or f"{first_name.lower()}@example.com",
        phone=kwargs.pop("phone", "9876543210"),
        status=kwargs.pop("status", MemberStatus.ACTIVE),
        source=kwargs.pop("source", MemberSource.WALK_IN),
        medical_conditions=[],
        consent_records=[],
        **kwargs,
    )
    return repo.add(member)


def make_lead(repo: Repository, first_name: str = "Ravi", email: str = None, **kwargs) -> Lead:
    lead = Lead(
        first_name=first_name,
        last_name=kwargs.pop("last_name", "Kumar"),
        email=email or f"{first_name.lower()}.lead@example.com",
        phone=kwargs.pop("phone", "9123456780"),
        status=kwargs.pop("status", LeadStatus.NEW),
        source=kwargs.pop("source", LeadSource.WALK_IN),
        medical_conditions=[],
        consent_records=[],
        interested_plan_ids=[],
        **kwargs,
    )
    return repo.add(lead)


def make_product(repo: Repository, name: str = "Yoga Mat", sku: str = "MAT-001", stock: int = 10,
                 **kwargs) -> Product:
    product = Product(
        name=name,
        sku=sku,
        category=kwargs.pop("category", ProductCategory.YOGA_EQUIPMENT),
        cost_price=Decimal(kwargs.pop("cost_price", "400")),
        selling_price=Decimal(kwargs.pop("selling_price", "650")),
        current_stock=stock,
        low_stock_threshold=kwargs.pop("low_stock_threshold", 5),
        unit="piece",
        is_active=True,
        **kwargs,
    )
    return repo.add(product)

