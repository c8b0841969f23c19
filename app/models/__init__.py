"""
Studio Manager models - central export of every SQLAlchemy model.

    from app.models import Member, MembershipSubscription, Invoice, ...

Sub-packages:
    member/      - People (Member, Lead)
    schedule/    - Slots and classes (SessionSlot, SlotSubscription, TrialBooking,
                   SessionPlan, SessionPlanAllocation)
    membership/  - Plans and subscriptions (MembershipPlan, MembershipSubscription)
    billing/     - Invoice, Payment
    inventory/   - Product, InventoryTransaction
    studio/      - StudioSettings
"""

# === Enums ===
from app.models.enums import (
    # Members & leads
    MemberStatus,
    MemberSource,
    Gender,
    LeadStatus,
    LeadSource,
    LeadTrialStatus,
    # Slots & plans
    SessionType,
    PlanType,
    SubscriptionStatus,
    SubscriptionPaymentStatus,
    # Billing
    InvoiceType,
    InvoiceStatus,
    PaymentMethod,
    PaymentStatus,
    # Trials
    TrialStatus,
    # Inventory
    ProductCategory,
    InventoryTransactionType,
    # Session plans
    SessionPlanLevel,
    AllocationStatus,
)

# === Mixins ===
from app.models.mixins import UUIDPrimaryKeyMixin, TimestampMixin

# === Models ===
# Tables referenced by foreign keys come first.
from app.models.schedule.session_slot import SessionSlot
from app.models.member.lead import Lead
from app.models.member.member import Member
from app.models.membership.membership_plan import MembershipPlan
from app.models.billing.invoice import Invoice
from app.models.membership.membership_subscription import MembershipSubscription
from app.models.billing.payment import Payment
from app.models.schedule.slot_subscription import SlotSubscription
from app.models.schedule.trial_booking import TrialBooking
from app.models.schedule.session_plan import SessionPlan, SessionPlanAllocation
from app.models.inventory.product import Product
from app.models.inventory.inventory_transaction import InventoryTransaction
from app.models.studio.studio_settings import StudioSettings, SETTINGS_ROW_ID


__all__ = [
    # --- Enums ---
    "MemberStatus",
    "MemberSource",
    "Gender",
    "LeadStatus",
    "LeadSource",
    "LeadTrialStatus",
    "SessionType",
    "PlanType",
    "SubscriptionStatus",
    "SubscriptionPaymentStatus",
    "InvoiceType",
    "InvoiceStatus",
    "PaymentMethod",
    "PaymentStatus",
    "TrialStatus",
    "ProductCategory",
    "InventoryTransactionType",
    "SessionPlanLevel",
    "AllocationStatus",

    # --- Mixins ---
    "UUIDPrimaryKeyMixin",
    "TimestampMixin",

    # --- Models ---
    "SessionSlot",
    "Lead",
    "Member",
    "MembershipPlan",
    "Invoice",
    "MembershipSubscription",
    "Payment",
    "SlotSubscription",
    "TrialBooking",
    "SessionPlan",
    "SessionPlanAllocation",
    "Product",
    "InventoryTransaction",
    "StudioSettings",
    "SETTINGS_ROW_ID",
]
