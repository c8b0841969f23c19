"""
Enums shared by the Studio Manager models.

Every enum is a ``str`` Enum stored by VALUE in the database
(see ``app.models.types.enum_column``).
"""

from enum import Enum


# =============================================================================
# MEMBERS & LEADS
# =============================================================================

class MemberStatus(str, Enum):
    """Lifecycle of a member record."""
    ACTIVE = "active"
    INACTIVE = "inactive"          # Soft-deleted
    TRIAL = "trial"
    EXPIRED = "expired"
    PENDING = "pending"            # Converted lead waiting for a first plan


class MemberSource(str, Enum):
    WALK_IN = "walk-in"
    REFERRAL = "referral"
    ONLINE = "online"
    LEAD_CONVERSION = "lead-conversion"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class LeadStatus(str, Enum):
    """Sales funnel of a prospect."""
    NEW = "new"
    CONTACTED = "contacted"
    TRIAL_SCHEDULED = "trial-scheduled"
    TRIAL_COMPLETED = "trial-completed"
    FOLLOW_UP = "follow-up"
    INTERESTED = "interested"
    NEGOTIATING = "negotiating"
    CONVERTED = "converted"
    NOT_INTERESTED = "not-interested"
    LOST = "lost"


class LeadSource(str, Enum):
    WEBSITE = "website"
    REFERRAL = "referral"
    WALK_IN = "walk-in"
    SOCIAL_MEDIA = "social-media"
    ADVERTISEMENT = "advertisement"
    WHATSAPP = "whatsapp"
    PHONE_INQUIRY = "phone-inquiry"
    ONLINE = "online"
    OTHER = "other"


class LeadTrialStatus(str, Enum):
    """Trial tracking stored on the lead itself."""
    PENDING = "pending"
    SCHEDULED = "scheduled"
    ATTENDED = "attended"
    NO_SHOW = "no-show"
    CANCELLED = "cancelled"


# =============================================================================
# SLOTS & PLANS
# =============================================================================

class SessionType(str, Enum):
    ONLINE = "online"
    OFFLINE = "offline"
    HYBRID = "hybrid"


class PlanType(str, Enum):
    TRIAL = "trial"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    SEMI_ANNUAL = "semi-annual"
    YEARLY = "yearly"
    DROP_IN = "drop-in"
    CLASS_PACK = "class-pack"


class SubscriptionStatus(str, Enum):
    ACTIVE = "active"
    SCHEDULED = "scheduled"        # Starts in the future (renewal booked ahead)
    EXPIRED = "expired"
    CANCELLED = "cancelled"
    PENDING = "pending"
    SUSPENDED = "suspended"


class SubscriptionPaymentStatus(str, Enum):
    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"


# =============================================================================
# BILLING
# =============================================================================

class InvoiceType(str, Enum):
    MEMBERSHIP = "membership"
    PRODUCT_SALE = "product-sale"


class InvoiceStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    PARTIALLY_PAID = "partially-paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class PaymentMethod(str, Enum):
    CASH = "cash"
    UPI = "upi"
    BANK_TRANSFER = "bank-transfer"
    CARD = "card"
    CHEQUE = "cheque"
    OTHER = "other"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"
    CANCELLED = "cancelled"


# =============================================================================
# TRIALS
# =============================================================================

class TrialStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    ATTENDED = "attended"
    NO_SHOW = "no-show"
    CANCELLED = "cancelled"


# =============================================================================
# PRODUCTS & INVENTORY
# =============================================================================

class ProductCategory(str, Enum):
    YOGA_EQUIPMENT = "yoga-equipment"
    CLOTHING = "clothing"
    SUPPLEMENTS = "supplements"
    ACCESSORIES = "accessories"
    BOOKS = "books"
    OTHER = "other"


class InventoryTransactionType(str, Enum):
    PURCHASE = "purchase"          # Stock in from a vendor
    SALE = "sale"                  # Stock out to a member
    CONSUMED = "consumed"          # Used in-house
    ADJUSTMENT = "adjustment"      # Manual correction after a count
    RETURNED = "returned"
    DAMAGED = "damaged"
    INITIAL = "initial"


# =============================================================================
# SESSION PLANS
# =============================================================================

class SessionPlanLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class AllocationStatus(str, Enum):
    SCHEDULED = "scheduled"
    EXECUTED = "executed"
    CANCELLED = "cancelled"
