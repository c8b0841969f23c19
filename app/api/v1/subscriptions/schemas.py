"""
Pydantic schemas for the Subscriptions module.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.enums import InvoiceStatus, SubscriptionPaymentStatus, SubscriptionStatus


class BadgeResponse(BaseModel):
    bg_color: str
    text_color: str
    text: str


class SubscriptionCreate(BaseModel):
    """Sell a plan to a member in a slot."""
    member_id: str
    plan_id: str
    slot_id: str
    start_date: date
    discount_amount: Decimal = Field(Decimal("0"), ge=0)
    discount_reason: Optional[str] = Field(None, max_length=200)
    notes: Optional[str] = None


class SubscriptionUpdate(BaseModel):
    """Free-text fields only; status changes go through cancel and refresh-statuses."""
    model_config = ConfigDict(extra="forbid")

    discount_reason: Optional[str] = Field(None, max_length=200)
    notes: Optional[str] = None


class ExtendRequest(BaseModel):
    days: int = Field(..., gt=0)
    reason: Optional[str] = None


class ExtraDaysRequest(BaseModel):
    days: int = Field(..., ge=0, description="Absolute number of extra days")
    reason: Optional[str] = None


class TransferRequest(BaseModel):
    new_slot_id: str
    effective_date: date
    reason: Optional[str] = None


class CancelRequest(BaseModel):
    reason: Optional[str] = None


class SubscriptionResponse(BaseModel):
    id: str
    member_id: str
    plan_id: str
    slot_id: str
    start_date: date
    end_date: date
    original_amount: Decimal
    discount_amount: Decimal
    discount_reason: Optional[str] = None
    payable_amount: Decimal
    status: SubscriptionStatus
    payment_status: SubscriptionPaymentStatus
    is_extension: bool = False
    previous_subscription_id: Optional[str] = None
    extension_days: int = 0
    extra_days: int = 0
    extra_days_reason: Optional[str] = None
    invoice_id: Optional[str] = None
    notes: Optional[str] = None
    badge: Optional[BadgeResponse] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class SubscriptionList(BaseModel):
    items: List[SubscriptionResponse]
    total: int
    page: int
    size: int
    pages: int


class InvoiceSummary(BaseModel):
    id: str
    invoice_number: str
    total_amount: Decimal
    amount_paid: Decimal
    status: InvoiceStatus
    due_date: date

    model_config = ConfigDict(from_attributes=True)


class SubscriptionWithInvoiceResponse(BaseModel):
    subscription: SubscriptionResponse
    invoice: InvoiceSummary
    warning: Optional[str] = None


class TransferResponse(BaseModel):
    subscription: SubscriptionResponse
    warning: Optional[str] = None


class StatusRefreshResponse(BaseModel):
    expired: int
    activated: int
    members_expired: int


class MemberSubscriptionStatus(BaseModel):
    """Front desk view of a member's membership."""
    member_id: str
    has_active_subscription: bool
    has_pending_renewal: bool
    relevant: Optional[SubscriptionResponse] = None
