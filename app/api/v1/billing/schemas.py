"""
Pydantic schemas for invoices and payments.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.models.enums import InvoiceStatus, InvoiceType, PaymentMethod, PaymentStatus


# =============================================================================
# INVOICES
# =============================================================================

class InvoiceItem(BaseModel):
    description: str = Field(..., min_length=1, max_length=300)
    quantity: int = Field(1, gt=0)
    unit_price: Decimal = Field(..., ge=0)


class InvoiceCreate(BaseModel):
    member_id: str
    items: List[InvoiceItem] = Field(..., min_length=1)
    invoice_type: InvoiceType = InvoiceType.MEMBERSHIP
    invoice_date: Optional[date] = None
    due_date: Optional[date] = None
    discount: Decimal = Field(Decimal("0"), ge=0)
    discount_reason: Optional[str] = None
    tax: Optional[Decimal] = Field(None, ge=0, description="Defaults to the studio tax rate")
    subscription_id: Optional[str] = None
    status: InvoiceStatus = InvoiceStatus.SENT
    notes: Optional[str] = None


class InvoiceCancel(BaseModel):
    reason: Optional[str] = None


class InvoiceResponse(BaseModel):
    id: str
    invoice_number: str
    invoice_type: InvoiceType
    member_id: str
    amount: Decimal
    tax: Decimal
    discount: Decimal
    discount_reason: Optional[str] = None
    total_amount: Decimal
    amount_paid: Decimal
    balance_due: Decimal
    invoice_date: date
    due_date: date
    paid_date: Optional[date] = None
    status: InvoiceStatus
    items: List[dict] = []
    subscription_id: Optional[str] = None
    payment_method: Optional[PaymentMethod] = None
    payment_reference: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class InvoiceList(BaseModel):
    items: List[InvoiceResponse]
    total: int
    page: int
    size: int
    pages: int


# =============================================================================
# PAYMENTS
# =============================================================================

class PaymentCreate(BaseModel):
    invoice_id: str
    amount: Decimal = Field(..., gt=0)
    payment_method: PaymentMethod = PaymentMethod.CASH
    payment_date: Optional[date] = None
    transaction_reference: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = None
    recorded_by: Optional[str] = Field(None, max_length=100)


class PaymentUpdate(BaseModel):
    invoice_id: Optional[str] = None
    amount: Optional[Decimal] = Field(None, gt=0)
    payment_method: Optional[PaymentMethod] = None
    payment_date: Optional[date] = None
    transaction_reference: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = None
    recorded_by: Optional[str] = None


class PaymentResponse(BaseModel):
    id: str
    invoice_id: str
    member_id: str
    amount: Decimal
    payment_method: PaymentMethod
    payment_date: date
    transaction_reference: Optional[str] = None
    status: PaymentStatus
    receipt_number: str
    notes: Optional[str] = None
    recorded_by: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PaymentList(BaseModel):
    items: List[PaymentResponse]
    total: int
    page: int
    size: int
    pages: int


class DateRange(BaseModel):
    start_date: date
    end_date: date

    @model_validator(mode="after")
    def ordered(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")
        return self


class RevenueResponse(BaseModel):
    start_date: date
    end_date: date
    total_revenue: Decimal


class PaymentStatsResponse(RevenueResponse):
    payment_count: int
    by_method: Dict[str, Decimal]
