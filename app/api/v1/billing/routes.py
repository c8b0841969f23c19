"""
FastAPI routes for invoices and payments.
"""
from datetime import date
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.v1.billing.schemas import (
    DateRange,
    InvoiceCancel,
    InvoiceCreate,
    InvoiceList,
    InvoiceResponse,
    PaymentCreate,
    PaymentList,
    PaymentResponse,
    PaymentStatsResponse,
    PaymentUpdate,
    RevenueResponse,
)
from app.api.v1.dependencies import PaginationParams, RepositoryDep, StudioDep, raise_http
from app.core.exceptions import StudioError
from app.models import Invoice, InvoiceStatus, InvoiceType, Payment, PaymentMethod
from app.services.billing import BillingService

invoices_router = APIRouter(prefix="/invoices", tags=["Invoices"])
payments_router = APIRouter(prefix="/payments", tags=["Payments"])


def get_billing(repo: RepositoryDep, studio: StudioDep) -> BillingService:
    return BillingService(repo, studio)


BillingDep = Annotated[BillingService, Depends(get_billing)]


def date_range(
        start_date: date = Query(...),
        end_date: date = Query(...),
) -> DateRange:
    if end_date < start_date:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="end_date must be on or after start_date")
    return DateRange(start_date=start_date, end_date=end_date)


# =============================================================================
# INVOICES
# =============================================================================

@invoices_router.get("", response_model=InvoiceList)
def list_invoices(
        repo: RepositoryDep,
        pagination: PaginationParams = Depends(),
        member_id: Optional[str] = Query(None),
        status_filter: Optional[InvoiceStatus] = Query(None, alias="status"),
        invoice_type: Optional[InvoiceType] = Query(None),
        start_date: Optional[date] = Query(None),
        end_date: Optional[date] = Query(None),
):
    filters = {}
    if member_id:
        filters["member_id"] = member_id
    if status_filter:
        filters["status"] = status_filter
    if invoice_type:
        filters["invoice_type"] = invoice_type

    invoices = [
        i for i in repo.list(Invoice, order_by="invoice_date", descending=True, **filters)
        if (start_date is None or i.invoice_date >= start_date) and (end_date is None or i.invoice_date <= end_date)
    ]
    items, total = pagination.apply(invoices)
    return InvoiceList(items=items, total=total, page=pagination.page, size=pagination.size, pages=pagination.pages(total))


@invoices_router.get("/pending", response_model=List[InvoiceResponse])
def pending_invoices(billing: BillingDep):
    """Sent, partially paid and overdue invoices."""
    return billing.get_pending()


@invoices_router.get("/overdue", response_model=List[InvoiceResponse])
def overdue_invoices(billing: BillingDep):
    return billing.get_overdue()


@invoices_router.post("/mark-overdue")
def mark_overdue(billing: BillingDep):
    return {"flagged": billing.mark_overdue()}


@invoices_router.get("/{invoice_id}", response_model=InvoiceResponse)
def get_invoice(invoice_id: str, billing: BillingDep):
    try:
        return billing.get_invoice(invoice_id)
    except StudioError as e:
        raise_http(e)


@invoices_router.get("/{invoice_id}/payments", response_model=List[PaymentResponse])
def invoice_payments(invoice_id: str, billing: BillingDep):
    try:
        billing.get_invoice(invoice_id)
    except StudioError as e:
        raise_http(e)
    return billing.get_payments_for_invoice(invoice_id)


@invoices_router.post("", response_model=InvoiceResponse, status_code=status.HTTP_201_CREATED)
def create_invoice(data: InvoiceCreate, billing: BillingDep):
    try:
        return billing.create_invoice(
            member_id=data.member_id,
            items=[item.model_dump() for item in data.items],
            invoice_type=data.invoice_type,
            due_date=data.due_date,
            invoice_date=data.invoice_date,
            discount=data.discount,
            discount_reason=data.discount_reason,
            tax=data.tax,
            subscription_id=data.subscription_id,
            status=data.status,
            notes=data.notes,
        )
    except StudioError as e:
        raise_http(e)


@invoices_router.post("/{invoice_id}/cancel", response_model=InvoiceResponse)
def cancel_invoice(invoice_id: str, billing: BillingDep, data: Optional[InvoiceCancel] = None):
    try:
        return billing.cancel_invoice(invoice_id, data.reason if data else None)
    except StudioError as e:
        raise_http(e)


# =============================================================================
# PAYMENTS
# =============================================================================

@payments_router.get("", response_model=PaymentList)
def list_payments(
        repo: RepositoryDep,
        pagination: PaginationParams = Depends(),
        member_id: Optional[str] = Query(None),
        payment_method: Optional[PaymentMethod] = Query(None),
        start_date: Optional[date] = Query(None),
        end_date: Optional[date] = Query(None),
):
    filters = {}
    if member_id:
        filters["member_id"] = member_id
    if payment_method:
        filters["payment_method"] = payment_method

    payments = [
        p for p in repo.list(Payment, order_by="payment_date", descending=True, **filters)
        if (start_date is None or p.payment_date >= start_date) and (end_date is None or p.payment_date <= end_date)
    ]
    items, total = pagination.apply(payments)
    return PaymentList(items=items, total=total, page=pagination.page, size=pagination.size, pages=pagination.pages(total))


@payments_router.get("/revenue", response_model=RevenueResponse)
def revenue(billing: BillingDep, period: DateRange = Depends(date_range)):
    return RevenueResponse(
        start_date=period.start_date,
        end_date=period.end_date,
        total_revenue=billing.get_revenue(period.start_date, period.end_date),
    )


@payments_router.get("/stats", response_model=PaymentStatsResponse)
def payment_stats(billing: BillingDep, period: DateRange = Depends(date_range)):
    return billing.get_payment_stats(period.start_date, period.end_date)


@payments_router.get("/{payment_id}", response_model=PaymentResponse)
def get_payment(payment_id: str, billing: BillingDep):
    try:
        return billing.get_payment(payment_id)
    except StudioError as e:
        raise_http(e)


@payments_router.post("", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
def record_payment(data: PaymentCreate, billing: BillingDep):
    """Apply a payment to an invoice and issue a receipt number."""
    try:
        return billing.record_payment(
            invoice_id=data.invoice_id,
            amount=data.amount,
            method=data.payment_method,
            payment_date=data.payment_date,
            reference=data.transaction_reference,
            notes=data.notes,
            recorded_by=data.recorded_by,
        )
    except StudioError as e:
        raise_http(e)


@payments_router.put("/{payment_id}", response_model=PaymentResponse)
@payments_router.patch("/{payment_id}", response_model=PaymentResponse)
def update_payment(payment_id: str, data: PaymentUpdate, billing: BillingDep):
    try:
        return billing.update_payment(payment_id, data.model_dump(exclude_unset=True))
    except StudioError as e:
        raise_http(e)


@payments_router.delete("/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_payment(payment_id: str, billing: BillingDep):
    try:
        billing.delete_payment(payment_id)
    except StudioError as e:
        raise_http(e)
