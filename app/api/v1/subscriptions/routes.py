"""
FastAPI routes for the Subscriptions module.

Every write goes through SubscriptionLifecycleService; responses carry the
status badge computed for today.
"""
from dataclasses import asdict
from datetime import date
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query, status

from app.api.v1.dependencies import PaginationParams, RepositoryDep, StudioDep, raise_http
from app.api.v1.subscriptions.schemas import (
    BadgeResponse,
    CancelRequest,
    ExtendRequest,
    ExtraDaysRequest,
    InvoiceSummary,
    MemberSubscriptionStatus,
    StatusRefreshResponse,
    SubscriptionCreate,
    SubscriptionList,
    SubscriptionResponse,
    SubscriptionUpdate,
    SubscriptionWithInvoiceResponse,
    TransferRequest,
    TransferResponse,
)
from app.core.config import Settings, get_settings
from app.core.exceptions import StudioError
from app.models import MembershipSubscription, SubscriptionStatus
from app.services.badges import subscription_badge
from app.services.subscription_lifecycle import SubscriptionLifecycleService

router = APIRouter(prefix="/subscriptions", tags=["Subscriptions"])


def get_lifecycle(
        repo: RepositoryDep,
        studio: StudioDep,
        settings: Settings = Depends(get_settings),
) -> SubscriptionLifecycleService:
    return SubscriptionLifecycleService(repo, studio=studio, expired_lookback_days=settings.EXPIRED_LOOKBACK_DAYS)


LifecycleDep = Annotated[SubscriptionLifecycleService, Depends(get_lifecycle)]


def to_response(subscription: MembershipSubscription, today: date) -> SubscriptionResponse:
    response = SubscriptionResponse.model_validate(subscription)
    badge = subscription_badge(subscription, today)
    response.badge = BadgeResponse(**asdict(badge))
    return response


# =============================================================================
# QUERIES
# =============================================================================

@router.get("", response_model=SubscriptionList)
def list_subscriptions(
        repo: RepositoryDep,
        lifecycle: LifecycleDep,
        pagination: PaginationParams = Depends(),
        member_id: Optional[str] = Query(None),
        slot_id: Optional[str] = Query(None),
        status_filter: Optional[SubscriptionStatus] = Query(None, alias="status"),
):
    filters = {}
    if member_id:
        filters["member_id"] = member_id
    if slot_id:
        filters["slot_id"] = slot_id
    if status_filter:
        filters["status"] = status_filter

    subscriptions = repo.list(MembershipSubscription, order_by="start_date", descending=True, **filters)
    items, total = pagination.apply(subscriptions)
    return SubscriptionList(
        items=[to_response(s, lifecycle.today) for s in items],
        total=total,
        page=pagination.page,
        size=pagination.size,
        pages=pagination.pages(total),
    )


@router.get("/expiring-soon", response_model=List[SubscriptionResponse])
def expiring_soon(lifecycle: LifecycleDep, days: int = Query(7, ge=0, le=90)):
    return [to_response(s, lifecycle.today) for s in lifecycle.get_expiring_soon(days)]


@router.get("/recently-expired", response_model=List[SubscriptionResponse])
def recently_expired(lifecycle: LifecycleDep, days: int = Query(7, ge=0, le=365)):
    return [to_response(s, lifecycle.today) for s in lifecycle.get_recently_expired(days)]


@router.get("/by-slot", response_model=List[SubscriptionResponse])
def active_for_slot_on_date(lifecycle: LifecycleDep, slot_id: str = Query(...), day: date = Query(..., alias="date")):
    """Subscriptions covering a day in a slot (attendance sheet)."""
    return [to_response(s, lifecycle.today) for s in lifecycle.get_active_for_slot_on_date(slot_id, day)]


@router.get("/member/{member_id}", response_model=List[SubscriptionResponse])
def member_subscriptions(member_id: str, lifecycle: LifecycleDep):
    return [to_response(s, lifecycle.today) for s in lifecycle.get_by_member(member_id)]


@router.get("/member/{member_id}/status", response_model=MemberSubscriptionStatus)
def member_subscription_status(member_id: str, lifecycle: LifecycleDep):
    relevant = lifecycle.get_relevant_subscription(member_id)
    return MemberSubscriptionStatus(
        member_id=member_id,
        has_active_subscription=lifecycle.has_active_subscription(member_id),
        has_pending_renewal=lifecycle.has_pending_renewal(member_id),
        relevant=to_response(relevant, lifecycle.today) if relevant else None,
    )


@router.get("/{subscription_id}", response_model=SubscriptionResponse)
def get_subscription(subscription_id: str, lifecycle: LifecycleDep):
    try:
        return to_response(lifecycle.get(subscription_id), lifecycle.today)
    except StudioError as e:
        raise_http(e)


# =============================================================================
# ACTIONS
# =============================================================================

@router.post("", response_model=SubscriptionWithInvoiceResponse, status_code=status.HTTP_201_CREATED)
def create_subscription(data: SubscriptionCreate, lifecycle: LifecycleDep):
    """Sell a plan: subscription, invoice and slot assignment in one step."""
    try:
        result = lifecycle.create_with_invoice(
            member_id=data.member_id,
            plan_id=data.plan_id,
            slot_id=data.slot_id,
            start_date=data.start_date,
            discount_amount=data.discount_amount,
            discount_reason=data.discount_reason,
            notes=data.notes,
        )
    except StudioError as e:
        raise_http(e)
    return SubscriptionWithInvoiceResponse(
        subscription=to_response(result.subscription, lifecycle.today),
        invoice=InvoiceSummary.model_validate(result.invoice),
        warning=result.warning,
    )


@router.post("/refresh-statuses", response_model=StatusRefreshResponse)
def refresh_statuses(lifecycle: LifecycleDep):
    return lifecycle.refresh_statuses()


@router.put("/{subscription_id}", response_model=SubscriptionResponse)
@router.patch("/{subscription_id}", response_model=SubscriptionResponse)
def update_subscription(subscription_id: str, data: SubscriptionUpdate, lifecycle: LifecycleDep):
    try:
        subscription = lifecycle.update(subscription_id, data.model_dump(exclude_unset=True))
    except StudioError as e:
        raise_http(e)
    return to_response(subscription, lifecycle.today)


@router.post("/{subscription_id}/extend", response_model=SubscriptionResponse)
def extend_subscription(subscription_id: str, data: ExtendRequest, lifecycle: LifecycleDep):
    try:
        subscription = lifecycle.extend_subscription(subscription_id, data.days, data.reason)
    except StudioError as e:
        raise_http(e)
    return to_response(subscription, lifecycle.today)


@router.put("/{subscription_id}/extra-days", response_model=SubscriptionResponse)
def set_extra_days(subscription_id: str, data: ExtraDaysRequest, lifecycle: LifecycleDep):
    try:
        subscription = lifecycle.set_extra_days(subscription_id, data.days, data.reason)
    except StudioError as e:
        raise_http(e)
    return to_response(subscription, lifecycle.today)


@router.post("/{subscription_id}/transfer", response_model=TransferResponse)
def transfer_subscription(subscription_id: str, data: TransferRequest, lifecycle: LifecycleDep):
    try:
        result = lifecycle.transfer_slot(subscription_id, data.new_slot_id, data.effective_date, data.reason)
    except StudioError as e:
        raise_http(e)
    return TransferResponse(subscription=to_response(result.subscription, lifecycle.today), warning=result.warning)


@router.post("/{subscription_id}/cancel", response_model=SubscriptionResponse)
def cancel_subscription(subscription_id: str, lifecycle: LifecycleDep, data: Optional[CancelRequest] = None):
    try:
        subscription = lifecycle.cancel(subscription_id, data.reason if data else None)
    except StudioError as e:
        raise_http(e)
    return to_response(subscription, lifecycle.today)
