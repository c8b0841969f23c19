"""
Membership subscription lifecycle and slot capacity.

Booking a membership touches four entities (subscription, invoice, member,
slot assignment). ``create_with_invoice`` and ``transfer_slot`` validate
everything first, then write inside one ``repository.transaction()``.

Capacity model: a slot holds ``capacity`` regular members plus
``exception_capacity`` overflow members. A booking is counted against a
slot when its subscription is active/scheduled/pending and its date range
overlaps the requested range. Each member counts once.
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from app.core.exceptions import BusinessRuleError, CapacityError, NotFoundError
from app.models import (
    InvoiceStatus,
    InvoiceType,
    Member,
    MemberStatus,
    MembershipPlan,
    MembershipSubscription,
    SessionSlot,
    SlotSubscription,
    SubscriptionPaymentStatus,
    SubscriptionStatus,
)
from app.repositories.base import Repository
from app.services.billing import BillingService
from app.services.studio_settings import StudioSettingsData
from app.utils.dates import add_days, days_between, format_date, ranges_overlap, subscription_end_date
from app.utils.formatting import to_decimal

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

# Statuses occupying a place in a slot
CAPACITY_STATUSES = (
    SubscriptionStatus.ACTIVE,
    SubscriptionStatus.SCHEDULED,
    SubscriptionStatus.PENDING,
)

# Statuses that block an overlapping purchase
OVERLAP_STATUSES = (
    SubscriptionStatus.ACTIVE,
    SubscriptionStatus.PENDING,
    SubscriptionStatus.SCHEDULED,
)

TRANSFERABLE_STATUSES = (SubscriptionStatus.ACTIVE, SubscriptionStatus.SCHEDULED)

# A booking in one of these statuses is current on any day its range covers,
# whether or not refresh_statuses has promoted it yet
CURRENT_STATUSES = (SubscriptionStatus.ACTIVE, SubscriptionStatus.SCHEDULED)

# Editable through update(); status moves through cancel and refresh_statuses
UPDATABLE_FIELDS = ("discount_reason", "notes")


# =============================================================================
# EXCEPTIONS
# =============================================================================

class SubscriptionNotFoundError(NotFoundError):
    """Subscription not found."""
    pass


class MemberNotFoundError(NotFoundError):
    """Member not found."""
    pass


class PlanNotFoundError(NotFoundError):
    """Membership plan not found."""
    pass


class SlotNotFoundError(NotFoundError):
    """Session slot not found."""
    pass


class SubscriptionValidationError(BusinessRuleError):
    """Invalid dates, discount, status or overlapping subscription."""
    pass


class SlotFullError(CapacityError):
    """No regular or exception place left in the slot."""
    pass


# =============================================================================
# RESULTS
# =============================================================================

@dataclass
class CapacityCheck:
    available: bool
    is_exception_only: bool
    current_bookings: int
    normal_capacity: int
    total_capacity: int
    message: str


@dataclass
class SubscriptionWithInvoice:
    subscription: MembershipSubscription
    invoice: Any
    warning: Optional[str] = None


@dataclass
class TransferResult:
    subscription: MembershipSubscription
    warning: Optional[str] = None


# =============================================================================
# SERVICE
# =============================================================================

class SubscriptionLifecycleService:
    """
    Subscription creation, extension, transfer and queries.

    Args:
        repo: Storage backend
        today: Reference date, injectable for tests
        studio: Loaded studio settings (invoice numbering)
        expired_lookback_days: How far back an expired subscription is
            still the "relevant" one for a member
    """

    def __init__(
        self,
        repo: Repository,
        today: Optional[date] = None,
        studio: Optional[StudioSettingsData] = None,
        expired_lookback_days: int = 30,
    ):
        self.repo = repo
        self.today = today or date.today()
        self.billing = BillingService(repo, studio, self.today)
        self.expired_lookback_days = expired_lookback_days

    # =========================================================================
    # LOOKUPS
    # =========================================================================

    def get(self, subscription_id: str) -> MembershipSubscription:
        subscription = self.repo.get(MembershipSubscription, subscription_id)
        if not subscription:
            raise SubscriptionNotFoundError(f"Subscription {subscription_id} not found")
        return subscription

    def _get_member(self, member_id: str) -> Member:
        member = self.repo.get(Member, member_id)
        if not member:
            raise MemberNotFoundError(f"Member {member_id} not found")
        return member

    def _get_slot(self, slot_id: str) -> SessionSlot:
        slot = self.repo.get(SessionSlot, slot_id)
        if not slot:
            raise SlotNotFoundError(f"Session slot {slot_id} not found")
        return slot

    # =========================================================================
    # CAPACITY
    # =========================================================================

    def check_slot_capacity(
        self,
        slot_id: str,
        start_date: date,
        end_date: date,
        exclude_member_id: Optional[str] = None,
    ) -> CapacityCheck:
        """
        Places used in a slot over [start_date, end_date].

        Example (capacity 10 + exception 1):
            10 members booked -> available, exception only
            11 members booked -> unavailable
        """
        slot = self._get_slot(slot_id)

        booked_members = {
            s.member_id
            for s in self.repo.list(MembershipSubscription, slot_id=slot.id, status=list(CAPACITY_STATUSES))
            if s.member_id != exclude_member_id
            and ranges_overlap(s.start_date, s.end_date, start_date, end_date)
        }

        current = len(booked_members)
        total = slot.capacity + slot.exception_capacity
        available = current < total
        is_exception_only = available and current >= slot.capacity

        if not available:
            message = f"Slot is full ({current}/{total})"
        elif is_exception_only:
            message = f"Normal capacity full. Will use exception slot ({current}/{total})"
        else:
            message = f"Available ({current}/{slot.capacity} regular slots used)"

        return CapacityCheck(
            available=available,
            is_exception_only=is_exception_only,
            current_bookings=current,
            normal_capacity=slot.capacity,
            total_capacity=total,
            message=message,
        )

    # =========================================================================
    # CREATE
    # =========================================================================

    def _find_overlap(self, member_id: str, start_date: date, end_date: date) -> Optional[MembershipSubscription]:
        for subscription in self.repo.list(MembershipSubscription, member_id=member_id, status=list(OVERLAP_STATUSES)):
            if ranges_overlap(subscription.start_date, subscription.end_date, start_date, end_date):
                return subscription
        return None

    def create_with_invoice(
        self,
        member_id: str,
        plan_id: str,
        slot_id: str,
        start_date: date,
        discount_amount: Any = ZERO,
        discount_reason: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> SubscriptionWithInvoice:
        """
        Sell a plan: subscription + invoice + member/slot update, atomically.

        Example:
            plan Monthly 2100, discount 100, start 2025-01-10
            -> end 2025-02-10, payable 2000, invoice total 2000 (sent)

        Raises:
            MemberNotFoundError, PlanNotFoundError, SlotNotFoundError
            SubscriptionValidationError: inactive plan/slot, bad discount, overlap
            SlotFullError: no place left in the slot
        """
        member = self._get_member(member_id)

        plan = self.repo.get(MembershipPlan, plan_id)
        if not plan:
            raise PlanNotFoundError(f"Membership plan {plan_id} not found")
        if not plan.is_active:
            raise SubscriptionValidationError(f"Membership plan '{plan.name}' is not active")

        slot = self._get_slot(slot_id)
        if not slot.is_active:
            raise SubscriptionValidationError(f"Session slot '{slot.display_name}' is not active")

        price = to_decimal(plan.price)
        discount = to_decimal(discount_amount or 0)
        if discount < 0:
            raise SubscriptionValidationError("Discount cannot be negative")
        if discount > price:
            raise SubscriptionValidationError("Discount cannot exceed the plan price")

        end_date = subscription_end_date(start_date, plan.duration_months)

        overlap = self._find_overlap(member.id, start_date, end_date)
        if overlap:
            logger.warning(f"⚠️ Overlapping subscription refused for member {member.id}")
            raise SubscriptionValidationError(
                f"Member already has an overlapping subscription ({SubscriptionStatus(overlap.status).value}) "
                f"from {format_date(overlap.start_date)} to {format_date(overlap.end_date)}. "
                f"Please choose a start date after {format_date(overlap.end_date)}."
            )

        # Renewal in the member's current slot keeps their place
        warning = None
        if member.assigned_slot_id != slot.id:
            capacity = self.check_slot_capacity(slot.id, start_date, end_date, exclude_member_id=member.id)
            if not capacity.available:
                logger.warning(f"⚠️ Slot {slot.display_name} full for member {member.id}")
                raise SlotFullError(capacity.message)
            if capacity.is_exception_only:
                warning = (
                    f'Warning: Normal capacity for "{slot.display_name}" is full. '
                    f"This member is being added using exception capacity "
                    f"({capacity.current_bookings + 1}/{capacity.total_capacity} slots used)."
                )

        payable = max(ZERO, price - discount)
        status = SubscriptionStatus.SCHEDULED if start_date > self.today else SubscriptionStatus.ACTIVE
        months_label = "month" if plan.duration_months == 1 else "months"

        with self.repo.transaction():
            subscription = MembershipSubscription(
                member_id=member.id,
                plan_id=plan.id,
                slot_id=slot.id,
                start_date=start_date,
                end_date=end_date,
                original_amount=price,
                discount_amount=discount,
                discount_reason=discount_reason,
                payable_amount=payable,
                status=status,
                payment_status=SubscriptionPaymentStatus.PENDING,
                notes=notes,
            )
            self.repo.add(subscription)

            invoice = self.billing.create_invoice(
                member_id=member.id,
                items=[{
                    "description": f"{plan.name} Membership ({plan.duration_months} {months_label}) - {slot.display_name}",
                    "quantity": 1,
                    "unit_price": price,
                }],
                invoice_type=InvoiceType.MEMBERSHIP,
                due_date=start_date,
                discount=discount,
                discount_reason=discount_reason,
                tax=ZERO,
                subscription_id=subscription.id,
                status=InvoiceStatus.SENT,
            )

            subscription.invoice_id = invoice.id
            self.repo.save(subscription)

            member.status = MemberStatus.ACTIVE
            member.assigned_slot_id = slot.id
            self.repo.save(member)

            self._assign_slot(member.id, slot.id, start_date, is_exception=warning is not None)

        logger.info(
            f"✅ Subscription {subscription.id} created for member {member.id} "
            f"({start_date} -> {end_date}, {status.value}), invoice {invoice.invoice_number}"
        )
        return SubscriptionWithInvoice(subscription=subscription, invoice=invoice, warning=warning)

    def _assign_slot(self, member_id: str, slot_id: str, start_date: date, is_exception: bool = False) -> SlotSubscription:
        """Create or move the member's single active slot assignment."""
        current = self.repo.list(SlotSubscription, member_id=member_id, is_active=True)

        for row in current:
            if row.slot_id == slot_id:
                return row

        for row in current:
            row.is_active = False
            row.end_date = start_date
            self.repo.save(row)

        assignment = SlotSubscription(
            member_id=member_id,
            slot_id=slot_id,
            start_date=start_date,
            is_active=True,
            is_exception=is_exception,
        )
        self.repo.add(assignment)
        return assignment

    # =========================================================================
    # EXTEND / EXTRA DAYS
    # =========================================================================

    def extend_subscription(self, subscription_id: str, extension_days: int, reason: Optional[str] = None) -> MembershipSubscription:
        """Push the end date by ``extension_days`` (cumulative)."""
        if extension_days <= 0:
            raise SubscriptionValidationError("Extension days must be greater than 0")

        subscription = self.get(subscription_id)
        subscription.end_date = add_days(subscription.end_date, extension_days)
        subscription.extension_days = (subscription.extension_days or 0) + extension_days
        subscription.append_note(f"Extended by {extension_days} days: {reason or 'No reason provided'}")
        self.repo.save(subscription)

        logger.info(f"📅 Subscription {subscription.id} extended by {extension_days} days")
        return subscription

    def set_extra_days(self, subscription_id: str, total_days: int, reason: Optional[str] = None) -> MembershipSubscription:
        """
        Set the absolute number of extra days.

        The end date moves by the difference with the current value, so
        calling twice with the same arguments changes nothing the second time.
        """
        if total_days < 0:
            raise SubscriptionValidationError("Extra days cannot be negative")

        subscription = self.get(subscription_id)
        delta = total_days - (subscription.extra_days or 0)
        subscription.end_date = add_days(subscription.end_date, delta)
        subscription.extra_days = total_days
        if reason is not None:
            subscription.extra_days_reason = reason
        self.repo.save(subscription)

        logger.info(f"📅 Subscription {subscription.id} extra days set to {total_days} (delta {delta:+d})")
        return subscription

    # =========================================================================
    # TRANSFER
    # =========================================================================

    def transfer_slot(
        self,
        subscription_id: str,
        new_slot_id: str,
        effective_date: date,
        reason: Optional[str] = None,
    ) -> TransferResult:
        """
        Move a subscription (and its member) to another slot.

        Nothing is written when a check fails.
        """
        subscription = self.get(subscription_id)
        if subscription.status not in TRANSFERABLE_STATUSES:
            raise SubscriptionValidationError("Only active or scheduled subscriptions can be transferred")

        new_slot = self.repo.get(SessionSlot, new_slot_id)
        if not new_slot:
            raise SlotNotFoundError("Target slot not found")
        if not new_slot.is_active:
            raise SubscriptionValidationError(f"Session slot '{new_slot.display_name}' is not active")
        if new_slot.id == subscription.slot_id:
            raise SubscriptionValidationError("Member is already in this slot")
        if effective_date < subscription.start_date:
            raise SubscriptionValidationError("Effective date cannot be before subscription start date")
        if effective_date > subscription.end_date:
            raise SubscriptionValidationError("Effective date cannot be after subscription end date")

        capacity = self.check_slot_capacity(
            new_slot.id, effective_date, subscription.end_date, exclude_member_id=subscription.member_id
        )
        if not capacity.available:
            raise SlotFullError(f"Cannot transfer: {capacity.message}")

        warning = None
        if capacity.is_exception_only:
            warning = f'Transfer will use exception capacity in "{new_slot.display_name}"'

        old_slot = self.repo.get(SessionSlot, subscription.slot_id)
        old_name = old_slot.display_name if old_slot else "Unknown slot"

        with self.repo.transaction():
            subscription.slot_id = new_slot.id
            subscription.append_note(
                f"Batch transfer: {old_name} → {new_slot.display_name} "
                f"(effective {effective_date.isoformat()}): {reason or 'No reason provided'}"
            )
            self.repo.save(subscription)

            member = self.repo.get(Member, subscription.member_id)
            if member:
                member.assigned_slot_id = new_slot.id
                self.repo.save(member)

            self._assign_slot(subscription.member_id, new_slot.id, effective_date, is_exception=warning is not None)

        logger.info(f"🔀 Subscription {subscription.id} transferred {old_name} -> {new_slot.display_name}")
        return TransferResult(subscription=subscription, warning=warning)

    # =========================================================================
    # CANCEL / UPDATE / STATUS REFRESH
    # =========================================================================

    def cancel(self, subscription_id: str, reason: Optional[str] = None) -> MembershipSubscription:
        subscription = self.get(subscription_id)
        if subscription.status == SubscriptionStatus.CANCELLED:
            raise SubscriptionValidationError("Subscription is already cancelled")
        subscription.status = SubscriptionStatus.CANCELLED
        subscription.append_note(f"Cancelled: {reason or 'No reason provided'}")
        self.repo.save(subscription)
        logger.info(f"🚫 Subscription {subscription.id} cancelled")
        return subscription

    def update(self, subscription_id: str, changes: Dict[str, Any]) -> MembershipSubscription:
        """
        Plain field edits (notes, discount reason).

        Dates go through extend/extra-days and status through cancel or
        refresh_statuses, which keep the overlap and capacity rules.
        """
        refused = sorted(set(changes) - set(UPDATABLE_FIELDS))
        if refused:
            raise SubscriptionValidationError(f"Cannot edit {', '.join(refused)} on a subscription")

        subscription = self.get(subscription_id)
        for field, value in changes.items():
            setattr(subscription, field, value)
        self.repo.save(subscription)
        return subscription

    def refresh_statuses(self) -> Dict[str, int]:
        """
        Align stored statuses with today.

        active past end_date -> expired
        scheduled whose start_date arrived -> active
        members left without a current subscription -> expired
        """
        expired = activated = members_expired = 0

        with self.repo.transaction():
            for subscription in self.repo.list(MembershipSubscription, status=SubscriptionStatus.ACTIVE):
                if subscription.end_date < self.today:
                    subscription.status = SubscriptionStatus.EXPIRED
                    self.repo.save(subscription)
                    expired += 1

            for subscription in self.repo.list(MembershipSubscription, status=SubscriptionStatus.SCHEDULED):
                if subscription.start_date <= self.today:
                    subscription.status = (
                        SubscriptionStatus.ACTIVE if subscription.end_date >= self.today else SubscriptionStatus.EXPIRED
                    )
                    self.repo.save(subscription)
                    activated += 1

            for member in self.repo.list(Member, status=MemberStatus.ACTIVE):
                if not self.has_active_subscription(member.id) and not self._has_future_subscription(member.id):
                    member.status = MemberStatus.EXPIRED
                    self.repo.save(member)
                    members_expired += 1

        logger.info(f"🔄 Statuses refreshed: {expired} expired, {activated} activated, {members_expired} member(s) expired")
        return {"expired": expired, "activated": activated, "members_expired": members_expired}

    # =========================================================================
    # QUERIES
    # =========================================================================

    def get_by_member(self, member_id: str) -> List[MembershipSubscription]:
        return self.repo.list(MembershipSubscription, member_id=member_id, order_by="start_date", descending=True)

    def get_active_member_subscription(self, member_id: str) -> Optional[MembershipSubscription]:
        """Active or scheduled subscription whose range contains today."""
        for subscription in self.get_by_member(member_id):
            if subscription.status in CURRENT_STATUSES and subscription.covers(self.today):
                return subscription
        return None

    def has_active_subscription(self, member_id: str) -> bool:
        return self.get_active_member_subscription(member_id) is not None

    def _has_future_subscription(self, member_id: str) -> bool:
        return any(
            s.start_date > self.today and s.status in CURRENT_STATUSES
            for s in self.get_by_member(member_id)
        )

    def get_relevant_subscription(self, member_id: str) -> Optional[MembershipSubscription]:
        """
        The subscription to show for a member, by priority:

        1. active or scheduled and covering today
        2. nearest upcoming (scheduled, or active starting later)
        3. expired within the lookback window (most recent)
        4. most recent of any status
        """
        subscriptions = self.get_by_member(member_id)
        if not subscriptions:
            return None

        current = self.get_active_member_subscription(member_id)
        if current:
            return current

        upcoming = [
            s for s in subscriptions
            if s.start_date > self.today and s.status in CURRENT_STATUSES
        ]
        if upcoming:
            return min(upcoming, key=lambda s: s.start_date)

        recently_expired = [
            s for s in subscriptions
            if s.end_date < self.today
            and days_between(s.end_date, self.today) <= self.expired_lookback_days
            and s.status in (SubscriptionStatus.ACTIVE, SubscriptionStatus.EXPIRED)
        ]
        if recently_expired:
            return max(recently_expired, key=lambda s: s.end_date)

        return subscriptions[0]

    def has_pending_renewal(self, member_id: str) -> bool:
        """A current subscription plus a different future one already booked."""
        current = self.get_active_member_subscription(member_id)
        if not current:
            return False
        return any(
            s.id != current.id and s.status in CURRENT_STATUSES and s.start_date > self.today
            for s in self.get_by_member(member_id)
        )

    def get_expiring_soon(self, days: int = 7) -> List[MembershipSubscription]:
        """Active subscriptions ending within ``days`` (today included), soonest first."""
        result = [
            s for s in self.repo.list(MembershipSubscription, status=SubscriptionStatus.ACTIVE)
            if 0 <= days_between(self.today, s.end_date) <= days
        ]
        return sorted(result, key=lambda s: s.end_date)

    def get_recently_expired(self, days: int = 7) -> List[MembershipSubscription]:
        """Subscriptions ended in the last ``days`` days, for members without a current plan."""
        result = [
            s for s in self.repo.list(
                MembershipSubscription,
                status=[SubscriptionStatus.ACTIVE, SubscriptionStatus.EXPIRED],
            )
            if s.end_date < self.today
            and days_between(s.end_date, self.today) <= days
            and not self.has_active_subscription(s.member_id)
            and not self._has_future_subscription(s.member_id)
        ]
        return sorted(result, key=lambda s: s.end_date, reverse=True)

    def get_active_for_slot_on_date(self, slot_id: str, day: date) -> List[MembershipSubscription]:
        return [
            s for s in self.repo.list(
                MembershipSubscription,
                slot_id=slot_id,
                status=[SubscriptionStatus.ACTIVE, SubscriptionStatus.SCHEDULED],
            )
            if s.covers(day)
        ]
