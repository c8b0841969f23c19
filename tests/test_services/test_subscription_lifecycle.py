"""
Tests for the membership subscription lifecycle.

Run on both storage backends: booking a plan writes four entities and
must behave the same on SQLite and on the JSON file.
"""

from datetime import date
from decimal import Decimal

import pytest

from app.models import (
    Invoice,
    InvoiceStatus,
    InvoiceType,
    Member,
    MemberStatus,
    MembershipSubscription,
    SlotSubscription,
    SubscriptionPaymentStatus,
    SubscriptionStatus,
)
from app.services.billing import BillingService
from app.services.subscription_lifecycle import (
    PlanNotFoundError,
    SlotFullError,
    SubscriptionLifecycleService,
    SubscriptionValidationError,
)

from tests.factories import TODAY, make_member, make_plan, make_slot


@pytest.fixture
def studio(any_repo):
    member = make_member(any_repo)
    plan = make_plan(any_repo)
    slot = make_slot(any_repo)
    service = SubscriptionLifecycleService(any_repo, today=TODAY)
    return service, member, plan, slot


# =============================================================================
# CREATE
# =============================================================================

class TestCreateWithInvoice:

    def test_creates_subscription_invoice_and_assignment(self, any_repo, studio):
        service, member, plan, slot = studio

        result = service.create_with_invoice(
            member.id, plan.id, slot.id, date(2025, 1, 10),
            discount_amount=Decimal("100"), discount_reason="Loyalty",
        )

        subscription = any_repo.get(MembershipSubscription, result.subscription.id)
        assert subscription.end_date == date(2025, 2, 10)
        assert subscription.payable_amount == Decimal("2000")
        assert subscription.status == SubscriptionStatus.SCHEDULED
        assert subscription.payment_status == SubscriptionPaymentStatus.PENDING
        assert subscription.invoice_id == result.invoice.id
        assert result.warning is None

        invoice = any_repo.get(Invoice, result.invoice.id)
        assert invoice.invoice_number == "INV-00001"
        assert invoice.invoice_type == InvoiceType.MEMBERSHIP
        assert invoice.status == InvoiceStatus.SENT
        assert invoice.amount == Decimal("2100")
        assert invoice.total_amount == Decimal("2000")
        assert invoice.tax == Decimal("0")
        assert invoice.due_date == date(2025, 1, 10)
        assert invoice.subscription_id == subscription.id

        stored_member = any_repo.get(Member, member.id)
        assert stored_member.status == MemberStatus.ACTIVE
        assert stored_member.assigned_slot_id == slot.id

        assignments = any_repo.list(SlotSubscription, member_id=member.id, is_active=True)
        assert len(assignments) == 1
        assert assignments[0].slot_id == slot.id

    def test_start_today_is_active(self, studio):
        service, member, plan, slot = studio
        result = service.create_with_invoice(member.id, plan.id, slot.id, TODAY)
        assert result.subscription.status == SubscriptionStatus.ACTIVE

    def test_month_end_start_clamps(self, studio):
        service, member, plan, slot = studio
        result = service.create_with_invoice(member.id, plan.id, slot.id, date(2025, 1, 31))
        assert result.subscription.end_date == date(2025, 2, 28)

    def test_overlap_is_refused(self, any_repo, studio):
        service, member, plan, slot = studio
        service.create_with_invoice(member.id, plan.id, slot.id, date(2025, 1, 10))

        with pytest.raises(SubscriptionValidationError, match="overlapping subscription"):
            service.create_with_invoice(member.id, plan.id, slot.id, date(2025, 2, 1))

        assert any_repo.count(MembershipSubscription) == 1
        assert any_repo.count(Invoice) == 1

    def test_renewal_after_end_is_accepted(self, studio):
        service, member, plan, slot = studio
        service.create_with_invoice(member.id, plan.id, slot.id, date(2025, 1, 10))
        renewal = service.create_with_invoice(member.id, plan.id, slot.id, date(2025, 2, 11))
        assert renewal.invoice.invoice_number == "INV-00002"

    def test_discount_above_price_is_refused(self, studio):
        service, member, plan, slot = studio
        with pytest.raises(SubscriptionValidationError):
            service.create_with_invoice(member.id, plan.id, slot.id, TODAY, discount_amount=Decimal("5000"))

    def test_inactive_plan_is_refused(self, any_repo, studio):
        service, member, _, slot = studio
        retired = make_plan(any_repo, name="Old", is_active=False)
        with pytest.raises(SubscriptionValidationError):
            service.create_with_invoice(member.id, retired.id, slot.id, TODAY)

    def test_unknown_plan(self, studio):
        service, member, _, slot = studio
        with pytest.raises(PlanNotFoundError):
            service.create_with_invoice(member.id, "missing", slot.id, TODAY)


# =============================================================================
# CAPACITY
# =============================================================================

class TestCapacity:

    def test_exception_place_then_full(self, any_repo):
        plan = make_plan(any_repo)
        slot = make_slot(any_repo, capacity=2, exception_capacity=1)
        service = SubscriptionLifecycleService(any_repo, today=TODAY)
        members = [make_member(any_repo, name) for name in ("Asha", "Bina", "Chitra", "Divya")]

        for m in members[:2]:
            assert service.create_with_invoice(m.id, plan.id, slot.id, TODAY).warning is None

        third = service.create_with_invoice(members[2].id, plan.id, slot.id, TODAY)
        assert "exception capacity" in third.warning
        assert "(3/3 slots used)" in third.warning
        assignment = any_repo.first(SlotSubscription, member_id=members[2].id)
        assert assignment.is_exception is True

        with pytest.raises(SlotFullError):
            service.create_with_invoice(members[3].id, plan.id, slot.id, TODAY)
        assert any_repo.get(Member, members[3].id).assigned_slot_id is None

    def test_check_counts_each_member_once(self, any_repo, studio):
        service, member, plan, slot = studio
        service.create_with_invoice(member.id, plan.id, slot.id, date(2025, 1, 10))
        service.create_with_invoice(member.id, plan.id, slot.id, date(2025, 2, 11))

        check = service.check_slot_capacity(slot.id, date(2025, 1, 1), date(2025, 12, 31))
        assert check.current_bookings == 1
        assert check.available is True
        assert check.total_capacity == 11

    def test_cancelled_booking_cannot_be_revived_into_a_full_slot(self, any_repo):
        plan = make_plan(any_repo)
        slot = make_slot(any_repo, capacity=1, exception_capacity=0)
        service = SubscriptionLifecycleService(any_repo, today=TODAY)
        first, second = make_member(any_repo, "Asha"), make_member(any_repo, "Bina")

        cancelled = service.create_with_invoice(first.id, plan.id, slot.id, TODAY).subscription
        service.cancel(cancelled.id)
        service.create_with_invoice(second.id, plan.id, slot.id, TODAY)

        with pytest.raises(SubscriptionValidationError, match="Cannot edit status"):
            service.update(cancelled.id, {"status": SubscriptionStatus.ACTIVE})

        assert any_repo.get(MembershipSubscription, cancelled.id).status == SubscriptionStatus.CANCELLED
        assert service.check_slot_capacity(slot.id, TODAY, TODAY).current_bookings == 1

    def test_update_edits_notes(self, any_repo, studio):
        service, member, plan, slot = studio
        sub_id = service.create_with_invoice(member.id, plan.id, slot.id, TODAY).subscription.id

        service.update(sub_id, {"notes": "Prefers the back row", "discount_reason": "Referral"})

        stored = any_repo.get(MembershipSubscription, sub_id)
        assert stored.notes == "Prefers the back row"
        assert stored.discount_reason == "Referral"

    def test_cancelled_subscription_frees_the_place(self, studio):
        service, member, plan, slot = studio
        result = service.create_with_invoice(member.id, plan.id, slot.id, TODAY)
        service.cancel(result.subscription.id, reason="Moved away")

        check = service.check_slot_capacity(slot.id, TODAY, TODAY)
        assert check.current_bookings == 0


# =============================================================================
# EXTEND / EXTRA DAYS / TRANSFER
# =============================================================================

class TestChanges:

    def test_extend_is_cumulative(self, any_repo, studio):
        service, member, plan, slot = studio
        sub_id = service.create_with_invoice(member.id, plan.id, slot.id, date(2025, 1, 10)).subscription.id

        service.extend_subscription(sub_id, 5, reason="Travel")
        service.extend_subscription(sub_id, 2)

        subscription = any_repo.get(MembershipSubscription, sub_id)
        assert subscription.end_date == date(2025, 2, 17)
        assert subscription.extension_days == 7
        assert "Extended by 5 days: Travel" in subscription.notes

    def test_extend_requires_positive_days(self, studio):
        service, member, plan, slot = studio
        sub_id = service.create_with_invoice(member.id, plan.id, slot.id, TODAY).subscription.id
        with pytest.raises(SubscriptionValidationError):
            service.extend_subscription(sub_id, 0)

    def test_extra_days_is_absolute_and_idempotent(self, any_repo, studio):
        service, member, plan, slot = studio
        sub_id = service.create_with_invoice(member.id, plan.id, slot.id, date(2025, 1, 10)).subscription.id

        service.set_extra_days(sub_id, 5, reason="Studio closed")
        service.set_extra_days(sub_id, 5, reason="Studio closed")
        assert any_repo.get(MembershipSubscription, sub_id).end_date == date(2025, 2, 15)

        service.set_extra_days(sub_id, 2)
        subscription = any_repo.get(MembershipSubscription, sub_id)
        assert subscription.end_date == date(2025, 2, 12)
        assert subscription.extra_days == 2
        assert subscription.extra_days_reason == "Studio closed"

    def test_transfer_moves_member_and_assignment(self, any_repo, studio):
        service, member, plan, slot = studio
        evening = make_slot(any_repo, start="19:30", end="20:30", display_name="Evening 7:30 PM")
        sub_id = service.create_with_invoice(member.id, plan.id, slot.id, date(2025, 1, 1)).subscription.id

        result = service.transfer_slot(sub_id, evening.id, date(2025, 1, 15), reason="Office hours")

        assert result.warning is None
        subscription = any_repo.get(MembershipSubscription, sub_id)
        assert subscription.slot_id == evening.id
        assert "→ Evening 7:30 PM" in subscription.notes
        assert any_repo.get(Member, member.id).assigned_slot_id == evening.id

        active = any_repo.list(SlotSubscription, member_id=member.id, is_active=True)
        assert [a.slot_id for a in active] == [evening.id]
        closed = any_repo.first(SlotSubscription, member_id=member.id, is_active=False)
        assert closed.end_date == date(2025, 1, 15)

    def test_transfer_to_full_slot_writes_nothing(self, any_repo, studio):
        service, member, plan, slot = studio
        tiny = make_slot(any_repo, start="10:00", end="11:00", capacity=1, exception_capacity=0)
        other = make_member(any_repo, "Bina")
        service.create_with_invoice(other.id, plan.id, tiny.id, date(2025, 1, 1))
        sub_id = service.create_with_invoice(member.id, plan.id, slot.id, date(2025, 1, 1)).subscription.id

        with pytest.raises(SlotFullError):
            service.transfer_slot(sub_id, tiny.id, date(2025, 1, 15))

        assert any_repo.get(MembershipSubscription, sub_id).slot_id == slot.id
        assert any_repo.get(Member, member.id).assigned_slot_id == slot.id

    @pytest.mark.parametrize("effective", [date(2024, 12, 31), date(2025, 3, 1)])
    def test_transfer_outside_range_refused(self, any_repo, studio, effective):
        service, member, plan, slot = studio
        evening = make_slot(any_repo, start="19:30", end="20:30")
        sub_id = service.create_with_invoice(member.id, plan.id, slot.id, date(2025, 1, 1)).subscription.id
        with pytest.raises(SubscriptionValidationError):
            service.transfer_slot(sub_id, evening.id, effective)

    def test_transfer_to_same_slot_refused(self, studio):
        service, member, plan, slot = studio
        sub_id = service.create_with_invoice(member.id, plan.id, slot.id, date(2025, 1, 1)).subscription.id
        with pytest.raises(SubscriptionValidationError, match="already in this slot"):
            service.transfer_slot(sub_id, slot.id, date(2025, 1, 10))


# =============================================================================
# STATUS AND QUERIES
# =============================================================================

class TestStatusesAndQueries:

    def test_refresh_statuses(self, any_repo, studio):
        service, member, plan, slot = studio
        sub_id = service.create_with_invoice(member.id, plan.id, slot.id, date(2025, 1, 10)).subscription.id

        later = SubscriptionLifecycleService(any_repo, today=date(2025, 1, 10))
        assert later.refresh_statuses()["activated"] == 1
        assert any_repo.get(MembershipSubscription, sub_id).status == SubscriptionStatus.ACTIVE

        after_end = SubscriptionLifecycleService(any_repo, today=date(2025, 2, 11))
        counts = after_end.refresh_statuses()
        assert counts == {"expired": 1, "activated": 0, "members_expired": 1}
        assert any_repo.get(Member, member.id).status == MemberStatus.EXPIRED

    def test_relevant_subscription_priority(self, any_repo, studio):
        service, member, plan, slot = studio
        current = service.create_with_invoice(member.id, plan.id, slot.id, date(2025, 1, 1)).subscription
        upcoming = service.create_with_invoice(member.id, plan.id, slot.id, date(2025, 2, 5)).subscription

        assert service.get_relevant_subscription(member.id).id == current.id
        assert service.has_pending_renewal(member.id) is True

        # Between the two: the upcoming one wins over the recently expired one
        gap_day = SubscriptionLifecycleService(any_repo, today=date(2025, 2, 3))
        assert gap_day.get_relevant_subscription(member.id).id == upcoming.id

    def test_relevant_falls_back_to_recently_expired(self, any_repo, studio):
        service, member, plan, slot = studio
        past = service.create_with_invoice(member.id, plan.id, slot.id, date(2024, 12, 1)).subscription
        assert service.get_relevant_subscription(member.id).id == past.id

    def test_scheduled_subscription_is_current_on_its_start_day(self, any_repo, studio):
        service, member, plan, slot = studio
        sub_id = service.create_with_invoice(member.id, plan.id, slot.id, date(2025, 1, 13)).subscription.id
        assert any_repo.get(MembershipSubscription, sub_id).status == SubscriptionStatus.SCHEDULED
        assert service.get_active_member_subscription(member.id) is None

        start_day = SubscriptionLifecycleService(any_repo, today=date(2025, 1, 13))
        assert start_day.get_active_member_subscription(member.id).id == sub_id
        assert start_day.has_active_subscription(member.id) is True
        assert start_day.get_relevant_subscription(member.id).id == sub_id

    def test_pending_renewal_while_current_is_still_scheduled(self, any_repo, studio):
        service, member, plan, slot = studio
        first = service.create_with_invoice(member.id, plan.id, slot.id, date(2025, 1, 13)).subscription
        service.create_with_invoice(member.id, plan.id, slot.id, date(2025, 2, 14))

        start_day = SubscriptionLifecycleService(any_repo, today=date(2025, 1, 13))
        assert start_day.get_active_member_subscription(member.id).id == first.id
        assert start_day.has_pending_renewal(member.id) is True

    def test_expiring_soon_includes_renewed_members(self, any_repo, studio):
        service, member, plan, slot = studio
        other = make_member(any_repo, "Bina")
        service.create_with_invoice(member.id, plan.id, slot.id, date(2024, 12, 14))
        service.create_with_invoice(other.id, plan.id, slot.id, date(2024, 12, 12))
        service.create_with_invoice(other.id, plan.id, slot.id, date(2025, 1, 13))
        service.create_with_invoice(make_member(any_repo, "Chitra").id, plan.id, slot.id, date(2024, 12, 20))

        expiring = service.get_expiring_soon(days=7)
        assert [s.member_id for s in expiring] == [other.id, member.id]

    def test_recently_expired(self, any_repo, studio):
        service, member, plan, slot = studio
        service.create_with_invoice(member.id, plan.id, slot.id, date(2024, 12, 5))

        recent = service.get_recently_expired(days=7)
        assert [s.member_id for s in recent] == [member.id]

    def test_payment_marks_subscription_paid(self, any_repo, studio):
        service, member, plan, slot = studio
        result = service.create_with_invoice(member.id, plan.id, slot.id, TODAY)

        BillingService(any_repo, today=TODAY).record_payment(result.invoice.id, Decimal("2100"))

        subscription = any_repo.get(MembershipSubscription, result.subscription.id)
        assert subscription.payment_status == SubscriptionPaymentStatus.PAID
