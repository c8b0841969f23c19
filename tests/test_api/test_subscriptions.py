"""
API tests for slots, membership plans and subscriptions.

Endpoints:
- /api/v1/slots         : CRUD, availability, capacity check
- /api/v1/plans         : CRUD
- /api/v1/subscriptions : sale with invoice, extend, extra days, transfer, cancel
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest
from dateutil.relativedelta import relativedelta
from fastapi import status

from app.models import MembershipPlan, SlotSubscription

from tests.factories import make_member


@pytest.fixture
def today():
    return date.today()


@pytest.fixture
def sold(client, member, plan, slot, today):
    """A monthly subscription starting today."""
    response = client.post(
        "/api/v1/subscriptions",
        json={"member_id": member.id, "plan_id": plan.id, "slot_id": slot.id, "start_date": today.isoformat()},
    )
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()


# =============================================================================
# SLOTS
# =============================================================================

class TestSlotEndpoints:
    """Tests for /api/v1/slots."""

    def test_create_slot(self, client):
        response = client.post(
            "/api/v1/slots",
            json={"start_time": "06:00", "end_time": "07:00", "display_name": "Early 6:00 AM"},
        )
        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert (data["capacity"], data["exception_capacity"]) == (10, 1)

    def test_create_slot_end_before_start(self, client):
        response = client.post(
            "/api/v1/slots",
            json={"start_time": "09:00", "end_time": "08:00", "display_name": "Backwards"},
        )
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_update_capacity(self, client, slot):
        response = client.put(f"/api/v1/slots/{slot.id}/capacity", json={"capacity": 12, "exception_capacity": 2})
        assert response.status_code == status.HTTP_200_OK
        assert (response.json()["capacity"], response.json()["exception_capacity"]) == (12, 2)

    def test_active_slots(self, client, slot, evening_slot):
        client.patch(f"/api/v1/slots/{evening_slot.id}", json={"is_active": False})
        response = client.get("/api/v1/slots/active")
        assert [s["id"] for s in response.json()] == [slot.id]

    def test_availability(self, client, slot, sold, today):
        response = client.get(f"/api/v1/slots/{slot.id}/availability", params={"date": today.isoformat()})
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["regular_bookings"] == 1
        assert data["available_regular"] == slot.capacity - 1

    def test_capacity_check(self, client, slot, sold, today):
        response = client.get(
            f"/api/v1/slots/{slot.id}/capacity-check",
            params={"start_date": today.isoformat(), "end_date": (today + timedelta(days=30)).isoformat()},
        )
        data = response.json()
        assert data["available"] is True
        assert data["current_bookings"] == 1

    def test_slot_not_found(self, client):
        response = client.get("/api/v1/slots/missing")
        assert response.status_code == status.HTTP_404_NOT_FOUND


# =============================================================================
# PLANS
# =============================================================================

class TestPlanEndpoints:
    """Tests for /api/v1/plans."""

    def test_create_plan(self, client):
        response = client.post(
            "/api/v1/plans",
            json={"name": "Yearly", "type": "yearly", "price": "18000", "duration_months": 12},
        )
        assert response.status_code == status.HTTP_201_CREATED
        assert Decimal(response.json()["price"]) == Decimal("18000")

    def test_list_plans(self, client, plan, quarterly_plan):
        response = client.get("/api/v1/plans")
        assert response.json()["total"] == 2

    def test_delete_deactivates_plan(self, client, repo, plan):
        response = client.delete(f"/api/v1/plans/{plan.id}")
        assert response.status_code == status.HTTP_200_OK
        assert repo.get(MembershipPlan, plan.id).is_active is False


# =============================================================================
# SUBSCRIPTIONS
# =============================================================================

class TestSubscriptionEndpoints:
    """Tests for /api/v1/subscriptions."""

    def test_sale_creates_invoice_and_assignment(self, repo, member, slot, sold, today):
        subscription = sold["subscription"]
        assert subscription["status"] == "active"
        assert subscription["end_date"] == (today + relativedelta(months=1)).isoformat()
        assert subscription["badge"]["text"].endswith("d left")

        invoice = sold["invoice"]
        assert invoice["invoice_number"] == "INV-00001"
        assert Decimal(invoice["total_amount"]) == Decimal("2100")
        assert invoice["status"] == "sent"
        assert sold["warning"] is None

        assignments = repo.list(SlotSubscription, member_id=member.id, is_active=True)
        assert [a.slot_id for a in assignments] == [slot.id]

    def test_overlap_refused(self, client, member, plan, slot, sold, today):
        response = client.post(
            "/api/v1/subscriptions",
            json={
                "member_id": member.id,
                "plan_id": plan.id,
                "slot_id": slot.id,
                "start_date": (today + timedelta(days=5)).isoformat(),
            },
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "overlapping" in response.json()["detail"]

    def test_unknown_plan(self, client, member, slot, today):
        response = client.post(
            "/api/v1/subscriptions",
            json={"member_id": member.id, "plan_id": "missing", "slot_id": slot.id, "start_date": today.isoformat()},
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_extend(self, client, sold):
        subscription = sold["subscription"]
        response = client.post(f"/api/v1/subscriptions/{subscription['id']}/extend", json={"days": 5, "reason": "Travel"})
        assert response.status_code == status.HTTP_200_OK
        extended = date.fromisoformat(response.json()["end_date"])
        assert extended == date.fromisoformat(subscription["end_date"]) + timedelta(days=5)

    def test_extra_days_are_absolute(self, client, sold):
        subscription = sold["subscription"]
        url = f"/api/v1/subscriptions/{subscription['id']}/extra-days"
        client.put(url, json={"days": 3})
        response = client.put(url, json={"days": 3})
        data = response.json()
        assert data["extra_days"] == 3
        assert date.fromisoformat(data["end_date"]) == date.fromisoformat(subscription["end_date"]) + timedelta(days=3)

    def test_transfer(self, client, repo, member, evening_slot, sold, today):
        subscription = sold["subscription"]
        response = client.post(
            f"/api/v1/subscriptions/{subscription['id']}/transfer",
            json={"new_slot_id": evening_slot.id, "effective_date": (today + timedelta(days=1)).isoformat()},
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["subscription"]["slot_id"] == evening_slot.id

        active = repo.list(SlotSubscription, member_id=member.id, is_active=True)
        assert [a.slot_id for a in active] == [evening_slot.id]

    def test_cancel(self, client, sold):
        subscription = sold["subscription"]
        response = client.post(f"/api/v1/subscriptions/{subscription['id']}/cancel", json={"reason": "Moved city"})
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "cancelled"

    def test_patch_edits_notes_only(self, client, sold):
        url = f"/api/v1/subscriptions/{sold['subscription']['id']}"
        client.post(f"{url}/cancel")

        response = client.patch(url, json={"status": "active"})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

        response = client.patch(url, json={"notes": "Moved city"})
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "cancelled"
        assert response.json()["notes"] == "Moved city"

    def test_member_status(self, client, member, sold):
        response = client.get(f"/api/v1/subscriptions/member/{member.id}/status")
        data = response.json()
        assert data["has_active_subscription"] is True
        assert data["relevant"]["id"] == sold["subscription"]["id"]

    def test_member_without_subscription(self, client, repo):
        other = make_member(repo, "Bina")
        data = client.get(f"/api/v1/subscriptions/member/{other.id}/status").json()
        assert data["has_active_subscription"] is False
        assert data["relevant"] is None

    def test_refresh_statuses(self, client, sold):
        response = client.post("/api/v1/subscriptions/refresh-statuses")
        assert response.status_code == status.HTTP_200_OK
        assert set(response.json()) == {"expired", "activated", "members_expired"}
