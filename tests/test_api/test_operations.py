"""
API tests for the day-to-day studio operations.

Endpoints:
- /api/v1/trials        : trial bookings and their outcome
- /api/v1/products      : catalogue, SKU generation, stock value
- /api/v1/inventory     : stock movements and product sales
- /api/v1/session-plans : lesson plans
- /api/v1/allocations   : lesson plans allocated to slots
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest
from fastapi import status

from app.models import Lead, LeadStatus, Product
from app.services.studio_settings import DEFAULT_HOLIDAYS
from app.utils.dates import next_working_day


@pytest.fixture
def trial_day():
    return next_working_day(date.today(), DEFAULT_HOLIDAYS)


@pytest.fixture
def trial(client, lead, slot, trial_day):
    response = client.post(
        "/api/v1/trials",
        json={"lead_id": lead.id, "slot_id": slot.id, "date": trial_day.isoformat()},
    )
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()


# =============================================================================
# TRIALS
# =============================================================================

class TestTrialEndpoints:
    """Tests for /api/v1/trials."""

    def test_book_trial(self, repo, lead, trial, trial_day):
        assert trial["status"] == "confirmed"
        stored = repo.get(Lead, lead.id)
        assert stored.status == LeadStatus.TRIAL_SCHEDULED
        assert stored.trial_date == trial_day

    def test_second_trial_same_day_refused(self, client, lead, evening_slot, trial, trial_day):
        response = client.post(
            "/api/v1/trials",
            json={"lead_id": lead.id, "slot_id": evening_slot.id, "date": trial_day.isoformat()},
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "already booked" in response.json()["detail"]

    def test_weekend_refused(self, client, lead, slot):
        today = date.today()
        saturday = today + timedelta(days=(5 - today.weekday()) % 7)
        response = client.post(
            "/api/v1/trials",
            json={"lead_id": lead.id, "slot_id": slot.id, "date": saturday.isoformat()},
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "Monday to Friday" in response.json()["detail"]

    def test_full_slot_conflicts(self, client, repo, lead, slot, trial_day):
        client.put(f"/api/v1/slots/{slot.id}/capacity", json={"capacity": 0})
        response = client.post(
            "/api/v1/trials",
            json={"lead_id": lead.id, "slot_id": slot.id, "date": trial_day.isoformat()},
        )
        assert response.status_code == status.HTTP_409_CONFLICT

    def test_upcoming(self, client, trial):
        response = client.get("/api/v1/trials/upcoming")
        assert [t["id"] for t in response.json()] == [trial["id"]]

    @pytest.mark.parametrize("action,trial_status,lead_status", [
        ("attended", "attended", LeadStatus.TRIAL_COMPLETED),
        ("no-show", "no-show", LeadStatus.FOLLOW_UP),
    ])
    def test_outcome(self, client, repo, lead, trial, action, trial_status, lead_status):
        response = client.post(f"/api/v1/trials/{trial['id']}/{action}")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == trial_status
        assert repo.get(Lead, lead.id).status == lead_status

    def test_cancel_frees_the_place(self, client, slot, trial, trial_day):
        client.post(f"/api/v1/trials/{trial['id']}/cancel")
        data = client.get(f"/api/v1/slots/{slot.id}/availability", params={"date": trial_day.isoformat()}).json()
        assert data["trial_bookings"] == 0

    def test_delete_trial(self, client, trial):
        response = client.delete(f"/api/v1/trials/{trial['id']}")
        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert client.get(f"/api/v1/trials/{trial['id']}").status_code == status.HTTP_404_NOT_FOUND


# =============================================================================
# PRODUCTS
# =============================================================================

class TestProductEndpoints:
    """Tests for /api/v1/products."""

    def test_create_product_generates_sku(self, client):
        response = client.post(
            "/api/v1/products",
            json={"name": "Cotton Tee", "category": "clothing", "cost_price": "250", "selling_price": "499"},
        )
        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["sku"] == "CLT-001"

        response = client.get("/api/v1/products/generate-sku", params={"category": "clothing"})
        assert response.json() == {"sku": "CLT-002"}

    def test_duplicate_sku_conflicts(self, client, product):
        response = client.post("/api/v1/products", json={"name": "Other Mat", "sku": product.sku})
        assert response.status_code == status.HTTP_409_CONFLICT

    def test_search(self, client, product):
        response = client.get("/api/v1/products", params={"search": "mat"})
        assert [p["id"] for p in response.json()["items"]] == [product.id]

    def test_stock_value(self, client, product):
        data = client.get("/api/v1/products/stock-value").json()
        assert Decimal(data["total_cost"]) == Decimal("4000")
        assert Decimal(data["total_value"]) == Decimal("6500")
        assert data["total_items"] == 10

    def test_delete_product(self, client, repo, product):
        response = client.delete(f"/api/v1/products/{product.id}")
        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert repo.get(Product, product.id) is None


# =============================================================================
# INVENTORY
# =============================================================================

class TestInventoryEndpoints:
    """Tests for /api/v1/inventory."""

    def test_purchase(self, client, product):
        response = client.post(
            "/api/v1/inventory/purchase",
            json={"product_id": product.id, "quantity": 5, "unit_cost": "380", "vendor_name": "Mat Co"},
        )
        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert (data["previous_stock"], data["new_stock"]) == (10, 15)
        assert Decimal(data["total_value"]) == Decimal("1900")

    def test_insufficient_stock(self, client, product):
        response = client.post("/api/v1/inventory/sale", json={"product_id": product.id, "quantity": 11})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_adjustment_and_low_stock(self, client, product):
        response = client.post("/api/v1/inventory/adjustment", json={"product_id": product.id, "new_stock_level": 3})
        assert response.json()["quantity"] == -7

        low = client.get("/api/v1/products/low-stock").json()
        assert [p["id"] for p in low] == [product.id]

    def test_sell_products(self, client, repo, member, product):
        response = client.post(
            "/api/v1/inventory/sell",
            json={"member_id": member.id, "lines": [{"product_id": product.id, "quantity": 2}]},
        )
        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert Decimal(data["total_amount"]) == Decimal("1300")
        assert [t["quantity"] for t in data["transactions"]] == [-2]
        assert repo.get(Product, product.id).current_stock == 8

        invoice = client.get(f"/api/v1/invoices/{data['invoice_id']}").json()
        assert invoice["invoice_type"] == "product-sale"

    def test_cogs(self, client, member, product):
        client.post(
            "/api/v1/inventory/sell",
            json={"member_id": member.id, "lines": [{"product_id": product.id, "quantity": 2}]},
        )
        today = date.today().isoformat()
        data = client.get("/api/v1/inventory/cogs", params={"start_date": today, "end_date": today}).json()
        assert Decimal(data["cogs"]) == Decimal("800")
        assert data["count"] == 1

    def test_list_by_type(self, client, product):
        client.post("/api/v1/inventory/consumption", json={"product_id": product.id, "quantity": 1})
        client.post("/api/v1/inventory/purchase", json={"product_id": product.id, "quantity": 2, "unit_cost": "400"})

        response = client.get("/api/v1/inventory", params={"type": "consumed"})
        assert response.json()["total"] == 1


# =============================================================================
# SESSION PLANS & ALLOCATIONS
# =============================================================================

@pytest.fixture
def session_plan(client):
    response = client.post("/api/v1/session-plans", json={"name": "Hatha Basics"})
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()


class TestSessionPlanEndpoints:
    """Tests for /api/v1/session-plans and /api/v1/allocations."""

    def test_update_session_plan(self, client, session_plan):
        response = client.patch(f"/api/v1/session-plans/{session_plan['id']}", json={"description": "Gentle start"})
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["description"] == "Gentle start"

    def test_allocate_and_execute(self, client, session_plan, slot):
        day = date.today().isoformat()
        response = client.post(
            "/api/v1/allocations",
            json={"session_plan_id": session_plan["id"], "slot_id": slot.id, "date": day},
        )
        assert response.status_code == status.HTTP_201_CREATED
        allocation = response.json()
        assert allocation["status"] == "scheduled"

        found = client.get("/api/v1/allocations/by-slot", params={"slot_id": slot.id, "date": day}).json()
        assert found["id"] == allocation["id"]

        response = client.post(f"/api/v1/allocations/{allocation['id']}/mark-executed", json={"execution_id": "run-1"})
        assert response.json()["status"] == "executed"

        response = client.post(f"/api/v1/allocations/{allocation['id']}/cancel")
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_allocate_to_all_slots(self, client, session_plan, slot, evening_slot):
        day = date.today().isoformat()
        response = client.post(
            "/api/v1/allocations/allocate-to-all-slots",
            json={"session_plan_id": session_plan["id"], "date": day},
        )
        assert response.status_code == status.HTTP_201_CREATED
        assert len(response.json()) == 2
        assert client.get("/api/v1/allocations", params={"date": day}).json()["total"] == 2

    def test_allocate_unknown_plan(self, client, slot):
        response = client.post(
            "/api/v1/allocations",
            json={"session_plan_id": "missing", "slot_id": slot.id, "date": date.today().isoformat()},
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_delete_session_plan(self, client, session_plan, slot):
        client.post(
            "/api/v1/allocations",
            json={"session_plan_id": session_plan["id"], "slot_id": slot.id, "date": date.today().isoformat()},
        )
        response = client.delete(f"/api/v1/session-plans/{session_plan['id']}")
        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert client.get("/api/v1/allocations").json()["total"] == 0
