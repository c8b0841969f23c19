"""
API tests for invoices and payments.

Endpoints:
- /api/v1/invoices : create, list, pending/overdue, cancel
- /api/v1/payments : record, update, delete, revenue and stats
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest
from fastapi import status

from app.models import Invoice, InvoiceStatus


@pytest.fixture
def invoice(client, member):
    response = client.post(
        "/api/v1/invoices",
        json={
            "member_id": member.id,
            "items": [
                {"description": "Drop-in class", "quantity": 2, "unit_price": "300"},
                {"description": "Mat rental", "quantity": 1, "unit_price": "50"},
            ],
        },
    )
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()


def pay(client, invoice_id, amount, method="upi"):
    return client.post("/api/v1/payments", json={"invoice_id": invoice_id, "amount": amount, "payment_method": method})


# =============================================================================
# INVOICES
# =============================================================================

class TestInvoiceEndpoints:
    """Tests for /api/v1/invoices."""

    def test_create_invoice(self, invoice):
        assert invoice["invoice_number"] == "INV-00001"
        assert Decimal(invoice["amount"]) == Decimal("650")
        assert Decimal(invoice["tax"]) == Decimal("0")
        assert Decimal(invoice["balance_due"]) == Decimal("650")
        assert invoice["status"] == "sent"
        assert [line["total"] for line in invoice["items"]] == ["600.00", "50.00"]

    def test_create_invoice_without_lines(self, client, member):
        response = client.post("/api/v1/invoices", json={"member_id": member.id, "items": []})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_create_invoice_unknown_member(self, client):
        response = client.post(
            "/api/v1/invoices",
            json={"member_id": "missing", "items": [{"description": "Class", "unit_price": "300"}]},
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_list_and_filter(self, client, invoice):
        response = client.get("/api/v1/invoices", params={"status": "sent"})
        assert response.json()["total"] == 1

        response = client.get("/api/v1/invoices", params={"status": "paid"})
        assert response.json()["total"] == 0

    def test_pending(self, client, invoice):
        response = client.get("/api/v1/invoices/pending")
        assert [i["id"] for i in response.json()] == [invoice["id"]]

    def test_mark_overdue(self, client, repo, member):
        today = date.today()
        response = client.post(
            "/api/v1/invoices",
            json={
                "member_id": member.id,
                "items": [{"description": "Workshop", "unit_price": "1000"}],
                "invoice_date": (today - timedelta(days=40)).isoformat(),
                "due_date": (today - timedelta(days=10)).isoformat(),
            },
        )
        invoice_id = response.json()["id"]

        assert [i["id"] for i in client.get("/api/v1/invoices/overdue").json()] == [invoice_id]
        assert client.post("/api/v1/invoices/mark-overdue").json() == {"flagged": 1}
        assert client.post("/api/v1/invoices/mark-overdue").json() == {"flagged": 0}
        assert repo.get(Invoice, invoice_id).status == InvoiceStatus.OVERDUE

    def test_cancel_invoice(self, client, invoice):
        response = client.post(f"/api/v1/invoices/{invoice['id']}/cancel", json={"reason": "Duplicate"})
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "cancelled"

    def test_cancel_paid_invoice_refused(self, client, invoice):
        pay(client, invoice["id"], "650")
        response = client.post(f"/api/v1/invoices/{invoice['id']}/cancel")
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_invoice_not_found(self, client):
        assert client.get("/api/v1/invoices/missing").status_code == status.HTTP_404_NOT_FOUND


# =============================================================================
# PAYMENTS
# =============================================================================

class TestPaymentEndpoints:
    """Tests for /api/v1/payments."""

    def test_partial_then_full_payment(self, client, invoice):
        first = pay(client, invoice["id"], "200")
        assert first.status_code == status.HTTP_201_CREATED
        assert first.json()["receipt_number"] == "RCP-00001"
        assert client.get(f"/api/v1/invoices/{invoice['id']}").json()["status"] == "partially-paid"

        pay(client, invoice["id"], "450")
        data = client.get(f"/api/v1/invoices/{invoice['id']}").json()
        assert data["status"] == "paid"
        assert Decimal(data["balance_due"]) == Decimal("0")
        assert len(client.get(f"/api/v1/invoices/{invoice['id']}/payments").json()) == 2

    def test_amount_must_be_positive(self, client, invoice):
        response = pay(client, invoice["id"], "0")
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_payment_on_cancelled_invoice(self, client, invoice):
        client.post(f"/api/v1/invoices/{invoice['id']}/cancel")
        response = pay(client, invoice["id"], "100")
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_update_payment_rebalances_invoice(self, client, invoice):
        payment = pay(client, invoice["id"], "650").json()

        response = client.patch(f"/api/v1/payments/{payment['id']}", json={"amount": "150"})
        assert response.status_code == status.HTTP_200_OK

        data = client.get(f"/api/v1/invoices/{invoice['id']}").json()
        assert data["status"] == "partially-paid"
        assert Decimal(data["amount_paid"]) == Decimal("150")

    def test_delete_payment(self, client, invoice):
        payment = pay(client, invoice["id"], "650").json()

        response = client.delete(f"/api/v1/payments/{payment['id']}")
        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert client.get(f"/api/v1/invoices/{invoice['id']}").json()["status"] == "sent"
        assert client.get(f"/api/v1/payments/{payment['id']}").status_code == status.HTTP_404_NOT_FOUND

    def test_revenue_and_stats(self, client, invoice):
        pay(client, invoice["id"], "200", method="cash")
        pay(client, invoice["id"], "300", method="upi")
        today = date.today().isoformat()
        period = {"start_date": today, "end_date": today}

        revenue = client.get("/api/v1/payments/revenue", params=period).json()
        assert Decimal(revenue["total_revenue"]) == Decimal("500")

        stats = client.get("/api/v1/payments/stats", params=period).json()
        assert stats["payment_count"] == 2
        assert {k: Decimal(v) for k, v in stats["by_method"].items()} == {
            "cash": Decimal("200"),
            "upi": Decimal("300"),
        }

    def test_revenue_rejects_inverted_range(self, client):
        response = client.get(
            "/api/v1/payments/revenue",
            params={"start_date": "2025-02-01", "end_date": "2025-01-01"},
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_list_payments_by_method(self, client, invoice):
        pay(client, invoice["id"], "200", method="cash")
        pay(client, invoice["id"], "300", method="upi")

        response = client.get("/api/v1/payments", params={"payment_method": "cash"})
        assert response.json()["total"] == 1
