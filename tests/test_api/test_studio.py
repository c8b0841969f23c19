"""
API tests for studio-wide endpoints.

Endpoints:
- /api/v1/settings  : studio settings and WhatsApp templates
- /api/v1/messaging : wa.me links for members and leads
- /api/v1/backup    : JSON export / import
- /api/v1/health    : liveness
"""

from datetime import date

import pytest
from fastapi import status

from app.models import Member


# =============================================================================
# SETTINGS
# =============================================================================

class TestSettingsEndpoints:
    """Tests for /api/v1/settings."""

    def test_defaults(self, client):
        response = client.get("/api/v1/settings")
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["invoice_prefix"] == "INV"
        assert data["currency"] == "INR"
        assert data["whatsapp_templates"]["schema_version"] == 2

    def test_patch_merges(self, client):
        response = client.patch("/api/v1/settings", json={"studio_name": "Shanti Yoga", "currency": "usd"})
        assert response.status_code == status.HTTP_200_OK

        data = client.get("/api/v1/settings").json()
        assert data["studio_name"] == "Shanti Yoga"
        assert data["currency"] == "USD"
        assert data["invoice_prefix"] == "INV"

    def test_invalid_tax_rate(self, client):
        response = client.patch("/api/v1/settings", json={"tax_rate": 150})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_numbering_follows_settings(self, client, member):
        client.patch("/api/v1/settings", json={"invoice_prefix": "YS", "invoice_start_number": 100})
        response = client.post(
            "/api/v1/invoices",
            json={"member_id": member.id, "items": [{"description": "Workshop", "unit_price": "500"}]},
        )
        assert response.json()["invoice_number"] == "YS-00100"

    def test_reset(self, client):
        client.patch("/api/v1/settings", json={"studio_name": "Shanti Yoga"})
        response = client.post("/api/v1/settings/reset")
        assert response.json()["studio_name"] != "Shanti Yoga"

    def test_template_group(self, client):
        response = client.get("/api/v1/settings/whatsapp-templates/lead_follow_ups")
        assert [t["name"] for t in response.json()] == ["Trial Invitation", "Check-in Message"]

    def test_unknown_template_group(self, client):
        response = client.get("/api/v1/settings/whatsapp-templates/birthday")
        assert response.status_code == status.HTTP_400_BAD_REQUEST


# =============================================================================
# MESSAGING
# =============================================================================

class TestMessagingEndpoints:
    """Tests for /api/v1/messaging."""

    @pytest.fixture(autouse=True)
    def studio_name(self, client):
        client.patch("/api/v1/settings", json={"studio_name": "Shanti Yoga", "phone": "9000000000"})

    def test_class_reminder(self, client, member, slot):
        response = client.post(
            f"/api/v1/messaging/members/{member.id}/class-reminder",
            json={"slot_id": slot.id, "class_date": "tomorrow"},
        )
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["phone"] == member.phone
        assert data["message"].startswith(f"Hi {member.full_name}, reminder: Your yoga class is tomorrow at 07:30.")
        assert data["link"].startswith("https://wa.me/919876543210?text=Hi%20")

    def test_class_reminder_without_slot(self, client, member):
        response = client.post(f"/api/v1/messaging/members/{member.id}/class-reminder", json={})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_renewal_and_payment_messages(self, client, member, plan, slot):
        sold = client.post(
            "/api/v1/subscriptions",
            json={"member_id": member.id, "plan_id": plan.id, "slot_id": slot.id, "start_date": date.today().isoformat()},
        ).json()

        response = client.post(
            f"/api/v1/messaging/subscriptions/{sold['subscription']['id']}/renewal-reminder",
            json={"template_index": 2},
        )
        assert "Don't miss your yoga practice" in response.json()["message"]

        response = client.post(f"/api/v1/messaging/invoices/{sold['invoice']['id']}/payment-reminder")
        assert "Amount Due: Rs 2,100" in response.json()["message"]

        payment = client.post(
            "/api/v1/payments",
            json={"invoice_id": sold["invoice"]["id"], "amount": "2100", "payment_method": "upi"},
        ).json()
        response = client.post(f"/api/v1/messaging/payments/{payment['id']}/confirmation")
        assert f"for {plan.name}. Thank you! - Shanti Yoga" in response.json()["message"]

    def test_lead_messages(self, client, lead):
        response = client.post(f"/api/v1/messaging/leads/{lead.id}/follow-up", json={"template_index": 9})
        assert "checking in" in response.json()["message"]

        response = client.post(
            f"/api/v1/messaging/leads/{lead.id}/registration-link",
            json={"link": "https://studio.example.com/register/abc"},
        )
        assert "https://studio.example.com/register/abc" in response.json()["message"]

    def test_notification_with_extra_placeholders(self, client, member):
        response = client.post(
            f"/api/v1/messaging/members/{member.id}/notification",
            json={"template_index": 1, "extra": {"googleReviewUrl": "https://g.page/r/shanti"}},
        )
        assert "https://g.page/r/shanti" in response.json()["message"]

    def test_unknown_member(self, client):
        response = client.post("/api/v1/messaging/members/missing/notification")
        assert response.status_code == status.HTTP_404_NOT_FOUND


# =============================================================================
# BACKUP
# =============================================================================

class TestBackupEndpoints:
    """Tests for /api/v1/backup."""

    def test_export_then_import(self, client, repo, member):
        client.patch("/api/v1/settings", json={"studio_name": "Shanti Yoga"})
        exported = client.get("/api/v1/backup/export").json()
        assert [m["id"] for m in exported["members"]] == [member.id]
        assert exported["settings"]["studio_name"] == "Shanti Yoga"

        response = client.post("/api/v1/backup/import", json=exported)
        assert response.status_code == status.HTTP_200_OK
        counts = response.json()
        assert counts["members"] == 1
        assert counts["settings"] == 1
        assert repo.get(Member, member.id) is not None

    def test_import_rejects_garbage(self, client, member):
        response = client.post("/api/v1/backup/import", json={"members": "nope"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert client.get(f"/api/v1/members/{member.id}").status_code == status.HTTP_200_OK


# =============================================================================
# HEALTH
# =============================================================================

def test_health(client):
    response = client.get("/api/v1/health")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "healthy"
