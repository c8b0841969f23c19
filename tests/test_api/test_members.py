"""
API tests for the Members and Leads modules.

Endpoints:
- /api/v1/members : CRUD, search, soft delete
- /api/v1/leads   : CRUD, funnel queries, conversion into a member
"""

from fastapi import status

from app.models import Lead, LeadStatus, Member, MemberStatus

from tests.factories import make_lead, make_member


# =============================================================================
# MEMBERS
# =============================================================================

class TestMemberEndpoints:
    """Tests for /api/v1/members."""

    def test_list_members(self, client, member):
        response = client.get("/api/v1/members")
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["total"] == 1
        assert data["pages"] == 1
        assert data["items"][0]["id"] == member.id

    def test_list_members_search_and_filter(self, client, repo):
        make_member(repo, "Asha")
        make_member(repo, "Bina", status=MemberStatus.EXPIRED)

        response = client.get("/api/v1/members", params={"search": "bina"})
        assert [m["first_name"] for m in response.json()["items"]] == ["Bina"]

        response = client.get("/api/v1/members", params={"status": "active"})
        assert [m["first_name"] for m in response.json()["items"]] == ["Asha"]

    def test_pagination(self, client, repo):
        for name in ("Asha", "Bina", "Chitra"):
            make_member(repo, name)

        response = client.get("/api/v1/members", params={"page": 2, "size": 2, "sort_by": "first_name"})
        data = response.json()
        assert data["total"] == 3
        assert data["pages"] == 2
        assert [m["first_name"] for m in data["items"]] == ["Chitra"]

    def test_create_member(self, client):
        response = client.post(
            "/api/v1/members",
            json={
                "first_name": "Meera",
                "last_name": "Iyer",
                "email": "Meera.Iyer@Example.com",
                "phone": "9000011111",
                "emergency_contact": {"name": "Ravi", "phone": "9000022222"},
                "medical_conditions": [{"condition": "Asthma"}],
            },
        )
        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["email"] == "meera.iyer@example.com"
        assert data["status"] == "active"
        assert data["full_name"] == "Meera Iyer"

    def test_create_member_duplicate_email(self, client, member):
        response = client.post(
            "/api/v1/members",
            json={"first_name": "Other", "last_name": "Person", "email": member.email.upper(), "phone": "9000011111"},
        )
        assert response.status_code == status.HTTP_409_CONFLICT

    def test_create_member_invalid_email(self, client):
        response = client.post(
            "/api/v1/members",
            json={"first_name": "Bad", "last_name": "Email", "email": "not-an-email", "phone": "9000011111"},
        )
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_get_member_not_found(self, client):
        response = client.get("/api/v1/members/missing")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_update_member(self, client, member):
        response = client.patch(f"/api/v1/members/{member.id}", json={"phone": "9111111111"})
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["phone"] == "9111111111"

    def test_delete_deactivates(self, client, repo, member):
        """Members are kept; DELETE marks them inactive."""
        response = client.delete(f"/api/v1/members/{member.id}")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "inactive"
        assert repo.get(Member, member.id).status == MemberStatus.INACTIVE


# =============================================================================
# LEADS
# =============================================================================

class TestLeadEndpoints:
    """Tests for /api/v1/leads."""

    def test_create_and_get_lead(self, client):
        response = client.post(
            "/api/v1/leads",
            json={"first_name": "Ravi", "last_name": "Kumar", "email": "ravi@example.com", "phone": "9123456780"},
        )
        assert response.status_code == status.HTTP_201_CREATED
        lead_id = response.json()["id"]

        response = client.get(f"/api/v1/leads/{lead_id}")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "new"

    def test_pending_excludes_closed_leads(self, client, repo):
        make_lead(repo, "Ravi")
        make_lead(repo, "Lost", status=LeadStatus.LOST)

        response = client.get("/api/v1/leads/pending")
        assert [lead["first_name"] for lead in response.json()] == ["Ravi"]

    def test_update_lead(self, client, lead):
        response = client.patch(f"/api/v1/leads/{lead.id}", json={"status": "contacted"})
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "contacted"

    def test_delete_lead(self, client, repo, lead):
        response = client.delete(f"/api/v1/leads/{lead.id}")
        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert repo.get(Lead, lead.id) is None

    def test_convert_lead(self, client, repo, lead):
        response = client.post(f"/api/v1/leads/{lead.id}/convert")
        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["member_status"] == "pending"

        member = repo.get(Member, data["member_id"])
        assert member.email == lead.email
        assert repo.get(Lead, lead.id).status == LeadStatus.CONVERTED

    def test_convert_twice_conflicts(self, client, lead):
        client.post(f"/api/v1/leads/{lead.id}/convert")
        response = client.post(f"/api/v1/leads/{lead.id}/convert")
        assert response.status_code == status.HTTP_409_CONFLICT

    def test_convert_email_taken(self, client, repo):
        make_member(repo, email="taken@example.com")
        lead = make_lead(repo, email="taken@example.com")

        response = client.post(f"/api/v1/leads/{lead.id}/convert")
        assert response.status_code == status.HTTP_409_CONFLICT
        assert "already exists" in response.json()["detail"]
