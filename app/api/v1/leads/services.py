"""
Business services for the Leads module.

Funnel: new -> contacted -> trial-scheduled -> trial-completed
        -> follow-up / interested / negotiating -> converted | not-interested | lost
"""
import logging
from datetime import date
from typing import List, Optional

from app.core.exceptions import ConflictError, NotFoundError
from app.models import Lead, LeadStatus, Member, MemberSource, MemberStatus
from app.repositories.base import Repository

from app.api.v1.leads.schemas import LeadCreate, LeadUpdate

logger = logging.getLogger(__name__)

CLOSED_STATUSES = (LeadStatus.CONVERTED, LeadStatus.NOT_INTERESTED, LeadStatus.LOST)


# =============================================================================
# EXCEPTIONS
# =============================================================================

class LeadNotFoundError(NotFoundError):
    """Lead not found."""
    pass


class LeadAlreadyConvertedError(ConflictError):
    """Lead was already converted into a member."""
    pass


class MemberEmailExistsError(ConflictError):
    """A member already uses the lead's email."""
    pass


# =============================================================================
# LEAD SERVICE
# =============================================================================

class LeadService:

    @staticmethod
    def get_all(
            repo: Repository,
            status: Optional[LeadStatus] = None,
            search: Optional[str] = None,
    ) -> List[Lead]:
        filters = {"status": status} if status else {}
        leads = repo.list(Lead, order_by="created_at", descending=True, **filters)
        if search:
            term = search.strip().lower()
            leads = [
                lead for lead in leads
                if term in lead.full_name.lower() or term in lead.email.lower() or term in (lead.phone or "")
            ]
        return leads

    @staticmethod
    def get_by_id(repo: Repository, lead_id: str) -> Lead:
        lead = repo.get(Lead, lead_id)
        if not lead:
            raise LeadNotFoundError(f"Lead {lead_id} not found")
        return lead

    @staticmethod
    def get_unconverted(repo: Repository) -> List[Lead]:
        return [lead for lead in repo.list(Lead, order_by="created_at", descending=True) if lead.status != LeadStatus.CONVERTED]

    @staticmethod
    def get_pending(repo: Repository) -> List[Lead]:
        """Leads still in the funnel."""
        return [lead for lead in repo.list(Lead, order_by="created_at", descending=True) if lead.status not in CLOSED_STATUSES]

    @staticmethod
    def get_follow_ups_due(repo: Repository, today: Optional[date] = None) -> List[Lead]:
        today = today or date.today()
        due = [
            lead for lead in LeadService.get_pending(repo)
            if lead.next_follow_up_date is not None and lead.next_follow_up_date <= today
        ]
        return sorted(due, key=lambda lead: lead.next_follow_up_date)

    @staticmethod
    def create(repo: Repository, data: LeadCreate) -> Lead:
        lead = Lead(**data.model_dump())
        repo.add(lead)
        logger.info(f"✅ Lead created: {lead.id} ({lead.email})")
        return lead

    @staticmethod
    def update(repo: Repository, lead_id: str, data: LeadUpdate) -> Lead:
        lead = LeadService.get_by_id(repo, lead_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(lead, field, value)
        repo.save(lead)
        return lead

    @staticmethod
    def delete(repo: Repository, lead_id: str) -> None:
        lead = LeadService.get_by_id(repo, lead_id)
        repo.delete(lead)
        logger.info(f"🗑️ Lead deleted: {lead_id}")

    @staticmethod
    def convert_to_member(repo: Repository, lead_id: str, today: Optional[date] = None) -> Member:
        """
        Turn a lead into a ``pending`` member.

        The member waits in ``pending`` until a first subscription is sold.

        Raises:
            LeadNotFoundError
            LeadAlreadyConvertedError
            MemberEmailExistsError
        """
        today = today or date.today()
        lead = LeadService.get_by_id(repo, lead_id)

        if lead.status == LeadStatus.CONVERTED:
            logger.warning(f"⚠️ Lead {lead.id} already converted")
            raise LeadAlreadyConvertedError("Lead already converted")

        email = lead.email.strip().lower()
        if any(m.email.lower() == email for m in repo.list(Member)):
            logger.warning(f"⚠️ Conversion refused, member email exists: {email}")
            raise MemberEmailExistsError("A member with this email already exists")

        emergency_contact = None
        if lead.emergency_contact_name or lead.emergency_contact_phone:
            emergency_contact = {
                "name": lead.emergency_contact_name or "",
                "phone": lead.emergency_contact_phone or "",
            }

        with repo.transaction():
            member = Member(
                first_name=lead.first_name,
                last_name=lead.last_name,
                email=email,
                phone=lead.phone,
                whatsapp_number=lead.whatsapp_number,
                date_of_birth=lead.date_of_birth,
                age=lead.age,
                gender=lead.gender,
                address=lead.address,
                emergency_contact=emergency_contact,
                medical_conditions=list(lead.medical_conditions or []),
                health_notes=lead.health_notes,
                consent_records=list(lead.consent_records or []),
                status=MemberStatus.PENDING,
                source=MemberSource.LEAD_CONVERSION,
                converted_from_lead_id=lead.id,
                assigned_slot_id=lead.preferred_slot_id,
                notes=lead.notes,
            )
            repo.add(member)

            lead.status = LeadStatus.CONVERTED
            lead.converted_to_member_id = member.id
            lead.conversion_date = today
            repo.save(lead)

        logger.info(f"🎉 Lead {lead.id} converted to member {member.id}")
        return member
