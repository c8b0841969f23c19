"""
Business services for the Members module.

Members are never deleted: ``deactivate`` sets status ``inactive`` and
closes the member's slot assignment.
"""
import logging
from datetime import date
from typing import List, Optional

from app.core.exceptions import ConflictError, NotFoundError
from app.models import Member, MemberStatus, SlotSubscription
from app.repositories.base import Repository

from app.api.v1.members.schemas import MemberCreate, MemberUpdate

logger = logging.getLogger(__name__)


# =============================================================================
# EXCEPTIONS
# =============================================================================

class MemberNotFoundError(NotFoundError):
    """Member not found."""
    pass


class DuplicateMemberEmailError(ConflictError):
    """A member already uses this email."""
    pass


# =============================================================================
# MEMBER SERVICE
# =============================================================================

class MemberService:
    """CRUD and search over members."""

    @staticmethod
    def get_all(
            repo: Repository,
            status: Optional[MemberStatus] = None,
            slot_id: Optional[str] = None,
            search: Optional[str] = None,
    ) -> List[Member]:
        filters = {}
        if status:
            filters["status"] = status
        if slot_id:
            filters["assigned_slot_id"] = slot_id

        members = repo.list(Member, order_by="first_name", **filters)
        if search:
            members = MemberService._match(members, search)
        return members

    @staticmethod
    def _match(members: List[Member], query: str) -> List[Member]:
        term = query.strip().lower()
        return [
            m for m in members
            if term in m.full_name.lower()
            or term in m.email.lower()
            or term in (m.phone or "")
        ]

    @staticmethod
    def search(repo: Repository, query: str) -> List[Member]:
        return MemberService._match(repo.list(Member, order_by="first_name"), query)

    @staticmethod
    def get_by_id(repo: Repository, member_id: str) -> Member:
        member = repo.get(Member, member_id)
        if not member:
            raise MemberNotFoundError(f"Member {member_id} not found")
        return member

    @staticmethod
    def get_by_email(repo: Repository, email: str) -> Optional[Member]:
        email = email.strip().lower()
        return next((m for m in repo.list(Member) if m.email.lower() == email), None)

    @staticmethod
    def create(repo: Repository, data: MemberCreate) -> Member:
        if MemberService.get_by_email(repo, data.email):
            raise DuplicateMemberEmailError("A member with this email already exists")

        member = Member(**data.model_dump())
        repo.add(member)

        logger.info(f"✅ Member created: {member.id} ({member.email})")
        return member

    @staticmethod
    def update(repo: Repository, member_id: str, data: MemberUpdate) -> Member:
        member = MemberService.get_by_id(repo, member_id)
        changes = data.model_dump(exclude_unset=True)

        if "email" in changes and changes["email"] != member.email:
            existing = MemberService.get_by_email(repo, changes["email"])
            if existing and existing.id != member.id:
                raise DuplicateMemberEmailError("A member with this email already exists")

        for field, value in changes.items():
            setattr(member, field, value)
        repo.save(member)

        logger.info(f"✏️ Member updated: {member.id}")
        return member

    @staticmethod
    def deactivate(repo: Repository, member_id: str) -> Member:
        """Soft delete."""
        member = MemberService.get_by_id(repo, member_id)
        with repo.transaction():
            member.status = MemberStatus.INACTIVE
            repo.save(member)
            for assignment in repo.list(SlotSubscription, member_id=member.id, is_active=True):
                assignment.is_active = False
                assignment.end_date = date.today()
                repo.save(assignment)

        logger.info(f"🗃️ Member deactivated: {member.id}")
        return member
