from app.models.member.member import Member
from app.models.member.lead import Lead

__all__ = ["Member", "Lead"]
