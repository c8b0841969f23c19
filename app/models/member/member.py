"""
Member model - people holding (or about to hold) a membership.

Members are never hard-deleted through the API: DELETE moves them to
``inactive`` so invoices and payments keep a valid owner.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy import String, Integer, Date, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from app.database.base_class import Base
from app.models.mixins import UUIDPrimaryKeyMixin, TimestampMixin
from app.models.enums import MemberStatus, MemberSource, Gender
from app.models.types import JSONBCompatible, enum_column


class Member(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """
    Studio member.

    Attributes:
        id: UUID
        first_name, last_name: Identity
        email: Unique contact email
        phone / whatsapp_number: Contact numbers (whatsapp falls back to phone)
        emergency_contact: {"name": ..., "phone": ...}
        medical_conditions: List of {"condition", "since", "notes"}
        consent_records: List of signed consents
        status: active, inactive, trial, expired, pending
        source: walk-in, referral, online, lead-conversion
        assigned_slot_id: Standing slot (None before the first plan)
        converted_from_lead_id: Lead this member was converted from

    Example:
        >>> member = Member(
        ...     first_name="Asha",
        ...     last_name="Rao",
        ...     email="asha@example.com",
        ...     phone="9876543210",
        ... )
    """

    __tablename__ = "members"
    __table_args__ = {
        "comment": "Studio members"
    }

    # === Identity ===

    first_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        doc="First name"
    )

    last_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        doc="Last name"
    )

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        doc="Contact email (unique)"
    )

    phone: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
        doc="Phone number",
        info={"example": "+91 98765 43210"}
    )

    whatsapp_number: Mapped[Optional[str]] = mapped_column(
        String(30),
        nullable=True,
        doc="WhatsApp number when different from the phone"
    )

    date_of_birth: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    age: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    gender: Mapped[Optional[Gender]] = mapped_column(
        enum_column(Gender, "gender_enum"),
        nullable=True
    )

    address: Mapped[Optional[dict]] = mapped_column(
        JSONBCompatible,
        nullable=True,
        doc="Postal address",
        info={"structure": {"street": "str", "city": "str", "state": "str", "zip_code": "str", "country": "str"}}
    )

    # === Health ===

    emergency_contact: Mapped[Optional[dict]] = mapped_column(
        JSONBCompatible,
        nullable=True,
        doc="Emergency contact",
        info={"structure": {"name": "str", "phone": "str", "relationship": "str"}}
    )

    medical_conditions: Mapped[list] = mapped_column(
        JSONBCompatible,
        nullable=False,
        default=list,
        doc="Declared medical conditions"
    )

    health_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    consent_records: Mapped[list] = mapped_column(
        JSONBCompatible,
        nullable=False,
        default=list,
        doc="Signed consent forms"
    )

    # === Membership ===

    status: Mapped[MemberStatus] = mapped_column(
        enum_column(MemberStatus, "member_status_enum"),
        nullable=False,
        default=MemberStatus.ACTIVE,
        index=True,
        doc="Member status",
        info={"enum": [e.value for e in MemberStatus]}
    )

    source: Mapped[MemberSource] = mapped_column(
        enum_column(MemberSource, "member_source_enum"),
        nullable=False,
        default=MemberSource.WALK_IN,
        doc="How the member joined"
    )

    referred_by: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)

    converted_from_lead_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("leads.id", ondelete="SET NULL"),
        nullable=True,
        doc="Lead this member was converted from"
    )

    assigned_slot_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("session_slots.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        doc="Standing session slot"
    )

    classes_attended: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0
    )

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # === Helpers ===

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def contact_number(self) -> str:
        """Number used for WhatsApp messages"""
        return self.whatsapp_number or self.phone

    def __repr__(self) -> str:
        return f"<Member(id={self.id}, email='{self.email}', status={self.status})>"
