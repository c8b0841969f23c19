"""
Lead model - prospects moving through the sales funnel.

A lead can book trial classes and is eventually converted into a
Member (see ``LeadService.convert_to_member``).
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy import String, Integer, Date, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from app.database.base_class import Base
from app.models.mixins import UUIDPrimaryKeyMixin, TimestampMixin
from app.models.enums import (
    Gender,
    LeadSource,
    LeadStatus,
    LeadTrialStatus,
    SessionType,
)
from app.models.types import JSONBCompatible, enum_column


class Lead(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """
    Prospect record.

    The identity fields mirror Member so conversion is a plain copy.
    """

    __tablename__ = "leads"
    __table_args__ = {
        "comment": "Prospects (CRM funnel)"
    }

    # === Identity ===

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        doc="Contact email (not unique: a prospect may enquire twice)"
    )

    phone: Mapped[str] = mapped_column(String(30), nullable=False)
    whatsapp_number: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    date_of_birth: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    age: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    gender: Mapped[Optional[Gender]] = mapped_column(
        enum_column(Gender, "gender_enum"),
        nullable=True
    )

    address: Mapped[Optional[dict]] = mapped_column(JSONBCompatible, nullable=True)

    emergency_contact_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    emergency_contact_phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)

    medical_conditions: Mapped[list] = mapped_column(
        JSONBCompatible,
        nullable=False,
        default=list
    )

    health_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    consent_records: Mapped[list] = mapped_column(
        JSONBCompatible,
        nullable=False,
        default=list
    )

    # === Funnel ===

    status: Mapped[LeadStatus] = mapped_column(
        enum_column(LeadStatus, "lead_status_enum"),
        nullable=False,
        default=LeadStatus.NEW,
        index=True,
        doc="Funnel stage",
        info={"enum": [e.value for e in LeadStatus]}
    )

    source: Mapped[LeadSource] = mapped_column(
        enum_column(LeadSource, "lead_source_enum"),
        nullable=False,
        default=LeadSource.WALK_IN
    )

    # === Preferences ===

    preferred_slot_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("session_slots.id", ondelete="SET NULL"),
        nullable=True
    )

    preferred_session_type: Mapped[Optional[SessionType]] = mapped_column(
        enum_column(SessionType, "session_type_enum"),
        nullable=True
    )

    interested_plan_ids: Mapped[list] = mapped_column(
        JSONBCompatible,
        nullable=False,
        default=list,
        doc="Membership plan ids the lead asked about"
    )

    # === Trial ===

    trial_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    trial_slot_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("session_slots.id", ondelete="SET NULL"),
        nullable=True
    )

    trial_status: Mapped[Optional[LeadTrialStatus]] = mapped_column(
        enum_column(LeadTrialStatus, "lead_trial_status_enum"),
        nullable=True
    )

    trial_feedback: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # === Conversion ===

    converted_to_member_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        nullable=True,
        doc="Member created from this lead"
    )

    conversion_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    # === Follow-up ===

    last_contact_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    next_follow_up_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True, index=True)
    follow_up_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def contact_number(self) -> str:
        return self.whatsapp_number or self.phone

    @property
    def is_converted(self) -> bool:
        return self.status == LeadStatus.CONVERTED

    def __repr__(self) -> str:
        return f"<Lead(id={self.id}, email='{self.email}', status={self.status})>"
