"""
StudioSettings model - single row (id=1) holding studio-wide configuration.

Read and written only through ``app.services.studio_settings.SettingsStore``.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from sqlalchemy import String, Integer, Boolean, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.database.base_class import Base
from app.models.mixins import TimestampMixin
from app.models.types import JSONBCompatible


SETTINGS_ROW_ID = 1


class StudioSettings(TimestampMixin, Base):
    """
    Studio configuration.

    Attributes:
        studio_name ... whatsapp_number: Studio identity printed on invoices
        working_hours: {"monday": {"open": "06:00", "close": "21:00", "is_open": true}, ...}
        renewal_reminder_days: Days before expiry to send renewal reminders
        invoice_prefix / receipt_prefix: Document number prefixes
        holidays: [{"date": "01-26", "name": "...", "recurring_yearly": true}]
        whatsapp_templates: Versioned envelope {"schema_version": 2, ...}
    """

    __tablename__ = "studio_settings"
    __table_args__ = {
        "comment": "Studio-wide configuration (single row)"
    }

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        default=SETTINGS_ROW_ID,
        autoincrement=False
    )

    # === Identity ===

    studio_name: Mapped[str] = mapped_column(String(200), nullable=False, default="My Yoga Studio")
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    website: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    whatsapp_number: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)

    logo: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        doc="Logo image as a base64 data URL"
    )

    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="INR")
    timezone: Mapped[str] = mapped_column(String(50), nullable=False, default="Asia/Kolkata")

    working_hours: Mapped[dict] = mapped_column(JSONBCompatible, nullable=False, default=dict)

    terms_and_conditions: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    health_disclaimer: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # === Reminders ===

    renewal_reminder_days: Mapped[int] = mapped_column(Integer, nullable=False, default=7)
    class_reminder_hours: Mapped[int] = mapped_column(Integer, nullable=False, default=24)

    # === Billing ===

    tax_rate: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False, default=Decimal("0"))
    invoice_prefix: Mapped[str] = mapped_column(String(10), nullable=False, default="INV")
    invoice_start_number: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    receipt_prefix: Mapped[str] = mapped_column(String(10), nullable=False, default="RCP")
    receipt_start_number: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    invoice_template: Mapped[dict] = mapped_column(JSONBCompatible, nullable=False, default=dict)

    # === Trials ===

    trial_class_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    max_trials_per_person: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    # === Calendar & messaging ===

    holidays: Mapped[list] = mapped_column(JSONBCompatible, nullable=False, default=list)

    whatsapp_templates: Mapped[dict] = mapped_column(
        JSONBCompatible,
        nullable=False,
        default=dict,
        doc="Versioned WhatsApp template envelope"
    )

    def __repr__(self) -> str:
        return f"<StudioSettings(name='{self.studio_name}')>"
