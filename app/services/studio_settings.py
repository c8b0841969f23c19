"""
Studio settings: an explicit object, loaded once and saved explicitly.

    store = SettingsStore(repo)
    studio = store.get()             # loads (and migrates) on first use
    store.update({"tax_rate": 18})   # merge + explicit save

Services receive the loaded ``StudioSettingsData`` as an argument; nothing
reads settings from a module global.
"""

import logging
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models import SETTINGS_ROW_ID, StudioSettings
from app.repositories.base import Repository
from app.services.whatsapp import detect_template_version, migrate_templates, default_templates

logger = logging.getLogger(__name__)


# =============================================================================
# DEFAULTS
# =============================================================================

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

DEFAULT_HOLIDAYS = [
    {"date": "01-26", "name": "Republic Day", "recurring_yearly": True},
    {"date": "08-15", "name": "Independence Day", "recurring_yearly": True},
    {"date": "10-02", "name": "Gandhi Jayanti", "recurring_yearly": True},
    {"date": "12-25", "name": "Christmas", "recurring_yearly": True},
]

DEFAULT_TERMS = (
    "1. Memberships are non-transferable and non-refundable.\n"
    "2. Members may cancel their membership with 7 days notice.\n"
    "3. Sessions run Monday to Friday. Weekend and public holiday sessions are not included.\n"
    "4. Please arrive 10 minutes before your scheduled session.\n"
    "5. Inform instructors of any injuries or health conditions before class."
)

DEFAULT_HEALTH_DISCLAIMER = (
    "Yoga involves physical activity that may be strenuous. You participate at your own risk "
    "and confirm you have no medical condition preventing participation. Inform the instructor "
    "of any injury, surgery, pregnancy or medical condition before each class."
)


def default_working_hours() -> Dict[str, Dict[str, Any]]:
    return {
        day: {"open": "06:00", "close": "21:00", "is_open": day not in ("saturday", "sunday")}
        for day in WEEKDAYS
    }


def default_holidays() -> List[Dict[str, Any]]:
    return [dict(h) for h in DEFAULT_HOLIDAYS]


# =============================================================================
# SETTINGS OBJECT
# =============================================================================

class StudioSettingsData(BaseModel):
    """In-memory studio settings, validated."""

    model_config = ConfigDict(from_attributes=True)

    studio_name: str = "My Yoga Studio"
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    whatsapp_number: Optional[str] = None
    logo: Optional[str] = None

    currency: str = Field("INR", min_length=3, max_length=3)
    timezone: str = "Asia/Kolkata"
    working_hours: Dict[str, Any] = Field(default_factory=default_working_hours)

    terms_and_conditions: Optional[str] = DEFAULT_TERMS
    health_disclaimer: Optional[str] = DEFAULT_HEALTH_DISCLAIMER

    renewal_reminder_days: int = Field(7, ge=0)
    class_reminder_hours: int = Field(24, ge=0)

    tax_rate: Decimal = Field(Decimal("0"), ge=0, le=100)
    invoice_prefix: str = Field("INV", min_length=1, max_length=10)
    invoice_start_number: int = Field(1, ge=1)
    receipt_prefix: str = Field("RCP", min_length=1, max_length=10)
    receipt_start_number: int = Field(1, ge=1)
    invoice_template: Dict[str, Any] = Field(default_factory=dict)

    trial_class_enabled: bool = True
    max_trials_per_person: int = Field(1, ge=0)

    holidays: List[Dict[str, Any]] = Field(default_factory=default_holidays)
    whatsapp_templates: Dict[str, Any] = Field(default_factory=default_templates)

    @field_validator("currency")
    @classmethod
    def currency_upper(cls, v: str) -> str:
        return v.upper()

    @field_validator("whatsapp_templates", mode="before")
    @classmethod
    def empty_templates_to_default(cls, v):
        return v or default_templates()


# =============================================================================
# STORE
# =============================================================================

class SettingsStore:
    """
    Load-once / explicit-save access to the single settings row.

    The row is read on the first ``load``/``get`` only. Template migration
    happens at that load; the migrated form reaches storage on the next
    ``save``.
    """

    def __init__(self, repo: Repository):
        self.repo = repo
        self._data: Optional[StudioSettingsData] = None
        self.migrated_on_load = False

    def load(self) -> StudioSettingsData:
        row = self.repo.get(StudioSettings, SETTINGS_ROW_ID)

        if row is None:
            logger.info("⚙️ No studio settings found, creating defaults")
            data = StudioSettingsData()
            self._data = data
            self.save(data)
            return data

        version = detect_template_version(row.whatsapp_templates)
        data = StudioSettingsData.model_validate(row)
        data.whatsapp_templates = migrate_templates(row.whatsapp_templates)
        self.migrated_on_load = version != detect_template_version(data.whatsapp_templates)
        if self.migrated_on_load:
            logger.info(f"⚙️ WhatsApp templates migrated from schema v{version}, pending save")

        self._data = data
        return data

    def get(self) -> StudioSettingsData:
        if self._data is None:
            return self.load()
        return self._data

    def save(self, data: StudioSettingsData) -> StudioSettingsData:
        row = self.repo.get(StudioSettings, SETTINGS_ROW_ID)
        is_new = row is None
        if is_new:
            row = StudioSettings(id=SETTINGS_ROW_ID)

        for field, value in data.model_dump().items():
            setattr(row, field, value)

        if is_new:
            self.repo.add(row)
        else:
            self.repo.save(row)

        self._data = data
        self.migrated_on_load = False
        logger.info("✅ Studio settings saved")
        return data

    def update(self, changes: Mapping[str, Any]) -> StudioSettingsData:
        merged = {**self.get().model_dump(), **dict(changes)}
        if "whatsapp_templates" in changes:
            merged["whatsapp_templates"] = migrate_templates(changes["whatsapp_templates"])
        return self.save(StudioSettingsData.model_validate(merged))

    def reset(self) -> StudioSettingsData:
        return self.save(StudioSettingsData())
