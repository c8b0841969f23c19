"""
Pydantic schemas for the Settings module.
"""
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class StudioSettingsUpdate(BaseModel):
    """Partial update; omitted fields keep their value."""
    studio_name: Optional[str] = Field(None, min_length=1, max_length=200)
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    whatsapp_number: Optional[str] = None
    logo: Optional[str] = Field(None, description="Base64 image")
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    timezone: Optional[str] = None
    working_hours: Optional[Dict[str, Any]] = None
    terms_and_conditions: Optional[str] = None
    health_disclaimer: Optional[str] = None
    renewal_reminder_days: Optional[int] = Field(None, ge=0)
    class_reminder_hours: Optional[int] = Field(None, ge=0)
    tax_rate: Optional[Decimal] = Field(None, ge=0, le=100)
    invoice_prefix: Optional[str] = Field(None, min_length=1, max_length=10)
    invoice_start_number: Optional[int] = Field(None, ge=1)
    receipt_prefix: Optional[str] = Field(None, min_length=1, max_length=10)
    receipt_start_number: Optional[int] = Field(None, ge=1)
    invoice_template: Optional[Dict[str, Any]] = None
    trial_class_enabled: Optional[bool] = None
    max_trials_per_person: Optional[int] = Field(None, ge=0)
    holidays: Optional[List[Dict[str, Any]]] = None
    whatsapp_templates: Optional[Dict[str, Any]] = None


class HolidayResponse(BaseModel):
    date: str
    name: str
    recurring_yearly: bool = False
