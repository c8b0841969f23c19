"""
Pydantic schemas for the Messaging module.
"""
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class WhatsAppMessage(BaseModel):
    """Message ready to open in WhatsApp."""
    phone: str
    message: str
    link: str


class TemplateChoice(BaseModel):
    template_index: int = Field(0, ge=0, description="Clamped to the last template of the group")


class ClassReminderRequest(BaseModel):
    slot_id: Optional[str] = Field(None, description="Defaults to the member's assigned slot")
    class_date: str = Field("tomorrow", max_length=50)


class RegistrationLinkRequest(BaseModel):
    link: str = Field(..., min_length=1)


class NotificationRequest(TemplateChoice):
    extra: Dict[str, Any] = Field(default_factory=dict, description="Additional placeholders")
