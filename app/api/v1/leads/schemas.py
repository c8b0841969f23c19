"""
Pydantic schemas for the Leads module.
"""
from datetime import date, datetime
from typing import Optional, List, Dict, Any

from pydantic import BaseModel, EmailStr, Field, field_validator, ConfigDict

from app.models.enums import Gender, LeadSource, LeadStatus, LeadTrialStatus, SessionType


class LeadBase(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: str = Field(..., min_length=5, max_length=30)
    whatsapp_number: Optional[str] = Field(None, max_length=30)
    date_of_birth: Optional[date] = None
    age: Optional[int] = Field(None, ge=0, le=120)
    gender: Optional[Gender] = None
    address: Optional[Dict[str, Any]] = None
    emergency_contact_name: Optional[str] = Field(None, max_length=200)
    emergency_contact_phone: Optional[str] = Field(None, max_length=30)
    medical_conditions: List[Dict[str, Any]] = Field(default_factory=list)
    health_notes: Optional[str] = None
    consent_records: List[Dict[str, Any]] = Field(default_factory=list)
    source: LeadSource = LeadSource.WALK_IN
    preferred_slot_id: Optional[str] = None
    preferred_session_type: Optional[SessionType] = None
    interested_plan_ids: List[str] = Field(default_factory=list)
    next_follow_up_date: Optional[date] = None
    follow_up_notes: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class LeadCreate(LeadBase):
    status: LeadStatus = LeadStatus.NEW


class LeadUpdate(BaseModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, min_length=5, max_length=30)
    whatsapp_number: Optional[str] = None
    date_of_birth: Optional[date] = None
    age: Optional[int] = Field(None, ge=0, le=120)
    gender: Optional[Gender] = None
    address: Optional[Dict[str, Any]] = None
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    medical_conditions: Optional[List[Dict[str, Any]]] = None
    health_notes: Optional[str] = None
    status: Optional[LeadStatus] = None
    source: Optional[LeadSource] = None
    preferred_slot_id: Optional[str] = None
    preferred_session_type: Optional[SessionType] = None
    interested_plan_ids: Optional[List[str]] = None
    trial_feedback: Optional[str] = None
    last_contact_date: Optional[date] = None
    next_follow_up_date: Optional[date] = None
    follow_up_notes: Optional[str] = None
    notes: Optional[str] = None


class LeadResponse(BaseModel):
    id: str
    first_name: str
    last_name: str
    full_name: str
    email: str
    phone: str
    whatsapp_number: Optional[str] = None
    date_of_birth: Optional[date] = None
    age: Optional[int] = None
    gender: Optional[Gender] = None
    address: Optional[Dict[str, Any]] = None
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    medical_conditions: List[Dict[str, Any]] = []
    health_notes: Optional[str] = None
    status: LeadStatus
    source: LeadSource
    preferred_slot_id: Optional[str] = None
    preferred_session_type: Optional[SessionType] = None
    interested_plan_ids: List[str] = []
    trial_date: Optional[date] = None
    trial_slot_id: Optional[str] = None
    trial_status: Optional[LeadTrialStatus] = None
    trial_feedback: Optional[str] = None
    converted_to_member_id: Optional[str] = None
    conversion_date: Optional[date] = None
    last_contact_date: Optional[date] = None
    next_follow_up_date: Optional[date] = None
    follow_up_notes: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class LeadList(BaseModel):
    items: List[LeadResponse]
    total: int
    page: int
    size: int
    pages: int


class LeadConversionResponse(BaseModel):
    """Lead after conversion and the member created from it."""
    lead_id: str
    member_id: str
    member_status: str
