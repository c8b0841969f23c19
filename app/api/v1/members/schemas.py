"""
Pydantic schemas for the Members module.
"""
from datetime import date, datetime
from typing import Optional, List, Dict, Any

from pydantic import BaseModel, EmailStr, Field, field_validator, ConfigDict

from app.models.enums import Gender, MemberSource, MemberStatus


class EmergencyContact(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    phone: str = Field(..., min_length=5, max_length=30)
    relationship: Optional[str] = Field(None, max_length=50)


class MedicalCondition(BaseModel):
    condition: str = Field(..., min_length=1, max_length=200)
    since: Optional[str] = None
    notes: Optional[str] = None


# =============================================================================
# MEMBER SCHEMAS
# =============================================================================

class MemberBase(BaseModel):
    """Fields shared by create and response."""
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr = Field(..., description="Unique contact email")
    phone: str = Field(..., min_length=5, max_length=30)
    whatsapp_number: Optional[str] = Field(None, max_length=30)
    date_of_birth: Optional[date] = None
    age: Optional[int] = Field(None, ge=0, le=120)
    gender: Optional[Gender] = None
    address: Optional[Dict[str, Any]] = None
    emergency_contact: Optional[EmergencyContact] = None
    medical_conditions: List[MedicalCondition] = Field(default_factory=list)
    health_notes: Optional[str] = None
    consent_records: List[Dict[str, Any]] = Field(default_factory=list)
    source: MemberSource = MemberSource.WALK_IN
    referred_by: Optional[str] = Field(None, max_length=200)
    notes: Optional[str] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class MemberCreate(MemberBase):
    """Schema to create a member."""
    status: MemberStatus = MemberStatus.ACTIVE
    assigned_slot_id: Optional[str] = None


class MemberUpdate(BaseModel):
    """Schema to update a member (all fields optional)."""
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, min_length=5, max_length=30)
    whatsapp_number: Optional[str] = None
    date_of_birth: Optional[date] = None
    age: Optional[int] = Field(None, ge=0, le=120)
    gender: Optional[Gender] = None
    address: Optional[Dict[str, Any]] = None
    emergency_contact: Optional[EmergencyContact] = None
    medical_conditions: Optional[List[MedicalCondition]] = None
    health_notes: Optional[str] = None
    consent_records: Optional[List[Dict[str, Any]]] = None
    status: Optional[MemberStatus] = None
    referred_by: Optional[str] = None
    assigned_slot_id: Optional[str] = None
    classes_attended: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().lower() if v else v


class MemberResponse(BaseModel):
    """Member returned by the API."""
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
    emergency_contact: Optional[Dict[str, Any]] = None
    medical_conditions: List[Dict[str, Any]] = []
    health_notes: Optional[str] = None
    consent_records: List[Dict[str, Any]] = []
    status: MemberStatus
    source: MemberSource
    referred_by: Optional[str] = None
    converted_from_lead_id: Optional[str] = None
    assigned_slot_id: Optional[str] = None
    classes_attended: int = 0
    notes: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class MemberList(BaseModel):
    """Paginated list of members."""
    items: List[MemberResponse]
    total: int
    page: int
    size: int
    pages: int
