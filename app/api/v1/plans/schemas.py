"""
Pydantic schemas for the membership Plans module.
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.enums import PlanType, SessionType


class MembershipPlanBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    type: PlanType = PlanType.MONTHLY
    description: Optional[str] = None
    price: Decimal = Field(..., ge=0, decimal_places=2)
    duration_months: int = Field(..., ge=1, le=36)
    classes_included: Optional[int] = Field(None, ge=0, description="None means unlimited")
    allowed_session_types: List[SessionType] = Field(default_factory=lambda: [SessionType.OFFLINE])
    features: List[str] = Field(default_factory=list)
    is_active: bool = True


class MembershipPlanCreate(MembershipPlanBase):
    pass


class MembershipPlanUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    type: Optional[PlanType] = None
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    duration_months: Optional[int] = Field(None, ge=1, le=36)
    classes_included: Optional[int] = Field(None, ge=0)
    allowed_session_types: Optional[List[SessionType]] = None
    features: Optional[List[str]] = None
    is_active: Optional[bool] = None


class MembershipPlanResponse(MembershipPlanBase):
    id: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class MembershipPlanList(BaseModel):
    items: List[MembershipPlanResponse]
    total: int
    page: int
    size: int
    pages: int
