"""
Pydantic schemas for session plans and their allocations.
"""
import datetime as dt
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.enums import AllocationStatus, SessionPlanLevel


# =============================================================================
# SESSION PLANS
# =============================================================================

class SessionPlanBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    level: SessionPlanLevel = SessionPlanLevel.BEGINNER
    sections: List[Dict[str, Any]] = Field(default_factory=list, description="Ordered class sections (warm-up, asanas...)")
    is_active: bool = True


class SessionPlanCreate(SessionPlanBase):
    pass


class SessionPlanUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    level: Optional[SessionPlanLevel] = None
    sections: Optional[List[Dict[str, Any]]] = None
    is_active: Optional[bool] = None


class SessionPlanResponse(SessionPlanBase):
    id: str
    created_at: dt.datetime
    updated_at: Optional[dt.datetime] = None

    model_config = ConfigDict(from_attributes=True)


class SessionPlanList(BaseModel):
    items: List[SessionPlanResponse]
    total: int
    page: int
    size: int
    pages: int


# =============================================================================
# ALLOCATIONS
# =============================================================================

class AllocationCreate(BaseModel):
    session_plan_id: str
    slot_id: str
    date: dt.date
    allocated_by: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = None


class AllocateAllRequest(BaseModel):
    session_plan_id: str
    date: dt.date
    allocated_by: Optional[str] = Field(None, max_length=100)


class AllocationUpdate(BaseModel):
    session_plan_id: Optional[str] = None
    allocated_by: Optional[str] = None
    notes: Optional[str] = None


class MarkExecutedRequest(BaseModel):
    execution_id: Optional[str] = Field(None, max_length=100)


class AllocationResponse(BaseModel):
    id: str
    session_plan_id: str
    slot_id: str
    date: dt.date
    status: AllocationStatus
    execution_id: Optional[str] = None
    allocated_by: Optional[str] = None
    notes: Optional[str] = None
    created_at: dt.datetime
    updated_at: Optional[dt.datetime] = None

    model_config = ConfigDict(from_attributes=True)


class AllocationList(BaseModel):
    items: List[AllocationResponse]
    total: int
    page: int
    size: int
    pages: int
