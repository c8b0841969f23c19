"""
Pydantic schemas for the Trials module.
"""
import datetime as dt
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from app.models.enums import TrialStatus


class TrialBookingCreate(BaseModel):
    lead_id: str
    slot_id: str
    date: dt.date
    is_exception: bool = False
    notes: Optional[str] = None


class TrialBookingUpdate(BaseModel):
    confirmation_sent: Optional[bool] = None
    reminder_sent: Optional[bool] = None
    notes: Optional[str] = None


class TrialBookingResponse(BaseModel):
    id: str
    lead_id: str
    slot_id: str
    date: dt.date
    status: TrialStatus
    is_exception: bool
    confirmation_sent: bool
    reminder_sent: bool
    notes: Optional[str] = None
    created_at: dt.datetime
    updated_at: Optional[dt.datetime] = None

    model_config = ConfigDict(from_attributes=True)


class TrialBookingList(BaseModel):
    items: List[TrialBookingResponse]
    total: int
    page: int
    size: int
    pages: int
