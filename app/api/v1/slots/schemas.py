"""
Pydantic schemas for the Slots module.
"""
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.models.enums import SessionType

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class SessionSlotBase(BaseModel):
    start_time: str = Field(..., pattern=TIME_PATTERN, examples=["07:30"])
    end_time: str = Field(..., pattern=TIME_PATTERN, examples=["08:30"])
    display_name: str = Field(..., min_length=1, max_length=100)
    capacity: int = Field(10, ge=0)
    exception_capacity: int = Field(1, ge=0)
    session_type: SessionType = SessionType.OFFLINE
    is_active: bool = True

    @model_validator(mode="after")
    def end_after_start(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class SessionSlotCreate(SessionSlotBase):
    pass


class SessionSlotUpdate(BaseModel):
    start_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    end_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    display_name: Optional[str] = Field(None, min_length=1, max_length=100)
    capacity: Optional[int] = Field(None, ge=0)
    exception_capacity: Optional[int] = Field(None, ge=0)
    session_type: Optional[SessionType] = None
    is_active: Optional[bool] = None


class CapacityUpdate(BaseModel):
    capacity: int = Field(..., ge=0)
    exception_capacity: Optional[int] = Field(None, ge=0)


class SessionSlotResponse(BaseModel):
    id: str
    start_time: str
    end_time: str
    display_name: str
    capacity: int
    exception_capacity: int
    total_capacity: int
    session_type: SessionType
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class SessionSlotList(BaseModel):
    items: List[SessionSlotResponse]
    total: int
    page: int
    size: int
    pages: int


class SlotAvailability(BaseModel):
    """Places used and left in a slot on one day."""
    slot_id: str
    display_name: str
    date: date
    regular_bookings: int
    exception_bookings: int
    trial_bookings: int
    total_capacity: int
    available_regular: int
    available_exception: int
    is_full: bool


class CapacityCheckResponse(BaseModel):
    available: bool
    is_exception_only: bool
    current_bookings: int
    normal_capacity: int
    total_capacity: int
    message: str
