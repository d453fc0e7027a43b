"""Appointment domain schemas - Pydantic models for validation"""

from datetime import date, datetime, time
from typing import Optional

from pydantic import BaseModel, Field


class SlotGenerate(BaseModel):
    """Cut a day's time window into bookable slots"""

    date: date
    start_time: time
    end_time: time
    interval_minutes: int = Field(gt=0, le=24 * 60)
    rate_per_hour: float = Field(ge=0)
    product_id: Optional[str] = None


class SlotAvailabilityUpdate(BaseModel):
    is_available: bool


class SlotResponse(BaseModel):
    id: str
    owner_id: str
    start_time: datetime
    end_time: datetime
    duration_minutes: Optional[int] = None
    rate_per_hour: float
    is_available: bool
    product_id: Optional[str] = None

    class Config:
        from_attributes = True


class BookingCreate(BaseModel):
    questionnaire_response_id: Optional[str] = None


class AppointmentResponse(BaseModel):
    id: str
    slot_id: str
    owner_id: str
    requester_id: str
    start_time: datetime
    end_time: datetime
    duration_minutes: int
    rate_per_hour: float
    total_amount: float
    status: str
    questionnaire_response_id: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
