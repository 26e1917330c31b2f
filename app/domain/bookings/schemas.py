"""Booking domain schemas"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ...shared.validators import to_naive_utc

AppointmentStatus = Literal["pending", "confirmed", "cancelled", "completed", "no_show", "rescheduled"]


class BookingCreate(BaseModel):
    serviceId: str
    startTime: datetime
    endTime: Optional[datetime] = None  # derived from the service duration when omitted
    notes: Optional[str] = Field(default=None, max_length=1000)

    normalize_times = field_validator("startTime", "endTime")(to_naive_utc)

    @model_validator(mode="after")
    def end_after_start(self):
        if self.endTime is not None and self.endTime <= self.startTime:
            raise ValueError("End time must be after start time")
        return self


class BookingUpdate(BaseModel):
    """Reschedule a booking and/or edit its notes"""

    startTime: Optional[datetime] = None
    endTime: Optional[datetime] = None
    notes: Optional[str] = Field(default=None, max_length=1000)

    normalize_times = field_validator("startTime", "endTime")(to_naive_utc)

    @model_validator(mode="after")
    def end_after_start(self):
        if self.startTime and self.endTime and self.endTime <= self.startTime:
            raise ValueError("End time must be after start time")
        if self.endTime is not None and self.startTime is None:
            raise ValueError("startTime is required when changing endTime")
        return self


class BookingCancel(BaseModel):
    reason: Optional[str] = Field(default=None, max_length=500)


class BookingStatusUpdate(BaseModel):
    status: AppointmentStatus
    reason: Optional[str] = Field(default=None, max_length=500)


class BookingServiceSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    duration: int
    price: float


class BookingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    service_id: str
    business_id: str
    user_id: str
    start_time: datetime
    end_time: datetime
    notes: Optional[str] = None
    status: str
    is_paid: bool
    cancellation_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    service: Optional[BookingServiceSummary] = None
