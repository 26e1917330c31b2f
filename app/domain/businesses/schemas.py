"""Business domain schemas - profiles, directory search, hours and availability"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ...shared.validators import (
    to_naive_utc,
    validate_email,
    validate_phone,
    validate_time_of_day,
)
from ..services.schemas import ServiceResponse


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str
    description: Optional[str] = None
    icon: Optional[str] = None


class BusinessCreate(BaseModel):
    """Schema for registering a business"""

    name: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1, max_length=500)
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = Field(default=None, max_length=500)
    city: Optional[str] = Field(default=None, max_length=100)
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    website: Optional[str] = Field(default=None, max_length=500)
    logoUrl: Optional[str] = Field(default=None, max_length=500)
    categoryIds: list[str] = Field(default_factory=list)

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v):
        return validate_phone(v)

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)


class BusinessUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, min_length=1, max_length=500)
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = Field(default=None, max_length=500)
    city: Optional[str] = Field(default=None, max_length=100)
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    website: Optional[str] = Field(default=None, max_length=500)
    logoUrl: Optional[str] = Field(default=None, max_length=500)
    isActive: Optional[bool] = None
    categoryIds: Optional[list[str]] = None

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v):
        return validate_phone(v)

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)


class BusinessResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    owner_id: str
    name: str
    description: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    website: Optional[str] = None
    logo_url: Optional[str] = None
    status: str
    is_active: bool
    categories: list[CategoryResponse] = []
    created_at: Optional[datetime] = None


class BusinessSummary(BusinessResponse):
    """Directory entry with its review aggregate"""

    average_rating: Optional[float] = None
    review_count: int = 0


class BusinessSearchResponse(BaseModel):
    items: list[BusinessSummary]
    total: int
    limit: int
    offset: int


class BreakPeriod(BaseModel):
    start: str
    end: str

    @field_validator("start", "end")
    @classmethod
    def check_time(cls, v):
        return validate_time_of_day(v)

    @model_validator(mode="after")
    def end_after_start(self):
        if self.end <= self.start:
            raise ValueError("Break end must be after its start")
        return self


class WorkingHoursEntry(BaseModel):
    dayOfWeek: int = Field(ge=0, le=6)  # 0 = Monday
    isOpen: bool = True
    openTime: Optional[str] = None
    closeTime: Optional[str] = None
    breaks: list[BreakPeriod] = Field(default_factory=list)

    @field_validator("openTime", "closeTime")
    @classmethod
    def check_time(cls, v):
        return validate_time_of_day(v)

    @model_validator(mode="after")
    def check_interval(self):
        if not self.isOpen:
            return self
        if not self.openTime or not self.closeTime:
            raise ValueError("Open days need both openTime and closeTime")
        if self.closeTime <= self.openTime:
            raise ValueError("closeTime must be after openTime")
        for b in self.breaks:
            if b.start < self.openTime or b.end > self.closeTime:
                raise ValueError("Breaks must fall inside opening hours")
        return self


class WorkingHoursUpdate(BaseModel):
    hours: list[WorkingHoursEntry] = Field(min_length=1, max_length=7)

    @field_validator("hours")
    @classmethod
    def unique_days(cls, v):
        days = [entry.dayOfWeek for entry in v]
        if len(days) != len(set(days)):
            raise ValueError("Each day of the week may appear only once")
        return v


class WorkingHoursResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    day_of_week: int
    is_open: bool
    open_time: Optional[str] = None
    close_time: Optional[str] = None
    breaks: list[BreakPeriod] = []


class BlockedTimeCreate(BaseModel):
    startTime: datetime
    endTime: datetime
    reason: Optional[str] = Field(default=None, max_length=255)

    normalize_times = field_validator("startTime", "endTime")(to_naive_utc)

    @model_validator(mode="after")
    def end_after_start(self):
        if self.endTime <= self.startTime:
            raise ValueError("End time must be after start time")
        return self


class BlockedTimeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    business_id: str
    start_time: datetime
    end_time: datetime
    reason: Optional[str] = None


class TimeSlot(BaseModel):
    start: datetime
    end: datetime


class AvailableSlotsResponse(BaseModel):
    business_id: str
    service_id: str
    date: date
    slots: list[TimeSlot]


class BusinessDetails(BaseModel):
    business: BusinessSummary
    services: list[ServiceResponse]
    working_hours: list[WorkingHoursResponse]


class ServicePerformance(BaseModel):
    service_id: str
    name: str
    bookings: int
    paid_bookings: int
    revenue: float


class BusinessAnalytics(BaseModel):
    business_id: str
    total_bookings: int
    paid_bookings: int
    bookings_by_status: dict[str, int]
    total_revenue: float
    average_rating: Optional[float] = None
    review_count: int = 0
    services: list[ServicePerformance]
