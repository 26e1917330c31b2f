"""Staff domain schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ...shared.validators import validate_email, validate_phone
from ..businesses.schemas import WorkingHoursEntry


def _unique_days(hours: Optional[list[WorkingHoursEntry]]):
    if hours is None:
        return hours
    days = [entry.dayOfWeek for entry in hours]
    if len(days) != len(set(days)):
        raise ValueError("Each day of the week may appear only once")
    return hours


class StaffCreate(BaseModel):
    """Schema for adding a staff member to a business"""

    name: str = Field(min_length=1, max_length=100)
    email: str = Field(min_length=3, max_length=255)
    phone: Optional[str] = None
    role: str = Field(min_length=1, max_length=100)
    serviceIds: list[str] = Field(default_factory=list)
    workingHours: list[WorkingHoursEntry] = Field(default_factory=list, max_length=7)

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v):
        return validate_phone(v)

    @field_validator("workingHours")
    @classmethod
    def check_days(cls, v):
        return _unique_days(v)


class StaffUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    email: Optional[str] = Field(default=None, min_length=3, max_length=255)
    phone: Optional[str] = None
    role: Optional[str] = Field(default=None, min_length=1, max_length=100)
    serviceIds: Optional[list[str]] = None
    workingHours: Optional[list[WorkingHoursEntry]] = Field(default=None, max_length=7)
    isActive: Optional[bool] = None

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v):
        return validate_phone(v)

    @field_validator("workingHours")
    @classmethod
    def check_days(cls, v):
        return _unique_days(v)


class StaffResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    business_id: str
    name: str
    email: str
    phone: Optional[str] = None
    role: str
    service_ids: list[str] = []
    working_hours: list[dict] = []
    is_active: bool
    created_at: Optional[datetime] = None
