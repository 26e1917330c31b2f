"""Admin domain schemas"""

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from ...schemas import UserResponse

UserRole = Literal["user", "business", "admin", "staff"]
UserStatus = Literal["active", "inactive", "suspended"]
BusinessStatus = Literal["pending", "approved", "rejected", "suspended"]
CategoryKind = Literal["business", "service"]
SettingsSection = Literal["general", "security", "email", "payment", "integration"]
ReportStatus = Literal["pending", "approved", "rejected", "dismissed"]


class AdminStats(BaseModel):
    total_users: int
    users_by_role: dict[str, int]
    total_businesses: int
    pending_businesses: int
    total_bookings: int
    bookings_by_status: dict[str, int]
    completed_payments: int
    total_revenue: float
    pending_reports: int


class UserListResponse(BaseModel):
    items: list[UserResponse]
    total: int
    page: int
    limit: int


class AdminUserUpdate(BaseModel):
    role: Optional[UserRole] = None
    status: Optional[UserStatus] = None


class BusinessStatusUpdate(BaseModel):
    status: BusinessStatus
    reason: Optional[str] = Field(default=None, max_length=500)


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    slug: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    icon: Optional[str] = Field(default=None, max_length=100)


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    slug: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    icon: Optional[str] = Field(default=None, max_length=100)


class SettingsUpdate(BaseModel):
    settings: dict[str, Any]


class ReportResolve(BaseModel):
    action: Literal["approve", "reject"]
    reason: Optional[str] = Field(default=None, max_length=500)
