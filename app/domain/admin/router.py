"""Admin router - FastAPI endpoints for platform administrators"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import require_admin
from ...database import get_db
from ...models import User
from ...schemas import UserResponse
from ..businesses.schemas import BusinessResponse, CategoryResponse
from ..reviews.schemas import ContentReportResponse
from .schemas import (
    AdminStats,
    AdminUserUpdate,
    BusinessStatus,
    BusinessStatusUpdate,
    CategoryCreate,
    CategoryKind,
    CategoryUpdate,
    ReportResolve,
    ReportStatus,
    SettingsSection,
    SettingsUpdate,
    UserListResponse,
    UserRole,
    UserStatus,
)
from .service import AdminService

router = APIRouter(prefix="/admin", tags=["Admin"])


def get_admin_service(db: Session = Depends(get_db)) -> AdminService:
    """Dependency injection for AdminService"""
    return AdminService(db)


@router.get("/stats", response_model=AdminStats)
async def get_stats(
    _: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    return service.get_stats()


# ============================================================================
# USERS
# ============================================================================


@router.get("/users", response_model=UserListResponse)
async def list_users(
    search: Optional[str] = Query(None, max_length=100),
    role: Optional[UserRole] = Query(None),
    status: Optional[UserStatus] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    _: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    return service.list_users(search, role, status, page, limit)


@router.patch("/users/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    data: AdminUserUpdate,
    admin: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    return service.update_user(user_id, data, admin)


@router.delete("/users/{user_id}")
async def delete_user(
    user_id: str,
    admin: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    service.delete_user(user_id, admin)
    return {"message": "User deleted"}


# ============================================================================
# BUSINESSES
# ============================================================================


@router.get("/businesses", response_model=list[BusinessResponse])
async def list_businesses(
    status: Optional[BusinessStatus] = Query(None),
    _: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    return service.list_businesses(status)


@router.patch("/businesses/{business_id}/status", response_model=BusinessResponse)
async def set_business_status(
    business_id: str,
    data: BusinessStatusUpdate,
    admin: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    """Approve, reject or suspend a business; the owner is notified"""
    return await service.set_business_status(business_id, data, admin)


# ============================================================================
# CATEGORIES
# ============================================================================


@router.get("/categories/{kind}", response_model=list[CategoryResponse])
async def list_categories(
    kind: CategoryKind,
    _: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    return service.list_categories(kind)


@router.post("/categories/{kind}", response_model=CategoryResponse, status_code=201)
async def create_category(
    kind: CategoryKind,
    data: CategoryCreate,
    _: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    return service.create_category(kind, data)


@router.patch("/categories/{kind}/{category_id}", response_model=CategoryResponse)
async def update_category(
    kind: CategoryKind,
    category_id: str,
    data: CategoryUpdate,
    _: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    return service.update_category(kind, category_id, data)


@router.delete("/categories/{kind}/{category_id}")
async def delete_category(
    kind: CategoryKind,
    category_id: str,
    _: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    service.delete_category(kind, category_id)
    return {"message": "Category deleted"}


# ============================================================================
# SETTINGS
# ============================================================================


@router.get("/settings")
async def get_settings(
    section: Optional[SettingsSection] = Query(None),
    _: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    return service.get_settings(section)


@router.put("/settings/{section}")
async def update_settings(
    section: SettingsSection,
    data: SettingsUpdate,
    admin: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    return service.update_settings(section, data.settings, admin)


# ============================================================================
# CONTENT REPORTS
# ============================================================================


@router.get("/reports", response_model=list[ContentReportResponse])
async def list_reports(
    status: Optional[ReportStatus] = Query(None),
    _: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    return service.list_reports(status)


@router.post("/reports/{report_id}/resolve", response_model=ContentReportResponse)
async def resolve_report(
    report_id: str,
    data: ReportResolve,
    _: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    return service.resolve_report(report_id, data)


@router.post("/reports/{report_id}/dismiss", response_model=ContentReportResponse)
async def dismiss_report(
    report_id: str,
    _: User = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    return service.dismiss_report(report_id)
