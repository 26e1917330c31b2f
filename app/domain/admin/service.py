"""Admin service - Moderation, user management, categories and platform settings"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import flag_modified

from ...cache import invalidate_business_cache, invalidate_categories_cache
from ...models import Appointment, Business, ContentReport, User
from ...schemas import UserResponse
from ...services.notification_service import notify_user
from ...shared.validators import slugify
from .repository import AdminRepository
from .schemas import (
    AdminStats,
    AdminUserUpdate,
    BusinessStatusUpdate,
    CategoryCreate,
    CategoryUpdate,
    ReportResolve,
    UserListResponse,
)

logger = logging.getLogger(__name__)

BUSINESS_STATUS_MESSAGES = {
    "approved": ("Business Approved", "success", "{name} has been approved and is now listed"),
    "rejected": ("Business Rejected", "error", "{name} was not approved"),
    "suspended": ("Business Suspended", "warning", "{name} has been suspended"),
    "pending": ("Business Under Review", "info", "{name} is pending review"),
}


class AdminService:
    """Service layer for admin business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AdminRepository()

    def get_stats(self) -> AdminStats:
        users_by_role = self.repo.count_by(self.db, User.role)
        businesses_by_status = self.repo.count_by(self.db, Business.status)
        bookings_by_status = self.repo.count_by(self.db, Appointment.status)
        completed_payments, revenue = self.repo.completed_payment_totals(self.db)
        return AdminStats(
            total_users=sum(users_by_role.values()),
            users_by_role=users_by_role,
            total_businesses=sum(businesses_by_status.values()),
            pending_businesses=businesses_by_status.get("pending", 0),
            total_bookings=sum(bookings_by_status.values()),
            bookings_by_status=bookings_by_status,
            completed_payments=completed_payments,
            total_revenue=round(revenue, 2),
            pending_reports=self.repo.count_pending_reports(self.db),
        )

    # Users

    def list_users(
        self,
        search: Optional[str] = None,
        role: Optional[str] = None,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> UserListResponse:
        users, total = self.repo.list_users(self.db, search, role, status, limit, (page - 1) * limit)
        return UserListResponse(
            items=[UserResponse.model_validate(u) for u in users], total=total, page=page, limit=limit
        )

    def _get_user(self, user_id: str) -> User:
        user = self.repo.get_user(self.db, user_id)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        return user

    def update_user(self, user_id: str, data: AdminUserUpdate, admin: User) -> User:
        user = self._get_user(user_id)
        if user.id == admin.id:
            raise HTTPException(status_code=400, detail="You cannot change your own role or status")

        if data.role is not None:
            user.role = data.role
        if data.status is not None:
            user.status = data.status
        user = self.repo.save(self.db, user)
        logger.info(f"👤 Admin {admin.id} updated user {user.id}: role={user.role} status={user.status}")
        return user

    def delete_user(self, user_id: str, admin: User) -> None:
        user = self._get_user(user_id)
        if user.id == admin.id:
            raise HTTPException(status_code=400, detail="You cannot delete your own account")
        self.repo.delete(self.db, user)
        logger.info(f"🗑️ Admin {admin.id} deleted user {user_id}")

    # Businesses

    def list_businesses(self, status: Optional[str] = None) -> list[Business]:
        return self.repo.list_businesses(self.db, status)

    async def set_business_status(self, business_id: str, data: BusinessStatusUpdate, admin: User) -> Business:
        business = self.repo.get_business(self.db, business_id)
        if not business:
            raise HTTPException(status_code=404, detail="Business not found")

        previous = business.status
        business.status = data.status
        business = self.repo.save(self.db, business)
        invalidate_business_cache(business.id)
        logger.info(f"🏢 Admin {admin.id} set business {business.id}: {previous} -> {data.status}")

        if previous != data.status:
            title, notification_type, template = BUSINESS_STATUS_MESSAGES[data.status]
            message = template.format(name=business.name)
            if data.reason:
                message = f"{message}. Reason: {data.reason}"
            await notify_user(
                self.db,
                user_id=business.owner_id,
                title=title,
                message=message,
                notification_type=notification_type,
            )
        return business

    # Categories

    def list_categories(self, kind: str) -> list:
        return self.repo.list_categories(self.db, kind)

    def create_category(self, kind: str, data: CategoryCreate):
        slug = slugify(data.slug or data.name)
        if not slug:
            raise HTTPException(status_code=400, detail="Category slug cannot be empty")
        category_data = {"name": data.name.strip(), "slug": slug, "description": data.description}
        if kind == "business":
            category_data["icon"] = data.icon
        category = self.repo.create_category(self.db, kind, **category_data)
        invalidate_categories_cache(kind)
        logger.info(f"🏷️ Created {kind} category '{category.name}'")
        return category

    def _get_category(self, kind: str, category_id: str):
        category = self.repo.get_category(self.db, kind, category_id)
        if not category:
            raise HTTPException(status_code=404, detail="Category not found")
        return category

    def update_category(self, kind: str, category_id: str, data: CategoryUpdate):
        category = self._get_category(kind, category_id)
        if data.name is not None:
            category.name = data.name.strip()
        if data.slug is not None:
            category.slug = slugify(data.slug)
        if data.description is not None:
            category.description = data.description
        if data.icon is not None and kind == "business":
            category.icon = data.icon
        category = self.repo.save(self.db, category)
        invalidate_categories_cache(kind)
        return category

    def delete_category(self, kind: str, category_id: str) -> None:
        category = self._get_category(kind, category_id)
        self.repo.delete(self.db, category)
        invalidate_categories_cache(kind)

    # Settings

    def get_settings(self, section: Optional[str] = None) -> dict:
        settings = self.repo.get_settings(self.db)
        if section:
            return {section: getattr(settings, section) or {}}
        return {
            "general": settings.general or {},
            "security": settings.security or {},
            "email": settings.email or {},
            "payment": settings.payment or {},
            "integration": settings.integration or {},
            "updated_at": settings.updated_at,
        }

    def update_settings(self, section: str, values: dict, admin: User) -> dict:
        """Replace one settings section"""
        settings = self.repo.get_settings(self.db)
        setattr(settings, section, values)
        flag_modified(settings, section)
        self.repo.save(self.db, settings)
        logger.info(f"⚙️ Admin {admin.id} updated {section} settings")
        return self.get_settings()

    # Content reports

    def list_reports(self, status: Optional[str] = None) -> list[ContentReport]:
        return self.repo.list_reports(self.db, status)

    def _get_pending_report(self, report_id: str) -> ContentReport:
        report = self.repo.get_report(self.db, report_id)
        if not report:
            raise HTTPException(status_code=404, detail="Report not found")
        if report.status != "pending":
            raise HTTPException(status_code=400, detail=f"Report has already been {report.status}")
        return report

    def resolve_report(self, report_id: str, data: ReportResolve) -> ContentReport:
        report = self._get_pending_report(report_id)
        report.status = "approved" if data.action == "approve" else "rejected"
        report.rejection_reason = data.reason
        return self.repo.save(self.db, report)

    def dismiss_report(self, report_id: str) -> ContentReport:
        report = self._get_pending_report(report_id)
        report.status = "dismissed"
        return self.repo.save(self.db, report)
