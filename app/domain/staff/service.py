"""Staff service - Business logic for managing a business's team"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import StaffMember, User
from ..businesses.service import BusinessService
from .repository import StaffRepository
from .schemas import StaffCreate, StaffUpdate

logger = logging.getLogger(__name__)


def _hours_payload(hours) -> Optional[list[dict]]:
    if hours is None:
        return None
    return [entry.model_dump() for entry in sorted(hours, key=lambda e: e.dayOfWeek)]


class StaffService:
    """Service layer for staff business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = StaffRepository()
        self.businesses = BusinessService(db)

    def _check_services(self, business_id: str, service_ids: Optional[list[str]]) -> Optional[list[str]]:
        if service_ids is None:
            return None
        unique_ids = list(dict.fromkeys(service_ids))
        if self.repo.count_business_services(self.db, business_id, unique_ids) != len(unique_ids):
            raise HTTPException(
                status_code=400, detail="One or more services do not belong to this business"
            )
        return unique_ids

    def _check_email_free(self, business_id: str, email: str, staff_id: Optional[str] = None) -> None:
        existing = self.repo.get_by_email(self.db, business_id, email)
        if existing and existing.id != staff_id:
            raise HTTPException(status_code=409, detail="A staff member with this email already exists")

    def _get_staff(self, business_id: str, staff_id: str) -> StaffMember:
        staff = self.repo.get(self.db, business_id, staff_id)
        if not staff:
            raise HTTPException(status_code=404, detail="Staff member not found")
        return staff

    def list_staff(self, business_id: str, user: User, active_only: bool = False) -> list[StaffMember]:
        business = self.businesses.get_owned_business(business_id, user)
        return self.repo.list_for_business(self.db, business.id, active_only)

    def add_staff(self, business_id: str, data: StaffCreate, user: User) -> StaffMember:
        business = self.businesses.get_owned_business(business_id, user)
        self._check_email_free(business.id, data.email)

        staff = StaffMember(
            business_id=business.id,
            name=data.name.strip(),
            email=data.email,
            phone=data.phone,
            role=data.role.strip(),
            service_ids=self._check_services(business.id, data.serviceIds),
            working_hours=_hours_payload(data.workingHours),
            is_active=True,
        )
        staff = self.repo.create(self.db, staff)
        logger.info(f"👥 Staff member {staff.id} added to business {business.id}")
        return staff

    def update_staff(self, business_id: str, staff_id: str, data: StaffUpdate, user: User) -> StaffMember:
        business = self.businesses.get_owned_business(business_id, user)
        staff = self._get_staff(business.id, staff_id)
        if data.email:
            self._check_email_free(business.id, data.email, staff.id)

        return self.repo.update(
            self.db,
            staff,
            name=data.name.strip() if data.name else None,
            email=data.email,
            phone=data.phone,
            role=data.role.strip() if data.role else None,
            service_ids=self._check_services(business.id, data.serviceIds),
            working_hours=_hours_payload(data.workingHours),
            is_active=data.isActive,
        )

    def remove_staff(self, business_id: str, staff_id: str, user: User) -> None:
        business = self.businesses.get_owned_business(business_id, user)
        staff = self._get_staff(business.id, staff_id)
        self.repo.delete(self.db, staff)
        logger.info(f"🗑️ Staff member {staff_id} removed from business {business.id}")
