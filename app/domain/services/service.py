"""Service catalogue - Business logic for the services a business offers"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...cache import get_categories_cached, invalidate_business_cache, set_categories_cached
from ...models import Business, Service, User
from ..businesses.schemas import CategoryResponse
from ..businesses.service import can_manage_business
from .repository import ServiceRepository
from .schemas import ServiceCreate, ServiceUpdate

logger = logging.getLogger(__name__)


class ServiceCatalogService:
    """Service layer for bookable service business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ServiceRepository()

    def _check_category(self, category_id: Optional[str]) -> None:
        if category_id and not self.repo.category_exists(self.db, category_id):
            raise HTTPException(status_code=400, detail="Service category does not exist")

    def _get_business(self, business_id: str) -> Business:
        business = self.db.query(Business).filter(Business.id == business_id).first()
        if not business:
            raise HTTPException(status_code=404, detail="Business not found")
        return business

    def _get_managed_service(self, service_id: str, user: User) -> Service:
        service = self.get_service(service_id)
        if not can_manage_business(service.business, user):
            raise HTTPException(status_code=403, detail="You do not own this business")
        return service

    def list_services(self, business_id: str, viewer: Optional[User] = None) -> list[Service]:
        """Active services; the owner also sees inactive ones"""
        business = self._get_business(business_id)
        include_inactive = bool(viewer and can_manage_business(business, viewer))
        return self.repo.list_for_business(self.db, business.id, include_inactive)

    def get_service(self, service_id: str) -> Service:
        service = self.repo.get_by_id(self.db, service_id)
        if not service:
            raise HTTPException(status_code=404, detail="Service not found")
        return service

    def list_categories(self) -> list[dict]:
        cached = get_categories_cached("service")
        if cached is not None:
            return cached
        categories = [
            CategoryResponse.model_validate(c).model_dump(mode="json")
            for c in self.repo.list_categories(self.db)
        ]
        set_categories_cached("service", categories)
        return categories

    def create_service(self, data: ServiceCreate, user: User) -> Service:
        business = self._get_business(data.businessId)
        if not can_manage_business(business, user):
            logger.warning(f"⚠️ User {user.id} tried to add a service to business {business.id}")
            raise HTTPException(status_code=403, detail="You do not own this business")
        self._check_category(data.categoryId)

        service = self.repo.create(
            self.db,
            business_id=business.id,
            category_id=data.categoryId,
            name=data.name.strip(),
            description=data.description,
            price=data.price,
            duration=data.duration,
            is_active=True,
        )
        invalidate_business_cache(business.id)
        logger.info(f"✅ Service {service.id} created for business {business.id}")
        return service

    def update_service(self, service_id: str, data: ServiceUpdate, user: User) -> Service:
        service = self._get_managed_service(service_id, user)
        self._check_category(data.categoryId)

        service = self.repo.update(
            self.db,
            service,
            name=data.name,
            description=data.description,
            price=data.price,
            duration=data.duration,
            category_id=data.categoryId,
            is_active=data.isActive,
        )
        invalidate_business_cache(service.business_id)
        return service

    def delete_service(self, service_id: str, user: User) -> None:
        service = self._get_managed_service(service_id, user)
        business_id = service.business_id
        self.repo.delete(self.db, service)
        invalidate_business_cache(business_id)
        logger.info(f"🗑️ Service {service_id} deleted")
