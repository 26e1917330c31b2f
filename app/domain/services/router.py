"""Service router - FastAPI endpoints for a business's service catalogue"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_optional_user, require_business_owner
from ...database import get_db
from ...models import User
from ..businesses.schemas import CategoryResponse
from .schemas import ServiceCreate, ServiceResponse, ServiceUpdate
from .service import ServiceCatalogService

router = APIRouter(prefix="/services", tags=["Services"])


def get_service_catalog(db: Session = Depends(get_db)) -> ServiceCatalogService:
    """Dependency injection for ServiceCatalogService"""
    return ServiceCatalogService(db)


@router.get("", response_model=list[ServiceResponse])
async def list_services(
    business_id: str = Query(..., alias="businessId"),
    viewer: Optional[User] = Depends(get_optional_user),
    catalog: ServiceCatalogService = Depends(get_service_catalog),
):
    return catalog.list_services(business_id, viewer)


@router.get("/categories", response_model=list[CategoryResponse])
async def list_service_categories(catalog: ServiceCatalogService = Depends(get_service_catalog)):
    return catalog.list_categories()


@router.get("/{service_id}", response_model=ServiceResponse)
async def get_service(
    service_id: str,
    catalog: ServiceCatalogService = Depends(get_service_catalog),
):
    return catalog.get_service(service_id)


@router.post("", response_model=ServiceResponse, status_code=201)
async def create_service(
    data: ServiceCreate,
    current_user: User = Depends(require_business_owner),
    catalog: ServiceCatalogService = Depends(get_service_catalog),
):
    return catalog.create_service(data, current_user)


@router.patch("/{service_id}", response_model=ServiceResponse)
async def update_service(
    service_id: str,
    data: ServiceUpdate,
    current_user: User = Depends(require_business_owner),
    catalog: ServiceCatalogService = Depends(get_service_catalog),
):
    return catalog.update_service(service_id, data, current_user)


@router.delete("/{service_id}")
async def delete_service(
    service_id: str,
    current_user: User = Depends(require_business_owner),
    catalog: ServiceCatalogService = Depends(get_service_catalog),
):
    catalog.delete_service(service_id, current_user)
    return {"message": "Service deleted"}
