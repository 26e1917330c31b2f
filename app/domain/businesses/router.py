"""Business router - FastAPI endpoints for the directory and business owners"""

import logging
from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user, get_optional_user, require_business_owner
from ...database import get_db
from ...models import User
from ...rate_limiter import search_rate_limit
from ..bookings.schemas import AppointmentStatus, BookingResponse
from .schemas import (
    AvailableSlotsResponse,
    BlockedTimeCreate,
    BlockedTimeResponse,
    BusinessAnalytics,
    BusinessCreate,
    BusinessDetails,
    BusinessResponse,
    BusinessSearchResponse,
    BusinessUpdate,
    CategoryResponse,
    WorkingHoursResponse,
    WorkingHoursUpdate,
)
from .service import BusinessService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/businesses", tags=["Businesses"])


def get_business_service(db: Session = Depends(get_db)) -> BusinessService:
    """Dependency injection for BusinessService"""
    return BusinessService(db)


# ============================================================================
# PUBLIC DIRECTORY
# ============================================================================


@router.get("/search", response_model=BusinessSearchResponse)
async def search_businesses(
    q: Optional[str] = Query(None, max_length=100),
    category: Optional[str] = Query(None, description="Category id or slug"),
    city: Optional[str] = Query(None, max_length=100),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    _: None = Depends(search_rate_limit),
    service: BusinessService = Depends(get_business_service),
):
    """Search approved, active businesses"""
    return service.search(q, category, city, limit, offset)


@router.get("/categories", response_model=list[CategoryResponse])
async def list_business_categories(service: BusinessService = Depends(get_business_service)):
    return service.list_categories()


# ============================================================================
# OWNER OPERATIONS
# ============================================================================


@router.post("", response_model=BusinessResponse, status_code=201)
async def create_business(
    data: BusinessCreate,
    current_user: User = Depends(get_current_user),
    service: BusinessService = Depends(get_business_service),
):
    """Register a business; customers are promoted to business owners"""
    return service.create_business(data, current_user)


@router.get("/mine", response_model=list[BusinessResponse])
async def get_my_businesses(
    current_user: User = Depends(require_business_owner),
    service: BusinessService = Depends(get_business_service),
):
    return service.get_my_businesses(current_user)


@router.get("/{business_id}", response_model=BusinessDetails)
async def get_business_details(
    business_id: str,
    viewer: Optional[User] = Depends(get_optional_user),
    service: BusinessService = Depends(get_business_service),
):
    """Public business page: profile, services, working hours and rating"""
    return service.get_public_details(business_id, viewer)


@router.patch("/{business_id}", response_model=BusinessResponse)
async def update_business(
    business_id: str,
    data: BusinessUpdate,
    current_user: User = Depends(require_business_owner),
    service: BusinessService = Depends(get_business_service),
):
    return service.update_business(business_id, data, current_user)


# ============================================================================
# WORKING HOURS & BLOCKED TIMES
# ============================================================================


@router.get("/{business_id}/working-hours", response_model=list[WorkingHoursResponse])
async def get_working_hours(
    business_id: str,
    service: BusinessService = Depends(get_business_service),
):
    return service.get_working_hours(business_id)


@router.put("/{business_id}/working-hours", response_model=list[WorkingHoursResponse])
async def set_working_hours(
    business_id: str,
    data: WorkingHoursUpdate,
    current_user: User = Depends(require_business_owner),
    service: BusinessService = Depends(get_business_service),
):
    """Create or replace the opening hours of the given days"""
    return service.set_working_hours(business_id, data, current_user)


@router.post("/{business_id}/blocked-times", response_model=BlockedTimeResponse, status_code=201)
async def add_blocked_time(
    business_id: str,
    data: BlockedTimeCreate,
    current_user: User = Depends(require_business_owner),
    service: BusinessService = Depends(get_business_service),
):
    return service.add_blocked_time(business_id, data, current_user)


@router.get("/{business_id}/blocked-times", response_model=list[BlockedTimeResponse])
async def list_blocked_times(
    business_id: str,
    start: Optional[datetime] = Query(None),
    end: Optional[datetime] = Query(None),
    current_user: User = Depends(require_business_owner),
    service: BusinessService = Depends(get_business_service),
):
    return service.list_blocked_times(business_id, current_user, start, end)


@router.delete("/{business_id}/blocked-times/{blocked_id}")
async def delete_blocked_time(
    business_id: str,
    blocked_id: str,
    current_user: User = Depends(require_business_owner),
    service: BusinessService = Depends(get_business_service),
):
    service.delete_blocked_time(business_id, blocked_id, current_user)
    return {"message": "Blocked time deleted"}


@router.get("/{business_id}/slots", response_model=AvailableSlotsResponse)
async def get_available_slots(
    business_id: str,
    service_id: str = Query(..., alias="serviceId"),
    day: date = Query(..., alias="date"),
    service: BusinessService = Depends(get_business_service),
):
    """Free 15-minute-step slots for a service on a date"""
    return service.get_available_slots(business_id, service_id, day)


# ============================================================================
# BOOKINGS & ANALYTICS
# ============================================================================


@router.get("/{business_id}/bookings", response_model=list[BookingResponse])
async def list_business_bookings(
    business_id: str,
    status: Optional[AppointmentStatus] = Query(None),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    current_user: User = Depends(require_business_owner),
    service: BusinessService = Depends(get_business_service),
):
    return service.list_bookings(business_id, current_user, status, limit, offset)


@router.get("/{business_id}/analytics", response_model=BusinessAnalytics)
async def get_business_analytics(
    business_id: str,
    current_user: User = Depends(require_business_owner),
    service: BusinessService = Depends(get_business_service),
):
    return service.get_analytics(business_id, current_user)
