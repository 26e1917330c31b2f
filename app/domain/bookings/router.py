"""Booking router - FastAPI endpoints for appointments"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_business_owner
from ...database import get_db
from ...models import User
from .schemas import (
    AppointmentStatus,
    BookingCancel,
    BookingCreate,
    BookingResponse,
    BookingStatusUpdate,
    BookingUpdate,
)
from .service import BookingService

router = APIRouter(prefix="/bookings", tags=["Bookings"])


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    """Dependency injection for BookingService"""
    return BookingService(db)


@router.get("", response_model=list[BookingResponse])
async def list_bookings(
    status: Optional[AppointmentStatus] = Query(None),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Get the current user's bookings"""
    return service.list_bookings(current_user, status, limit, offset)


@router.post("", response_model=BookingResponse, status_code=201)
async def create_booking(
    data: BookingCreate,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return await service.create_booking(data, current_user)


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: str,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return service.get_booking(booking_id, current_user)


@router.patch("/{booking_id}", response_model=BookingResponse)
async def update_booking(
    booking_id: str,
    data: BookingUpdate,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return await service.update_booking(booking_id, data, current_user)


@router.post("/{booking_id}/cancel", response_model=BookingResponse)
async def cancel_booking(
    booking_id: str,
    data: Optional[BookingCancel] = None,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return await service.cancel_booking(booking_id, current_user, data.reason if data else None)


@router.patch("/{booking_id}/status", response_model=BookingResponse)
async def set_booking_status(
    booking_id: str,
    data: BookingStatusUpdate,
    current_user: User = Depends(require_business_owner),
    service: BookingService = Depends(get_booking_service),
):
    """Business-side status change, restricted to allowed transitions"""
    return await service.set_status(booking_id, data.status, current_user, data.reason)
