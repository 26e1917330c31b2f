"""Booking service - Appointment lifecycle, conflict checks and status transitions"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import ACTIVE_APPOINTMENT_STATUSES, ROLE_ADMIN, Appointment, Service, User
from ...services.notification_service import (
    notify_user,
    send_booking_created_notification,
    send_booking_status_notification,
)
from ..scheduling import is_within_working_hours
from .repository import BookingRepository
from .schemas import BookingCreate, BookingUpdate

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[str, tuple[str, ...]] = {
    "pending": ("confirmed", "cancelled"),
    "confirmed": ("completed", "cancelled", "no_show", "rescheduled"),
    "rescheduled": ("confirmed", "completed", "cancelled", "no_show"),
    "cancelled": (),
    "completed": (),
    "no_show": (),
}


def can_transition(current: str, new: str) -> bool:
    return new in ALLOWED_TRANSITIONS.get(current, ())


def is_business_side(appointment: Appointment, user: User) -> bool:
    return appointment.service.business.owner_id == user.id or user.role == ROLE_ADMIN


class BookingService:
    """Service layer for booking business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = BookingRepository()

    def _get(self, booking_id: str) -> Appointment:
        appointment = self.repo.get_by_id(self.db, booking_id)
        if not appointment:
            raise HTTPException(status_code=404, detail="Booking not found")
        return appointment

    def _check_slot(
        self, service: Service, start: datetime, end: datetime, exclude_id: Optional[str] = None
    ) -> None:
        """Raise unless [start, end) is free for the service"""
        business = service.business

        working_hours = self.repo.get_working_hours(self.db, business.id, start.weekday())
        if working_hours is not None and not is_within_working_hours(start, end, working_hours):
            raise HTTPException(status_code=400, detail="Requested time is outside business hours")

        if self.repo.find_blocked(self.db, business.id, start, end):
            raise HTTPException(status_code=400, detail="Requested time is unavailable")

        if self.repo.find_overlapping(self.db, service.id, start, end, exclude_id):
            logger.info(f"⚠️ Slot conflict for service {service.id} at {start.isoformat()}")
            raise HTTPException(status_code=409, detail="This time slot is already booked")

    def list_bookings(
        self, user: User, status: Optional[str] = None, limit: int = 50, offset: int = 0
    ) -> list[Appointment]:
        return self.repo.list_for_user(self.db, user.id, status, limit, offset)

    def get_booking(self, booking_id: str, user: User) -> Appointment:
        """Visible to the customer and the owning business"""
        appointment = self._get(booking_id)
        if appointment.user_id != user.id and not is_business_side(appointment, user):
            raise HTTPException(status_code=403, detail="You do not have access to this booking")
        return appointment

    async def create_booking(self, data: BookingCreate, user: User) -> Appointment:
        logger.info(f"📥 Booking request from user {user.id} for service {data.serviceId}")

        service = self.db.query(Service).filter(Service.id == data.serviceId).first()
        if not service or not service.is_active:
            raise HTTPException(status_code=404, detail="Service not found")

        business = service.business
        if business.status != "approved" or not business.is_active:
            raise HTTPException(status_code=400, detail="This business is not accepting bookings")

        if data.startTime < datetime.utcnow():
            raise HTTPException(status_code=400, detail="Cannot book a time in the past")

        end_time = data.endTime or data.startTime + timedelta(minutes=service.duration)
        self._check_slot(service, data.startTime, end_time)

        appointment = self.repo.create(
            self.db,
            service_id=service.id,
            business_id=business.id,
            user_id=user.id,
            start_time=data.startTime,
            end_time=end_time,
            notes=data.notes,
            status="pending",
        )
        logger.info(f"✅ Booking {appointment.id} created for {appointment.start_time.isoformat()}")

        await send_booking_created_notification(self.db, appointment)
        return appointment

    async def update_booking(self, booking_id: str, data: BookingUpdate, user: User) -> Appointment:
        """Customer reschedule; a confirmed booking moves to rescheduled"""
        appointment = self._get(booking_id)
        if appointment.user_id != user.id:
            raise HTTPException(status_code=403, detail="You can only update your own bookings")
        if appointment.status not in ACTIVE_APPOINTMENT_STATUSES:
            raise HTTPException(status_code=400, detail=f"Cannot modify a {appointment.status} booking")

        moved = False
        if data.startTime is not None:
            if data.startTime < datetime.utcnow():
                raise HTTPException(status_code=400, detail="Cannot book a time in the past")
            service = appointment.service
            end_time = data.endTime or data.startTime + timedelta(minutes=service.duration)
            self._check_slot(service, data.startTime, end_time, exclude_id=appointment.id)

            moved = data.startTime != appointment.start_time or end_time != appointment.end_time
            appointment.start_time = data.startTime
            appointment.end_time = end_time
            if moved and appointment.status == "confirmed":
                appointment.status = "rescheduled"

        if data.notes is not None:
            appointment.notes = data.notes

        appointment = self.repo.save(self.db, appointment)
        if moved:
            await notify_user(
                self.db,
                user_id=appointment.service.business.owner_id,
                title="Booking Rescheduled",
                message=f"A booking for {appointment.service.name} was moved to {appointment.start_time:%Y-%m-%d %H:%M}",
            )
        return appointment

    async def cancel_booking(self, booking_id: str, user: User, reason: Optional[str] = None) -> Appointment:
        appointment = self._get(booking_id)
        is_customer = appointment.user_id == user.id
        if not is_customer and not is_business_side(appointment, user):
            raise HTTPException(status_code=403, detail="You can only cancel your own bookings")
        if not can_transition(appointment.status, "cancelled"):
            raise HTTPException(status_code=400, detail=f"Cannot cancel a {appointment.status} booking")

        appointment.status = "cancelled"
        appointment.cancellation_reason = reason
        appointment = self.repo.save(self.db, appointment)
        logger.info(f"🚫 Booking {appointment.id} cancelled by user {user.id}")

        if is_customer:
            await notify_user(
                self.db,
                user_id=appointment.service.business.owner_id,
                title="Booking Cancelled",
                message=f"A booking for {appointment.service.name} on {appointment.start_time:%Y-%m-%d %H:%M} was cancelled",
                notification_type="warning",
            )
        else:
            await send_booking_status_notification(self.db, appointment)
        return appointment

    async def set_status(
        self, booking_id: str, status: str, user: User, reason: Optional[str] = None
    ) -> Appointment:
        appointment = self._get(booking_id)
        if not is_business_side(appointment, user):
            raise HTTPException(status_code=403, detail="Only the business can change booking status")
        if not can_transition(appointment.status, status):
            raise HTTPException(
                status_code=400,
                detail=f"Cannot change booking from {appointment.status} to {status}",
            )

        previous = appointment.status
        appointment.status = status
        if status == "cancelled":
            appointment.cancellation_reason = reason
        appointment = self.repo.save(self.db, appointment)
        logger.info(f"🔄 Booking {appointment.id}: {previous} -> {status}")

        await send_booking_status_notification(self.db, appointment)
        return appointment
