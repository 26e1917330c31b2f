"""Booking repository - Database operations for appointments"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session, selectinload

from ...models import ACTIVE_APPOINTMENT_STATUSES, Appointment, BlockedTime, Service, WorkingHours


class BookingRepository:
    """Repository for appointment database operations"""

    @staticmethod
    def get_by_id(db: Session, booking_id: str) -> Optional[Appointment]:
        return (
            db.query(Appointment)
            .options(selectinload(Appointment.service).selectinload(Service.business))
            .filter(Appointment.id == booking_id)
            .first()
        )

    @staticmethod
    def list_for_user(
        db: Session, user_id: str, status: Optional[str] = None, limit: int = 50, offset: int = 0
    ) -> list[Appointment]:
        query = (
            db.query(Appointment)
            .options(selectinload(Appointment.service))
            .filter(Appointment.user_id == user_id)
        )
        if status:
            query = query.filter(Appointment.status == status)
        return query.order_by(Appointment.start_time.desc()).offset(offset).limit(limit).all()

    @staticmethod
    def find_overlapping(
        db: Session,
        service_id: str,
        start: datetime,
        end: datetime,
        exclude_id: Optional[str] = None,
    ) -> list[Appointment]:
        """Active bookings of the service that intersect [start, end)"""
        query = db.query(Appointment).filter(
            Appointment.service_id == service_id,
            Appointment.status.in_(ACTIVE_APPOINTMENT_STATUSES),
            Appointment.start_time < end,
            Appointment.end_time > start,
        )
        if exclude_id:
            query = query.filter(Appointment.id != exclude_id)
        return query.all()

    @staticmethod
    def find_blocked(db: Session, business_id: str, start: datetime, end: datetime) -> list[BlockedTime]:
        return (
            db.query(BlockedTime)
            .filter(
                BlockedTime.business_id == business_id,
                BlockedTime.start_time < end,
                BlockedTime.end_time > start,
            )
            .all()
        )

    @staticmethod
    def get_working_hours(db: Session, business_id: str, day_of_week: int) -> Optional[WorkingHours]:
        return (
            db.query(WorkingHours)
            .filter(WorkingHours.business_id == business_id, WorkingHours.day_of_week == day_of_week)
            .first()
        )

    @staticmethod
    def create(db: Session, **data) -> Appointment:
        appointment = Appointment(**data)
        db.add(appointment)
        db.commit()
        db.refresh(appointment)
        return appointment

    @staticmethod
    def save(db: Session, appointment: Appointment) -> Appointment:
        db.commit()
        db.refresh(appointment)
        return appointment
