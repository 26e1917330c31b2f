"""Business repository - Database operations for businesses, hours and blocked times"""

from datetime import datetime
from typing import Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, selectinload

from ...models import (
    ACTIVE_APPOINTMENT_STATUSES,
    Appointment,
    BlockedTime,
    Business,
    BusinessCategory,
    Payment,
    Review,
    Service,
    WorkingHours,
)


class BusinessRepository:
    """Repository for business database operations"""

    @staticmethod
    def get_by_id(db: Session, business_id: str) -> Optional[Business]:
        return (
            db.query(Business)
            .options(selectinload(Business.categories))
            .filter(Business.id == business_id)
            .first()
        )

    @staticmethod
    def get_for_owner(db: Session, owner_id: str) -> list[Business]:
        return (
            db.query(Business)
            .options(selectinload(Business.categories))
            .filter(Business.owner_id == owner_id)
            .order_by(Business.created_at.desc())
            .all()
        )

    @staticmethod
    def search(
        db: Session,
        q: Optional[str] = None,
        category: Optional[str] = None,
        city: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Business], int]:
        """Approved, active businesses matching the filters, plus the total match count"""
        query = db.query(Business).filter(Business.status == "approved", Business.is_active.is_(True))

        if q:
            pattern = f"%{q.strip()}%"
            query = query.filter(or_(Business.name.ilike(pattern), Business.description.ilike(pattern)))
        if city:
            query = query.filter(Business.city.ilike(f"%{city.strip()}%"))
        if category:
            query = query.filter(
                Business.categories.any(
                    or_(BusinessCategory.id == category, BusinessCategory.slug == category)
                )
            )

        total = query.count()
        businesses = (
            query.options(selectinload(Business.categories))
            .order_by(Business.name.asc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return businesses, total

    @staticmethod
    def rating_summary(db: Session, business_ids: list[str]) -> dict[str, tuple[Optional[float], int]]:
        """business_id -> (average rating, review count)"""
        if not business_ids:
            return {}
        rows = (
            db.query(Review.business_id, func.avg(Review.rating), func.count(Review.id))
            .filter(Review.business_id.in_(business_ids))
            .group_by(Review.business_id)
            .all()
        )
        return {
            business_id: (round(float(avg), 2) if avg is not None else None, count)
            for business_id, avg, count in rows
        }

    @staticmethod
    def get_categories(db: Session, category_ids: list[str]) -> list[BusinessCategory]:
        if not category_ids:
            return []
        return db.query(BusinessCategory).filter(BusinessCategory.id.in_(category_ids)).all()

    @staticmethod
    def create(db: Session, business: Business) -> Business:
        db.add(business)
        db.commit()
        db.refresh(business)
        return business

    @staticmethod
    def save(db: Session, business: Business) -> Business:
        db.commit()
        db.refresh(business)
        return business

    # Working hours

    @staticmethod
    def get_working_hours(db: Session, business_id: str) -> list[WorkingHours]:
        return (
            db.query(WorkingHours)
            .filter(WorkingHours.business_id == business_id)
            .order_by(WorkingHours.day_of_week)
            .all()
        )

    @staticmethod
    def get_working_hours_for_day(db: Session, business_id: str, day_of_week: int) -> Optional[WorkingHours]:
        return (
            db.query(WorkingHours)
            .filter(WorkingHours.business_id == business_id, WorkingHours.day_of_week == day_of_week)
            .first()
        )

    @staticmethod
    def upsert_working_hours(db: Session, business_id: str, entries: list[dict]) -> list[WorkingHours]:
        existing = {
            wh.day_of_week: wh
            for wh in db.query(WorkingHours).filter(WorkingHours.business_id == business_id).all()
        }
        for entry in entries:
            row = existing.get(entry["day_of_week"])
            if row is None:
                db.add(WorkingHours(business_id=business_id, **entry))
            else:
                for key, value in entry.items():
                    setattr(row, key, value)
        db.commit()
        return BusinessRepository.get_working_hours(db, business_id)

    # Blocked times

    @staticmethod
    def add_blocked_time(db: Session, blocked: BlockedTime) -> BlockedTime:
        db.add(blocked)
        db.commit()
        db.refresh(blocked)
        return blocked

    @staticmethod
    def get_blocked_time(db: Session, business_id: str, blocked_id: str) -> Optional[BlockedTime]:
        return (
            db.query(BlockedTime)
            .filter(BlockedTime.id == blocked_id, BlockedTime.business_id == business_id)
            .first()
        )

    @staticmethod
    def list_blocked_times(
        db: Session,
        business_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[BlockedTime]:
        """Blocked times overlapping [start, end) when bounds are given"""
        query = db.query(BlockedTime).filter(BlockedTime.business_id == business_id)
        if end is not None:
            query = query.filter(BlockedTime.start_time < end)
        if start is not None:
            query = query.filter(BlockedTime.end_time > start)
        return query.order_by(BlockedTime.start_time).all()

    @staticmethod
    def delete_blocked_time(db: Session, blocked: BlockedTime) -> None:
        db.delete(blocked)
        db.commit()

    # Bookings & analytics

    @staticmethod
    def active_appointments_for_service(
        db: Session, service_id: str, start: datetime, end: datetime
    ) -> list[Appointment]:
        return (
            db.query(Appointment)
            .filter(
                Appointment.service_id == service_id,
                Appointment.status.in_(ACTIVE_APPOINTMENT_STATUSES),
                Appointment.start_time < end,
                Appointment.end_time > start,
            )
            .all()
        )

    @staticmethod
    def list_appointments(
        db: Session, business_id: str, status: Optional[str] = None, limit: int = 50, offset: int = 0
    ) -> list[Appointment]:
        query = (
            db.query(Appointment)
            .options(selectinload(Appointment.service))
            .filter(Appointment.business_id == business_id)
        )
        if status:
            query = query.filter(Appointment.status == status)
        return query.order_by(Appointment.start_time.desc()).offset(offset).limit(limit).all()

    @staticmethod
    def appointment_stats(db: Session, business_id: str) -> list[tuple[str, str, str, bool, int]]:
        """(service_id, service name, status, is_paid, count) rows"""
        return (
            db.query(
                Service.id,
                Service.name,
                Appointment.status,
                Appointment.is_paid,
                func.count(Appointment.id),
            )
            .join(Appointment, Appointment.service_id == Service.id)
            .filter(Appointment.business_id == business_id)
            .group_by(Service.id, Service.name, Appointment.status, Appointment.is_paid)
            .all()
        )

    @staticmethod
    def revenue_by_service(db: Session, business_id: str) -> dict[str, float]:
        rows = (
            db.query(Appointment.service_id, func.coalesce(func.sum(Payment.amount), 0))
            .join(Payment, Payment.appointment_id == Appointment.id)
            .filter(Appointment.business_id == business_id, Payment.status == "completed")
            .group_by(Appointment.service_id)
            .all()
        )
        return {service_id: float(total) for service_id, total in rows}

    @staticmethod
    def list_services(db: Session, business_id: str, active_only: bool = True) -> list[Service]:
        query = db.query(Service).filter(Service.business_id == business_id)
        if active_only:
            query = query.filter(Service.is_active.is_(True))
        return query.order_by(Service.name.asc()).all()
