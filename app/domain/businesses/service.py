"""Business service - Business logic for the directory and owner tooling"""

import logging
from datetime import date, datetime, time, timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...cache import (
    get_business_details_cached,
    get_categories_cached,
    invalidate_business_cache,
    set_business_details_cached,
    set_categories_cached,
)
from ...models import (
    ROLE_ADMIN,
    ROLE_BUSINESS,
    ROLE_USER,
    Appointment,
    BlockedTime,
    Business,
    BusinessCategory,
    Service,
    User,
)
from ..scheduling import generate_slots
from ..services.schemas import ServiceResponse
from .repository import BusinessRepository
from .schemas import (
    AvailableSlotsResponse,
    BlockedTimeCreate,
    BusinessAnalytics,
    BusinessCreate,
    BusinessDetails,
    BusinessSearchResponse,
    BusinessSummary,
    BusinessUpdate,
    CategoryResponse,
    ServicePerformance,
    TimeSlot,
    WorkingHoursResponse,
    WorkingHoursUpdate,
)

logger = logging.getLogger(__name__)

BUSINESS_FIELD_MAP = {
    "name": "name",
    "description": "description",
    "email": "email",
    "phone": "phone",
    "address": "address",
    "city": "city",
    "latitude": "latitude",
    "longitude": "longitude",
    "website": "website",
    "logoUrl": "logo_url",
    "isActive": "is_active",
}


def can_manage_business(business: Business, user: User) -> bool:
    return business.owner_id == user.id or user.role == ROLE_ADMIN


class BusinessService:
    """Service layer for business business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = BusinessRepository()

    def _summaries(self, businesses: list[Business]) -> list[BusinessSummary]:
        ratings = self.repo.rating_summary(self.db, [b.id for b in businesses])
        summaries = []
        for business in businesses:
            average, count = ratings.get(business.id, (None, 0))
            summary = BusinessSummary.model_validate(business)
            summary.average_rating = average
            summary.review_count = count
            summaries.append(summary)
        return summaries

    def get_owned_business(self, business_id: str, user: User) -> Business:
        """Business the user may manage; 404 when missing, 403 when not theirs"""
        business = self.repo.get_by_id(self.db, business_id)
        if not business:
            raise HTTPException(status_code=404, detail="Business not found")
        if not can_manage_business(business, user):
            logger.warning(f"⚠️ User {user.id} attempted to manage business {business_id}")
            raise HTTPException(status_code=403, detail="You do not own this business")
        return business

    def _get_public_business(self, business_id: str, viewer: Optional[User] = None) -> Business:
        business = self.repo.get_by_id(self.db, business_id)
        if not business:
            raise HTTPException(status_code=404, detail="Business not found")
        is_listed = business.status == "approved" and business.is_active
        if not is_listed and not (viewer and can_manage_business(business, viewer)):
            raise HTTPException(status_code=404, detail="Business not found")
        return business

    # Directory

    def search(
        self,
        q: Optional[str] = None,
        category: Optional[str] = None,
        city: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> BusinessSearchResponse:
        businesses, total = self.repo.search(self.db, q, category, city, limit, offset)
        logger.info(f"🔍 Business search q={q!r} category={category!r} city={city!r}: {total} matches")
        return BusinessSearchResponse(
            items=self._summaries(businesses), total=total, limit=limit, offset=offset
        )

    def get_public_details(self, business_id: str, viewer: Optional[User] = None) -> dict:
        """Business profile with its active services and working hours"""
        cached = get_business_details_cached(business_id)
        if cached is not None:
            return cached

        business = self._get_public_business(business_id, viewer)
        details = BusinessDetails(
            business=self._summaries([business])[0],
            services=[
                ServiceResponse.model_validate(s) for s in self.repo.list_services(self.db, business.id)
            ],
            working_hours=[
                WorkingHoursResponse.model_validate(wh)
                for wh in self.repo.get_working_hours(self.db, business.id)
            ],
        ).model_dump(mode="json")

        if business.status == "approved" and business.is_active:
            set_business_details_cached(business_id, details)
        return details

    def list_categories(self) -> list[dict]:
        cached = get_categories_cached("business")
        if cached is not None:
            return cached
        categories = [
            CategoryResponse.model_validate(c).model_dump(mode="json")
            for c in self.db.query(BusinessCategory).order_by(BusinessCategory.name).all()
        ]
        set_categories_cached("business", categories)
        return categories

    # Owner operations

    def create_business(self, data: BusinessCreate, user: User) -> Business:
        logger.info(f"📥 Creating business '{data.name}' for user {user.id}")

        business = Business(
            owner_id=user.id,
            name=data.name.strip(),
            description=data.description,
            email=data.email,
            phone=data.phone,
            address=data.address,
            city=data.city,
            latitude=data.latitude,
            longitude=data.longitude,
            website=data.website,
            logo_url=data.logoUrl,
            status="pending",
            is_active=True,
        )
        business.categories = self._resolve_categories(data.categoryIds)

        if user.role == ROLE_USER:
            user.role = ROLE_BUSINESS
            logger.info(f"🔄 Promoted user {user.id} to business owner")

        business = self.repo.create(self.db, business)
        logger.info(f"✅ Business {business.id} created (pending approval)")
        return business

    def _resolve_categories(self, category_ids: list[str]):
        categories = self.repo.get_categories(self.db, category_ids)
        if len(categories) != len(set(category_ids)):
            raise HTTPException(status_code=400, detail="One or more categories do not exist")
        return categories

    def get_my_businesses(self, user: User) -> list[Business]:
        return self.repo.get_for_owner(self.db, user.id)

    def update_business(self, business_id: str, data: BusinessUpdate, user: User) -> Business:
        business = self.get_owned_business(business_id, user)

        for field, column in BUSINESS_FIELD_MAP.items():
            value = getattr(data, field)
            if value is not None:
                setattr(business, column, value)
        if data.categoryIds is not None:
            business.categories = self._resolve_categories(data.categoryIds)

        business = self.repo.save(self.db, business)
        invalidate_business_cache(business.id)
        logger.info(f"✅ Business {business.id} updated")
        return business

    # Working hours

    def get_working_hours(self, business_id: str):
        business = self.repo.get_by_id(self.db, business_id)
        if not business:
            raise HTTPException(status_code=404, detail="Business not found")
        return self.repo.get_working_hours(self.db, business_id)

    def set_working_hours(self, business_id: str, data: WorkingHoursUpdate, user: User):
        business = self.get_owned_business(business_id, user)
        entries = [
            {
                "day_of_week": entry.dayOfWeek,
                "is_open": entry.isOpen,
                "open_time": entry.openTime if entry.isOpen else None,
                "close_time": entry.closeTime if entry.isOpen else None,
                "breaks": [b.model_dump() for b in entry.breaks] if entry.isOpen else [],
            }
            for entry in data.hours
        ]
        hours = self.repo.upsert_working_hours(self.db, business.id, entries)
        invalidate_business_cache(business.id)
        logger.info(f"🕒 Working hours updated for business {business.id} ({len(entries)} days)")
        return hours

    # Blocked times

    def add_blocked_time(self, business_id: str, data: BlockedTimeCreate, user: User) -> BlockedTime:
        business = self.get_owned_business(business_id, user)
        blocked = BlockedTime(
            business_id=business.id,
            start_time=data.startTime,
            end_time=data.endTime,
            reason=data.reason,
        )
        return self.repo.add_blocked_time(self.db, blocked)

    def list_blocked_times(
        self,
        business_id: str,
        user: User,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[BlockedTime]:
        business = self.get_owned_business(business_id, user)
        return self.repo.list_blocked_times(self.db, business.id, start, end)

    def delete_blocked_time(self, business_id: str, blocked_id: str, user: User) -> None:
        business = self.get_owned_business(business_id, user)
        blocked = self.repo.get_blocked_time(self.db, business.id, blocked_id)
        if not blocked:
            raise HTTPException(status_code=404, detail="Blocked time not found")
        self.repo.delete_blocked_time(self.db, blocked)

    # Availability

    def get_available_slots(self, business_id: str, service_id: str, day: date) -> AvailableSlotsResponse:
        business = self._get_public_business(business_id)
        service = (
            self.db.query(Service)
            .filter(Service.id == service_id, Service.business_id == business.id)
            .first()
        )
        if not service or not service.is_active:
            raise HTTPException(status_code=404, detail="Service not found")

        day_start = datetime.combine(day, time.min)
        day_end = day_start + timedelta(days=1)
        busy = [
            (b.start_time, b.end_time)
            for b in self.repo.list_blocked_times(self.db, business.id, day_start, day_end)
        ]
        busy += [
            (a.start_time, a.end_time)
            for a in self.repo.active_appointments_for_service(self.db, service.id, day_start, day_end)
        ]

        working_hours = self.repo.get_working_hours_for_day(self.db, business.id, day.weekday())
        slots = generate_slots(day, working_hours, service.duration, busy)
        return AvailableSlotsResponse(
            business_id=business.id,
            service_id=service.id,
            date=day,
            slots=[TimeSlot(start=start, end=end) for start, end in slots],
        )

    # Bookings & analytics

    def list_bookings(
        self, business_id: str, user: User, status: Optional[str] = None, limit: int = 50, offset: int = 0
    ) -> list[Appointment]:
        business = self.get_owned_business(business_id, user)
        return self.repo.list_appointments(self.db, business.id, status, limit, offset)

    def get_analytics(self, business_id: str, user: User) -> BusinessAnalytics:
        business = self.get_owned_business(business_id, user)

        revenue = self.repo.revenue_by_service(self.db, business.id)
        performance = {
            s.id: ServicePerformance(
                service_id=s.id, name=s.name, bookings=0, paid_bookings=0, revenue=revenue.get(s.id, 0.0)
            )
            for s in self.repo.list_services(self.db, business.id, active_only=False)
        }

        by_status: dict[str, int] = {}
        total = paid = 0
        for service_id, name, status, is_paid, count in self.repo.appointment_stats(self.db, business.id):
            entry = performance.setdefault(
                service_id,
                ServicePerformance(
                    service_id=service_id, name=name, bookings=0, paid_bookings=0, revenue=revenue.get(service_id, 0.0)
                ),
            )
            entry.bookings += count
            by_status[status] = by_status.get(status, 0) + count
            total += count
            if is_paid:
                entry.paid_bookings += count
                paid += count

        average, review_count = self.repo.rating_summary(self.db, [business.id]).get(business.id, (None, 0))
        return BusinessAnalytics(
            business_id=business.id,
            total_bookings=total,
            paid_bookings=paid,
            bookings_by_status=by_status,
            total_revenue=round(sum(revenue.values()), 2),
            average_rating=average,
            review_count=review_count,
            services=sorted(performance.values(), key=lambda p: (-p.bookings, p.name)),
        )
