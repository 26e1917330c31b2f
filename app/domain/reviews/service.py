"""Review service - Ratings for businesses and services, plus content reports"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...cache import invalidate_business_cache
from ...models import Business, ContentReport, Review, Service, User
from ...services.notification_service import notify_user
from ...utils.sanitization import sanitize_text
from .repository import ReviewRepository
from .schemas import ReviewCreate, ReviewReportCreate, ReviewResponse, ReviewUpdate

logger = logging.getLogger(__name__)


def to_review_response(review: Review) -> ReviewResponse:
    return ReviewResponse(
        id=review.id,
        business_id=review.business_id,
        service_id=review.service_id,
        user_id=review.user_id,
        user_name=review.user.full_name if review.user else None,
        rating=review.rating,
        comment=review.comment,
        created_at=review.created_at,
    )


class ReviewService:
    """Service layer for review business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ReviewRepository()

    def list_reviews(
        self,
        business_id: Optional[str] = None,
        service_id: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Review]:
        if not business_id and not service_id:
            raise HTTPException(status_code=400, detail="businessId or serviceId is required")
        return self.repo.list_reviews(self.db, business_id, service_id, limit, offset)

    def _get_authored(self, review_id: str, user: User) -> Review:
        review = self.repo.get_by_id(self.db, review_id)
        if not review:
            raise HTTPException(status_code=404, detail="Review not found")
        if review.user_id != user.id:
            raise HTTPException(status_code=403, detail="You can only modify your own reviews")
        return review

    async def create_review(self, data: ReviewCreate, user: User) -> Review:
        service = None
        if data.serviceId:
            service = self.db.query(Service).filter(Service.id == data.serviceId).first()
            if not service:
                raise HTTPException(status_code=404, detail="Service not found")
            business = service.business
        else:
            business = self.db.query(Business).filter(Business.id == data.businessId).first()
            if not business:
                raise HTTPException(status_code=404, detail="Business not found")

        if business.owner_id == user.id:
            raise HTTPException(status_code=400, detail="You cannot review your own business")

        if self.repo.find_existing(self.db, user.id, business.id, service.id if service else None):
            raise HTTPException(status_code=409, detail="You have already reviewed this")

        review = self.repo.create(
            self.db,
            business_id=business.id,
            service_id=service.id if service else None,
            user_id=user.id,
            rating=data.rating,
            comment=sanitize_text(data.comment),
        )
        invalidate_business_cache(business.id)
        logger.info(f"⭐ Review {review.id} ({review.rating}/5) created for business {business.id}")

        target = service.name if service else business.name
        await notify_user(
            self.db,
            user_id=business.owner_id,
            title="New Review",
            message=f"New {review.rating}-star review for {target}",
        )
        return review

    def update_review(self, review_id: str, data: ReviewUpdate, user: User) -> Review:
        review = self._get_authored(review_id, user)
        if data.rating is not None:
            review.rating = data.rating
        if data.comment is not None:
            review.comment = sanitize_text(data.comment)
        review = self.repo.save(self.db, review)
        invalidate_business_cache(review.business_id)
        return review

    def delete_review(self, review_id: str, user: User) -> None:
        review = self._get_authored(review_id, user)
        business_id = review.business_id
        self.repo.delete(self.db, review)
        invalidate_business_cache(business_id)

    def report_review(self, review_id: str, data: ReviewReportCreate, user: User) -> ContentReport:
        review = self.repo.get_by_id(self.db, review_id)
        if not review:
            raise HTTPException(status_code=404, detail="Review not found")
        report = self.repo.create_report(
            self.db,
            reporter_id=user.id,
            review_id=review.id,
            reason=sanitize_text(data.reason, max_length=500),
            status="pending",
        )
        logger.info(f"🚩 Review {review.id} reported by user {user.id}")
        return report
