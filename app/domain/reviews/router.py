"""Review router - FastAPI endpoints for reviews"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from .schemas import (
    ContentReportResponse,
    ReviewCreate,
    ReviewReportCreate,
    ReviewResponse,
    ReviewUpdate,
)
from .service import ReviewService, to_review_response

router = APIRouter(prefix="/reviews", tags=["Reviews"])


def get_review_service(db: Session = Depends(get_db)) -> ReviewService:
    """Dependency injection for ReviewService"""
    return ReviewService(db)


@router.get("", response_model=list[ReviewResponse])
async def list_reviews(
    business_id: Optional[str] = Query(None, alias="businessId"),
    service_id: Optional[str] = Query(None, alias="serviceId"),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    service: ReviewService = Depends(get_review_service),
):
    """Reviews of a business or a service, newest first"""
    reviews = service.list_reviews(business_id, service_id, limit, offset)
    return [to_review_response(r) for r in reviews]


@router.post("", response_model=ReviewResponse, status_code=201)
async def create_review(
    data: ReviewCreate,
    current_user: User = Depends(get_current_user),
    service: ReviewService = Depends(get_review_service),
):
    review = await service.create_review(data, current_user)
    return to_review_response(review)


@router.patch("/{review_id}", response_model=ReviewResponse)
async def update_review(
    review_id: str,
    data: ReviewUpdate,
    current_user: User = Depends(get_current_user),
    service: ReviewService = Depends(get_review_service),
):
    return to_review_response(service.update_review(review_id, data, current_user))


@router.delete("/{review_id}")
async def delete_review(
    review_id: str,
    current_user: User = Depends(get_current_user),
    service: ReviewService = Depends(get_review_service),
):
    service.delete_review(review_id, current_user)
    return {"message": "Review deleted"}


@router.post("/{review_id}/report", response_model=ContentReportResponse, status_code=201)
async def report_review(
    review_id: str,
    data: ReviewReportCreate,
    current_user: User = Depends(get_current_user),
    service: ReviewService = Depends(get_review_service),
):
    return service.report_review(review_id, data, current_user)
