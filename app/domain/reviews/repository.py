"""Review repository - Database operations for reviews and content reports"""

from typing import Optional

from sqlalchemy.orm import Session, selectinload

from ...models import ContentReport, Review


class ReviewRepository:
    """Repository for review database operations"""

    @staticmethod
    def list_reviews(
        db: Session,
        business_id: Optional[str] = None,
        service_id: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Review]:
        query = db.query(Review).options(selectinload(Review.user))
        if service_id:
            query = query.filter(Review.service_id == service_id)
        elif business_id:
            query = query.filter(Review.business_id == business_id)
        return query.order_by(Review.created_at.desc()).offset(offset).limit(limit).all()

    @staticmethod
    def get_by_id(db: Session, review_id: str) -> Optional[Review]:
        return db.query(Review).filter(Review.id == review_id).first()

    @staticmethod
    def find_existing(
        db: Session, user_id: str, business_id: str, service_id: Optional[str]
    ) -> Optional[Review]:
        """The user's review of the same target (business-level or one service)"""
        query = db.query(Review).filter(Review.user_id == user_id)
        if service_id:
            query = query.filter(Review.service_id == service_id)
        else:
            query = query.filter(Review.business_id == business_id, Review.service_id.is_(None))
        return query.first()

    @staticmethod
    def create(db: Session, **data) -> Review:
        review = Review(**data)
        db.add(review)
        db.commit()
        db.refresh(review)
        return review

    @staticmethod
    def save(db: Session, review: Review) -> Review:
        db.commit()
        db.refresh(review)
        return review

    @staticmethod
    def delete(db: Session, review: Review) -> None:
        db.delete(review)
        db.commit()

    @staticmethod
    def create_report(db: Session, **data) -> ContentReport:
        report = ContentReport(**data)
        db.add(report)
        db.commit()
        db.refresh(report)
        return report
