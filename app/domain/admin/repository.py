"""Admin repository - Platform-wide queries for administrators"""

from typing import Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, selectinload

from ...models import (
    AdminSettings,
    Business,
    BusinessCategory,
    ContentReport,
    Payment,
    ServiceCategory,
    User,
)

CATEGORY_MODELS = {"business": BusinessCategory, "service": ServiceCategory}


class AdminRepository:
    """Repository for admin database operations"""

    # Stats

    @staticmethod
    def count_by(db: Session, column) -> dict[str, int]:
        return {value: count for value, count in db.query(column, func.count()).group_by(column).all()}

    @staticmethod
    def completed_payment_totals(db: Session) -> tuple[int, float]:
        count, total = (
            db.query(func.count(Payment.id), func.coalesce(func.sum(Payment.amount), 0))
            .filter(Payment.status == "completed")
            .one()
        )
        return count, float(total)

    @staticmethod
    def count_pending_reports(db: Session) -> int:
        return db.query(ContentReport).filter(ContentReport.status == "pending").count()

    # Users

    @staticmethod
    def list_users(
        db: Session,
        search: Optional[str] = None,
        role: Optional[str] = None,
        status: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[User], int]:
        query = db.query(User)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(or_(User.email.ilike(pattern), User.full_name.ilike(pattern)))
        if role:
            query = query.filter(User.role == role)
        if status:
            query = query.filter(User.status == status)
        total = query.count()
        users = query.order_by(User.created_at.desc(), User.email).offset(offset).limit(limit).all()
        return users, total

    @staticmethod
    def get_user(db: Session, user_id: str) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    # Businesses

    @staticmethod
    def list_businesses(db: Session, status: Optional[str] = None) -> list[Business]:
        query = db.query(Business).options(selectinload(Business.categories))
        if status:
            query = query.filter(Business.status == status)
        return query.order_by(Business.created_at.desc()).all()

    @staticmethod
    def get_business(db: Session, business_id: str) -> Optional[Business]:
        return db.query(Business).filter(Business.id == business_id).first()

    # Categories

    @staticmethod
    def list_categories(db: Session, kind: str) -> list:
        model = CATEGORY_MODELS[kind]
        return db.query(model).order_by(model.name).all()

    @staticmethod
    def get_category(db: Session, kind: str, category_id: str):
        model = CATEGORY_MODELS[kind]
        return db.query(model).filter(model.id == category_id).first()

    @staticmethod
    def create_category(db: Session, kind: str, **data):
        category = CATEGORY_MODELS[kind](**data)
        db.add(category)
        db.commit()
        db.refresh(category)
        return category

    # Settings

    @staticmethod
    def get_settings(db: Session) -> AdminSettings:
        settings = db.query(AdminSettings).filter(AdminSettings.id == "default").first()
        if settings is None:
            settings = AdminSettings(
                id="default", general={}, security={}, email={}, payment={}, integration={}
            )
            db.add(settings)
            db.commit()
            db.refresh(settings)
        return settings

    # Reports

    @staticmethod
    def list_reports(db: Session, status: Optional[str] = None) -> list[ContentReport]:
        query = db.query(ContentReport)
        if status:
            query = query.filter(ContentReport.status == status)
        return query.order_by(ContentReport.created_at.desc()).all()

    @staticmethod
    def get_report(db: Session, report_id: str) -> Optional[ContentReport]:
        return db.query(ContentReport).filter(ContentReport.id == report_id).first()

    @staticmethod
    def save(db: Session, instance):
        db.commit()
        db.refresh(instance)
        return instance

    @staticmethod
    def delete(db: Session, instance) -> None:
        db.delete(instance)
        db.commit()
