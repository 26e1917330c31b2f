"""Service repository - Database operations for bookable services"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Service, ServiceCategory


class ServiceRepository:
    """Repository for service database operations"""

    @staticmethod
    def list_for_business(db: Session, business_id: str, include_inactive: bool = False) -> list[Service]:
        query = db.query(Service).filter(Service.business_id == business_id)
        if not include_inactive:
            query = query.filter(Service.is_active.is_(True))
        return query.order_by(Service.name.asc()).all()

    @staticmethod
    def get_by_id(db: Session, service_id: str) -> Optional[Service]:
        return db.query(Service).filter(Service.id == service_id).first()

    @staticmethod
    def category_exists(db: Session, category_id: str) -> bool:
        return db.query(ServiceCategory.id).filter(ServiceCategory.id == category_id).first() is not None

    @staticmethod
    def list_categories(db: Session) -> list[ServiceCategory]:
        return db.query(ServiceCategory).order_by(ServiceCategory.name).all()

    @staticmethod
    def create(db: Session, **data) -> Service:
        service = Service(**data)
        db.add(service)
        db.commit()
        db.refresh(service)
        return service

    @staticmethod
    def update(db: Session, service: Service, **updates) -> Service:
        for key, value in updates.items():
            if value is not None and hasattr(service, key):
                setattr(service, key, value)
        db.commit()
        db.refresh(service)
        return service

    @staticmethod
    def delete(db: Session, service: Service) -> None:
        db.delete(service)
        db.commit()
