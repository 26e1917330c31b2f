"""Staff repository - Database operations for staff members"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Service, StaffMember


class StaffRepository:
    """Repository for staff database operations"""

    @staticmethod
    def list_for_business(db: Session, business_id: str, active_only: bool = False) -> list[StaffMember]:
        query = db.query(StaffMember).filter(StaffMember.business_id == business_id)
        if active_only:
            query = query.filter(StaffMember.is_active.is_(True))
        return query.order_by(StaffMember.name, StaffMember.id).all()

    @staticmethod
    def get(db: Session, business_id: str, staff_id: str) -> Optional[StaffMember]:
        return (
            db.query(StaffMember)
            .filter(StaffMember.id == staff_id, StaffMember.business_id == business_id)
            .first()
        )

    @staticmethod
    def get_by_email(db: Session, business_id: str, email: str) -> Optional[StaffMember]:
        return (
            db.query(StaffMember)
            .filter(StaffMember.business_id == business_id, StaffMember.email == email)
            .first()
        )

    @staticmethod
    def count_business_services(db: Session, business_id: str, service_ids: list[str]) -> int:
        return (
            db.query(Service)
            .filter(Service.business_id == business_id, Service.id.in_(service_ids))
            .count()
        )

    @staticmethod
    def create(db: Session, staff: StaffMember) -> StaffMember:
        db.add(staff)
        db.commit()
        db.refresh(staff)
        return staff

    @staticmethod
    def update(db: Session, staff: StaffMember, **updates) -> StaffMember:
        for key, value in updates.items():
            if value is not None and hasattr(staff, key):
                setattr(staff, key, value)
        db.commit()
        db.refresh(staff)
        return staff

    @staticmethod
    def delete(db: Session, staff: StaffMember) -> None:
        db.delete(staff)
        db.commit()
