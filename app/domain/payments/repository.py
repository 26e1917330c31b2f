"""Payment repository - Database operations for payments"""

from typing import Optional

from sqlalchemy.orm import Session, selectinload

from ...models import Appointment, Payment, Service


class PaymentRepository:
    """Repository for payment database operations"""

    @staticmethod
    def get_by_id(db: Session, payment_id: str) -> Optional[Payment]:
        return (
            db.query(Payment)
            .options(
                selectinload(Payment.appointment)
                .selectinload(Appointment.service)
                .selectinload(Service.business)
            )
            .filter(Payment.id == payment_id)
            .first()
        )

    @staticmethod
    def get_appointment(db: Session, appointment_id: str) -> Optional[Appointment]:
        return db.query(Appointment).filter(Appointment.id == appointment_id).first()

    @staticmethod
    def create(db: Session, **data) -> Payment:
        payment = Payment(**data)
        db.add(payment)
        db.commit()
        db.refresh(payment)
        return payment

    @staticmethod
    def save(db: Session, payment: Payment) -> Payment:
        db.commit()
        db.refresh(payment)
        return payment
