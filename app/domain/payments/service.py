"""
Payment service - Booking payments through the PayFast hosted payment page

Flow: initiate stores a pending Payment and returns the signed form; the
gateway later posts a notification which either completes the payment and
confirms the booking, or marks the payment failed.
"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import ROLE_ADMIN, Payment, User
from ...payments import (
    PaymentGatewayError,
    PaymentRequest,
    PayFastGateway,
    format_amount,
    get_payfast_config,
)
from ...services.notification_service import notify_user, send_payment_received_notifications
from .repository import PaymentRepository
from .schemas import PaymentInitiateResponse

logger = logging.getLogger(__name__)

UNPAYABLE_STATUSES = ("cancelled", "completed", "no_show")
# Payment id travels through the gateway in this custom field
PAYMENT_ID_FIELD = "custom_str2"


def get_payment_gateway() -> PayFastGateway:
    return PayFastGateway(get_payfast_config())


def _amounts_match(reported: str, expected) -> bool:
    try:
        return format_amount(reported) == format_amount(expected)
    except (ValueError, ArithmeticError):
        return False


class PaymentService:
    """Service layer for payment business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = PaymentRepository()

    def initiate_payment(self, appointment_id: str, user: User) -> PaymentInitiateResponse:
        appointment = self.repo.get_appointment(self.db, appointment_id)
        if not appointment:
            raise HTTPException(status_code=404, detail="Booking not found")
        if appointment.user_id != user.id:
            raise HTTPException(status_code=403, detail="You can only pay for your own bookings")
        if appointment.is_paid:
            raise HTTPException(status_code=400, detail="This booking has already been paid")
        if appointment.status in UNPAYABLE_STATUSES:
            raise HTTPException(status_code=400, detail=f"Cannot pay for a {appointment.status} booking")

        service = appointment.service
        payment = self.repo.create(
            self.db,
            appointment_id=appointment.id,
            user_id=user.id,
            amount=service.price,
            status="pending",
        )

        try:
            gateway = get_payment_gateway()
            form = gateway.build_payment_form(
                PaymentRequest(
                    amount=service.price,
                    item_name=service.name[:100],
                    item_description=f"Booking at {service.business.name}"[:255],
                    email_address=user.email or None,
                    custom_str1=appointment.id,
                    custom_str2=payment.id,
                )
            )
        except (PaymentGatewayError, ValueError) as e:
            logger.error(f"❌ Payment initialization failed for booking {appointment.id}: {e}")
            payment.status = "failed"
            self.repo.save(self.db, payment)
            raise HTTPException(status_code=502, detail="Payment initialization failed") from e

        logger.info(f"💳 Payment {payment.id} initiated for booking {appointment.id}")
        return PaymentInitiateResponse(payment_id=payment.id, url=form.url, fields=form.fields)

    async def process_notification(self, fields: dict[str, str]) -> None:
        """Validate a gateway notification and apply it"""
        try:
            gateway = get_payment_gateway()
        except PaymentGatewayError as e:
            logger.error(f"❌ PayFast configuration unusable while handling notification: {e}")
            raise HTTPException(status_code=503, detail="Payment gateway unavailable") from e

        logger.info(
            f"📥 PayFast notification pf_payment_id={fields.get('pf_payment_id')} "
            f"status={fields.get('payment_status')}"
        )
        is_valid = await gateway.handle_notification(
            fields, on_success=self._complete_payment, on_failure=self._fail_payment
        )
        if not is_valid:
            raise HTTPException(status_code=400, detail="Invalid signature")

    def _get_notified_payment(self, fields: dict[str, str]) -> Payment:
        payment_id = fields.get(PAYMENT_ID_FIELD)
        payment = self.repo.get_by_id(self.db, payment_id) if payment_id else None
        if not payment:
            logger.warning(f"⚠️ Notification for unknown payment {payment_id}")
            raise HTTPException(status_code=404, detail="Payment not found")
        return payment

    async def _complete_payment(self, fields: dict[str, str]) -> None:
        payment = self._get_notified_payment(fields)
        if payment.status == "completed":
            logger.info(f"ℹ️ Payment {payment.id} already completed, ignoring repeat notification")
            return

        amount_gross = fields.get("amount_gross")
        if amount_gross and not _amounts_match(amount_gross, payment.amount):
            payment.status = "failed"
            payment.payment_metadata = dict(fields)
            self.repo.save(self.db, payment)
            logger.error(f"❌ Amount mismatch for payment {payment.id}: {amount_gross} != {payment.amount}")
            raise HTTPException(status_code=400, detail="Payment amount mismatch")

        payment.status = "completed"
        payment.transaction_id = fields.get("pf_payment_id")
        payment.payment_metadata = dict(fields)

        appointment = payment.appointment
        appointment.is_paid = True
        if appointment.status in ("pending", "rescheduled"):
            appointment.status = "confirmed"
        elif appointment.status != "confirmed":
            logger.warning(f"⚠️ Payment completed for {appointment.status} booking {appointment.id}")

        self.repo.save(self.db, payment)
        logger.info(f"✅ Payment {payment.id} completed (pf_payment_id={payment.transaction_id})")

        await send_payment_received_notifications(self.db, appointment, format_amount(payment.amount))

    async def _fail_payment(self, fields: dict[str, str], reason: str) -> None:
        payment = self._get_notified_payment(fields)
        if payment.status == "completed":
            logger.warning(f"⚠️ Ignoring {fields.get('payment_status')} notification for completed payment {payment.id}")
            return

        payment.status = "failed"
        payment.payment_metadata = dict(fields)
        self.repo.save(self.db, payment)
        logger.warning(f"⚠️ Payment {payment.id} failed: {reason}")

        await notify_user(
            self.db,
            user_id=payment.user_id,
            title="Payment Failed",
            message=f"Your payment for {payment.appointment.service.name} was not successful",
            notification_type="error",
        )
        raise HTTPException(status_code=400, detail=reason)

    def get_payment(self, payment_id: str, user: User) -> Payment:
        payment = self.repo.get_by_id(self.db, payment_id)
        if not payment:
            raise HTTPException(status_code=404, detail="Payment not found")
        owner_id = payment.appointment.service.business.owner_id
        if user.id not in (payment.user_id, owner_id) and user.role != ROLE_ADMIN:
            raise HTTPException(status_code=403, detail="You do not have access to this payment")
        return payment
