"""Payment router - Initiation, PayFast notification webhook and lookup"""

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ...rate_limiter import payment_notify_rate_limit
from .schemas import PaymentInitiate, PaymentInitiateResponse, PaymentResponse
from .service import PaymentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payments", tags=["Payments"])


def get_payment_service(db: Session = Depends(get_db)) -> PaymentService:
    """Dependency injection for PaymentService"""
    return PaymentService(db)


@router.post("/initiate", response_model=PaymentInitiateResponse)
async def initiate_payment(
    data: PaymentInitiate,
    current_user: User = Depends(get_current_user),
    service: PaymentService = Depends(get_payment_service),
):
    """Create a pending payment and return the signed gateway form"""
    return service.initiate_payment(data.appointmentId, current_user)


@router.post("/notify")
async def payment_notification(
    request: Request,
    _: None = Depends(payment_notify_rate_limit),
    service: PaymentService = Depends(get_payment_service),
):
    """
    Server-to-server notification from PayFast (form-encoded).

    Public endpoint: authenticity comes from the signature only.
    """
    form = await request.form()
    fields = {key: str(value) for key, value in form.items()}
    await service.process_notification(fields)
    return {"status": "ok"}


@router.get("/{payment_id}", response_model=PaymentResponse)
async def get_payment(
    payment_id: str,
    current_user: User = Depends(get_current_user),
    service: PaymentService = Depends(get_payment_service),
):
    return service.get_payment(payment_id, current_user)
