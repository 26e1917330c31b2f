"""Payment domain schemas"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_serializer


class PaymentInitiate(BaseModel):
    appointmentId: str


class PaymentInitiateResponse(BaseModel):
    """Where the browser must post the signed form"""

    payment_id: str
    url: str
    fields: dict[str, str]


class PaymentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    appointment_id: str
    user_id: str
    amount: Decimal
    status: str
    transaction_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_serializer("amount")
    def serialize_amount(self, amount: Decimal) -> str:
        return f"{amount:.2f}"
