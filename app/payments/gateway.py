"""PayFast hosted payment page integration"""

import logging
from decimal import Decimal
from typing import Awaitable, Callable, Optional

from pydantic import BaseModel, Field

from .. import config
from .signature import SIGNATURE_FIELD, format_amount, generate_signature, verify_signature

logger = logging.getLogger(__name__)

SANDBOX_BASE_URL = "https://sandbox.payfast.co.za"
PRODUCTION_BASE_URL = "https://www.payfast.co.za"
PROCESS_PATH = "/eng/process"

# Public sandbox merchant published by PayFast for integration testing
SANDBOX_MERCHANT_ID = "10000100"
SANDBOX_MERCHANT_KEY = "46f0cd694581a"

PAYMENT_COMPLETE = "COMPLETE"


class PaymentGatewayError(Exception):
    """Raised when a payment cannot be initialised with the gateway"""

    pass


class PayFastConfig(BaseModel):
    environment: str
    merchant_id: str
    merchant_key: str
    passphrase: str = ""
    base_url: str
    return_url: str
    cancel_url: str
    notify_url: str

    @property
    def process_url(self) -> str:
        return f"{self.base_url}{PROCESS_PATH}"


class PaymentRequest(BaseModel):
    amount: Decimal = Field(gt=0)
    item_name: str = Field(min_length=1, max_length=100)
    item_description: Optional[str] = Field(default=None, max_length=255)
    email_address: Optional[str] = None
    cell_number: Optional[str] = None
    custom_str1: Optional[str] = None
    custom_str2: Optional[str] = None
    custom_str3: Optional[str] = None
    custom_str4: Optional[str] = None
    custom_str5: Optional[str] = None
    custom_int1: Optional[int] = None
    custom_int2: Optional[int] = None
    custom_int3: Optional[int] = None
    custom_int4: Optional[int] = None
    custom_int5: Optional[int] = None


class PaymentForm(BaseModel):
    url: str
    fields: dict[str, str]


def get_payfast_config(environment: Optional[str] = None) -> PayFastConfig:
    """
    Resolve gateway credentials and endpoints.

    Selection depends only on deployment configuration: ``environment``
    defaults to ``PAYFAST_ENVIRONMENT``. Production requires real merchant
    credentials; the sandbox falls back to the public test merchant.
    """
    environment = (environment or config.PAYFAST_ENVIRONMENT).lower()
    if environment not in ("sandbox", "production"):
        raise PaymentGatewayError(f"Unknown PayFast environment: {environment}")

    callbacks = {
        "return_url": f"{config.FRONTEND_URL}/payment/success",
        "cancel_url": f"{config.FRONTEND_URL}/payment/cancel",
        "notify_url": f"{config.APP_URL}/payments/notify",
    }

    if environment == "production":
        if not config.PAYFAST_MERCHANT_ID or not config.PAYFAST_MERCHANT_KEY:
            raise PaymentGatewayError("PayFast production credentials are not configured")
        return PayFastConfig(
            environment=environment,
            merchant_id=config.PAYFAST_MERCHANT_ID,
            merchant_key=config.PAYFAST_MERCHANT_KEY,
            passphrase=config.PAYFAST_PASSPHRASE or "",
            base_url=PRODUCTION_BASE_URL,
            **callbacks,
        )

    return PayFastConfig(
        environment=environment,
        merchant_id=config.PAYFAST_MERCHANT_ID or SANDBOX_MERCHANT_ID,
        merchant_key=config.PAYFAST_MERCHANT_KEY or SANDBOX_MERCHANT_KEY,
        passphrase=config.PAYFAST_PASSPHRASE or "",
        base_url=SANDBOX_BASE_URL,
        **callbacks,
    )


class PayFastGateway:
    """Builds signed redirect forms and validates gateway notifications"""

    def __init__(self, payfast_config: PayFastConfig):
        self.config = payfast_config

    def build_payment_form(self, payment: PaymentRequest) -> PaymentForm:
        fields: dict[str, str] = {
            "merchant_id": self.config.merchant_id,
            "merchant_key": self.config.merchant_key,
            "return_url": self.config.return_url,
            "cancel_url": self.config.cancel_url,
            "notify_url": self.config.notify_url,
            "amount": format_amount(payment.amount),
            "item_name": payment.item_name,
        }

        optional = payment.model_dump(exclude={"amount", "item_name"})
        for name, value in optional.items():
            if value is None or (isinstance(value, str) and not value.strip()):
                continue
            fields[name] = str(value)

        fields[SIGNATURE_FIELD] = generate_signature(fields, self.config.passphrase)
        logger.info(
            f"💳 Built PayFast form ({self.config.environment}) for '{payment.item_name}' "
            f"amount={fields['amount']}"
        )
        return PaymentForm(url=self.config.process_url, fields=fields)

    def validate_notification(self, fields: dict[str, str]) -> bool:
        is_valid = verify_signature(fields, self.config.passphrase)
        if not is_valid:
            logger.warning(
                f"🚫 PayFast notification signature mismatch for pf_payment_id={fields.get('pf_payment_id')}"
            )
        return is_valid

    async def handle_notification(
        self,
        fields: dict[str, str],
        on_success: Callable[[dict[str, str]], Awaitable[None]],
        on_failure: Callable[[dict[str, str], str], Awaitable[None]],
    ) -> bool:
        """
        Dispatch a notification.

        Returns False (and calls nothing) when the signature does not match.
        """
        if not self.validate_notification(fields):
            return False

        status = fields.get("payment_status", "")
        if status == PAYMENT_COMPLETE:
            await on_success(fields)
        else:
            await on_failure(fields, f"Payment failed with status: {status or 'UNKNOWN'}")
        return True
