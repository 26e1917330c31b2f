from .gateway import (
    PaymentForm,
    PaymentGatewayError,
    PaymentRequest,
    PayFastConfig,
    PayFastGateway,
    get_payfast_config,
)
from .signature import format_amount, generate_signature, verify_signature

__all__ = [
    "PaymentForm",
    "PaymentGatewayError",
    "PaymentRequest",
    "PayFastConfig",
    "PayFastGateway",
    "format_amount",
    "generate_signature",
    "get_payfast_config",
    "verify_signature",
]
