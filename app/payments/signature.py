"""
PayFast form signature.

The gateway authenticates a redirect (and later its own notification) with an
MD5 digest over the canonical form fields:

    name1=value1&name2=value2[&passphrase=...]

Fields are ordered by name (ordinal order) and every value is trimmed before
being URL-encoded. Both directions must canonicalise identically or the
digests will not match.
"""

import hashlib
import hmac
from decimal import ROUND_HALF_UP, Decimal
from typing import Mapping, Optional, Union
from urllib.parse import quote

SIGNATURE_FIELD = "signature"

# Characters left unescaped by encodeURIComponent
_UNRESERVED = "-_.!~*'()"

_CENTS = Decimal("0.01")


def format_amount(amount: Union[Decimal, int, float, str]) -> str:
    """Render an amount with exactly two fraction digits ("100" -> "100.00")"""
    value = Decimal(str(amount))
    if not value.is_finite() or value <= 0:
        raise ValueError("Amount must be a positive number")
    return str(value.quantize(_CENTS, rounding=ROUND_HALF_UP))


def encode_value(value: str) -> str:
    """URL-encode a trimmed value"""
    return quote(str(value).strip(), safe=_UNRESERVED)


def canonical_string(fields: Mapping[str, Optional[str]], passphrase: Optional[str] = None) -> str:
    """
    Build the string that gets hashed.

    ``None`` values are omitted and the ``signature`` field itself is never
    part of the signed string.
    """
    pairs = [
        f"{name}={encode_value(value)}"
        for name, value in sorted(fields.items())
        if value is not None and name != SIGNATURE_FIELD
    ]
    payload = "&".join(pairs)

    if passphrase and passphrase.strip():
        payload = f"{payload}&passphrase={encode_value(passphrase)}"

    return payload


def generate_signature(
    fields: Mapping[str, Optional[str]], passphrase: Optional[str] = None
) -> str:
    """MD5 signature (lowercase hex) of the canonical field string"""
    payload = canonical_string(fields, passphrase)
    return hashlib.md5(payload.encode("utf-8")).hexdigest()  # noqa: S324 - gateway contract


def verify_signature(fields: Mapping[str, Optional[str]], passphrase: Optional[str] = None) -> bool:
    """Check the ``signature`` carried in ``fields`` against the recomputed one"""
    received = fields.get(SIGNATURE_FIELD)
    if not received:
        return False

    expected = generate_signature(fields, passphrase)
    return hmac.compare_digest(expected, str(received))
