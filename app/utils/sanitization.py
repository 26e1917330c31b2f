import html
import re
from typing import Optional

CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")


def sanitize_text(value: Optional[str], max_length: int = 1000) -> Optional[str]:
    """
    Clean user supplied free text (messages, reviews, report reasons).

    Strips surrounding whitespace and control characters, then escapes HTML.

    Raises:
        ValueError: If the stripped input exceeds max_length
    """
    if value is None:
        return None

    value = CONTROL_CHARS.sub("", str(value).strip())

    if len(value) > max_length:
        raise ValueError(f"Input exceeds maximum length of {max_length} characters")

    return html.escape(value, quote=True)
