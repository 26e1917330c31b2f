"""Shared validation utilities"""

import re
from datetime import datetime, time, timezone
from typing import Optional

TIME_OF_DAY_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def validate_phone(phone: Optional[str]) -> Optional[str]:
    """
    Validate and normalize an international phone number.

    Accepts spaces, dashes, dots and brackets; keeps a leading "+".

    Raises:
        ValueError: If the number has fewer than 7 or more than 15 digits
    """
    if not phone:
        return phone

    phone = phone.strip()
    digits = re.sub(r"\D", "", phone)

    if not 7 <= len(digits) <= 15:
        raise ValueError("Phone number must contain between 7 and 15 digits")

    return f"+{digits}" if phone.startswith("+") else digits


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def validate_time_of_day(value: Optional[str]) -> Optional[str]:
    """Validate a 24h "HH:MM" time string"""
    if value is None:
        return value
    if not TIME_OF_DAY_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM format")
    return value


def parse_time_of_day(value: str) -> time:
    hours, minutes = value.split(":")
    return time(int(hours), int(minutes))


def slugify(value: str) -> str:
    """Lowercase URL slug: "Hair & Beauty" -> "hair-beauty" """
    slug = re.sub(r"[^a-z0-9]+", "-", value.strip().lower())
    return slug.strip("-")


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Store datetimes naive; aware inputs are converted to UTC first"""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
