"""Unit tests for booking status transitions."""

import pytest

from app.domain.bookings.service import ALLOWED_TRANSITIONS, can_transition
from app.models import APPOINTMENT_STATUSES


@pytest.mark.parametrize(
    "current, new",
    [
        ("pending", "confirmed"),
        ("pending", "cancelled"),
        ("confirmed", "completed"),
        ("confirmed", "no_show"),
        ("confirmed", "rescheduled"),
        ("rescheduled", "confirmed"),
        ("rescheduled", "completed"),
    ],
)
def test_allowed_transitions(current, new):
    """Test the documented transitions are permitted."""
    assert can_transition(current, new) is True


@pytest.mark.parametrize(
    "current, new",
    [
        ("pending", "completed"),
        ("pending", "no_show"),
        ("confirmed", "pending"),
        ("cancelled", "confirmed"),
        ("completed", "cancelled"),
        ("no_show", "confirmed"),
        ("unknown", "confirmed"),
    ],
)
def test_disallowed_transitions(current, new):
    """Test everything else is refused."""
    assert can_transition(current, new) is False


def test_terminal_statuses_have_no_exits():
    """Test cancelled, completed and no_show are final."""
    for status in ("cancelled", "completed", "no_show"):
        assert ALLOWED_TRANSITIONS[status] == ()


def test_every_status_is_covered():
    """Test the transition table knows every appointment status."""
    assert set(ALLOWED_TRANSITIONS) == set(APPOINTMENT_STATUSES)
