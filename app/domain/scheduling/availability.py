"""
Availability calculations - pure functions over working hours and busy intervals

Times are naive UTC datetimes, the same clock bookings are stored in, so
working hours are interpreted as UTC. All intervals are half-open: [start, end).
"""

from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Protocol

from ...shared.validators import parse_time_of_day

SLOT_STEP_MINUTES = 15

Interval = tuple[datetime, datetime]


class DaySchedule(Protocol):
    is_open: bool
    open_time: Optional[str]
    close_time: Optional[str]
    breaks: list


def intervals_overlap(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """Half-open overlap: touching intervals do not overlap"""
    return a_start < b_end and b_start < a_end


def open_interval(day: date, working_hours: Optional[DaySchedule]) -> Optional[Interval]:
    """The day's opening interval, or None when closed or not configured"""
    if working_hours is None or not working_hours.is_open:
        return None
    if not working_hours.open_time or not working_hours.close_time:
        return None
    start = datetime.combine(day, parse_time_of_day(working_hours.open_time))
    end = datetime.combine(day, parse_time_of_day(working_hours.close_time))
    if end <= start:
        return None
    return start, end


def break_intervals(day: date, working_hours: Optional[DaySchedule]) -> list[Interval]:
    if working_hours is None:
        return []
    return [
        (
            datetime.combine(day, parse_time_of_day(b["start"])),
            datetime.combine(day, parse_time_of_day(b["end"])),
        )
        for b in working_hours.breaks or []
    ]


def is_within_working_hours(start: datetime, end: datetime, working_hours: Optional[DaySchedule]) -> bool:
    """True when [start, end) fits the day's opening hours and misses every break"""
    opening = open_interval(start.date(), working_hours)
    if opening is None:
        return False
    if start < opening[0] or end > opening[1]:
        return False
    return not any(intervals_overlap(start, end, b_start, b_end) for b_start, b_end in break_intervals(start.date(), working_hours))


def generate_slots(
    day: date,
    working_hours: Optional[DaySchedule],
    duration: int,
    busy: Iterable[Interval] = (),
    step: int = SLOT_STEP_MINUTES,
) -> list[Interval]:
    """
    Candidate slots of `duration` minutes every `step` minutes.

    A slot is kept when it fits inside the opening interval and overlaps no
    break and no busy interval (blocked times and active bookings).
    """
    if duration <= 0 or step <= 0:
        raise ValueError("duration and step must be positive")

    opening = open_interval(day, working_hours)
    if opening is None:
        return []

    blocked = break_intervals(day, working_hours) + list(busy)
    length = timedelta(minutes=duration)
    slots: list[Interval] = []

    current, close = opening
    while current + length <= close:
        slot_end = current + length
        if not any(intervals_overlap(current, slot_end, b_start, b_end) for b_start, b_end in blocked):
            slots.append((current, slot_end))
        current += timedelta(minutes=step)

    return slots
