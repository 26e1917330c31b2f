from .availability import (
    SLOT_STEP_MINUTES,
    generate_slots,
    intervals_overlap,
    is_within_working_hours,
)

__all__ = [
    "SLOT_STEP_MINUTES",
    "generate_slots",
    "intervals_overlap",
    "is_within_working_hours",
]
