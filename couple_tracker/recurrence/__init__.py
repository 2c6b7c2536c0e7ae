"""Recurrence engine package."""

from couple_tracker.recurrence.countdown import (
    SUPPORTED_LOCALES,
    build_countdown,
    countdown_state,
    describe_countdown,
    no_upcoming_message,
)
from couple_tracker.recurrence.engine import (
    build_occurrence,
    classify,
    days_until,
    is_past,
    next_occurrence,
    parse_base_date,
)

__all__ = [
    "SUPPORTED_LOCALES",
    "build_countdown",
    "build_occurrence",
    "classify",
    "countdown_state",
    "days_until",
    "describe_countdown",
    "is_past",
    "next_occurrence",
    "no_upcoming_message",
    "parse_base_date",
]
