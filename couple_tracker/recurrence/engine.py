"""
Recurrence Engine

Computes, for a caller-supplied "today", the next relevant occurrence of each
important date, splits the dates into upcoming and past, and orders them.

DESIGN DECISION: Everything here is a pure function of its arguments.
- "today" is always passed in, never read from the clock
- records are never mutated; occurrences are rebuilt on every call
- a record whose stored date cannot be parsed is left out of the result,
  without raising and without a sentinel date

DAY-OF-MONTH OVERFLOW: an anchor day that does not exist in the target month
(31 in April, 29-31 in February, Feb 29 in a common year) is clamped to the
last day of that month. The clamp is applied per target month from the
original anchor day, so an anchor of 31 is still the 31st in March.
"""

import calendar
import re
from datetime import date, datetime
from typing import Iterable, Optional, Union

from couple_tracker.models.dates import (
    DateClassification,
    ImportantDate,
    Occurrence,
    Recurrence,
)


DateLike = Union[str, date]

_ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


def _as_date(value: date) -> date:
    # datetime is a date subclass but does not compare with plain dates
    if isinstance(value, datetime):
        return value.date()
    return value


def parse_base_date(value: Optional[DateLike]) -> Optional[date]:
    """
    Parse a stored anchor date.

    Only the calendar form YYYY-MM-DD is accepted. Returns None for anything
    else, including impossible days such as 2023-02-29.
    """
    if isinstance(value, date):
        return _as_date(value)
    if not isinstance(value, str):
        return None

    match = _ISO_DATE.match(value.strip())
    if match is None:
        return None

    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _clamped(year: int, month: int, day: int) -> date:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day, last_day))


def _next_month(year: int, month: int) -> tuple[int, int]:
    if month == 12:
        return year + 1, 1
    return year, month + 1


def next_occurrence(
    base_date: Optional[DateLike],
    recurrence: Recurrence,
    today: date,
) -> Optional[date]:
    """
    Next occurrence of a date on or after `today`.

    Args:
        base_date: Anchor date, as stored or already parsed
        recurrence: Recurrence rule of the record
        today: Reference date of the current render pass

    Returns:
        The occurrence date, or None when the anchor date is invalid.
        Non-recurring dates return the anchor itself, even if it is past.
    """
    anchor = parse_base_date(base_date)
    if anchor is None:
        return None

    today = _as_date(today)
    recurrence = Recurrence(recurrence)

    if recurrence == Recurrence.NONE:
        return anchor

    if recurrence == Recurrence.YEARLY:
        candidate = _clamped(today.year, anchor.month, anchor.day)
        if candidate < today:
            candidate = _clamped(today.year + 1, anchor.month, anchor.day)
        return candidate

    # Monthly
    candidate = _clamped(today.year, today.month, anchor.day)
    if candidate < today:
        year, month = _next_month(today.year, today.month)
        candidate = _clamped(year, month, anchor.day)
    return candidate


def days_until(occurrence: date, today: date) -> int:
    """
    Signed number of days from `today` to `occurrence`.

    Negative values mean the occurrence is in the past.
    """
    return (_as_date(occurrence) - _as_date(today)).days


def build_occurrence(record: ImportantDate, today: date) -> Optional[Occurrence]:
    """Occurrence of one record, or None if its date is unusable."""
    original = parse_base_date(record.base_date)
    if original is None:
        return None

    upcoming = next_occurrence(original, record.recurrence, today)
    return Occurrence(
        record=record,
        next_occurrence=upcoming,
        original_date=original,
    )


def is_past(occurrence: Occurrence, today: date) -> bool:
    """
    Recurring dates never run out, so only one-off dates can be past.
    """
    return (
        occurrence.record.recurrence == Recurrence.NONE
        and occurrence.next_occurrence < _as_date(today)
    )


def classify(records: Iterable[ImportantDate], today: date) -> DateClassification:
    """
    Split records into upcoming and past occurrences.

    - upcoming: soonest first
    - past: most recently passed first
    Both sorts are stable, so ties keep the order the records came in.
    Records with an unparseable date appear in neither list.
    """
    today = _as_date(today)
    upcoming: list[Occurrence] = []
    past: list[Occurrence] = []

    for record in records:
        occurrence = build_occurrence(record, today)
        if occurrence is None:
            continue
        if is_past(occurrence, today):
            past.append(occurrence)
        else:
            upcoming.append(occurrence)

    upcoming.sort(key=lambda occ: occ.next_occurrence)
    past.sort(key=lambda occ: occ.original_date, reverse=True)

    return DateClassification(upcoming=upcoming, past=past)
