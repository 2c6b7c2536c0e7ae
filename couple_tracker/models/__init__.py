"""
Data Models Package

This package contains all Pydantic models used in Couple Tracker.
All data flowing between the store, the recurrence engine and the views
conforms to these schemas.
"""

from couple_tracker.models.dates import (
    Author,
    Countdown,
    CountdownState,
    DateCard,
    DateClassification,
    DatesView,
    ImportantDate,
    ImportantDateInput,
    Occurrence,
    Recurrence,
    UpcomingPreview,
    ValidationIssue,
    ValidationResult,
)
from couple_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Date models
    "Author",
    "Countdown",
    "CountdownState",
    "DateCard",
    "DateClassification",
    "DatesView",
    "ImportantDate",
    "ImportantDateInput",
    "Occurrence",
    "Recurrence",
    "UpcomingPreview",
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
