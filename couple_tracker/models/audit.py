"""
Audit Models for Couple Tracker

Every change to a couple's important dates is logged for audit purposes,
together with the records the dates view had to leave out.
This provides:
1. Traceability of who created, edited or removed a date
2. Diagnostics for corrupt stored dates that silently vanish from the view
3. Ability to reconstruct history

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """
    Types of events we audit.
    """
    # Record changes
    DATE_CREATED = "date_created"
    DATE_UPDATED = "date_updated"
    DATE_DELETED = "date_deleted"

    # Validation
    SCHEMA_VALIDATION_FAILED = "schema_validation_failed"
    SEMANTIC_VALIDATION_FAILED = "semantic_validation_failed"

    # Derived views
    DATE_EXCLUDED = "date_excluded"
    DATES_VIEW_COMPUTED = "dates_view_computed"
    UPCOMING_PREVIEW_COMPUTED = "upcoming_preview_computed"

    # System events
    SYSTEM_ERROR = "system_error"
    STORAGE_ERROR = "storage_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'important_date', 'couple')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="Opaque ID of the entity this event relates to"
    )
    couple_id: Optional[str] = Field(
        default=None,
        description="Couple whose data the event touches"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., all events of one render pass)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )

    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "couple_id": self.couple_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.date_created(date_id, couple_id, title, correlation_id)
        event = AuditEventBuilder.date_excluded(date_id, couple_id, raw_date, correlation_id)
    """

    @staticmethod
    def date_created(
        date_id: str,
        couple_id: str,
        title: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATE_CREATED,
            entity_type="important_date",
            entity_id=date_id,
            couple_id=couple_id,
            correlation_id=correlation_id,
            description=f"Important date created: {title}",
            details={"title": title},
            is_user_action=True,
        )

    @staticmethod
    def date_updated(
        date_id: str,
        couple_id: str,
        changed_fields: list[str],
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATE_UPDATED,
            entity_type="important_date",
            entity_id=date_id,
            couple_id=couple_id,
            correlation_id=correlation_id,
            description=f"Important date updated ({len(changed_fields)} fields changed)",
            details={"changed_fields": changed_fields},
            is_user_action=True,
        )

    @staticmethod
    def date_deleted(
        date_id: str,
        couple_id: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATE_DELETED,
            entity_type="important_date",
            entity_id=date_id,
            couple_id=couple_id,
            correlation_id=correlation_id,
            description="Important date deleted",
            is_user_action=True,
        )

    @staticmethod
    def validation_failed(
        couple_id: str,
        stage: str,
        issues: list[dict],
        correlation_id: UUID,
        date_id: Optional[str] = None,
    ) -> AuditEvent:
        event_type = (
            AuditEventType.SCHEMA_VALIDATION_FAILED
            if stage == "schema"
            else AuditEventType.SEMANTIC_VALIDATION_FAILED
        )
        return AuditEvent(
            event_type=event_type,
            severity=AuditSeverity.WARNING,
            entity_type="important_date",
            entity_id=date_id,
            couple_id=couple_id,
            correlation_id=correlation_id,
            description=f"{stage.capitalize()} validation failed with {len(issues)} issues",
            details={
                "stage": stage,
                "issues": issues,
            },
        )

    @staticmethod
    def date_excluded(
        date_id: str,
        couple_id: str,
        raw_date: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATE_EXCLUDED,
            severity=AuditSeverity.WARNING,
            entity_type="important_date",
            entity_id=date_id,
            couple_id=couple_id,
            correlation_id=correlation_id,
            description="Important date left out of the view: unparseable date",
            details={"raw_date": raw_date},
        )

    @staticmethod
    def view_computed(
        couple_id: str,
        view: str,
        today: str,
        counts: dict[str, int],
        correlation_id: UUID
    ) -> AuditEvent:
        event_type = (
            AuditEventType.UPCOMING_PREVIEW_COMPUTED
            if view == "upcoming_preview"
            else AuditEventType.DATES_VIEW_COMPUTED
        )
        return AuditEvent(
            event_type=event_type,
            severity=AuditSeverity.DEBUG,
            entity_type="couple",
            entity_id=couple_id,
            couple_id=couple_id,
            correlation_id=correlation_id,
            description=f"{view} computed for {today}",
            details={"today": today, **counts},
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )

    @staticmethod
    def storage_error(
        operation: str,
        couple_id: str,
        error_message: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            couple_id=couple_id,
            description=f"Document store error during {operation}",
            error_message=error_message,
            details={"operation": operation},
            correlation_id=correlation_id,
        )
