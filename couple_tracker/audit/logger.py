"""
Audit Logger

DESIGN DECISION: Every change to a couple's dates is logged, and so is every
record the dates view leaves out because its stored date is unusable.
The recurrence engine itself stays silent about exclusions; this logger is
where they become visible.

The audit logger:
- Is async to not block main flow
- Gracefully handles failures (doesn't crash the app if logging fails)
- Supports correlation IDs to trace related events
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from couple_tracker.models.audit import AuditEvent, AuditEventBuilder
from couple_tracker.services.storage import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """
    Route structured logs through the stdlib root logger at `level`.

    structlog's level filter reads the stdlib logger level, so this is what
    decides which audit events reach the local log.
    """
    logging.basicConfig(format="%(message)s", level=level)
    logging.getLogger().setLevel(level)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An audit store (for persistence), when one is configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("couple_tracker.audit")

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        elif event.severity.value == "debug":
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_date_created(
        self,
        date_id: str,
        couple_id: str,
        title: str,
        correlation_id: UUID,
    ) -> None:
        """Log creation of an important date."""
        event = AuditEventBuilder.date_created(
            date_id=date_id,
            couple_id=couple_id,
            title=title,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_date_updated(
        self,
        date_id: str,
        couple_id: str,
        changed_fields: list[str],
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.date_updated(
            date_id=date_id,
            couple_id=couple_id,
            changed_fields=changed_fields,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_date_deleted(
        self,
        date_id: str,
        couple_id: str,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.date_deleted(
            date_id=date_id,
            couple_id=couple_id,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_validation_failed(
        self,
        couple_id: str,
        stage: str,
        issues: list[dict],
        correlation_id: UUID,
        date_id: Optional[str] = None,
    ) -> None:
        """Log validation failure of a date form."""
        event = AuditEventBuilder.validation_failed(
            couple_id=couple_id,
            stage=stage,
            issues=issues,
            correlation_id=correlation_id,
            date_id=date_id,
        )
        await self.log(event)

    async def log_date_excluded(
        self,
        date_id: str,
        couple_id: str,
        raw_date: str,
        correlation_id: UUID,
    ) -> None:
        """Log a stored date that the view had to leave out."""
        event = AuditEventBuilder.date_excluded(
            date_id=date_id,
            couple_id=couple_id,
            raw_date=raw_date,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_view_computed(
        self,
        couple_id: str,
        view: str,
        today: str,
        counts: dict[str, int],
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.view_computed(
            couple_id=couple_id,
            view=view,
            today=today,
            counts=counts,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_storage_error(
        self,
        operation: str,
        couple_id: str,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        event = AuditEventBuilder.storage_error(
            operation=operation,
            couple_id=couple_id,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        event = AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )
        await self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a user action or render pass.
    Pass it through all subsequent operations.
    """
    return uuid4()
