"""
Main Orchestrator for Couple Tracker

This module ties together storage, validation, the recurrence engine and the
audit trail, and defines the flows the view layer calls for the
"Important Dates" feature:
1. Edit (form → validate → store → audit)
2. Dates page (store → classify → countdown cards)
3. Dashboard widget (store → classify → first upcoming cards)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing reaches the store without passing validation
- "today" is captured ONCE per call and shared by every computation in it
- Views are recomputed from the store on every call; nothing is cached,
  so edits are reflected on the next render without invalidation
- Records left out of a view are reported to the audit trail here,
  because the engine drops them without a trace
"""

from datetime import date, datetime
from typing import Callable, Iterable, Optional
from uuid import UUID

import structlog

from couple_tracker.audit import AuditLogger, configure_logging, create_correlation_id
from couple_tracker.config import AppSettings, get_settings
from couple_tracker.models.dates import (
    Author,
    DateCard,
    DatesView,
    ImportantDate,
    ImportantDateInput,
    Occurrence,
    UpcomingPreview,
    ValidationResult,
)
from couple_tracker.recurrence import (
    build_countdown,
    classify,
    days_until,
    no_upcoming_message,
    parse_base_date,
)
from couple_tracker.services.storage import (
    DateStorageInterface,
    InMemoryAuditStorage,
    InMemoryDateStorage,
    NotFoundError,
    StorageError,
)
from couple_tracker.validation import DateRecordValidator


logger = structlog.get_logger(__name__)


def make_today_provider(settings: AppSettings) -> Callable[[], date]:
    """
    Local wall-clock date in the configured timezone.
    """
    zone = settings.zone

    def today() -> date:
        if zone is None:
            return date.today()
        return datetime.now(zone).date()

    return today


class ImportantDatesFlow:
    """
    Orchestrates the important dates feature for one deployment.

    Flow per render:
    1. Capture "today"
    2. Read the couple's records from the store
    3. Report records with unusable dates
    4. Classify and build countdown cards
    """

    def __init__(
        self,
        date_storage: DateStorageInterface,
        validator: Optional[DateRecordValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[AppSettings] = None,
        today_provider: Optional[Callable[[], date]] = None,
    ):
        self._settings = settings or get_settings().app
        self._storage = date_storage
        self._validator = validator or DateRecordValidator(
            date_storage,
            max_years_ahead=self._settings.max_years_ahead,
        )
        self._audit_logger = audit_logger
        self._today = today_provider or make_today_provider(self._settings)
        self._locale = self._settings.locale

    # -------------------------------------------------------------------------
    # Edits
    # -------------------------------------------------------------------------

    async def create_date(
        self,
        couple_id: str,
        data: ImportantDateInput,
        author: Author,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[Optional[ImportantDate], ValidationResult]:
        """
        Validate the form and store a new important date.

        Returns:
            (record, validation_result)

        record is None when validation blocked the save.
        """
        correlation_id = correlation_id or create_correlation_id()

        result = await self._validator.validate(
            data, today=self._today(), couple_id=couple_id
        )
        if not result.can_save:
            await self._audit_validation_failure(couple_id, result, correlation_id)
            return None, result

        record = ImportantDate(
            title=data.title,
            base_date=data.date,
            type=data.type,
            recurrence=data.repeat,
            observation=data.observation or None,
            author=author,
        )

        try:
            await self._storage.add_date(couple_id, record)
        except StorageError as e:
            await self._audit_storage_error("add_date", couple_id, e, correlation_id)
            raise

        if self._audit_logger:
            await self._audit_logger.log_date_created(
                date_id=record.id,
                couple_id=couple_id,
                title=record.title,
                correlation_id=correlation_id,
            )

        return record, result

    async def update_date(
        self,
        couple_id: str,
        date_id: str,
        data: ImportantDateInput,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[Optional[ImportantDate], ValidationResult]:
        """
        Validate the form and replace an existing record.

        The id and the author of the record are kept.

        Raises:
            NotFoundError: If the record doesn't exist
        """
        correlation_id = correlation_id or create_correlation_id()

        existing = await self._storage.get_date_by_id(couple_id, date_id)
        if existing is None:
            raise NotFoundError(f"Important date {date_id} not found")

        result = await self._validator.validate(
            data,
            today=self._today(),
            couple_id=couple_id,
            exclude_id=date_id,
        )
        if not result.can_save:
            await self._audit_validation_failure(
                couple_id, result, correlation_id, date_id=date_id
            )
            return None, result

        updated = existing.model_copy(update={
            "title": data.title,
            "base_date": data.date,
            "type": data.type,
            "recurrence": data.repeat,
            "observation": data.observation or None,
        })
        changed_fields = [
            name for name in ("title", "base_date", "type", "recurrence", "observation")
            if getattr(existing, name) != getattr(updated, name)
        ]

        try:
            await self._storage.update_date(couple_id, updated)
        except StorageError as e:
            await self._audit_storage_error("update_date", couple_id, e, correlation_id)
            raise

        if self._audit_logger:
            await self._audit_logger.log_date_updated(
                date_id=date_id,
                couple_id=couple_id,
                changed_fields=changed_fields,
                correlation_id=correlation_id,
            )

        return updated, result

    async def delete_date(
        self,
        couple_id: str,
        date_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        """
        Remove an important date.

        Raises:
            NotFoundError: If the record doesn't exist
        """
        correlation_id = correlation_id or create_correlation_id()

        try:
            deleted = await self._storage.delete_date(couple_id, date_id)
        except StorageError as e:
            await self._audit_storage_error("delete_date", couple_id, e, correlation_id)
            raise

        if self._audit_logger:
            await self._audit_logger.log_date_deleted(
                date_id=date_id,
                couple_id=couple_id,
                correlation_id=correlation_id,
            )

        return deleted

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    async def get_dates_view(
        self,
        couple_id: str,
        today: Optional[date] = None,
        correlation_id: Optional[UUID] = None,
    ) -> DatesView:
        """
        Both tabs of the dates page: upcoming (soonest first) and past
        (most recent first), each with its countdown.
        """
        correlation_id = correlation_id or create_correlation_id()
        today = self._resolve_today(today)

        records = await self._storage.list_dates(couple_id)
        await self._report_exclusions(couple_id, records, correlation_id)

        classification = classify(records, today)
        view = DatesView(
            today=today,
            upcoming=[self._to_card(o, today) for o in classification.upcoming],
            past=[self._to_card(o, today) for o in classification.past],
        )

        if self._audit_logger:
            await self._audit_logger.log_view_computed(
                couple_id=couple_id,
                view="dates_view",
                today=today.isoformat(),
                counts={"upcoming": len(view.upcoming), "past": len(view.past)},
                correlation_id=correlation_id,
            )

        return view

    async def get_upcoming_preview(
        self,
        couple_id: str,
        today: Optional[date] = None,
        limit: Optional[int] = None,
        correlation_id: Optional[UUID] = None,
    ) -> UpcomingPreview:
        """
        The dashboard's next dates, with the compact countdown wording.
        """
        correlation_id = correlation_id or create_correlation_id()
        today = self._resolve_today(today)
        if limit is None:
            limit = self._settings.dashboard_upcoming_limit

        records = await self._storage.list_dates(couple_id)
        await self._report_exclusions(couple_id, records, correlation_id)

        upcoming = classify(records, today).upcoming
        items = [self._to_card(o, today, compact=True) for o in upcoming[:limit]]

        if self._audit_logger:
            await self._audit_logger.log_view_computed(
                couple_id=couple_id,
                view="upcoming_preview",
                today=today.isoformat(),
                counts={"items": len(items)},
                correlation_id=correlation_id,
            )

        return UpcomingPreview(
            today=today,
            items=items,
            empty_message=no_upcoming_message(self._locale) if not items else "",
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _to_card(
        self,
        occurrence: Occurrence,
        today: date,
        compact: bool = False,
    ) -> DateCard:
        record = occurrence.record
        days_left = days_until(occurrence.next_occurrence, today)
        return DateCard(
            id=record.id,
            title=record.title,
            type=record.type,
            observation=record.observation,
            author_name=record.author.display_name,
            recurrence=record.recurrence,
            original_date=occurrence.original_date,
            next_occurrence=occurrence.next_occurrence,
            days_left=days_left,
            countdown=build_countdown(days_left, locale=self._locale, compact=compact),
        )

    def _resolve_today(self, today: Optional[date]) -> date:
        if today is None:
            return self._today()
        if isinstance(today, datetime):
            return today.date()
        return today

    async def _report_exclusions(
        self,
        couple_id: str,
        records: Iterable[ImportantDate],
        correlation_id: UUID,
    ) -> None:
        for record in records:
            if parse_base_date(record.base_date) is not None:
                continue
            logger.warning(
                "important_date_excluded",
                couple_id=couple_id,
                date_id=record.id,
                raw_date=record.base_date,
            )
            if self._audit_logger:
                await self._audit_logger.log_date_excluded(
                    date_id=record.id,
                    couple_id=couple_id,
                    raw_date=record.base_date,
                    correlation_id=correlation_id,
                )

    async def _audit_validation_failure(
        self,
        couple_id: str,
        result: ValidationResult,
        correlation_id: UUID,
        date_id: Optional[str] = None,
    ) -> None:
        if not self._audit_logger:
            return
        issues = [
            {"field": i.field, "type": i.issue_type, "message": i.message}
            for i in result.issues
            if i.severity == "error"
        ]
        stage = "schema" if not result.schema_valid else "semantic"
        await self._audit_logger.log_validation_failed(
            couple_id=couple_id,
            stage=stage,
            issues=issues,
            correlation_id=correlation_id,
            date_id=date_id,
        )

    async def _audit_storage_error(
        self,
        operation: str,
        couple_id: str,
        error: Exception,
        correlation_id: UUID,
    ) -> None:
        if self._audit_logger:
            await self._audit_logger.log_storage_error(
                operation=operation,
                couple_id=couple_id,
                error_message=str(error),
                correlation_id=correlation_id,
            )


def create_app_components(
    settings: Optional[AppSettings] = None,
    date_storage: Optional[DateStorageInterface] = None,
) -> tuple[ImportantDatesFlow, DateStorageInterface, InMemoryAuditStorage]:
    """
    Factory function to create all application components.

    Args:
        settings: Application settings; loaded from the environment if None.
        date_storage: Document store adapter. Defaults to in-memory storage.

    Returns:
        (dates_flow, date_storage, audit_storage)
    """
    settings = settings or get_settings().app
    configure_logging(settings.log_level)

    date_storage = date_storage or InMemoryDateStorage()
    audit_storage = InMemoryAuditStorage()
    audit_logger = AuditLogger(audit_storage)

    dates_flow = ImportantDatesFlow(
        date_storage=date_storage,
        audit_logger=audit_logger,
        settings=settings,
    )

    return dates_flow, date_storage, audit_storage
