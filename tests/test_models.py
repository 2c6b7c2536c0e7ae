"""
Tests for Couple Tracker models

Test strategy:
1. Unit tests for individual components (models, engine, validators)
2. Flow tests against in-memory storage
3. No real backend calls in tests
"""

import pytest
from datetime import date
from uuid import uuid4

from pydantic import ValidationError

from couple_tracker.models.dates import (
    Author,
    CountdownState,
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


AUTHOR = Author(uid="u-1", display_name="Maria")


class TestDateModels:
    """Tests for important-date Pydantic models."""

    def test_important_date_defaults(self):
        record = ImportantDate(title="Nosso casamento", base_date="2025-05-18", author=AUTHOR)
        assert record.recurrence == Recurrence.NONE
        assert record.type == "Evento"
        assert record.observation is None
        assert record.id

    def test_ids_are_unique(self):
        a = ImportantDate(title="A", base_date="2024-01-01", author=AUTHOR)
        b = ImportantDate(title="B", base_date="2024-01-01", author=AUTHOR)
        assert a.id != b.id

    def test_title_strips_whitespace(self):
        record = ImportantDate(title="  Show do Coldplay  ", base_date="2024-10-22", author=AUTHOR)
        assert record.title == "Show do Coldplay"

    def test_base_date_is_not_validated(self):
        """Corrupt stored dates must still load; the engine filters them."""
        record = ImportantDate(title="Corrupt", base_date="2024-02-30", author=AUTHOR)
        assert record.base_date == "2024-02-30"

    def test_unknown_recurrence_rejected(self):
        with pytest.raises(ValidationError):
            ImportantDate(title="X", base_date="2024-01-01", recurrence="weekly", author=AUTHOR)

    def test_to_document_uses_store_shape(self):
        record = ImportantDate(
            id="d1",
            title="Aniversário de Namoro",
            base_date="2019-07-25",
            type="Aniversário",
            recurrence=Recurrence.YEARLY,
            observation="Celebrar 5 anos juntos!",
            author=AUTHOR,
        )
        doc = record.to_document()
        assert doc == {
            "title": "Aniversário de Namoro",
            "date": "2019-07-25",
            "type": "Aniversário",
            "repeat": "yearly",
            "observation": "Celebrar 5 anos juntos!",
            "author": {"uid": "u-1", "displayName": "Maria"},
        }

    def test_from_document_without_repeat_is_one_off(self):
        record = ImportantDate.from_document("d2", {
            "title": "Viagem para a Itália",
            "date": "2024-12-15",
            "type": "Viagem",
            "author": {"uid": "u-2", "displayName": "João", "photoURL": "https://x/y.png"},
        })
        assert record.id == "d2"
        assert record.recurrence == Recurrence.NONE
        assert record.author.photo_url == "https://x/y.png"

    def test_from_document_missing_type_gets_default(self):
        record = ImportantDate.from_document("d3", {"title": "T", "date": "2024-01-01", "type": ""})
        assert record.type == "Evento"
        assert record.author.uid == ""

    def test_input_blank_repeat_is_none(self):
        data = ImportantDateInput(title="T", date="2024-01-01", repeat="")
        assert data.repeat == Recurrence.NONE

    def test_occurrence_is_frozen(self):
        record = ImportantDate(title="T", base_date="2024-01-01", author=AUTHOR)
        occurrence = Occurrence(
            record=record,
            next_occurrence=date(2024, 1, 1),
            original_date=date(2024, 1, 1),
        )
        with pytest.raises(ValidationError):
            occurrence.next_occurrence = date(2025, 1, 1)

    def test_upcoming_preview_is_empty(self):
        preview = UpcomingPreview(today=date(2024, 7, 15))
        assert preview.is_empty is True

    def test_countdown_state_values(self):
        assert CountdownState.REMAINING.value == "remaining"
        assert CountdownState("passed") == CountdownState.PASSED


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        event = AuditEvent(
            event_type=AuditEventType.DATE_CREATED,
            description="Test date created",
        )
        assert event.event_type == AuditEventType.DATE_CREATED
        assert event.severity == AuditSeverity.INFO
        assert event.timestamp.tzinfo is not None

    def test_audit_event_to_log_dict(self):
        event = AuditEvent(
            event_type=AuditEventType.DATE_DELETED,
            description="Date deleted",
            entity_id="d1",
            details={"title": "Show"},
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "date_deleted"
        assert log_dict["entity_id"] == "d1"
        assert log_dict["details"]["title"] == "Show"

    def test_builder_date_created(self):
        correlation_id = uuid4()
        event = AuditEventBuilder.date_created(
            date_id="d1",
            couple_id="c1",
            title="Nosso casamento",
            correlation_id=correlation_id,
        )
        assert event.event_type == AuditEventType.DATE_CREATED
        assert event.entity_id == "d1"
        assert event.couple_id == "c1"
        assert event.correlation_id == correlation_id
        assert event.is_user_action is True

    def test_builder_date_excluded_is_warning(self):
        event = AuditEventBuilder.date_excluded(
            date_id="d9",
            couple_id="c1",
            raw_date="31/12/2024",
            correlation_id=uuid4(),
        )
        assert event.event_type == AuditEventType.DATE_EXCLUDED
        assert event.severity == AuditSeverity.WARNING
        assert event.details["raw_date"] == "31/12/2024"

    def test_builder_view_computed_types(self):
        preview = AuditEventBuilder.view_computed(
            couple_id="c1", view="upcoming_preview", today="2024-07-15",
            counts={"items": 2}, correlation_id=uuid4(),
        )
        page = AuditEventBuilder.view_computed(
            couple_id="c1", view="dates_view", today="2024-07-15",
            counts={"upcoming": 3, "past": 1}, correlation_id=uuid4(),
        )
        assert preview.event_type == AuditEventType.UPCOMING_PREVIEW_COMPUTED
        assert page.event_type == AuditEventType.DATES_VIEW_COMPUTED
        assert page.details == {"today": "2024-07-15", "upcoming": 3, "past": 1}


class TestValidationResult:
    """Tests for ValidationResult model."""

    def test_validation_result_has_errors(self):
        result = ValidationResult(
            schema_valid=False,
            semantic_valid=False,
            is_valid=False,
            can_save=False,
            issues=[
                ValidationIssue(
                    field="date",
                    issue_type="missing",
                    message="Date is required",
                    severity="error",
                ),
            ],
        )
        assert result.has_errors is True
        assert result.error_count == 1

    def test_validation_result_warnings_only(self):
        result = ValidationResult(
            schema_valid=True,
            semantic_valid=True,
            is_valid=True,
            can_save=True,
            issues=[
                ValidationIssue(
                    field="repeat",
                    issue_type="day_clamped",
                    message="Repeats on day 31",
                    severity="warning",
                ),
            ],
        )
        assert result.has_errors is False
        assert result.error_count == 0

    def test_issue_severity_pattern(self):
        with pytest.raises(ValidationError):
            ValidationIssue(field="x", issue_type="y", message="z", severity="fatal")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
