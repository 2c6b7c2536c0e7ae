"""
Two-Stage Validation of the Important Date form

STAGE 1 - SCHEMA VALIDATION:
- Required field presence
- Date format and calendar validity
- This is what keeps unparseable dates out of the store

STAGE 2 - SEMANTIC VALIDATION:
- One-off dates already in the past or absurdly far ahead
- Monthly anchors on days 29-31, which get clamped in shorter months
- Yearly anchors on Feb 29
- Possible duplicates
- These are warnings: the couple may really mean it

IMPORTANT: Validation NEVER silently fixes issues.
It reports them so the form can show them.
"""

from datetime import date
from typing import Optional

from couple_tracker.config import get_settings
from couple_tracker.models.dates import (
    ImportantDateInput,
    Recurrence,
    ValidationIssue,
    ValidationResult,
)
from couple_tracker.recurrence.engine import parse_base_date
from couple_tracker.services.storage import DateStorageInterface


class DateRecordValidator:
    """
    Validates the important-date form through a two-stage pipeline.

    Stage 1: Schema validation (can run without storage)
    Stage 2: Semantic validation (needs storage for duplicate checks)
    """

    def __init__(
        self,
        date_storage: Optional[DateStorageInterface] = None,
        max_years_ahead: Optional[int] = None,
    ):
        """
        Initialize validator.

        Args:
            date_storage: Storage interface for duplicate checking.
                         If None, duplicate checking is skipped.
            max_years_ahead: Override of the configured future-date threshold.
        """
        self._storage = date_storage
        self._max_years_ahead = (
            max_years_ahead
            if max_years_ahead is not None
            else get_settings().app.max_years_ahead
        )

    def _validate_schema(
        self,
        data: ImportantDateInput,
    ) -> tuple[bool, list[ValidationIssue]]:
        """
        Stage 1: Schema validation.

        Returns: (is_valid, list_of_issues)
        """
        issues = []

        if not data.title:
            issues.append(ValidationIssue(
                field="title",
                issue_type="missing",
                message="Title is required",
                severity="error",
                suggested_fix="Give the date a name, e.g. 'Aniversário de Namoro'",
            ))
        elif len(data.title) > 200:
            issues.append(ValidationIssue(
                field="title",
                issue_type="too_long",
                message="Title must be at most 200 characters",
                severity="error",
            ))

        if not data.date:
            issues.append(ValidationIssue(
                field="date",
                issue_type="missing",
                message="Date is required",
                severity="error",
                suggested_fix="Pick a date in the calendar",
            ))
        elif parse_base_date(data.date) is None:
            issues.append(ValidationIssue(
                field="date",
                issue_type="invalid_format",
                message=f"'{data.date}' is not a valid calendar date",
                severity="error",
                suggested_fix="Use the format YYYY-MM-DD, e.g. 2024-07-25",
            ))

        is_valid = not any(issue.severity == "error" for issue in issues)

        return is_valid, issues

    def _validate_semantic(
        self,
        data: ImportantDateInput,
        today: date,
    ) -> tuple[bool, list[ValidationIssue]]:
        """
        Stage 2: Semantic validation. Only runs on a parseable date.

        Returns: (is_valid, list_of_issues)
        """
        issues = []
        anchor = parse_base_date(data.date)

        if data.repeat == Recurrence.NONE:
            if anchor < today:
                issues.append(ValidationIssue(
                    field="date",
                    issue_type="past_date",
                    message=f"{anchor.isoformat()} has already passed and will be listed under past dates",
                    severity="info",
                    suggested_fix="Set it to repeat yearly if it is an anniversary",
                ))
            elif anchor.year - today.year > self._max_years_ahead:
                issues.append(ValidationIssue(
                    field="date",
                    issue_type="suspicious_date",
                    message=f"{anchor.isoformat()} is more than {self._max_years_ahead} years ahead",
                    severity="warning",
                    suggested_fix="Please verify the year",
                ))

        if data.repeat == Recurrence.MONTHLY and anchor.day > 28:
            issues.append(ValidationIssue(
                field="repeat",
                issue_type="day_clamped",
                message=(
                    f"Repeats on day {anchor.day}; in shorter months it will fall "
                    f"on the last day of the month"
                ),
                severity="warning",
            ))

        if data.repeat == Recurrence.YEARLY and (anchor.month, anchor.day) == (2, 29):
            issues.append(ValidationIssue(
                field="repeat",
                issue_type="day_clamped",
                message="Repeats on Feb 29; in common years it will fall on Feb 28",
                severity="warning",
            ))

        is_valid = not any(issue.severity == "error" for issue in issues)

        return is_valid, issues

    async def _check_duplicates(
        self,
        data: ImportantDateInput,
        couple_id: Optional[str],
        exclude_id: Optional[str] = None,
    ) -> list[ValidationIssue]:
        """
        Check for a record with the same title and date.

        This requires storage access.
        """
        issues = []

        if self._storage is None or couple_id is None:
            return issues

        try:
            existing = await self._storage.list_dates(couple_id)
        except Exception:
            # Don't fail validation due to storage errors
            return issues

        title = data.title.casefold()
        for record in existing:
            if record.id == exclude_id:
                continue
            if record.title.casefold() == title and record.base_date == data.date:
                issues.append(ValidationIssue(
                    field="duplicate",
                    issue_type="potential_duplicate",
                    message=f"'{data.title}' on {data.date} may already exist",
                    severity="warning",
                    suggested_fix="Please verify this isn't a duplicate entry",
                ))
                break

        return issues

    async def validate(
        self,
        data: ImportantDateInput,
        today: date,
        couple_id: Optional[str] = None,
        exclude_id: Optional[str] = None,
        check_duplicates: bool = True,
    ) -> ValidationResult:
        """
        Run full two-stage validation pipeline.

        Args:
            data: The form payload
            today: Reference date for past/future checks
            couple_id: Couple whose records are checked for duplicates
            exclude_id: Record being edited, ignored by the duplicate check
            check_duplicates: Whether to check for duplicates (requires storage)

        Returns:
            ValidationResult with all issues found
        """
        all_issues = []
        warnings = []

        schema_valid, schema_issues = self._validate_schema(data)
        all_issues.extend(schema_issues)

        # Only run stage 2 if stage 1 passes
        semantic_valid = False
        if schema_valid:
            semantic_valid, semantic_issues = self._validate_semantic(data, today)
            all_issues.extend(semantic_issues)

            if check_duplicates:
                duplicate_issues = await self._check_duplicates(
                    data, couple_id, exclude_id
                )
                all_issues.extend(duplicate_issues)

        for issue in all_issues:
            if issue.severity == "warning":
                warnings.append(issue.message)

        is_valid = schema_valid and semantic_valid

        return ValidationResult(
            schema_valid=schema_valid,
            semantic_valid=semantic_valid,
            is_valid=is_valid,
            can_save=not any(issue.severity == "error" for issue in all_issues),
            issues=all_issues,
            warnings=warnings,
        )

    def get_user_friendly_summary(
        self,
        result: ValidationResult,
    ) -> str:
        """
        Generate a user-friendly summary of validation results.
        """
        if result.is_valid and not result.warnings:
            return "✅ All checks passed!"

        lines = []

        if not result.schema_valid:
            lines.append("❌ Some required information is missing or invalid:")
            for issue in result.issues:
                if issue.severity == "error":
                    lines.append(f"   • {issue.message}")
                    if issue.suggested_fix:
                        lines.append(f"     💡 {issue.suggested_fix}")

        if result.warnings:
            lines.append("")
            lines.append("⚠️ Please verify the following:")
            for warning in result.warnings:
                lines.append(f"   • {warning}")

        if result.can_save:
            lines.append("")
            lines.append("The date can be saved, but please review the notes above.")
        else:
            lines.append("")
            lines.append("Please fix the issues above before saving.")

        return "\n".join(lines)
