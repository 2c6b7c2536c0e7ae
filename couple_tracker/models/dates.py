"""
Core Data Models for the Important Dates feature

These models define the schemas for every important-date record and for the
view models derived from them. They are designed to:
1. Mirror the shape of the documents kept by the couple's document store
2. Tolerate corrupt stored data (the raw date string is kept as-is)
3. Be serializable for rendering and logging

DESIGN DECISION: A stored record keeps its date as the raw ISO string.
Parsing happens in the recurrence engine, which drops unparseable records
from every derived view instead of failing the whole list.
"""

from datetime import date
from enum import Enum
from typing import Any, Optional
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class Recurrence(str, Enum):
    """
    How an important date repeats.

    Values match the `repeat` field stored with each document.
    """
    NONE = "none"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class CountdownState(str, Enum):
    """Display state of a countdown, in evaluation priority order."""
    NONE = "none"            # days left could not be computed
    PASSED = "passed"
    TODAY = "today"
    TOMORROW = "tomorrow"
    REMAINING = "remaining"


DEFAULT_DATE_TYPE = "Evento"


def new_record_id() -> str:
    """Generate an opaque identifier for a new record."""
    return uuid4().hex


# =============================================================================
# RECORD MODELS
# =============================================================================

class Author(BaseModel):
    """
    Creator of a record, kept for display only.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    uid: str = Field(
        ...,
        description="Opaque user identifier"
    )
    display_name: str = Field(
        ...,
        description="Name shown next to the record"
    )
    photo_url: Optional[str] = None
    gender: Optional[str] = None

    def to_document(self) -> dict[str, Any]:
        doc: dict[str, Any] = {"uid": self.uid, "displayName": self.display_name}
        if self.photo_url:
            doc["photoURL"] = self.photo_url
        if self.gender:
            doc["gender"] = self.gender
        return doc

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "Author":
        return cls(
            uid=doc.get("uid", ""),
            display_name=doc.get("displayName", ""),
            photo_url=doc.get("photoURL"),
            gender=doc.get("gender"),
        )


class ImportantDate(BaseModel):
    """
    One important-date entry of a couple (anniversary, trip, wedding...).

    CRITICAL: `base_date` is NOT validated here. Documents come from an
    external store and may hold anything; the recurrence engine decides
    whether the date is usable. User input is validated separately before
    it ever reaches the store.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(
        default_factory=new_record_id,
        min_length=1,
        description="Opaque identifier, unique within the couple's records"
    )
    title: str = Field(
        ...,
        max_length=200,
        description="Display label"
    )
    base_date: str = Field(
        ...,
        description="Anchor date as stored, expected as YYYY-MM-DD"
    )
    type: str = Field(
        default=DEFAULT_DATE_TYPE,
        max_length=50,
        description="Free-text category, e.g. 'Aniversário' or 'Viagem'"
    )
    recurrence: Recurrence = Field(
        default=Recurrence.NONE,
        description="Recurrence rule"
    )
    observation: Optional[str] = Field(
        default=None,
        max_length=1000,
        description="Optional note"
    )
    author: Author

    @field_validator('recurrence', mode='before')
    @classmethod
    def default_missing_recurrence(cls, v: Any) -> Any:
        """Documents written before recurrence existed have no `repeat`."""
        if v is None or v == "":
            return Recurrence.NONE
        return v

    def to_document(self) -> dict[str, Any]:
        """
        Convert to the document shape used by the store.

        The id is the document key, so it is not part of the body.
        """
        doc: dict[str, Any] = {
            "title": self.title,
            "date": self.base_date,
            "type": self.type,
            "repeat": self.recurrence.value,
            "author": self.author.to_document(),
        }
        if self.observation:
            doc["observation"] = self.observation
        return doc

    @classmethod
    def from_document(cls, doc_id: str, doc: dict[str, Any]) -> "ImportantDate":
        """Build a record from a stored document and its key."""
        return cls(
            id=doc_id,
            title=doc.get("title", ""),
            base_date=str(doc.get("date", "")),
            type=doc.get("type") or DEFAULT_DATE_TYPE,
            recurrence=doc.get("repeat"),
            observation=doc.get("observation") or None,
            author=Author.from_document(doc.get("author") or {}),
        )


class ImportantDateInput(BaseModel):
    """
    What the user typed in the date form.

    Field names follow the form, not the stored document.
    Content checks live in DateRecordValidator so that every problem can be
    reported at once instead of failing on the first one.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = ""
    date: str = ""
    type: str = Field(default=DEFAULT_DATE_TYPE, max_length=50)
    observation: Optional[str] = Field(default=None, max_length=1000)
    repeat: Recurrence = Recurrence.NONE

    @field_validator('repeat', mode='before')
    @classmethod
    def default_missing_repeat(cls, v: Any) -> Any:
        if v is None or v == "":
            return Recurrence.NONE
        return v


# =============================================================================
# DERIVED MODELS (computed per call, never persisted)
# =============================================================================

class Occurrence(BaseModel):
    """
    The next relevant instance of a record relative to "today".
    """
    model_config = ConfigDict(frozen=True)

    record: ImportantDate
    next_occurrence: date
    original_date: date


class DateClassification(BaseModel):
    """Upcoming/past partition of a couple's dates."""
    model_config = ConfigDict(frozen=True)

    upcoming: list[Occurrence] = Field(default_factory=list)
    past: list[Occurrence] = Field(default_factory=list)


class Countdown(BaseModel):
    """Countdown shown next to a date."""
    state: CountdownState
    days_left: Optional[int] = None
    text: str = ""


class DateCard(BaseModel):
    """
    Flattened occurrence, ready for the rendering layer.
    """
    id: str
    title: str
    type: str
    observation: Optional[str] = None
    author_name: str
    recurrence: Recurrence
    original_date: date
    next_occurrence: date
    days_left: int
    countdown: Countdown


class DatesView(BaseModel):
    """Both tabs of the dates page."""
    today: date
    upcoming: list[DateCard] = Field(default_factory=list)
    past: list[DateCard] = Field(default_factory=list)


class UpcomingPreview(BaseModel):
    """The dashboard's "next dates" widget."""
    today: date
    items: list[DateCard] = Field(default_factory=list)
    empty_message: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.items


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'day_clamped')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """
    Result of the two-stage validation of a date form.

    Stage 1: Schema validation (required fields, date format)
    Stage 2: Semantic validation (suspicious but acceptable input)
    """

    schema_valid: bool = Field(
        ...,
        description="Did schema validation pass?"
    )
    semantic_valid: bool = Field(
        ...,
        description="Did semantic validation pass?"
    )
    is_valid: bool = Field(
        ...,
        description="Overall validation result"
    )
    can_save: bool = Field(
        ...,
        description="Can the record be written to the store?"
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )
    warnings: list[str] = Field(
        default_factory=list,
        description="Non-blocking warnings"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")
