"""
Abstract Storage Interface

DESIGN DECISION: The couple's documents live in a hosted document store that
we do not own. We define an abstract interface for the few operations the
dates feature needs, so that:
1. Business logic never depends on a particular backend
2. In-memory storage can be used for tests and local runs
3. A hosted backend only has to implement these methods

The interface is intentionally simple: create/read/update/delete keyed by
opaque identifiers, scoped to one couple. No queries, no ordering guarantee.
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from couple_tracker.models.dates import ImportantDate
from couple_tracker.models.audit import AuditEvent


class DateStorageInterface(ABC):
    """
    Abstract interface for important-date storage operations.
    """

    @abstractmethod
    async def add_date(self, couple_id: str, record: ImportantDate) -> bool:
        """
        Store a new important date.

        Args:
            couple_id: Couple that owns the record
            record: The record to store

        Returns:
            True if stored successfully

        Raises:
            DuplicateError: If a record with the same id exists
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def get_date_by_id(
        self,
        couple_id: str,
        date_id: str,
    ) -> Optional[ImportantDate]:
        """
        Retrieve a record by its id.

        Returns:
            The record if found, None otherwise

        Raises:
            StorageError: If the stored document cannot be read as a record
        """
        pass

    @abstractmethod
    async def update_date(self, couple_id: str, record: ImportantDate) -> bool:
        """
        Replace an existing record.

        Raises:
            NotFoundError: If the record doesn't exist
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def delete_date(self, couple_id: str, date_id: str) -> bool:
        """
        Delete a record by id.

        Raises:
            NotFoundError: If the record doesn't exist
        """
        pass

    @abstractmethod
    async def list_dates(self, couple_id: str) -> list[ImportantDate]:
        """
        All records of a couple.

        The result is an unordered set; callers must not rely on its order.
        Documents that cannot be read as a record are skipped.
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID (e.g., one render pass).

        Returns:
            List of related events in chronological order
        """
        pass

    @abstractmethod
    async def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        """
        Get all events for a specific entity.

        Returns:
            List of events in chronological order
        """
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass
