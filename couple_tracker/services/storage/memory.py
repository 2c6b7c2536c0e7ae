"""
In-Memory Storage Implementation

Keeps each couple's important dates as raw documents, the same shape the
hosted document store uses, and rebuilds models on every read. Used by the
tests and for running the flows locally without a backend.

TRADEOFFS:
- Nothing survives the process
- Reads return documents in insertion order, which callers must not rely on
"""

from copy import deepcopy
from typing import Any, Optional
from uuid import UUID

import structlog
from pydantic import ValidationError

from couple_tracker.models.dates import ImportantDate
from couple_tracker.models.audit import AuditEvent
from couple_tracker.services.storage.interface import (
    AuditStorageInterface,
    DateStorageInterface,
    DuplicateError,
    NotFoundError,
    StorageError,
)


logger = structlog.get_logger(__name__)


def _to_record(date_id: str, document: Any) -> ImportantDate:
    try:
        return ImportantDate.from_document(date_id, document)
    except (ValidationError, AttributeError, TypeError) as e:
        raise StorageError(f"Unreadable important date {date_id}: {e}")


class InMemoryDateStorage(DateStorageInterface):
    """
    Document-per-record store scoped by couple.
    """

    def __init__(self):
        self._documents: dict[str, dict[str, dict[str, Any]]] = {}

    def _collection(self, couple_id: str) -> dict[str, dict[str, Any]]:
        return self._documents.setdefault(couple_id, {})

    def put_document(self, couple_id: str, date_id: str, document: dict[str, Any]) -> None:
        """
        Write a raw document as-is, bypassing the model.

        Mirrors edits made directly in the hosted console, which is how
        malformed dates end up in the store.
        """
        self._collection(couple_id)[date_id] = deepcopy(document)

    async def add_date(self, couple_id: str, record: ImportantDate) -> bool:
        collection = self._collection(couple_id)
        if record.id in collection:
            raise DuplicateError(f"Important date {record.id} already exists")

        collection[record.id] = record.to_document()
        logger.debug("date_document_added", couple_id=couple_id, date_id=record.id)
        return True

    async def get_date_by_id(
        self,
        couple_id: str,
        date_id: str,
    ) -> Optional[ImportantDate]:
        document = self._collection(couple_id).get(date_id)
        if document is None:
            return None
        return _to_record(date_id, document)

    async def update_date(self, couple_id: str, record: ImportantDate) -> bool:
        collection = self._collection(couple_id)
        if record.id not in collection:
            raise NotFoundError(f"Important date {record.id} not found")

        collection[record.id] = record.to_document()
        logger.debug("date_document_updated", couple_id=couple_id, date_id=record.id)
        return True

    async def delete_date(self, couple_id: str, date_id: str) -> bool:
        collection = self._collection(couple_id)
        if date_id not in collection:
            raise NotFoundError(f"Important date {date_id} not found")

        del collection[date_id]
        logger.debug("date_document_deleted", couple_id=couple_id, date_id=date_id)
        return True

    async def list_dates(self, couple_id: str) -> list[ImportantDate]:
        records = []
        for date_id, document in self._collection(couple_id).items():
            try:
                records.append(_to_record(date_id, document))
            except StorageError as e:
                logger.warning(
                    "date_document_unreadable",
                    couple_id=couple_id,
                    date_id=date_id,
                    error=str(e),
                )
        return records


class InMemoryAuditStorage(AuditStorageInterface):
    """
    Append-only audit log held in a list.
    """

    def __init__(self):
        self._events: list[AuditEvent] = []

    async def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        return [e for e in self._events if e.correlation_id == correlation_id]

    async def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        return [
            e for e in self._events
            if e.entity_type == entity_type and e.entity_id == entity_id
        ]

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]
