"""
Tests for in-memory storage.
"""

import pytest
from uuid import uuid4

from couple_tracker.models.audit import AuditEventBuilder
from couple_tracker.models.dates import Author, ImportantDate, Recurrence
from couple_tracker.services.storage import (
    DuplicateError,
    InMemoryAuditStorage,
    InMemoryDateStorage,
    NotFoundError,
    StorageError,
)


AUTHOR = Author(uid="u-1", display_name="Maria")


@pytest.fixture
def storage():
    return InMemoryDateStorage()


def make_record(record_id="d1", **overrides):
    fields = {
        "id": record_id,
        "title": "Nosso casamento",
        "base_date": "2025-05-18",
        "type": "Casamento",
        "author": AUTHOR,
    }
    fields.update(overrides)
    return ImportantDate(**fields)


class TestInMemoryDateStorage:

    async def test_add_and_get(self, storage):
        record = make_record(observation="No campo")
        assert await storage.add_date("c1", record) is True

        loaded = await storage.get_date_by_id("c1", "d1")
        assert loaded == record

    async def test_records_are_scoped_by_couple(self, storage):
        await storage.add_date("c1", make_record())
        assert await storage.get_date_by_id("c2", "d1") is None
        assert await storage.list_dates("c2") == []

    async def test_add_duplicate_id(self, storage):
        await storage.add_date("c1", make_record())
        with pytest.raises(DuplicateError):
            await storage.add_date("c1", make_record(title="Outro"))

    async def test_update(self, storage):
        await storage.add_date("c1", make_record())
        await storage.update_date("c1", make_record(recurrence=Recurrence.YEARLY))
        loaded = await storage.get_date_by_id("c1", "d1")
        assert loaded.recurrence == Recurrence.YEARLY

    async def test_update_missing(self, storage):
        with pytest.raises(NotFoundError):
            await storage.update_date("c1", make_record())

    async def test_delete(self, storage):
        await storage.add_date("c1", make_record())
        assert await storage.delete_date("c1", "d1") is True
        assert await storage.get_date_by_id("c1", "d1") is None
        with pytest.raises(NotFoundError):
            await storage.delete_date("c1", "d1")

    async def test_list(self, storage):
        await storage.add_date("c1", make_record("d1"))
        await storage.add_date("c1", make_record("d2", base_date="2024-12-15"))
        records = await storage.list_dates("c1")
        assert {r.id for r in records} == {"d1", "d2"}

    async def test_raw_document_with_corrupt_date_loads(self, storage):
        storage.put_document("c1", "raw", {
            "title": "Editado no console",
            "date": "2024-13-45",
            "author": {"uid": "u-2", "displayName": "João"},
        })
        records = await storage.list_dates("c1")
        assert records[0].base_date == "2024-13-45"
        assert records[0].recurrence == Recurrence.NONE

    async def test_stored_document_is_a_copy(self, storage):
        document = {"title": "T", "date": "2024-01-01", "author": {"uid": "u", "displayName": "U"}}
        storage.put_document("c1", "raw", document)
        document["date"] = "changed"
        loaded = await storage.get_date_by_id("c1", "raw")
        assert loaded.base_date == "2024-01-01"

    @pytest.mark.parametrize("overrides", [
        {"title": "x" * 201},
        {"repeat": "weekly"},
        {"author": "Maria"},
    ])
    async def test_unreadable_document_is_skipped_in_list(self, storage, overrides):
        await storage.add_date("c1", make_record("good"))
        document = {"title": "T", "date": "2024-01-01", "author": {"uid": "u", "displayName": "U"}}
        document.update(overrides)
        storage.put_document("c1", "bad", document)

        records = await storage.list_dates("c1")

        assert [r.id for r in records] == ["good"]

    async def test_unreadable_document_raises_storage_error_on_get(self, storage):
        storage.put_document("c1", "bad", {"title": "T", "date": "2024-01-01", "author": "Maria"})
        with pytest.raises(StorageError):
            await storage.get_date_by_id("c1", "bad")


class TestInMemoryAuditStorage:

    async def test_queries(self):
        storage = InMemoryAuditStorage()
        correlation_id = uuid4()
        first = AuditEventBuilder.date_created("d1", "c1", "A", correlation_id)
        second = AuditEventBuilder.date_deleted("d1", "c1", correlation_id)
        other = AuditEventBuilder.date_created("d2", "c1", "B", uuid4())

        for event in (first, second, other):
            assert await storage.append_event(event) is True

        assert await storage.get_events_by_correlation_id(correlation_id) == [first, second]
        assert await storage.get_events_by_entity("important_date", "d1") == [first, second]
        assert await storage.get_recent_events(limit=2) == [other, second]
