"""Services package."""

from couple_tracker.services.storage import (
    AuditStorageInterface,
    DateStorageInterface,
    DuplicateError,
    InMemoryAuditStorage,
    InMemoryDateStorage,
    NotFoundError,
    StorageError,
)

__all__ = [
    "AuditStorageInterface",
    "DateStorageInterface",
    "DuplicateError",
    "InMemoryAuditStorage",
    "InMemoryDateStorage",
    "NotFoundError",
    "StorageError",
]
