"""
Storage Services Package

Provides abstract interfaces for the couple's document store and an
in-memory implementation. Hosted backends implement the same interfaces.
"""

from couple_tracker.services.storage.interface import (
    AuditStorageInterface,
    DateStorageInterface,
    DuplicateError,
    NotFoundError,
    StorageError,
)
from couple_tracker.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryDateStorage,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "DateStorageInterface",
    # Exceptions
    "DuplicateError",
    "NotFoundError",
    "StorageError",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemoryDateStorage",
]
