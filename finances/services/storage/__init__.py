"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Ships an in-memory backend and a Google Sheets backend.
"""

from finances.services.storage.interface import (
    AuditStorageInterface,
    ConnectionError,
    DuplicateError,
    EntryStorageInterface,
    NotFoundError,
    StorageError,
    UserStorageInterface,
)
from finances.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryEntryStorage,
    InMemoryUserStorage,
)
from finances.services.storage.google_sheets import (
    GoogleSheetsAuditStorage,
    GoogleSheetsClient,
    GoogleSheetsEntryStorage,
    GoogleSheetsUserStorage,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "EntryStorageInterface",
    "UserStorageInterface",
    # Exceptions
    "ConnectionError",
    "DuplicateError",
    "NotFoundError",
    "StorageError",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemoryEntryStorage",
    "InMemoryUserStorage",
    # Google Sheets implementation
    "GoogleSheetsAuditStorage",
    "GoogleSheetsClient",
    "GoogleSheetsEntryStorage",
    "GoogleSheetsUserStorage",
]
