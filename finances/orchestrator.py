"""
Application Wiring for Personal Finances

Builds the entry engine and user directory with their storage
collaborators. Everything is passed through constructors: there is
no global registry.

Backend selection follows `AppSettings.storage_backend`:
- "memory": in-process dicts (lost on restart)
- "google_sheets": one spreadsheet, one worksheet per record type
If Google Sheets is selected but cannot be configured, we fall back to
memory and say so loudly in the log.
"""

from typing import Optional

import structlog

from finances.audit import AuditLogger
from finances.config import get_settings
from finances.entries import EntryEngine
from finances.services.storage import (
    AuditStorageInterface,
    EntryStorageInterface,
    GoogleSheetsAuditStorage,
    GoogleSheetsClient,
    GoogleSheetsEntryStorage,
    GoogleSheetsUserStorage,
    InMemoryAuditStorage,
    InMemoryEntryStorage,
    InMemoryUserStorage,
    UserStorageInterface,
)
from finances.users import UserDirectory


logger = structlog.get_logger(__name__)


def create_app_components(
    use_storage: bool = True,
) -> tuple[EntryEngine, UserDirectory, Optional[GoogleSheetsClient]]:
    """
    Factory function to create all application components.

    Args:
        use_storage: Whether to honour the configured storage backend.
                    Set to False to force in-memory storage (tests, demos).

    Returns:
        (entry_engine, user_directory, sheets_client)
    """
    sheets_client = None
    entry_storage: EntryStorageInterface
    user_storage: UserStorageInterface
    audit_storage: AuditStorageInterface

    if use_storage and get_settings().app.uses_google_sheets:
        try:
            sheets_client = GoogleSheetsClient()
            entry_storage = GoogleSheetsEntryStorage(sheets_client)
            user_storage = GoogleSheetsUserStorage(sheets_client)
            audit_storage = GoogleSheetsAuditStorage(sheets_client)
        except Exception as e:
            # Storage not configured - continue without it
            logger.warning("storage_not_configured", error=str(e), fallback="memory")
            sheets_client = None

    if sheets_client is None:
        entry_storage = InMemoryEntryStorage()
        user_storage = InMemoryUserStorage()
        audit_storage = InMemoryAuditStorage()

    audit_logger = AuditLogger(audit_storage)

    entry_engine = EntryEngine(entry_storage, audit_logger=audit_logger)
    user_directory = UserDirectory(user_storage, audit_logger=audit_logger)

    return entry_engine, user_directory, sheets_client
