"""
Data Models Package

This package contains all Pydantic models used in the Personal Finances system.
"""

from finances.models.entry import (
    Entry,
    EntryStatus,
    EntryType,
    User,
)
from finances.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "Entry",
    "EntryStatus",
    "EntryType",
    "User",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
