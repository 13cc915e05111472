"""
Audit Models for Personal Finances

Every change to the ledger and every credential check is recorded.
This provides:
1. Traceability of who changed which entry
2. The reason behind every rejected entry or login
3. A history of status transitions

DESIGN DECISION: Audit events are append-only. Deleting an entry adds an
event, it never removes the entry's earlier events.
"""

import json
from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Entry lifecycle
    ENTRY_CREATED = "entry_created"
    ENTRY_UPDATED = "entry_updated"
    ENTRY_DELETED = "entry_deleted"
    ENTRY_STATUS_UPDATED = "entry_status_updated"
    ENTRY_VALIDATION_FAILED = "entry_validation_failed"

    # Reads
    ENTRIES_QUERIED = "entries_queried"
    BALANCE_COMPUTED = "balance_computed"

    # Users
    USER_REGISTERED = "user_registered"
    USER_REGISTRATION_REJECTED = "user_registration_rejected"
    USER_AUTHENTICATED = "user_authenticated"
    AUTHENTICATION_FAILED = "authentication_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    One recorded fact about an entry or a user.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Subject of the event
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity ('entry' or 'user')"
    )
    entity_id: Optional[int] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Groups the events of one request
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one HTTP request)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="One-line summary shown in the log"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Event specific values (ids, statuses, amounts)"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Whether a client request caused the event"
    )

    def to_log_dict(self) -> dict:
        """
        Flat keyword arguments for a structlog call.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }

    def to_sheets_row(self) -> list:
        """
        One AuditLog worksheet row.

        Returns columns in order:
        [event_id, timestamp, event_type, severity, entity_type, entity_id,
         correlation_id, description, details_json, error_message, is_user_action]
        """
        return [
            str(self.event_id),
            self.timestamp.isoformat(),
            self.event_type.value,
            self.severity.value,
            self.entity_type or "",
            str(self.entity_id) if self.entity_id is not None else "",
            str(self.correlation_id) if self.correlation_id else "",
            self.description,
            json.dumps(self.details) if self.details else "",
            self.error_message or "",
            str(self.is_user_action),
        ]


class AuditEventBuilder:
    """
    Factory methods, one per AuditEventType.

    Usage:
        event = AuditEventBuilder.entry_created(entry_id, "EXPENSE", "1200.00")
        event = AuditEventBuilder.authentication_failed(email, "Invalid password.")
    """

    @staticmethod
    def entry_created(
        entry_id: Optional[int],
        entry_type: str,
        value: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_CREATED,
            entity_type="entry",
            entity_id=entry_id,
            correlation_id=correlation_id,
            description=f"Entry created: {entry_type} of {value}",
            details={
                "type": entry_type,
                "value": value,
            },
            is_user_action=True,
        )

    @staticmethod
    def entry_updated(
        entry_id: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_UPDATED,
            entity_type="entry",
            entity_id=entry_id,
            correlation_id=correlation_id,
            description=f"Entry {entry_id} updated",
            is_user_action=True,
        )

    @staticmethod
    def entry_deleted(
        entry_id: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_DELETED,
            entity_type="entry",
            entity_id=entry_id,
            correlation_id=correlation_id,
            description=f"Entry {entry_id} deleted",
            is_user_action=True,
        )

    @staticmethod
    def entry_status_updated(
        entry_id: int,
        previous_status: Optional[str],
        new_status: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_STATUS_UPDATED,
            entity_type="entry",
            entity_id=entry_id,
            correlation_id=correlation_id,
            description=f"Entry {entry_id} status: {previous_status} -> {new_status}",
            details={
                "previous_status": previous_status,
                "new_status": new_status,
            },
            is_user_action=True,
        )

    @staticmethod
    def entry_validation_failed(
        entry_id: Optional[int],
        reason: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="entry",
            entity_id=entry_id,
            correlation_id=correlation_id,
            description="Entry rejected by validation",
            error_message=reason,
        )

    @staticmethod
    def entries_queried(
        user_id: Optional[int],
        filters: dict,
        result_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRIES_QUERIED,
            severity=AuditSeverity.DEBUG,
            entity_type="user",
            entity_id=user_id,
            correlation_id=correlation_id,
            description=f"Entries queried: {result_count} results",
            details={
                "filters": filters,
                "result_count": result_count,
            },
        )

    @staticmethod
    def balance_computed(
        user_id: int,
        balance: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BALANCE_COMPUTED,
            severity=AuditSeverity.DEBUG,
            entity_type="user",
            entity_id=user_id,
            correlation_id=correlation_id,
            description=f"Balance computed for user {user_id}",
            details={
                "balance": balance,
            },
        )

    @staticmethod
    def user_registered(
        user_id: Optional[int],
        email: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_REGISTERED,
            entity_type="user",
            entity_id=user_id,
            correlation_id=correlation_id,
            description=f"User registered: {email}",
            details={
                "email": email,
            },
            is_user_action=True,
        )

    @staticmethod
    def user_registration_rejected(
        email: Optional[str],
        reason: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_REGISTRATION_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="user",
            correlation_id=correlation_id,
            description="User registration rejected",
            details={
                "email": email,
            },
            error_message=reason,
            is_user_action=True,
        )

    @staticmethod
    def user_authenticated(
        user_id: Optional[int],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_AUTHENTICATED,
            entity_type="user",
            entity_id=user_id,
            correlation_id=correlation_id,
            description=f"User {user_id} authenticated",
            is_user_action=True,
        )

    @staticmethod
    def authentication_failed(
        email: str,
        reason: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.AUTHENTICATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="user",
            correlation_id=correlation_id,
            description="Authentication failed",
            details={
                "email": email,
            },
            error_message=reason,
            is_user_action=True,
        )
