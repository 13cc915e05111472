"""
Audit Logger

DESIGN DECISION: Every change to the ledger is logged.
This provides:
1. Complete traceability of entries and their status changes
2. Debugging capability
3. A record of failed logins

The audit logger:
- Is async so it can share the event loop with the services
- Never raises when the audit backend is down
- Carries the request correlation id on every event
"""

import logging
from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4

import structlog

from finances.models.audit import AuditEvent, AuditEventBuilder
from finances.services.storage import AuditStorageInterface


# JSON lines through the stdlib logging tree
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route stdlib (and therefore structlog) output to stderr at `level`."""
    logging.basicConfig(format="%(message)s", level=level.upper())


class AuditLogger:
    """
    Records ledger and user events.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage (for persistence), when configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger(__name__)

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        elif event.severity.value == "debug":
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                # Audit persistence never breaks the ledger operation
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_entry_created(
        self,
        entry_id: Optional[int],
        entry_type: str,
        value: Decimal,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.entry_created(
            entry_id=entry_id,
            entry_type=entry_type,
            value=str(value),
            correlation_id=correlation_id,
        ))

    async def log_entry_updated(
        self,
        entry_id: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.entry_updated(
            entry_id=entry_id,
            correlation_id=correlation_id,
        ))

    async def log_entry_deleted(
        self,
        entry_id: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.entry_deleted(
            entry_id=entry_id,
            correlation_id=correlation_id,
        ))

    async def log_entry_status_updated(
        self,
        entry_id: int,
        previous_status: Optional[str],
        new_status: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a status transition (any transition is allowed)."""
        await self.log(AuditEventBuilder.entry_status_updated(
            entry_id=entry_id,
            previous_status=previous_status,
            new_status=new_status,
            correlation_id=correlation_id,
        ))

    async def log_entry_validation_failed(
        self,
        entry_id: Optional[int],
        reason: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.entry_validation_failed(
            entry_id=entry_id,
            reason=reason,
            correlation_id=correlation_id,
        ))

    async def log_entries_queried(
        self,
        user_id: Optional[int],
        filters: dict,
        result_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.entries_queried(
            user_id=user_id,
            filters=filters,
            result_count=result_count,
            correlation_id=correlation_id,
        ))

    async def log_balance_computed(
        self,
        user_id: int,
        balance: Decimal,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.balance_computed(
            user_id=user_id,
            balance=str(balance),
            correlation_id=correlation_id,
        ))

    async def log_user_registered(
        self,
        user_id: Optional[int],
        email: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.user_registered(
            user_id=user_id,
            email=email,
            correlation_id=correlation_id,
        ))

    async def log_user_registration_rejected(
        self,
        email: Optional[str],
        reason: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.user_registration_rejected(
            email=email,
            reason=reason,
            correlation_id=correlation_id,
        ))

    async def log_user_authenticated(
        self,
        user_id: Optional[int],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.user_authenticated(
            user_id=user_id,
            correlation_id=correlation_id,
        ))

    async def log_authentication_failed(
        self,
        email: str,
        reason: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.authentication_failed(
            email=email,
            reason=reason,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    New id shared by all events of one request.

    The HTTP routes create one per request and pass it to every service call.
    """
    return uuid4()
