"""
Entry Engine

Owns the lifecycle of ledger entries:
- validation (delegated to EntryValidator, fail-fast)
- create / update / delete orchestration
- the status state machine
- query-by-example reads
- balance aggregation

Status state machine:
    PENDING -> EFFECTED
    PENDING -> CANCELED
New entries are always PENDING. No transition table is enforced:
update_status assigns whatever status it is given.

Storage is injected through the constructor. The engine holds no
mutable state between calls.
"""

from datetime import date
from decimal import Decimal
from typing import Optional
from uuid import UUID

import structlog

from finances.audit import AuditLogger
from finances.errors import BusinessRuleError, PreconditionError
from finances.models.entry import Entry, EntryStatus, EntryType
from finances.queries import ExampleMatcher
from finances.services.storage import EntryStorageInterface
from finances.validation import EntryValidator


logger = structlog.get_logger(__name__)


class EntryEngine:
    """
    Ledger entry service.

    All public methods are coroutines; they only suspend on storage calls.
    """

    def __init__(
        self,
        storage: EntryStorageInterface,
        validator: Optional[EntryValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._validator = validator or EntryValidator()
        self._audit_logger = audit_logger

    def validate(self, entry: Entry) -> None:
        """
        Check the entry against the business rules.

        Raises:
            BusinessRuleError: with the message of the FIRST broken rule
        """
        self._validator.validate(entry)

    async def _validate_or_audit(
        self,
        entry: Entry,
        correlation_id: Optional[UUID],
    ) -> None:
        try:
            self.validate(entry)
        except BusinessRuleError as e:
            logger.info("entry_rejected", entry_id=entry.id, reason=str(e))
            if self._audit_logger:
                await self._audit_logger.log_entry_validation_failed(
                    entry_id=entry.id,
                    reason=str(e),
                    correlation_id=correlation_id,
                )
            raise

    async def create(
        self,
        entry: Entry,
        correlation_id: Optional[UUID] = None,
    ) -> Entry:
        """
        Validate and persist a new entry.

        The status is always forced to PENDING, whatever the caller sent.
        The registry date defaults to today.

        Returns:
            The persisted entry, with its id
        """
        await self._validate_or_audit(entry, correlation_id)

        entry.status = EntryStatus.PENDING
        if entry.registry_date is None:
            entry.registry_date = date.today()

        saved = await self._storage.save(entry)
        logger.info("entry_created", entry_id=saved.id, user_id=saved.user_id)

        if self._audit_logger:
            await self._audit_logger.log_entry_created(
                entry_id=saved.id,
                entry_type=saved.type.value,
                value=saved.value,
                correlation_id=correlation_id,
            )
        return saved

    async def update(
        self,
        entry: Entry,
        correlation_id: Optional[UUID] = None,
    ) -> Entry:
        """
        Validate and persist an already saved entry as-is.

        Raises:
            PreconditionError: if the entry has no id (storage is not touched)
            BusinessRuleError: if a business rule is broken
        """
        if entry.id is None:
            raise PreconditionError("Entry must be saved before it can be updated.")

        await self._validate_or_audit(entry, correlation_id)

        saved = await self._storage.save(entry)
        logger.info("entry_updated", entry_id=saved.id, status=saved.status)

        if self._audit_logger:
            await self._audit_logger.log_entry_updated(
                entry_id=saved.id,
                correlation_id=correlation_id,
            )
        return saved

    async def delete(
        self,
        entry: Entry,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """
        Remove a saved entry. Field contents are not validated.

        Raises:
            PreconditionError: if the entry has no id (storage is not touched)
        """
        if entry.id is None:
            raise PreconditionError("Entry must be saved before it can be deleted.")

        await self._storage.delete(entry)
        logger.info("entry_deleted", entry_id=entry.id)

        if self._audit_logger:
            await self._audit_logger.log_entry_deleted(
                entry_id=entry.id,
                correlation_id=correlation_id,
            )

    async def update_status(
        self,
        entry: Entry,
        status: EntryStatus,
        correlation_id: Optional[UUID] = None,
    ) -> Entry:
        """
        Assign a new status, then run a full update.

        The update's precondition and validation apply: an entry that
        breaks any other rule cannot change status either.
        """
        previous = entry.status
        entry.status = status

        saved = await self.update(entry, correlation_id=correlation_id)

        if self._audit_logger:
            await self._audit_logger.log_entry_status_updated(
                entry_id=saved.id,
                previous_status=previous.value if previous else None,
                new_status=status.value,
                correlation_id=correlation_id,
            )
        return saved

    async def read(
        self,
        filter_entry: Entry,
        correlation_id: Optional[UUID] = None,
    ) -> list[Entry]:
        """
        List entries matching the filter entry.

        Text fields match case-insensitively by substring, other
        populated fields by equality, unset fields match anything.
        """
        entries = await self._storage.find_by_example(filter_entry)

        if self._audit_logger:
            await self._audit_logger.log_entries_queried(
                user_id=filter_entry.user_id,
                filters=ExampleMatcher.from_entry(filter_entry).describe(),
                result_count=len(entries),
                correlation_id=correlation_id,
            )
        return entries

    async def get_by_id(self, entry_id: int) -> Optional[Entry]:
        return await self._storage.find_by_id(entry_id)

    async def get_balance(
        self,
        user_id: int,
        correlation_id: Optional[UUID] = None,
    ) -> Decimal:
        """
        Effected revenues minus effected expenses for a user.

        PENDING and CANCELED entries never count. A side with no
        matching entries counts as zero.
        """
        revenue = await self._storage.sum_value_by_user_type_status(
            user_id, EntryType.REVENUE, EntryStatus.EFFECTED
        )
        expenses = await self._storage.sum_value_by_user_type_status(
            user_id, EntryType.EXPENSE, EntryStatus.EFFECTED
        )

        if revenue is None:
            revenue = Decimal("0")
        if expenses is None:
            expenses = Decimal("0")

        balance = revenue - expenses

        if self._audit_logger:
            await self._audit_logger.log_balance_computed(
                user_id=user_id,
                balance=balance,
                correlation_id=correlation_id,
            )
        return balance
