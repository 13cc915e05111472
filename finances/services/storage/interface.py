"""
Abstract Storage Interface

DESIGN DECISION: The ledger services only see these async ABCs.
Two backends implement them: in-memory (tests, fallback) and Google Sheets.

Only the operations the entry engine and user directory call are here:
save, delete, lookups, query-by-example and one aggregate.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional

from finances.models.audit import AuditEvent
from finances.models.entry import Entry, EntryStatus, EntryType, User


class EntryStorageInterface(ABC):
    """
    Abstract interface for ledger entry storage.

    Backends that cannot aggregate natively compute
    sum_value_by_user_type_status in Python.
    """

    @abstractmethod
    async def save(self, entry: Entry) -> Entry:
        """
        Insert or overwrite an entry.

        Args:
            entry: Entry to persist. If it has no id one is assigned,
                   otherwise the stored entry with that id is replaced.

        Returns:
            The persisted entry (always with an id)

        Raises:
            StorageError: If save fails
        """
        pass

    @abstractmethod
    async def delete(self, entry: Entry) -> None:
        """
        Remove an entry.

        Args:
            entry: Entry to remove (identified by its id)

        Raises:
            StorageError: If delete fails
        """
        pass

    @abstractmethod
    async def find_by_id(self, entry_id: int) -> Optional[Entry]:
        """
        Retrieve an entry by its ID.

        Returns:
            The entry if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_example(self, filter_entry: Entry) -> list[Entry]:
        """
        List entries matching a filter entry.

        Text fields match case-insensitively by substring,
        other populated fields by equality, unset fields match anything.

        Args:
            filter_entry: Partially populated entry used as the example

        Returns:
            Matching entries in storage order
        """
        pass

    @abstractmethod
    async def sum_value_by_user_type_status(
        self,
        user_id: int,
        entry_type: EntryType,
        status: EntryStatus,
    ) -> Optional[Decimal]:
        """
        Sum the value of a user's entries with the given type and status.

        Returns:
            The sum, or None if no entry matches
        """
        pass


class UserStorageInterface(ABC):
    """Abstract interface for user storage."""

    @abstractmethod
    async def save(self, user: User) -> User:
        """
        Insert or overwrite a user.

        Returns:
            The persisted user (always with an id)

        Raises:
            StorageError: If save fails
        """
        pass

    @abstractmethod
    async def find_by_id(self, user_id: int) -> Optional[User]:
        """Retrieve a user by ID, None if absent."""
        pass

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[User]:
        """Retrieve a user by email, None if absent."""
        pass

    @abstractmethod
    async def exists_by_email(self, email: str) -> bool:
        """True if any user is registered with this email."""
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Events are only ever appended.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: int,
    ) -> list[AuditEvent]:
        """
        Get all events for a specific entity.

        Args:
            entity_type: Type of entity ('entry' or 'user')
            entity_id: The entity's ID

        Returns:
            List of events in chronological order
        """
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Any failure of a storage backend."""
    pass


class NotFoundError(StorageError):
    """The record to change does not exist."""
    pass


class DuplicateError(StorageError):
    """A unique key (user email) is already taken."""
    pass


class ConnectionError(StorageError):
    """The backend could not be reached or opened."""
    pass
