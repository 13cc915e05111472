"""
In-Memory Storage Implementation

Used by the test suite and as the fallback backend when Google Sheets
is not configured. Data lives only as long as the process.

Stored objects are deep copies: callers mutating an entry they hold
never change what storage holds until they save again.
"""

from decimal import Decimal
from itertools import count
from typing import Optional

from finances.models.audit import AuditEvent
from finances.models.entry import Entry, EntryStatus, EntryType, User
from finances.queries import ExampleMatcher
from finances.services.storage.interface import (
    AuditStorageInterface,
    DuplicateError,
    EntryStorageInterface,
    NotFoundError,
    UserStorageInterface,
)


class InMemoryEntryStorage(EntryStorageInterface):
    """Entries kept in a dict keyed by id (insertion ordered)."""

    def __init__(self):
        self._entries: dict[int, Entry] = {}
        self._ids = count(1)

    async def save(self, entry: Entry) -> Entry:
        if entry.id is None:
            entry = entry.model_copy(update={"id": next(self._ids)})
        self._entries[entry.id] = entry.model_copy(deep=True)
        return entry.model_copy(deep=True)

    async def delete(self, entry: Entry) -> None:
        if self._entries.pop(entry.id, None) is None:
            raise NotFoundError(f"Entry not found: {entry.id}")

    async def find_by_id(self, entry_id: int) -> Optional[Entry]:
        entry = self._entries.get(entry_id)
        return entry.model_copy(deep=True) if entry else None

    async def find_by_example(self, filter_entry: Entry) -> list[Entry]:
        matcher = ExampleMatcher.from_entry(filter_entry)
        return [entry.model_copy(deep=True) for entry in matcher.filter(self._entries.values())]

    async def sum_value_by_user_type_status(
        self,
        user_id: int,
        entry_type: EntryType,
        status: EntryStatus,
    ) -> Optional[Decimal]:
        values = [
            entry.value
            for entry in self._entries.values()
            if entry.user_id == user_id
            and entry.type == entry_type
            and entry.status == status
            and entry.value is not None
        ]
        if not values:
            return None
        return sum(values, Decimal("0"))


class InMemoryUserStorage(UserStorageInterface):
    """Users kept in a dict keyed by id."""

    def __init__(self):
        self._users: dict[int, User] = {}
        self._ids = count(1)

    async def save(self, user: User) -> User:
        for stored in self._users.values():
            if stored.email == user.email and stored.id != user.id:
                raise DuplicateError(f"Email already registered: {user.email}")
        if user.id is None:
            user = user.model_copy(update={"id": next(self._ids)})
        self._users[user.id] = user.model_copy(deep=True)
        return user.model_copy(deep=True)

    async def find_by_id(self, user_id: int) -> Optional[User]:
        user = self._users.get(user_id)
        return user.model_copy(deep=True) if user else None

    async def find_by_email(self, email: str) -> Optional[User]:
        for user in self._users.values():
            if user.email == email:
                return user.model_copy(deep=True)
        return None

    async def exists_by_email(self, email: str) -> bool:
        return any(user.email == email for user in self._users.values())


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only list of audit events."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    async def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    async def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: int,
    ) -> list[AuditEvent]:
        events = [
            e for e in self._events
            if e.entity_type == entity_type and e.entity_id == entity_id
        ]
        events.sort(key=lambda e: e.timestamp)
        return events

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        events = sorted(self._events, key=lambda e: e.timestamp, reverse=True)
        return events[:limit]
