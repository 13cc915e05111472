"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets is used as the persistent backend because:
1. The owner can view their ledger directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)
4. Easy to export/migrate later

TRADEOFFS:
- Not suitable for high-volume data (we're fine for personal use)
- No transactions (last write wins)
- Limited query capabilities (we filter and sum in Python)

Ids are integers: a new record gets the highest id in its sheet plus one.
"""

import json
from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

import gspread
from google.oauth2.service_account import Credentials
from tenacity import (
    retry,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from finances.config import get_settings
from finances.models.audit import AuditEvent, AuditEventType, AuditSeverity
from finances.models.entry import Entry, EntryStatus, EntryType, User
from finances.queries import ExampleMatcher
from finances.services.storage.interface import (
    AuditStorageInterface,
    ConnectionError,
    DuplicateError,
    EntryStorageInterface,
    NotFoundError,
    StorageError,
    UserStorageInterface,
)


# Column mappings for Entries sheet
ENTRY_COLUMNS = [
    "id",
    "description",
    "month",
    "year",
    "user_id",
    "value",
    "registry_date",
    "type",
    "status",
]

# Column mappings for Users sheet
USER_COLUMNS = [
    "id",
    "name",
    "email",
    "password",
    "registry_date",
]

# Column mappings for Audit sheet
AUDIT_COLUMNS = [
    "event_id",
    "timestamp",
    "event_type",
    "severity",
    "entity_type",
    "entity_id",
    "correlation_id",
    "description",
    "details_json",
    "error_message",
    "is_user_action",
]


def _safe_get(row: list, index: int, default: str = "") -> str:
    """Read a cell, tolerating short rows and empty cells."""
    try:
        return row[index] if row[index] else default
    except IndexError:
        return default


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
    """

    def __init__(self):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = get_settings().google_sheets

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def _get_or_create_sheet(
        self,
        title: str,
        columns: list[str],
        rows: int,
    ) -> gspread.Worksheet:
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            # Create the sheet with headers
            sheet = spreadsheet.add_worksheet(
                title=title,
                rows=rows,
                cols=len(columns),
            )
            sheet.append_row(columns)
        return sheet

    def get_entries_sheet(self) -> gspread.Worksheet:
        """Get or create the Entries worksheet."""
        return self._get_or_create_sheet(
            self._settings.entries_sheet_name, ENTRY_COLUMNS, rows=1000
        )

    def get_users_sheet(self) -> gspread.Worksheet:
        """Get or create the Users worksheet."""
        return self._get_or_create_sheet(
            self._settings.users_sheet_name, USER_COLUMNS, rows=200
        )

    def get_audit_sheet(self) -> gspread.Worksheet:
        """Get or create the Audit worksheet."""
        return self._get_or_create_sheet(
            self._settings.audit_sheet_name, AUDIT_COLUMNS, rows=5000
        )


def _next_id(rows: list[list]) -> int:
    ids = [int(row[0]) for row in rows if row and row[0].isdigit()]
    return max(ids, default=0) + 1


def _find_row_index(all_rows: list[list], record_id: int) -> Optional[int]:
    """1-based sheet row of a record (row 1 is the header)."""
    for idx, row in enumerate(all_rows[1:], start=2):
        if row and row[0] == str(record_id):
            return idx
    return None


class GoogleSheetsEntryStorage(EntryStorageInterface):
    """
    Google Sheets implementation of entry storage.

    One entry per row. The owning user is stored by id only.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _entry_to_row(self, entry: Entry) -> list:
        """Convert an Entry to a spreadsheet row."""
        return [
            str(entry.id),
            entry.description or "",
            str(entry.month) if entry.month is not None else "",
            str(entry.year) if entry.year is not None else "",
            str(entry.user_id) if entry.user_id is not None else "",
            str(entry.value) if entry.value is not None else "",
            entry.registry_date.isoformat() if entry.registry_date else "",
            entry.type.value if entry.type else "",
            entry.status.value if entry.status else "",
        ]

    def _row_to_entry(self, row: list) -> Entry:
        """Convert a spreadsheet row to an Entry."""
        user_id = _safe_get(row, 4)
        return Entry(
            id=int(_safe_get(row, 0)),
            description=_safe_get(row, 1) or None,
            month=int(_safe_get(row, 2)) if _safe_get(row, 2) else None,
            year=int(_safe_get(row, 3)) if _safe_get(row, 3) else None,
            user=User(id=int(user_id)) if user_id else None,
            value=Decimal(_safe_get(row, 5)) if _safe_get(row, 5) else None,
            registry_date=date.fromisoformat(_safe_get(row, 6)) if _safe_get(row, 6) else None,
            type=EntryType(_safe_get(row, 7)) if _safe_get(row, 7) else None,
            status=EntryStatus(_safe_get(row, 8)) if _safe_get(row, 8) else None,
        )

    def _load_entries(self) -> list[Entry]:
        sheet = self._client.get_entries_sheet()
        entries = []
        for row in sheet.get_all_values()[1:]:  # Skip header
            if not row or not row[0]:  # Skip empty rows
                continue
            entries.append(self._row_to_entry(row))
        return entries

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def save(self, entry: Entry) -> Entry:
        """Append a new entry or overwrite the row of an existing one."""
        try:
            sheet = self._client.get_entries_sheet()
            all_rows = sheet.get_all_values()

            if entry.id is None:
                entry = entry.model_copy(update={"id": _next_id(all_rows[1:])})
                sheet.append_row(self._entry_to_row(entry), value_input_option="RAW")
                return entry

            idx = _find_row_index(all_rows, entry.id)
            if idx is None:
                sheet.append_row(self._entry_to_row(entry), value_input_option="RAW")
            else:
                sheet.update(
                    range_name=f"A{idx}",
                    values=[self._entry_to_row(entry)],
                    value_input_option="RAW",
                )
            return entry
        except Exception as e:
            raise StorageError(f"Failed to save entry: {e}")

    async def delete(self, entry: Entry) -> None:
        """Delete the row of an entry."""
        try:
            sheet = self._client.get_entries_sheet()
            idx = _find_row_index(sheet.get_all_values(), entry.id)
        except Exception as e:
            raise StorageError(f"Failed to delete entry: {e}")

        if idx is None:
            raise NotFoundError(f"Entry not found: {entry.id}")

        try:
            sheet.delete_rows(idx)
        except Exception as e:
            raise StorageError(f"Failed to delete entry: {e}")

    async def find_by_id(self, entry_id: int) -> Optional[Entry]:
        """Retrieve an entry by its ID."""
        try:
            sheet = self._client.get_entries_sheet()
            for row in sheet.get_all_values()[1:]:
                if row and row[0] == str(entry_id):
                    return self._row_to_entry(row)
            return None
        except Exception as e:
            raise StorageError(f"Failed to get entry: {e}")

    async def find_by_example(self, filter_entry: Entry) -> list[Entry]:
        """List entries matching the filter entry."""
        try:
            entries = self._load_entries()
        except Exception as e:
            raise StorageError(f"Failed to list entries: {e}")
        return ExampleMatcher.from_entry(filter_entry).filter(entries)

    async def sum_value_by_user_type_status(
        self,
        user_id: int,
        entry_type: EntryType,
        status: EntryStatus,
    ) -> Optional[Decimal]:
        """Sum values in Python; None when no row matches."""
        matches = await self.find_by_example(
            Entry(user=User(id=user_id), type=entry_type, status=status)
        )
        values = [entry.value for entry in matches if entry.value is not None]
        if not values:
            return None
        return sum(values, Decimal("0"))


class GoogleSheetsUserStorage(UserStorageInterface):
    """Google Sheets implementation of user storage."""

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _user_to_row(self, user: User) -> list:
        """Convert a User to a spreadsheet row."""
        return [
            str(user.id),
            user.name or "",
            user.email or "",
            user.password or "",
            user.registry_date.isoformat() if user.registry_date else "",
        ]

    def _row_to_user(self, row: list) -> User:
        """Convert a spreadsheet row to a User."""
        return User(
            id=int(_safe_get(row, 0)),
            name=_safe_get(row, 1) or None,
            email=_safe_get(row, 2) or None,
            password=_safe_get(row, 3) or None,
            registry_date=date.fromisoformat(_safe_get(row, 4)) if _safe_get(row, 4) else None,
        )

    def _load_users(self) -> list[User]:
        sheet = self._client.get_users_sheet()
        return [
            self._row_to_user(row)
            for row in sheet.get_all_values()[1:]
            if row and row[0]
        ]

    @retry(
        retry=retry_if_not_exception_type(DuplicateError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def save(self, user: User) -> User:
        """Append a new user or overwrite an existing one."""
        try:
            sheet = self._client.get_users_sheet()
            all_rows = sheet.get_all_values()
        except Exception as e:
            raise StorageError(f"Failed to save user: {e}")

        for row in all_rows[1:]:
            if row and _safe_get(row, 2) == user.email and row[0] != str(user.id):
                raise DuplicateError(f"Email already registered: {user.email}")

        try:
            if user.id is None:
                user = user.model_copy(update={"id": _next_id(all_rows[1:])})
                sheet.append_row(self._user_to_row(user), value_input_option="RAW")
                return user

            idx = _find_row_index(all_rows, user.id)
            if idx is None:
                sheet.append_row(self._user_to_row(user), value_input_option="RAW")
            else:
                sheet.update(
                    range_name=f"A{idx}",
                    values=[self._user_to_row(user)],
                    value_input_option="RAW",
                )
            return user
        except Exception as e:
            raise StorageError(f"Failed to save user: {e}")

    async def find_by_id(self, user_id: int) -> Optional[User]:
        try:
            users = self._load_users()
        except Exception as e:
            raise StorageError(f"Failed to get user: {e}")
        return next((u for u in users if u.id == user_id), None)

    async def find_by_email(self, email: str) -> Optional[User]:
        try:
            users = self._load_users()
        except Exception as e:
            raise StorageError(f"Failed to get user: {e}")
        return next((u for u in users if u.email == email), None)

    async def exists_by_email(self, email: str) -> bool:
        return await self.find_by_email(email) is not None


class GoogleSheetsAuditStorage(AuditStorageInterface):
    """
    Google Sheets implementation of audit log storage.

    Audit events are append-only.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _row_to_event(self, row: list) -> AuditEvent:
        """Convert a spreadsheet row to an AuditEvent."""
        return AuditEvent(
            event_id=UUID(_safe_get(row, 0)),
            timestamp=datetime.fromisoformat(_safe_get(row, 1)),
            event_type=AuditEventType(_safe_get(row, 2)),
            severity=AuditSeverity(_safe_get(row, 3)),
            entity_type=_safe_get(row, 4) or None,
            entity_id=int(_safe_get(row, 5)) if _safe_get(row, 5) else None,
            correlation_id=UUID(_safe_get(row, 6)) if _safe_get(row, 6) else None,
            description=_safe_get(row, 7),
            details=json.loads(_safe_get(row, 8)) if _safe_get(row, 8) else {},
            error_message=_safe_get(row, 9) or None,
            is_user_action=_safe_get(row, 10).lower() == "true",
        )

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def append_event(self, event: AuditEvent) -> bool:
        """Append an audit event."""
        try:
            sheet = self._client.get_audit_sheet()
            sheet.append_row(event.to_sheets_row(), value_input_option="RAW")
            return True
        except Exception as e:
            raise StorageError(f"Failed to write audit event: {e}")

    async def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: int,
    ) -> list[AuditEvent]:
        """Get events by entity."""
        try:
            sheet = self._client.get_audit_sheet()
            all_rows = sheet.get_all_values()[1:]
        except Exception as e:
            raise StorageError(f"Failed to get audit events: {e}")

        events = [
            self._row_to_event(row)
            for row in all_rows
            if row
            and len(row) > 5
            and row[4] == entity_type
            and row[5] == str(entity_id)
        ]
        events.sort(key=lambda e: e.timestamp)
        return events

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """Get recent events."""
        try:
            sheet = self._client.get_audit_sheet()
            all_rows = sheet.get_all_values()[1:]
        except Exception as e:
            raise StorageError(f"Failed to get audit events: {e}")

        events = [self._row_to_event(row) for row in all_rows if row and row[0]]

        # Sort newest first
        events.sort(key=lambda e: e.timestamp, reverse=True)
        return events[:limit]
