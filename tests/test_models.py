"""
Tests for Personal Finances

Test strategy:
1. Unit tests for individual components (models, validators)
2. Integration tests for flows (in-memory storage, mocked collaborators)
3. No real API calls in tests (use mocks)
"""

import json
from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest
from pydantic import ValidationError

from finances.models.entry import Entry, EntryStatus, EntryType, User
from finances.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestLedgerModels:
    """Tests for entry and user models."""

    def test_entry_all_fields_optional(self):
        """An empty entry is a valid model (business rules live elsewhere)."""
        entry = Entry()
        assert entry.id is None
        assert entry.user is None
        assert entry.status is None

    def test_entry_creation(self):
        """Test Entry model creation."""
        entry = Entry(
            description="Rent",
            month=1,
            year=2021,
            user=User(id=1),
            value=Decimal("1200.00"),
            registry_date=date(2021, 1, 5),
            type=EntryType.EXPENSE,
            status=EntryStatus.PENDING,
        )
        assert entry.description == "Rent"
        assert entry.value == Decimal("1200.00")
        assert entry.type == EntryType.EXPENSE

    def test_entry_user_id(self):
        """user_id follows the referenced user."""
        assert Entry(user=User(id=7)).user_id == 7
        assert Entry(user=User()).user_id is None
        assert Entry().user_id is None

    def test_enum_values_parse_from_strings(self):
        """Enums accept their wire names."""
        entry = Entry(type="REVENUE", status="EFFECTED")
        assert entry.type is EntryType.REVENUE
        assert entry.status is EntryStatus.EFFECTED

    def test_unknown_enum_value_rejected(self):
        with pytest.raises(ValidationError):
            Entry(type="TRANSFER")

    def test_assignment_is_validated(self):
        """Assigning a status string converts it to the enum."""
        entry = Entry()
        entry.status = "CANCELED"
        assert entry.status is EntryStatus.CANCELED

    def test_user_email_length_limit(self):
        with pytest.raises(ValidationError):
            User(email="a" * 101)


class TestAuditModels:
    """Tests for audit event models."""

    def test_audit_event_creation(self):
        """Test AuditEvent creation."""
        event = AuditEvent(
            event_type=AuditEventType.ENTRY_CREATED,
            description="Test event",
        )
        assert event.event_id is not None
        assert event.timestamp is not None
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEvent(
            event_type=AuditEventType.ENTRY_CREATED,
            description="Test event",
            entity_id=3,
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "entry_created"
        assert log_dict["entity_id"] == 3

    def test_audit_event_to_sheets_row(self):
        """Test conversion to Sheets row."""
        event = AuditEvent(
            event_type=AuditEventType.ENTRY_CREATED,
            description="Test event",
            entity_type="entry",
            entity_id=3,
            details={"value": "10"},
        )
        row = event.to_sheets_row()
        assert len(row) == 11
        assert row[2] == "entry_created"
        assert row[5] == "3"
        assert json.loads(row[8]) == {"value": "10"}
        assert row[10] == "False"

    def test_audit_builder_entry_created(self):
        """Test AuditEventBuilder for entry creation."""
        correlation_id = uuid4()
        event = AuditEventBuilder.entry_created(
            entry_id=1,
            entry_type="REVENUE",
            value="150.00",
            correlation_id=correlation_id,
        )
        assert event.event_type == AuditEventType.ENTRY_CREATED
        assert event.entity_type == "entry"
        assert event.correlation_id == correlation_id
        assert event.details["value"] == "150.00"
        assert event.is_user_action is True

    def test_audit_builder_status_transition(self):
        event = AuditEventBuilder.entry_status_updated(
            entry_id=4,
            previous_status="PENDING",
            new_status="EFFECTED",
        )
        assert event.details == {"previous_status": "PENDING", "new_status": "EFFECTED"}
        assert "PENDING -> EFFECTED" in event.description

    def test_audit_builder_authentication_failed(self):
        """Failed logins are warnings carrying the reason, not the password."""
        event = AuditEventBuilder.authentication_failed(
            email="someone@email.com",
            reason="Invalid password.",
        )
        assert event.severity == AuditSeverity.WARNING
        assert event.error_message == "Invalid password."
        assert event.entity_id is None
        assert "password" not in event.details
