"""Tests for fail-fast entry validation."""

from decimal import Decimal

import pytest

from finances.errors import BusinessRuleError, PreconditionError, ValidationError
from finances.models.entry import Entry, EntryType, User
from finances.validation import EntryValidator
from finances.validation.validator import (
    INVALID_DESCRIPTION,
    INVALID_MONTH,
    INVALID_VALUE,
    INVALID_YEAR,
    TYPE_REQUIRED,
    USER_REQUIRED,
)


def valid_entry(**overrides) -> Entry:
    fields = dict(
        description="Salary",
        month=3,
        year=2021,
        user=User(id=1),
        value=Decimal("10"),
        type=EntryType.REVENUE,
    )
    fields.update(overrides)
    return Entry(**fields)


class TestEntryValidator:
    """Each rule, in order, with the first failure winning."""

    def setup_method(self):
        self.validator = EntryValidator()

    def test_valid_entry_passes(self):
        self.validator.validate(valid_entry())
        assert self.validator.first_violation(valid_entry()) is None

    def test_status_is_not_validated(self):
        """An entry without status is still valid."""
        self.validator.validate(valid_entry(status=None))

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"description": None}, INVALID_DESCRIPTION),
            ({"description": ""}, INVALID_DESCRIPTION),
            ({"description": "   "}, INVALID_DESCRIPTION),
            ({"month": None}, INVALID_MONTH),
            ({"month": 0}, INVALID_MONTH),
            ({"month": 13}, INVALID_MONTH),
            ({"year": None}, INVALID_YEAR),
            ({"year": 202}, INVALID_YEAR),
            ({"year": 20210}, INVALID_YEAR),
            ({"user": None}, USER_REQUIRED),
            ({"user": User()}, USER_REQUIRED),
            ({"value": None}, INVALID_VALUE),
            ({"value": Decimal("0")}, INVALID_VALUE),
            ({"value": Decimal("-5")}, INVALID_VALUE),
            ({"type": None}, TYPE_REQUIRED),
        ],
    )
    def test_single_broken_rule(self, overrides, message):
        with pytest.raises(BusinessRuleError) as exc_info:
            self.validator.validate(valid_entry(**overrides))
        assert str(exc_info.value) == message

    def test_month_bounds_are_inclusive(self):
        self.validator.validate(valid_entry(month=1))
        self.validator.validate(valid_entry(month=12))

    def test_smallest_positive_value_passes(self):
        self.validator.validate(valid_entry(value=Decimal("0.01")))

    def test_first_violation_wins(self):
        """An entry breaking every rule reports the description rule."""
        with pytest.raises(BusinessRuleError) as exc_info:
            self.validator.validate(Entry())
        assert str(exc_info.value) == INVALID_DESCRIPTION

    def test_rules_reported_in_order(self):
        """Fixing rules one by one reveals the next broken one."""
        entry = Entry(description="Rent")
        assert self.validator.first_violation(entry) == INVALID_MONTH
        entry.month = 5
        assert self.validator.first_violation(entry) == INVALID_YEAR
        entry.year = 2021
        assert self.validator.first_violation(entry) == USER_REQUIRED
        entry.user = User(id=2)
        assert self.validator.first_violation(entry) == INVALID_VALUE
        entry.value = Decimal("100")
        assert self.validator.first_violation(entry) == TYPE_REQUIRED
        entry.type = EntryType.EXPENSE
        assert self.validator.first_violation(entry) is None


class TestErrorKinds:
    """Business rule failures and contract violations stay distinct."""

    def test_validation_error_is_business_rule_error(self):
        assert ValidationError is BusinessRuleError

    def test_precondition_error_is_not_business_rule_error(self):
        assert not issubclass(PreconditionError, BusinessRuleError)
