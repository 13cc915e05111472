"""
Entry Validation

DESIGN DECISION: Validation is FAIL-FAST.
Rules are checked in a fixed order and the first violated rule
is raised as a BusinessRuleError. The caller sees exactly one reason,
never an aggregate of all problems.

Rule order:
1. Description present and not blank
2. Month in 1..12
3. Year with exactly four digits
4. Owning user with an id
5. Value above zero
6. Type present

Status is NOT validated: it is assigned by the system on creation
and by the caller on an explicit status update.
"""

from decimal import Decimal
from typing import Callable, Optional

from finances.errors import BusinessRuleError
from finances.models.entry import Entry


INVALID_DESCRIPTION = "Invalid entry Description."
INVALID_MONTH = "Invalid Month value."
INVALID_YEAR = "Invalid Year value."
USER_REQUIRED = "User must be associated."
INVALID_VALUE = "Must insert value above 0."
TYPE_REQUIRED = "Must associate a type."


def _has_description(entry: Entry) -> bool:
    return entry.description is not None and entry.description.strip() != ""


def _has_valid_month(entry: Entry) -> bool:
    return entry.month is not None and 1 <= entry.month <= 12


def _has_valid_year(entry: Entry) -> bool:
    return entry.year is not None and 1000 <= entry.year <= 9999


def _has_user(entry: Entry) -> bool:
    return entry.user_id is not None


def _has_positive_value(entry: Entry) -> bool:
    return entry.value is not None and entry.value > Decimal("0")


def _has_type(entry: Entry) -> bool:
    return entry.type is not None


class EntryValidator:
    """
    Validates ledger entries against the business rules.

    Usage:
        EntryValidator().validate(entry)  # raises BusinessRuleError
    """

    RULES: list[tuple[Callable[[Entry], bool], str]] = [
        (_has_description, INVALID_DESCRIPTION),
        (_has_valid_month, INVALID_MONTH),
        (_has_valid_year, INVALID_YEAR),
        (_has_user, USER_REQUIRED),
        (_has_positive_value, INVALID_VALUE),
        (_has_type, TYPE_REQUIRED),
    ]

    def first_violation(self, entry: Entry) -> Optional[str]:
        """Message of the first broken rule, or None if the entry is valid."""
        for check, message in self.RULES:
            if not check(entry):
                return message
        return None

    def validate(self, entry: Entry) -> None:
        """Raise BusinessRuleError with the first broken rule."""
        message = self.first_violation(entry)
        if message is not None:
            raise BusinessRuleError(message)
