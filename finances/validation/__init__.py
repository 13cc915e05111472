"""Entry validation package."""

from finances.validation.validator import (
    INVALID_DESCRIPTION,
    INVALID_MONTH,
    INVALID_VALUE,
    INVALID_YEAR,
    TYPE_REQUIRED,
    USER_REQUIRED,
    EntryValidator,
)

__all__ = [
    "EntryValidator",
    "INVALID_DESCRIPTION",
    "INVALID_MONTH",
    "INVALID_VALUE",
    "INVALID_YEAR",
    "TYPE_REQUIRED",
    "USER_REQUIRED",
]
