"""User directory package."""

from finances.users.directory import (
    EMAIL_TAKEN,
    INVALID_PASSWORD,
    USER_NOT_FOUND,
    UserDirectory,
)

__all__ = ["EMAIL_TAKEN", "INVALID_PASSWORD", "USER_NOT_FOUND", "UserDirectory"]
