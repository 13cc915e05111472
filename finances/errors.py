"""
Ledger Exceptions

Three distinct kinds of failure leave the core:

- BusinessRuleError: the caller sent data that breaks a business rule.
  Recoverable, carries one human-readable reason.
- PreconditionError: the caller broke the contract of a method
  (e.g. updating an entry that was never saved). A programming error,
  deliberately NOT a subclass of BusinessRuleError.
- AuthenticationError: the supplied credentials were rejected.

Storage failures use the StorageError family from the storage package.
"""


class BusinessRuleError(Exception):
    """A business rule was violated. The message is shown to the user verbatim."""
    pass


# Entry validation failures are business rule failures
ValidationError = BusinessRuleError


class PreconditionError(Exception):
    """A method was called on an object in the wrong state."""
    pass


class AuthenticationError(Exception):
    """Credentials did not match a known user."""
    pass
