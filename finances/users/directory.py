"""
User Directory

Registration and credential checks for ledger owners.

KNOWN WEAKNESS: passwords are stored and compared as plain text,
with an ordinary string comparison. Authentication outcomes depend
on this, so it is kept until a migration to hashed passwords exists.
"""

from datetime import date
from typing import Optional
from uuid import UUID

import structlog

from finances.audit import AuditLogger
from finances.errors import AuthenticationError, BusinessRuleError
from finances.models.entry import User
from finances.services.storage import UserStorageInterface


USER_NOT_FOUND = "User not found."
INVALID_PASSWORD = "Invalid password."
EMAIL_TAKEN = "A user already exists with the given email."

logger = structlog.get_logger(__name__)


class UserDirectory:
    """Looks up, registers and authenticates users."""

    def __init__(
        self,
        storage: UserStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._audit_logger = audit_logger

    async def authenticate(
        self,
        email: str,
        password: str,
        correlation_id: Optional[UUID] = None,
    ) -> User:
        """
        Return the user owning `email` if `password` matches.

        Raises:
            AuthenticationError: "User not found." or "Invalid password."
        """
        user = await self._storage.find_by_email(email)

        reason = None
        if user is None:
            reason = USER_NOT_FOUND
        elif user.password != password:
            reason = INVALID_PASSWORD

        if reason is not None:
            logger.warning("authentication_failed", reason=reason)
            if self._audit_logger:
                await self._audit_logger.log_authentication_failed(
                    email=email,
                    reason=reason,
                    correlation_id=correlation_id,
                )
            raise AuthenticationError(reason)

        logger.info("user_authenticated", user_id=user.id)
        if self._audit_logger:
            await self._audit_logger.log_user_authenticated(
                user_id=user.id,
                correlation_id=correlation_id,
            )
        return user

    async def register(
        self,
        user: User,
        correlation_id: Optional[UUID] = None,
    ) -> User:
        """
        Persist a new user after checking the email is free.

        Raises:
            BusinessRuleError: if the email is already registered
        """
        try:
            await self.validate_email(user.email)
        except BusinessRuleError as e:
            if self._audit_logger:
                await self._audit_logger.log_user_registration_rejected(
                    email=user.email,
                    reason=str(e),
                    correlation_id=correlation_id,
                )
            raise

        if user.registry_date is None:
            user.registry_date = date.today()

        saved = await self._storage.save(user)
        logger.info("user_registered", user_id=saved.id)

        if self._audit_logger:
            await self._audit_logger.log_user_registered(
                user_id=saved.id,
                email=saved.email,
                correlation_id=correlation_id,
            )
        return saved

    async def validate_email(self, email: Optional[str]) -> None:
        """Raise BusinessRuleError if a user already has this email."""
        if await self._storage.exists_by_email(email):
            raise BusinessRuleError(EMAIL_TAKEN)

    async def get_by_id(self, user_id: int) -> Optional[User]:
        return await self._storage.find_by_id(user_id)
