"""
REST Routes

Thin translation layer between HTTP and the ledger services.
Routers are built by factory functions that close over the injected
EntryEngine and UserDirectory, so no module-level service state exists.

Every failure a client can cause is answered with 400 and a plain text
body carrying the reason. Each request gets its own correlation id,
which is threaded through the services and the audit trail.
"""

from typing import Optional

import structlog
from fastapi import APIRouter, Query, Response, status
from fastapi.responses import PlainTextResponse

from finances.api.schemas import (
    EntryDTO,
    EntryRead,
    UpdateStatusDTO,
    UserDTO,
    UserRead,
)
from finances.audit import create_correlation_id
from finances.entries import EntryEngine
from finances.errors import AuthenticationError, BusinessRuleError
from finances.models.entry import Entry, EntryStatus, EntryType, User
from finances.users import UserDirectory


ENTRY_NOT_FOUND = "Entry not found."
USER_DOES_NOT_EXIST = "User does not exist."
INVALID_TYPE = "Invalid type."
INVALID_STATUS = "Invalid status."

logger = structlog.get_logger(__name__)


def _bad_request(reason: str) -> PlainTextResponse:
    logger.info("request_rejected", reason=reason)
    return PlainTextResponse(reason, status_code=status.HTTP_400_BAD_REQUEST)


def _parse_type(raw: Optional[str]) -> Optional[EntryType]:
    if raw is None:
        return None
    try:
        return EntryType(raw)
    except ValueError:
        raise BusinessRuleError(INVALID_TYPE)


def _parse_status(raw: Optional[str]) -> Optional[EntryStatus]:
    if raw is None:
        return None
    try:
        return EntryStatus(raw)
    except ValueError:
        raise BusinessRuleError(INVALID_STATUS)


async def _find_user(directory: UserDirectory, user_id: Optional[int]) -> User:
    user = await directory.get_by_id(user_id) if user_id is not None else None
    if user is None:
        raise BusinessRuleError(USER_DOES_NOT_EXIST)
    return user


def build_entries_router(engine: EntryEngine, directory: UserDirectory) -> APIRouter:
    """Routes under /entries."""
    router = APIRouter(prefix="/entries", tags=["entries"])

    async def to_entry(dto: EntryDTO) -> Entry:
        """Build a domain entry; missing type means EXPENSE, missing status PENDING."""
        return Entry(
            description=dto.description,
            month=dto.month,
            year=dto.year,
            registry_date=dto.registry_date,
            value=dto.value,
            type=_parse_type(dto.type) or EntryType.EXPENSE,
            status=_parse_status(dto.status) or EntryStatus.PENDING,
            user=await _find_user(directory, dto.user),
        )

    @router.post("", response_model=EntryRead, status_code=status.HTTP_201_CREATED)
    async def create_entry(dto: EntryDTO):
        correlation_id = create_correlation_id()
        try:
            entry = await to_entry(dto)
            saved = await engine.create(entry, correlation_id=correlation_id)
        except BusinessRuleError as e:
            return _bad_request(str(e))
        return EntryRead.from_entry(saved)

    @router.put("/{entry_id}", response_model=EntryRead)
    async def update_entry(entry_id: int, dto: EntryDTO):
        correlation_id = create_correlation_id()
        existing = await engine.get_by_id(entry_id)
        if existing is None:
            return _bad_request(ENTRY_NOT_FOUND)

        try:
            entry = await to_entry(dto)
            entry.id = existing.id
            saved = await engine.update(entry, correlation_id=correlation_id)
        except BusinessRuleError as e:
            return _bad_request(str(e))
        return EntryRead.from_entry(saved)

    @router.get("", response_model=list[EntryRead])
    async def read_entries(
        user: int = Query(..., description="Owner user id"),
        description: Optional[str] = Query(None),
        month: Optional[int] = Query(None),
        year: Optional[int] = Query(None),
        entry_type: Optional[str] = Query(None, alias="type"),
        entry_status: Optional[str] = Query(None, alias="status"),
    ):
        correlation_id = create_correlation_id()
        try:
            filter_entry = Entry(
                description=description,
                month=month,
                year=year,
                type=_parse_type(entry_type),
                status=_parse_status(entry_status),
                user=await _find_user(directory, user),
            )
        except BusinessRuleError as e:
            return _bad_request(str(e))

        entries = await engine.read(filter_entry, correlation_id=correlation_id)
        return [EntryRead.from_entry(e) for e in entries]

    @router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_entry(entry_id: int):
        existing = await engine.get_by_id(entry_id)
        if existing is None:
            return _bad_request(ENTRY_NOT_FOUND)

        await engine.delete(existing, correlation_id=create_correlation_id())
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @router.put("/{entry_id}/update-status", response_model=EntryRead)
    async def update_entry_status(entry_id: int, dto: UpdateStatusDTO):
        correlation_id = create_correlation_id()
        existing = await engine.get_by_id(entry_id)
        if existing is None:
            return _bad_request(ENTRY_NOT_FOUND)

        try:
            new_status = _parse_status(dto.status)
            if new_status is None:
                raise BusinessRuleError(INVALID_STATUS)
            saved = await engine.update_status(
                existing, new_status, correlation_id=correlation_id
            )
        except BusinessRuleError as e:
            return _bad_request(str(e))
        return EntryRead.from_entry(saved)

    return router


def build_users_router(engine: EntryEngine, directory: UserDirectory) -> APIRouter:
    """Routes under /users."""
    router = APIRouter(prefix="/users", tags=["users"])

    @router.post("/authenticate", response_model=UserRead)
    async def authenticate(dto: UserDTO):
        try:
            user = await directory.authenticate(
                dto.email, dto.password, correlation_id=create_correlation_id()
            )
        except AuthenticationError as e:
            return _bad_request(str(e))
        return UserRead.from_user(user)

    @router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
    async def register(dto: UserDTO):
        user = User(name=dto.name, email=dto.email, password=dto.password)
        try:
            saved = await directory.register(user, correlation_id=create_correlation_id())
        except BusinessRuleError as e:
            return _bad_request(str(e))
        return UserRead.from_user(saved)

    @router.get("/{user_id}/balance")
    async def get_balance(user_id: int):
        user = await directory.get_by_id(user_id)
        if user is None:
            return Response(status_code=status.HTTP_404_NOT_FOUND)

        # Returned bare: the body is the JSON number itself
        return await engine.get_balance(user_id, correlation_id=create_correlation_id())

    return router
