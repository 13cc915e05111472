"""
FastAPI Application Factory

Assembles the REST boundary around already-built services.
Services are passed in rather than created here, so tests can hand in
in-memory or mocked collaborators.

Storage failures that reach the boundary are answered with 503 and a
plain text body. Everything else propagates to the server.
"""

from typing import Optional

import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import PlainTextResponse

from finances.api.routes import build_entries_router, build_users_router
from finances.config import Settings, get_settings
from finances.entries import EntryEngine
from finances.services.storage import StorageError
from finances.users import UserDirectory


STORAGE_UNAVAILABLE = "Storage unavailable."

logger = structlog.get_logger(__name__)


def create_app(
    entry_engine: EntryEngine,
    user_directory: UserDirectory,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Create a FastAPI application serving the ledger.

    Args:
        entry_engine: Service behind /entries and the balance route
        user_directory: Service behind /users and user lookups
        settings: Defaults to get_settings()

    Returns:
        Configured FastAPI instance
    """
    settings = settings or get_settings()
    api = settings.api

    app = FastAPI(title=api.title, version=api.version)

    app.include_router(
        build_entries_router(entry_engine, user_directory), prefix=api.prefix
    )
    app.include_router(
        build_users_router(entry_engine, user_directory), prefix=api.prefix
    )

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.error("storage_error", path=request.url.path, error=str(exc))
        return PlainTextResponse(
            STORAGE_UNAVAILABLE, status_code=status.HTTP_503_SERVICE_UNAVAILABLE
        )

    return app
