"""
HTTP Entrypoint for Personal Finances

This is the process that serves the ledger REST API.

DESIGN PRINCIPLES:
1. Logging is configured before anything else logs
2. All components are built once, by create_app_components
3. The backend (memory or Google Sheets) is chosen by configuration only

Run with:
    uvicorn app.main:app --reload
or:
    python -m app.main
"""

import structlog

from finances.api import create_app
from finances.audit import configure_logging
from finances.config import get_settings, validate_all_settings
from finances.orchestrator import create_app_components


logger = structlog.get_logger(__name__)

settings = get_settings()
configure_logging(settings.app.log_level)

entry_engine, user_directory, sheets_client = create_app_components()
app = create_app(entry_engine, user_directory, settings=settings)

logger.info(
    "app_started",
    environment=settings.app.app_environment,
    storage="google_sheets" if sheets_client else "memory",
    configured=validate_all_settings(),
)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="127.0.0.1", port=8000)
