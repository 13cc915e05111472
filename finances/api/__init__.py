"""
REST API Package

FastAPI boundary over the entry engine and user directory.
"""

from finances.api.app import create_app
from finances.api.routes import build_entries_router, build_users_router

__all__ = ["build_entries_router", "build_users_router", "create_app"]
