"""
Configuration Management for Personal Finances

Every knob of the ledger service, read from the environment (and .env)
through pydantic-settings.

DESIGN DECISION: One settings class per concern, each with its own env
prefix. A group that is not configured only fails when it is used, so the
in-memory backend runs with no environment at all.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GoogleSheetsSettings(BaseSettings):
    """Where the Sheets backend keeps its worksheets."""

    model_config = SettingsConfigDict(
        env_prefix="GOOGLE_SHEETS_",
        extra="ignore"
    )

    credentials_path: str = Field(
        ...,
        description="Path to Google service account credentials JSON"
    )
    spreadsheet_id: str = Field(
        ...,
        description="ID of the Google Sheets spreadsheet to use"
    )

    # One worksheet per record type
    entries_sheet_name: str = Field(
        default="Entries",
        description="Name of the sheet for ledger entries"
    )
    users_sheet_name: str = Field(
        default="Users",
        description="Name of the sheet for users"
    )
    audit_sheet_name: str = Field(
        default="AuditLog",
        description="Name of the sheet for audit logs"
    )

    @field_validator("credentials_path")
    @classmethod
    def validate_credentials_path(cls, v: str) -> str:
        """Missing credentials only warn: the file may be mounted after startup."""
        if not Path(v).exists():
            import warnings
            warnings.warn(
                f"No service account file at {v}. "
                "The google_sheets backend cannot connect without it."
            )
        return v


class ApiSettings(BaseSettings):
    """HTTP API configuration."""

    model_config = SettingsConfigDict(
        env_prefix="API_",
        extra="ignore"
    )

    title: str = Field(
        default="Personal Finances API",
        description="Title shown in the OpenAPI docs"
    )
    version: str = Field(
        default="1.0.0",
        description="API version"
    )
    prefix: str = Field(
        default="/api",
        description="Path prefix for all routes"
    )


class AppSettings(BaseSettings):
    """
    Process-wide settings: environment, log level, storage backend.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Deployment environment name"
    )
    debug_mode: bool = Field(
        default=False,
        description="Verbose behaviour for local development"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for local logs"
    )

    # Storage
    storage_backend: str = Field(
        default="memory",
        pattern="^(memory|google_sheets)$",
        description="Which storage backend to use"
    )

    @property
    def uses_google_sheets(self) -> bool:
        return self.storage_backend == "google_sheets"


class Settings(BaseSettings):
    """
    Entry point to every settings group.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Groups are built on access so a missing group fails only when used

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

    @property
    def api(self) -> ApiSettings:
        return ApiSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Settings singleton for the process.

    Tests call get_settings.cache_clear() after changing the environment.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Try to load every settings group.

    Returns {group: loaded}, plus {group}_error with the reason for
    each group that failed. Logged once at startup.
    """
    results = {}

    settings = get_settings()

    checks = {
        "google_sheets": lambda: settings.google_sheets,
        "api": lambda: settings.api,
        "app": lambda: settings.app,
    }

    for name, load in checks.items():
        try:
            load()
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
