"""Tests for settings and application wiring."""

import pytest
from pydantic import ValidationError

from finances.config import ApiSettings, AppSettings, get_settings
from finances.entries import EntryEngine
from finances.orchestrator import create_app_components
from finances.services.storage import GoogleSheetsClient
from finances.users import UserDirectory


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "STORAGE_BACKEND",
        "GOOGLE_SHEETS_CREDENTIALS_PATH",
        "GOOGLE_SHEETS_SPREADSHEET_ID",
        "API_PREFIX",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:
    """pydantic-settings groups."""

    def test_app_defaults(self):
        settings = AppSettings(_env_file=None)
        assert settings.storage_backend == "memory"
        assert settings.uses_google_sheets is False

    def test_unknown_backend_rejected(self, monkeypatch):
        monkeypatch.setenv("STORAGE_BACKEND", "postgres")
        with pytest.raises(ValidationError):
            AppSettings(_env_file=None)

    def test_api_prefix_from_env(self, monkeypatch):
        monkeypatch.setenv("API_PREFIX", "/v2")
        assert ApiSettings().prefix == "/v2"


class TestWiring:
    """create_app_components backend selection."""

    def test_memory_components(self):
        engine, directory, sheets_client = create_app_components(use_storage=False)

        assert isinstance(engine, EntryEngine)
        assert isinstance(directory, UserDirectory)
        assert sheets_client is None

    def test_unconfigured_sheets_fall_back_to_memory(self, monkeypatch):
        monkeypatch.setenv("STORAGE_BACKEND", "google_sheets")

        _, _, sheets_client = create_app_components()

        assert sheets_client is None

    def test_configured_sheets(self, monkeypatch, tmp_path):
        credentials = tmp_path / "credentials.json"
        credentials.write_text("{}")
        monkeypatch.setenv("STORAGE_BACKEND", "google_sheets")
        monkeypatch.setenv("GOOGLE_SHEETS_CREDENTIALS_PATH", str(credentials))
        monkeypatch.setenv("GOOGLE_SHEETS_SPREADSHEET_ID", "sheet-id")

        _, _, sheets_client = create_app_components()

        assert isinstance(sheets_client, GoogleSheetsClient)
