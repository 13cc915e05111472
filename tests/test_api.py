"""
Tests for the REST boundary.

Each test gets a fresh app over in-memory storage.
"""

from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from finances.api import create_app
from finances.entries import EntryEngine
from finances.orchestrator import create_app_components
from finances.services.storage import EntryStorageInterface, StorageError
from finances.users import UserDirectory


USER = {"name": "Test User", "email": "test.user@email.com", "password": "abc123"}


@pytest.fixture
def client() -> TestClient:
    entry_engine, user_directory, _ = create_app_components(use_storage=False)
    return TestClient(create_app(entry_engine, user_directory))


@pytest.fixture
def user_id(client: TestClient) -> int:
    return client.post("/api/users/register", json=USER).json()["id"]


def entry_payload(user_id: int, **overrides) -> dict:
    payload = {
        "description": "Rent",
        "month": 3,
        "year": 2021,
        "user": user_id,
        "value": "1200.00",
        "type": "EXPENSE",
    }
    payload.update(overrides)
    return payload


class TestUserRoutes:
    """Registration, authentication and balance."""

    def test_register(self, client: TestClient) -> None:
        response = client.post("/api/users/register", json=USER)

        assert response.status_code == 201
        body = response.json()
        assert body["id"] == 1
        assert body["email"] == USER["email"]
        assert body["registryDate"] == date.today().isoformat()
        assert "password" not in body

    def test_register_duplicate_email(self, client: TestClient, user_id: int) -> None:
        response = client.post("/api/users/register", json=USER)

        assert response.status_code == 400
        assert response.text == "A user already exists with the given email."

    def test_authenticate(self, client: TestClient, user_id: int) -> None:
        response = client.post(
            "/api/users/authenticate",
            json={"email": USER["email"], "password": USER["password"]},
        )

        assert response.status_code == 200
        assert response.json()["id"] == user_id
        assert "password" not in response.json()

    def test_authenticate_wrong_password(self, client: TestClient, user_id: int) -> None:
        response = client.post(
            "/api/users/authenticate",
            json={"email": USER["email"], "password": "wrong"},
        )

        assert response.status_code == 400
        assert response.text == "Invalid password."

    def test_authenticate_unknown_user(self, client: TestClient) -> None:
        response = client.post(
            "/api/users/authenticate",
            json={"email": "nobody@email.com", "password": "x"},
        )

        assert response.status_code == 400
        assert response.text == "User not found."

    def test_balance_of_new_user_is_zero(self, client: TestClient, user_id: int) -> None:
        response = client.get(f"/api/users/{user_id}/balance")

        assert response.status_code == 200
        assert Decimal(str(response.json())) == Decimal("0")

    def test_balance_unknown_user(self, client: TestClient) -> None:
        assert client.get("/api/users/99/balance").status_code == 404


class TestEntryRoutes:
    """Entry CRUD, status changes and reads."""

    def test_create_entry(self, client: TestClient, user_id: int) -> None:
        response = client.post("/api/entries", json=entry_payload(user_id, status="EFFECTED"))

        assert response.status_code == 201
        body = response.json()
        assert body["id"] == 1
        assert body["status"] == "PENDING"
        assert body["user"] == user_id
        assert body["registryDate"] == date.today().isoformat()
        assert Decimal(str(body["value"])) == Decimal("1200.00")

    def test_create_defaults_type_to_expense(self, client: TestClient, user_id: int) -> None:
        payload = entry_payload(user_id)
        del payload["type"]

        response = client.post("/api/entries", json=payload)

        assert response.status_code == 201
        assert response.json()["type"] == "EXPENSE"

    def test_create_accepts_registry_date(self, client: TestClient, user_id: int) -> None:
        response = client.post(
            "/api/entries", json=entry_payload(user_id, registryDate="2021-03-01")
        )
        assert response.json()["registryDate"] == "2021-03-01"

    def test_create_invalid_entry(self, client: TestClient, user_id: int) -> None:
        response = client.post("/api/entries", json=entry_payload(user_id, month=13))

        assert response.status_code == 400
        assert response.text == "Invalid Month value."

    def test_create_unknown_user(self, client: TestClient) -> None:
        response = client.post("/api/entries", json=entry_payload(99))

        assert response.status_code == 400
        assert response.text == "User does not exist."

    def test_create_invalid_type(self, client: TestClient, user_id: int) -> None:
        response = client.post("/api/entries", json=entry_payload(user_id, type="TRANSFER"))

        assert response.status_code == 400
        assert response.text == "Invalid type."

    def test_update_entry(self, client: TestClient, user_id: int) -> None:
        entry_id = client.post("/api/entries", json=entry_payload(user_id)).json()["id"]

        response = client.put(
            f"/api/entries/{entry_id}",
            json=entry_payload(user_id, description="Rent UPDATED"),
        )

        assert response.status_code == 200
        assert response.json()["id"] == entry_id
        assert response.json()["description"] == "Rent UPDATED"

    def test_update_unknown_entry(self, client: TestClient, user_id: int) -> None:
        response = client.put("/api/entries/99", json=entry_payload(user_id))

        assert response.status_code == 400
        assert response.text == "Entry not found."

    def test_update_invalid_entry_reports_reason(self, client: TestClient, user_id: int) -> None:
        entry_id = client.post("/api/entries", json=entry_payload(user_id)).json()["id"]

        response = client.put(f"/api/entries/{entry_id}", json=entry_payload(user_id, value="0"))

        assert response.status_code == 400
        assert response.text == "Must insert value above 0."

    def test_delete_entry(self, client: TestClient, user_id: int) -> None:
        entry_id = client.post("/api/entries", json=entry_payload(user_id)).json()["id"]

        assert client.delete(f"/api/entries/{entry_id}").status_code == 204

        response = client.delete(f"/api/entries/{entry_id}")
        assert response.status_code == 400
        assert response.text == "Entry not found."

    def test_read_entries(self, client: TestClient, user_id: int) -> None:
        client.post("/api/entries", json=entry_payload(user_id, description="Test entry UPDATED", year=2020))
        client.post("/api/entries", json=entry_payload(user_id, description="Test entry", year=2019))

        response = client.get(
            "/api/entries", params={"user": user_id, "description": "test", "year": 2020}
        )

        assert response.status_code == 200
        assert [e["description"] for e in response.json()] == ["Test entry UPDATED"]

    def test_read_entries_by_type_and_status(self, client: TestClient, user_id: int) -> None:
        client.post("/api/entries", json=entry_payload(user_id, type="REVENUE"))
        client.post("/api/entries", json=entry_payload(user_id))

        response = client.get(
            "/api/entries", params={"user": user_id, "type": "REVENUE", "status": "PENDING"}
        )

        assert [e["type"] for e in response.json()] == ["REVENUE"]

    def test_read_requires_user(self, client: TestClient) -> None:
        assert client.get("/api/entries").status_code == 422

    def test_read_unknown_user(self, client: TestClient) -> None:
        response = client.get("/api/entries", params={"user": 99})

        assert response.status_code == 400
        assert response.text == "User does not exist."

    def test_read_invalid_status(self, client: TestClient, user_id: int) -> None:
        response = client.get("/api/entries", params={"user": user_id, "status": "DONE"})

        assert response.status_code == 400
        assert response.text == "Invalid status."


class TestUpdateStatusRoute:
    """PUT /entries/{id}/update-status."""

    def test_effected_entry_changes_balance(self, client: TestClient, user_id: int) -> None:
        entry_id = client.post("/api/entries", json=entry_payload(user_id)).json()["id"]

        response = client.put(f"/api/entries/{entry_id}/update-status", json={"status": "EFFECTED"})

        assert response.status_code == 200
        assert response.json()["status"] == "EFFECTED"
        balance = client.get(f"/api/users/{user_id}/balance").json()
        assert Decimal(str(balance)) == Decimal("-1200.00")

    @pytest.mark.parametrize("body", [{}, {"status": None}, {"status": "DONE"}])
    def test_invalid_status(self, client: TestClient, user_id: int, body: dict) -> None:
        entry_id = client.post("/api/entries", json=entry_payload(user_id)).json()["id"]

        response = client.put(f"/api/entries/{entry_id}/update-status", json=body)

        assert response.status_code == 400
        assert response.text == "Invalid status."

    def test_unknown_entry(self, client: TestClient) -> None:
        response = client.put("/api/entries/99/update-status", json={"status": "EFFECTED"})

        assert response.status_code == 400
        assert response.text == "Entry not found."


class TestStorageFailure:
    """Backend outages surface as 503."""

    def test_storage_error_returns_503(self) -> None:
        storage = AsyncMock(spec=EntryStorageInterface)
        storage.find_by_id.side_effect = StorageError("sheet down")
        directory = UserDirectory(AsyncMock())
        client = TestClient(create_app(EntryEngine(storage), directory))

        response = client.delete("/api/entries/1")

        assert response.status_code == 503
        assert response.text == "Storage unavailable."
