"""Tests for the todo API endpoints."""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient


def _create(client: TestClient, headers: dict, **fields) -> dict:
    response = client.post("/api/v1/todos", json=fields, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestCreateTodo:
    """Tests for POST /todos."""

    def test_create(self, client: TestClient, test_user: dict):
        data = _create(
            client,
            test_user["headers"],
            title="Buy groceries",
            description="Buy milk, eggs, and bread",
            priority="high",
            due_date="2026-11-01T10:00:00Z",
        )
        assert data["title"] == "Buy groceries"
        assert data["description"] == "Buy milk, eggs, and bread"
        assert data["priority"] == "high"
        assert data["status"] == "pending"
        assert data["user_id"] == test_user["user_id"]
        assert data["due_date"].startswith("2026-11-01T10:00:00")
        assert data["id"]

    def test_due_date_with_offset(self, client: TestClient, test_user: dict):
        """An offset due date is returned as the same instant in UTC."""
        created = _create(client, test_user["headers"], title="Offset", due_date="2030-01-01T10:00:00+05:00")

        response = client.get(f"/api/v1/todos/{created['id']}", headers=test_user["headers"])
        due = datetime.fromisoformat(response.json()["due_date"].replace("Z", "+00:00"))
        assert due == datetime(2030, 1, 1, 5, 0, 0, tzinfo=timezone.utc)
        assert due.utcoffset() == timedelta(0)

        created_at = datetime.fromisoformat(response.json()["created_at"].replace("Z", "+00:00"))
        assert created_at.utcoffset() == timedelta(0)

    def test_defaults(self, client: TestClient, test_user: dict):
        data = _create(client, test_user["headers"], title="Minimal")
        assert data["priority"] == "medium"
        assert data["description"] == ""
        assert data["due_date"] is None

    def test_status_in_body_is_ignored(self, client: TestClient, test_user: dict):
        """New todos are always pending."""
        data = _create(client, test_user["headers"], title="Sneaky", status="completed")
        assert data["status"] == "pending"

    @pytest.mark.parametrize(
        "payload,field",
        [
            ({"title": ""}, "title"),
            ({"title": "x" * 201}, "title"),
            ({"title": "ok", "description": "d" * 1001}, "description"),
            ({"title": "ok", "priority": "urgent"}, "priority"),
            ({"description": "no title"}, "title"),
        ],
    )
    def test_validation(self, client: TestClient, test_user: dict, payload: dict, field: str):
        response = client.post("/api/v1/todos", json=payload, headers=test_user["headers"])
        assert response.status_code == 400
        assert field in [error["field"] for error in response.json()["errors"]]

    def test_requires_auth(self, client: TestClient):
        response = client.post("/api/v1/todos", json={"title": "No auth"})
        assert response.status_code == 401


class TestListTodos:
    """Tests for GET /todos."""

    def test_list_empty(self, client: TestClient, test_user: dict):
        response = client.get("/api/v1/todos", headers=test_user["headers"])
        assert response.status_code == 200
        assert response.json() == {"data": [], "total": 0, "page": 1, "limit": 10, "total_pages": 0}

    def test_pagination(self, client: TestClient, test_user: dict):
        for i in range(25):
            _create(client, test_user["headers"], title=f"Task {i}")

        first = client.get("/api/v1/todos?page=1&limit=10", headers=test_user["headers"]).json()
        assert len(first["data"]) == 10
        assert first["total"] == 25
        assert first["total_pages"] == 3
        assert first["data"][0]["title"] == "Task 24"

        beyond = client.get("/api/v1/todos?page=4&limit=10", headers=test_user["headers"]).json()
        assert beyond["data"] == []
        assert beyond["total"] == 25

    def test_out_of_range_paging_is_normalized(self, client: TestClient, test_user: dict):
        data = client.get("/api/v1/todos?page=0&limit=1000", headers=test_user["headers"]).json()
        assert data["page"] == 1
        assert data["limit"] == 10

    def test_filters_and_search(self, client: TestClient, test_user: dict):
        milk = _create(client, test_user["headers"], title="Buy milk", priority="high")
        _create(client, test_user["headers"], title="Buy bread", priority="low")
        _create(client, test_user["headers"], title="Call mom", description="about the MILK", priority="low")

        data = client.get("/api/v1/todos?search=milk&priority=high", headers=test_user["headers"]).json()
        assert [todo["id"] for todo in data["data"]] == [milk["id"]]

        data = client.get("/api/v1/todos?search=milk", headers=test_user["headers"]).json()
        assert data["total"] == 2

        data = client.get("/api/v1/todos?status=completed", headers=test_user["headers"]).json()
        assert data["total"] == 0

    def test_invalid_filter(self, client: TestClient, test_user: dict):
        response = client.get("/api/v1/todos?status=archived", headers=test_user["headers"])
        assert response.status_code == 400

    def test_search_too_long(self, client: TestClient, test_user: dict):
        response = client.get(f"/api/v1/todos?search={'s' * 201}", headers=test_user["headers"])
        assert response.status_code == 400

    def test_list_only_own(self, client: TestClient, test_user: dict, other_user: dict):
        _create(client, other_user["headers"], title="Not yours")
        data = client.get("/api/v1/todos", headers=test_user["headers"]).json()
        assert data["total"] == 0


class TestSingleTodo:
    """Tests for GET/PUT/PATCH/DELETE on /todos/{id}."""

    def test_get(self, client: TestClient, test_user: dict):
        created = _create(client, test_user["headers"], title="Read me", priority="low")
        response = client.get(f"/api/v1/todos/{created['id']}", headers=test_user["headers"])
        assert response.status_code == 200
        assert response.json() == created

    def test_get_missing(self, client: TestClient, test_user: dict):
        response = client.get("/api/v1/todos/does-not-exist", headers=test_user["headers"])
        assert response.status_code == 404
        assert response.json()["detail"] == "Todo not found"

    def test_partial_update(self, client: TestClient, test_user: dict):
        created = _create(
            client, test_user["headers"], title="Original", description="keep", due_date="2026-11-01T10:00:00Z"
        )
        response = client.put(
            f"/api/v1/todos/{created['id']}",
            json={"priority": "high"},
            headers=test_user["headers"],
        )
        assert response.status_code == 200
        data = response.json()
        assert data["priority"] == "high"
        assert data["title"] == "Original"
        assert data["description"] == "keep"
        assert data["due_date"] == created["due_date"]

    def test_update_clear_due_date(self, client: TestClient, test_user: dict):
        created = _create(client, test_user["headers"], title="Dated", due_date="2026-11-01T10:00:00Z")
        response = client.put(
            f"/api/v1/todos/{created['id']}", json={"due_date": None}, headers=test_user["headers"]
        )
        assert response.status_code == 200
        assert response.json()["due_date"] is None

    def test_update_status(self, client: TestClient, test_user: dict):
        created = _create(client, test_user["headers"], title="Finish")
        response = client.put(
            f"/api/v1/todos/{created['id']}", json={"status": "completed"}, headers=test_user["headers"]
        )
        assert response.json()["status"] == "completed"

    @pytest.mark.parametrize("payload", [{"title": None}, {"title": ""}, {"priority": "urgent"}, {"status": None}])
    def test_update_validation(self, client: TestClient, test_user: dict, payload: dict):
        created = _create(client, test_user["headers"], title="Stay")
        response = client.put(f"/api/v1/todos/{created['id']}", json=payload, headers=test_user["headers"])
        assert response.status_code == 400

    def test_toggle(self, client: TestClient, test_user: dict):
        created = _create(client, test_user["headers"], title="Flip")
        first = client.patch(f"/api/v1/todos/{created['id']}/toggle", headers=test_user["headers"])
        assert first.status_code == 200
        assert first.json()["status"] == "completed"
        second = client.patch(f"/api/v1/todos/{created['id']}/toggle", headers=test_user["headers"])
        assert second.json()["status"] == "pending"

    def test_delete(self, client: TestClient, test_user: dict):
        created = _create(client, test_user["headers"], title="Gone soon")
        response = client.delete(f"/api/v1/todos/{created['id']}", headers=test_user["headers"])
        assert response.status_code == 204
        assert response.content == b""

        assert client.get(f"/api/v1/todos/{created['id']}", headers=test_user["headers"]).status_code == 404
        assert client.delete(f"/api/v1/todos/{created['id']}", headers=test_user["headers"]).status_code == 404


class TestOwnershipOverHttp:
    """Another user's todos look exactly like missing ones."""

    def test_foreign_todo_is_not_found(self, client: TestClient, test_user: dict, other_user: dict):
        created = _create(client, test_user["headers"], title="Private")
        todo_url = f"/api/v1/todos/{created['id']}"
        headers = other_user["headers"]

        responses = [
            client.get(todo_url, headers=headers),
            client.put(todo_url, json={"title": "mine now"}, headers=headers),
            client.patch(f"{todo_url}/toggle", headers=headers),
            client.delete(todo_url, headers=headers),
        ]
        missing = client.get("/api/v1/todos/does-not-exist", headers=headers)

        for response in responses:
            assert response.status_code == 404
            assert response.json() == missing.json()

        unchanged = client.get(todo_url, headers=test_user["headers"]).json()
        assert unchanged["title"] == "Private"
        assert unchanged["status"] == "pending"


class TestScenario:
    """Register, log in, and walk a todo through its lifecycle."""

    def test_full_lifecycle(self, client: TestClient):
        register = client.post(
            "/api/v1/auth/register",
            json={"name": "Alice", "email": "alice@example.com", "password": "secret123"},
        )
        assert register.status_code == 201

        login = client.post("/api/v1/auth/login", json={"email": "alice@example.com", "password": "secret123"})
        assert login.status_code == 200
        headers = {"Authorization": f"Bearer {login.json()['token']}"}

        todo = _create(client, headers, title="Buy milk", priority="high")

        listing = client.get("/api/v1/todos", headers=headers).json()
        listed = [item for item in listing["data"] if item["id"] == todo["id"]]
        assert len(listed) == 1
        assert listed[0]["status"] == "pending"

        toggled = client.patch(f"/api/v1/todos/{todo['id']}/toggle", headers=headers)
        assert toggled.status_code == 200

        fetched = client.get(f"/api/v1/todos/{todo['id']}", headers=headers)
        assert fetched.json()["status"] == "completed"

        assert client.delete(f"/api/v1/todos/{todo['id']}", headers=headers).status_code == 204
        assert client.get(f"/api/v1/todos/{todo['id']}", headers=headers).status_code == 404
