"""Tests for auth, task, stats, history and import/export routes."""

import io
import json
import tempfile
from pathlib import Path

import pytest

from tasktracker.app import create_app
from tasktracker.services.persistence import InMemoryGateway


@pytest.fixture
def temp_dir():
    """Create a temporary directory for config files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def app(temp_dir, clock):
    """Create a Flask app over in-memory storage and a fixed clock."""
    app = create_app(str(temp_dir / "config.yaml"), gateway=InMemoryGateway(), clock=clock)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    """Create a test client."""
    return app.test_client()


@pytest.fixture
def logged_in(client):
    """A client with a registered, logged-in user."""
    response = client.post(
        "/api/auth/register",
        json={"username": "alice", "password": "secret", "email": "alice@example.com"},
    )
    assert response.status_code == 201
    return client


class TestAuthRoutes:
    """Tests for /api/auth/*."""

    def test_register_returns_user_without_password(self, client):
        response = client.post("/api/auth/register", json={"username": "bob", "password": "pw"})

        assert response.status_code == 201
        data = response.get_json()
        assert data["success"] is True
        assert data["user"]["username"] == "bob"
        assert "password" not in data["user"]

    def test_duplicate_register(self, logged_in):
        response = logged_in.post(
            "/api/auth/register", json={"username": "alice", "password": "x"}
        )

        assert response.status_code == 400
        assert response.get_json()["message"] == "Username already exists"

    def test_login_logout_cycle(self, logged_in):
        assert logged_in.post("/api/auth/logout").status_code == 200
        assert logged_in.get("/api/auth/me").get_json()["user"] is None

        bad = logged_in.post("/api/auth/login", json={"username": "alice", "password": "nope"})
        assert bad.status_code == 401
        assert bad.get_json()["message"] == "Invalid credentials"

        good = logged_in.post("/api/auth/login", json={"username": "alice", "password": "secret"})
        assert good.status_code == 200
        assert logged_in.get("/api/auth/me").get_json()["user"]["username"] == "alice"


class TestTaskRoutes:
    """Tests for /api/tasks."""

    def test_requires_login(self, client):
        assert client.get("/api/tasks").status_code == 401
        assert client.post("/api/tasks", json={"text": "x"}).status_code == 401

    def test_add_and_list(self, logged_in):
        response = logged_in.post(
            "/api/tasks",
            json={"text": "Buy milk", "category": "Errands", "priority": "high", "dueDate": "2024-05-03"},
        )

        assert response.status_code == 201
        task = response.get_json()
        assert task["text"] == "Buy milk"
        assert task["dueDate"] == "2024-05-03"
        assert task["completed"] is False

        listing = logged_in.get("/api/tasks").get_json()
        assert listing["count"] == 1
        assert listing["tasks"][0]["id"] == task["id"]

    def test_blank_text_is_400(self, logged_in):
        response = logged_in.post("/api/tasks", json={"text": "   "})

        assert response.status_code == 400
        assert logged_in.get("/api/history").get_json()["total"] == 0

    def test_invalid_priority_is_400(self, logged_in):
        response = logged_in.post("/api/tasks", json={"text": "x", "priority": "urgent"})
        assert response.status_code == 400

    def test_filter_search_sort(self, logged_in):
        logged_in.post("/api/tasks", json={"text": "Write report", "category": "Work"})
        logged_in.post("/api/tasks", json={"text": "Buy milk", "priority": "high"})

        data = logged_in.get("/api/tasks?search=work").get_json()
        assert [t["text"] for t in data["tasks"]] == ["Write report"]

        data = logged_in.get("/api/tasks?sort=priority").get_json()
        assert [t["text"] for t in data["tasks"]] == ["Buy milk", "Write report"]

    def test_unknown_filter_is_400(self, logged_in):
        assert logged_in.get("/api/tasks?filter=nope").status_code == 400
        assert logged_in.get("/api/tasks?sort=nope").status_code == 400

    def test_toggle_star_update_delete(self, logged_in):
        task_id = logged_in.post("/api/tasks", json={"text": "x"}).get_json()["id"]

        assert logged_in.post(f"/api/tasks/{task_id}/toggle").get_json()["completed"] is True
        assert logged_in.post(f"/api/tasks/{task_id}/star").get_json()["starred"] is True

        patched = logged_in.patch(f"/api/tasks/{task_id}", json={"notes": "n", "priority": "low"})
        assert patched.status_code == 200
        assert patched.get_json()["notes"] == "n"
        assert patched.get_json()["priority"] == "low"

        assert logged_in.delete(f"/api/tasks/{task_id}").get_json() == {"deleted": True}
        assert logged_in.delete(f"/api/tasks/{task_id}").get_json() == {"deleted": False}

    def test_patch_rejects_blank_text_and_unknown_fields(self, logged_in):
        task_id = logged_in.post("/api/tasks", json={"text": "x"}).get_json()["id"]

        assert logged_in.patch(f"/api/tasks/{task_id}", json={"text": ""}).status_code == 400
        assert logged_in.patch(f"/api/tasks/{task_id}", json={"id": 5}).status_code == 400

    @pytest.mark.parametrize("field", ["priority", "completed"])
    def test_patch_rejects_null_for_required_field(self, logged_in, field):
        created = logged_in.post("/api/tasks", json={"text": "keep me", "priority": "high"}).get_json()
        history_before = logged_in.get("/api/history").get_json()["total"]

        response = logged_in.patch(f"/api/tasks/{created['id']}", json={field: None})

        assert response.status_code == 400
        assert logged_in.get("/api/tasks").get_json()["tasks"] == [created]
        assert logged_in.get("/api/history").get_json()["total"] == history_before
        assert logged_in.get("/api/tasks?sort=priority").status_code == 200

    def test_patch_accepts_timestamp_due_date(self, logged_in):
        task_id = logged_in.post("/api/tasks", json={"text": "x"}).get_json()["id"]

        response = logged_in.patch(f"/api/tasks/{task_id}", json={"dueDate": "2024-05-03T10:00:00.000Z"})

        assert response.status_code == 200
        assert response.get_json()["dueDate"] == "2024-05-03"

    def test_unknown_id_is_404(self, logged_in):
        assert logged_in.post("/api/tasks/999/toggle").status_code == 404
        assert logged_in.post("/api/tasks/999/star").status_code == 404
        assert logged_in.patch("/api/tasks/999", json={"text": "y"}).status_code == 404

    def test_clear_completed(self, logged_in):
        first = logged_in.post("/api/tasks", json={"text": "a"}).get_json()["id"]
        logged_in.post("/api/tasks", json={"text": "b"})
        logged_in.post(f"/api/tasks/{first}/toggle")

        assert logged_in.post("/api/tasks/clear-completed").get_json() == {"removed": 1}
        assert logged_in.get("/api/tasks").get_json()["count"] == 1


class TestStatsAndHistory:
    """Tests for /api/stats and /api/history."""

    def test_stats(self, logged_in):
        first = logged_in.post("/api/tasks", json={"text": "a", "priority": "high"}).get_json()["id"]
        logged_in.post("/api/tasks", json={"text": "b"})
        logged_in.post(f"/api/tasks/{first}/toggle")

        stats = logged_in.get("/api/stats").get_json()

        assert stats["total"] == 2
        assert stats["completed"] == 1
        assert stats["active"] == 1
        assert stats["progress"] == 50
        assert stats["high_priority_active"] == 0

    def test_history_newest_first_with_limit(self, logged_in):
        task_id = logged_in.post("/api/tasks", json={"text": "a"}).get_json()["id"]
        logged_in.post(f"/api/tasks/{task_id}/toggle")
        logged_in.post(f"/api/tasks/{task_id}/star")

        data = logged_in.get("/api/history?limit=1").get_json()

        assert data["total"] == 2
        assert [e["action"] for e in data["entries"]] == ["TOGGLE"]
        assert data["entries"][0]["todoId"] == task_id


class TestImportExport:
    """Tests for /api/export and /api/import."""

    def test_export_download(self, logged_in):
        logged_in.post("/api/tasks", json={"text": "a"})

        response = logged_in.get("/api/export")

        assert response.status_code == 200
        assert "todos_alice_2024-05-01.json" in response.headers["Content-Disposition"]
        assert json.loads(response.data)["tasks"][0]["text"] == "a"

    def test_import_round_trip_via_upload(self, logged_in):
        logged_in.post("/api/tasks", json={"text": "a"})
        exported = logged_in.get("/api/export").data
        logged_in.post("/api/tasks", json={"text": "b"})

        response = logged_in.post(
            "/api/import",
            data={"file": (io.BytesIO(exported), "backup.json")},
            content_type="multipart/form-data",
        )

        assert response.status_code == 200
        assert response.get_json() == {"success": True, "tasks": 1, "history": 1}
        assert [t["text"] for t in logged_in.get("/api/tasks").get_json()["tasks"]] == ["a"]

    def test_malformed_import_is_400_and_keeps_tasks(self, logged_in):
        logged_in.post("/api/tasks", json={"text": "keep"})

        response = logged_in.post("/api/import", data="not json at all", content_type="text/plain")

        assert response.status_code == 400
        assert response.get_json()["error"] == "Invalid file format"
        assert logged_in.get("/api/tasks").get_json()["count"] == 1
