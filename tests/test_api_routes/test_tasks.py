"""
Tests for the /tasks routes.
Each test gets an app wired to a fresh snapshot file and import source.
"""
import os
import sys
from datetime import datetime
from unittest.mock import patch

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from fastapi.testclient import TestClient

from tasklite.app import create_app
from tasklite.dependencies.services import ServiceContainer
from tasklite.exceptions.errors import PersistenceError

REQUIRED_MESSAGE = {"message": "title or description are required"}


@pytest.fixture
def import_path(tmp_path):
    path = tmp_path / "tasks.csv"
    path.write_text("title,description\nTask 01,First import\nTask 02,Second import\n", encoding="utf-8")
    return path


@pytest.fixture
def services(tmp_path, import_path):
    return ServiceContainer(db_path=str(tmp_path / "db.json"), import_path=str(import_path))


@pytest.fixture
def app(services):
    return create_app(services, configure_logging=False)


@pytest.fixture
def client(app):
    return TestClient(app)


def _create(client, title="Write tests", description="Cover every route"):
    response = client.post("/tasks", json={"title": title, "description": description})
    assert response.status_code == 201
    return response


def _only_task(client):
    tasks = client.get("/tasks").json()
    assert len(tasks) == 1
    return tasks[0]


class TestCreateTask:
    """POST /tasks"""

    def test_create_task_success(self, client):
        response = _create(client)

        assert response.content == b""
        task = _only_task(client)
        assert task["title"] == "Write tests"
        assert task["description"] == "Cover every route"
        assert task["completed_at"] is None
        assert task["created_at"] == task["updated_at"]
        assert task["id"]

    @pytest.mark.parametrize("body", [
        {"title": "only title"},
        {"description": "only description"},
        {"title": "", "description": "d"},
        {},
    ])
    def test_missing_fields(self, client, body):
        response = client.post("/tasks", json=body)

        assert response.status_code == 400
        assert response.json() == REQUIRED_MESSAGE
        assert client.get("/tasks").json() == []

    def test_missing_body(self, client):
        response = client.post("/tasks")
        assert response.status_code == 400
        assert response.json() == REQUIRED_MESSAGE

    def test_non_object_body(self, client):
        response = client.post("/tasks", json=["title", "description"])
        assert response.status_code == 400

    def test_wrong_field_type(self, client):
        response = client.post("/tasks", json={"title": ["a"], "description": "d"})
        assert response.status_code == 422

    def test_persistence_failure_returns_500(self, client, services):
        with patch.object(services.storage, "_persist", side_effect=PersistenceError("disk full")):
            response = client.post("/tasks", json={"title": "t", "description": "d"})

        assert response.status_code == 500
        assert response.json()["error"] == "Storage error"
        assert client.get("/tasks").json() == []


class TestListTasks:
    """GET /tasks"""

    def test_list_empty(self, client):
        response = client.get("/tasks")
        assert response.status_code == 200
        assert response.json() == []

    def test_search(self, client):
        _create(client, "groceries", "weekly shop")
        _create(client, "errand", "buy groceries")
        _create(client, "other", "nothing")

        response = client.get("/tasks", params={"search": "groceries"})

        assert response.status_code == 200
        assert [t["title"] for t in response.json()] == ["groceries", "errand"]

    def test_empty_search_lists_everything(self, client):
        _create(client, "a", "b")
        _create(client, "c", "d")
        assert len(client.get("/tasks?search=").json()) == 2


class TestGetTask:
    """GET /tasks/{id}"""

    def test_get_task(self, client):
        _create(client)
        task = _only_task(client)

        response = client.get(f"/tasks/{task['id']}")

        assert response.status_code == 200
        assert response.json() == task

    def test_get_unknown(self, client):
        response = client.get("/tasks/unknown")
        assert response.status_code == 404
        assert response.content == b""


class TestUpdateTask:
    """PUT /tasks/{id}"""

    def test_update_title_only(self, client):
        _create(client, "old", "keep me")
        task = _only_task(client)

        response = client.put(f"/tasks/{task['id']}", json={"title": "new"})

        assert response.status_code == 204
        assert response.content == b""
        updated = _only_task(client)
        assert updated["title"] == "new"
        assert updated["description"] == "keep me"
        assert datetime.fromisoformat(updated["updated_at"]) >= datetime.fromisoformat(task["updated_at"])

    def test_update_both(self, client):
        _create(client)
        task = _only_task(client)

        client.put(f"/tasks/{task['id']}", json={"title": "t2", "description": "d2"})

        updated = _only_task(client)
        assert (updated["title"], updated["description"]) == ("t2", "d2")

    def test_update_without_fields(self, client):
        _create(client)
        task = _only_task(client)

        response = client.put(f"/tasks/{task['id']}", json={})

        assert response.status_code == 400
        assert response.json() == REQUIRED_MESSAGE

    def test_update_unknown(self, client):
        _create(client)
        before = client.get("/tasks").json()

        response = client.put("/tasks/unknown", json={"title": "x", "description": "y"})

        assert response.status_code == 404
        assert response.content == b""
        assert client.get("/tasks").json() == before


class TestDeleteTask:
    """DELETE /tasks/{id}"""

    def test_delete(self, client):
        _create(client)
        task = _only_task(client)

        response = client.delete(f"/tasks/{task['id']}")

        assert response.status_code == 204
        assert client.get("/tasks").json() == []

    def test_delete_unknown(self, client):
        response = client.delete("/tasks/unknown")
        assert response.status_code == 404
        assert response.content == b""


class TestToggleComplete:
    """PATCH /tasks/{id}/complete"""

    def test_toggle_twice(self, client):
        _create(client)
        task = _only_task(client)

        assert client.patch(f"/tasks/{task['id']}/complete").status_code == 204
        completed = _only_task(client)
        assert completed["completed_at"] is not None
        assert datetime.fromisoformat(completed["completed_at"]) >= datetime.fromisoformat(completed["created_at"])

        assert client.patch(f"/tasks/{task['id']}/complete").status_code == 204
        assert _only_task(client)["completed_at"] is None

    def test_toggle_unknown(self, client):
        response = client.patch("/tasks/unknown/complete")
        assert response.status_code == 404


class TestImportTasks:
    """POST /tasks/import"""

    def test_import(self, client):
        response = client.post("/tasks/import")

        assert response.status_code == 201
        assert response.content == b""
        tasks = client.get("/tasks").json()
        assert [t["title"] for t in tasks] == ["Task 01", "Task 02"]
        assert len({t["id"] for t in tasks}) == 2

    def test_import_can_run_twice(self, client):
        client.post("/tasks/import")
        client.post("/tasks/import")
        assert len(client.get("/tasks").json()) == 4

    def test_import_invalid_row(self, client, import_path):
        import_path.write_text("title,description\nA,a\n,missing title\nC,c\n", encoding="utf-8")

        response = client.post("/tasks/import")

        assert response.status_code == 400
        assert response.json() == REQUIRED_MESSAGE
        assert [t["title"] for t in client.get("/tasks").json()] == ["A"]

    def test_import_undecodable_file(self, client, import_path):
        import_path.write_bytes(b"title,description\nA,a\nB,\xff\xfe bad\n")

        response = client.post("/tasks/import")

        assert response.status_code == 400
        assert "not valid utf-8 text" in response.json()["message"]

    def test_import_missing_source(self, client, import_path):
        import_path.unlink()

        response = client.post("/tasks/import")

        assert response.status_code == 500
        assert response.json()["error"] == "Import source unavailable"


class TestEndToEnd:
    """Create, search, delete, search again."""

    def test_lifecycle(self, client):
        assert client.post("/tasks", json={"title": "a", "description": "b"}).status_code == 201

        found = client.get("/tasks", params={"search": "a"}).json()
        assert len(found) == 1

        assert client.delete(f"/tasks/{found[0]['id']}").status_code == 204
        assert client.get("/tasks", params={"search": "a"}).json() == []

    def test_state_survives_restart(self, client, tmp_path, import_path):
        _create(client, "persisted", "across restarts")

        restarted = TestClient(create_app(
            ServiceContainer(db_path=str(tmp_path / "db.json"), import_path=str(import_path)),
            configure_logging=False,
        ))

        assert [t["title"] for t in restarted.get("/tasks").json()] == ["persisted"]

    def test_incomplete_snapshot_records_start_fresh(self, tmp_path, import_path):
        db_path = tmp_path / "db.json"
        db_path.write_text('{"tasks": [{"id": "1", "title": "t"}]}', encoding="utf-8")

        client = TestClient(create_app(
            ServiceContainer(db_path=str(db_path), import_path=str(import_path)),
            configure_logging=False,
        ))

        assert client.get("/tasks").status_code == 200
        assert client.get("/tasks").json() == []
        assert client.patch("/tasks/1/complete").status_code == 404

    def test_request_id_header(self, client):
        response = client.get("/tasks")
        assert len(response.headers["X-Request-ID"]) == 8
