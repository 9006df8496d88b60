# tests/test_api.py

from __future__ import annotations

from datetime import date

import pytest
from fastapi.testclient import TestClient

from build_tracker.api import deps
from build_tracker.main import app
from build_tracker.models.task import Task, TaskStatus
from build_tracker.models.team import TeamMemberCreate
from build_tracker.services.repository import TaskRepository

from .fakes import FakeSheetStore

API = "/api/v1"


@pytest.fixture()
def client(repository, directory, notifier, sheet_client):
    """TestClient wired to the fake sheet and an in-memory directory."""
    app.dependency_overrides[deps.get_repository] = lambda: repository
    app.dependency_overrides[deps.get_directory] = lambda: directory
    app.dependency_overrides[deps.get_notifier] = lambda: notifier
    app.dependency_overrides[deps.get_sheet_client] = lambda: sheet_client
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client: TestClient) -> None:
    assert client.get(f"{API}/health").json() == {"status": "ok"}


def test_sheet_diagnostics_reports_failure(client: TestClient, store: FakeSheetStore) -> None:
    store.fail_status = 401
    body = client.get(f"{API}/health/sheet").json()
    assert body["status"] == "error"
    assert body["error_type"] == "StoreError"


def test_create_and_list_tasks(client: TestClient) -> None:
    response = client.post(f"{API}/tasks", json={
        "project_name": "ACM-301",
        "sponsor": "Acme Pharma",
        "start_date": "2024-01-01",
        "end_date": "2024-01-10",
        "scoped_hours": 40,
    })
    assert response.status_code == 200
    created = response.json()
    assert created["status"] == "Pending Allocation"
    assert created["id"].startswith("TASK-")

    listed = client.get(f"{API}/tasks").json()
    assert [t["id"] for t in listed] == [created["id"]]
    assert client.get(f"{API}/tasks", params={"search": "nothing"}).json() == []


def test_create_rejects_negative_hours(client: TestClient) -> None:
    response = client.post(f"{API}/tasks", json={"scoped_hours": -1})
    assert response.status_code == 422


def test_update_merges_fields(client: TestClient, seed, sample_task: Task) -> None:
    seed(sample_task)

    response = client.patch(f"{API}/tasks/{sample_task.id}", json={"status": "In Validation"})

    assert response.status_code == 200
    task = client.get(f"{API}/tasks/{sample_task.id}").json()
    assert task["status"] == "In Validation"
    assert task["lead"] == sample_task.lead
    assert task["team"] == sample_task.team


def test_update_rejects_null_for_required_fields(
    client: TestClient, store: FakeSheetStore, seed, sample_task: Task,
) -> None:
    seed(sample_task)

    response = client.patch(f"{API}/tasks/{sample_task.id}", json={"sponsor": None, "scoped_hours": None, "team": None})

    assert response.status_code == 422
    assert {e["loc"][-1] for e in response.json()["detail"]} == {"sponsor", "scoped_hours", "team"}
    assert store.calls_with("PUT") == []


def test_update_clears_dates_and_status_with_null(
    client: TestClient, store: FakeSheetStore, seed, sample_task: Task,
) -> None:
    seed(sample_task)

    response = client.patch(f"{API}/tasks/{sample_task.id}", json={"end_date": None, "status": None, "team": []})

    assert response.status_code == 200
    body = response.json()
    assert (body["end_date"], body["status"], body["team"]) == (None, None, [])
    assert body["sponsor"] == sample_task.sponsor
    assert len(store.calls_with("PUT")) == 1


def test_unknown_task_is_404(client: TestClient, store: FakeSheetStore) -> None:
    assert client.get(f"{API}/tasks/TASK-NOPE").status_code == 404
    assert client.patch(f"{API}/tasks/TASK-NOPE", json={"sponsor": "x"}).status_code == 404
    assert client.post(f"{API}/tasks/TASK-NOPE/allocate", json={"lead": "Ada"}).status_code == 404
    assert store.calls_with("PUT") == []


def test_store_failure_is_502(client: TestClient, store: FakeSheetStore) -> None:
    store.fail_status = 500
    response = client.get(f"{API}/tasks")
    assert response.status_code == 502
    assert "Failed to fetch tasks" in response.json()["detail"]


def test_allocate_and_availability(client: TestClient, directory, seed, sample_task: Task) -> None:
    for name in ("Ada", "Linus", "Grace"):
        directory.add_member(TeamMemberCreate(name=name))
    busy = Task(id="TASK-BUSY", lead="Linus", status=TaskStatus.IN_PROGRESS,
                start_date=date(2024, 1, 5), end_date=date(2024, 1, 15))
    pending = sample_task.model_copy(update={
        "status": TaskStatus.PENDING_ALLOCATION, "lead": "", "secondary_lead": "", "team": [],
    })
    seed(pending, busy)

    free = client.get(f"{API}/tasks/{sample_task.id}/availability").json()
    assert {a["name"]: a["available"] for a in free} == {"Ada": True, "Grace": True, "Linus": False}

    response = client.post(f"{API}/tasks/{sample_task.id}/allocate", json={"lead": "Ada", "team": ["Grace"]})
    assert response.status_code == 200
    body = response.json()
    assert (body["status"], body["lead"], body["team"]) == ("Assigned", "Ada", ["Grace"])

    hours = client.get(f"{API}/reports/hours/{sample_task.id}").json()
    assert [(h["name"], h["hours"]) for h in hours] == [("Ada", 55), ("Grace", 50)]


def test_reports_summary(client: TestClient, seed, sample_task: Task) -> None:
    seed(sample_task)
    summary = client.get(f"{API}/reports/summary", params={"today": "2024-01-08"}).json()
    assert summary == {"total": 1, "pending": 0, "in_progress": 1, "overdue": 0, "due_this_week": 1}


def test_directory_endpoints(client: TestClient) -> None:
    created = client.post(f"{API}/team-members", json={"name": "Ada", "role": "Builder"}).json()
    assert client.get(f"{API}/team-members").json()[0]["name"] == "Ada"
    assert client.delete(f"{API}/team-members/{created['id']}").status_code == 200
    assert client.delete(f"{API}/team-members/{created['id']}").status_code == 404

    assert client.post(f"{API}/edc-systems", json={"name": "Rave"}).status_code == 200
    assert client.post(f"{API}/edc-systems", json={"name": "Rave"}).status_code == 409

    client.post(f"{API}/requestors", json={"name": "Rita"})
    client.post(f"{API}/requestors", json={"name": "Rita"})
    assert len(client.get(f"{API}/requestors/options").json()) == 1


def test_lookups_and_notifications(client: TestClient) -> None:
    lookups = client.get(f"{API}/lookups").json()
    assert lookups["statuses"][0] == "Pending Allocation"
    assert lookups["terminal_statuses"] == ["Completed", "Cancelled"]

    client.post(f"{API}/tasks", json={"project_name": "ACM-301"})
    messages = client.get(f"{API}/notifications").json()
    assert messages[-1]["message"] == "Task created successfully"

    client.delete(f"{API}/notifications")
    assert client.get(f"{API}/notifications").json() == []


def test_task_metrics_endpoints(client: TestClient, seed, sample_task: Task) -> None:
    seed(sample_task)

    empty = client.get(f"{API}/tasks/{sample_task.id}/metrics").json()
    assert [(m["name"], m["role"], m["units"]) for m in empty["members"]] == [
        ("Ada", "Lead", 0), ("Grace", "Lead", 0), ("Linus", "Team", 0), ("Guido", "Team", 0),
    ]

    response = client.put(f"{API}/tasks/{sample_task.id}/metrics", json={"members": [
        {"name": "Ada", "units": 100, "errors": 2},
        {"name": "Linus", "units": 8, "errors": 1},
    ]})
    assert response.status_code == 200
    assert response.json()["pass_rate"] == 97.22

    saved = client.get(f"{API}/tasks/{sample_task.id}/metrics").json()
    assert {m["name"]: m["pass_rate"] for m in saved["members"]} == {
        "Ada": 98.0, "Grace": 0.0, "Linus": 87.5, "Guido": 0.0,
    }


def test_task_metrics_errors(client: TestClient, sample_task: Task) -> None:
    assert client.get(f"{API}/tasks/TASK-NOPE/metrics").status_code == 404
    assert client.put(f"{API}/tasks/TASK-NOPE/metrics", json={"members": []}).status_code == 404
    bad = client.put(f"{API}/tasks/{sample_task.id}/metrics", json={"members": [{"name": "Ada", "units": -1}]})
    assert bad.status_code == 422


def test_task_metrics_unconfigured_is_503(
    client: TestClient, sheet_client, codec, notifier, seed, sample_task: Task,
) -> None:
    seed(sample_task)
    app.dependency_overrides[deps.get_repository] = lambda: TaskRepository(sheet_client, codec, notifier)

    response = client.get(f"{API}/tasks/{sample_task.id}/metrics")

    assert response.status_code == 503
    assert "METRICS_SHEET_ID" in response.json()["detail"]
