import pytest
from fastapi.testclient import TestClient

from teamtasks.store import EntityStore


@pytest.fixture
def teams(store):
    return [store.teams.insert({"name": "A"}), store.teams.insert({"name": "B"})]


@pytest.fixture
def projects(store):
    return [store.projects.insert({"name": "P"}), store.projects.insert({"name": "Q"})]


class TestClosedTasksReport:
    def test_no_completed_tasks_is_not_found(self, client, auth_headers, teams, projects, make_task):
        make_task(projects[0], teams[0])
        r = client.get("/report/closed-tasks", headers=auth_headers)
        assert r.status_code == 404
        assert r.json() == {"error": "Reports of desired Tasks not found"}

    def test_counts_per_team_in_fetch_order(self, client, auth_headers, teams, projects, make_task):
        for team in (teams[0], teams[0], teams[1]):
            make_task(projects[0], team, status="Completed")
        make_task(projects[0], teams[1])

        r = client.get("/report/closed-tasks", headers=auth_headers)
        assert r.status_code == 200
        assert r.json() == [{"name": "A", "completedTasks": 2}, {"name": "B", "completedTasks": 1}]

    def test_team_without_completed_tasks_reports_zero(self, client, auth_headers, teams, projects, make_task, store):
        make_task(projects[0], teams[1], status="Completed")
        store.teams.insert({"name": "C"})
        r = client.get("/report/closed-tasks", headers=auth_headers)
        assert r.json() == [
            {"name": "A", "completedTasks": 0},
            {"name": "B", "completedTasks": 1},
            {"name": "C", "completedTasks": 0},
        ]

    def test_requires_token(self, client, teams, projects, make_task):
        make_task(projects[0], teams[0], status="Completed")
        assert client.get("/report/closed-tasks").status_code == 401

    def test_completing_a_task_through_the_api_is_counted(self, client, auth_headers, teams, projects, make_task):
        task = make_task(projects[0], teams[1])
        assert client.get("/report/closed-tasks", headers=auth_headers).status_code == 404

        assert client.post("/task", json={"taskId": task.id}, headers=auth_headers).status_code == 200
        r = client.get("/report/closed-tasks", headers=auth_headers)
        assert r.json() == [{"name": "A", "completedTasks": 0}, {"name": "B", "completedTasks": 1}]


class TestPendingReport:
    def test_no_pending_tasks_is_not_found(self, client, teams, projects, make_task):
        make_task(projects[0], teams[0], status="Completed")
        r = client.get("/report/pending")
        assert r.status_code == 404
        assert r.json() == {"error": "Pending Tasks not found"}

    def test_overdue_task_excluded_from_max(self, client, teams, projects, make_task):
        make_task(projects[0], teams[0], age_days=10, duration=15)
        make_task(projects[0], teams[0], age_days=20, duration=5, status="In Progress")

        r = client.get("/report/pending")
        assert r.status_code == 200
        assert r.json() == [
            {"project": "P", "remainingDaysToClose": 5},
            {"project": "Q", "remainingDaysToClose": 0},
        ]

    def test_all_overdue_reports_zero(self, client, teams, projects, make_task):
        make_task(projects[0], teams[0], age_days=20, duration=5)
        assert client.get("/report/pending").json()[0] == {"project": "P", "remainingDaysToClose": 0}

    def test_completed_tasks_are_ignored(self, client, teams, projects, make_task):
        make_task(projects[0], teams[0], duration=30, status="Completed")
        make_task(projects[1], teams[0], age_days=1, duration=4, status="Blocked")
        assert client.get("/report/pending").json() == [
            {"project": "P", "remainingDaysToClose": 0},
            {"project": "Q", "remainingDaysToClose": 3},
        ]

    def test_repeated_calls_are_identical(self, client, auth_headers, teams, projects, make_task):
        make_task(projects[0], teams[0], age_days=2, duration=9)
        make_task(projects[1], teams[1], age_days=1, duration=3, status="Completed")

        first = client.get("/report/pending")
        second = client.get("/report/pending")
        assert first.content == second.content

        closed_first = client.get("/report/closed-tasks", headers=auth_headers)
        closed_second = client.get("/report/closed-tasks", headers=auth_headers)
        assert closed_first.content == closed_second.content

    def test_very_long_task_does_not_break_the_report(self, client, teams, projects, make_task):
        make_task(projects[0], teams[0], duration=3_000_000)
        r = client.get("/report/pending")
        assert r.status_code == 200
        assert r.json()[0] == {"project": "P", "remainingDaysToClose": 3_000_000}


class TestLastWeekReport:
    def test_only_recently_completed_tasks(self, client, auth_headers, teams, projects, make_task):
        recent = make_task(projects[0], teams[0], status="Completed", age_days=12, updated_days_ago=2)
        make_task(projects[0], teams[0], status="Completed", age_days=30, updated_days_ago=10)
        make_task(projects[0], teams[0], age_days=1)

        r = client.get("/report/last-week", headers=auth_headers)
        assert r.status_code == 200
        assert [t["id"] for t in r.json()] == [recent.id]

    def test_nothing_recent_is_not_found(self, client, auth_headers, teams, projects, make_task):
        make_task(projects[0], teams[0], status="Completed", age_days=30, updated_days_ago=10)
        assert client.get("/report/last-week", headers=auth_headers).status_code == 404


def test_unexpected_errors_become_generic_500(app, monkeypatch):
    def broken(self, *args, **kwargs):
        raise RuntimeError("database exploded: secret detail")

    with TestClient(app, raise_server_exceptions=False) as client:
        monkeypatch.setattr(EntityStore, "__init__", broken)
        r = client.get("/report/pending")
    assert r.status_code == 500
    assert r.json() == {"error": "Internal server error"}
    assert "secret" not in r.text


def test_unknown_route_uses_error_shape(client):
    r = client.get("/nope")
    assert r.status_code == 404
    assert "error" in r.json()
