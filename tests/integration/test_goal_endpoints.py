"""Integration tests for goal endpoints."""
import pytest
from datetime import date

from goal_tracker.errors import BackendUnavailableError
from goal_tracker.storage.backend import MemoryBackend


TODAY = date.today().isoformat()


def auth(email: str) -> dict:
    """Demo-mode bearer header carrying the caller's email."""
    return {"Authorization": f"Bearer {email}"}


async def make_teacher(app_client, email="teacher@example.com"):
    response = await app_client.post(
        "/profile",
        json={"username": "teacher", "role": "teacher"},
        headers=auth(email),
    )
    assert response.status_code == 200
    return auth(email)


class FailingBackend(MemoryBackend):
    """Backend whose reads fail as if the spreadsheet were unreachable."""

    async def read_rows(self, schema):
        raise BackendUnavailableError("Google Sheets request failed: timeout")


@pytest.mark.asyncio
class TestGoalCreate:
    """Tests for creating goals."""

    async def test_create_goal_success(self, app_client):
        """Test successful goal creation."""
        goal_data = {
            "date": TODAY,
            "goal_text": "Finish chapter 3",
            "priority": "High",
            "time_estimate": "2h",
        }
        response = await app_client.post("/goals", json=goal_data, headers=auth("alice@example.com"))

        assert response.status_code == 201
        data = response.json()
        assert data["id"].startswith("goal_")
        assert data["email"] == "alice@example.com"
        assert data["username"] == ""
        assert data["date"] == TODAY
        assert data["goal_text"] == "Finish chapter 3"
        assert data["status"] == "Not Completed"

    async def test_create_goal_uses_profile_username(self, app_client):
        """Test goals carry the owner's username once they have a profile."""
        await app_client.post("/profile", json={"username": "alice"}, headers=auth("alice@example.com"))

        response = await app_client.post(
            "/goals",
            json={"date": TODAY, "goal_text": "Read", "priority": "Low"},
            headers=auth("alice@example.com"),
        )

        assert response.json()["username"] == "alice"

    async def test_create_goal_missing_fields(self, app_client):
        """Test goal text and priority are required."""
        response = await app_client.post(
            "/goals",
            json={"date": TODAY, "goal_text": ""},
            headers=auth("alice@example.com"),
        )

        assert response.status_code == 422

    async def test_create_goal_bad_date(self, app_client):
        response = await app_client.post(
            "/goals",
            json={"date": "tomorrow", "goal_text": "Read", "priority": "Low"},
            headers=auth("alice@example.com"),
        )

        assert response.status_code == 422


@pytest.mark.asyncio
class TestGoalList:
    """Tests for listing goals."""

    async def test_list_goals_empty(self, app_client):
        response = await app_client.get("/goals", headers=auth("alice@example.com"))

        assert response.status_code == 200
        assert response.json() == []

    async def test_students_see_own_goals(self, app_client):
        """Test a student only sees their own goals."""
        goal = {"date": TODAY, "goal_text": "Read", "priority": "Low"}
        await app_client.post("/goals", json=goal, headers=auth("alice@example.com"))
        await app_client.post("/goals", json=goal, headers=auth("bob@example.com"))

        response = await app_client.get("/goals", headers=auth("alice@example.com"))

        data = response.json()
        assert len(data) == 1
        assert data[0]["email"] == "alice@example.com"

    async def test_date_filter(self, app_client):
        headers = auth("alice@example.com")
        await app_client.post("/goals", json={"date": TODAY, "goal_text": "Today", "priority": "Low"}, headers=headers)
        await app_client.post("/goals", json={"date": "2020-01-01", "goal_text": "Old", "priority": "Low"}, headers=headers)

        response = await app_client.get("/goals", params={"date": "2020-01-01"}, headers=headers)

        assert [g["goal_text"] for g in response.json()] == ["Old"]

    async def test_teacher_sees_all_goals(self, app_client):
        """Test teachers see every student's goals and can filter by student."""
        goal = {"date": TODAY, "goal_text": "Read", "priority": "Low"}
        await app_client.post("/goals", json=goal, headers=auth("alice@example.com"))
        await app_client.post("/goals", json=goal, headers=auth("bob@example.com"))
        teacher = await make_teacher(app_client)

        everything = await app_client.get("/goals", headers=teacher)
        filtered = await app_client.get("/goals", params={"student_email": "bob@example.com"}, headers=teacher)

        assert len(everything.json()) == 2
        assert [g["email"] for g in filtered.json()] == ["bob@example.com"]


@pytest.mark.asyncio
class TestGoalUpdate:
    """Tests for updating goals."""

    async def test_update_goal_status(self, app_client):
        headers = auth("alice@example.com")
        created = await app_client.post(
            "/goals",
            json={"date": TODAY, "goal_text": "Read", "priority": "Low", "time_estimate": "1h"},
            headers=headers,
        )
        goal_id = created.json()["id"]

        response = await app_client.patch(
            f"/goals/{goal_id}",
            json={"status": "Completed", "reflection": "Easy"},
            headers=headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "Completed"
        assert data["reflection"] == "Easy"
        assert data["time_estimate"] == "1h"

        listed = await app_client.get("/goals", headers=headers)
        assert listed.json()[0]["status"] == "Completed"

    async def test_update_goal_not_found(self, app_client):
        response = await app_client.patch(
            "/goals/goal_missing",
            json={"status": "Completed"},
            headers=auth("alice@example.com"),
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "Goal not found"

    async def test_update_goal_invalid_status(self, app_client):
        response = await app_client.patch(
            "/goals/goal_1",
            json={"status": "Done-ish"},
            headers=auth("alice@example.com"),
        )

        assert response.status_code == 422


@pytest.mark.asyncio
class TestBackendUnavailable:
    """Tests for storage failures."""

    async def test_backend_failure_returns_503(self, app_client):
        from goal_tracker.database import database

        database.backend = FailingBackend()

        response = await app_client.get("/goals", headers=auth("alice@example.com"))

        assert response.status_code == 503
        assert response.json()["detail"] == "Storage backend unavailable"
