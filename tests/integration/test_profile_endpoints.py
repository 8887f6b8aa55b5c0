"""Integration tests for profile endpoints."""
import pytest

from goal_tracker.config import settings
from goal_tracker.utils.auth import create_access_token


def auth(email: str) -> dict:
    """Demo-mode bearer header carrying the caller's email."""
    return {"Authorization": f"Bearer {email}"}


@pytest.mark.asyncio
class TestGetProfile:
    """Tests for fetching the caller's profile."""

    async def test_first_visit_provisions_profile(self, app_client):
        """Test a profile is created from the email on first GET."""
        response = await app_client.get("/profile", headers=auth("Jane.Doe@example.com"))

        assert response.status_code == 200
        data = response.json()
        assert data["email"] == "Jane.Doe@example.com"
        assert data["username"] == "janedoe"
        assert data["role"] == "student"
        assert data["phase"] == 0
        assert data["updated_at"] is not None

    async def test_existing_profile_returned(self, app_client):
        await app_client.post(
            "/profile",
            json={"username": "alice", "first_name": "Alice", "phase": 2},
            headers=auth("alice@example.com"),
        )

        response = await app_client.get("/profile", headers=auth("alice@example.com"))

        assert response.json()["first_name"] == "Alice"
        assert response.json()["phase"] == 2

    async def test_taken_username_gets_suffix(self, app_client):
        """Test provisioning retries with a numeric suffix."""
        await app_client.get("/profile", headers=auth("alice@example.com"))

        response = await app_client.get("/profile", headers=auth("alice@other.org"))

        assert response.json()["username"] == "alice1"

    async def test_all_candidates_taken(self, app_client):
        """Test 404 when every candidate username is owned by someone else."""
        for i, username in enumerate(["alice", "alice1", "alice2"]):
            await app_client.post("/profile", json={"username": username}, headers=auth(f"u{i}@example.com"))

        response = await app_client.get("/profile", headers=auth("alice@example.com"))

        assert response.status_code == 404
        assert response.json()["detail"] == "Profile not found"

    async def test_no_token_uses_demo_user(self, app_client):
        response = await app_client.get("/profile")

        assert response.status_code == 200
        assert response.json()["email"] == "demo@example.com"


@pytest.mark.asyncio
class TestSaveProfile:
    """Tests for creating and updating the caller's profile."""

    async def test_save_profile_normalizes_username(self, app_client):
        response = await app_client.post(
            "/profile",
            json={"username": "  Alice ", "first_name": " Alice ", "last_name": "Smith", "phase": 7},
            headers=auth("alice@example.com"),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["username"] == "alice"
        assert data["first_name"] == "Alice"
        assert data["phase"] == 7

    async def test_save_twice_keeps_one_profile(self, app_client, backend):
        headers = auth("alice@example.com")
        await app_client.post("/profile", json={"username": "alice"}, headers=headers)
        await app_client.post("/profile", json={"username": "alice", "phase": 1}, headers=headers)

        assert len(backend.tables["users"]) == 1

    async def test_username_taken(self, app_client, backend):
        await app_client.post("/profile", json={"username": "alice"}, headers=auth("alice@example.com"))

        response = await app_client.post("/profile", json={"username": "ALICE"}, headers=auth("mallory@example.com"))

        assert response.status_code == 409
        assert response.json()["detail"] == "Username already taken"
        assert len(backend.tables["users"]) == 1

    async def test_blank_username(self, app_client):
        response = await app_client.post("/profile", json={"username": "   "}, headers=auth("alice@example.com"))

        assert response.status_code == 400

    @pytest.mark.parametrize("phase", [-1, 8])
    async def test_phase_out_of_range(self, app_client, phase):
        response = await app_client.post(
            "/profile",
            json={"username": "alice", "phase": phase},
            headers=auth("alice@example.com"),
        )

        assert response.status_code == 422

    async def test_invalid_role(self, app_client):
        response = await app_client.post(
            "/profile",
            json={"username": "alice", "role": "principal"},
            headers=auth("alice@example.com"),
        )

        assert response.status_code == 422


@pytest.mark.asyncio
class TestVerifiedAuth:
    """Tests for auth with a signing secret configured."""

    async def test_missing_token(self, app_client, monkeypatch):
        monkeypatch.setattr(settings, "jwt_secret", "test-secret")

        response = await app_client.get("/profile")

        assert response.status_code == 401

    async def test_invalid_token(self, app_client, monkeypatch):
        monkeypatch.setattr(settings, "jwt_secret", "test-secret")

        response = await app_client.get("/profile", headers=auth("alice@example.com"))

        assert response.status_code == 401

    async def test_valid_token(self, app_client, monkeypatch):
        monkeypatch.setattr(settings, "jwt_secret", "test-secret")
        token = create_access_token(email="alice@example.com")

        response = await app_client.get("/profile", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200
        assert response.json()["email"] == "alice@example.com"
