"""
Tests for identity session routes

This test file covers:
- Sign-in sets a signed cookie
- Current session lookup
- Sign-out clears the cookie
- Empty user ids rejected
"""

from fastapi.testclient import TestClient

from quizroom.auth import USER_COOKIE_NAME, verify_user_cookie
from quizroom.config import Settings


class TestSessionRoutes:
    """Test cases for /api/session"""

    def test_sign_in_sets_cookie(self, client: TestClient, test_settings: Settings) -> None:
        """Test that signing in stores a verifiable cookie"""
        response = client.post("/api/session", data={"user_id": "p1"})

        assert response.status_code == 200
        assert response.json() == {"status": "signed_in", "user_id": "p1"}

        cookie = response.cookies.get(USER_COOKIE_NAME)
        assert cookie is not None
        assert verify_user_cookie(cookie, test_settings.secret_key) == "p1"

    def test_current_session(self, client: TestClient) -> None:
        """Test that the signed-in user can be read back"""
        client.post("/api/session", data={"user_id": "u42"})

        response = client.get("/api/session")

        assert response.status_code == 200
        assert response.json()["user_id"] == "u42"

    def test_current_session_without_cookie(self, client: TestClient) -> None:
        """Test that an anonymous client gets 401"""
        response = client.get("/api/session")
        assert response.status_code == 401

    def test_sign_out(self, client: TestClient) -> None:
        """Test that signing out removes the identity"""
        client.post("/api/session", data={"user_id": "p1"})

        response = client.delete("/api/session")
        assert response.status_code == 200
        assert response.json()["status"] == "signed_out"

        assert client.get("/api/session").status_code == 401

    def test_sign_in_requires_user_id(self, client: TestClient) -> None:
        """Test that a missing or empty user id is rejected"""
        assert client.post("/api/session", data={}).status_code == 422
        assert client.post("/api/session", data={"user_id": ""}).status_code == 422
