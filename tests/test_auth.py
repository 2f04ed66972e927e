"""Tests for /api/auth and session gating."""

import logging

from fastapi.testclient import TestClient

from tests.conftest import PASSWORD, bearer, make_token, signup


class TestSignup:
    def test_signup_returns_201_and_token(self, client: TestClient):
        r = client.post("/api/auth/signup", json={"email": "a@example.com", "password": PASSWORD})
        assert r.status_code == 201
        body = r.json()
        assert body["access_token"]
        assert body["email"] == "a@example.com"
        assert body["token_type"] == "bearer"

    def test_duplicate_email_returns_409(self, client: TestClient):
        signup(client, "dup@example.com")
        r = client.post("/api/auth/signup", json={"email": "DUP@example.com", "password": PASSWORD})
        assert r.status_code == 409
        assert r.json()["detail"] == "User already registered"

    def test_short_password_returns_422(self, client: TestClient):
        r = client.post("/api/auth/signup", json={"email": "a@example.com", "password": "123"})
        assert r.status_code == 422

    def test_password_is_not_stored_in_plaintext(self, client: TestClient, data_client):
        signup(client, "hash@example.com")
        user = data_client.table("users").select().eq("email", "hash@example.com").single().execute().data
        assert user["password_hash"] != PASSWORD
        assert user["password_hash"].startswith("$argon2")


class TestLogin:
    def test_login_with_correct_password(self, client: TestClient):
        signup(client, "login@example.com")
        r = client.post("/api/auth/login", json={"email": "login@example.com", "password": PASSWORD})
        assert r.status_code == 200
        assert r.json()["access_token"]

    def test_wrong_password_returns_401(self, client: TestClient):
        signup(client, "login@example.com")
        r = client.post("/api/auth/login", json={"email": "login@example.com", "password": "nope-nope"})
        assert r.status_code == 401
        assert r.json()["detail"] == "Invalid login credentials"

    def test_unknown_email_returns_401(self, client: TestClient):
        r = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": PASSWORD})
        assert r.status_code == 401

    def test_rejected_login_log_omits_email(self, client: TestClient, caplog):
        signup(client, "login@example.com")
        caplog.set_level(logging.WARNING, logger="dashboard.services.auth")
        client.post("/api/auth/login", json={"email": "login@example.com", "password": "nope-nope"})
        client.post("/api/auth/login", json={"email": "ghost@example.com", "password": PASSWORD})

        rejected = [r for r in caplog.records if r.getMessage() == "Login rejected"]
        assert len(rejected) == 2
        assert rejected[0].user_id
        assert len(rejected[1].email_sha256) == 12
        for record in rejected:
            assert "@example.com" not in str(vars(record))


class TestSession:
    def test_session_endpoint_reports_user(self, client: TestClient):
        headers = signup(client, "me@example.com")
        r = client.get("/api/auth/session", headers=headers)
        assert r.status_code == 200
        assert r.json()["email"] == "me@example.com"

    def test_missing_token_returns_401(self, client: TestClient):
        r = client.get("/api/blogs")
        assert r.status_code == 401

    def test_invalid_token_returns_401(self, client: TestClient):
        r = client.get("/api/blogs", headers=bearer("not-a-real-jwt"))
        assert r.status_code == 401

    def test_expired_token_returns_401(self, client: TestClient):
        r = client.get("/api/blogs", headers=bearer(make_token(expired=True)))
        assert r.status_code == 401
        assert r.json()["detail"] == "Token expired"

    def test_token_without_session_row_returns_401(self, client: TestClient):
        r = client.get("/api/blogs", headers=bearer(make_token()))
        assert r.status_code == 401

    def test_logout_revokes_token(self, client: TestClient):
        headers = signup(client)
        assert client.get("/api/blogs", headers=headers).status_code == 200

        r = client.post("/api/auth/logout", headers=headers)
        assert r.status_code == 200
        assert r.json()["message"] == "Signed out successfully"

        assert client.get("/api/blogs", headers=headers).status_code == 401

    def test_missing_secret_returns_503(self, client: TestClient, monkeypatch):
        from shared import config

        headers = signup(client)
        monkeypatch.setattr(config, "SESSION_SECRET", "")
        r = client.get("/api/blogs", headers=headers)
        assert r.status_code == 503
        assert "SESSION_SECRET" in r.json()["detail"]

    def test_malformed_session_ttl_returns_503(self, client: TestClient, monkeypatch):
        from shared import config

        monkeypatch.setattr(config, "SESSION_TTL_MINUTES", "a week")
        r = client.post("/api/auth/signup", json={"email": "ttl@example.com", "password": PASSWORD})
        assert r.status_code == 503
        assert "SESSION_TTL_MINUTES" in r.json()["detail"]


def test_health(client: TestClient):
    assert client.get("/health").json() == {"status": "ok"}
