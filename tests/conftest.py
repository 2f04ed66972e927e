"""
Shared pytest fixtures.

Environment variables are set at module level, before any src/ imports,
so config.py reads the correct test values when fixtures are first evaluated.
"""

import os

# Must be set before any shared.* imports.
os.environ.setdefault("ENV", "test")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("AWS_SESSION_TOKEN", "testing")
os.environ.setdefault("AWS_REGION", "us-west-2")
os.environ.setdefault("SESSION_SECRET", "test-secret-32-chars-exactly-ok!")

from datetime import datetime, timedelta, timezone

import boto3
import pytest
from fastapi.testclient import TestClient
from jose import jwt
from moto import mock_aws

TABLES = ("users", "user_sessions", "blogs", "blog_tags", "blog_post_tags", "user_api_keys")

SECRET = "test-secret-32-chars-exactly-ok!"
PASSWORD = "correct-horse"


# ── Token helpers ──────────────────────────────────────────────────────────────

def make_token(
    user_id: str = "user-1",
    session_id: str = "session-1",
    email: str = "writer@example.com",
    secret: str = SECRET,
    expired: bool = False,
) -> str:
    exp = datetime.now(timezone.utc) + (
        timedelta(seconds=-1) if expired else timedelta(hours=1)
    )
    return jwt.encode(
        {"sub": user_id, "sid": session_id, "email": email, "exp": exp},
        secret,
        algorithm="HS256",
    )


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def signup(client: TestClient, email: str = "writer@example.com") -> dict[str, str]:
    """Register through the API and return auth headers for the new session."""
    r = client.post(
        "/api/auth/signup",
        json={"email": email, "password": PASSWORD, "name": "Writer"},
    )
    assert r.status_code == 201, r.text
    return bearer(r.json()["access_token"])


# ── AWS fixtures ───────────────────────────────────────────────────────────────

@pytest.fixture()
def aws_env():
    """Start moto mock, create every table keyed by ``id``, yield, teardown."""
    with mock_aws():
        ddb = boto3.client("dynamodb", region_name="us-west-2")
        for name in TABLES:
            ddb.create_table(
                TableName=name,
                KeySchema=[{"AttributeName": "id", "KeyType": "HASH"}],
                AttributeDefinitions=[{"AttributeName": "id", "AttributeType": "S"}],
                BillingMode="PAY_PER_REQUEST",
            )
        yield


@pytest.fixture()
def data_client(aws_env):
    from shared.db import get_client  # noqa: PLC0415

    return get_client()


@pytest.fixture()
def session(data_client):
    """A registered user with an open session, built without going through HTTP."""
    from dashboard.services.auth import AuthService  # noqa: PLC0415
    from shared.auth import Session, decode_token  # noqa: PLC0415

    outcome = AuthService(data_client).signup("owner@example.com", PASSWORD, "Owner")
    assert outcome.ok, outcome.error
    claims = decode_token(outcome.data["access_token"])
    return Session(user_id=claims["sub"], email=claims["email"], session_id=claims["sid"])


@pytest.fixture()
def client(aws_env):
    """Dashboard TestClient with mocked AWS. Import app inside fixture so boto3
    clients are always created inside the mock_aws context."""
    from dashboard.handler import app  # noqa: PLC0415

    return TestClient(app, raise_server_exceptions=True)


@pytest.fixture()
def api_client(aws_env):
    """TestClient for the public blog-read function."""
    from blog_api.handler import app  # noqa: PLC0415

    return TestClient(app, raise_server_exceptions=True)
