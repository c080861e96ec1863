"""Tests for the shared-password login and bearer-token guard."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
import pytest
from fastapi.testclient import TestClient

from bookings.config import Settings
from bookings.main import app, settings
from bookings.services.auth import check_password, issue_token, verify_token


@pytest.fixture()
def client():
    return TestClient(app)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def test_check_password_trims_whitespace():
    cfg = Settings(BASE_PASSWORD=" secret ", JWT_SECRET="x" * 32)
    assert check_password("secret", cfg) is True
    assert check_password("  secret\n", cfg) is True
    assert check_password("Secret", cfg) is False


def test_unset_password_never_matches():
    cfg = Settings(BASE_PASSWORD="", JWT_SECRET="x" * 32)
    assert check_password("", cfg) is False
    assert check_password("anything", cfg) is False


def test_token_round_trip_carries_admin_role():
    cfg = Settings(BASE_PASSWORD="p", JWT_SECRET="x" * 32, JWT_EXPIRES_DAYS=7)
    now = datetime.now(timezone.utc)

    claims = verify_token(issue_token(cfg, now=now), cfg)

    assert claims["role"] == "admin"
    assert claims["exp"] == int((now + timedelta(days=7)).timestamp())


def test_expired_token_is_rejected():
    cfg = Settings(BASE_PASSWORD="p", JWT_SECRET="x" * 32)
    stale = issue_token(cfg, now=datetime.now(timezone.utc) - timedelta(days=30))

    with pytest.raises(jwt.ExpiredSignatureError):
        verify_token(stale, cfg)


def test_token_signed_with_other_secret_is_rejected():
    cfg = Settings(BASE_PASSWORD="p", JWT_SECRET="x" * 32)
    other = Settings(BASE_PASSWORD="p", JWT_SECRET="y" * 32)

    with pytest.raises(jwt.InvalidTokenError):
        verify_token(issue_token(other), cfg)


# ---------------------------------------------------------------------------
# API
# ---------------------------------------------------------------------------


def test_login_returns_usable_token(client: TestClient):
    resp = client.post("/login", json={"password": settings.BASE_PASSWORD})
    assert resp.status_code == 200
    token = resp.json()["token"]

    events = client.get("/events", headers={"Authorization": f"Bearer {token}"})
    assert events.status_code == 200


def test_login_wrong_password(client: TestClient):
    resp = client.post("/login", json={"password": "nope"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Wrong password"


def test_missing_token(client: TestClient):
    resp = client.get("/events")
    assert resp.status_code == 401
    assert resp.json()["detail"] == "No token"


def test_invalid_token(client: TestClient):
    resp = client.get("/events", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid token"


@pytest.mark.parametrize(
    "method, path",
    [
        ("post", "/events"),
        ("put", "/events/A"),
        ("delete", "/events/A"),
        ("get", "/dancers"),
    ],
)
def test_routes_require_token(client: TestClient, method: str, path: str):
    kwargs = {"json": {}} if method in ("post", "put") else {}
    resp = getattr(client, method)(path, **kwargs)
    assert resp.status_code == 401


# ---------------------------------------------------------------------------
# Unset signing secret
# ---------------------------------------------------------------------------


def test_unset_secret_disables_login():
    cfg = Settings(BASE_PASSWORD="p", JWT_SECRET="")
    assert check_password("p", cfg) is False


def test_verify_with_unset_secret_raises_jwt_error():
    cfg = Settings(BASE_PASSWORD="p", JWT_SECRET="x" * 32)
    token = issue_token(cfg)

    with pytest.raises(jwt.PyJWTError):
        verify_token(token, Settings(BASE_PASSWORD="p", JWT_SECRET=""))


def test_unset_secret_rejects_login_and_tokens(client: TestClient, monkeypatch):
    token = issue_token(settings)
    monkeypatch.setattr(settings, "JWT_SECRET", "")

    login = client.post("/login", json={"password": settings.BASE_PASSWORD})
    assert login.status_code == 401
    assert login.json()["detail"] == "Wrong password"

    events = client.get("/events", headers={"Authorization": f"Bearer {token}"})
    assert events.status_code == 401
    assert events.json()["detail"] == "Invalid token"
