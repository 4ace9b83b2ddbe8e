"""
Integration tests for authentication, user profile, preferences and health.
"""
import time

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from mockprep.core import config
from mockprep.core.security import profile_from_claims

SECRET = "identity-test-secret"


@pytest.fixture
def unauthenticated_client(app, monkeypatch):
    """Client that goes through real token verification."""
    monkeypatch.setattr(config, "IDENTITY_JWT_SECRET", SECRET)
    monkeypatch.setattr(config, "IDENTITY_JWT_AUDIENCE", None)
    app.dependency_overrides.clear()
    with TestClient(app) as client:
        yield client


def _token(**claims):
    payload = {"sub": "user-9", "email": "lin@example.com", "given_name": "Lin", "exp": int(time.time()) + 300}
    payload.update(claims)
    return jwt.encode(payload, SECRET, algorithm="HS256")


def test_missing_token_is_unauthorized(unauthenticated_client):
    response = unauthenticated_client.get("/api/interviews")

    assert response.status_code == 401
    assert response.json()["detail"] == "Unauthorized"


def test_invalid_token_is_unauthorized(unauthenticated_client):
    headers = {"Authorization": "Bearer not-a-jwt"}

    assert unauthenticated_client.get("/api/auth/user", headers=headers).status_code == 401


def test_expired_token_is_unauthorized(unauthenticated_client):
    headers = {"Authorization": f"Bearer {_token(exp=int(time.time()) - 10)}"}

    assert unauthenticated_client.get("/api/auth/user", headers=headers).status_code == 401


def test_token_without_subject_is_unauthorized(unauthenticated_client):
    headers = {"Authorization": f"Bearer {_token(sub='')}"}

    assert unauthenticated_client.get("/api/auth/user", headers=headers).status_code == 401


def test_unconfigured_secret_rejects_tokens(unauthenticated_client, monkeypatch):
    monkeypatch.setattr(config, "IDENTITY_JWT_SECRET", None)
    headers = {"Authorization": f"Bearer {_token()}"}

    assert unauthenticated_client.get("/api/auth/user", headers=headers).status_code == 401


def test_bearer_token_syncs_user(unauthenticated_client):
    headers = {"Authorization": f"Bearer {_token()}"}

    response = unauthenticated_client.get("/api/auth/user", headers=headers)

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == "user-9"
    assert data["email"] == "lin@example.com"
    assert data["firstName"] == "Lin"
    assert data["preferences"] is None


def test_session_cookie_is_accepted(unauthenticated_client):
    unauthenticated_client.cookies.set(config.SESSION_COOKIE_NAME, _token())

    response = unauthenticated_client.get("/api/analytics/stats")

    assert response.status_code == 200


def test_profile_from_claims_prefers_explicit_fields():
    profile = profile_from_claims({
        "email": "a@example.com",
        "first_name": "Ada",
        "given_name": "Augusta",
        "family_name": "Lovelace",
        "picture": "https://img.example/a.png",
    })

    assert profile == {
        "email": "a@example.com",
        "first_name": "Ada",
        "last_name": "Lovelace",
        "profile_image_url": "https://img.example/a.png",
    }


def test_get_current_user(client):
    response = client.get("/api/auth/user")

    assert response.status_code == 200
    assert response.json()["id"] == "user-1"
    assert response.json()["firstName"] == "Ada"


def test_preferences_round_trip(client):
    assert client.get("/api/preferences").json() is None

    response = client.post("/api/preferences", json={
        "preferredJobRole": "data_scientist",
        "preferredTechStack": ["Python", "Spark"],
    })
    assert response.status_code == 200
    saved = response.json()
    assert saved["preferredJobRole"] == "data_scientist"
    assert saved["voiceEnabledByDefault"] is True
    assert saved["darkMode"] is False

    response = client.post("/api/preferences", json={"darkMode": True})
    updated = response.json()
    assert updated["id"] == saved["id"]
    assert updated["darkMode"] is True
    assert updated["preferredTechStack"] == ["Python", "Spark"]

    user = client.get("/api/auth/user").json()
    assert user["preferences"]["darkMode"] is True


def test_preferences_reject_unknown_role(client):
    response = client.post("/api/preferences", json={"preferredJobRole": "astronaut"})

    assert response.status_code == 422


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["database"] == "connected"


def test_health_reports_collaborator_configuration(client, monkeypatch):
    monkeypatch.setattr(config, "OPENAI_API_KEY", None)
    monkeypatch.setattr(config, "LIVEKIT_API_KEY", "devkey")
    monkeypatch.setattr(config, "LIVEKIT_API_SECRET", "devsecret")

    data = client.get("/health").json()

    assert data["generator"] == "missing_api_key"
    assert data["voice_rooms"] == "configured"
