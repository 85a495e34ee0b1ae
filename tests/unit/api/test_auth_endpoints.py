"""
Name: Auth Endpoint Tests (/auth/register, /auth/login, /auth/me)

Responsibilities:
  - Flujo registro -> login -> me con JWT
  - 400 en duplicado / política, 401 uniforme en login
  - Shape RFC 7807 (application/problem+json)
"""

from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from techmart.api.main import app
from techmart.container import get_credential_store
from techmart.crosscutting.config import get_settings
from techmart.identity.tokens import TokenIssuer, TokenSettings

pytestmark = pytest.mark.unit

REGISTER_BODY = {
    "email": "Ana@Example.com",
    "password": "Secret123",
    "firstName": "Ana",
    "lastName": "García",
}


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def _bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def test_register_returns_token_and_user(client):
    response = client.post("/auth/register", json=REGISTER_BODY)

    assert response.status_code == 200
    body = response.json()
    assert body["token"]
    assert body["tokenType"] == "bearer"
    assert body["expiresIn"] == 3600
    assert body["user"]["email"] == "ana@example.com"
    assert body["user"]["firstName"] == "Ana"
    assert body["user"]["lastName"] == "García"
    assert "passwordHash" not in body["user"]


def test_register_then_login_yields_same_user(client):
    registered = client.post("/auth/register", json=REGISTER_BODY).json()

    response = client.post(
        "/auth/login", json={"email": "ana@example.com", "password": "Secret123"}
    )

    assert response.status_code == 200
    assert response.json()["user"]["id"] == registered["user"]["id"]


def test_duplicate_registration_is_bad_request(client):
    client.post("/auth/register", json=REGISTER_BODY)

    response = client.post("/auth/register", json=REGISTER_BODY)

    assert response.status_code == 400
    assert response.headers["content-type"].startswith("application/problem+json")
    body = response.json()
    assert body["code"] == "BAD_REQUEST"
    assert body["detail"] == "User already exists with this email"
    assert {"reason": "DUPLICATE_EMAIL"} in body["errors"]


def test_weak_password_lists_policy_errors(client):
    response = client.post("/auth/register", json={**REGISTER_BODY, "password": "abc"})

    assert response.status_code == 400
    body = response.json()
    assert body["detail"] == "Registration failed"
    messages = [e["msg"] for e in body["errors"] if "msg" in e]
    assert "Password must be at least 8 characters." in messages


def test_missing_fields_are_bad_request(client):
    response = client.post("/auth/register", json={"email": "x@y.z"})

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "BAD_REQUEST"
    fields = {e["field"] for e in body["errors"] if "field" in e}
    assert "body.firstName" in fields
    assert "body.password" in fields


def test_register_accepts_snake_case_names(client):
    body = {
        "email": "leo@example.com",
        "password": "Secret123",
        "first_name": "Leo",
        "last_name": "Paz",
    }

    response = client.post("/auth/register", json=body)

    assert response.status_code == 200
    assert response.json()["user"]["firstName"] == "Leo"


def test_malformed_login_body_is_bad_request(client):
    response = client.post("/auth/login", json={"email": "ana@example.com"})

    assert response.status_code == 400
    assert response.json()["code"] == "BAD_REQUEST"


@pytest.mark.parametrize(
    "email,password",
    [("ana@example.com", "Wrong123"), ("ghost@example.com", "Secret123")],
)
def test_login_failures_are_uniform(client, email, password):
    client.post("/auth/register", json=REGISTER_BODY)

    response = client.post("/auth/login", json={"email": email, "password": password})

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"
    assert response.json()["detail"] == "Invalid credentials"


def test_login_of_inactive_user_is_uniform(client):
    client.post("/auth/register", json=REGISTER_BODY)
    store = get_credential_store()
    user = store.find_by_email("ana@example.com")
    store.update(replace(user, is_active=False))

    response = client.post(
        "/auth/login", json={"email": "ana@example.com", "password": "Secret123"}
    )

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid credentials"


def test_me_returns_current_user(client):
    token = client.post("/auth/register", json=REGISTER_BODY).json()["token"]

    response = client.get("/auth/me", headers=_bearer(token))

    assert response.status_code == 200
    assert response.json()["email"] == "ana@example.com"


def test_me_requires_token(client):
    response = client.get("/auth/me")

    assert response.status_code == 401
    assert response.json()["detail"] == "Falta token Bearer."


def test_me_rejects_token_signed_with_other_key(client):
    client.post("/auth/register", json=REGISTER_BODY)
    user = get_credential_store().find_by_email("ana@example.com")
    forger = TokenIssuer(
        TokenSettings(
            secret="not-the-server-secret-0123456789abcdef",
            issuer="techmart-identity",
            audience="techmart-clients",
            access_ttl_minutes=60,
        )
    )

    response = client.get("/auth/me", headers=_bearer(forger.issue(user).token))

    assert response.status_code == 401
    assert response.json()["detail"] == "Token inválido."


def test_me_rejects_expired_token(client):
    client.post("/auth/register", json=REGISTER_BODY)
    user = get_credential_store().find_by_email("ana@example.com")
    past = datetime.now(timezone.utc) - timedelta(hours=2)
    stale_issuer = TokenIssuer(
        TokenSettings.from_settings(get_settings()), clock=lambda: past
    )

    response = client.get("/auth/me", headers=_bearer(stale_issuer.issue(user).token))

    assert response.status_code == 401
    assert response.json()["detail"] == "Token expirado."
