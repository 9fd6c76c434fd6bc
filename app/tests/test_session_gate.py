"""
Tests for the bearer-token gate on protected routes
"""
from typing import Optional

import pytest
from fastapi import Depends, status

from app.core.deps import get_optional_identity
from app.core.security import TokenClaims, TokenService
from app.tests.conftest import auth_headers

PROTECTED_ROUTES = [
    ("get", "/api/v1/auth/profile"),
    ("post", "/api/v1/attendance/checkin"),
    ("post", "/api/v1/attendance/checkout"),
    ("get", "/api/v1/attendance/today"),
    ("get", "/api/v1/attendance/history"),
    ("get", "/api/v1/tasks"),
    ("post", "/api/v1/tasks"),
]


@pytest.mark.parametrize("method,path", PROTECTED_ROUTES)
def test_missing_token_rejected(client, method, path):
    response = getattr(client, method)(path)

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["detail"] == "Not authenticated"
    assert response.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.parametrize("method,path", PROTECTED_ROUTES)
def test_invalid_token_rejected(client, method, path):
    response = getattr(client, method)(path, headers=auth_headers("garbage.token.value"))

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["detail"] == "Invalid or expired token"


def test_non_bearer_scheme_rejected(client):
    response = client.get("/api/v1/attendance/today", headers={"Authorization": "Basic dXNlcjpwYXNz"})

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["detail"] == "Not authenticated"


def test_expired_token_rejected(client, token_service, test_user):
    token = token_service.issue(
        TokenClaims(user_id=test_user.id, email=test_user.email, role=test_user.role),
        expires_minutes=-5,
    )

    response = client.get("/api/v1/attendance/today", headers=auth_headers(token))

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["detail"] == "Invalid or expired token"


def test_token_signed_with_other_secret_rejected(client, test_user):
    forged = TokenService(secret_key="not-the-server-secret-0000000000000000").issue(
        TokenClaims(user_id=test_user.id, email=test_user.email, role="admin")
    )

    response = client.get("/api/v1/attendance/today", headers=auth_headers(forged))

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_error_envelope_shape(client):
    response = client.get("/api/v1/attendance/today")

    data = response.json()
    assert data == {
        "error": True,
        "status_code": 401,
        "detail": "Not authenticated",
        "path": "/api/v1/attendance/today",
    }


def test_optional_identity(app, client, user_headers, test_user):
    @app.get("/_test/whoami")
    async def whoami(identity: Optional[TokenClaims] = Depends(get_optional_identity)):
        return {"user_id": identity.user_id if identity else None}

    assert client.get("/_test/whoami").json() == {"user_id": None}
    assert client.get("/_test/whoami", headers=auth_headers("bad")).json() == {"user_id": None}
    assert client.get("/_test/whoami", headers=user_headers).json() == {"user_id": test_user.id}
