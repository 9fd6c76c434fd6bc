"""
Tests for authentication endpoints
"""
import bcrypt
import pytest
from fastapi import status
from fastapi.testclient import TestClient

from app.main import create_app
from app.models.user import User, UserRole
from app.tests.conftest import TEST_PASSWORD, auth_headers, create_user, get_auth_token, make_settings


def signup_payload(**overrides):
    payload = {
        "email": "new.user@example.com",
        "password": "Abcd123!",
        "full_name": "New User",
    }
    payload.update(overrides)
    return payload


def test_signup_success(client, db):
    """Test signup creates a user and returns a usable token"""
    response = client.post("/api/v1/auth/signup", json=signup_payload())

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["token"]
    assert data["user"]["email"] == "new.user@example.com"
    assert data["user"]["full_name"] == "New User"
    assert data["user"]["role"] == "user"
    assert "password_hash" not in data["user"]
    assert "password" not in data["user"]

    stored = db.query(User).filter(User.email == "new.user@example.com").first()
    assert stored is not None
    assert stored.password_hash.startswith("$argon2")

    profile = client.get("/api/v1/auth/profile", headers=auth_headers(data["token"]))
    assert profile.status_code == status.HTTP_200_OK
    assert profile.json()["user"]["id"] == data["user"]["id"]


def test_signup_normalizes_email(client):
    response = client.post("/api/v1/auth/signup", json=signup_payload(email="Mixed.Case@Example.com"))

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["user"]["email"] == "mixed.case@example.com"


def test_signup_duplicate_email_conflict(client, test_user):
    """Test signup with an already registered email (any case) returns 409"""
    response = client.post("/api/v1/auth/signup", json=signup_payload(email=test_user.email.upper()))

    assert response.status_code == status.HTTP_409_CONFLICT
    data = response.json()
    assert data["error"] is True
    assert data["detail"] == "User with this email already exists"


@pytest.mark.parametrize("password", [
    "Ab1!",          # too short
    "abcd123!",      # no uppercase
    "ABCD123!",      # no lowercase
    "Abcdefg!",      # no digit
    "Abcd1234",      # no special character
])
def test_signup_weak_password_rejected(client, password):
    response = client.post("/api/v1/auth/signup", json=signup_payload(password=password))

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    fields = [e["field"] for e in response.json()["errors"]]
    assert "password" in fields


def test_signup_invalid_email_rejected(client):
    response = client.post("/api/v1/auth/signup", json=signup_payload(email="not-an-email"))

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_signup_short_full_name_rejected(client):
    response = client.post("/api/v1/auth/signup", json=signup_payload(full_name="  A "))

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_login_success(client, test_user):
    """Test successful login"""
    response = client.post(
        "/api/v1/auth/login",
        json={"email": test_user.email, "password": TEST_PASSWORD}
    )

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert "token" in data
    assert data["token_type"] == "bearer"
    assert data["user"]["id"] == test_user.id


def test_login_is_case_insensitive_on_email(client, test_user):
    response = client.post(
        "/api/v1/auth/login",
        json={"email": "USER@Example.com", "password": TEST_PASSWORD}
    )

    assert response.status_code == status.HTTP_200_OK


def test_login_wrong_password(client, test_user):
    """Test login with wrong password"""
    response = client.post(
        "/api/v1/auth/login",
        json={"email": test_user.email, "password": "Wrong123!"}
    )

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["detail"] == "Invalid email or password"


def test_login_unknown_email_same_message(client):
    """Unknown email and wrong password are indistinguishable"""
    response = client.post(
        "/api/v1/auth/login",
        json={"email": "nobody@example.com", "password": TEST_PASSWORD}
    )

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["detail"] == "Invalid email or password"


def test_login_inactive_user(client, db):
    """Test login with inactive user"""
    create_user(db, email="inactive@example.com", is_active=False)

    response = client.post(
        "/api/v1/auth/login",
        json={"email": "inactive@example.com", "password": TEST_PASSWORD}
    )

    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["detail"] == "Account is deactivated. Please contact support."


def test_login_upgrades_legacy_bcrypt_hash(client, db):
    """Users imported with bcrypt hashes can log in and get an argon2 hash"""
    legacy_hash = bcrypt.hashpw(TEST_PASSWORD.encode(), bcrypt.gensalt(rounds=4)).decode()
    user = User(
        email="legacy@example.com",
        password_hash="$2a$" + legacy_hash[4:],
        full_name="Legacy User",
        role=UserRole.USER.value,
        is_active=True,
    )
    db.add(user)
    db.commit()

    response = client.post(
        "/api/v1/auth/login",
        json={"email": "legacy@example.com", "password": TEST_PASSWORD}
    )

    assert response.status_code == status.HTTP_200_OK
    db.refresh(user)
    assert user.password_hash.startswith("$argon2")


def test_profile_requires_token(client):
    response = client.get("/api/v1/auth/profile")

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["detail"] == "Not authenticated"


def test_profile_of_deleted_user_not_found(client, db, test_user):
    token = get_auth_token(client, test_user.email)
    db.delete(test_user)
    db.commit()

    response = client.get("/api/v1/auth/profile", headers=auth_headers(token))

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == "User not found"


def test_startup_creates_no_accounts():
    """Only signup creates users; there is no default account to log into"""
    app = create_app(make_settings())

    with TestClient(app) as client:
        response = client.post(
            "/api/v1/auth/login",
            json={"email": "admin@company.com", "password": "Admin@12345"}
        )

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    db = app.state.session_factory()
    try:
        assert db.query(User).count() == 0
    finally:
        db.close()
