"""
Pytest configuration and fixtures
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.deps import get_db
from app.core.security import hash_password
from app.main import create_app
from app.models.user import User, UserRole

TEST_SECRET = "test-secret-key-for-unit-tests-0123456789"
TEST_PASSWORD = "Abcd123!"

# A fixed non-UTC zone so day-key behaviour does not depend on the machine running the tests
TEST_TZ = "Asia/Kolkata"


def make_settings(**overrides) -> Settings:
    values = dict(
        JWT_SECRET_KEY=TEST_SECRET,
        DATABASE_URL="sqlite:///:memory:",
        APP_ENV="local",
        LOG_LEVEL="WARNING",
        ATTENDANCE_TZ=TEST_TZ,
        ATTENDANCE_CLEANUP_ENABLED=False,
        ALLOWED_ORIGINS="*",
        VERSION=None,
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture(scope="function")
def settings():
    return make_settings()


@pytest.fixture(scope="function")
def app(settings):
    """Fresh application with its own in-memory database"""
    return create_app(settings)


@pytest.fixture(scope="function")
def db(app):
    """Database session bound to the app's engine"""
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(app, db):
    """Test client fixture with database override"""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def token_service(app):
    return app.state.token_service


def create_user(
    db: Session,
    email: str = "user@example.com",
    password: str = TEST_PASSWORD,
    full_name: str = "Test User",
    role: UserRole = UserRole.USER,
    is_active: bool = True,
) -> User:
    user = User(
        email=email,
        password_hash=hash_password(password),
        full_name=full_name,
        role=role.value,
        is_active=is_active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def test_user(db: Session):
    """Active user with TEST_PASSWORD"""
    return create_user(db)


@pytest.fixture
def other_user(db: Session):
    return create_user(db, email="other@example.com", full_name="Other User")


def get_auth_token(client, email, password=TEST_PASSWORD):
    """Helper to get auth token"""
    response = client.post(
        "/api/v1/auth/login",
        json={"email": email, "password": password}
    )
    return response.json()["token"]


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers(client, test_user):
    return auth_headers(get_auth_token(client, test_user.email))


@pytest.fixture
def other_headers(client, other_user):
    return auth_headers(get_auth_token(client, other_user.email))
