"""Pytest configuration and fixtures."""

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from todo_api.config import Settings
from todo_api.database import Base, get_db
from todo_api.models.todo import Todo  # noqa: F401
from todo_api.models.user import User  # noqa: F401
from todo_api.services.auth import AuthService
from todo_api.services.jwt import TokenService
from todo_api.services.password import PasswordHasher
from todo_api.services.todo import TodoService

TEST_SECRET = "test-secret-key"


@pytest.fixture(name="settings")
def settings_fixture() -> Settings:
    """Settings pointing at an unused in-memory database; tests inject their own session."""
    settings = Settings()
    settings.DATABASE_URL = "sqlite://"
    settings.AUTO_MIGRATE = False
    settings.JWT_SECRET = TEST_SECRET
    settings.JWT_ALGORITHM = "HS256"
    settings.JWT_EXPIRATION_HOURS = 24
    settings.BCRYPT_ROUNDS = 4
    settings.CORS_ALLOW_ORIGINS = ["*"]
    return settings


@pytest.fixture(name="db_session")
def db_session_fixture():
    """Create an in-memory SQLite database for tests."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(name="token_service")
def token_service_fixture() -> TokenService:
    return TokenService(secret_key=TEST_SECRET, ttl=timedelta(hours=24))


@pytest.fixture(name="auth_service")
def auth_service_fixture(token_service: TokenService) -> AuthService:
    return AuthService(hasher=PasswordHasher(rounds=4), tokens=token_service)


@pytest.fixture(name="todo_service")
def todo_service_fixture() -> TodoService:
    return TodoService()


@pytest.fixture(name="app")
def app_fixture(settings: Settings, db_session: Session):
    """Build the application with the DB dependency pointed at the test session."""
    from main import create_app

    app = create_app(settings)

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest.fixture(name="client")
def client_fixture(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture(name="test_user")
def test_user_fixture(app, db_session: Session):
    """Create a test user through the app's own auth service and return (user_data, token)."""
    auth_service: AuthService = app.state.auth_service
    user = auth_service.register(db_session, "test@example.com", "Test User", "password123")
    token = auth_service.tokens.issue(user.id)

    return {
        "user_id": user.id,
        "email": user.email,
        "name": user.name,
        "token": token,
        "headers": {"Authorization": f"Bearer {token}"},
    }


@pytest.fixture(name="other_user")
def other_user_fixture(app, db_session: Session):
    """A second account, for ownership checks."""
    auth_service: AuthService = app.state.auth_service
    user = auth_service.register(db_session, "other@example.com", "Other User", "password456")
    token = auth_service.tokens.issue(user.id)
    return {"user_id": user.id, "token": token, "headers": {"Authorization": f"Bearer {token}"}}
