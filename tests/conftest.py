"""Shared test fixtures."""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from userhub.config import Settings
from userhub.constants import Role
from userhub.database import Base
from userhub.dependencies.auth import get_jwt_service, get_user_service
from userhub.main import app
from userhub.models import User
from userhub.rate_limiter import limiter
from userhub.services.email_service import EmailService
from userhub.services.file_storage import LocalFileStorage
from userhub.services.jwt_service import JWTService
from userhub.services.password_service import PasswordService
from userhub.services.user_service import UserService

TEST_PASSWORD = "testpassword123"


@pytest.fixture
def test_settings(tmp_path):
    """Settings with fast bcrypt, fixed keys and a temporary upload dir."""
    return Settings(
        _env_file=None,
        jwt_secret_key="test-secret-key-for-jwt-signing-0123456789",
        bcrypt_rounds=4,
        aes_key="000102030405060708090a0b0c0d0e0f",
        upload_dir=str(tmp_path / "assets"),
        email_enabled=False,
    )


@pytest.fixture
def engine():
    """In-memory SQLite engine shared across threads via StaticPool."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    """A session for arranging and inspecting data directly."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def mailer():
    return MagicMock(spec=EmailService)


@pytest.fixture
def jwt_service(test_settings):
    return JWTService(test_settings)


@pytest.fixture
def password_service(test_settings):
    return PasswordService(test_settings)


@pytest.fixture
def user_service(session_factory, test_settings, mailer, jwt_service, password_service):
    return UserService(
        session_factory,
        test_settings,
        jwt_service=jwt_service,
        password_service=password_service,
        mailer=mailer,
        file_storage=LocalFileStorage(test_settings),
    )


@pytest.fixture
def make_user(session_factory, password_service):
    """Factory creating committed users directly in the database."""

    def _make_user(
        email: str = "test@example.com",
        password: str = TEST_PASSWORD,
        name: str = "Test User",
        role: Role = Role.USER,
        is_verified: bool = True,
    ) -> User:
        session = session_factory()
        try:
            user = User(
                name=name,
                email=email,
                password=password_service.hash_password(password),
                role=role,
                is_verified=is_verified,
            )
            session.add(user)
            session.commit()
            return user
        finally:
            session.close()

    return _make_user


@pytest.fixture
def test_user(make_user):
    """A verified regular user."""
    return make_user()


@pytest.fixture
def client(user_service, jwt_service):
    """Test client wired to the in-memory database."""
    # Clear rate limiter storage between tests
    limiter.reset()

    app.dependency_overrides[get_user_service] = lambda: user_service
    app.dependency_overrides[get_jwt_service] = lambda: jwt_service

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(jwt_service):
    """Build an Authorization header for a user."""

    def _auth_headers(user: User) -> dict:
        token, _ = jwt_service.generate_access_token(user.id, user.role)
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers
