"""Pytest configuration and fixtures."""

import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from rideshare.database import Base, get_db
from rideshare.main import create_app
from rideshare.services.identity import IdentityVerificationError, VerifiedIdentity

# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    # Running in Docker - use PostgreSQL test database
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace("/sharecar", "/sharecar_test")
else:
    # Running locally - use SQLite
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

connect_args = {"check_same_thread": False} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeIdentityVerifier:
    """Accepts any token as the email it was issued for; tokens starting with 'invalid' fail."""

    def __init__(self):
        self.tokens: list[str] = []

    async def verify(self, token: str) -> VerifiedIdentity:
        self.tokens.append(token)
        if token.startswith("invalid"):
            raise IdentityVerificationError("token rejected (400)")
        name = token.split("@")[0].replace(".", " ").title()
        return VerifiedIdentity(email=token, name=name)


class RecordingNotifier:
    """Records post change notifications instead of queueing them."""

    def __init__(self):
        self.calls: list[tuple[int, int]] = []

    def notify_post_changed(self, post_id: int, actor_id: int) -> None:
        self.calls.append((post_id, actor_id))


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        # For PostgreSQL, create the test database
        from sqlalchemy_utils import create_database, database_exists

        # Create test database if it doesn't exist
        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    Base.metadata.create_all(bind=engine)
    yield
    # Don't drop database - just leave it for next run (each test cleans up after itself)


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture
def other_db():
    """A second session on the test database, for concurrent writers."""
    session = TestingSessionLocal()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def identity_verifier():
    return FakeIdentityVerifier()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def app(db, identity_verifier, notifier):
    """Build an app wired to the fake collaborators and the test database."""
    test_app = create_app(identity_verifier=identity_verifier, notifier=notifier)

    def override_get_db():
        try:
            yield db
        finally:
            pass

    test_app.dependency_overrides[get_db] = override_get_db
    yield test_app
    test_app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    """Create a test client. Session cookies persist across requests."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def login_as(client):
    """Log the client in as a user, registering a phone number unless told not to.

    Logging in again as someone else replaces the session cookie.
    """

    def _login(email: str, phnum: str | None = "831-555-0100") -> int:
        response = client.post("/users/login", json={"token": email})
        assert response.status_code == 200
        user_id = response.json()["user_id"]
        if phnum is not None:
            register = client.post("/users/register", json={"phnum": phnum})
            assert register.json() == {"success": True}
        return user_id

    return _login


def make_post(**overrides) -> dict:
    """Build a post body for /posts/create."""
    post = {
        "departure_time": "2026-11-02T08:30:00",
        "origin": "UCSC",
        "destination": "San Jose",
        "memo": "Leaving from the East Remote lot",
        "driver_needed": False,
        "total_seats": 3,
    }
    post.update(overrides)
    return post


@pytest.fixture
def post_body():
    """Factory for /posts/create bodies."""
    return make_post
