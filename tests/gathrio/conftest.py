"""Pytest fixtures for gathrio tests."""

import os

# Settings are read once at import time, so the environment must be in place
# before any gathrio module is imported.
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["APP_ENV"] = "test"

from datetime import datetime, timedelta, timezone
from typing import Callable, Generator
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import gathrio.models  # noqa: F401  registers tables on Base.metadata
from gathrio.config import Settings, get_settings
from gathrio.core.security import hash_password
from gathrio.core.tokens import TokenIdentity, TokenService
from gathrio.database import Base, get_db
from gathrio.main import app
from gathrio.models.event import Event, TicketType
from gathrio.models.user import User


@pytest.fixture(scope="function")
def test_db_engine():
    """Create a database engine for testing.

    Uses TEST_DATABASE_URL when set, otherwise a private in-memory SQLite database.
    """
    test_db_url = os.getenv("TEST_DATABASE_URL")

    if test_db_url:
        engine = create_engine(test_db_url, pool_pre_ping=True)
    else:
        engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    # Create all tables
    Base.metadata.create_all(bind=engine)

    yield engine

    # Cleanup: drop all tables
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def test_db_session(test_db_engine) -> Generator[Session, None, None]:
    """Create a database session for testing with automatic rollback."""
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_db_engine,
    )

    session = TestingSessionLocal()

    try:
        yield session
    finally:
        # Rollback any uncommitted changes to clean up test data
        session.rollback()
        session.close()


@pytest.fixture(scope="function")
def test_client(test_db_session: Session) -> Generator[TestClient, None, None]:
    """Create a test client with database dependency override."""

    def override_get_db() -> Generator[Session, None, None]:
        """Override get_db dependency to use test database session."""
        try:
            yield test_db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    client = TestClient(app)

    try:
        yield client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def settings() -> Settings:
    """Process settings as the application sees them."""
    return get_settings()


@pytest.fixture
def token_service(settings: Settings) -> TokenService:
    """Token service bound to the test settings."""
    return TokenService(settings)


@pytest.fixture(scope="function")
def create_user(test_db_session: Session, token_service: TokenService) -> Callable:
    """Factory function to create users directly in the database.

    Returns:
        Function that creates a user with given parameters and returns (user, access token)

    Example:
        ```python
        def test_example(create_user):
            user, token = create_user(
                email="test@example.com",
                password="testpassword123",
            )
            assert user.email == "test@example.com"
        ```
    """

    def _create_user(
        email: str,
        password: str = "testpassword123",
        first_name: str = "Test",
        last_name: str = "User",
        role: str = "attendee",
    ) -> tuple[User, str]:
        now = datetime.now(timezone.utc)
        user = User(
            id=uuid4(),
            email=email,
            password_hash=hash_password(password),
            first_name=first_name,
            last_name=last_name,
            role=role,
            created_at=now,
            updated_at=now,
        )
        test_db_session.add(user)
        test_db_session.commit()
        test_db_session.refresh(user)

        token = token_service.issue_access_token(
            TokenIdentity(user_id=str(user.id), email=user.email, role=user.role)
        )
        return user, token

    return _create_user


@pytest.fixture(scope="function")
def create_event(test_db_session: Session) -> Callable:
    """Factory function to create events with a single ticket type directly in the database."""

    def _create_event(
        organizer: User,
        title: str = "Sample Event",
        start_in: timedelta = timedelta(days=7),
        price: float = 25.0,
        **fields,
    ) -> Event:
        now = datetime.now(timezone.utc)
        start_time = now + start_in
        event = Event(
            id=uuid4(),
            organizer_id=organizer.id,
            title=title,
            start_time=start_time,
            end_time=start_time + timedelta(hours=3),
            created_at=now,
            updated_at=now,
            **fields,
        )
        event.ticket_types = [
            TicketType(
                id=uuid4(),
                name="General Admission",
                attendance_mode="in_person",
                price=price,
                quantity_available=100,
                created_at=now,
            )
        ]
        test_db_session.add(event)
        test_db_session.commit()
        test_db_session.refresh(event)
        return event

    return _create_event
