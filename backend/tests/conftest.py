"""Pytest fixtures for the SkillBridge backend.

Provides reusable test fixtures for:
- Database session on a fresh in-memory SQLite database per test
- Tenants of both types (provider "ses", consumer "end")
- Users of every role with bearer tokens
- A TestClient wired to the test database

Usage:
    def test_inbox(client, consumer_admin, consumer_tenant):
        response = client.get(
            f"/tenants/{consumer_tenant.id}/requests/inbox",
            headers=auth_headers(consumer_admin),
        )
        assert response.status_code == 200
"""

import os
import sys
from pathlib import Path

# Set environment variables BEFORE any application imports
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("PASSWORD_PEPPER", "test-pepper-secret-key-32-chars-long")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-key-256-bits-minimum-length-required-for-security")
os.environ.setdefault("LOG_JSON", "false")

backend_src = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(backend_src))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from typing import Generator

from skillbridge.database import get_db
from skillbridge.models import Base

from fixtures.multi_tenant import (  # noqa: F401
    provider_tenant,
    consumer_tenant,
    other_provider_tenant,
    provider_admin,
    provider_manager,
    provider_member,
    consumer_admin,
    consumer_member,
    other_admin,
    provider_talent,
    consumer_talent,
    other_talent,
    consumer_opportunity,
)


# One shared in-memory connection so the app and the test see the same data
test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database session for each test.

    Creates all tables before the test and drops them after.
    """
    Base.metadata.create_all(bind=test_engine)

    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """Test client without credentials, using the test database.

    Authenticate individual calls with ``auth_headers(user)``.
    """
    from skillbridge.main import app

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
