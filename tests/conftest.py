"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from chessbench.api.app import app
from chessbench.core.config import Settings, get_settings
from chessbench.db.database import get_db
from chessbench.db.schema import Base

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)


@pytest.fixture
def db_session_repo() -> Generator[Session, None, None]:
    """Connection to a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session_repo: Session) -> Generator[TestClient, None, None]:
    """HTTP client against the app, using the test database. No API secret configured."""
    app.dependency_overrides[get_db] = lambda: db_session_repo
    app.dependency_overrides[get_settings] = lambda: Settings()
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def api_secret() -> str:
    return "let-me-in"


@pytest.fixture
def secured_client(client: TestClient, api_secret: str) -> TestClient:
    """Same as `client`, but creating games requires the x-api-key header."""
    app.dependency_overrides[get_settings] = lambda: Settings(api_secret=api_secret)
    return client
