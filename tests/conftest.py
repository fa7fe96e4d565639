import os

# must be set before dynform.core.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SUBMISSION_STORE"] = "database"
os.environ["APP_ENV"] = "test"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from dynform.main import app
from dynform.db.base import Base
from dynform.db.session import get_db
from dynform.core.submission_store import InMemorySubmissionStore, get_submission_store


@pytest.fixture()
def db_session():
    """
    Fresh in-memory SQLite database per test. StaticPool keeps the single
    connection alive so TestClient's worker thread sees the same tables.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(autouse=True)
def override_get_db(db_session):
    def _get_db_override():
        yield db_session

    app.dependency_overrides[get_db] = _get_db_override
    yield
    app.dependency_overrides.clear()


@pytest.fixture()
def client():
    return TestClient(app)


@pytest.fixture()
def memory_store():
    """Swap the SQL store for an isolated in-memory one."""
    store = InMemorySubmissionStore()
    app.dependency_overrides[get_submission_store] = lambda: store
    return store
