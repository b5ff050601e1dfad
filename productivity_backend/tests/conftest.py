"""
Shared fixtures: an in-memory SQLite database per test and an HTTP client
wired to it.
"""
import os
import tempfile

# Configure the app before any module reads the environment
os.environ.setdefault("DASHBOARD_DATABASE_URL", "sqlite://")
os.environ.setdefault("DASHBOARD_LOG_DIR", tempfile.mkdtemp(prefix="dashboard-logs-"))
os.environ.setdefault("DASHBOARD_TIMEZONE", "UTC")

import pytest
from datetime import timedelta
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from productivity_backend.database import Base, get_db
from productivity_backend import models  # noqa: F401
from productivity_backend.repositories.settings_repository import SettingsRepository
from productivity_backend.services.date_service import DateService


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def default_settings(db_session):
    """Settings row with defaults (UTC, no day start offset)"""
    return SettingsRepository.get(db_session)


@pytest.fixture
def today(default_settings):
    return DateService.get_effective_date(default_settings)


@pytest.fixture
def yesterday(today):
    return today - timedelta(days=1)


@pytest.fixture
def client(db_session, default_settings):
    from productivity_backend.main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
