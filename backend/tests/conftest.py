"""
Pytest configuration and fixtures for backend tests.

The environment is pinned before the application is imported: an
in-memory SQLite database (shared through a StaticPool) and no background
export processor, so outbox state is only changed by the tests.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["EXPORT_PROCESSOR_ENABLED"] = "false"
os.environ["EXPORT_SYNC"] = "false"
os.environ["ENVIRONMENT"] = "test"

import pytest
from fastapi.testclient import TestClient

from shared.infrastructure.db import SessionLocal, engine, get_db
from options_api.main import app
from options_api.models import Base
from options_api.registry import get_entity
from options_api.services.option_service import OptionService


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    Tables are created before and dropped after every test.
    """
    Base.metadata.create_all(bind=engine)

    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """
    Create a test client with database session override.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def export_dir(tmp_path):
    """Directory for spreadsheet exports."""
    path = tmp_path / "exports"
    path.mkdir()
    return path


@pytest.fixture
def gender_entity():
    """A token-id kind with no extra fields."""
    return get_entity("gender_option")


@pytest.fixture
def account_type_entity():
    """A sequence-id kind."""
    return get_entity("account_type_option")


@pytest.fixture
def country_entity():
    """The exportable kind with dial code and country code."""
    return get_entity("country_option")


@pytest.fixture
def gender_service(db_session, gender_entity):
    return OptionService(db_session, gender_entity)


@pytest.fixture
def account_type_service(db_session, account_type_entity):
    return OptionService(db_session, account_type_entity)


@pytest.fixture
def country_service(db_session, country_entity, export_dir):
    """Country service queueing outbox events."""
    return OptionService(db_session, country_entity, export_sync=False, export_dir=export_dir)


@pytest.fixture
def rwanda():
    return {"name": "Rwanda", "dial_code": "+250", "code": "RW", "description": "East Africa"}


@pytest.fixture
def kenya():
    return {"name": "Kenya", "dial_code": "+254", "code": "KE"}
