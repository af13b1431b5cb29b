# tests/conftest.py
"""Shared fixtures: an in-memory database, a seeded roster and an API client."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from cleanup_tracker.config import settings
from cleanup_tracker.database import create_tables, get_db
from cleanup_tracker.main import app
from cleanup_tracker.models.user import User
from cleanup_tracker.services.user_service import seed_default_users


@pytest.fixture(autouse=True)
def fast_pin_hashing(monkeypatch):
    """bcrypt's minimum cost keeps the PIN scans quick."""
    monkeypatch.setattr(settings, "PIN_HASH_ROUNDS", 4)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def roster(db):
    """Default roster keyed by employee number (MGR001, DET001, SALES001, ...)."""
    seed_default_users(db)
    return {u.employee_number: u for u in db.query(User).all()}


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
