"""Pytest configuration and shared fixtures."""

import os
import tempfile
from typing import Generator

# Keep config, database and logs out of the user's home directory
_test_data_dir = tempfile.mkdtemp(prefix="forge_tracker_tests_")
os.environ.setdefault("FORGE_USER_DATA_DIR", _test_data_dir)
os.environ.setdefault("FORGE_LOG_TO_FILE", "0")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from forge_tracker.db.database import init_db
from forge_tracker.repositories.memory_impl import MemoryKeyValueStore
from forge_tracker.repositories.sqlalchemy_impl import SQLAlchemyKeyValueStore
from forge_tracker.services.tracker import TickClock, TrackerService
from forge_tracker.session.controller import SessionController
from forge_tracker.store.domain_store import DomainStore

from tests.helpers.clock import START, FakeClock


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: Pure in-memory tests")
    config.addinivalue_line("markers", "integration: Tests that touch a real database")


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock(START)


@pytest.fixture
def memory_storage() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def domain_store(memory_storage) -> DomainStore:
    """A store loaded with the default domains."""
    store = DomainStore(memory_storage)
    store.load()
    return store


@pytest.fixture
def controller(domain_store, fake_clock) -> SessionController:
    return SessionController(domain_store, fake_clock)


@pytest.fixture
def tracker(domain_store) -> TrackerService:
    clock = TickClock(lambda: START)
    controller = SessionController(domain_store, clock)
    return TrackerService(domain_store, controller, clock)


@pytest.fixture
def test_engine():
    """In-memory SQLite engine shared across connections."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(test_engine) -> Generator:
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture
def sql_storage(db_session) -> SQLAlchemyKeyValueStore:
    return SQLAlchemyKeyValueStore(db_session)
