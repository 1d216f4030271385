"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
Database tests run against SQLite, configured so SAVEPOINTs behave like
they do on PostgreSQL.
"""
import sys
from pathlib import Path

import pytest
from loguru import logger
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.db.models import Base, XPConfig, XPFilter  # noqa: E402
from src.xp.repository import FilterRepository  # noqa: E402
from src.xp.seeder import StaticFilterSeeder  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (file-backed database)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


def make_sqlite_engine(url: str = "sqlite://"):
    """SQLite engine with pysqlite's implicit transaction handling disabled."""
    kwargs = {"connect_args": {"check_same_thread": False}}
    if url == "sqlite://":
        kwargs["poolclass"] = StaticPool
    engine = create_engine(url, **kwargs)

    @event.listens_for(engine, "connect")
    def _do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def sqlite_engine_factory():
    """Expose make_sqlite_engine to tests that need their own database."""
    return make_sqlite_engine


@pytest.fixture(autouse=True)
def setup_logging():
    """Keep loguru quiet and restore a default sink after each test."""
    logger.remove()
    logger.add(sys.stderr, level="WARNING")

    yield

    logger.remove()
    logger.add(sys.stderr, level="WARNING")


@pytest.fixture
def log_messages():
    """Collect loguru messages emitted during the test."""
    messages = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def engine():
    engine = make_sqlite_engine()
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    session = Session(engine)
    yield session
    session.close()


@pytest.fixture
def repository(session):
    return FilterRepository(session)


@pytest.fixture
def seeder(repository):
    return StaticFilterSeeder(repository)


@pytest.fixture
def make_courses(session):
    """Insert block_xp_config rows for the given course ids."""

    def _make(*courseids):
        session.add_all([XPConfig(courseid=courseid) for courseid in courseids])
        session.commit()

    return _make


@pytest.fixture
def make_filters(session):
    """Insert plain filters for a course at the given sort orders."""

    def _make(courseid, *sortorders, points=10):
        session.add_all(
            [
                XPFilter(courseid=courseid, sortorder=sortorder, points=points, ruledata=None)
                for sortorder in sortorders
            ]
        )
        session.commit()

    return _make
