# Area: Test Fixtures
"""Shared fixtures: a temporary database and an engine on a fixed clock."""

import os
import tempfile

import pytest

from ringside import EngineConfig, FixedClock, RosterEngine
from ringside._store import Database, init_database


@pytest.fixture
def db_path():
    """Create temporary database for testing."""
    fd, path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    init_database(path)
    yield path
    os.unlink(path)


@pytest.fixture
def db(db_path):
    database = Database(db_path)
    yield database
    database.close()


@pytest.fixture
def clock():
    """Clock pinned to 2024-09-01."""
    return FixedClock("2024-09-01")


@pytest.fixture
def engine(db_path, clock):
    """Engine on the temporary database and fixed clock."""
    config = EngineConfig(database_path=db_path, log_file=None)
    roster = RosterEngine(config, clock=clock)
    yield roster
    roster.close()
