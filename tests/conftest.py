"""Shared pytest fixtures for fundbook tests."""

import tempfile
import os
import pytest

from fundbook.database.factories import create_sqlite_store
from fundbook.domain.accounts import AccountDirectory
from fundbook.domain.cache import LookupCache
from fundbook.domain.constants import MOVEMENTS_COLLECTION, TRANSACTIONS_COLLECTION
from fundbook.domain.records import RecordService
from fundbook.domain.replay import BalanceReplayEngine


@pytest.fixture
def db_path():
    """Path to a temporary database file, removed after the test."""
    fd, path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    yield path

    if os.path.exists(path):
        os.unlink(path)


@pytest.fixture
def temp_store(db_path):
    """Create a temporary document store for testing."""
    store = create_sqlite_store(database_path=db_path)
    # Store the path for tests that need it
    store.database_path = db_path
    store.connect()
    store.initialize_schema()

    yield store

    store.disconnect()


@pytest.fixture
def tenant():
    return "org-test"


@pytest.fixture
def clock():
    """Manually advanced clock for cache expiry tests."""

    class Clock:
        def __init__(self):
            self.now = 1000.0

        def __call__(self):
            return self.now

        def advance(self, seconds):
            self.now += seconds

    return Clock()


@pytest.fixture
def directory(temp_store, clock):
    """Create an AccountDirectory with a controllable cache clock."""
    return AccountDirectory(temp_store, cache=LookupCache(clock=clock))


@pytest.fixture
def seeded_directory(directory, tenant):
    """AccountDirectory whose tenant has the default chart of accounts."""
    directory.seed_default_chart(tenant)
    return directory


@pytest.fixture
def record_service(temp_store, seeded_directory):
    """Create a RecordService sharing the seeded directory."""
    return RecordService(temp_store, seeded_directory)


@pytest.fixture
def engine(temp_store):
    """Create a BalanceReplayEngine with the default write policy."""
    return BalanceReplayEngine(temp_store)


@pytest.fixture
def add_transaction(temp_store, tenant):
    """Insert a raw transaction document, the way request handlers store them."""

    def _add(**fields):
        return temp_store.add(tenant, TRANSACTIONS_COLLECTION, fields)

    return _add


@pytest.fixture
def add_movement(temp_store, tenant):
    """Insert a raw cash movement document."""

    def _add(**fields):
        return temp_store.add(tenant, MOVEMENTS_COLLECTION, fields)

    return _add


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
