# Set test environment before any application or db imports.
import os

os.environ["TESTING"] = "true"
os.environ["TESTING_DATABASE_URL"] = "sqlite:///:memory:"
os.environ["STORE_BACKEND"] = "sql"

import copy

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import event
from sqlalchemy.orm import Session

from db import SessionLocal, get_db
from main import app
from models import Base
from models.document import Document  # noqa: F401 - register with Base
from slipway_core.record_store import COORDINATES, DETAILS, RecordStoreError


def _get_engine():
    """Engine used by the app (in-memory when TESTING=true)."""
    return SessionLocal.kw["bind"]


@pytest.fixture(scope="session")
def engine():
    """One in-memory engine per test run; create tables once."""
    eng = _get_engine()
    if eng.dialect.name == "sqlite":
        # pysqlite does not emit BEGIN itself, so per-test rollback would not undo commits.
        @event.listens_for(eng, "connect")
        def _disable_pysqlite_begin(dbapi_connection, connection_record):
            dbapi_connection.isolation_level = None

        @event.listens_for(eng, "begin")
        def _emit_begin(conn):
            conn.exec_driver_sql("BEGIN")

        # StaticPool may already hold the connection; apply the setting to it too.
        with eng.connect() as conn:
            conn.connection.driver_connection.isolation_level = None
    Base.metadata.create_all(eng)
    return eng


@pytest.fixture
def db_session(engine):
    """Function-scoped session; each test runs in a transaction that is rolled back."""
    connection = engine.connect()
    trans = connection.begin()
    session = Session(bind=connection, join_transaction_mode="create_savepoint")
    session.begin_nested()
    try:
        yield session
    finally:
        session.close()
        if trans.is_active:
            trans.rollback()
        connection.close()


def _override_get_db(session):
    """Return a generator that yields the given session (for dependency override)."""
    def override():
        yield session
    return override


@pytest.fixture
def client(db_session):
    """API test client; overrides get_db to use the test db_session, cleared on teardown."""
    app.dependency_overrides[get_db] = _override_get_db(db_session)
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """Identity headers as forwarded by the authentication provider."""
    return {"X-User-Id": "user-1", "X-User-Name": "Test Sailor", "X-User-Email": "sailor@example.com"}


class MemoryRecordStore:
    """Dict-backed record store for unit tests. Records every call; can be told to fail."""

    def __init__(self, tables=None):
        self.tables = copy.deepcopy(tables) if tables else {}
        self.calls: list[tuple] = []
        self.fail_reads = False
        self.fail_writes = False
        self._next_key = 0

    async def read_collection(self, collection):
        self.calls.append(("read_collection", collection))
        if self.fail_reads:
            raise RecordStoreError("read failed")
        return copy.deepcopy(self.tables.get(collection)) or None

    async def read(self, collection, key):
        self.calls.append(("read", collection, key))
        if self.fail_reads:
            raise RecordStoreError("read failed")
        return copy.deepcopy(self.tables.get(collection, {}).get(key))

    async def write(self, collection, key, value):
        self.calls.append(("write", collection, key))
        if self.fail_writes:
            raise RecordStoreError("write failed")
        self.tables.setdefault(collection, {})[key] = copy.deepcopy(value)

    async def write_field(self, collection, key, field, value):
        self.calls.append(("write_field", collection, key, field))
        if self.fail_writes:
            raise RecordStoreError("write failed")
        self.tables[collection][key][field] = copy.deepcopy(value)

    async def push(self, collection, value):
        self._next_key += 1
        key = f"new-{self._next_key}"
        await self.write(collection, key, value)
        return key


@pytest.fixture
def memory_store():
    """Store holding one complete slipway ("slip-1") with no images."""
    return MemoryRecordStore(
        {
            COORDINATES: {"slip-1": ["50.1", "-5.2"]},
            DETAILS: {"slip-1": {"Name": "Harbour Slip", "Suitability": "Large trailer needs a car", "imgs": []}},
        }
    )


@pytest.fixture
def make_store():
    """Factory for MemoryRecordStore with arbitrary tables."""
    return MemoryRecordStore
