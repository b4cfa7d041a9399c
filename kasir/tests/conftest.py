import logging
import os
import sys
from contextlib import contextmanager
from pathlib import Path

import pytest

# Ensure project root on sys.path
_THIS_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _THIS_DIR.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from kasir.config import Settings  # noqa: E402
from kasir.db import DB, open_db  # noqa: E402
from kasir.drivers import Driver  # noqa: E402
from kasir.repository.schema import ensure_schema  # noqa: E402


class FakeCursor:
    def __init__(self, conn):
        self.conn = conn
        self.description = None
        self.lastrowid = None
        self.rowcount = -1
        self._rows = []
        self._fetched = 0

    def execute(self, query, args=()):
        driver = self.conn.driver
        driver.executed.append((query, tuple(args)))
        if driver.exec_error is not None:
            raise driver.exec_error
        self.description = [(c,) for c in driver.columns]
        self._rows = list(driver.rows)
        self.rowcount = driver.rows_affected
        self.lastrowid = driver.last_insert_id

    def fetchone(self):
        driver = self.conn.driver
        if driver.fetch_error is not None and self._fetched >= driver.fetch_error_after:
            raise driver.fetch_error
        if self._fetched >= len(self._rows):
            return None
        row = self._rows[self._fetched]
        self._fetched += 1
        return row

    def close(self):
        self.conn.driver.closed_cursors += 1


class FakeConn:
    def __init__(self, driver):
        self.driver = driver

    def cursor(self):
        return FakeCursor(self)

    def execute(self, query):
        if query == "BEGIN":
            self.driver.begins += 1
            if self.driver.begin_error is not None:
                raise self.driver.begin_error

    def commit(self):
        self.driver.commits += 1
        if self.driver.commit_error is not None:
            raise self.driver.commit_error

    def rollback(self):
        self.driver.rollbacks += 1
        if self.driver.rollback_error is not None:
            raise self.driver.rollback_error


class FakeDriver(Driver):
    """In-memory driver with canned results and injectable failures."""

    name = "fake"

    def __init__(self, columns=(), rows=()):
        self.columns = list(columns)
        self.rows = list(rows)
        self.rows_affected = 0
        self.last_insert_id = None
        self.executed = []
        self.begins = self.commits = self.rollbacks = 0
        self.closed_cursors = 0
        self.connections_released = 0
        self.begin_error = None
        self.commit_error = None
        self.rollback_error = None
        self.prepare_error = None
        self.exec_error = None
        self.fetch_error = None
        self.fetch_error_after = 0
        self.ping_error = None

    @contextmanager
    def connection(self):
        try:
            yield FakeConn(self)
        finally:
            self.connections_released += 1

    def rebind(self, query):
        if self.prepare_error is not None:
            raise self.prepare_error
        return query

    def ping(self):
        if self.ping_error is not None:
            raise self.ping_error


@pytest.fixture()
def fake_driver():
    return FakeDriver()


@pytest.fixture()
def statement_logger():
    return logging.getLogger("kasir.tests.statements")


@pytest.fixture()
def fake_db(fake_driver, statement_logger):
    return DB(fake_driver, logger=statement_logger)


@pytest.fixture(scope="session")
def tmp_db_path(tmp_path_factory):
    return str(tmp_path_factory.mktemp("db") / "kasir_test.db")


@pytest.fixture(scope="session")
def settings(tmp_db_path):
    return Settings(database_driver="sqlite", database_path=tmp_db_path)


@pytest.fixture(scope="session")
def sqlite_db(tmp_db_path):
    db = open_db("sqlite", tmp_db_path)
    ensure_schema(db)
    yield db
    db.close()


@pytest.fixture()
def client(settings):
    from fastapi.testclient import TestClient
    from kasir.api import create_app
    with TestClient(create_app(settings)) as c:
        yield c


@pytest.fixture(autouse=True)
def _clean_db(tmp_db_path):
    # Clean tables before each test for isolation
    if not os.path.exists(tmp_db_path):
        yield
        return
    import sqlite3
    conn = sqlite3.connect(tmp_db_path)
    try:
        for t in ("products", "categories"):
            try:
                conn.execute(f"DELETE FROM {t}")
            except sqlite3.OperationalError:
                pass
        conn.commit()
    finally:
        conn.close()
    yield
