"""Database drivers behind the DB wrapper.

A driver hands out connections and knows its dialect: how a transaction is opened
and how `$1..$n` placeholders reach the backend. Drivers register by name and are
looked up by `open_db`.
"""
from __future__ import annotations

import os
import re
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, ContextManager, Dict, Iterator

import psycopg
from psycopg_pool import ConnectionPool

from .errors import DatabaseError, UnknownDriverError


@dataclass(frozen=True)
class PoolOptions:
    max_open: int = 10
    max_idle: int = 2
    max_lifetime: float = 1800.0  # seconds; 0 keeps the pool default


class Driver:
    name = ""

    def connection(self) -> ContextManager:
        raise NotImplementedError

    def rebind(self, query: str) -> str:
        """Translate `$n` placeholders to the backend form. Raises on malformed text."""
        return query

    def cursor(self, conn):
        return conn.cursor()

    def begin(self, conn) -> None:
        conn.execute("BEGIN")

    def ping(self) -> None:
        with self.connection() as conn:
            conn.execute("SELECT 1")

    def close(self) -> None:
        pass


# Quoted literals are matched first so placeholders inside them are left alone.
_PLACEHOLDER = re.compile(r"'(?:[^']|'')*'|\"(?:[^\"]|\"\")*\"|\$(\d+)")


def _numbered(m: re.Match) -> str:
    n = m.group(1)
    if n is None:
        return m.group(0)
    if int(n) < 1:
        raise DatabaseError(f"invalid placeholder ${n}")
    return "?" + n


class SQLiteDriver(Driver):
    """One short-lived sqlite3 connection per operation; no pool."""

    name = "sqlite"

    def __init__(self, dsn: str, pool: PoolOptions | None = None):
        self.path = dsn
        if dsn != ":memory:":
            os.makedirs(os.path.dirname(os.path.abspath(dsn)) or ".", exist_ok=True)

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(
            self.path,
            check_same_thread=False,
            isolation_level=None,
        )
        try:
            conn.execute("PRAGMA foreign_keys = ON;")
            yield conn
        finally:
            conn.close()

    def rebind(self, query: str) -> str:
        return _PLACEHOLDER.sub(_numbered, query)


class PostgresDriver(Driver):
    """psycopg 3 pool; raw cursors take `$n` placeholders natively."""

    name = "postgres"

    def __init__(self, dsn: str, pool: PoolOptions | None = None):
        pool = pool or PoolOptions()
        max_size = max(1, pool.max_open)
        kwargs = {}
        if pool.max_lifetime > 0:
            kwargs["max_lifetime"] = pool.max_lifetime
        self.pool = ConnectionPool(
            dsn,
            min_size=min(max(0, pool.max_idle), max_size),
            max_size=max_size,
            kwargs={"autocommit": True, "cursor_factory": psycopg.RawCursor},
            open=True,
            **kwargs,
        )

    def connection(self) -> ContextManager:
        return self.pool.connection()

    def close(self) -> None:
        self.pool.close()


_DRIVERS: Dict[str, Callable[..., Driver]] = {}


def register(name: str, factory: Callable[..., Driver]) -> None:
    if name in _DRIVERS:
        raise ValueError(f"register called twice for driver {name}")
    _DRIVERS[name] = factory


def get_driver(name: str) -> Callable[..., Driver]:
    try:
        return _DRIVERS[name]
    except KeyError:
        raise UnknownDriverError(name) from None


register(SQLiteDriver.name, SQLiteDriver)
register(PostgresDriver.name, PostgresDriver)
