"""
Thin wrapper around driver connections.

`DB.with_stmt` / `DB.with_tx` scope statements and transactions to a callback,
`Rows.scan` / `Row.scan` map the current row onto dataclasses (see `kasir.mapper`),
and every scoped statement is logged once on the injected logger.

    db = open_db("sqlite", "kasir.db")
    db.with_tx(lambda tx: tx.with_stmt(
        "INSERT INTO categories (name) VALUES ($1)",
        lambda stmt: stmt.exec("drink"),
    ))
"""
from __future__ import annotations

import logging
from contextlib import ExitStack
from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar

from .drivers import Driver, PoolOptions, get_driver
from .errors import (
    ColumnNotFoundError,
    DatabaseError,
    NoRowsError,
    RowsClosedError,
    UnknownDriverError,
)
from .mapper import Var, column, map_columns

__all__ = [
    "DB", "Tx", "Stmt", "Rows", "Row", "Result", "open_db",
    "Var", "column",
    "DatabaseError", "NoRowsError", "RowsClosedError", "ColumnNotFoundError", "UnknownDriverError",
]

T = TypeVar("T")

_OPEN = "open"
_EXHAUSTED = "exhausted"
_CLOSED = "closed"
_ERRORED = "errored"


@dataclass(frozen=True)
class Result:
    last_insert_id: Optional[int]
    rows_affected: int


class Rows:
    """Forward-only cursor over a query result."""

    def __init__(self, cursor):
        self._cursor = cursor
        self._columns = [d[0] for d in (cursor.description or ())]
        self._current: Optional[tuple] = None
        self._state = _OPEN
        self._released = False

    @property
    def closed(self) -> bool:
        return self._state == _CLOSED

    def columns(self) -> list[str]:
        if self._state == _CLOSED:
            raise RowsClosedError()
        return list(self._columns)

    def next(self) -> bool:
        """Advance onto the next row. False once exhausted; fetch errors propagate."""
        if self._state != _OPEN:
            return False
        try:
            row = self._cursor.fetchone()
        except Exception:
            self._state = _ERRORED
            self._current = None
            self._release()
            raise
        if row is None:
            self._state = _EXHAUSTED
            self._current = None
            self._release()
            return False
        self._current = tuple(row)
        return True

    def scan(self, *dest):
        """
        Copy the current row into ``dest``.

        Each destination is a dataclass instance (filled in place), a dataclass type
        (instantiated and filled) or a `Var` (receives the column at its position).
        Returns the filled object for a single destination, otherwise a tuple.
        """
        if self._state in (_CLOSED, _ERRORED):
            raise RowsClosedError()
        if self._state == _EXHAUSTED:
            raise NoRowsError()
        if self._current is None:
            raise DatabaseError("scan called without calling next")
        slots, targets = map_columns(self.columns(), dest)
        for slot, value in zip(slots, self._current):
            if slot is not None:
                slot(value)
        return targets[0] if len(targets) == 1 else tuple(targets)

    def close(self) -> None:
        self._state = _CLOSED
        self._current = None
        self._release()

    def _release(self) -> None:
        if not self._released:
            self._released = True
            self._cursor.close()

    def __enter__(self) -> "Rows":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class Row:
    """At most one row; errors from the query are deferred until `scan`."""

    def __init__(self, rows: Optional[Rows] = None, err: Optional[BaseException] = None,
                 closer: Optional[Callable[[], Any]] = None):
        self._rows = rows
        self._err = err
        self._closer = closer

    def error(self) -> Optional[BaseException]:
        return self._err

    def scan(self, *dest):
        try:
            if self._err is not None:
                raise self._err
            rows = self._rows
            if rows.closed:
                raise RowsClosedError()
            if not rows.next():
                raise NoRowsError()
            return rows.scan(*dest)
        finally:
            self.close()

    def close(self) -> None:
        if self._rows is not None:
            self._rows.close()
        if self._closer is not None:
            closer, self._closer = self._closer, None
            closer()


class Stmt:
    """A statement bound to one SQL text on one connection."""

    def __init__(self, driver: Driver, conn, query: str):
        self.sql = query
        self._driver = driver
        self._conn = conn
        self._native = driver.rebind(query)
        self._active: Optional[Rows] = None
        self.closed = False

    def exec(self, *args) -> Result:
        self._check_open()
        cursor = self._driver.cursor(self._conn)
        try:
            cursor.execute(self._native, args)
            return Result(getattr(cursor, "lastrowid", None), cursor.rowcount)
        finally:
            cursor.close()

    def query(self, row_fn: Callable[[Rows], Any], *args) -> None:
        """Call ``row_fn`` for each row in driver order; the first exception stops iteration."""
        rows = self._open_rows(args)
        try:
            while rows.next():
                row_fn(rows)
        finally:
            rows.close()

    def query_row(self, *args) -> Row:
        try:
            rows = self._open_rows(args)
        except Exception as e:
            return Row(err=e)
        return Row(rows)

    def close(self) -> None:
        if self._active is not None:
            self._active.close()
            self._active = None
        self.closed = True

    def _check_open(self) -> None:
        if self.closed:
            raise DatabaseError("statement is closed")
        # one live cursor per statement
        if self._active is not None:
            self._active.close()
            self._active = None

    def _open_rows(self, args) -> Rows:
        self._check_open()
        cursor = self._driver.cursor(self._conn)
        try:
            cursor.execute(self._native, args)
        except Exception:
            cursor.close()
            raise
        self._active = Rows(cursor)
        return self._active


def _run_stmt(stmt: Stmt, fn: Callable[[Stmt], T], logger: Optional[logging.Logger], prefix: str) -> T:
    err: Optional[BaseException] = None
    try:
        return fn(stmt)
    except Exception as e:
        err = e
        raise
    finally:
        stmt.close()
        if logger is not None:
            level = logging.WARNING if err is not None else logging.INFO
            logger.log(level, "%s: %s, err: %s", prefix, stmt.sql, err)


class Tx:
    def __init__(self, db: "DB", conn):
        self._db = db
        self._conn = conn
        self.done = False

    def with_stmt(self, query: str, fn: Callable[[Stmt], T]) -> T:
        if self.done:
            raise DatabaseError("transaction has already been committed or rolled back")
        stmt = Stmt(self._db.driver, self._conn, query)
        return _run_stmt(stmt, fn, self._db.statement_logger, "tx")


class DB:
    def __init__(self, driver: Driver, logger: Optional[logging.Logger] = None, logging_enabled: bool = True):
        self.driver = driver
        self.logger = logger or logging.getLogger(__name__)
        self.logging_enabled = logging_enabled

    @property
    def statement_logger(self) -> Optional[logging.Logger]:
        return self.logger if self.logging_enabled else None

    def with_stmt(self, query: str, fn: Callable[[Stmt], T]) -> T:
        with self.driver.connection() as conn:
            stmt = Stmt(self.driver, conn, query)
            return _run_stmt(stmt, fn, self.statement_logger, "db")

    def with_tx(self, fn: Callable[[Tx], T]) -> T:
        with self.driver.connection() as conn:
            self.driver.begin(conn)
            tx = Tx(self, conn)
            try:
                result = fn(tx)
            except Exception:
                tx.done = True
                try:
                    conn.rollback()
                except Exception as rb_err:
                    self.logger.warning("tx: rollback failed: %s", rb_err)
                raise
            tx.done = True
            conn.commit()
            return result

    def query_row(self, query: str, *args) -> Row:
        """One-shot single-row query; the connection is held until the row is scanned or closed."""
        stack = ExitStack()
        try:
            conn = stack.enter_context(self.driver.connection())
            stmt = Stmt(self.driver, conn, query)
            stack.callback(stmt.close)
            rows = stmt._open_rows(args)
        except Exception as e:
            stack.close()
            return Row(err=e)
        return Row(rows, closer=stack.close)

    def ping(self) -> None:
        self.driver.ping()

    def close(self) -> None:
        self.driver.close()


def open_db(
    driver_name: str,
    dsn: str,
    *,
    pool: Optional[PoolOptions] = None,
    logger: Optional[logging.Logger] = None,
    logging_enabled: bool = True,
) -> DB:
    factory = get_driver(driver_name)
    return DB(factory(dsn, pool or PoolOptions()), logger=logger, logging_enabled=logging_enabled)
