from __future__ import annotations


class DatabaseError(Exception):
    """Base class for errors raised by the database wrapper itself.

    Driver errors (sqlite3, psycopg) are never wrapped in this type; they reach
    the caller unchanged.
    """


class NoRowsError(DatabaseError):
    def __init__(self, message: str = "no rows in result set"):
        super().__init__(message)


class RowsClosedError(DatabaseError):
    def __init__(self, message: str = "rows are closed"):
        super().__init__(message)


class ColumnNotFoundError(DatabaseError):
    def __init__(self, column: str):
        self.column = column
        super().__init__(f"could not find column '{column}'")


class UnknownDriverError(DatabaseError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"unknown driver {name!r} (forgotten register?)")


class NotFoundError(Exception):
    """Domain lookup miss; the message is the user-facing text."""
