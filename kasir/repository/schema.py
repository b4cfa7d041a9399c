from __future__ import annotations

from ..db import DB, Tx

SQLITE_DDL = (
    """
    CREATE TABLE IF NOT EXISTS categories (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        description TEXT NOT NULL DEFAULT '',
        created_at TEXT,
        updated_at TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS products (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        price INTEGER NOT NULL DEFAULT 0,
        stock INTEGER NOT NULL DEFAULT 0,
        category_id INTEGER NOT NULL REFERENCES categories(id),
        created_at TEXT,
        updated_at TEXT
    )
    """,
)

POSTGRES_DDL = (
    """
    CREATE TABLE IF NOT EXISTS categories (
        id BIGSERIAL PRIMARY KEY,
        name TEXT NOT NULL,
        description TEXT NOT NULL DEFAULT '',
        created_at TIMESTAMPTZ,
        updated_at TIMESTAMPTZ
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS products (
        id BIGSERIAL PRIMARY KEY,
        name TEXT NOT NULL,
        price BIGINT NOT NULL DEFAULT 0,
        stock BIGINT NOT NULL DEFAULT 0,
        category_id BIGINT NOT NULL REFERENCES categories(id),
        created_at TIMESTAMPTZ,
        updated_at TIMESTAMPTZ
    )
    """,
)


def ensure_schema(db: DB) -> None:
    """Create the tables if missing. Not a migration tool: existing tables are left as they are."""
    ddl = POSTGRES_DDL if db.driver.name == "postgres" else SQLITE_DDL

    def create(tx: Tx):
        for stmt_sql in ddl:
            tx.with_stmt(stmt_sql, lambda stmt: stmt.exec())

    db.with_tx(create)
