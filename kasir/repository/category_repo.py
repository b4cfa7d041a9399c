from __future__ import annotations

from typing import Optional

from ..constants import ERR_CATEGORY_NOT_FOUND
from ..db import DB, Rows, Stmt, Tx
from ..errors import NotFoundError
from ..models import Category
from ..timeutil import now_text, parse_time

INSERT_CATEGORY = "INSERT INTO categories (name, description, created_at, updated_at) VALUES ($1, $2, $3, $4)"
UPDATE_CATEGORY = "UPDATE categories SET name = $1, description = $2, updated_at = $3 WHERE id = $4"
DELETE_CATEGORY = "DELETE FROM categories WHERE id = $1"
SELECT_CATEGORY = "SELECT id, name, description, created_at, updated_at FROM categories WHERE id = $1"
SELECT_CATEGORIES = "SELECT id, name, description, created_at, updated_at FROM categories ORDER BY id"


def _localize(category: Category) -> Category:
    category.created_at = parse_time(category.created_at)
    category.updated_at = parse_time(category.updated_at)
    return category


class CategoryRepository:
    def __init__(self, db: DB):
        self.db = db

    def create_category(self, category: Category) -> None:
        now = now_text()

        def run(tx: Tx):
            tx.with_stmt(INSERT_CATEGORY, lambda stmt: stmt.exec(category.name, category.description, now, now))

        self.db.with_tx(run)

    def update_category(self, category_id: int, category: Category) -> None:
        now = now_text()

        def run(tx: Tx):
            tx.with_stmt(UPDATE_CATEGORY, lambda stmt: stmt.exec(category.name, category.description, now, category_id))

        self.db.with_tx(run)

    def delete_category(self, category_id: int) -> None:
        self.db.with_tx(lambda tx: tx.with_stmt(DELETE_CATEGORY, lambda stmt: stmt.exec(category_id)))

    def find_category_by_id(self, category_id: int) -> Optional[Category]:
        category = Category()

        def query(stmt: Stmt):
            stmt.query(lambda rows: rows.scan(category), category_id)

        self.db.with_stmt(SELECT_CATEGORY, query)
        # A row whose id is 0 cannot be told apart from "nothing fetched"; it is reported as missing.
        if category.id == 0:
            return None
        return _localize(category)

    def get_category_by_id(self, category_id: int) -> Category:
        category = self.find_category_by_id(category_id)
        if category is None:
            raise NotFoundError(ERR_CATEGORY_NOT_FOUND)
        return category

    def get_all_categories(self) -> list[Category]:
        categories: list[Category] = []

        def collect(rows: Rows):
            categories.append(rows.scan(Category))

        self.db.with_stmt(SELECT_CATEGORIES, lambda stmt: stmt.query(collect))
        return [_localize(c) for c in categories]
