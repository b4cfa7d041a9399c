from __future__ import annotations

from typing import Optional

from ..constants import ERR_CATEGORY_NOT_FOUND, ERR_PRODUCT_NOT_FOUND
from ..db import DB, NoRowsError, Rows, Stmt, Tx, Var
from ..errors import NotFoundError
from ..models import Category, Product
from ..timeutil import now_text, parse_time

INSERT_PRODUCT = (
    "INSERT INTO products (name, price, stock, category_id, created_at, updated_at) "
    "VALUES ($1, $2, $3, $4, $5, $6)"
)
UPDATE_PRODUCT = (
    "UPDATE products SET name = $1, price = $2, stock = $3, category_id = $4, updated_at = $5 "
    "WHERE id = $6"
)
DELETE_PRODUCT = "DELETE FROM products WHERE id = $1"
SELECT_PRODUCTS = (
    "SELECT products.id, products.name, products.price, products.stock, "
    "products.created_at, products.updated_at, "
    "categories.id as category_id, categories.name as category_name "
    "FROM products JOIN categories ON products.category_id = categories.id"
)
SELECT_PRODUCT = SELECT_PRODUCTS + " WHERE products.id = $1"
SELECT_CATEGORY = "SELECT id, name FROM categories WHERE id = $1"


def _localize(product: Product) -> Product:
    product.created_at = parse_time(product.created_at)
    product.updated_at = parse_time(product.updated_at)
    return product


class ProductRepository:
    def __init__(self, db: DB):
        self.db = db

    def create_product(self, product: Product) -> None:
        now = now_text()

        def run(tx: Tx):
            tx.with_stmt(
                INSERT_PRODUCT,
                lambda stmt: stmt.exec(product.name, product.price, product.stock, product.category.id, now, now),
            )

        self.db.with_tx(run)

    def update_product(self, product_id: int, product: Product) -> None:
        now = now_text()

        def run(tx: Tx):
            tx.with_stmt(
                UPDATE_PRODUCT,
                lambda stmt: stmt.exec(product.name, product.price, product.stock, product.category.id, now, product_id),
            )

        self.db.with_tx(run)

    def delete_product(self, product_id: int) -> None:
        self.db.with_tx(lambda tx: tx.with_stmt(DELETE_PRODUCT, lambda stmt: stmt.exec(product_id)))

    def find_product_by_id(self, product_id: int) -> Optional[Product]:
        product = Product()

        def query(stmt: Stmt):
            stmt.query(lambda rows: rows.scan(product), product_id)

        self.db.with_stmt(SELECT_PRODUCT, query)
        # same zero-id rule as categories: id 0 reads as "not found"
        if product.id == 0:
            return None
        return _localize(product)

    def get_product_by_id(self, product_id: int) -> Product:
        product = self.find_product_by_id(product_id)
        if product is None:
            raise NotFoundError(ERR_PRODUCT_NOT_FOUND)
        return product

    def get_all_products(self) -> list[Product]:
        products: list[Product] = []

        def collect(rows: Rows):
            products.append(rows.scan(Product))

        self.db.with_stmt(SELECT_PRODUCTS + " ORDER BY products.id", lambda stmt: stmt.query(collect))
        return [_localize(p) for p in products]

    def get_category_by_id(self, category_id: int) -> Category:
        cid, name = Var(), Var()

        def query(stmt: Stmt):
            stmt.query_row(category_id).scan(cid, name)

        try:
            self.db.with_stmt(SELECT_CATEGORY, query)
        except NoRowsError:
            raise NotFoundError(ERR_CATEGORY_NOT_FOUND) from None
        return Category(id=cid.value, name=name.value)
