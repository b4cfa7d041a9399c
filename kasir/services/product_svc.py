from __future__ import annotations

import logging

from ..constants import ERR_CATEGORY_NOT_FOUND, ERR_PRODUCT_NOT_FOUND
from ..errors import NotFoundError
from ..models import CategoryRef, HealthCheck, Product
from ..repository.product_repo import ProductRepository

logger = logging.getLogger(__name__)


class ProductService:
    def __init__(self, repository: ProductRepository):
        self.repository = repository

    def api(self) -> HealthCheck:
        return HealthCheck(name="Products API", is_healthy=True)

    def create_product(self, name: str, price: int, stock: int, category_id: int) -> None:
        category = self._category(category_id)
        self.repository.create_product(
            Product(name=name, price=price, stock=stock, category=CategoryRef(id=category.id, name=category.name))
        )

    def update_product(self, product_id: int, name: str, price: int, stock: int, category_id: int) -> Product:
        """Returns the product as it was before the update."""
        before = self._product(product_id)
        category = self._category(category_id)
        self.repository.update_product(
            product_id,
            Product(name=name, price=price, stock=stock, category=CategoryRef(id=category.id, name=category.name)),
        )
        return before

    def delete_product(self, product_id: int) -> Product:
        before = self._product(product_id)
        self.repository.delete_product(product_id)
        return before

    def get_product_by_id(self, product_id: int) -> Product:
        return self.repository.get_product_by_id(product_id)

    def get_all_products(self) -> list[Product]:
        return self.repository.get_all_products()

    def _product(self, product_id: int) -> Product:
        try:
            return self.repository.get_product_by_id(product_id)
        except Exception as e:
            logger.info("product %s lookup failed: %s", product_id, e)
            raise NotFoundError(ERR_PRODUCT_NOT_FOUND) from e

    def _category(self, category_id: int):
        try:
            return self.repository.get_category_by_id(category_id)
        except Exception as e:
            logger.info("category %s lookup failed: %s", category_id, e)
            raise NotFoundError(ERR_CATEGORY_NOT_FOUND) from e
