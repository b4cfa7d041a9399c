from __future__ import annotations

import logging

from ..constants import ERR_CATEGORY_NOT_FOUND
from ..errors import NotFoundError
from ..models import Category, HealthCheck
from ..repository.category_repo import CategoryRepository

logger = logging.getLogger(__name__)


class CategoryService:
    def __init__(self, repository: CategoryRepository):
        self.repository = repository

    def api(self) -> HealthCheck:
        return HealthCheck(name="Categories API", is_healthy=True)

    def create_category(self, name: str, description: str) -> None:
        self.repository.create_category(Category(name=name, description=description))

    def update_category(self, category_id: int, name: str, description: str) -> Category:
        """Returns the category as it was before the update."""
        before = self._existing(category_id)
        self.repository.update_category(category_id, Category(name=name, description=description))
        return before

    def delete_category(self, category_id: int) -> Category:
        before = self._existing(category_id)
        self.repository.delete_category(category_id)
        return before

    def get_category_by_id(self, category_id: int) -> Category:
        return self.repository.get_category_by_id(category_id)

    def get_all_categories(self) -> list[Category]:
        return self.repository.get_all_categories()

    def _existing(self, category_id: int) -> Category:
        # any lookup failure reads as "not found" to the caller
        try:
            return self.repository.get_category_by_id(category_id)
        except Exception as e:
            logger.info("category %s lookup failed: %s", category_id, e)
            raise NotFoundError(ERR_CATEGORY_NOT_FOUND) from e
