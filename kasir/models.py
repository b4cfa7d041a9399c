from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from .mapper import column


@dataclass
class Category:
    id: int = column("id", default=0)
    name: str = column("name", default="")
    description: str = column("description", default="")
    created_at: Any = column("created_at", default=None)
    updated_at: Any = column("updated_at", default=None)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass
class CategoryRef:
    """Category columns carried on a product row (aliased in the JOIN)."""
    id: int = column("category_id", default=0)
    name: str = column("category_name", default="")


@dataclass
class Product:
    id: int = column("id", default=0)
    name: str = column("name", default="")
    price: int = column("price", default=0)
    stock: int = column("stock", default=0)
    created_at: Any = column("created_at", default=None)
    updated_at: Any = column("updated_at", default=None)
    category: CategoryRef = field(default_factory=CategoryRef)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "stock": self.stock,
            "category_id": self.category.id,
            "category_name": self.category.name,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass
class HealthCheck:
    name: str
    is_healthy: bool
    error: Optional[str] = None
