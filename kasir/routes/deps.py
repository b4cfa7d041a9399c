from __future__ import annotations

from fastapi import Request

from ..services.category_svc import CategoryService
from ..services.health_svc import HealthService
from ..services.product_svc import ProductService


def get_category_service(request: Request) -> CategoryService:
    return request.app.state.category_service


def get_product_service(request: Request) -> ProductService:
    return request.app.state.product_service


def get_health_service(request: Request) -> HealthService:
    return request.app.state.health_service
