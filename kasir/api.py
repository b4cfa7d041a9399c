"""
FastAPI app entry point aggregating per-resource routers under kasir/routes.
Keep as `uvicorn kasir.api:app`.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError

from .config import Settings, load_settings
from .constants import INVALID_REQUEST_MESSAGES
from .db import open_db
from .repository.category_repo import CategoryRepository
from .repository.health_repo import HealthRepository
from .repository.product_repo import ProductRepository
from .repository.schema import ensure_schema
from .response import failure
from .routes import categories as categories_routes
from .routes import health as health_routes
from .routes import products as products_routes
from .services.category_svc import CategoryService
from .services.health_svc import HealthService
from .services.product_svc import ProductService

logger = logging.getLogger(__name__)


def _lifespan(settings: Optional[Settings]):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        cfg = settings or load_settings()
        db = open_db(
            cfg.database_driver,
            cfg.dsn,
            pool=cfg.pool_options,
            logger=logging.getLogger("kasir.db"),
            logging_enabled=cfg.database_logging,
        )
        try:
            db.ping()
            if cfg.database_auto_schema:
                ensure_schema(db)
        except Exception:
            db.close()
            raise
        logger.info("database ready (driver=%s)", cfg.database_driver)

        app.state.settings = cfg
        app.state.db = db
        app.state.category_service = CategoryService(CategoryRepository(db))
        app.state.product_service = ProductService(ProductRepository(db))
        app.state.health_service = HealthService(HealthRepository(db))
        try:
            yield
        finally:
            db.close()
            logger.info("database closed")

    return lifespan


async def validation_error_handler(request: Request, exc: RequestValidationError):
    id_msg, body_msg = "invalid id", "invalid request"
    for segment in request.url.path.split("/"):
        if segment in INVALID_REQUEST_MESSAGES:
            id_msg, body_msg = INVALID_REQUEST_MESSAGES[segment]
            break
    errors = exc.errors()
    if any(err.get("loc", ("",))[0] == "path" for err in errors):
        return failure(400, id_msg)
    return failure(400, body_msg)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    app = FastAPI(title="Kasir API", version="1.0.0", lifespan=_lifespan(settings))
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.include_router(health_routes.router)
    app.include_router(categories_routes.router)
    app.include_router(products_routes.router)
    return app


app = create_app()
