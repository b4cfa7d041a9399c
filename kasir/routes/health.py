from __future__ import annotations

from fastapi import APIRouter, Depends

from ..response import health_response
from ..services.health_svc import HealthService
from .deps import get_health_service

router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("/service")
def api_health_service(svc: HealthService = Depends(get_health_service)):
    return health_response(svc.api())


@router.get("/db")
def api_health_db(svc: HealthService = Depends(get_health_service)):
    return health_response(svc.db())
