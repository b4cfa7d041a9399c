"""Uniform JSON envelope: {"code": "1000"|"2000", "message": ..., "data"?: ...}."""
from __future__ import annotations

from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from .constants import ERROR_CODE, SUCCESS_CODE
from .errors import NotFoundError
from .models import HealthCheck


def write_json(status_code: int, code: int, message: Any, data: Any = None) -> JSONResponse:
    body = {"code": str(code), "message": message}
    if data is not None:
        body["data"] = data
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


def success(status_code: int, message: Any, data: Any = None) -> JSONResponse:
    return write_json(status_code, SUCCESS_CODE, message, data)


def failure(status_code: int, message: Any) -> JSONResponse:
    return write_json(status_code, ERROR_CODE, message)


def status_for(err: Exception) -> int:
    return 404 if isinstance(err, NotFoundError) else 500


def health_response(check: HealthCheck) -> JSONResponse:
    if check.is_healthy:
        return success(200, f"{check.name} is healthy")
    if check.error:
        return failure(503, f"{check.name} is not healthy because {check.error}")
    return failure(503, f"{check.name} is not healthy")
