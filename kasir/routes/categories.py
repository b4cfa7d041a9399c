from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..logs import OperationLogContext
from ..response import failure, health_response, status_for, success
from ..services.category_svc import CategoryService
from .deps import get_category_service

router = APIRouter(prefix="/api/categories", tags=["categories"])


class CategoryRequest(BaseModel):
    name: str
    description: str = ""


@router.get("/health")
def api_categories_health(svc: CategoryService = Depends(get_category_service)):
    return health_response(svc.api())


@router.get("")
def api_category_list(svc: CategoryService = Depends(get_category_service)):
    try:
        items = svc.get_all_categories()
    except Exception as e:
        return failure(status_for(e), f"Categories retrieved failed: {e}")
    return success(200, "Categories retrieved successfully", [c.to_dict() for c in items])


@router.post("", status_code=201)
def api_category_create(body: CategoryRequest, svc: CategoryService = Depends(get_category_service)):
    log = OperationLogContext("CREATE_CATEGORY")
    log.set_payload(body.model_dump())
    try:
        svc.create_category(body.name, body.description)
    except Exception as e:
        log.write("ERROR", str(e))
        return failure(status_for(e), f"Category created failed: {e}")
    log.write("OK")
    return success(201, "Category created successfully")


@router.get("/{id}")
def api_category_get(id: int, svc: CategoryService = Depends(get_category_service)):
    try:
        category = svc.get_category_by_id(id)
    except Exception as e:
        return failure(status_for(e), f"Category retrieved failed: {e}")
    return success(200, "Category retrieved successfully", category.to_dict())


@router.put("/{id}")
def api_category_update(id: int, body: CategoryRequest, svc: CategoryService = Depends(get_category_service)):
    log = OperationLogContext("UPDATE_CATEGORY")
    log.set_entity("CATEGORY", str(id))
    log.set_payload(body.model_dump())
    try:
        before = svc.update_category(id, body.name, body.description)
        log.set_before(before.to_dict())
        log.set_after({"id": id, **body.model_dump()})
    except Exception as e:
        log.write("ERROR", str(e))
        return failure(status_for(e), f"Category updated failed: {e}")
    log.write("OK")
    return success(200, "Category updated successfully")


@router.delete("/{id}")
def api_category_delete(id: int, svc: CategoryService = Depends(get_category_service)):
    log = OperationLogContext("DELETE_CATEGORY")
    log.set_entity("CATEGORY", str(id))
    try:
        before = svc.delete_category(id)
        log.set_before(before.to_dict())
    except Exception as e:
        log.write("ERROR", str(e))
        return failure(status_for(e), f"Category delete failed: {e}")
    log.write("OK")
    return success(200, "Category deleted successfully")
