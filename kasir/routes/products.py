from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..logs import OperationLogContext
from ..response import failure, health_response, status_for, success
from ..services.product_svc import ProductService
from .deps import get_product_service

router = APIRouter(prefix="/api/products", tags=["products"])


class ProductRequest(BaseModel):
    name: str
    price: int
    stock: int
    category_id: int


@router.get("/health")
def api_products_health(svc: ProductService = Depends(get_product_service)):
    return health_response(svc.api())


@router.get("")
def api_product_list(svc: ProductService = Depends(get_product_service)):
    try:
        items = svc.get_all_products()
    except Exception as e:
        return failure(status_for(e), f"Products retrieved failed: {e}")
    return success(200, "Products retrieved successfully", [p.to_dict() for p in items])


@router.post("", status_code=201)
def api_product_create(body: ProductRequest, svc: ProductService = Depends(get_product_service)):
    log = OperationLogContext("CREATE_PRODUCT")
    log.set_payload(body.model_dump())
    try:
        svc.create_product(body.name, body.price, body.stock, body.category_id)
    except Exception as e:
        log.write("ERROR", str(e))
        return failure(status_for(e), f"Product created failed: {e}")
    log.write("OK")
    return success(201, "Product created successfully")


@router.get("/{id}")
def api_product_get(id: int, svc: ProductService = Depends(get_product_service)):
    try:
        product = svc.get_product_by_id(id)
    except Exception as e:
        return failure(status_for(e), f"Product retrieved failed: {e}")
    return success(200, "Product retrieved successfully", product.to_dict())


@router.put("/{id}")
def api_product_update(id: int, body: ProductRequest, svc: ProductService = Depends(get_product_service)):
    log = OperationLogContext("UPDATE_PRODUCT")
    log.set_entity("PRODUCT", str(id))
    log.set_payload(body.model_dump())
    try:
        before = svc.update_product(id, body.name, body.price, body.stock, body.category_id)
        log.set_before(before.to_dict())
        log.set_after({"id": id, **body.model_dump()})
    except Exception as e:
        log.write("ERROR", str(e))
        return failure(status_for(e), f"Product updated failed: {e}")
    log.write("OK")
    return success(200, "Product updated successfully")


@router.delete("/{id}")
def api_product_delete(id: int, svc: ProductService = Depends(get_product_service)):
    log = OperationLogContext("DELETE_PRODUCT")
    log.set_entity("PRODUCT", str(id))
    try:
        before = svc.delete_product(id)
        log.set_before(before.to_dict())
    except Exception as e:
        log.write("ERROR", str(e))
        return failure(status_for(e), f"Product delete failed: {e}")
    log.write("OK")
    return success(200, "Product deleted successfully")
