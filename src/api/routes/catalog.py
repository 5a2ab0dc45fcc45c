"""
Catalog routes: product types, products and product attributes of a tenant.
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends

from src.api.responses import ApiResponse, ok
from src.api.utils.auth import verify_tenant_token
from src.api.utils.crud import crud_router, unwrap
from src.api.utils.tenant import resolve_tenant
from src.app.services.dtos import (
    AttributeSet,
    ProductAttributeResponse,
    ProductCreate,
    ProductResponse,
    ProductTypeCreate,
    ProductTypeResponse,
    ProductTypeUpdate,
    ProductUpdate,
    TenantResponse,
)
from src.app.services.product_service import ProductService
from src.app.services.product_type_service import ProductTypeService
from src.app.services.unit_of_work import UnitOfWork
from src.depends import get_unit_of_work
from src.domain.entities import ProductStatus

product_types = crud_router(
    "/product-types",
    "Product type",
    ProductTypeService,
    ProductTypeCreate,
    ProductTypeUpdate,
    ProductTypeResponse,
    filters={"is_active": bool, "category": str},
)

router = APIRouter(prefix="/{tenant_slug}/admin", tags=["Products"])


@router.get(
    "/products/{product_id}/attributes",
    response_model=ApiResponse[List[ProductAttributeResponse]],
)
async def list_product_attributes(
    product_id: UUID,
    tenant: TenantResponse = Depends(resolve_tenant),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    return ok(unwrap(await ProductService(uow).list_attributes(tenant.id, product_id)))


@router.put(
    "/products/{product_id}/attributes/{key}",
    response_model=ApiResponse[ProductAttributeResponse],
    dependencies=[Depends(verify_tenant_token)],
)
async def set_product_attribute(
    product_id: UUID,
    key: str,
    command: AttributeSet,
    tenant: TenantResponse = Depends(resolve_tenant),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Set Product Attribute

    Creates the attribute or replaces its value and type.

    Raises:
        - 401 Unauthorized / 403 Forbidden: missing or foreign tenant token
        - 404 Not Found: PRODUCT_NOT_FOUND
    """
    result = await ProductService(uow).set_attribute(tenant.id, product_id, key, command)
    return ok(unwrap(result), "Attribute saved")


@router.delete(
    "/products/{product_id}/attributes/{key}",
    response_model=ApiResponse[None],
    dependencies=[Depends(verify_tenant_token)],
)
async def delete_product_attribute(
    product_id: UUID,
    key: str,
    tenant: TenantResponse = Depends(resolve_tenant),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    unwrap(await ProductService(uow).delete_attribute(tenant.id, product_id, key))
    return ok(None, "Attribute deleted")


products = crud_router(
    "/products",
    "Product",
    ProductService,
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    filters={"status": ProductStatus, "product_type_id": UUID},
    router=router,
)
