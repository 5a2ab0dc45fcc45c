"""
Public storefront routes.

The tenant comes from the path slug, or from the Host header for custom
domains and subdomains. Only active products are visible; a caller with a
valid tenant token is identified but sees the same data.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Request

from src.api.responses import ApiResponse, ok
from src.api.utils.auth import optional_tenant_token
from src.api.utils.crud import unwrap
from src.api.utils.pagination import Pagination, paginate, query_filters
from src.api.utils.tenant import resolve_tenant, resolve_tenant_by_host
from src.app.services.dtos import (
    PageResponse,
    ProductResponse,
    StorefrontProductResponse,
    TenantResponse,
)
from src.app.services.product_service import ProductService
from src.app.services.unit_of_work import UnitOfWork
from src.depends import get_unit_of_work

router = APIRouter(tags=["Storefront"])

STOREFRONT_FILTERS = {"product_type_id": UUID}
storefront_page = paginate(default_limit=20)


async def _list_products(request: Request, tenant: TenantResponse, page: Pagination, uow):
    filters = query_filters(request.query_params, STOREFRONT_FILTERS)
    result = await ProductService(uow).list_public(tenant.id, filters, page.limit, page.offset)
    return ok(unwrap(result))


@router.get(
    "/{tenant_slug}/storefront/products",
    response_model=ApiResponse[PageResponse[ProductResponse]],
)
async def list_storefront_products(
    request: Request,
    tenant: TenantResponse = Depends(resolve_tenant),
    _=Depends(optional_tenant_token),
    page: Pagination = Depends(storefront_page),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    return await _list_products(request, tenant, page, uow)


@router.get(
    "/{tenant_slug}/storefront/products/{product_id}",
    response_model=ApiResponse[StorefrontProductResponse],
)
async def get_storefront_product(
    product_id: UUID,
    tenant: TenantResponse = Depends(resolve_tenant),
    _=Depends(optional_tenant_token),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Storefront Product Detail

    Includes the product type and attributes.

    Raises:
        - 404 Not Found: TENANT_NOT_FOUND, PRODUCT_NOT_FOUND (also for
                         draft or archived products)
    """
    return ok(unwrap(await ProductService(uow).get_public(tenant.id, product_id)))


@router.get("/storefront/products", response_model=ApiResponse[PageResponse[ProductResponse]])
async def list_host_storefront_products(
    request: Request,
    tenant: TenantResponse = Depends(resolve_tenant_by_host),
    _=Depends(optional_tenant_token),
    page: Pagination = Depends(storefront_page),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    return await _list_products(request, tenant, page, uow)


@router.get(
    "/storefront/products/{product_id}",
    response_model=ApiResponse[StorefrontProductResponse],
)
async def get_host_storefront_product(
    product_id: UUID,
    tenant: TenantResponse = Depends(resolve_tenant_by_host),
    _=Depends(optional_tenant_token),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    return ok(unwrap(await ProductService(uow).get_public(tenant.id, product_id)))
