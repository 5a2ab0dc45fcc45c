"""
Admin API Routes - Platform Administration Endpoints

Tenant, user and cross-tenant product management for platform admins. Every endpoint accepts an
admin JWT (Authorization: Bearer) or an admin's X-API-Key.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from src.api.responses import ApiResponse, ok
from src.api.utils.auth import verify_admin_token_or_api_key
from src.api.utils.crud import unwrap
from src.api.utils.pagination import Pagination, paginate, query_filters
from src.app.services.cache import TTLCache
from src.app.services.dtos import (
    Identity,
    PageResponse,
    ProductResponse,
    ProductUpdate,
    TenantCreate,
    TenantResponse,
    TenantUpdate,
    UserCreate,
    UserResponse,
    UserUpdate,
)
from src.app.services.product_service import ProductService
from src.app.services.tenant_service import TenantService
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.user_service import UserService
from src.app.use_cases.auth import IssueTenantTokenUseCase, TenantTokenResponse
from src.depends import get_config, get_tenant_cache, get_unit_of_work
from src.domain.entities import ProductStatus, TenantPlan, TenantStatus

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(verify_admin_token_or_api_key)],
)

TENANT_FILTERS = {"status": TenantStatus, "plan": TenantPlan}
PRODUCT_FILTERS = {"tenant_id": UUID, "status": ProductStatus, "product_type_id": UUID}


# ============================================================================
# Tenants
# ============================================================================


@router.post(
    "/tenants",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[TenantResponse],
)
async def create_tenant(
    command: TenantCreate,
    uow: UnitOfWork = Depends(get_unit_of_work),
    cache: TTLCache = Depends(get_tenant_cache),
):
    """
    Create Tenant

    Raises:
        - 400 Bad Request: Invalid payload (slug must be lowercase kebab-case)
        - 409 Conflict: TENANT_SLUG_EXISTS (slug, domain or subdomain taken)
    """
    tenant = unwrap(await TenantService(uow, cache).create(command))
    return ok(tenant, "Tenant created")


@router.get("/tenants", response_model=ApiResponse[PageResponse[TenantResponse]])
async def list_tenants(
    request: Request,
    page: Pagination = Depends(paginate()),
    uow: UnitOfWork = Depends(get_unit_of_work),
    cache: TTLCache = Depends(get_tenant_cache),
):
    filters = query_filters(request.query_params, TENANT_FILTERS)
    result = await TenantService(uow, cache).list(filters, page.limit, page.offset)
    return ok(unwrap(result))


@router.get("/tenants/{tenant_id}", response_model=ApiResponse[TenantResponse])
async def get_tenant(
    tenant_id: UUID,
    uow: UnitOfWork = Depends(get_unit_of_work),
    cache: TTLCache = Depends(get_tenant_cache),
):
    return ok(unwrap(await TenantService(uow, cache).get(tenant_id)))


@router.put("/tenants/{tenant_id}", response_model=ApiResponse[TenantResponse])
async def update_tenant(
    tenant_id: UUID,
    command: TenantUpdate,
    uow: UnitOfWork = Depends(get_unit_of_work),
    cache: TTLCache = Depends(get_tenant_cache),
):
    """
    Update Tenant

    Partial update. Suspending a tenant takes effect immediately for
    tenant-scoped routes since the resolution cache is cleared.

    Raises:
        - 404 Not Found: TENANT_NOT_FOUND
        - 409 Conflict: TENANT_SLUG_EXISTS
    """
    tenant = unwrap(await TenantService(uow, cache).update(tenant_id, command))
    return ok(tenant, "Tenant updated")


@router.delete("/tenants/{tenant_id}", response_model=ApiResponse[None])
async def delete_tenant(
    tenant_id: UUID,
    uow: UnitOfWork = Depends(get_unit_of_work),
    cache: TTLCache = Depends(get_tenant_cache),
):
    """
    Delete Tenant

    Removes the tenant together with every row it owns.

    Raises:
        - 404 Not Found: TENANT_NOT_FOUND
    """
    unwrap(await TenantService(uow, cache).delete(tenant_id))
    return ok(None, "Tenant deleted")


@router.post(
    "/tenants/{tenant_id}/tokens",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[TenantTokenResponse],
)
async def issue_tenant_token(
    tenant_id: UUID,
    admin: Identity = Depends(verify_admin_token_or_api_key),
    uow: UnitOfWork = Depends(get_unit_of_work),
    config=Depends(get_config),
):
    """
    Issue Tenant Token

    Mints a bearer token for /{tenant_slug}/admin write endpoints of this
    tenant, signed with TENANT_JWT_SECRET.

    Raises:
        - 400 Bad Request: TENANT_INACTIVE
        - 404 Not Found: TENANT_NOT_FOUND
    """
    use_case = IssueTenantTokenUseCase(uow, config)
    return ok(unwrap(await use_case.execute(admin, tenant_id)), "Tenant token issued")


# ============================================================================
# Users
# ============================================================================


def _user_service(uow: UnitOfWork, config) -> UserService:
    return UserService(uow, bcrypt_rounds=config.BCRYPT_ROUNDS)


@router.post(
    "/users",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[UserResponse],
)
async def create_user(
    command: UserCreate,
    uow: UnitOfWork = Depends(get_unit_of_work),
    config=Depends(get_config),
):
    """
    Create User

    Raises:
        - 400 Bad Request: Invalid email or password shorter than 8 characters
        - 409 Conflict: EMAIL_ALREADY_EXISTS
    """
    user = unwrap(await _user_service(uow, config).create(command))
    return ok(user, "User created")


@router.get("/users", response_model=ApiResponse[PageResponse[UserResponse]])
async def list_users(
    page: Pagination = Depends(paginate()),
    uow: UnitOfWork = Depends(get_unit_of_work),
    config=Depends(get_config),
):
    return ok(unwrap(await _user_service(uow, config).list(page.limit, page.offset)))


@router.get("/users/{user_id}", response_model=ApiResponse[UserResponse])
async def get_user(
    user_id: UUID,
    uow: UnitOfWork = Depends(get_unit_of_work),
    config=Depends(get_config),
):
    return ok(unwrap(await _user_service(uow, config).get(user_id)))


@router.put("/users/{user_id}", response_model=ApiResponse[UserResponse])
async def update_user(
    user_id: UUID,
    command: UserUpdate,
    uow: UnitOfWork = Depends(get_unit_of_work),
    config=Depends(get_config),
):
    user = unwrap(await _user_service(uow, config).update(user_id, command))
    return ok(user, "User updated")


@router.delete("/users/{user_id}", response_model=ApiResponse[None])
async def delete_user(
    user_id: UUID,
    uow: UnitOfWork = Depends(get_unit_of_work),
    config=Depends(get_config),
):
    """
    Delete User

    Raises:
        - 404 Not Found: USER_NOT_FOUND
        - 409 Conflict: USER_IN_USE (still referenced by orders)
    """
    unwrap(await _user_service(uow, config).delete(user_id))
    return ok(None, "User deleted")


# ============================================================================
# Products (every tenant)
# ============================================================================


@router.get("/products", response_model=ApiResponse[PageResponse[ProductResponse]])
async def list_all_products(
    request: Request,
    page: Pagination = Depends(paginate()),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    List Products Across Tenants

    Optional filters: tenant_id, status, product_type_id.
    """
    filters = query_filters(request.query_params, PRODUCT_FILTERS)
    return ok(unwrap(await ProductService(uow).list_all(filters, page.limit, page.offset)))


@router.get("/products/{product_id}", response_model=ApiResponse[ProductResponse])
async def get_any_product(product_id: UUID, uow: UnitOfWork = Depends(get_unit_of_work)):
    return ok(unwrap(await ProductService(uow).get_any(product_id)))


@router.put("/products/{product_id}", response_model=ApiResponse[ProductResponse])
async def update_any_product(
    product_id: UUID,
    command: ProductUpdate,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Update Product

    Partial update of any tenant's product. A new product_type_id must
    belong to the product's own tenant.

    Raises:
        - 400 Bad Request: INVALID_PRODUCT_TYPE
        - 404 Not Found: PRODUCT_NOT_FOUND
        - 409 Conflict: PRODUCT_SLUG_EXISTS
    """
    product = unwrap(await ProductService(uow).update_any(product_id, command))
    return ok(product, "Product updated")


@router.delete("/products/{product_id}", response_model=ApiResponse[None])
async def delete_any_product(product_id: UUID, uow: UnitOfWork = Depends(get_unit_of_work)):
    unwrap(await ProductService(uow).delete_any(product_id))
    return ok(None, "Product deleted")
