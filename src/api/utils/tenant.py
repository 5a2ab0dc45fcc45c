"""
Tenant resolution dependencies.

Both attach the resolved tenant snapshot to request.state.tenant and its id
to request.state.tenant_id for downstream handlers.
"""

from fastapi import Depends, Request

from src.api.error import raise_for_error
from src.app.services.cache import TTLCache
from src.app.services.dtos import TenantResponse
from src.app.services.tenant_directory import TenantDirectory
from src.app.services.unit_of_work import UnitOfWork
from src.depends import get_tenant_cache, get_unit_of_work


def _attach(request: Request, tenant: TenantResponse) -> TenantResponse:
    request.state.tenant = tenant
    request.state.tenant_id = tenant.id
    return tenant


async def resolve_tenant(
    tenant_slug: str,
    request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    cache: TTLCache = Depends(get_tenant_cache),
) -> TenantResponse:
    """Resolve the active tenant named by the {tenant_slug} path segment"""
    result = await TenantDirectory(uow, cache).resolve_by_slug(tenant_slug)
    if result.is_err():
        raise_for_error(result.error)
    return _attach(request, result.value)


async def resolve_tenant_by_host(
    request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    cache: TTLCache = Depends(get_tenant_cache),
) -> TenantResponse:
    """Resolve the active tenant from X-Forwarded-Host or Host"""
    host = request.headers.get("X-Forwarded-Host") or request.headers.get("host", "")
    result = await TenantDirectory(uow, cache).resolve_by_host(host.split(",")[0])
    if result.is_err():
        raise_for_error(result.error)
    return _attach(request, result.value)
