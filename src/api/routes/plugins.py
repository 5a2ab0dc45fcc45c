"""
Plugin routes.

/admin/plugins manages the global catalog (admin auth).
/{tenant_slug}/admin/plugins manages one tenant's installations (tenant
token for writes).
"""

from typing import List, Union
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from src.api.responses import ApiResponse, ok
from src.api.utils.auth import verify_admin_token_or_api_key, verify_tenant_token
from src.api.utils.crud import unwrap
from src.api.utils.pagination import Pagination, paginate
from src.api.utils.tenant import resolve_tenant
from src.app.services.dtos import (
    PageResponse,
    PluginConfigUpdate,
    PluginCreate,
    PluginInstall,
    PluginResponse,
    PluginUpdate,
    TenantPluginResponse,
    TenantResponse,
)
from src.app.services.plugin_service import PluginService
from src.app.services.unit_of_work import UnitOfWork
from src.depends import get_unit_of_work

catalog_router = APIRouter(
    prefix="/admin/plugins",
    tags=["Plugins"],
    dependencies=[Depends(verify_admin_token_or_api_key)],
)
router = APIRouter(prefix="/{tenant_slug}/admin/plugins", tags=["Plugins"])


# ============================================================================
# Global catalog
# ============================================================================


@catalog_router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[PluginResponse],
)
async def register_plugin(
    command: PluginCreate,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Register Plugin

    Validates the manifest (name, slug, semver version, hooks) and adds the
    plugin to the catalog.

    Raises:
        - 400 Bad Request: INVALID_MANIFEST
        - 409 Conflict: PLUGIN_SLUG_EXISTS
    """
    return ok(unwrap(await PluginService(uow).register(command)), "Plugin registered")


@catalog_router.get("", response_model=ApiResponse[PageResponse[PluginResponse]])
async def list_plugins(
    page: Pagination = Depends(paginate()),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    return ok(unwrap(await PluginService(uow).list(page.limit, page.offset)))


@catalog_router.get("/{plugin_id}", response_model=ApiResponse[PluginResponse])
async def get_plugin(plugin_id: UUID, uow: UnitOfWork = Depends(get_unit_of_work)):
    return ok(unwrap(await PluginService(uow).get(plugin_id)))


@catalog_router.put("/{plugin_id}", response_model=ApiResponse[PluginResponse])
async def update_plugin(
    plugin_id: UUID,
    command: PluginUpdate,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    return ok(unwrap(await PluginService(uow).update(plugin_id, command)), "Plugin updated")


@catalog_router.delete("/{plugin_id}", response_model=ApiResponse[None])
async def delete_plugin(plugin_id: UUID, uow: UnitOfWork = Depends(get_unit_of_work)):
    """
    Delete Plugin

    Raises:
        - 404 Not Found: PLUGIN_NOT_FOUND
        - 409 Conflict: PLUGIN_IN_USE (still installed by a tenant)
    """
    unwrap(await PluginService(uow).delete(plugin_id))
    return ok(None, "Plugin deleted")


# ============================================================================
# Tenant installations
# ============================================================================


@router.get(
    "",
    response_model=ApiResponse[Union[List[TenantPluginResponse], PageResponse[PluginResponse]]],
)
async def list_tenant_plugins(
    installed: bool = Query(False),
    page: Pagination = Depends(paginate()),
    tenant: TenantResponse = Depends(resolve_tenant),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Catalog plugins, or this tenant's installations with ?installed=true"""
    service = PluginService(uow)
    if installed:
        return ok(unwrap(await service.list_installations(tenant.id)))
    return ok(unwrap(await service.list(page.limit, page.offset)))


@router.get("/installed/{plugin_id}", response_model=ApiResponse[TenantPluginResponse])
async def get_installed_plugin(
    plugin_id: UUID,
    tenant: TenantResponse = Depends(resolve_tenant),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    return ok(unwrap(await PluginService(uow).get_installation(tenant.id, plugin_id)))


@router.post(
    "/{plugin_id}/install",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[TenantPluginResponse],
    dependencies=[Depends(verify_tenant_token)],
)
async def install_plugin(
    plugin_id: UUID,
    command: PluginInstall,
    tenant: TenantResponse = Depends(resolve_tenant),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Install Plugin

    Config is merged over the manifest's setting defaults. The installation
    stays inactive unless enabled is true.

    Raises:
        - 404 Not Found: PLUGIN_NOT_FOUND
        - 409 Conflict: PLUGIN_ALREADY_INSTALLED
    """
    result = await PluginService(uow).install(
        tenant.id, plugin_id, config=command.config, enabled=command.enabled
    )
    return ok(unwrap(result), "Plugin installed")


@router.put(
    "/{plugin_id}/config",
    response_model=ApiResponse[TenantPluginResponse],
    dependencies=[Depends(verify_tenant_token)],
)
async def update_plugin_config(
    plugin_id: UUID,
    command: PluginConfigUpdate,
    tenant: TenantResponse = Depends(resolve_tenant),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await PluginService(uow).update_config(tenant.id, plugin_id, command.config)
    return ok(unwrap(result), "Plugin configuration updated")


@router.post(
    "/{plugin_id}/enable",
    response_model=ApiResponse[TenantPluginResponse],
    dependencies=[Depends(verify_tenant_token)],
)
async def enable_plugin(
    plugin_id: UUID,
    tenant: TenantResponse = Depends(resolve_tenant),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Enable Plugin

    Raises:
        - 400 Bad Request: PLUGIN_CONFIG_INCOMPLETE (required settings unset)
        - 404 Not Found: PLUGIN_NOT_INSTALLED
    """
    return ok(unwrap(await PluginService(uow).enable(tenant.id, plugin_id)), "Plugin enabled")


@router.post(
    "/{plugin_id}/disable",
    response_model=ApiResponse[TenantPluginResponse],
    dependencies=[Depends(verify_tenant_token)],
)
async def disable_plugin(
    plugin_id: UUID,
    tenant: TenantResponse = Depends(resolve_tenant),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    return ok(unwrap(await PluginService(uow).disable(tenant.id, plugin_id)), "Plugin disabled")


@router.delete(
    "/{plugin_id}",
    response_model=ApiResponse[None],
    dependencies=[Depends(verify_tenant_token)],
)
async def uninstall_plugin(
    plugin_id: UUID,
    tenant: TenantResponse = Depends(resolve_tenant),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    unwrap(await PluginService(uow).uninstall(tenant.id, plugin_id))
    return ok(None, "Plugin uninstalled")
