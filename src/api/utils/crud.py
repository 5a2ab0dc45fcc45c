"""
Router factory for tenant-owned resources.

Every resource under /{tenant_slug}/admin exposes the same five endpoints.
Reads only need the tenant to resolve unless protect_reads is set, writes
need a tenant token for that tenant.
"""

from typing import Callable, Dict, Optional, Type
from uuid import UUID

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel

from src.api.error import raise_for_error
from src.api.responses import ApiResponse, ok
from src.api.utils.auth import verify_tenant_token
from src.api.utils.pagination import Pagination, paginate, query_filters
from src.api.utils.tenant import resolve_tenant
from src.app.services.base import TenantScopedService
from src.app.services.dtos import PageResponse, TenantResponse
from src.app.services.unit_of_work import UnitOfWork
from src.depends import get_unit_of_work


def unwrap(result):
    """Value of a successful Result, else raise the mapped HTTP error"""
    if result.is_err():
        raise_for_error(result.error)
    return result.value


def crud_router(
    path: str,
    label: str,
    service_factory: Callable[[UnitOfWork], TenantScopedService],
    create_model: Type[BaseModel],
    update_model: Type[BaseModel],
    response_model: Type[BaseModel],
    filters: Optional[Dict[str, Type]] = None,
    protect_reads: bool = False,
    include_create: bool = True,
    router: Optional[APIRouter] = None,
) -> APIRouter:
    router = router or APIRouter(prefix="/{tenant_slug}/admin")
    name = path.strip("/").replace("-", "_")
    allowed = filters or {}
    writer = [Depends(verify_tenant_token)]
    reader = writer if protect_reads else []

    async def create(
        command: create_model,
        tenant: TenantResponse = Depends(resolve_tenant),
        uow: UnitOfWork = Depends(get_unit_of_work),
    ):
        created = unwrap(await service_factory(uow).create(tenant.id, command))
        return ok(created, f"{label} created")

    async def list_all(
        request: Request,
        tenant: TenantResponse = Depends(resolve_tenant),
        page: Pagination = Depends(paginate()),
        uow: UnitOfWork = Depends(get_unit_of_work),
    ):
        criteria = query_filters(request.query_params, allowed)
        service = service_factory(uow)
        return ok(unwrap(await service.list(tenant.id, criteria, page.limit, page.offset)))

    async def get_one(
        entity_id: UUID,
        tenant: TenantResponse = Depends(resolve_tenant),
        uow: UnitOfWork = Depends(get_unit_of_work),
    ):
        return ok(unwrap(await service_factory(uow).get(tenant.id, entity_id)))

    async def update(
        entity_id: UUID,
        command: update_model,
        tenant: TenantResponse = Depends(resolve_tenant),
        uow: UnitOfWork = Depends(get_unit_of_work),
    ):
        updated = unwrap(await service_factory(uow).update(tenant.id, entity_id, command))
        return ok(updated, f"{label} updated")

    async def delete(
        entity_id: UUID,
        tenant: TenantResponse = Depends(resolve_tenant),
        uow: UnitOfWork = Depends(get_unit_of_work),
    ):
        unwrap(await service_factory(uow).delete(tenant.id, entity_id))
        return ok(None, f"{label} deleted")

    item_path = path + "/{entity_id}"
    if include_create:
        router.add_api_route(
            path,
            create,
            methods=["POST"],
            status_code=status.HTTP_201_CREATED,
            response_model=ApiResponse[response_model],
            dependencies=writer,
            name=f"create_{name}",
        )
    router.add_api_route(
        path,
        list_all,
        methods=["GET"],
        response_model=ApiResponse[PageResponse[response_model]],
        dependencies=reader,
        name=f"list_{name}",
    )
    router.add_api_route(
        item_path,
        get_one,
        methods=["GET"],
        response_model=ApiResponse[response_model],
        dependencies=reader,
        name=f"get_{name}",
    )
    router.add_api_route(
        item_path,
        update,
        methods=["PUT"],
        response_model=ApiResponse[response_model],
        dependencies=writer,
        name=f"update_{name}",
    )
    router.add_api_route(
        item_path,
        delete,
        methods=["DELETE"],
        response_model=ApiResponse[None],
        dependencies=writer,
        name=f"delete_{name}",
    )
    return router
