"""
Tenant Service

Global tenant administration. Deleting a tenant removes every row it owns
in foreign-key order inside one transaction.
"""

import logging
from typing import Any, Dict, Optional
from uuid import UUID

from src.app.repositories.errors import ConstraintViolationError
from src.app.services.base import DEFAULT_PAGE_SIZE, changes_from, null_violation
from src.app.services.cache import TTLCache
from src.app.services.dtos import PageResponse, TenantCreate, TenantResponse, TenantUpdate
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Tenant
from src.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)

# Children before parents
OWNED_REPOSITORIES = (
    "payment_transactions",
    "order_items",
    "orders",
    "product_attributes",
    "products",
    "product_types",
    "workflows",
    "delivery_methods",
    "payment_gateways",
    "integrations",
    "tenant_plugins",
)

TENANT_NOT_FOUND = Error("TENANT_NOT_FOUND", "Tenant not found")
TENANT_EXISTS = Error(
    "TENANT_SLUG_EXISTS", "A tenant with this slug, domain or subdomain already exists"
)


class TenantService:
    def __init__(self, uow: UnitOfWork, cache: Optional[TTLCache] = None):
        self.uow = uow
        self.cache = cache

    def _invalidate(self) -> None:
        # Host and slug keys may both point at the tenant
        if self.cache is not None:
            self.cache.clear()

    async def create(self, command: TenantCreate) -> Result[TenantResponse]:
        async with self.uow:
            try:
                tenant = await self.uow.tenants.create(Tenant(**command.model_dump()))
            except ConstraintViolationError as exc:
                logger.info("Tenant create conflict: %s", exc.message)
                return Return.err(TENANT_EXISTS)

            await self.uow.commit()
            logger.info("Tenant created: %s", tenant.slug)
            return Return.ok(TenantResponse.model_validate(tenant))

    async def get(self, tenant_id: UUID) -> Result[TenantResponse]:
        async with self.uow:
            tenant = await self.uow.tenants.get_by_id(tenant_id)
            if tenant is None:
                return Return.err(TENANT_NOT_FOUND)
            return Return.ok(TenantResponse.model_validate(tenant))

    async def list(
        self,
        filters: Optional[Dict[str, Any]] = None,
        limit: int = DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> Result[PageResponse[TenantResponse]]:
        async with self.uow:
            tenants, total = await self.uow.tenants.list(filters, limit, offset)
            data = [TenantResponse.model_validate(t) for t in tenants]
            return Return.ok(PageResponse[TenantResponse].build(data, total, limit, offset))

    async def update(self, tenant_id: UUID, command: TenantUpdate) -> Result[TenantResponse]:
        fields = changes_from(command)
        error = null_violation(Tenant, fields)
        if error:
            return Return.err(error)

        async with self.uow:
            tenant = await self.uow.tenants.get_by_id(tenant_id)
            if tenant is None:
                return Return.err(TENANT_NOT_FOUND)

            for key, value in fields.items():
                setattr(tenant, key, value)
            try:
                tenant = await self.uow.tenants.update(tenant)
            except ConstraintViolationError as exc:
                logger.info("Tenant update conflict: %s", exc.message)
                return Return.err(TENANT_EXISTS)

            await self.uow.commit()
            self._invalidate()
            return Return.ok(TenantResponse.model_validate(tenant))

    async def delete(self, tenant_id: UUID) -> Result[None]:
        async with self.uow:
            tenant = await self.uow.tenants.get_by_id(tenant_id)
            if tenant is None:
                return Return.err(TENANT_NOT_FOUND)

            for name in OWNED_REPOSITORIES:
                await getattr(self.uow, name).delete_all_for_tenant(tenant.id)
            await self.uow.tenants.delete(tenant)

            await self.uow.commit()
            self._invalidate()
            logger.info("Tenant deleted: %s", tenant_id)
            return Return.ok(None)
