from uuid import UUID

from config import ApplicationConfig
from src.api.utils.jwt import generate_tenant_token
from src.app.services.dtos import Identity
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import TenantStatus
from src.libs.result import Error, Result, Return
from .dtos import TenantTokenResponse


class IssueTenantTokenUseCase:
    """
    Mint a tenant-scoped bearer token for an authenticated admin.

    Business Rules:
    - Tenant must exist and be active
    - Token carries the admin identity plus tenant_id/tenant_slug
    """

    def __init__(self, uow: UnitOfWork, config=ApplicationConfig):
        self.uow = uow
        self.config = config

    async def execute(self, admin: Identity, tenant_id: UUID) -> Result[TenantTokenResponse]:
        async with self.uow:
            tenant = await self.uow.tenants.get_by_id(tenant_id)
            if tenant is None:
                return Return.err(Error("TENANT_NOT_FOUND", "Tenant not found"))
            if tenant.status != TenantStatus.active:
                return Return.err(Error("TENANT_INACTIVE", "Tenant is not active"))

            token = generate_tenant_token(
                admin.id,
                admin.email,
                admin.role,
                str(tenant.id),
                tenant.slug,
                config=self.config,
            )
            return Return.ok(
                TenantTokenResponse(
                    token=token,
                    tenant_id=str(tenant.id),
                    tenant_slug=tenant.slug,
                    expires_in=self.config.JWT_EXPIRES_HOURS * 3600,
                )
            )
