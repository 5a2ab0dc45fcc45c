"""
Tenant Directory

Resolves the tenant a request belongs to, by slug or by HTTP host.
Suspended and deleted tenants resolve to TENANT_NOT_FOUND.
"""

from typing import Optional

from src.app.services.cache import TTLCache
from src.app.services.dtos import TenantResponse
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import Tenant, TenantStatus
from src.libs.result import Error, Result, Return


def normalize_host(host: str) -> str:
    """Lower-case host without port"""
    host = (host or "").strip().lower()
    if host.startswith("["):
        return host.split("]")[0] + "]"
    return host.split(":")[0]


class TenantDirectory:
    def __init__(self, uow: UnitOfWork, cache: Optional[TTLCache] = None):
        self.uow = uow
        self.cache = cache

    @staticmethod
    def not_found() -> Error:
        return Error("TENANT_NOT_FOUND", "Tenant not found")

    async def resolve_by_slug(self, slug: str) -> Result[TenantResponse]:
        cache_key = f"slug:{slug}"
        cached = self._cached(cache_key)
        if cached is not None:
            return Return.ok(cached)

        async with self.uow:
            tenant = await self.uow.tenants.get_by_slug(slug)
            return self._resolved(cache_key, tenant)

    async def resolve_by_host(self, host: str) -> Result[TenantResponse]:
        """
        Exact custom-domain match first, then the first host label as
        subdomain ("acme.shop.example.com" -> "acme").

        Only matches are cached, under `domain:<host>` or `subdomain:<label>`.
        Hosts without a cached domain match are checked against custom
        domains before any cached subdomain is used.
        """
        host = normalize_host(host)
        if not host:
            return Return.err(self.not_found())

        domain_key = f"domain:{host}"
        cached = self._cached(domain_key)
        if cached is not None:
            return Return.ok(cached)

        label = host.split(".")[0]
        subdomain_key = f"subdomain:{label}"
        async with self.uow:
            tenant = await self.uow.tenants.get_by_domain(host)
            if tenant is not None and tenant.status == TenantStatus.active:
                return self._resolved(domain_key, tenant)

            cached = self._cached(subdomain_key)
            if cached is not None:
                return Return.ok(cached)
            tenant = await self.uow.tenants.get_by_subdomain(label)
            return self._resolved(subdomain_key, tenant)

    def _cached(self, key: str) -> Optional[TenantResponse]:
        if self.cache is None:
            return None
        return self.cache.get(key)

    def _resolved(self, cache_key: str, tenant: Optional[Tenant]) -> Result[TenantResponse]:
        if tenant is None or tenant.status != TenantStatus.active:
            return Return.err(self.not_found())
        snapshot = TenantResponse.model_validate(tenant)
        if self.cache is not None:
            self.cache.set(cache_key, snapshot)
        return Return.ok(snapshot)
