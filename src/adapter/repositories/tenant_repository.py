from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.base import flush_or_conflict
from src.app.repositories.tenant_repository import ITenantRepository
from src.domain.base import utc_now
from src.domain.entities import Tenant


class TenantRepository(ITenantRepository):
    """Tenant repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, tenant_id: UUID) -> Optional[Tenant]:
        """Get tenant by ID"""
        stmt = select(Tenant).where(Tenant.id == tenant_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_slug(self, slug: str) -> Optional[Tenant]:
        stmt = select(Tenant).where(Tenant.slug == slug)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_domain(self, domain: str) -> Optional[Tenant]:
        stmt = select(Tenant).where(Tenant.domain == domain)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_subdomain(self, subdomain: str) -> Optional[Tenant]:
        stmt = select(Tenant).where(Tenant.subdomain == subdomain)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def list(
        self, filters: Optional[Dict[str, Any]] = None, limit: int = 50, offset: int = 0
    ) -> Tuple[List[Tenant], int]:
        """List tenants, optionally filtered by status or plan"""
        criteria = []
        for key in ("status", "plan"):
            if filters and filters.get(key) is not None:
                criteria.append(getattr(Tenant, key) == filters[key])

        count_stmt = select(func.count()).select_from(Tenant).where(*criteria)
        total = (await self.session.exec(count_stmt)).one()

        stmt = (
            select(Tenant)
            .where(*criteria)
            .order_by(Tenant.created_at.desc(), Tenant.id)
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.exec(stmt)
        return list(result.all()), total

    async def create(self, tenant: Tenant) -> Tenant:
        """Create a new tenant"""
        self.session.add(tenant)
        await flush_or_conflict(self.session)
        await self.session.refresh(tenant)
        return tenant

    async def update(self, tenant: Tenant) -> Tenant:
        """Update existing tenant"""
        tenant.updated_at = utc_now()
        self.session.add(tenant)
        await flush_or_conflict(self.session)
        await self.session.refresh(tenant)
        return tenant

    async def delete(self, tenant: Tenant) -> None:
        await self.session.delete(tenant)
        await flush_or_conflict(self.session)
