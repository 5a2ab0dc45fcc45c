from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.base import (
    TenantScopedRepository,
    flush_or_conflict,
    tenant_filter,
)
from src.app.repositories.plugin_repository import IPluginRepository, ITenantPluginRepository
from src.domain.base import utc_now
from src.domain.entities import Plugin, TenantPlugin, TenantPluginStatus


class PluginRepository(IPluginRepository):
    """Global plugin catalog, not tenant-owned"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, plugin_id: UUID) -> Optional[Plugin]:
        stmt = select(Plugin).where(Plugin.id == plugin_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_slug(self, slug: str) -> Optional[Plugin]:
        stmt = select(Plugin).where(Plugin.slug == slug)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def list(self, limit: int = 50, offset: int = 0) -> Tuple[List[Plugin], int]:
        total = (await self.session.exec(select(func.count()).select_from(Plugin))).one()
        stmt = select(Plugin).order_by(Plugin.name, Plugin.id).offset(offset).limit(limit)
        result = await self.session.exec(stmt)
        return list(result.all()), total

    async def create(self, plugin: Plugin) -> Plugin:
        self.session.add(plugin)
        await flush_or_conflict(self.session)
        await self.session.refresh(plugin)
        return plugin

    async def update(self, plugin: Plugin) -> Plugin:
        plugin.updated_at = utc_now()
        self.session.add(plugin)
        await flush_or_conflict(self.session)
        await self.session.refresh(plugin)
        return plugin

    async def delete(self, plugin: Plugin) -> None:
        await self.session.delete(plugin)
        await flush_or_conflict(self.session)


class TenantPluginRepository(TenantScopedRepository[TenantPlugin], ITenantPluginRepository):
    model = TenantPlugin
    filterable = ("status", "plugin_id")

    async def get_by_plugin(self, tenant_id: UUID, plugin_id: UUID) -> Optional[TenantPlugin]:
        stmt = select(TenantPlugin).where(
            tenant_filter(TenantPlugin, tenant_id, TenantPlugin.plugin_id == plugin_id)
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def list_with_plugins(
        self, tenant_id: UUID, active_only: bool = False
    ) -> List[Tuple[TenantPlugin, Plugin]]:
        """Deprecated catalog plugins are included, existing installations keep running"""
        criteria = []
        if active_only:
            criteria.append(TenantPlugin.status == TenantPluginStatus.active)
        stmt = (
            select(TenantPlugin, Plugin)
            .join(Plugin, Plugin.id == TenantPlugin.plugin_id)
            .where(tenant_filter(TenantPlugin, tenant_id, *criteria))
            .order_by(TenantPlugin.installed_at, TenantPlugin.id)
        )
        result = await self.session.exec(stmt)
        return [(row[0], row[1]) for row in result.all()]
