from abc import ABC, abstractmethod
from typing import List, Optional, Tuple
from uuid import UUID

from src.domain.entities import Plugin, TenantPlugin
from .base import ITenantScopedRepository


class IPluginRepository(ABC):
    """Global plugin catalog repository interface"""

    @abstractmethod
    async def get_by_id(self, plugin_id: UUID) -> Optional[Plugin]:
        pass

    @abstractmethod
    async def get_by_slug(self, slug: str) -> Optional[Plugin]:
        pass

    @abstractmethod
    async def list(self, limit: int = 50, offset: int = 0) -> Tuple[List[Plugin], int]:
        pass

    @abstractmethod
    async def create(self, plugin: Plugin) -> Plugin:
        pass

    @abstractmethod
    async def update(self, plugin: Plugin) -> Plugin:
        pass

    @abstractmethod
    async def delete(self, plugin: Plugin) -> None:
        pass


class ITenantPluginRepository(ITenantScopedRepository[TenantPlugin]):
    """Tenant plugin installations"""

    @abstractmethod
    async def get_by_plugin(self, tenant_id: UUID, plugin_id: UUID) -> Optional[TenantPlugin]:
        """Get the tenant's installation of a catalog plugin"""
        pass

    @abstractmethod
    async def list_with_plugins(
        self, tenant_id: UUID, active_only: bool = False
    ) -> List[Tuple[TenantPlugin, Plugin]]:
        """Installations joined with their catalog entry, in installation order"""
        pass
