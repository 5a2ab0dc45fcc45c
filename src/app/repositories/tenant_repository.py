from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from src.domain.entities import Tenant


class ITenantRepository(ABC):
    """Tenant repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, tenant_id: UUID) -> Optional[Tenant]:
        """Get tenant by ID"""
        pass

    @abstractmethod
    async def get_by_slug(self, slug: str) -> Optional[Tenant]:
        """Get tenant by slug, regardless of status"""
        pass

    @abstractmethod
    async def get_by_domain(self, domain: str) -> Optional[Tenant]:
        """Get tenant by exact custom domain"""
        pass

    @abstractmethod
    async def get_by_subdomain(self, subdomain: str) -> Optional[Tenant]:
        """Get tenant by subdomain label"""
        pass

    @abstractmethod
    async def list(
        self, filters: Optional[Dict[str, Any]] = None, limit: int = 50, offset: int = 0
    ) -> Tuple[List[Tenant], int]:
        """List tenants, newest first, with total count"""
        pass

    @abstractmethod
    async def create(self, tenant: Tenant) -> Tenant:
        """Create a new tenant"""
        pass

    @abstractmethod
    async def update(self, tenant: Tenant) -> Tenant:
        """Update existing tenant"""
        pass

    @abstractmethod
    async def delete(self, tenant: Tenant) -> None:
        """Delete tenant row (owned rows must be removed first)"""
        pass
