from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, Tuple, TypeVar
from uuid import UUID

T = TypeVar("T")


class ITenantScopedRepository(ABC, Generic[T]):
    """
    Repository interface for tenant-owned entities - application layer.

    Every method takes the resolved tenant id, implementations must never
    return or touch rows owned by another tenant.
    """

    @abstractmethod
    async def get(self, tenant_id: UUID, entity_id: UUID) -> Optional[T]:
        """Get entity by ID within the tenant"""
        pass

    @abstractmethod
    async def list(
        self,
        tenant_id: UUID,
        filters: Optional[Dict[str, Any]] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[T], int]:
        """
        List entities of the tenant, newest first.

        Returns:
            Tuple of (page of entities, total matching rows)
        """
        pass

    @abstractmethod
    async def create(self, entity: T) -> T:
        """Create a new entity, raises ConstraintViolationError on conflicts"""
        pass

    @abstractmethod
    async def update(self, entity: T) -> T:
        """Persist changes to an entity loaded through get()"""
        pass

    @abstractmethod
    async def delete(self, entity: T) -> None:
        """Delete an entity loaded through get()"""
        pass

    @abstractmethod
    async def delete_all_for_tenant(self, tenant_id: UUID) -> None:
        """Delete every row owned by the tenant"""
        pass
