from abc import abstractmethod
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from src.domain.entities import Product, ProductAttribute, ProductType
from .base import ITenantScopedRepository


class IProductTypeRepository(ITenantScopedRepository[ProductType]):
    """ProductType repository interface"""


class IProductRepository(ITenantScopedRepository[Product]):
    """
    Product repository interface.

    get_any() and list_all() are not tenant scoped and back the platform
    admin routes only.
    """

    @abstractmethod
    async def get_any(self, product_id: UUID) -> Optional[Product]:
        pass

    @abstractmethod
    async def list_all(
        self,
        filters: Optional[Dict[str, Any]] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[Product], int]:
        """Products of every tenant, newest first, optionally filtered by tenant_id"""
        pass


class IProductAttributeRepository(ITenantScopedRepository[ProductAttribute]):
    """ProductAttribute repository interface"""

    @abstractmethod
    async def list_for_product(self, tenant_id: UUID, product_id: UUID) -> List[ProductAttribute]:
        """All attributes of a product ordered by key"""
        pass

    @abstractmethod
    async def get_by_key(
        self, tenant_id: UUID, product_id: UUID, attribute_key: str
    ) -> Optional[ProductAttribute]:
        pass
