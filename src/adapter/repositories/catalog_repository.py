from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func
from sqlmodel import select

from src.adapter.repositories.base import TenantScopedRepository, scoped_select
from src.app.repositories.catalog_repository import (
    IProductAttributeRepository,
    IProductRepository,
    IProductTypeRepository,
)
from src.domain.entities import Product, ProductAttribute, ProductType


class ProductTypeRepository(TenantScopedRepository[ProductType], IProductTypeRepository):
    model = ProductType
    filterable = ("is_active", "category")


class ProductRepository(TenantScopedRepository[Product], IProductRepository):
    model = Product
    filterable = ("status", "product_type_id")

    async def get_any(self, product_id: UUID) -> Optional[Product]:
        result = await self.session.exec(select(Product).where(Product.id == product_id))
        return result.one_or_none()

    async def list_all(
        self,
        filters: Optional[Dict[str, Any]] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[Product], int]:
        criteria = self._criteria(filters)
        if (filters or {}).get("tenant_id") is not None:
            criteria.append(Product.tenant_id == filters["tenant_id"])

        count_stmt = select(func.count()).select_from(Product)
        stmt = select(Product)
        if criteria:
            count_stmt = count_stmt.where(*criteria)
            stmt = stmt.where(*criteria)
        total = (await self.session.exec(count_stmt)).one()

        stmt = stmt.order_by(Product.created_at.desc(), Product.id).offset(offset).limit(limit)
        result = await self.session.exec(stmt)
        return list(result.all()), total


class ProductAttributeRepository(
    TenantScopedRepository[ProductAttribute], IProductAttributeRepository
):
    model = ProductAttribute
    filterable = ("product_id",)

    async def list_for_product(self, tenant_id: UUID, product_id: UUID) -> List[ProductAttribute]:
        stmt = scoped_select(
            ProductAttribute, tenant_id, ProductAttribute.product_id == product_id
        ).order_by(ProductAttribute.attribute_key)
        result = await self.session.exec(stmt)
        return list(result.all())

    async def get_by_key(
        self, tenant_id: UUID, product_id: UUID, attribute_key: str
    ) -> Optional[ProductAttribute]:
        stmt = scoped_select(
            ProductAttribute,
            tenant_id,
            ProductAttribute.product_id == product_id,
            ProductAttribute.attribute_key == attribute_key,
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()
