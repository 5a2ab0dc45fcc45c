"""
Product Service

Product CRUD, open attributes and the public storefront read path.
"""

from typing import Any, Dict, List, Optional
from uuid import UUID

from src.app.repositories.errors import ConstraintViolationError
from src.app.services.base import DEFAULT_PAGE_SIZE, TenantScopedService
from src.app.services.dtos import (
    AttributeSet,
    PageResponse,
    ProductAttributeResponse,
    ProductResponse,
    ProductTypeResponse,
    ProductUpdate,
    StorefrontProductResponse,
)
from src.domain.entities import Product, ProductAttribute, ProductStatus
from src.libs.result import Error, Result, Return


class ProductService(TenantScopedService[Product, ProductResponse]):
    entity = Product
    response = ProductResponse
    repository_name = "products"
    error_prefix = "PRODUCT"
    label = "Product"
    conflict_code = "PRODUCT_SLUG_EXISTS"

    async def validate(self, tenant_id: UUID, fields: Dict[str, Any]) -> Optional[Error]:
        product_type_id = fields.get("product_type_id")
        if product_type_id is None:
            return None
        # Product type must belong to the same tenant
        product_type = await self.uow.product_types.get(tenant_id, product_type_id)
        if product_type is None:
            return Error("INVALID_PRODUCT_TYPE", "Product type does not exist for this tenant")
        return None

    async def get(self, tenant_id: UUID, entity_id: UUID) -> Result[ProductResponse]:
        async with self.uow:
            product = await self.uow.products.get(tenant_id, entity_id)
            if product is None:
                return Return.err(self.not_found())
            response = self.to_response(product)
            response.attributes = await self._attributes(tenant_id, product.id)
            return Return.ok(response)

    async def delete_dependents(self, tenant_id: UUID, entity: Product) -> None:
        for attribute in await self.uow.product_attributes.list_for_product(tenant_id, entity.id):
            await self.uow.product_attributes.delete(attribute)

    async def list_attributes(
        self, tenant_id: UUID, product_id: UUID
    ) -> Result[List[ProductAttributeResponse]]:
        async with self.uow:
            product = await self.uow.products.get(tenant_id, product_id)
            if product is None:
                return Return.err(self.not_found())
            return Return.ok(await self._attributes(tenant_id, product.id))

    async def set_attribute(
        self, tenant_id: UUID, product_id: UUID, key: str, command: AttributeSet
    ) -> Result[ProductAttributeResponse]:
        """Create or replace one attribute of a product"""
        async with self.uow:
            product = await self.uow.products.get(tenant_id, product_id)
            if product is None:
                return Return.err(self.not_found())

            attribute = await self.uow.product_attributes.get_by_key(tenant_id, product_id, key)
            try:
                if attribute is None:
                    attribute = await self.uow.product_attributes.create(
                        ProductAttribute(
                            tenant_id=tenant_id,
                            product_id=product_id,
                            attribute_key=key,
                            attribute_value=command.value,
                            attribute_type=command.type,
                        )
                    )
                else:
                    attribute.attribute_value = command.value
                    attribute.attribute_type = command.type
                    attribute = await self.uow.product_attributes.update(attribute)
            except ConstraintViolationError:
                return Return.err(Error("ATTRIBUTE_EXISTS", "Attribute was written concurrently"))

            await self.uow.commit()
            return Return.ok(ProductAttributeResponse.model_validate(attribute))

    async def delete_attribute(self, tenant_id: UUID, product_id: UUID, key: str) -> Result[None]:
        async with self.uow:
            attribute = await self.uow.product_attributes.get_by_key(tenant_id, product_id, key)
            if attribute is None:
                return Return.err(Error("ATTRIBUTE_NOT_FOUND", "Attribute not found"))
            await self.uow.product_attributes.delete(attribute)
            await self.uow.commit()
            return Return.ok(None)

    # Storefront

    async def list_public(
        self,
        tenant_id: UUID,
        filters: Optional[Dict[str, Any]] = None,
        limit: int = DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> Result[PageResponse[ProductResponse]]:
        """Active products only, whatever status filter the caller sent"""
        filters = dict(filters or {}, status=ProductStatus.active)
        return await self.list(tenant_id, filters, limit, offset)

    async def get_public(
        self, tenant_id: UUID, product_id: UUID
    ) -> Result[StorefrontProductResponse]:
        async with self.uow:
            product = await self.uow.products.get(tenant_id, product_id)
            if product is None or product.status != ProductStatus.active:
                return Return.err(self.not_found())

            response = StorefrontProductResponse.model_validate(product)
            response.attributes = await self._attributes(tenant_id, product.id)
            product_type = await self.uow.product_types.get(tenant_id, product.product_type_id)
            if product_type is not None:
                response.product_type = ProductTypeResponse.model_validate(product_type)
            return Return.ok(response)

    async def _attributes(self, tenant_id: UUID, product_id: UUID) -> List[ProductAttributeResponse]:
        attributes = await self.uow.product_attributes.list_for_product(tenant_id, product_id)
        return [ProductAttributeResponse.model_validate(a) for a in attributes]

    # Platform admin, across tenants

    async def list_all(
        self,
        filters: Optional[Dict[str, Any]] = None,
        limit: int = DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> Result[PageResponse[ProductResponse]]:
        async with self.uow:
            products, total = await self.uow.products.list_all(filters, limit, offset)
            data = [self.to_response(p) for p in products]
            return Return.ok(PageResponse[ProductResponse].build(data, total, limit, offset))

    async def get_any(self, product_id: UUID) -> Result[ProductResponse]:
        tenant_id = await self._owner(product_id)
        if tenant_id is None:
            return Return.err(self.not_found())
        return await self.get(tenant_id, product_id)

    async def update_any(self, product_id: UUID, command: ProductUpdate) -> Result[ProductResponse]:
        """Update any tenant's product, validated against the owning tenant"""
        tenant_id = await self._owner(product_id)
        if tenant_id is None:
            return Return.err(self.not_found())
        return await self.update(tenant_id, product_id, command)

    async def delete_any(self, product_id: UUID) -> Result[None]:
        tenant_id = await self._owner(product_id)
        if tenant_id is None:
            return Return.err(self.not_found())
        return await self.delete(tenant_id, product_id)

    async def _owner(self, product_id: UUID) -> Optional[UUID]:
        async with self.uow:
            product = await self.uow.products.get_any(product_id)
            return product.tenant_id if product else None
