"""
Product and ProductAttribute Entities
"""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import JSONText, utc_now
from .enums import ProductStatus


class Product(SQLModel, table=True):
    """
    Product entity.

    Business Rules:
    - Belongs to exactly one tenant and one ProductType of that tenant
    - slug is unique within a tenant
    - Only active products are visible on the storefront
    """

    __tablename__ = "products"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", index=True)
    product_type_id: UUID = Field(foreign_key="product_types.id", index=True)

    name: str = Field(max_length=255)
    slug: str = Field(max_length=255)
    status: ProductStatus = Field(default=ProductStatus.draft)
    meta: Optional[Any] = Field(default=None, sa_column=Column("metadata", JSONText))

    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))

    __table_args__ = (
        UniqueConstraint("tenant_id", "slug", name="uq_product_tenant_slug"),
        Index("idx_product_tenant_status", "tenant_id", "status"),
    )


class ProductAttribute(SQLModel, table=True):
    """Open key/value/type triple attached to a product"""

    __tablename__ = "product_attributes"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", index=True)
    product_id: UUID = Field(foreign_key="products.id", index=True)

    attribute_key: str = Field(max_length=100)
    attribute_value: Optional[Any] = Field(default=None, sa_column=Column(JSONText))
    attribute_type: str = Field(default="string", max_length=50)

    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))

    __table_args__ = (
        UniqueConstraint("product_id", "attribute_key", name="uq_product_attribute_key"),
    )
