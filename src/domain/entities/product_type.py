"""
ProductType Entity

Tenant-owned schema definition for a catalog category.
"""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Column, DateTime, Field, SQLModel

from src.domain.base import JSONText, utc_now


class ProductType(SQLModel, table=True):
    """
    ProductType entity.

    Business Rules:
    - slug is unique within a tenant
    - json_schema, ui_config and validation_rules describe product metadata
    """

    __tablename__ = "product_types"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", index=True)

    name: str = Field(max_length=255)
    slug: str = Field(max_length=100)
    icon: Optional[str] = Field(default=None, max_length=100)
    category: Optional[str] = Field(default=None, max_length=100)

    json_schema: Optional[Any] = Field(default=None, sa_column=Column("schema", JSONText))
    ui_config: Optional[Any] = Field(default=None, sa_column=Column(JSONText))
    validation_rules: Optional[Any] = Field(default=None, sa_column=Column(JSONText))
    workflows: Optional[Any] = Field(default=None, sa_column=Column(JSONText))
    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))

    __table_args__ = (
        UniqueConstraint("tenant_id", "slug", name="uq_product_type_tenant_slug"),
    )
