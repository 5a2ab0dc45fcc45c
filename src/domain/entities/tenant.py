"""
Tenant Entity

An isolated customer account, the unit of data partitioning.
"""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import JSONText, utc_now
from .enums import TenantPlan, TenantStatus


class Tenant(SQLModel, table=True):
    """
    Tenant entity.

    Business Rules:
    - slug, domain and subdomain are unique across all tenants
    - Only active tenants can be resolved by slug or host
    - Deleting a tenant removes every row it owns
    """

    __tablename__ = "tenants"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    slug: str = Field(unique=True, index=True, max_length=100)
    name: str = Field(max_length=255)
    domain: Optional[str] = Field(default=None, unique=True, max_length=255)
    subdomain: Optional[str] = Field(default=None, unique=True, max_length=100)

    status: TenantStatus = Field(default=TenantStatus.active)
    plan: TenantPlan = Field(default=TenantPlan.basic)

    settings: Optional[Any] = Field(default=None, sa_column=Column(JSONText))
    branding: Optional[Any] = Field(default=None, sa_column=Column(JSONText))

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_tenant_status", "status"),)
