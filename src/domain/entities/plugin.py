"""
Plugin and TenantPlugin Entities

Plugin is a global catalog entry, TenantPlugin records that a tenant
installed it, with per-tenant config and enabled state.
"""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Column, DateTime, Field, SQLModel

from src.domain.base import JSONText, utc_now
from .enums import PluginStatus, TenantPluginStatus


class Plugin(SQLModel, table=True):
    __tablename__ = "plugins"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(unique=True, max_length=255)
    slug: str = Field(unique=True, index=True, max_length=100)
    version: str = Field(default="1.0.0", max_length=50)
    author: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    manifest: Optional[Any] = Field(default=None, sa_column=Column(JSONText))
    status: PluginStatus = Field(default=PluginStatus.available)
    is_official: bool = Field(default=False)

    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))


class TenantPlugin(SQLModel, table=True):
    """
    Installation of a catalog plugin by a tenant.

    Business Rules:
    - A tenant installs a given plugin at most once
    - Hooks only run for installations with status=active
    - installed_at defines hook execution order
    """

    __tablename__ = "tenant_plugins"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", index=True)
    plugin_id: UUID = Field(foreign_key="plugins.id", index=True)

    status: TenantPluginStatus = Field(default=TenantPluginStatus.inactive)
    config: Optional[Any] = Field(default=None, sa_column=Column(JSONText))

    installed_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))

    __table_args__ = (
        UniqueConstraint("tenant_id", "plugin_id", name="uq_tenant_plugin"),
    )
