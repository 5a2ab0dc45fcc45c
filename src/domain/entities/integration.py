from datetime import datetime
from typing import Any, Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel

from src.domain.base import JSONText, utc_now


class Integration(SQLModel, table=True):
    """Connection to an external system (CRM, ERP, marketing tool)"""

    __tablename__ = "integrations"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", index=True)

    name: str = Field(max_length=255)
    integration_type: str = Field(max_length=50)
    credentials: Optional[Any] = Field(default=None, sa_column=Column(JSONText))
    field_mapping: Optional[Any] = Field(default=None, sa_column=Column(JSONText))
    sync_config: Optional[Any] = Field(default=None, sa_column=Column(JSONText))
    webhook_config: Optional[Any] = Field(default=None, sa_column=Column(JSONText))
    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
