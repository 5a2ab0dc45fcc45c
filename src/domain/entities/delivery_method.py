from datetime import datetime
from typing import Any, Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel

from src.domain.base import JSONText, utc_now


class DeliveryMethod(SQLModel, table=True):
    """How a tenant delivers purchased goods (email, download, webhook, ...)"""

    __tablename__ = "delivery_methods"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", index=True)

    name: str = Field(max_length=255)
    type: str = Field(max_length=50)
    config: Optional[Any] = Field(default=None, sa_column=Column(JSONText))
    template: Optional[Any] = Field(default=None, sa_column=Column(JSONText))
    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
