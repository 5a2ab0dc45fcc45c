"""
Workflow Entity

Stored automation configuration, e.g. steps run after an order is paid.
"""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel

from src.domain.base import JSONText, utc_now


class Workflow(SQLModel, table=True):
    __tablename__ = "workflows"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", index=True)

    name: str = Field(max_length=255)
    entity_type: str = Field(max_length=50)  # e.g. "order", "product"
    trigger: str = Field(max_length=100)  # e.g. "order.paid"
    steps: Optional[Any] = Field(default_factory=list, sa_column=Column(JSONText))
    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
