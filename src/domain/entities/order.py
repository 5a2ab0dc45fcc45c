"""
Order and OrderItem Entities
"""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID, uuid4

from sqlalchemy import Numeric, UniqueConstraint
from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import JSONText, utc_now
from .enums import DeliveryStatus, OrderStatus


class Order(SQLModel, table=True):
    """
    Order entity.

    Business Rules:
    - order_number is unique within a tenant
    - Optionally placed by a platform user
    - Items, pricing, payment and customer data are JSON blobs
    """

    __tablename__ = "orders"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", index=True)
    user_id: Optional[UUID] = Field(default=None, foreign_key="users.id", index=True)

    order_number: str = Field(max_length=100)
    status: OrderStatus = Field(default=OrderStatus.pending)

    items_data: Optional[Any] = Field(default=None, sa_column=Column(JSONText))
    pricing_data: Optional[Any] = Field(default=None, sa_column=Column(JSONText))
    payment_data: Optional[Any] = Field(default=None, sa_column=Column(JSONText))
    customer_data: Optional[Any] = Field(default=None, sa_column=Column(JSONText))
    meta: Optional[Any] = Field(default=None, sa_column=Column("metadata", JSONText))

    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))

    __table_args__ = (
        UniqueConstraint("tenant_id", "order_number", name="uq_order_tenant_number"),
        Index("idx_order_tenant_status", "tenant_id", "status"),
    )


class OrderItem(SQLModel, table=True):
    """
    Line of an order.

    unit_price is captured when the item is added and never looked up
    again, so later product price changes do not rewrite history.
    """

    __tablename__ = "order_items"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", index=True)
    order_id: UUID = Field(foreign_key="orders.id", index=True)
    product_id: UUID = Field(foreign_key="products.id", index=True)
    variant_id: Optional[str] = Field(default=None, max_length=100)

    quantity: int = Field(default=1)
    unit_price: float = Field(default=0.0, sa_column=Column(Numeric(12, 2, asdecimal=False)))
    item_data: Optional[Any] = Field(default=None, sa_column=Column(JSONText))
    delivery_status: DeliveryStatus = Field(default=DeliveryStatus.pending)

    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
