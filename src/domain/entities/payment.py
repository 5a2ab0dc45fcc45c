"""
PaymentGateway and PaymentTransaction Entities
"""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID, uuid4

from sqlalchemy import Numeric
from sqlmodel import Column, DateTime, Field, SQLModel

from src.domain.base import JSONText, utc_now
from .enums import PaymentStatus


class PaymentGateway(SQLModel, table=True):
    """Tenant payment gateway configuration (credentials are secret)"""

    __tablename__ = "payment_gateways"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", index=True)

    name: str = Field(max_length=255)
    gateway_type: str = Field(max_length=50)  # e.g. "stripe", "manual"
    credentials: Optional[Any] = Field(default=None, sa_column=Column(JSONText))
    config: Optional[Any] = Field(default=None, sa_column=Column(JSONText))
    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))


class PaymentTransaction(SQLModel, table=True):
    """
    Record of one processed payment attempt.

    Written in the same transaction that moves the order to
    confirmed or payment_failed.
    """

    __tablename__ = "payment_transactions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", index=True)
    order_id: UUID = Field(foreign_key="orders.id", index=True)
    gateway_id: UUID = Field(foreign_key="payment_gateways.id", index=True)

    transaction_id: Optional[str] = Field(default=None, max_length=255)
    amount: float = Field(sa_column=Column(Numeric(12, 2, asdecimal=False)))
    currency: str = Field(default="usd", max_length=3)
    status: PaymentStatus
    gateway_response: Optional[Any] = Field(default=None, sa_column=Column(JSONText))

    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
