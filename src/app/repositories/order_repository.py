from abc import abstractmethod
from typing import List
from uuid import UUID

from src.domain.entities import Order, OrderItem, PaymentGateway, PaymentTransaction
from .base import ITenantScopedRepository


class IOrderRepository(ITenantScopedRepository[Order]):
    """Order repository interface"""


class IOrderItemRepository(ITenantScopedRepository[OrderItem]):
    """OrderItem repository interface"""

    @abstractmethod
    async def list_for_order(self, tenant_id: UUID, order_id: UUID) -> List[OrderItem]:
        """Items of an order in insertion order"""
        pass


class IPaymentGatewayRepository(ITenantScopedRepository[PaymentGateway]):
    """PaymentGateway repository interface"""


class IPaymentTransactionRepository(ITenantScopedRepository[PaymentTransaction]):
    """PaymentTransaction repository interface"""

    @abstractmethod
    async def list_for_order(self, tenant_id: UUID, order_id: UUID) -> List[PaymentTransaction]:
        pass
