from typing import List
from uuid import UUID

from src.adapter.repositories.base import TenantScopedRepository, scoped_select
from src.app.repositories.order_repository import (
    IOrderItemRepository,
    IOrderRepository,
    IPaymentGatewayRepository,
    IPaymentTransactionRepository,
)
from src.domain.entities import Order, OrderItem, PaymentGateway, PaymentTransaction


class OrderRepository(TenantScopedRepository[Order], IOrderRepository):
    model = Order
    filterable = ("status", "user_id")


class OrderItemRepository(TenantScopedRepository[OrderItem], IOrderItemRepository):
    model = OrderItem
    filterable = ("order_id", "product_id")

    async def list_for_order(self, tenant_id: UUID, order_id: UUID) -> List[OrderItem]:
        stmt = scoped_select(OrderItem, tenant_id, OrderItem.order_id == order_id).order_by(
            OrderItem.created_at, OrderItem.id
        )
        result = await self.session.exec(stmt)
        return list(result.all())


class PaymentGatewayRepository(TenantScopedRepository[PaymentGateway], IPaymentGatewayRepository):
    model = PaymentGateway
    filterable = ("is_active", "gateway_type")


class PaymentTransactionRepository(
    TenantScopedRepository[PaymentTransaction], IPaymentTransactionRepository
):
    model = PaymentTransaction
    filterable = ("order_id", "status")

    async def list_for_order(self, tenant_id: UUID, order_id: UUID) -> List[PaymentTransaction]:
        stmt = scoped_select(
            PaymentTransaction, tenant_id, PaymentTransaction.order_id == order_id
        ).order_by(PaymentTransaction.created_at, PaymentTransaction.id)
        result = await self.session.exec(stmt)
        return list(result.all())
