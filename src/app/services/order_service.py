"""
Order Service

Orders and their items are written in one transaction. Plugins can veto or
adjust a new order through before_order_create and observe it through
after_order_create.
"""

import logging
import secrets
from typing import Any, Dict, List, Optional
from uuid import UUID

from src.app.plugins import HookDispatcher, HookName, HookRejectedError, OrderHookPayload
from src.app.repositories.errors import ConstraintViolationError
from src.app.services.base import TenantScopedService
from src.app.services.dtos import (
    OrderCreate,
    OrderItemCreate,
    OrderItemResponse,
    OrderResponse,
    TenantResponse,
)
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now
from src.domain.entities import Order, OrderItem
from src.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)


def generate_order_number() -> str:
    return f"ORD-{utc_now():%Y%m%d%H%M%S}-{secrets.token_hex(3).upper()}"


def product_price(product) -> float:
    """Current list price of a product, taken from metadata.price"""
    meta = product.meta if isinstance(product.meta, dict) else {}
    price = meta.get("price")
    try:
        return float(price) if price is not None else 0.0
    except (TypeError, ValueError):
        return 0.0


class OrderService(TenantScopedService[Order, OrderResponse]):
    entity = Order
    response = OrderResponse
    repository_name = "orders"
    error_prefix = "ORDER"
    label = "Order"
    conflict_code = "ORDER_NUMBER_EXISTS"

    def __init__(self, uow: UnitOfWork, dispatcher: Optional[HookDispatcher] = None):
        super().__init__(uow)
        self.dispatcher = dispatcher

    async def validate(self, tenant_id: UUID, fields: Dict[str, Any]) -> Optional[Error]:
        user_id = fields.get("user_id")
        if user_id is not None and await self.uow.users.get_by_id(user_id) is None:
            return Error("INVALID_USER", "User does not exist")
        return None

    async def create_order(
        self, tenant: TenantResponse, command: OrderCreate
    ) -> Result[OrderResponse]:
        """
        Create an order with its items.

        Business Rules:
        - Every item must reference a product of the same tenant
        - unit_price is captured now: explicit price, else product metadata.price
        - A before_order_create rejection persists nothing
        """
        async with self.uow:
            error = await self.validate(tenant.id, command.model_dump())
            if error:
                return Return.err(error)

            items = []
            for item in command.items:
                product = await self.uow.products.get(tenant.id, item.product_id)
                if product is None:
                    return Return.err(
                        Error("INVALID_PRODUCT", f"Product {item.product_id} does not exist")
                    )
                items.append(self._item_snapshot(item, product))

            payload = OrderHookPayload(
                order_number=command.order_number or generate_order_number(),
                status=command.status,
                user_id=str(command.user_id) if command.user_id else None,
                items=items,
                pricing_data=command.pricing_data or self._pricing(items),
                customer_data=command.customer_data or {},
                payment_data=command.payment_data or {},
                metadata=command.meta or {},
            )
            if self.dispatcher is not None:
                try:
                    payload = await self.dispatcher.dispatch(
                        self.uow, tenant, HookName.before_order_create, payload
                    )
                except HookRejectedError as exc:
                    return Return.err(Error("ORDER_REJECTED", exc.message))

            order = Order(
                tenant_id=tenant.id,
                user_id=command.user_id,
                order_number=payload.order_number,
                status=payload.status,
                items_data=command.items_data if command.items_data is not None else payload.items,
                pricing_data=payload.pricing_data,
                payment_data=payload.payment_data,
                customer_data=payload.customer_data,
                meta=payload.metadata,
            )
            try:
                order = await self.uow.orders.create(order)
                created_items = [
                    await self.uow.order_items.create(
                        OrderItem(
                            tenant_id=tenant.id,
                            order_id=order.id,
                            product_id=UUID(item["product_id"]),
                            variant_id=item.get("variant_id"),
                            quantity=item["quantity"],
                            unit_price=item["unit_price"],
                            item_data=item.get("item_data"),
                        )
                    )
                    for item in payload.items
                ]
            except ConstraintViolationError as exc:
                logger.info("Order create conflict: %s", exc.message)
                return Return.err(self.conflict())

            await self.uow.commit()
            response = self.to_response(order)
            response.items = [OrderItemResponse.model_validate(i) for i in created_items]
            logger.info("Order %s created for tenant %s", order.order_number, tenant.slug)

            if self.dispatcher is not None:
                payload.order_id = str(order.id)
                await self.dispatcher.dispatch(
                    self.uow, tenant, HookName.after_order_create, payload
                )
            return Return.ok(response)

    async def get(self, tenant_id: UUID, entity_id: UUID) -> Result[OrderResponse]:
        async with self.uow:
            order = await self.uow.orders.get(tenant_id, entity_id)
            if order is None:
                return Return.err(self.not_found())
            response = self.to_response(order)
            items = await self.uow.order_items.list_for_order(tenant_id, order.id)
            response.items = [OrderItemResponse.model_validate(i) for i in items]
            return Return.ok(response)

    async def add_item(
        self, tenant_id: UUID, order_id: UUID, command: OrderItemCreate
    ) -> Result[OrderItemResponse]:
        async with self.uow:
            order = await self.uow.orders.get(tenant_id, order_id)
            if order is None:
                return Return.err(self.not_found())
            product = await self.uow.products.get(tenant_id, command.product_id)
            if product is None:
                return Return.err(Error("INVALID_PRODUCT", "Product does not exist"))

            snapshot = self._item_snapshot(command, product)
            item = await self.uow.order_items.create(
                OrderItem(
                    tenant_id=tenant_id,
                    order_id=order.id,
                    product_id=product.id,
                    variant_id=snapshot["variant_id"],
                    quantity=snapshot["quantity"],
                    unit_price=snapshot["unit_price"],
                    item_data=snapshot["item_data"],
                )
            )
            await self.uow.commit()
            return Return.ok(OrderItemResponse.model_validate(item))

    async def delete_dependents(self, tenant_id: UUID, entity: Order) -> None:
        for transaction in await self.uow.payment_transactions.list_for_order(tenant_id, entity.id):
            await self.uow.payment_transactions.delete(transaction)
        for item in await self.uow.order_items.list_for_order(tenant_id, entity.id):
            await self.uow.order_items.delete(item)

    @staticmethod
    def _item_snapshot(item: OrderItemCreate, product) -> Dict[str, Any]:
        unit_price = item.unit_price if item.unit_price is not None else product_price(product)
        return {
            "product_id": str(product.id),
            "name": product.name,
            "variant_id": item.variant_id,
            "quantity": item.quantity,
            "unit_price": unit_price,
            "item_data": item.item_data,
        }

    @staticmethod
    def _pricing(items: List[Dict[str, Any]]) -> Dict[str, Any]:
        subtotal = round(sum(i["unit_price"] * i["quantity"] for i in items), 2)
        return {"subtotal": subtotal, "total": subtotal}
