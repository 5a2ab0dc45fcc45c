"""
Payment gateways and payment processing.

process_payment records the result a gateway reported for an order:

    before_payment_process  (may reject, nothing is written)
    -> transaction row + order status in one commit
    -> after_payment_success / after_payment_failed (failures only logged)
"""

import logging
from typing import List, Optional
from uuid import UUID, uuid4

from src.app.plugins import HookDispatcher, HookName, HookRejectedError, PaymentHookPayload
from src.app.services.base import TenantScopedService
from src.app.services.dtos import (
    OrderResponse,
    PaymentGatewayResponse,
    PaymentRequest,
    PaymentResult,
    PaymentTransactionResponse,
    TenantResponse,
)
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import OrderStatus, PaymentGateway, PaymentStatus, PaymentTransaction
from src.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)


class PaymentGatewayService(TenantScopedService[PaymentGateway, PaymentGatewayResponse]):
    entity = PaymentGateway
    response = PaymentGatewayResponse
    repository_name = "payment_gateways"
    error_prefix = "PAYMENT_GATEWAY"
    label = "Payment gateway"


class PaymentService:
    def __init__(self, uow: UnitOfWork, dispatcher: Optional[HookDispatcher] = None):
        self.uow = uow
        self.dispatcher = dispatcher

    async def process_payment(
        self, tenant: TenantResponse, order_id: UUID, command: PaymentRequest
    ) -> Result[PaymentResult]:
        async with self.uow:
            order = await self.uow.orders.get(tenant.id, order_id)
            if order is None:
                return Return.err(Error("ORDER_NOT_FOUND", "Order not found"))

            gateway = await self.uow.payment_gateways.get(tenant.id, command.gateway_id)
            if gateway is None:
                return Return.err(Error("PAYMENT_GATEWAY_NOT_FOUND", "Payment gateway not found"))
            if not gateway.is_active:
                return Return.err(
                    Error("PAYMENT_GATEWAY_INACTIVE", "Payment gateway is not active")
                )

            amount = command.amount
            if amount is None:
                amount = (order.pricing_data or {}).get("total")
            if amount is None:
                return Return.err(Error("VALIDATION_ERROR", "Payment amount is required"))

            customer_email = command.customer_email or (order.customer_data or {}).get("email")
            # Handlers may rewrite the payload, the row id stays fixed
            payment_id = uuid4()
            payload = PaymentHookPayload(
                payment_id=str(payment_id),
                order_id=str(order.id),
                order_number=order.order_number,
                gateway_id=str(gateway.id),
                gateway_type=gateway.gateway_type,
                amount=float(amount),
                currency=command.currency.lower(),
                customer_email=customer_email,
                status=command.status,
                transaction_id=command.transaction_id,
                error_message=command.error_message,
            )

            if self.dispatcher is not None:
                try:
                    payload = await self.dispatcher.dispatch(
                        self.uow, tenant, HookName.before_payment_process, payload
                    )
                except HookRejectedError as exc:
                    logger.info("Payment for order %s rejected: %s", order.order_number, exc.message)
                    return Return.err(Error("PAYMENT_REJECTED", exc.message))

            succeeded = payload.status == PaymentStatus.succeeded
            transaction = await self.uow.payment_transactions.create(
                PaymentTransaction(
                    id=payment_id,
                    tenant_id=tenant.id,
                    order_id=order.id,
                    gateway_id=gateway.id,
                    transaction_id=payload.transaction_id,
                    amount=payload.amount,
                    currency=payload.currency,
                    status=payload.status,
                    gateway_response={
                        "idempotency_key": payload.idempotency_key,
                        "gateway_metadata": payload.gateway_metadata,
                        "error_message": payload.error_message,
                    },
                )
            )

            order.status = OrderStatus.confirmed if succeeded else OrderStatus.payment_failed
            order.payment_data = {
                **(order.payment_data or {}),
                "payment_id": str(payment_id),
                "gateway_id": payload.gateway_id,
                "gateway_type": payload.gateway_type,
                "transaction_id": payload.transaction_id,
                "amount": payload.amount,
                "currency": payload.currency,
                "status": payload.status.value,
            }
            order = await self.uow.orders.update(order)

            await self.uow.commit()
            result = PaymentResult(
                transaction=PaymentTransactionResponse.model_validate(transaction),
                order=OrderResponse.model_validate(order),
            )
            logger.info(
                "Payment %s for order %s: %s",
                payment_id,
                order.order_number,
                payload.status.value,
            )

            if self.dispatcher is not None:
                hook = (
                    HookName.after_payment_success if succeeded else HookName.after_payment_failed
                )
                await self.dispatcher.dispatch(self.uow, tenant, hook, payload)
            return Return.ok(result)

    async def list_transactions(
        self, tenant_id: UUID, order_id: UUID
    ) -> Result[List[PaymentTransactionResponse]]:
        async with self.uow:
            order = await self.uow.orders.get(tenant_id, order_id)
            if order is None:
                return Return.err(Error("ORDER_NOT_FOUND", "Order not found"))
            transactions = await self.uow.payment_transactions.list_for_order(tenant_id, order.id)
            return Return.ok([PaymentTransactionResponse.model_validate(t) for t in transactions])
