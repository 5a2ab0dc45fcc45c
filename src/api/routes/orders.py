"""
Order routes: orders, their items and payments, plus the tenant's payment
gateways.

Order creation and payment processing run plugin hooks, so both take the
app's hook dispatcher.
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status

from src.api.responses import ApiResponse, ok
from src.api.utils.auth import verify_tenant_token
from src.api.utils.crud import crud_router, unwrap
from src.api.utils.tenant import resolve_tenant
from src.app.plugins import HookDispatcher
from src.app.services.dtos import (
    OrderCreate,
    OrderItemCreate,
    OrderItemResponse,
    OrderResponse,
    OrderUpdate,
    PaymentGatewayCreate,
    PaymentGatewayResponse,
    PaymentGatewayUpdate,
    PaymentRequest,
    PaymentResult,
    PaymentTransactionResponse,
    TenantResponse,
)
from src.app.services.order_service import OrderService
from src.app.services.payment_service import PaymentGatewayService, PaymentService
from src.app.services.unit_of_work import UnitOfWork
from src.depends import get_hook_dispatcher, get_unit_of_work
from src.domain.entities import OrderStatus

router = APIRouter(prefix="/{tenant_slug}/admin", tags=["Orders"])


@router.post(
    "/orders",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[OrderResponse],
    dependencies=[Depends(verify_tenant_token)],
)
async def create_order(
    command: OrderCreate,
    tenant: TenantResponse = Depends(resolve_tenant),
    uow: UnitOfWork = Depends(get_unit_of_work),
    dispatcher: HookDispatcher = Depends(get_hook_dispatcher),
):
    """
    Create Order

    Writes the order and its items in one transaction. unit_price defaults
    to the product's metadata.price at order time.

    Raises:
        - 400 Bad Request: INVALID_PRODUCT, INVALID_USER, ORDER_REJECTED
                           (a before_order_create hook refused the order)
        - 409 Conflict: ORDER_NUMBER_EXISTS
    """
    order = unwrap(await OrderService(uow, dispatcher).create_order(tenant, command))
    return ok(order, "Order created")


@router.post(
    "/orders/{order_id}/items",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[OrderItemResponse],
    dependencies=[Depends(verify_tenant_token)],
)
async def add_order_item(
    order_id: UUID,
    command: OrderItemCreate,
    tenant: TenantResponse = Depends(resolve_tenant),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    item = unwrap(await OrderService(uow).add_item(tenant.id, order_id, command))
    return ok(item, "Item added")


@router.post(
    "/orders/{order_id}/payments",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[PaymentResult],
    dependencies=[Depends(verify_tenant_token)],
)
async def process_payment(
    order_id: UUID,
    command: PaymentRequest,
    tenant: TenantResponse = Depends(resolve_tenant),
    uow: UnitOfWork = Depends(get_unit_of_work),
    dispatcher: HookDispatcher = Depends(get_hook_dispatcher),
):
    """
    Process Payment

    Records the result the gateway reported. A succeeded payment confirms
    the order, a failed one marks it payment_failed.

    Raises:
        - 400 Bad Request: PAYMENT_GATEWAY_INACTIVE, PAYMENT_REJECTED
        - 404 Not Found: ORDER_NOT_FOUND, PAYMENT_GATEWAY_NOT_FOUND
    """
    result = await PaymentService(uow, dispatcher).process_payment(tenant, order_id, command)
    return ok(unwrap(result), "Payment processed")


@router.get(
    "/orders/{order_id}/payments",
    response_model=ApiResponse[List[PaymentTransactionResponse]],
    dependencies=[Depends(verify_tenant_token)],
)
async def list_payments(
    order_id: UUID,
    tenant: TenantResponse = Depends(resolve_tenant),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    return ok(unwrap(await PaymentService(uow).list_transactions(tenant.id, order_id)))


orders = crud_router(
    "/orders",
    "Order",
    OrderService,
    OrderCreate,
    OrderUpdate,
    OrderResponse,
    filters={"status": OrderStatus, "user_id": UUID},
    include_create=False,
    router=router,
)

payment_gateways = crud_router(
    "/payment-gateways",
    "Payment gateway",
    PaymentGatewayService,
    PaymentGatewayCreate,
    PaymentGatewayUpdate,
    PaymentGatewayResponse,
    filters={"is_active": bool, "gateway_type": str},
    protect_reads=True,
)
