"""
Hook points and their payloads.

Each hook point carries exactly one payload model. Handlers receive the
model instance, may mutate it in place (assignments are validated) or
return a replacement, and the dispatcher threads the result on.
"""

from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.domain.entities import OrderStatus, PaymentStatus


class HookName(str, Enum):
    before_order_create = "before_order_create"
    after_order_create = "after_order_create"
    before_payment_process = "before_payment_process"
    after_payment_success = "after_payment_success"
    after_payment_failed = "after_payment_failed"

    @property
    def aborts_on_error(self) -> bool:
        """before_* failures abort the operation, after_* failures are only logged"""
        return self.value.startswith("before_")


class HookPayloadBase(BaseModel):
    model_config = ConfigDict(extra="forbid", validate_assignment=True)


class OrderHookPayload(HookPayloadBase):
    kind: Literal["order"] = "order"
    order_id: Optional[str] = None
    order_number: str
    status: OrderStatus
    user_id: Optional[str] = None
    items: List[Dict[str, Any]] = Field(default_factory=list)
    pricing_data: Dict[str, Any] = Field(default_factory=dict)
    customer_data: Dict[str, Any] = Field(default_factory=dict)
    payment_data: Dict[str, Any] = Field(default_factory=dict)
    metadata: Dict[str, Any] = Field(default_factory=dict)


class PaymentHookPayload(HookPayloadBase):
    kind: Literal["payment"] = "payment"
    payment_id: str
    order_id: str
    order_number: str
    gateway_id: str
    gateway_type: str
    amount: float
    currency: str
    customer_email: Optional[str] = None
    status: PaymentStatus
    transaction_id: Optional[str] = None
    error_message: Optional[str] = None
    idempotency_key: Optional[str] = None
    gateway_metadata: Dict[str, Any] = Field(default_factory=dict)


HOOK_PAYLOADS = {
    HookName.before_order_create: OrderHookPayload,
    HookName.after_order_create: OrderHookPayload,
    HookName.before_payment_process: PaymentHookPayload,
    HookName.after_payment_success: PaymentHookPayload,
    HookName.after_payment_failed: PaymentHookPayload,
}
