"""
Service DTOs (Data Transfer Objects)

Command models are accepted by services (and used as HTTP request bodies),
response models are built from entities inside the unit of work so no
lazy attribute access happens after the session is rolled back.
"""

import math
from datetime import datetime
from typing import Any, Generic, List, Literal, Optional, TypeVar
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field

from src.domain.entities import (
    DeliveryStatus,
    OrderStatus,
    PaymentStatus,
    PluginStatus,
    ProductStatus,
    TenantPlan,
    TenantPluginStatus,
    TenantStatus,
    UserRole,
)

T = TypeVar("T")

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


def metadata_field():
    """`metadata` on the wire, `meta` on the entity"""
    return Field(
        default=None,
        validation_alias=AliasChoices("meta", "metadata"),
        serialization_alias="metadata",
    )


class EntityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class PageResponse(BaseModel, Generic[T]):
    """Paginated list payload"""

    data: List[T]
    total: int
    page: int
    limit: int
    pages: int

    @classmethod
    def build(cls, data: List[T], total: int, limit: int, offset: int) -> "PageResponse[T]":
        return cls(
            data=data,
            total=total,
            page=offset // limit + 1,
            limit=limit,
            pages=math.ceil(total / limit),
        )


# ============================================================================
# Tenants and users
# ============================================================================


class TenantCreate(BaseModel):
    slug: str = Field(..., min_length=1, max_length=100, pattern=SLUG_PATTERN)
    name: str = Field(..., min_length=1, max_length=255)
    domain: Optional[str] = Field(default=None, max_length=255)
    subdomain: Optional[str] = Field(default=None, max_length=100, pattern=SLUG_PATTERN)
    status: TenantStatus = TenantStatus.active
    plan: TenantPlan = TenantPlan.basic
    settings: Optional[dict] = None
    branding: Optional[dict] = None


class TenantUpdate(BaseModel):
    slug: Optional[str] = Field(default=None, min_length=1, max_length=100, pattern=SLUG_PATTERN)
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    domain: Optional[str] = Field(default=None, max_length=255)
    subdomain: Optional[str] = Field(default=None, max_length=100, pattern=SLUG_PATTERN)
    status: Optional[TenantStatus] = None
    plan: Optional[TenantPlan] = None
    settings: Optional[dict] = None
    branding: Optional[dict] = None


class TenantResponse(EntityResponse):
    id: UUID
    slug: str
    name: str
    domain: Optional[str] = None
    subdomain: Optional[str] = None
    status: TenantStatus
    plan: TenantPlan
    settings: Optional[Any] = None
    branding: Optional[Any] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    role: UserRole = UserRole.user
    is_active: bool = True


class UserUpdate(BaseModel):
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=8)
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None


class UserResponse(EntityResponse):
    id: UUID
    email: str
    role: UserRole
    is_active: bool
    created_at: Optional[datetime] = None


# ============================================================================
# Catalog
# ============================================================================


class ProductTypeCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(..., min_length=1, max_length=100, pattern=SLUG_PATTERN)
    icon: Optional[str] = None
    category: Optional[str] = None
    json_schema: Optional[Any] = Field(
        default=None, validation_alias=AliasChoices("schema", "json_schema")
    )
    ui_config: Optional[Any] = None
    validation_rules: Optional[Any] = None
    workflows: Optional[Any] = None
    is_active: bool = True


class ProductTypeUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    slug: Optional[str] = Field(default=None, min_length=1, max_length=100, pattern=SLUG_PATTERN)
    icon: Optional[str] = None
    category: Optional[str] = None
    json_schema: Optional[Any] = Field(
        default=None, validation_alias=AliasChoices("schema", "json_schema")
    )
    ui_config: Optional[Any] = None
    validation_rules: Optional[Any] = None
    workflows: Optional[Any] = None
    is_active: Optional[bool] = None


class ProductTypeResponse(EntityResponse):
    id: UUID
    tenant_id: UUID
    name: str
    slug: str
    icon: Optional[str] = None
    category: Optional[str] = None
    json_schema: Optional[Any] = Field(
        default=None,
        validation_alias=AliasChoices("json_schema", "schema"),
        serialization_alias="schema",
    )
    ui_config: Optional[Any] = None
    validation_rules: Optional[Any] = None
    workflows: Optional[Any] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProductCreate(BaseModel):
    product_type_id: UUID
    name: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(..., min_length=1, max_length=255, pattern=SLUG_PATTERN)
    status: ProductStatus = ProductStatus.draft
    meta: Optional[dict] = metadata_field()


class ProductUpdate(BaseModel):
    product_type_id: Optional[UUID] = None
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    slug: Optional[str] = Field(default=None, min_length=1, max_length=255, pattern=SLUG_PATTERN)
    status: Optional[ProductStatus] = None
    meta: Optional[dict] = metadata_field()


class AttributeSet(BaseModel):
    value: Any = None
    type: str = Field(default="string", max_length=50)


class ProductAttributeResponse(EntityResponse):
    id: UUID
    product_id: UUID
    attribute_key: str
    attribute_value: Optional[Any] = None
    attribute_type: str


class ProductResponse(EntityResponse):
    id: UUID
    tenant_id: UUID
    product_type_id: UUID
    name: str
    slug: str
    status: ProductStatus
    meta: Optional[Any] = metadata_field()
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    attributes: Optional[List[ProductAttributeResponse]] = None


class StorefrontProductResponse(ProductResponse):
    product_type: Optional[ProductTypeResponse] = None


# ============================================================================
# Orders and payments
# ============================================================================


class OrderItemCreate(BaseModel):
    product_id: UUID
    variant_id: Optional[str] = None
    quantity: int = Field(default=1, ge=1)
    unit_price: Optional[float] = Field(default=None, ge=0)
    item_data: Optional[dict] = None


class OrderCreate(BaseModel):
    order_number: Optional[str] = Field(default=None, min_length=1, max_length=100)
    user_id: Optional[UUID] = None
    status: OrderStatus = OrderStatus.pending
    items: List[OrderItemCreate] = Field(default_factory=list)
    items_data: Optional[Any] = None
    pricing_data: Optional[dict] = None
    payment_data: Optional[dict] = None
    customer_data: Optional[dict] = None
    meta: Optional[dict] = metadata_field()


class OrderUpdate(BaseModel):
    status: Optional[OrderStatus] = None
    items_data: Optional[Any] = None
    pricing_data: Optional[dict] = None
    payment_data: Optional[dict] = None
    customer_data: Optional[dict] = None
    meta: Optional[dict] = metadata_field()


class OrderItemResponse(EntityResponse):
    id: UUID
    order_id: UUID
    product_id: UUID
    variant_id: Optional[str] = None
    quantity: int
    unit_price: float
    item_data: Optional[Any] = None
    delivery_status: DeliveryStatus


class OrderResponse(EntityResponse):
    id: UUID
    tenant_id: UUID
    user_id: Optional[UUID] = None
    order_number: str
    status: OrderStatus
    items_data: Optional[Any] = None
    pricing_data: Optional[Any] = None
    payment_data: Optional[Any] = None
    customer_data: Optional[Any] = None
    meta: Optional[Any] = metadata_field()
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    items: Optional[List[OrderItemResponse]] = None


class PaymentGatewayCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    gateway_type: str = Field(..., min_length=1, max_length=50)
    credentials: Optional[dict] = None
    config: Optional[dict] = None
    is_active: bool = True


class PaymentGatewayUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    gateway_type: Optional[str] = Field(default=None, min_length=1, max_length=50)
    credentials: Optional[dict] = None
    config: Optional[dict] = None
    is_active: Optional[bool] = None


class PaymentGatewayResponse(EntityResponse):
    id: UUID
    tenant_id: UUID
    name: str
    gateway_type: str
    credentials: Optional[Any] = None
    config: Optional[Any] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PaymentRequest(BaseModel):
    """
    Payment result reported for an order.

    status is what the gateway reported, amount defaults to the order's
    pricing_data.total.
    """

    gateway_id: UUID
    amount: Optional[float] = Field(default=None, gt=0)
    currency: str = Field(default="usd", min_length=3, max_length=3)
    customer_email: Optional[EmailStr] = None
    status: PaymentStatus = PaymentStatus.succeeded
    transaction_id: Optional[str] = None
    error_message: Optional[str] = None


class PaymentTransactionResponse(EntityResponse):
    id: UUID
    order_id: UUID
    gateway_id: UUID
    transaction_id: Optional[str] = None
    amount: float
    currency: str
    status: PaymentStatus
    gateway_response: Optional[Any] = None
    created_at: Optional[datetime] = None


class PaymentResult(BaseModel):
    transaction: PaymentTransactionResponse
    order: OrderResponse


# ============================================================================
# Tenant configuration
# ============================================================================


class WorkflowCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    entity_type: str = Field(..., min_length=1, max_length=50)
    trigger: str = Field(..., min_length=1, max_length=100)
    steps: List[Any] = Field(default_factory=list)
    is_active: bool = True


class WorkflowUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    entity_type: Optional[str] = Field(default=None, min_length=1, max_length=50)
    trigger: Optional[str] = Field(default=None, min_length=1, max_length=100)
    steps: Optional[List[Any]] = None
    is_active: Optional[bool] = None


class WorkflowResponse(EntityResponse):
    id: UUID
    tenant_id: UUID
    name: str
    entity_type: str
    trigger: str
    steps: Optional[Any] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class DeliveryMethodCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    type: str = Field(..., min_length=1, max_length=50)
    config: Optional[dict] = None
    template: Optional[Any] = None
    is_active: bool = True


class DeliveryMethodUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    type: Optional[str] = Field(default=None, min_length=1, max_length=50)
    config: Optional[dict] = None
    template: Optional[Any] = None
    is_active: Optional[bool] = None


class DeliveryMethodResponse(EntityResponse):
    id: UUID
    tenant_id: UUID
    name: str
    type: str
    config: Optional[Any] = None
    template: Optional[Any] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class IntegrationCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    integration_type: str = Field(..., min_length=1, max_length=50)
    credentials: Optional[dict] = None
    field_mapping: Optional[dict] = None
    sync_config: Optional[dict] = None
    webhook_config: Optional[dict] = None
    is_active: bool = True


class IntegrationUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    integration_type: Optional[str] = Field(default=None, min_length=1, max_length=50)
    credentials: Optional[dict] = None
    field_mapping: Optional[dict] = None
    sync_config: Optional[dict] = None
    webhook_config: Optional[dict] = None
    is_active: Optional[bool] = None


class IntegrationResponse(EntityResponse):
    id: UUID
    tenant_id: UUID
    name: str
    integration_type: str
    credentials: Optional[Any] = None
    field_mapping: Optional[Any] = None
    sync_config: Optional[Any] = None
    webhook_config: Optional[Any] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ============================================================================
# Plugins
# ============================================================================


class PluginCreate(BaseModel):
    manifest: dict
    is_official: bool = False
    status: PluginStatus = PluginStatus.available


class PluginUpdate(BaseModel):
    manifest: Optional[dict] = None
    is_official: Optional[bool] = None
    status: Optional[PluginStatus] = None


class PluginResponse(EntityResponse):
    id: UUID
    name: str
    slug: str
    version: str
    author: Optional[str] = None
    description: Optional[str] = None
    manifest: Optional[Any] = None
    status: PluginStatus
    is_official: bool
    created_at: Optional[datetime] = None


class PluginInstall(BaseModel):
    config: dict = Field(default_factory=dict)
    enabled: bool = False


class PluginConfigUpdate(BaseModel):
    config: dict


class TenantPluginResponse(EntityResponse):
    id: UUID
    tenant_id: UUID
    plugin_id: UUID
    status: TenantPluginStatus
    config: Optional[Any] = None
    installed_at: Optional[datetime] = None
    plugin: Optional[PluginResponse] = None


class Identity(BaseModel):
    """Authenticated caller attached to the request"""

    id: str
    email: str
    role: str
    tenant_id: Optional[str] = None
    tenant_slug: Optional[str] = None
    auth_method: Literal["jwt", "api_key"] = "jwt"
