"""
Commerce Domain Entities

All domain entities organized by model.
Each entity family in its own file.
"""

# Export all enums
from .enums import (
    UserRole,
    TenantStatus,
    TenantPlan,
    ProductStatus,
    OrderStatus,
    DeliveryStatus,
    PaymentStatus,
    PluginStatus,
    TenantPluginStatus,
)

# Export all entities
from .user import User
from .tenant import Tenant
from .product_type import ProductType
from .product import Product, ProductAttribute
from .order import Order, OrderItem
from .payment import PaymentGateway, PaymentTransaction
from .workflow import Workflow
from .delivery_method import DeliveryMethod
from .integration import Integration
from .plugin import Plugin, TenantPlugin

__all__ = [
    # Enums
    "UserRole",
    "TenantStatus",
    "TenantPlan",
    "ProductStatus",
    "OrderStatus",
    "DeliveryStatus",
    "PaymentStatus",
    "PluginStatus",
    "TenantPluginStatus",
    # Entities
    "User",
    "Tenant",
    "ProductType",
    "Product",
    "ProductAttribute",
    "Order",
    "OrderItem",
    "PaymentGateway",
    "PaymentTransaction",
    "Workflow",
    "DeliveryMethod",
    "Integration",
    "Plugin",
    "TenantPlugin",
]
