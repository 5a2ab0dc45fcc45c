"""
Commerce Domain Enums

Enumeration types shared by the domain entities.
"""

from enum import Enum


class UserRole(str, Enum):
    """Platform-level user role"""

    user = "user"
    admin = "admin"
    super_admin = "super_admin"


class TenantStatus(str, Enum):
    """Tenant status, only active tenants are resolvable"""

    active = "active"
    suspended = "suspended"
    deleted = "deleted"


class TenantPlan(str, Enum):
    free = "free"
    basic = "basic"
    pro = "pro"
    enterprise = "enterprise"


class ProductStatus(str, Enum):
    """Product lifecycle, only active products are visible on the storefront"""

    draft = "draft"
    active = "active"
    archived = "archived"


class OrderStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    processing = "processing"
    completed = "completed"
    cancelled = "cancelled"
    payment_failed = "payment_failed"
    refunded = "refunded"


class DeliveryStatus(str, Enum):
    pending = "pending"
    delivered = "delivered"
    failed = "failed"


class PaymentStatus(str, Enum):
    succeeded = "succeeded"
    failed = "failed"


class PluginStatus(str, Enum):
    """Catalog availability of a plugin"""

    available = "available"
    deprecated = "deprecated"


class TenantPluginStatus(str, Enum):
    """Per-tenant installation state"""

    active = "active"
    inactive = "inactive"
