from unittest.mock import AsyncMock, MagicMock

import pytest

from src.app.services.dtos import TenantResponse
from src.domain.entities import Tenant, TenantStatus

REPOSITORIES = (
    "users",
    "tenants",
    "plugins",
    "product_types",
    "products",
    "product_attributes",
    "orders",
    "order_items",
    "payment_gateways",
    "payment_transactions",
    "workflows",
    "delivery_methods",
    "integrations",
    "tenant_plugins",
)


@pytest.fixture
def mock_uow():
    """Mock UnitOfWork with all repositories"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    # Child attributes of an AsyncMock are AsyncMocks, so every repository
    # method can be awaited
    for name in REPOSITORIES:
        setattr(uow, name, AsyncMock())
    return uow


@pytest.fixture
def tenant_entity():
    return Tenant(slug="acme", name="Acme", domain="shop.acme.com", subdomain="acme")


@pytest.fixture
def tenant(tenant_entity):
    return TenantResponse.model_validate(tenant_entity)


@pytest.fixture
def suspended_tenant_entity():
    return Tenant(slug="globex", name="Globex", status=TenantStatus.suspended)
