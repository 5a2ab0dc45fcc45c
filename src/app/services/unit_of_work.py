from abc import ABC, abstractmethod

from src.app.repositories.catalog_repository import (
    IProductAttributeRepository,
    IProductRepository,
    IProductTypeRepository,
)
from src.app.repositories.configuration_repository import (
    IDeliveryMethodRepository,
    IIntegrationRepository,
    IWorkflowRepository,
)
from src.app.repositories.order_repository import (
    IOrderItemRepository,
    IOrderRepository,
    IPaymentGatewayRepository,
    IPaymentTransactionRepository,
)
from src.app.repositories.plugin_repository import IPluginRepository, ITenantPluginRepository
from src.app.repositories.tenant_repository import ITenantRepository
from src.app.repositories.user_repository import IUserRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Global repositories
    users: IUserRepository
    tenants: ITenantRepository
    plugins: IPluginRepository

    # Tenant-owned repositories (initialized in __aenter__)
    product_types: IProductTypeRepository
    products: IProductRepository
    product_attributes: IProductAttributeRepository
    orders: IOrderRepository
    order_items: IOrderItemRepository
    payment_gateways: IPaymentGatewayRepository
    payment_transactions: IPaymentTransactionRepository
    workflows: IWorkflowRepository
    delivery_methods: IDeliveryMethodRepository
    integrations: IIntegrationRepository
    tenant_plugins: ITenantPluginRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
