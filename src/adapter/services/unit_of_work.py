from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.catalog_repository import (
    ProductAttributeRepository,
    ProductRepository,
    ProductTypeRepository,
)
from src.adapter.repositories.configuration_repository import (
    DeliveryMethodRepository,
    IntegrationRepository,
    WorkflowRepository,
)
from src.adapter.repositories.order_repository import (
    OrderItemRepository,
    OrderRepository,
    PaymentGatewayRepository,
    PaymentTransactionRepository,
)
from src.adapter.repositories.plugin_repository import PluginRepository, TenantPluginRepository
from src.adapter.repositories.tenant_repository import TenantRepository
from src.adapter.repositories.user_repository import UserRepository
from src.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.users = UserRepository(self.session)
        self.tenants = TenantRepository(self.session)
        self.plugins = PluginRepository(self.session)
        self.product_types = ProductTypeRepository(self.session)
        self.products = ProductRepository(self.session)
        self.product_attributes = ProductAttributeRepository(self.session)
        self.orders = OrderRepository(self.session)
        self.order_items = OrderItemRepository(self.session)
        self.payment_gateways = PaymentGatewayRepository(self.session)
        self.payment_transactions = PaymentTransactionRepository(self.session)
        self.workflows = WorkflowRepository(self.session)
        self.delivery_methods = DeliveryMethodRepository(self.session)
        self.integrations = IntegrationRepository(self.session)
        self.tenant_plugins = TenantPluginRepository(self.session)
        return self

    async def __aexit__(self, *args):
        # Anything not committed inside the block is discarded
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
