from src.domain.entities import DeliveryMethod, Integration, Workflow
from .base import ITenantScopedRepository


class IWorkflowRepository(ITenantScopedRepository[Workflow]):
    """Workflow repository interface"""


class IDeliveryMethodRepository(ITenantScopedRepository[DeliveryMethod]):
    """DeliveryMethod repository interface"""


class IIntegrationRepository(ITenantScopedRepository[Integration]):
    """Integration repository interface"""
