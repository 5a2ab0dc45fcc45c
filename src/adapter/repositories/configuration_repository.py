from src.adapter.repositories.base import TenantScopedRepository
from src.app.repositories.configuration_repository import (
    IDeliveryMethodRepository,
    IIntegrationRepository,
    IWorkflowRepository,
)
from src.domain.entities import DeliveryMethod, Integration, Workflow


class WorkflowRepository(TenantScopedRepository[Workflow], IWorkflowRepository):
    model = Workflow
    filterable = ("is_active", "entity_type", "trigger")


class DeliveryMethodRepository(TenantScopedRepository[DeliveryMethod], IDeliveryMethodRepository):
    model = DeliveryMethod
    filterable = ("is_active", "type")


class IntegrationRepository(TenantScopedRepository[Integration], IIntegrationRepository):
    model = Integration
    filterable = ("is_active", "integration_type")
