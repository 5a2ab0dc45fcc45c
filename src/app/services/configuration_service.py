"""
Tenant configuration entities: workflows, delivery methods and integrations.
Plain tenant-scoped CRUD, no relationships between them.
"""

from src.app.services.base import TenantScopedService
from src.app.services.dtos import DeliveryMethodResponse, IntegrationResponse, WorkflowResponse
from src.domain.entities import DeliveryMethod, Integration, Workflow


class WorkflowService(TenantScopedService[Workflow, WorkflowResponse]):
    entity = Workflow
    response = WorkflowResponse
    repository_name = "workflows"
    error_prefix = "WORKFLOW"
    label = "Workflow"


class DeliveryMethodService(TenantScopedService[DeliveryMethod, DeliveryMethodResponse]):
    entity = DeliveryMethod
    response = DeliveryMethodResponse
    repository_name = "delivery_methods"
    error_prefix = "DELIVERY_METHOD"
    label = "Delivery method"


class IntegrationService(TenantScopedService[Integration, IntegrationResponse]):
    entity = Integration
    response = IntegrationResponse
    repository_name = "integrations"
    error_prefix = "INTEGRATION"
    label = "Integration"
