"""
Tenant configuration routes: workflows, delivery methods and integrations.

Integrations carry third-party credentials, so reading them requires a
tenant token as well.
"""

from src.api.utils.crud import crud_router
from src.app.services.configuration_service import (
    DeliveryMethodService,
    IntegrationService,
    WorkflowService,
)
from src.app.services.dtos import (
    DeliveryMethodCreate,
    DeliveryMethodResponse,
    DeliveryMethodUpdate,
    IntegrationCreate,
    IntegrationResponse,
    IntegrationUpdate,
    WorkflowCreate,
    WorkflowResponse,
    WorkflowUpdate,
)

workflows = crud_router(
    "/workflows",
    "Workflow",
    WorkflowService,
    WorkflowCreate,
    WorkflowUpdate,
    WorkflowResponse,
    filters={"is_active": bool, "entity_type": str, "trigger": str},
)

delivery_methods = crud_router(
    "/delivery-methods",
    "Delivery method",
    DeliveryMethodService,
    DeliveryMethodCreate,
    DeliveryMethodUpdate,
    DeliveryMethodResponse,
    filters={"is_active": bool, "type": str},
)

integrations = crud_router(
    "/integrations",
    "Integration",
    IntegrationService,
    IntegrationCreate,
    IntegrationUpdate,
    IntegrationResponse,
    filters={"is_active": bool, "integration_type": str},
    protect_reads=True,
)
