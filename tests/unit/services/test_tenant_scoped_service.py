from uuid import uuid4

import pytest

from src.app.repositories.errors import ConstraintViolationError
from src.app.services.configuration_service import WorkflowService
from src.app.services.dtos import ProductTypeCreate, WorkflowCreate, WorkflowUpdate
from src.app.services.product_type_service import ProductTypeService
from src.domain.entities import ProductType, Workflow


def workflow(tenant_id, **fields) -> Workflow:
    return Workflow(
        tenant_id=tenant_id,
        name=fields.get("name", "Fulfil"),
        entity_type="order",
        trigger="order.created",
        steps=fields.get("steps", []),
    )


@pytest.mark.asyncio
async def test_create_scopes_entity_to_tenant(mock_uow):
    tenant_id = uuid4()
    mock_uow.workflows.create.side_effect = lambda entity: entity
    command = WorkflowCreate(
        name="Fulfil", entity_type="order", trigger="order.created", steps=[{"type": "email"}]
    )

    result = await WorkflowService(mock_uow).create(tenant_id, command)

    assert result.is_ok()
    created = mock_uow.workflows.create.await_args.args[0]
    assert created.tenant_id == tenant_id
    assert result.value.steps == [{"type": "email"}]
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_get_missing_is_not_found(mock_uow):
    mock_uow.workflows.get.return_value = None

    result = await WorkflowService(mock_uow).get(uuid4(), uuid4())

    assert result.is_err()
    assert result.error.code == "WORKFLOW_NOT_FOUND"


@pytest.mark.asyncio
async def test_get_passes_tenant_to_repository(mock_uow):
    tenant_id, workflow_id = uuid4(), uuid4()
    mock_uow.workflows.get.return_value = workflow(tenant_id)

    await WorkflowService(mock_uow).get(tenant_id, workflow_id)

    mock_uow.workflows.get.assert_awaited_once_with(tenant_id, workflow_id)


@pytest.mark.asyncio
async def test_update_applies_only_sent_fields(mock_uow):
    tenant_id = uuid4()
    existing = workflow(tenant_id, steps=[{"type": "email"}])
    mock_uow.workflows.get.return_value = existing
    mock_uow.workflows.update.side_effect = lambda entity: entity

    result = await WorkflowService(mock_uow).update(tenant_id, existing.id, WorkflowUpdate(name="Ship"))

    assert result.is_ok()
    assert result.value.name == "Ship"
    assert result.value.steps == [{"type": "email"}]


@pytest.mark.asyncio
async def test_list_builds_page(mock_uow):
    tenant_id = uuid4()
    mock_uow.workflows.list.return_value = ([workflow(tenant_id), workflow(tenant_id)], 5)

    result = await WorkflowService(mock_uow).list(tenant_id, {"is_active": True}, limit=2, offset=2)

    page = result.value
    assert (page.total, page.page, page.limit, page.pages) == (5, 2, 2, 3)
    assert len(page.data) == 2
    mock_uow.workflows.list.assert_awaited_once_with(tenant_id, {"is_active": True}, 2, 2)


@pytest.mark.asyncio
async def test_create_conflict(mock_uow):
    mock_uow.product_types.create.side_effect = ConstraintViolationError("UNIQUE constraint failed")

    result = await ProductTypeService(mock_uow).create(
        uuid4(), ProductTypeCreate(name="Card", slug="card")
    )

    assert result.is_err()
    assert result.error.code == "PRODUCT_TYPE_SLUG_EXISTS"
    mock_uow.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_delete_in_use(mock_uow):
    tenant_id = uuid4()
    mock_uow.product_types.get.return_value = ProductType(tenant_id=tenant_id, name="Card", slug="card")
    mock_uow.product_types.delete.side_effect = ConstraintViolationError("FOREIGN KEY constraint failed")

    result = await ProductTypeService(mock_uow).delete(tenant_id, uuid4())

    assert result.is_err()
    assert result.error.code == "PRODUCT_TYPE_IN_USE"


@pytest.mark.asyncio
async def test_update_rejects_null_for_required_fields(mock_uow):
    tenant_id = uuid4()
    existing = workflow(tenant_id)
    mock_uow.workflows.get.return_value = existing

    result = await WorkflowService(mock_uow).update(
        tenant_id, existing.id, WorkflowUpdate(name=None, is_active=None)
    )

    assert result.error.code == "VALIDATION_ERROR"
    assert "is_active, name" in result.error.message
    assert existing.name == "Fulfil"
    mock_uow.workflows.update.assert_not_awaited()
