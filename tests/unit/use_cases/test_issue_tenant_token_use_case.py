from uuid import uuid4

import pytest

from src.api.utils.jwt import decode_tenant_token
from src.app.services.dtos import Identity
from src.app.use_cases.auth import GenerateApiKeyUseCase, IssueTenantTokenUseCase
from src.domain.entities import User, UserRole


class Secrets:
    ADMIN_JWT_SECRET = "admin-secret"
    TENANT_JWT_SECRET = "tenant-secret"
    JWT_EXPIRES_HOURS = 2


@pytest.fixture
def admin():
    return Identity(id=str(uuid4()), email="root@example.com", role="super_admin")


@pytest.mark.asyncio
async def test_issues_token_bound_to_tenant(mock_uow, admin, tenant_entity):
    mock_uow.tenants.get_by_id.return_value = tenant_entity

    result = await IssueTenantTokenUseCase(mock_uow, Secrets).execute(admin, tenant_entity.id)

    assert result.is_ok()
    assert result.value.expires_in == 7200
    claims = decode_tenant_token(result.value.token, config=Secrets)
    assert claims["tenant_id"] == str(tenant_entity.id)
    assert claims["tenant_slug"] == "acme"
    assert claims["id"] == admin.id


@pytest.mark.asyncio
async def test_unknown_tenant(mock_uow, admin):
    mock_uow.tenants.get_by_id.return_value = None

    result = await IssueTenantTokenUseCase(mock_uow, Secrets).execute(admin, uuid4())

    assert result.error.code == "TENANT_NOT_FOUND"


@pytest.mark.asyncio
async def test_suspended_tenant(mock_uow, admin, suspended_tenant_entity):
    mock_uow.tenants.get_by_id.return_value = suspended_tenant_entity

    result = await IssueTenantTokenUseCase(mock_uow, Secrets).execute(
        admin, suspended_tenant_entity.id
    )

    assert result.error.code == "TENANT_INACTIVE"


@pytest.mark.asyncio
async def test_generate_api_key_replaces_previous(mock_uow):
    user = User(email="root@example.com", password_hash="x", role=UserRole.admin, api_key="old")
    mock_uow.users.get_by_id.return_value = user
    mock_uow.users.update.side_effect = lambda entity: entity

    result = await GenerateApiKeyUseCase(mock_uow).execute(user.id)

    assert result.value.api_key.startswith("sk_")
    assert result.value.api_key != "old"
    assert user.api_key == result.value.api_key
