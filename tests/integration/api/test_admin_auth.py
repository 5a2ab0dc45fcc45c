import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_admin_login_returns_token(client: AsyncClient):
    """Admin login

    Given the bootstrapped super admin
    When I log in with the configured credentials
    Then I receive an admin token and my user summary
    """
    response = await client.post(
        "/api/auth/admin/login",
        json={"email": "admin@example.com", "password": "admin123456"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert isinstance(body["data"]["token"], str)
    assert body["data"]["user"]["email"] == "admin@example.com"
    assert body["data"]["user"]["role"] == "super_admin"


@pytest.mark.asyncio
async def test_admin_login_wrong_password(client: AsyncClient):
    response = await client.post(
        "/api/auth/admin/login",
        json={"email": "admin@example.com", "password": "wrong-password"},
    )

    assert response.status_code == 401
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "INVALID_CREDENTIALS"
    assert body["statusCode"] == 401


@pytest.mark.asyncio
async def test_admin_login_unknown_email(client: AsyncClient):
    response = await client.post(
        "/api/auth/admin/login",
        json={"email": "nobody@example.com", "password": "admin123456"},
    )

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_regular_user_cannot_log_in_as_admin(client: AsyncClient, admin_headers):
    """Only admin and super_admin roles may use the admin API"""
    response = await client.post(
        "/api/admin/users",
        json={"email": "shopper@example.com", "password": "password123", "role": "user"},
        headers=admin_headers,
    )
    assert response.status_code == 201

    response = await client.post(
        "/api/auth/admin/login",
        json={"email": "shopper@example.com", "password": "password123"},
    )

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_admin_routes_require_authentication(client: AsyncClient):
    response = await client.get("/api/admin/tenants")

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHORIZED"


@pytest.mark.asyncio
async def test_admin_routes_reject_invalid_token(client: AsyncClient):
    response = await client.get(
        "/api/admin/tenants", headers={"Authorization": "Bearer not-a-token"}
    )

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_TOKEN"


@pytest.mark.asyncio
async def test_admin_routes_accept_api_key(client: AsyncClient, api_key_headers):
    response = await client.get("/api/admin/tenants", headers=api_key_headers)

    assert response.status_code == 200
    assert response.json()["data"]["total"] == 0


@pytest.mark.asyncio
async def test_admin_routes_reject_unknown_api_key(client: AsyncClient):
    response = await client.get("/api/admin/tenants", headers={"X-API-Key": "sk_unknown"})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_API_KEY"


@pytest.mark.asyncio
async def test_tenant_token_is_not_an_admin_token(client: AsyncClient, acme):
    """Tokens are signed with separate secrets"""
    response = await client.get("/api/admin/tenants", headers=acme["headers"])

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_generate_api_key_rotates_key(client: AsyncClient, admin_headers, api_key_headers):
    """Generate API key

    Given an authenticated admin
    When I generate a new API key
    Then the new key authenticates admin requests
    And the previous key stops working
    """
    response = await client.post("/api/auth/admin/api-keys", headers=admin_headers)

    assert response.status_code == 201
    new_key = response.json()["data"]["api_key"]
    assert new_key.startswith("sk_")

    response = await client.get("/api/admin/users", headers={"X-API-Key": new_key})
    assert response.status_code == 200

    response = await client.get("/api/admin/users", headers=api_key_headers)
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_api_key_cannot_generate_api_key(client: AsyncClient, api_key_headers):
    response = await client.post("/api/auth/admin/api-keys", headers=api_key_headers)

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHORIZED"
