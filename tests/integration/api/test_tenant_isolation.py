import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_rows_are_invisible_to_other_tenants(client: AsyncClient, acme, globex, product_factory):
    """Cross-tenant isolation

    Given a product created by tenant acme
    When tenant globex lists or fetches products
    Then the product is neither listed nor retrievable by id
    """
    product = await product_factory("acme", acme["headers"])

    response = await client.get("/api/globex/admin/products")
    assert response.status_code == 200
    assert response.json()["data"]["total"] == 0

    response = await client.get(f"/api/globex/admin/products/{product['id']}")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "PRODUCT_NOT_FOUND"

    response = await client.get(f"/api/acme/admin/products/{product['id']}")
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_other_tenant_cannot_update_or_delete(client: AsyncClient, acme, globex, product_factory):
    product = await product_factory("acme", acme["headers"])

    response = await client.put(
        f"/api/globex/admin/products/{product['id']}",
        json={"name": "Stolen"},
        headers=globex["headers"],
    )
    assert response.status_code == 404

    response = await client.delete(
        f"/api/globex/admin/products/{product['id']}", headers=globex["headers"]
    )
    assert response.status_code == 404

    response = await client.get(f"/api/acme/admin/products/{product['id']}")
    assert response.json()["data"]["name"] == "Coffee Card"


@pytest.mark.asyncio
async def test_token_of_another_tenant_is_forbidden(client: AsyncClient, acme, globex):
    response = await client.post(
        "/api/acme/admin/workflows",
        json={"name": "Fulfil", "entity_type": "order", "trigger": "order.created"},
        headers=globex["headers"],
    )

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "TENANT_MISMATCH"


@pytest.mark.asyncio
async def test_writes_require_tenant_token(client: AsyncClient, acme):
    response = await client.post(
        "/api/acme/admin/workflows",
        json={"name": "Fulfil", "entity_type": "order", "trigger": "order.created"},
    )

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHORIZED"


@pytest.mark.asyncio
async def test_product_type_of_another_tenant_is_rejected(client: AsyncClient, acme, globex):
    response = await client.post(
        "/api/acme/admin/product-types",
        json={"name": "Gift Card", "slug": "gift-card"},
        headers=acme["headers"],
    )
    acme_type = response.json()["data"]

    response = await client.post(
        "/api/globex/admin/products",
        json={"product_type_id": acme_type["id"], "name": "Card", "slug": "card"},
        headers=globex["headers"],
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_PRODUCT_TYPE"


@pytest.mark.asyncio
async def test_same_slug_allowed_in_different_tenants(client: AsyncClient, acme, globex):
    for tenant in (acme, globex):
        response = await client.post(
            f"/api/{tenant['tenant']['slug']}/admin/product-types",
            json={"name": "Gift Card", "slug": "gift-card"},
            headers=tenant["headers"],
        )
        assert response.status_code == 201


@pytest.mark.asyncio
async def test_credentials_need_tenant_token_to_read(client: AsyncClient, acme):
    response = await client.post(
        "/api/acme/admin/payment-gateways",
        json={"name": "Stripe", "gateway_type": "stripe", "credentials": {"secret": "sk_live"}},
        headers=acme["headers"],
    )
    assert response.status_code == 201

    response = await client.get("/api/acme/admin/payment-gateways")
    assert response.status_code == 401

    response = await client.get("/api/acme/admin/payment-gateways", headers=acme["headers"])
    assert response.status_code == 200
    assert response.json()["data"]["data"][0]["credentials"] == {"secret": "sk_live"}


@pytest.mark.asyncio
async def test_unknown_tenant_slug_is_not_found(client: AsyncClient):
    response = await client.get("/api/nobody/admin/products")

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "TENANT_NOT_FOUND"
