import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_admin_lists_products_of_every_tenant(
    client: AsyncClient, admin_headers, acme, globex, product_factory
):
    """Cross-tenant product listing

    Given products owned by two tenants
    When a platform admin lists products
    Then both are returned, and tenant_id narrows the list to one tenant
    """
    acme_product = await product_factory("acme", acme["headers"])
    globex_product = await product_factory("globex", globex["headers"], status="draft")

    response = await client.get("/api/admin/products", headers=admin_headers)

    assert response.status_code == 200
    page = response.json()["data"]
    assert page["total"] == 2
    assert {p["id"] for p in page["data"]} == {acme_product["id"], globex_product["id"]}

    response = await client.get(
        f"/api/admin/products?tenant_id={globex['tenant']['id']}", headers=admin_headers
    )
    assert [p["id"] for p in response.json()["data"]["data"]] == [globex_product["id"]]

    response = await client.get("/api/admin/products?status=active", headers=admin_headers)
    assert [p["id"] for p in response.json()["data"]["data"]] == [acme_product["id"]]


@pytest.mark.asyncio
async def test_admin_get_update_delete_any_product(
    client: AsyncClient, api_key_headers, globex, product_factory
):
    product = await product_factory("globex", globex["headers"], status="draft")
    url = f"/api/admin/products/{product['id']}"

    response = await client.get(url, headers=api_key_headers)
    assert response.status_code == 200
    assert response.json()["data"]["tenant_id"] == globex["tenant"]["id"]

    response = await client.put(
        url, json={"status": "active", "metadata": {"price": 30.0}}, headers=api_key_headers
    )
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "active"
    assert response.json()["data"]["metadata"] == {"price": 30.0}

    # The owning tenant sees the change
    response = await client.get("/api/globex/storefront/products")
    assert response.json()["data"]["total"] == 1

    response = await client.delete(url, headers=api_key_headers)
    assert response.status_code == 200

    response = await client.get(url, headers=api_key_headers)
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "PRODUCT_NOT_FOUND"


@pytest.mark.asyncio
async def test_admin_update_rejects_product_type_of_other_tenant(
    client: AsyncClient, admin_headers, acme, globex, product_factory
):
    acme_product = await product_factory("acme", acme["headers"])
    globex_product = await product_factory("globex", globex["headers"])

    response = await client.put(
        f"/api/admin/products/{acme_product['id']}",
        json={"product_type_id": globex_product["product_type_id"]},
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_PRODUCT_TYPE"


@pytest.mark.asyncio
async def test_admin_product_routes_reject_tenant_tokens(client: AsyncClient, acme, product_factory):
    product = await product_factory("acme", acme["headers"])

    response = await client.get("/api/admin/products", headers=acme["headers"])
    assert response.status_code == 401

    response = await client.delete(f"/api/admin/products/{product['id']}", headers=acme["headers"])
    assert response.status_code == 401
