import pytest
from httpx import AsyncClient

from src.app.plugins import HookName

MANIFEST = {
    "name": "Fraud Guard",
    "slug": "fraud-guard",
    "version": "1.0.0",
    "description": "Blocks suspicious orders and payments",
    "author": "Acme Labs",
    "category": "payment",
}


@pytest.fixture
def hook_registry(app):
    return app.state.hook_registry


async def install_plugin(client: AsyncClient, admin_headers, tenant, manifest=MANIFEST):
    response = await client.post(
        "/api/admin/plugins", json={"manifest": manifest}, headers=admin_headers
    )
    assert response.status_code == 201, response.text
    plugin_id = response.json()["data"]["id"]
    response = await client.post(
        f"/api/{tenant['tenant']['slug']}/admin/plugins/{plugin_id}/install",
        json={"enabled": True},
        headers=tenant["headers"],
    )
    assert response.status_code == 201, response.text
    return plugin_id


async def create_gateway(client: AsyncClient, tenant, **fields):
    response = await client.post(
        f"/api/{tenant['tenant']['slug']}/admin/payment-gateways",
        json={"name": "Stripe", "gateway_type": "stripe", **fields},
        headers=tenant["headers"],
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def create_order(client: AsyncClient, tenant, product, quantity=2):
    return await client.post(
        f"/api/{tenant['tenant']['slug']}/admin/orders",
        json={
            "items": [{"product_id": product["id"], "quantity": quantity}],
            "customer_data": {"email": "shopper@example.com"},
        },
        headers=tenant["headers"],
    )


@pytest.mark.asyncio
async def test_create_order_captures_prices(client: AsyncClient, acme, product_factory):
    """Create order

    Given a product priced 25.0 in its metadata
    When I order 2 of it
    Then the order and its item are written together
    And the item captures the unit price at order time
    """
    product = await product_factory("acme", acme["headers"])

    response = await create_order(client, acme, product)

    assert response.status_code == 201
    order = response.json()["data"]
    assert order["status"] == "pending"
    assert order["order_number"].startswith("ORD-")
    assert order["pricing_data"]["total"] == 50.0
    assert len(order["items"]) == 1
    assert order["items"][0]["unit_price"] == 25.0
    assert order["items"][0]["quantity"] == 2

    response = await client.get(f"/api/acme/admin/orders/{order['id']}")
    assert response.json()["data"]["items"][0]["product_id"] == product["id"]


@pytest.mark.asyncio
async def test_create_order_with_foreign_product(client: AsyncClient, acme, globex, product_factory):
    product = await product_factory("globex", globex["headers"])

    response = await create_order(client, acme, product)

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_PRODUCT"


@pytest.mark.asyncio
async def test_duplicate_order_number(client: AsyncClient, acme):
    for expected in (201, 409):
        response = await client.post(
            "/api/acme/admin/orders", json={"order_number": "A-1"}, headers=acme["headers"]
        )
        assert response.status_code == expected
    assert response.json()["error"]["code"] == "ORDER_NUMBER_EXISTS"


@pytest.mark.asyncio
async def test_before_order_hook_rejects(
    client: AsyncClient, admin_headers, acme, product_factory, hook_registry
):
    def reject(context, payload):
        raise ValueError("order blocked by fraud rules")

    hook_registry.register("fraud-guard", HookName.before_order_create, reject)
    await install_plugin(client, admin_headers, acme)
    product = await product_factory("acme", acme["headers"])

    response = await create_order(client, acme, product)

    assert response.status_code == 400
    body = response.json()
    assert body["error"]["code"] == "ORDER_REJECTED"
    assert "order blocked by fraud rules" in body["error"]["message"]

    response = await client.get("/api/acme/admin/orders")
    assert response.json()["data"]["total"] == 0


@pytest.mark.asyncio
async def test_before_order_hook_can_modify_payload(
    client: AsyncClient, admin_headers, acme, product_factory, hook_registry
):
    def tag(context, payload):
        payload.metadata["risk"] = context.plugin.config.get("level", "low")
        return payload

    hook_registry.register("fraud-guard", HookName.before_order_create, tag)
    await install_plugin(client, admin_headers, acme)
    product = await product_factory("acme", acme["headers"])

    response = await create_order(client, acme, product)

    assert response.status_code == 201
    assert response.json()["data"]["metadata"] == {"risk": "low"}


@pytest.mark.asyncio
async def test_hooks_of_other_tenants_do_not_run(
    client: AsyncClient, admin_headers, acme, globex, product_factory, hook_registry
):
    def reject(context, payload):
        raise ValueError("blocked")

    hook_registry.register("fraud-guard", HookName.before_order_create, reject)
    await install_plugin(client, admin_headers, globex)
    product = await product_factory("acme", acme["headers"])

    response = await create_order(client, acme, product)

    assert response.status_code == 201


@pytest.mark.asyncio
async def test_successful_payment_confirms_order(client: AsyncClient, acme, product_factory):
    product = await product_factory("acme", acme["headers"])
    gateway = await create_gateway(client, acme)
    order = (await create_order(client, acme, product)).json()["data"]

    response = await client.post(
        f"/api/acme/admin/orders/{order['id']}/payments",
        json={"gateway_id": gateway["id"], "transaction_id": "pi_123"},
        headers=acme["headers"],
    )

    assert response.status_code == 201
    result = response.json()["data"]
    assert result["transaction"]["status"] == "succeeded"
    assert result["transaction"]["amount"] == 50.0
    assert result["order"]["status"] == "confirmed"
    assert result["order"]["payment_data"]["transaction_id"] == "pi_123"

    response = await client.get(
        f"/api/acme/admin/orders/{order['id']}/payments", headers=acme["headers"]
    )
    assert len(response.json()["data"]) == 1


@pytest.mark.asyncio
async def test_failed_payment_marks_order(client: AsyncClient, acme, product_factory):
    product = await product_factory("acme", acme["headers"])
    gateway = await create_gateway(client, acme)
    order = (await create_order(client, acme, product)).json()["data"]

    response = await client.post(
        f"/api/acme/admin/orders/{order['id']}/payments",
        json={"gateway_id": gateway["id"], "status": "failed", "error_message": "card declined"},
        headers=acme["headers"],
    )

    assert response.status_code == 201
    assert response.json()["data"]["order"]["status"] == "payment_failed"


@pytest.mark.asyncio
async def test_inactive_gateway_is_rejected(client: AsyncClient, acme, product_factory):
    product = await product_factory("acme", acme["headers"])
    gateway = await create_gateway(client, acme, is_active=False)
    order = (await create_order(client, acme, product)).json()["data"]

    response = await client.post(
        f"/api/acme/admin/orders/{order['id']}/payments",
        json={"gateway_id": gateway["id"]},
        headers=acme["headers"],
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "PAYMENT_GATEWAY_INACTIVE"


@pytest.mark.asyncio
async def test_before_payment_hook_failure_persists_nothing(
    client: AsyncClient, admin_headers, acme, product_factory, hook_registry
):
    """Payment rejected by a plugin

    Given an enabled plugin whose before_payment_process handler raises
    When a payment is processed
    Then the request fails with PAYMENT_REJECTED
    And no transaction is stored and the order stays pending
    """

    async def reject(context, payload):
        raise RuntimeError("amount over limit")

    hook_registry.register("fraud-guard", HookName.before_payment_process, reject)
    await install_plugin(client, admin_headers, acme)
    product = await product_factory("acme", acme["headers"])
    gateway = await create_gateway(client, acme)
    order = (await create_order(client, acme, product)).json()["data"]

    response = await client.post(
        f"/api/acme/admin/orders/{order['id']}/payments",
        json={"gateway_id": gateway["id"]},
        headers=acme["headers"],
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "PAYMENT_REJECTED"

    response = await client.get(
        f"/api/acme/admin/orders/{order['id']}/payments", headers=acme["headers"]
    )
    assert response.json()["data"] == []
    response = await client.get(f"/api/acme/admin/orders/{order['id']}")
    assert response.json()["data"]["status"] == "pending"


@pytest.mark.asyncio
async def test_after_payment_hook_failure_keeps_payment(
    client: AsyncClient, admin_headers, acme, product_factory, hook_registry
):
    """Failing after hook

    Given an enabled plugin whose after_payment_success handler raises
    When a payment succeeds
    Then the response is still successful and the order is confirmed
    """
    calls = []

    def explode(context, payload):
        calls.append(payload.order_id)
        raise RuntimeError("webhook unreachable")

    hook_registry.register("fraud-guard", HookName.after_payment_success, explode)
    await install_plugin(client, admin_headers, acme)
    product = await product_factory("acme", acme["headers"])
    gateway = await create_gateway(client, acme)
    order = (await create_order(client, acme, product)).json()["data"]

    response = await client.post(
        f"/api/acme/admin/orders/{order['id']}/payments",
        json={"gateway_id": gateway["id"]},
        headers=acme["headers"],
    )

    assert response.status_code == 201
    assert calls == [order["id"]]
    response = await client.get(f"/api/acme/admin/orders/{order['id']}")
    assert response.json()["data"]["status"] == "confirmed"


@pytest.mark.asyncio
async def test_disabled_plugin_hooks_do_not_run(
    client: AsyncClient, admin_headers, acme, product_factory, hook_registry
):
    def reject(context, payload):
        raise ValueError("blocked")

    hook_registry.register("fraud-guard", HookName.before_order_create, reject)
    plugin_id = await install_plugin(client, admin_headers, acme)
    response = await client.post(
        f"/api/acme/admin/plugins/{plugin_id}/disable", headers=acme["headers"]
    )
    assert response.json()["data"]["status"] == "inactive"
    product = await product_factory("acme", acme["headers"])

    response = await create_order(client, acme, product)

    assert response.status_code == 201
