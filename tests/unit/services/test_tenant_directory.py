import pytest

from src.app.services.cache import TTLCache
from src.app.services.tenant_directory import TenantDirectory, normalize_host
from src.domain.entities import Tenant


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Shop.Acme.com", "shop.acme.com"),
        ("shop.acme.com:8443", "shop.acme.com"),
        ("  acme.platform.test ", "acme.platform.test"),
        ("", ""),
    ],
)
def test_normalize_host(raw, expected):
    assert normalize_host(raw) == expected


@pytest.mark.asyncio
async def test_resolve_by_slug_active(mock_uow, tenant_entity):
    mock_uow.tenants.get_by_slug.return_value = tenant_entity

    result = await TenantDirectory(mock_uow).resolve_by_slug("acme")

    assert result.is_ok()
    assert result.value.id == tenant_entity.id
    mock_uow.tenants.get_by_slug.assert_awaited_once_with("acme")


@pytest.mark.asyncio
async def test_resolve_by_slug_unknown(mock_uow):
    mock_uow.tenants.get_by_slug.return_value = None

    result = await TenantDirectory(mock_uow).resolve_by_slug("nobody")

    assert result.is_err()
    assert result.error.code == "TENANT_NOT_FOUND"


@pytest.mark.asyncio
async def test_suspended_tenant_does_not_resolve(mock_uow, suspended_tenant_entity):
    mock_uow.tenants.get_by_slug.return_value = suspended_tenant_entity

    result = await TenantDirectory(mock_uow).resolve_by_slug("globex")

    assert result.is_err()
    assert result.error.code == "TENANT_NOT_FOUND"


@pytest.mark.asyncio
async def test_resolve_by_host_prefers_custom_domain(mock_uow, tenant_entity):
    mock_uow.tenants.get_by_domain.return_value = tenant_entity

    result = await TenantDirectory(mock_uow).resolve_by_host("SHOP.acme.com:443")

    assert result.is_ok()
    mock_uow.tenants.get_by_domain.assert_awaited_once_with("shop.acme.com")
    mock_uow.tenants.get_by_subdomain.assert_not_awaited()


@pytest.mark.asyncio
async def test_resolve_by_host_falls_back_to_subdomain(mock_uow, tenant_entity):
    mock_uow.tenants.get_by_domain.return_value = None
    mock_uow.tenants.get_by_subdomain.return_value = tenant_entity

    result = await TenantDirectory(mock_uow).resolve_by_host("acme.platform.test")

    assert result.is_ok()
    mock_uow.tenants.get_by_subdomain.assert_awaited_once_with("acme")


@pytest.mark.asyncio
async def test_empty_host_is_not_found(mock_uow):
    result = await TenantDirectory(mock_uow).resolve_by_host("")

    assert result.is_err()
    mock_uow.tenants.get_by_domain.assert_not_awaited()


@pytest.mark.asyncio
async def test_resolution_is_cached(mock_uow, tenant_entity):
    mock_uow.tenants.get_by_slug.return_value = tenant_entity
    directory = TenantDirectory(mock_uow, TTLCache(ttl_seconds=30))

    first = await directory.resolve_by_slug("acme")
    second = await directory.resolve_by_slug("acme")

    assert first.value == second.value
    assert mock_uow.tenants.get_by_slug.await_count == 1


@pytest.mark.asyncio
async def test_failed_resolution_is_not_cached(mock_uow, tenant_entity):
    mock_uow.tenants.get_by_slug.side_effect = [None, tenant_entity]
    directory = TenantDirectory(mock_uow, TTLCache(ttl_seconds=30))

    assert (await directory.resolve_by_slug("acme")).is_err()
    assert (await directory.resolve_by_slug("acme")).is_ok()


@pytest.mark.asyncio
async def test_subdomain_hosts_share_one_cache_entry(mock_uow, tenant_entity):
    mock_uow.tenants.get_by_domain.return_value = None
    mock_uow.tenants.get_by_subdomain.return_value = tenant_entity
    cache = TTLCache(ttl_seconds=30)
    directory = TenantDirectory(mock_uow, cache)

    for i in range(50):
        assert (await directory.resolve_by_host(f"acme.x{i}.example")).is_ok()

    assert len(cache) == 1
    assert mock_uow.tenants.get_by_subdomain.await_count == 1


@pytest.mark.asyncio
async def test_unknown_hosts_are_not_cached(mock_uow):
    mock_uow.tenants.get_by_domain.return_value = None
    mock_uow.tenants.get_by_subdomain.return_value = None
    cache = TTLCache(ttl_seconds=30)
    directory = TenantDirectory(mock_uow, cache)

    for i in range(20):
        assert (await directory.resolve_by_host(f"nobody{i}.example")).is_err()

    assert len(cache) == 0


@pytest.mark.asyncio
async def test_custom_domain_wins_over_cached_subdomain(mock_uow, tenant_entity):
    directory = TenantDirectory(mock_uow, TTLCache(ttl_seconds=30))
    mock_uow.tenants.get_by_domain.return_value = None
    mock_uow.tenants.get_by_subdomain.return_value = tenant_entity
    await directory.resolve_by_host("acme.platform.test")

    other = Tenant(slug="globex", name="Globex", domain="acme.other-shop.com")
    mock_uow.tenants.get_by_domain.return_value = other
    result = await directory.resolve_by_host("acme.other-shop.com")

    assert result.value.id == other.id
