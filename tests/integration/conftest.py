import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.database import build_engine
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.auth import EnsureSuperAdminUseCase
from src.depends import get_unit_of_work

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin123456"
ADMIN_API_KEY = "sk_test_super_admin_key"


class TestConfig(ApplicationConfig):
    __test__ = False

    BCRYPT_ROUNDS = 4
    ENABLE_LOGGING_MIDDLEWARE = False
    TENANT_CACHE_TTL_SECONDS = 30
    RATE_LIMIT_MAX_REQUESTS = 1000
    SUPER_ADMIN_EMAIL = ADMIN_EMAIL
    SUPER_ADMIN_PASSWORD = ADMIN_PASSWORD
    SUPER_ADMIN_API_KEY = ADMIN_API_KEY


@pytest.fixture
def config():
    return TestConfig


@pytest_asyncio.fixture
async def engine():
    engine = build_engine("sqlite+aiosqlite:///./test.db", db_type="sqlite")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest.fixture
def app(db_session, config):
    from src.api.app import create_app

    app = create_app(config)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    return app


@pytest_asyncio.fixture
async def client(app, db_session, config):
    # ASGITransport does not run the lifespan, bootstrap the super admin here
    await EnsureSuperAdminUseCase(
        SqlAlchemyUnitOfWork(db_session), bcrypt_rounds=config.BCRYPT_ROUNDS
    ).execute(config.SUPER_ADMIN_EMAIL, config.SUPER_ADMIN_PASSWORD, config.SUPER_ADMIN_API_KEY)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def admin_headers(client: AsyncClient):
    response = await client.post(
        "/api/auth/admin/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD}
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['data']['token']}"}


@pytest.fixture
def api_key_headers():
    return {"X-API-Key": ADMIN_API_KEY}


async def create_tenant(client: AsyncClient, headers: dict, slug: str, **fields) -> dict:
    response = await client.post(
        "/api/admin/tenants", json={"slug": slug, "name": slug.title(), **fields}, headers=headers
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def tenant_token_headers(client: AsyncClient, headers: dict, tenant_id: str) -> dict:
    response = await client.post(f"/api/admin/tenants/{tenant_id}/tokens", headers=headers)
    assert response.status_code == 201, response.text
    return {"Authorization": f"Bearer {response.json()['data']['token']}"}


@pytest.fixture
def tenant_factory(client: AsyncClient, admin_headers):
    """Create an active tenant and return it with tenant-token headers"""

    async def factory(slug: str, **fields) -> dict:
        tenant = await create_tenant(client, admin_headers, slug, **fields)
        headers = await tenant_token_headers(client, admin_headers, tenant["id"])
        return {"tenant": tenant, "headers": headers}

    return factory


@pytest.fixture
def product_factory(client: AsyncClient):
    async def factory(slug: str, headers: dict, **fields) -> dict:
        return await create_product(client, slug, headers, **fields)

    return factory


@pytest_asyncio.fixture
async def acme(client: AsyncClient, admin_headers):
    """Active tenant 'acme' with a tenant token"""
    tenant = await create_tenant(client, admin_headers, "acme", domain="shop.acme.com", subdomain="acme")
    return {"tenant": tenant, "headers": await tenant_token_headers(client, admin_headers, tenant["id"])}


@pytest_asyncio.fixture
async def globex(client: AsyncClient, admin_headers):
    """Second active tenant 'globex' with a tenant token"""
    tenant = await create_tenant(client, admin_headers, "globex")
    return {"tenant": tenant, "headers": await tenant_token_headers(client, admin_headers, tenant["id"])}


async def create_product(client: AsyncClient, slug: str, headers: dict, **fields) -> dict:
    """Create a product type and a product under it for the tenant slug"""
    response = await client.post(
        f"/api/{slug}/admin/product-types",
        json={"name": "Gift Card", "slug": fields.pop("type_slug", "gift-card")},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    product_type = response.json()["data"]

    body = {
        "product_type_id": product_type["id"],
        "name": fields.pop("name", "Coffee Card"),
        "slug": fields.pop("product_slug", "coffee-card"),
        "status": fields.pop("status", "active"),
        "metadata": fields.pop("metadata", {"price": 25.0}),
    }
    response = await client.post(f"/api/{slug}/admin/products", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]
