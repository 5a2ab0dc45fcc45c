from fastapi import Request
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.database import build_engine
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.plugins.dispatcher import HookDispatcher
from src.app.services.cache import TTLCache

engine = build_engine(
    ApplicationConfig.DATABASE_URL,
    db_type=ApplicationConfig.DB_TYPE,
    pool_size=ApplicationConfig.DB_POOL_SIZE,
)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_config(request: Request):
    """Config class the running app was created with"""
    return request.app.state.config


def get_tenant_cache(request: Request) -> TTLCache:
    return request.app.state.tenant_cache


def get_hook_dispatcher(request: Request) -> HookDispatcher:
    return request.app.state.hook_dispatcher
