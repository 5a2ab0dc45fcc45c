"""
Async engine factory for the two supported backends.

DB_TYPE=postgres uses asyncpg with a bounded pool, DB_TYPE=sqlite uses an
embedded aiosqlite file. Both share the same repositories, so tenant
filtering behaves identically.
"""

import logging

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

logger = logging.getLogger(__name__)


def normalize_database_url(url: str, db_type: str) -> str:
    """Ensure the async driver is part of the URL scheme"""
    if db_type == "postgres":
        for prefix in ("postgres://", "postgresql://"):
            if url.startswith(prefix):
                return url.replace(prefix, "postgresql+asyncpg://", 1)
        return url
    if url.startswith("sqlite://") and "+aiosqlite" not in url:
        return url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return url


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str, db_type: str = "sqlite", pool_size: int = 20) -> AsyncEngine:
    url = normalize_database_url(url, db_type)

    if db_type == "postgres":
        engine = create_async_engine(
            url,
            echo=False,
            pool_size=pool_size,
            max_overflow=10,
            pool_pre_ping=True,
        )
    elif db_type == "sqlite":
        engine = create_async_engine(url, echo=False)
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    else:
        raise ValueError(f"Unsupported DB_TYPE: {db_type}")

    logger.info("Database engine created (type=%s)", db_type)
    return engine
