"""Engine and session factory for the mapping store.

The process owns exactly one ``AsyncEngine``; sessions are opened from
``async_session_factory`` whenever a request or a CLI command needs one.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool
from sqlalchemy.sql import text
from sqlmodel import SQLModel

from shortener.core.config import settings

logger = logging.getLogger(__name__)

_POOLED = {
    "pool_size": settings.POSTGRES_POOL_SIZE,
    "max_overflow": settings.POSTGRES_POOL_MAX_OVERFLOW,
    "pool_timeout": settings.POSTGRES_POOL_TIMEOUT,
    "pool_recycle": settings.POSTGRES_POOL_RECYCLE,
    "pool_pre_ping": True,
}

# Engine keyword arguments per environment
ENGINE_CONFIGS: Dict[str, Dict] = {
    "development": {"echo": settings.DB_ECHO, **_POOLED},
    "staging": {"echo": False, **_POOLED},
    "production": {"echo": False, **_POOLED},
    "testing": {"echo": False, "poolclass": NullPool},
}


def get_engine_config(database_url: str) -> Dict:
    """Engine arguments for the current environment.

    SQLite drivers bring their own pool, so only ``echo`` applies to them.
    """
    config = ENGINE_CONFIGS.get(settings.ENVIRONMENT.value, ENGINE_CONFIGS["development"])
    if database_url.startswith("sqlite"):
        return {"echo": config.get("echo", False)}
    return config


def get_engine() -> AsyncEngine:
    """Build the async engine from ``SQLALCHEMY_DATABASE_URI``."""
    database_url = str(settings.SQLALCHEMY_DATABASE_URI)

    # Host part only; the DSN may carry a password
    logger.info(f"Creating database engine for {database_url.split('@')[-1]}")

    return create_async_engine(database_url, **get_engine_config(database_url))


engine = get_engine()

async_session_factory = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Open a session and close it when the block exits."""
    session = async_session_factory()
    try:
        yield session
    finally:
        await session.close()


async def init_models(bind: Optional[AsyncEngine] = None) -> None:
    """Create the mapping and credential tables if they do not exist.

    Args:
        bind: Engine to create the tables on (defaults to the shared engine)
    """
    # Registers the table models on SQLModel.metadata
    import shortener.models  # noqa: F401

    async with (bind or engine).begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Database tables are in place")


class DatabaseHealthCheck:
    """Connectivity check used by the health endpoint."""

    @staticmethod
    async def check_connection() -> Dict:
        """Run ``SELECT 1`` and report status, latency and any error."""
        loop = asyncio.get_running_loop()
        started = loop.time()

        try:
            async with async_session_factory() as session:
                await session.execute(text("SELECT 1"))
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return {"status": "unhealthy", "latency_ms": 0, "error": str(e)}

        return {
            "status": "healthy",
            "latency_ms": int((loop.time() - started) * 1000),
            "error": None,
        }
