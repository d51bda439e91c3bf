"""
Database Configuration
Async SQLAlchemy for the flow history store (SQLite file by default)
"""

from typing import Any, AsyncGenerator, Dict

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from capital_flow.config import settings


class Base(DeclarativeBase):
    """Base class for all database models"""
    pass


def engine_options(url: str) -> Dict[str, Any]:
    """
    Pool options for the configured backend

    SQLite files get the default pool; server databases get a
    bounded, recycled pool.
    """
    if make_url(url).get_backend_name() == "sqlite":
        return {}
    return {
        "pool_size": 5,
        "max_overflow": 10,
        "pool_timeout": 30,
        "pool_recycle": 3600,
    }


DATABASE_URL = settings.DATABASE_URL

# No connection is opened until first use
engine = create_async_engine(
    DATABASE_URL,
    echo=settings.DEBUG,
    **engine_options(DATABASE_URL),
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Request-scoped session; commits on success, rolls back on error
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db():
    """Create the history table when AUTO_CREATE_TABLES is on (Alembic otherwise)"""
    if not settings.AUTO_CREATE_TABLES:
        return
    async with engine.begin() as conn:
        from capital_flow.infrastructure.db import models  # noqa: F401

        await conn.run_sync(Base.metadata.create_all)


async def close_db():
    """Close database connections"""
    await engine.dispose()
