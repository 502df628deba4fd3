"""Database configuration with SQLAlchemy 2.0 async support for the api schema."""

from collections.abc import AsyncGenerator
from typing import Annotated, Any

import structlog
from fastapi import Depends
from sqlalchemy import MetaData, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from linkfolio.core.config import get_settings

settings = get_settings()
logger = structlog.get_logger()

# Schema name used in model metadata; remapped at execution time if configured differently
SCHEMA = "api"

# Naming convention for constraints (helps with migrations)
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


def engine_options(database_url: str, database_schema: str = SCHEMA) -> dict[str, Any]:
    """Build create_async_engine keyword arguments for a database URL.

    SQLite gets no pool sizing (it is not a server) and, like any backend
    configured without a schema, gets its table names unqualified.
    """
    options: dict[str, Any] = {"echo": settings.debug}
    if make_url(database_url).get_backend_name() != "sqlite":
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_timeout=30,  # Seconds to wait for a connection
            pool_recycle=1800,  # Recycle connections after 30 minutes
            pool_pre_ping=True,  # Verify connections before use
        )
    if database_schema != SCHEMA:
        options["execution_options"] = {
            "schema_translate_map": {SCHEMA: database_schema or None},
        }
    return options


# Create async engine with connection pooling
engine = create_async_engine(
    settings.database_url,
    **engine_options(settings.database_url, settings.database_schema),
)

# Session factory for creating database sessions
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models in the api schema."""

    metadata = MetaData(naming_convention=convention, schema=SCHEMA)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Dependency that provides an async database session.

    The whole request runs in one transaction: it is committed when the
    route returns and rolled back if anything raises, so multi-row link
    operations are all-or-nothing.

    Usage:
        @router.get("/items")
        async def get_items(session: AsyncSession = Depends(get_async_session)):
            ...
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# Type alias for dependency injection
AsyncSessionDep = Annotated[AsyncSession, Depends(get_async_session)]


async def check_database() -> bool:
    """Return True if the database answers a trivial query."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        logger.warning("Database check failed", error=str(e))
        return False
    return True


async def init_db() -> None:
    """Initialize database tables.

    Note: In production, use Alembic migrations instead.
    This is useful for testing or initial development.
    """
    async with engine.begin() as conn:
        if settings.database_schema and conn.dialect.name == "postgresql":
            await conn.execute(
                text(f"CREATE SCHEMA IF NOT EXISTS {settings.database_schema}")
            )
        await conn.run_sync(Base.metadata.create_all)


async def drop_db() -> None:
    """Drop all tables (test helper)."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def close_db() -> None:
    """Close database connections."""
    await engine.dispose()
