"""
Luma Database Connection and ORM Setup
"""
from typing import AsyncGenerator

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

logger = structlog.get_logger(__name__)

# Create declarative base for ORM models
Base = declarative_base()

# Global engine and session maker
engine = None
async_session_maker = None


def _import_models():
    """Import all ORM models to register them with Base.metadata"""
    from luma.models import Profile  # noqa: F401

    logger.debug("orm_models_imported")


def normalize_database_url(database_url) -> str:
    """Point postgres URLs at the asyncpg driver"""
    # database_url may be a Pydantic URL object
    database_url_str = str(database_url)

    if database_url_str.startswith("postgres://"):
        return database_url_str.replace("postgres://", "postgresql+asyncpg://", 1)
    if database_url_str.startswith("postgresql://"):
        return database_url_str.replace("postgresql://", "postgresql+asyncpg://", 1)
    return database_url_str


async def init_database(database_url, create_tables: bool = False):
    """Initialize database connection and optionally create tables"""
    global engine, async_session_maker

    _import_models()

    database_url_str = normalize_database_url(database_url)
    logger.info("connecting_to_database", url=database_url_str.split("@")[-1])

    engine = create_async_engine(
        database_url_str,
        echo=False,
        pool_size=10,
        max_overflow=10,
        pool_pre_ping=True,
    )

    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    if create_tables:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("database_tables_created")

    logger.info("database_initialized")


async def close_database():
    """Close database connections"""
    global engine

    if engine:
        logger.info("closing_database_connections")
        await engine.dispose()
        engine = None


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Get an async database session for FastAPI dependency injection.

    This is an async generator that FastAPI's Depends() will handle automatically.
    """
    if async_session_maker is None:
        raise RuntimeError("Database not initialized. Call init_database() first.")

    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
