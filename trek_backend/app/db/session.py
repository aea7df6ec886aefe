"""
Database session configuration.

This module handles database engine creation and session management
using SQLAlchemy with async support. Every request borrows one pooled
connection through ``get_db`` and gives it back when the request ends.
"""

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from trek_backend.app.core.config import settings

engine_options = {
    "echo": settings.db_echo,
    "pool_pre_ping": True,
}
# SQLite (tests, local runs) manages its own connection pool
if not settings.is_sqlite:
    engine_options.update(
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
    )

# Create async engine
engine = create_async_engine(settings.sqlalchemy_database_url, **engine_options)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

# Create declarative base for models
Base = declarative_base()


async def get_db():
    """
    FastAPI dependency for database sessions.

    Yields an async database session and ensures it's properly closed.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()
