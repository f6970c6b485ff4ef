"""Async engine and session wiring for the entity store.

The API process shares one pooled engine; migrations and one-off scripts build
an unpooled engine against whatever URL they were handed.
"""
from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from config.settings import settings


class Base(DeclarativeBase):
    """Declarative base for the `entities` table mapping."""

    pass


def build_engine(url: str | None = None, *, pooled: bool = True) -> AsyncEngine:
    """Create an asyncpg engine; `url` defaults to settings.DATABASE_URL."""
    url = url or settings.DATABASE_URL
    if not pooled:
        return create_async_engine(url, poolclass=NullPool)
    return create_async_engine(
        url,
        echo=settings.DEBUG,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_pre_ping=True,
    )


engine: AsyncEngine = build_engine()

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """One session per ingest request; the batch commits or rolls back inside it."""
    async with async_session_factory() as session:
        yield session
