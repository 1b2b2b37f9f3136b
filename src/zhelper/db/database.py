"""
Database engine and session management.

The engine and session factory are created once at start-up and kept on
`app.state`; every request gets its own `AsyncSession`, committed when the
handler returns and rolled back when it raises.
"""
from __future__ import annotations

from typing import AsyncIterator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from zhelper.configs.settings import Settings
from zhelper.configs.logging_config import get_logger

log = get_logger(__name__)


class Base(DeclarativeBase):
    pass


def create_engine(settings: Settings) -> AsyncEngine:
    url = settings.database_url
    pool_config: dict = {}
    if url.startswith("sqlite") and ":memory:" in url:
        # a single shared connection, otherwise every checkout sees an empty database
        pool_config = {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
    elif not url.startswith("sqlite"):
        pool_config = {"pool_size": 5, "max_overflow": 10, "pool_pre_ping": True}

    log.info("db.engine.create url=%s env=%s", url.split("@")[-1], settings.ENVIRONMENT)
    return create_async_engine(url, echo=settings.db_echo, future=True, **pool_config)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def create_schema(engine: AsyncEngine) -> None:
    # import for side effect: registers the mapped tables on Base.metadata
    from zhelper.db import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    log.info("db.schema.ready tables=%s", sorted(Base.metadata.tables.keys()))


async def get_session(request: Request) -> AsyncIterator[AsyncSession]:
    """Dependency for getting a request-scoped database session."""
    session_factory: async_sessionmaker[AsyncSession] = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
