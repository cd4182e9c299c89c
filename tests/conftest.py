from __future__ import annotations

import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.db import Base
from src.db.progress import SqlProgressStore


@pytest_asyncio.fixture
async def session_factory() -> async_sessionmaker:
    # Every session must see the same in-memory database.
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, expire_on_commit=False)
    try:
        yield factory
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def progress_store(session_factory) -> SqlProgressStore:
    return SqlProgressStore(session_factory)
