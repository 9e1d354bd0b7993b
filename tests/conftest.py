"""Shared fixtures: an isolated SQLite database per test."""

import os
import tempfile

# Keep the module-level engine away from the real data directory
os.environ.setdefault(
    "FLASHSNAP_DATABASE_URL",
    f"sqlite+aiosqlite:///{tempfile.mkdtemp(prefix='flashsnap-')}/flashsnap.db",
)

import pytest_asyncio  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from backend.models import Base  # noqa: E402


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
