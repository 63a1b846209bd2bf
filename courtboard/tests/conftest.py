"""
Shared pytest configuration for courtboard tests.

Service tests run against an in-memory SQLite database by default. Set
TEST_DATABASE_URL to run them against PostgreSQL instead.

SAFETY: a non-SQLite TEST_DATABASE_URL is REFUSED unless its database name
contains the substring "test", since every test creates and drops all
tables.
"""

import os

# Must be set before the app is imported: disables rate limiting and keeps
# the module-level engine away from any real database.
os.environ.setdefault("ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest_asyncio  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

from courtboard.database.db import Base  # noqa: E402
from courtboard.database.models import Court, Player  # noqa: E402


def _resolve_test_database_url() -> str:
    """Build the test database URL with safety checks.

    Raises ``RuntimeError`` if a server database URL does not point to a
    database whose name contains "test".
    """
    url = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
    if url.startswith("sqlite"):
        return url

    db_name = url.rsplit("/", 1)[-1].split("?")[0]  # strip query params
    if "test" not in db_name.lower():
        raise RuntimeError(
            f"\n{'=' * 70}\n"
            f"  SAFETY: Refusing to run tests against database '{db_name}'.\n"
            f"  The database name must contain 'test' to prevent accidental\n"
            f"  data loss in development or production databases.\n"
            f"{'=' * 70}"
        )
    return url


TEST_DATABASE_URL = _resolve_test_database_url()


@pytest_asyncio.fixture
async def test_engine():
    """Create a fresh database with all tables for one test."""
    if TEST_DATABASE_URL.startswith("sqlite"):
        engine = create_async_engine(TEST_DATABASE_URL, echo=False)
    else:
        # NullPool avoids reusing connections across event loops
        engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine):
    """Database session bound to the per-test database."""
    async_session_maker = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with async_session_maker() as session:
        try:
            yield session
        finally:
            await session.rollback()
            await session.close()


@pytest_asyncio.fixture
async def courts(db_session):
    """Three courts with ids 1..3 (padel, tennis, padel)."""
    rows = [
        Court(name="Padel Court 1", type="padel"),
        Court(name="Tennis Court 1", type="tennis"),
        Court(name="Padel Court 2", type="padel"),
    ]
    db_session.add_all(rows)
    await db_session.commit()
    for row in rows:
        await db_session.refresh(row)
    return rows


@pytest_asyncio.fixture
async def make_player(db_session):
    """Factory inserting players directly, bypassing the service layer."""
    async def _make_player(name: str, points: int = 0) -> Player:
        player = Player(name=name, points=points)
        db_session.add(player)
        await db_session.commit()
        await db_session.refresh(player)
        return player

    return _make_player
