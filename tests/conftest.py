"""
tests.conftest

Shared fixtures: a throwaway SQLite database per test and a statement recorder.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator

import pytest
import pytest_asyncio
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from gamesroom_persistence.db.init_db import init_db
from gamesroom_persistence.db.session import create_engine, create_sessionmaker, session_scope
from gamesroom_persistence.settings import Settings


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        env="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'gamesroom.db'}",
        default_actor="tester",
    )


@pytest_asyncio.fixture
async def engine(settings: Settings) -> AsyncIterator[AsyncEngine]:
    engine = create_engine(settings)
    await init_db(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_sessionmaker(engine)


@pytest_asyncio.fixture
async def session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    async with session_scope(session_factory) as session:
        yield session


@pytest.fixture
def statements(engine: AsyncEngine) -> Iterator[list[str]]:
    """Every SQL statement sent to the driver after this fixture is created."""

    recorded: list[str] = []

    def _record(conn, cursor, statement, parameters, context, executemany) -> None:
        recorded.append(statement)

    event.listen(engine.sync_engine, "before_cursor_execute", _record)
    yield recorded
    event.remove(engine.sync_engine, "before_cursor_execute", _record)
