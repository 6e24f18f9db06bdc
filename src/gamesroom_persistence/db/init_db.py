"""
gamesroom_persistence.db.init_db

Creates the ACTIVITY, PROFILE, SHIFT_TOTAL and SHIFT_REPORT tables on an empty database.
Local runs and the test suite use it; deployed databases are migrated with Alembic.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine

from gamesroom_persistence.db import models  # noqa: F401  # register models on Base.metadata
from gamesroom_persistence.db.base import Base
from gamesroom_persistence.observability.logging import get_logger

log = get_logger(__name__)


async def init_db(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    log.debug("schema_created", tables=sorted(Base.metadata.tables))
