from __future__ import annotations

import uuid

from sqlalchemy import select

from gamesroom_persistence.db.models import Activity
from gamesroom_persistence.db.repositories.base import CrudRepo


class ActivityRepo(CrudRepo[Activity, uuid.UUID]):
    model = Activity

    async def list_categories(self) -> list[str]:
        stmt = select(Activity.category).distinct().order_by(Activity.category)
        return list((await self._session.execute(stmt)).scalars().all())
