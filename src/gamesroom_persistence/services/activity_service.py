"""
gamesroom_persistence.services.activity_service

CRUD for the ACTIVITY table plus the category listing used by the front desk.
"""

from __future__ import annotations

import uuid

from gamesroom_persistence.db.models import Activity
from gamesroom_persistence.db.repositories.activities import ActivityRepo
from gamesroom_persistence.observability.logging import get_logger
from gamesroom_persistence.services.base import EntityService

log = get_logger(__name__)


class ActivityService(EntityService[Activity, uuid.UUID]):
    entity_name = "activity"
    repo_class = ActivityRepo
    id_attribute = "id"
    generates_id = True

    _repo: ActivityRepo

    async def fetch_all_categories(self) -> list[str]:
        async with self._operation("fetch_categories"):
            categories = await self._repo.list_categories()
        log.info("activity_categories_fetched", count=len(categories), categories=categories)
        return categories
