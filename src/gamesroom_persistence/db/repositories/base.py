"""
gamesroom_persistence.db.repositories.base

Generic async CRUD repository.

Responsibilities:
- Standard find/save/update/delete operations for one mapped model.
- Batch upsert through `gamesroom_persistence.db.upsert`.

Repositories never commit; the service layer owns transaction boundaries.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, ClassVar, Generic, TypeVar

from sqlalchemy import delete, func, inspect, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from gamesroom_persistence.db import upsert
from gamesroom_persistence.exceptions import InvalidArgumentError

ModelT = TypeVar("ModelT")
IdT = TypeVar("IdT")


class CrudRepo(Generic[ModelT, IdT]):
    model: ClassVar[type[Any]]

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @classmethod
    def _id_column(cls):
        primary_key = inspect(cls.model).primary_key
        if len(primary_key) != 1:
            raise InvalidArgumentError(f"{cls.model.__name__} needs a single-column identifier.")
        return primary_key[0]

    async def get(self, entity_id: IdT) -> ModelT | None:
        return await self._session.get(self.model, entity_id)

    async def list_all(self) -> list[ModelT]:
        return list((await self._session.execute(select(self.model))).scalars().all())

    async def exists(self, entity_id: IdT) -> bool:
        stmt = select(func.count()).select_from(self.model).where(self._id_column() == entity_id)
        return bool((await self._session.execute(stmt)).scalar_one())

    async def count(self) -> int:
        stmt = select(func.count()).select_from(self.model)
        return int((await self._session.execute(stmt)).scalar_one())

    async def save(self, entity: ModelT) -> ModelT:
        # merge() gives insert-or-update by identifier, like an upsert of one row.
        merged = await self._session.merge(entity)
        await self._session.flush()
        return merged

    async def save_all(self, entities: Iterable[ModelT]) -> list[ModelT]:
        merged = [await self._session.merge(entity) for entity in entities]
        await self._session.flush()
        return merged

    async def update_fields(self, entity_id: IdT, values: Mapping[str, Any]) -> int:
        """
        Update the given attributes of one row. Keys are mapped attribute names.
        Returns the number of rows touched (0 when the identifier is unknown).
        """

        if not values:
            raise InvalidArgumentError("Nothing to update.")
        stmt = (
            update(self.model)
            .where(self._id_column() == entity_id)
            .values({getattr(self.model, key): value for key, value in values.items()})
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount or 0

    async def delete_by_id(self, entity_id: IdT) -> int:
        stmt = (
            delete(self.model)
            .where(self._id_column() == entity_id)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount or 0

    async def upsert_all(self, entities: Sequence[ModelT]) -> list[ModelT]:
        return await upsert.upsert_all(self._session, entities)


# --- Module Notes -----------------------------------------------------------
# `update_fields` and `delete_by_id` run bulk statements; objects already loaded in
# the session are not refreshed. Services re-read when they need fresh state.
