"""
gamesroom_persistence.services.base

Shared service behaviour for the game-room entities (transaction + audit owner).

Responsibilities:
- Commit on success and roll back on failure for every write.
- Stamp the audit block on create, update and upsert.
- Log each operation and translate unexpected errors into `PersistenceFailure`.
"""

from __future__ import annotations

import uuid
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, ClassVar, Generic, TypeVar
from zoneinfo import ZoneInfo

from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from gamesroom_persistence.db.base import AUDIT_ATTRIBUTES, audit_update_values
from gamesroom_persistence.db.repositories.base import CrudRepo
from gamesroom_persistence.exceptions import (
    ENTITY_MUST_NOT_BE_NULL,
    PERSISTENCE_EXCEPTION,
    InvalidArgumentError,
    PersistenceError,
    PersistenceFailure,
)
from gamesroom_persistence.observability.logging import get_logger
from gamesroom_persistence.settings import Settings

log = get_logger(__name__)

ModelT = TypeVar("ModelT")
IdT = TypeVar("IdT")


class EntityService(Generic[ModelT, IdT]):
    entity_name: ClassVar[str]
    repo_class: ClassVar[type[CrudRepo[Any, Any]]]
    id_attribute: ClassVar[str]
    # Assign a uuid4 identifier to new records that arrive without one.
    generates_id: ClassVar[bool] = False

    def __init__(self, *, session: AsyncSession, settings: Settings) -> None:
        self._session = session
        self._settings = settings
        self._tz = ZoneInfo(settings.timezone)
        self._repo = self.repo_class(session)

    def _now(self) -> datetime:
        return datetime.now(tz=self._tz)

    def _actor(self, actor: str | None) -> str:
        return actor or self._settings.default_actor

    def _prepare_new(self, entity: ModelT, now: datetime) -> None:
        """Hook for subclasses: fill creation-time columns of a record not yet stored."""

    def _ensure_id(self, entity: ModelT) -> IdT | None:
        entity_id = getattr(entity, self.id_attribute)
        if entity_id is None and self.generates_id:
            entity_id = uuid.uuid4()
            setattr(entity, self.id_attribute, entity_id)
        return entity_id

    def _updatable_attributes(self) -> set[str]:
        mapper = inspect(self.repo_class.model)
        return {prop.key for prop in mapper.column_attrs} - AUDIT_ATTRIBUTES - {self.id_attribute}

    @asynccontextmanager
    async def _operation(
        self, operation: str, *, write: bool = False, **context: Any
    ) -> AsyncIterator[None]:
        event = f"{self.entity_name}_{operation}"
        try:
            yield
            if write:
                await self._session.commit()
        except InvalidArgumentError as e:
            await self._session.rollback()
            log.warning(f"{event}_rejected", error=e.error_description, **context)
            raise
        except (PersistenceError, SQLAlchemyError) as e:
            # Data-access failures propagate unmodified.
            await self._session.rollback()
            log.error(f"{event}_failed", error=str(e), error_type=type(e).__name__, **context)
            raise
        except Exception as e:
            await self._session.rollback()
            log.exception(f"{event}_unexpected_error", **context)
            raise PersistenceFailure(PERSISTENCE_EXCEPTION, error_code=type(e).__name__) from e

    async def save(self, entity: ModelT, *, actor: str | None = None) -> ModelT:
        """
        Insert the record, or update it when its identifier is already stored.
        """

        if entity is None:
            raise InvalidArgumentError(ENTITY_MUST_NOT_BE_NULL)
        actor = self._actor(actor)
        async with self._operation("save", write=True, actor=actor):
            await self._stamp_for_save(entity, actor, self._now())
            saved = await self._repo.save(entity)
        log.info(f"{self.entity_name}_saved", entity_id=str(getattr(saved, self.id_attribute)))
        return saved

    async def save_all(
        self, entities: Sequence[ModelT], *, actor: str | None = None
    ) -> list[ModelT]:
        """Record-by-record `save` of a batch, committed together."""

        if entities is None or any(entity is None for entity in entities):
            raise InvalidArgumentError(ENTITY_MUST_NOT_BE_NULL)
        actor = self._actor(actor)
        async with self._operation("save_all", write=True, actor=actor):
            now = self._now()
            for entity in entities:
                await self._stamp_for_save(entity, actor, now)
            saved = await self._repo.save_all(entities)
        log.info(f"{self.entity_name}_saved_all", records=len(saved))
        return saved

    async def _stamp_for_save(self, entity: ModelT, actor: str, now: datetime) -> None:
        entity_id = self._ensure_id(entity)
        if entity_id is not None and await self._repo.exists(entity_id):
            entity.mark_updated(actor=actor, at=now)  # type: ignore[attr-defined]
        else:
            self._prepare_new(entity, now)
            entity.mark_created(actor=actor, at=now)  # type: ignore[attr-defined]

    async def upsert_all(
        self, entities: Sequence[ModelT], *, actor: str | None = None
    ) -> list[ModelT]:
        """
        Write the whole batch with one upsert statement. Records keep whatever they carry;
        only missing identifiers, creation hooks and the audit block are filled in.
        """

        actor = self._actor(actor)
        async with self._operation("upsert_all", write=True, actor=actor):
            now = self._now()
            for entity in entities or ():
                self._ensure_id(entity)
                if getattr(entity, "created_date", None) is None:
                    self._prepare_new(entity, now)
                    entity.mark_created(actor=actor, at=now)  # type: ignore[attr-defined]
                entity.mark_updated(actor=actor, at=now)  # type: ignore[attr-defined]
            written = await self._repo.upsert_all(entities)
        log.info(f"{self.entity_name}_upserted", records=len(written))
        return written

    async def get(self, entity_id: IdT) -> ModelT | None:
        async with self._operation("get", entity_id=str(entity_id)):
            found = await self._repo.get(entity_id)
        log.debug(f"{self.entity_name}_fetched", entity_id=str(entity_id), found=found is not None)
        return found

    async def list_all(self) -> list[ModelT]:
        async with self._operation("list_all"):
            found = await self._repo.list_all()
        log.info(f"{self.entity_name}_listed", count=len(found))
        return found

    async def count(self) -> int:
        async with self._operation("count"):
            return await self._repo.count()

    async def update(self, entity_id: IdT, *, actor: str | None = None, **changes: Any) -> bool:
        """
        Update business columns of one record and stamp last-updated-by/date/time and
        accessed-by alongside. Returns False when no record has `entity_id`.
        """

        actor = self._actor(actor)
        async with self._operation("update", write=True, entity_id=str(entity_id), actor=actor):
            unknown = set(changes) - self._updatable_attributes()
            if not changes or unknown:
                raise InvalidArgumentError(
                    f"Cannot update {sorted(unknown) if unknown else 'nothing'} "
                    f"on {self.entity_name}."
                )
            values = {**changes, **audit_update_values(actor=actor, at=self._now())}
            touched = await self._repo.update_fields(entity_id, values)
        log.info(
            f"{self.entity_name}_updated",
            entity_id=str(entity_id),
            columns=sorted(changes),
            found=touched > 0,
        )
        return touched > 0

    async def delete(self, entity_id: IdT) -> bool:
        async with self._operation("delete", write=True, entity_id=str(entity_id)):
            touched = await self._repo.delete_by_id(entity_id)
        log.info(f"{self.entity_name}_deleted", entity_id=str(entity_id), found=touched > 0)
        return touched > 0


# --- Module Notes -----------------------------------------------------------
# Services are constructed per unit of work with the session they commit; they keep no
# other state between calls.
