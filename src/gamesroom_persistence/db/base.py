"""
gamesroom_persistence.db.base

SQLAlchemy declarative base and the shared audit block.

Responsibilities:
- Provide a shared DeclarativeBase for all ORM models.
- Provide `AuditMixin`, the created/updated/accessed-by columns every entity carries.
"""

from __future__ import annotations

from datetime import date, datetime, time

from sqlalchemy import Date, String, Time
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class AuditMixin:
    created_by: Mapped[str | None] = mapped_column("CREATED_BY", String(128), nullable=True)
    created_date: Mapped[date | None] = mapped_column("CREATED_DATE", Date, nullable=True)
    created_time: Mapped[time | None] = mapped_column("CREATED_TIME", Time, nullable=True)
    last_updated_by: Mapped[str | None] = mapped_column(
        "LAST_UPDATED_BY", String(128), nullable=True
    )
    last_updated_date: Mapped[date | None] = mapped_column(
        "LAST_UPDATED_DATE", Date, nullable=True
    )
    last_updated_time: Mapped[time | None] = mapped_column(
        "LAST_UPDATED_TIME", Time, nullable=True
    )
    accessed_by: Mapped[str | None] = mapped_column("ACCESSED_BY", String(128), nullable=True)

    def mark_created(self, *, actor: str, at: datetime) -> None:
        self.created_by = actor
        self.created_date = at.date()
        self.created_time = at.time().replace(microsecond=0)
        self.accessed_by = actor

    def mark_updated(self, *, actor: str, at: datetime) -> None:
        self.last_updated_by = actor
        self.last_updated_date = at.date()
        self.last_updated_time = at.time().replace(microsecond=0)
        self.accessed_by = actor


AUDIT_ATTRIBUTES = frozenset(
    {
        "created_by",
        "created_date",
        "created_time",
        "last_updated_by",
        "last_updated_date",
        "last_updated_time",
        "accessed_by",
    }
)


def audit_update_values(*, actor: str, at: datetime) -> dict[str, object]:
    # Column values written alongside every field-level update.
    return {
        "last_updated_by": actor,
        "last_updated_date": at.date(),
        "last_updated_time": at.time().replace(microsecond=0),
        "accessed_by": actor,
    }


# --- Module Notes -----------------------------------------------------------
# All ORM models should inherit from `Base` and `AuditMixin` so Alembic and the
# upsert descriptor table see the same columns.
