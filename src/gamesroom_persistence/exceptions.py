"""
gamesroom_persistence.exceptions

Error conditions raised by repositories and services.

Responsibilities:
- Separate caller mistakes (`InvalidArgumentError`, `SchemaError`) from runtime
  failures (`PersistenceFailure`).
- Keep the user-facing error descriptions in one place.
"""

from __future__ import annotations

ENTITY_MUST_NOT_BE_NULL = "Entity must not be null."
ENTITY_MUST_NOT_BE_EMPTY = "Entity must not be empty."
ENTITIES_MUST_SHARE_ONE_TYPE = "Entities must all be of the same type."
DEFINE_THE_ENTITY_WITH_PROPER_MAPPING = "Define the entity with proper ORM column mappings."
UPSERT_FAILED = "An exception occurred while upserting a record."
PERSISTENCE_EXCEPTION = "PERSISTENCE EXCEPTION"


class PersistenceError(Exception):
    """Base class for everything this library raises on purpose."""

    def __init__(self, error_description: str, error_code: str | None = None) -> None:
        super().__init__(error_description)
        self.error_description = error_description
        self.error_code = error_code


class InvalidArgumentError(PersistenceError, ValueError):
    pass


class SchemaError(InvalidArgumentError):
    """The record type does not expose any persisted columns."""


class PersistenceFailure(PersistenceError):
    """
    Wraps an accessor or store failure. The original exception is kept as `__cause__`
    (callers raise it with `raise PersistenceFailure(...) from exc`).
    """


# --- Module Notes -----------------------------------------------------------
# None of these are retried inside the library; the caller decides what to do.
