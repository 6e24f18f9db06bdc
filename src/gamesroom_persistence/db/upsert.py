"""
gamesroom_persistence.db.upsert

Generic batch upsert for mapped records.

Responsibilities:
- Derive a column-descriptor table per mapped type, once, from the mapper metadata.
- Build a single `UPSERT INTO <table>(...) VALUES (...), (...)` statement for a batch.
- Bind every record's values to index-suffixed placeholders and execute in one round trip.

Column discovery walks the type's MRO from subtype to base. Plain and foreign-key
columns are taken as they are; composite attributes (`sqlalchemy.orm.composite`) are
expanded into their constituent columns in declaration order, and those constituents
are not listed a second time on their own.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, TypeVar

from sqlalchemy import Column, TextClause, bindparam, inspect, text
from sqlalchemy.engine import Dialect
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import ColumnProperty, CompositeProperty, Mapper
from sqlalchemy.orm.attributes import set_committed_value
from sqlalchemy.types import TypeEngine

from gamesroom_persistence.exceptions import (
    DEFINE_THE_ENTITY_WITH_PROPER_MAPPING,
    ENTITIES_MUST_SHARE_ONE_TYPE,
    ENTITY_MUST_NOT_BE_EMPTY,
    ENTITY_MUST_NOT_BE_NULL,
    UPSERT_FAILED,
    InvalidArgumentError,
    PersistenceFailure,
    SchemaError,
)
from gamesroom_persistence.observability.logging import get_logger

log = get_logger(__name__)

RecordT = TypeVar("RecordT")

DEFAULT_UPSERT_VERB = "UPSERT"

# Dialects without a native UPSERT verb but with a whole-row replace on key conflict.
_UPSERT_VERBS: dict[str, str] = {
    "cockroachdb": "UPSERT",
    "sqlite": "REPLACE",
    "mysql": "REPLACE",
    "mariadb": "REPLACE",
}


@dataclass(frozen=True, slots=True)
class ColumnDescriptor:
    name: str
    param: str
    accessor: Callable[[Any], Any]
    type_: TypeEngine[Any] | None = None
    composite: bool = False
    # Python-side column default, applied when the record carries None.
    default: Callable[[], Any] | None = None

    def placeholder(self, index: int) -> str:
        return f"{self.param}_{index}"


@dataclass(frozen=True, slots=True)
class TableDescriptor:
    table: str
    columns: tuple[ColumnDescriptor, ...]


def upsert_verb_for(dialect_name: str) -> str:
    return _UPSERT_VERBS.get(dialect_name, DEFAULT_UPSERT_VERB)


def build_upsert_statement(
    table: str,
    columns: Sequence[str],
    params: Sequence[str],
    batch_size: int,
    *,
    verb: str = DEFAULT_UPSERT_VERB,
) -> str:
    """
    Render the statement text for `batch_size` records.

    `columns` are the rendered column names and `params` the placeholder stems, position
    for position. Record `i` gets placeholders `:<stem>_<i>`.

    >>> build_upsert_statement("T", ["A", "B"], ["a", "b"], 2)
    'UPSERT INTO T(A,B) VALUES (:a_0,:b_0), (:a_1,:b_1)'
    """

    if not columns:
        raise SchemaError(DEFINE_THE_ENTITY_WITH_PROPER_MAPPING)
    if len(columns) != len(params):
        raise InvalidArgumentError("Every column needs exactly one parameter name.")
    if batch_size < 1:
        raise InvalidArgumentError(ENTITY_MUST_NOT_BE_EMPTY)

    groups = (
        "(" + ",".join(f":{param}_{index}" for param in params) + ")"
        for index in range(batch_size)
    )
    return f"{verb} INTO {table}({','.join(columns)}) VALUES {', '.join(groups)}"


def _attribute_accessor(key: str) -> Callable[[Any], Any]:
    def read(record: Any) -> Any:
        return getattr(record, key)

    return read


def _composite_values(value: Any) -> tuple[Any, ...]:
    # Same protocol the ORM uses: explicit `__composite_values__`, else dataclass fields.
    if hasattr(value, "__composite_values__"):
        return tuple(value.__composite_values__())
    return tuple(getattr(value, field.name) for field in dataclasses.fields(value))


def _constituent_accessor(composite_key: str, position: int) -> Callable[[Any], Any]:
    def read(record: Any) -> Any:
        return _composite_values(getattr(record, composite_key))[position]

    return read


def _table_column(prop: ColumnProperty[Any]) -> Column[Any] | None:
    # column_property() over an expression has no table column to write.
    column = prop.columns[0]
    return column if isinstance(column, Column) else None


def _python_default(column: Column[Any]) -> Callable[[], Any] | None:
    # Text statements never run insert defaults. Callables arrive wrapped to take an
    # execution context.
    default = column.default
    if default is None:
        return None
    if default.is_scalar:
        return lambda: default.arg
    if default.is_callable:
        return lambda: default.arg(None)
    return None


def _expand_composite(composite: CompositeProperty[Any]) -> list[ColumnDescriptor]:
    expanded: list[ColumnDescriptor] = []
    for position, prop in enumerate(composite.props):
        column = _table_column(prop)
        if column is None:
            raise SchemaError(DEFINE_THE_ENTITY_WITH_PROPER_MAPPING)
        expanded.append(
            ColumnDescriptor(
                name=column.name,
                param=prop.key,
                accessor=_constituent_accessor(composite.key, position),
                type_=column.type,
                composite=True,
            )
        )
    return expanded


@lru_cache(maxsize=None)
def describe(record_type: type) -> TableDescriptor:
    """
    Column-descriptor table for a mapped type. Raises `SchemaError` for unmapped types
    and for mappings without a single writable column.
    """

    mapper: Mapper[Any] | None = inspect(record_type, raiseerr=False)
    if not isinstance(mapper, Mapper) or mapper.local_table is None:
        raise SchemaError(DEFINE_THE_ENTITY_WITH_PROPER_MAPPING)

    # Accessing `attrs` configures the mapper, so composites have resolved `props` below.
    properties = {prop.key: prop for prop in mapper.attrs}
    composites = {prop.key: prop for prop in mapper.composites}
    consumed = {prop.key for composite in composites.values() for prop in composite.props}

    ordered_keys: list[str] = []
    for klass in record_type.__mro__:
        for key in vars(klass):
            if key in properties and key not in ordered_keys:
                ordered_keys.append(key)
    # Imperatively mapped attributes never show up in a class __dict__.
    ordered_keys.extend(key for key in properties if key not in ordered_keys)

    columns: list[ColumnDescriptor] = []
    for key in ordered_keys:
        if key in composites:
            columns.extend(_expand_composite(composites[key]))
            continue
        prop = properties[key]
        if key in consumed or not isinstance(prop, ColumnProperty):
            continue
        column = _table_column(prop)
        if column is None:
            continue
        columns.append(
            ColumnDescriptor(
                name=column.name,
                param=key,
                accessor=_attribute_accessor(key),
                type_=column.type,
                default=_python_default(column),
            )
        )

    if not columns:
        raise SchemaError(DEFINE_THE_ENTITY_WITH_PROPER_MAPPING)
    return TableDescriptor(table=mapper.local_table.name, columns=tuple(columns))


def _require_uniform_batch(records: Sequence[Any] | None) -> type:
    if records is None:
        raise InvalidArgumentError(ENTITY_MUST_NOT_BE_NULL)
    if len(records) == 0:
        raise InvalidArgumentError(ENTITY_MUST_NOT_BE_EMPTY)
    record_type = type(records[0])
    if any(type(record) is not record_type for record in records):
        raise InvalidArgumentError(ENTITIES_MUST_SHARE_ONE_TYPE)
    return record_type


def bind_parameters(descriptor: TableDescriptor, records: Sequence[Any]) -> dict[str, Any]:
    """
    Read every column of every record. Any accessor failure aborts the whole batch with
    `PersistenceFailure` before a statement exists.

    A None value on a column with a Python-side default (e.g. `default=uuid.uuid4`) is
    replaced by that default, and the record is given the same value.
    """

    params: dict[str, Any] = {}
    for index, record in enumerate(records):
        for column in descriptor.columns:
            try:
                value = column.accessor(record)
                if value is None and column.default is not None:
                    value = column.default()
                    setattr(record, column.param, value)
                params[column.placeholder(index)] = value
            except Exception as e:
                raise PersistenceFailure(UPSERT_FAILED, error_code=type(e).__name__) from e
    return params


def render_statement(
    descriptor: TableDescriptor, batch_size: int, dialect: Dialect
) -> TextClause:
    """
    `TextClause` for the batch with identifiers quoted for `dialect` and every bind
    parameter typed after its column, so values go through the column's bind processing.
    """

    preparer = dialect.identifier_preparer
    sql = build_upsert_statement(
        preparer.quote(descriptor.table),
        [preparer.quote(column.name) for column in descriptor.columns],
        [column.param for column in descriptor.columns],
        batch_size,
        verb=upsert_verb_for(dialect.name),
    )
    typed = [
        bindparam(column.placeholder(index), type_=column.type_)
        for index in range(batch_size)
        for column in descriptor.columns
        if column.type_ is not None
    ]
    return text(sql).bindparams(*typed)


def _sync_session_state(
    session: AsyncSession,
    descriptor: TableDescriptor,
    records: Sequence[Any],
    params: dict[str, Any],
) -> None:
    """
    Mark what was just written as the committed state of records the session already
    tracks, so the next flush has nothing left to send for them.
    """

    for index, record in enumerate(records):
        state = inspect(record)
        if state.persistent:
            for column in descriptor.columns:
                set_committed_value(record, column.param, params[column.placeholder(index)])
        elif state.pending and record in session:
            session.expunge(record)


async def upsert_all(session: AsyncSession, records: Sequence[RecordT]) -> list[RecordT]:
    """
    Insert-or-update `records` (same runtime type, non-empty) with one statement and
    return them unchanged, in the same order. Nothing is re-read from the store.
    """

    record_type = _require_uniform_batch(records)
    descriptor = describe(record_type)
    params = bind_parameters(descriptor, records)

    connection = await session.connection()
    statement = render_statement(descriptor, len(records), connection.dialect)
    await session.execute(statement, params)
    _sync_session_state(session, descriptor, records, params)
    log.debug(
        "upsert_executed",
        table=descriptor.table,
        records=len(records),
        columns=len(descriptor.columns),
    )
    return list(records)


# --- Module Notes -----------------------------------------------------------
# Conflict resolution between concurrent upserts of the same key is left to the store.
# The caller's session owns the transaction; this module never commits.
# Records already tracked by the session have their written values marked committed;
# pending ones are expunged, since the row now exists.
