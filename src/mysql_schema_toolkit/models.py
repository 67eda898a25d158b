"""Immutable value objects describing tables, columns, constraints and routines.

Every object here is transient: it is built for one call, turned into SQL
text by the generator and thrown away.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

from .exceptions import ParameterError


class _ValueObject(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


@dataclass(frozen=True)
class TableReference:
    """
    A table name with an optional schema qualifier.

    Identity is ``(schema, name)``; the delimiter only affects rendering.
    """

    name: str
    schema: str | None = None
    schema_delimiter: str | None = field(default=None, compare=False)

    @property
    def qualified_name(self) -> str:
        if self.schema:
            return f"{self.schema}{self.schema_delimiter or '.'}{self.name}"
        return self.name

    def __str__(self) -> str:
        return self.qualified_name

    def with_default_schema(self, schema: str | None) -> TableReference:
        """Return a copy carrying ``schema`` when none is set."""
        if self.schema or not schema:
            return self
        return TableReference(self.name, schema, self.schema_delimiter)

    @classmethod
    def coerce(cls, value: TableReference | Mapping[str, Any] | str) -> TableReference:
        """Normalise a table name, mapping or reference."""
        if isinstance(value, TableReference):
            return value
        if isinstance(value, str):
            return cls(value)
        if isinstance(value, Mapping):
            name = value.get("name") or value.get("table_name") or value.get("tableName")
            if not name:
                raise ParameterError(
                    f"Table reference has no name: {dict(value)!r}",
                    parameter="table",
                )
            return cls(
                name,
                value.get("schema"),
                value.get("schema_delimiter") or value.get("delimiter"),
            )
        raise ParameterError(
            f"Cannot build a table reference from {value!r}", parameter="table"
        )


class ColumnReference(_ValueObject):
    """Target of a foreign key. ``key`` renders as ``id`` when absent."""

    table: TableReference | str
    key: str | None = None
    on_delete: str | None = None
    on_update: str | None = None


class ColumnDefinition(_ValueObject):
    """
    Dialect-neutral column description.

    ``type`` is raw SQL text (``"VARCHAR(255)"``) or a SQLAlchemy
    ``TypeEngine`` instance. A default is rendered only when
    ``default_value`` is passed explicitly, so ``default_value=None``
    renders ``DEFAULT NULL`` while omitting it renders nothing.
    """

    type: Any
    allow_null: bool = True
    auto_increment: bool = False
    default_value: Any = None
    unique: bool = False
    primary_key: bool = False
    comment: str | None = None
    first: bool = False
    after: str | None = None
    references: ColumnReference | None = None
    binary: bool = False

    @property
    def has_default(self) -> bool:
        return "default_value" in self.model_fields_set


class UniqueKey(_ValueObject):
    """A composite unique key requested at table creation."""

    fields: tuple[str, ...]
    name: str | None = None
    custom_index: bool = True

    def resolved_name(self, table_name: str) -> str:
        return self.name or "uniq_" + table_name + "_" + "_".join(self.fields)


class IndexSpec(_ValueObject):
    fields: tuple[str, ...]
    name: str | None = None
    unique: bool = False


class ConstraintDescriptor(_ValueObject):
    """A row of the constraints introspection query. Never cached."""

    constraint_name: str
    constraint_type: str
    table_name: str
    table_schema: str | None = None
    constraint_schema: str | None = None
    constraint_catalog: str | None = None

    @property
    def is_foreign_key(self) -> bool:
        return self.constraint_type == "FOREIGN KEY"

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> ConstraintDescriptor | None:
        """Build a descriptor from a raw row, or ``None`` if the row has no type."""
        constraint_type = row.get("constraintType")
        if not constraint_type:
            return None
        return cls(
            constraint_name=row["constraintName"],
            constraint_type=constraint_type,
            table_name=row["tableName"],
            table_schema=row.get("tableSchema"),
            constraint_schema=row.get("constraintSchema"),
            constraint_catalog=row.get("constraintCatalog"),
        )


class ParameterDirection(str, Enum):
    IN = "IN"
    OUT = "OUT"
    INOUT = "INOUT"


class RoutineParameter(_ValueObject):
    """A stored-routine parameter. MySQL parameters are ``IN`` unless stated."""

    type: str
    name: str | None = None
    direction: ParameterDirection = ParameterDirection.IN

    @classmethod
    def from_raw(cls, value: RoutineParameter | Mapping[str, Any]) -> RoutineParameter:
        if isinstance(value, RoutineParameter):
            return value
        if not isinstance(value, Mapping) or not value.get("type"):
            raise ParameterError(
                "function or trigger used with a parameter without any type",
                parameter="type",
            )
        raw_direction = value.get("direction") or ParameterDirection.IN
        if isinstance(raw_direction, ParameterDirection):
            direction = raw_direction
        else:
            try:
                direction = ParameterDirection(str(raw_direction).upper())
            except ValueError as exc:
                raise ParameterError(
                    f"Unknown parameter direction: {raw_direction!r}",
                    parameter="direction",
                    expected=tuple(d.value for d in ParameterDirection),
                ) from exc
        return cls(type=value["type"], name=value.get("name"), direction=direction)


class RoutineDefinition(_ValueObject):
    name: str
    params: tuple[RoutineParameter, ...] = ()
    return_type: str
    language: str
    body: str
    options: tuple[str, ...] = ()


@dataclass(frozen=True)
class JsonAccessor:
    """
    A structured-value lookup.

    Either ``conditions`` (a nested ``{column: {key: value}}`` tree) or a
    single ``path`` with an optional comparison ``value``.
    """

    conditions: Mapping[str, Any] | None = None
    path: str | None = None
    value: Any = None


@dataclass(frozen=True)
class Cast:
    """A cast request; ``json`` marks a cast applied inside a JSON structure."""

    value: Any
    type: str
    json: bool = False


def as_routine_parameters(params: Sequence[Any]) -> tuple[RoutineParameter, ...]:
    return tuple(RoutineParameter.from_raw(p) for p in params)


__all__ = [
    "Cast",
    "ColumnDefinition",
    "ColumnReference",
    "ConstraintDescriptor",
    "IndexSpec",
    "JsonAccessor",
    "ParameterDirection",
    "RoutineDefinition",
    "RoutineParameter",
    "TableReference",
    "UniqueKey",
    "as_routine_parameters",
]
