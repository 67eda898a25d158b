"""Column definition -> SQL fragment."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from sqlalchemy.sql.elements import ClauseElement

from ..models import ColumnDefinition, ColumnReference, TableReference
from ..quoting import compile_type, escape, quote_identifier, quote_table

ADD_COLUMN_CONTEXT = "add_column"

# BLOB/TEXT/GEOMETRY/JSON families cannot have a default value
NO_DEFAULT_TYPES = frozenset(
    {
        "TINYBLOB",
        "BLOB",
        "MEDIUMBLOB",
        "LONGBLOB",
        "TINYTEXT",
        "TEXT",
        "MEDIUMTEXT",
        "LONGTEXT",
        "GEOMETRY",
        "POINT",
        "LINESTRING",
        "POLYGON",
        "MULTIPOINT",
        "MULTILINESTRING",
        "MULTIPOLYGON",
        "GEOMETRYCOLLECTION",
        "JSON",
    }
)

_TYPE_NAME = re.compile(r"^\s*(\w+)")


def foreign_key_name(table: Any, column: str) -> str:
    return f"{TableReference.coerce(table).name}_{column}_foreign_idx"


def default_value_schemable(value: Any) -> bool:
    """SQL expressions and callables (``func.now()``, ``uuid4``) stay out of DDL."""
    return not (callable(value) or isinstance(value, ClauseElement))


def _accepts_default(attribute: ColumnDefinition, type_sql: str) -> bool:
    if attribute.binary:
        return False
    match = _TYPE_NAME.match(type_sql)
    return not (match and match.group(1).upper() in NO_DEFAULT_TYPES)


def references_to_sql(references: ColumnReference) -> str:
    """``REFERENCES <table> (<key|id>) [ON DELETE X] [ON UPDATE Y]``."""
    sql = "REFERENCES " + quote_table(references.table)
    sql += " (" + quote_identifier(references.key or "id") + ")"
    if references.on_delete:
        sql += " ON DELETE " + references.on_delete.upper()
    if references.on_update:
        sql += " ON UPDATE " + references.on_update.upper()
    return sql


def attribute_to_sql(
    attribute: ColumnDefinition | Any,
    *,
    context: str | None = None,
    table: Any = None,
    foreign_key: str | None = None,
) -> str:
    """
    Render a column definition.

    Fragments are appended in a fixed order: type, ``NOT NULL``,
    ``auto_increment``, ``DEFAULT``, ``UNIQUE``, ``PRIMARY KEY``,
    ``COMMENT``, ``FIRST`` / ``AFTER``, then the ``REFERENCES`` clause.

    Args:
        attribute: A ``ColumnDefinition`` or a bare native type.
        context: ``"add_column"`` to prefix references with an
            ``ADD CONSTRAINT ... FOREIGN KEY`` fragment.
        table: Owning table, used for the derived constraint name.
        foreign_key: Column name carrying the foreign key.
    """
    if not isinstance(attribute, ColumnDefinition):
        attribute = ColumnDefinition(type=attribute)

    type_sql = compile_type(attribute.type)
    sql = type_sql

    if attribute.allow_null is False:
        sql += " NOT NULL"

    if attribute.auto_increment:
        sql += " auto_increment"

    if (
        attribute.has_default
        and _accepts_default(attribute, type_sql)
        and default_value_schemable(attribute.default_value)
    ):
        sql += " DEFAULT " + escape(attribute.default_value)

    if attribute.unique is True:
        sql += " UNIQUE"

    if attribute.primary_key:
        sql += " PRIMARY KEY"

    if attribute.comment:
        sql += " COMMENT " + escape(attribute.comment)

    if attribute.first:
        sql += " FIRST"
    if attribute.after:
        sql += " AFTER " + quote_identifier(attribute.after)

    references = attribute.references
    if references is not None:
        if context == ADD_COLUMN_CONTEXT and foreign_key:
            fk_name = quote_identifier(foreign_key_name(table, foreign_key))
            column = quote_identifier(foreign_key)
            sql += f", ADD CONSTRAINT {fk_name} FOREIGN KEY ({column})"

        sql += " " + references_to_sql(references)

    return sql


def attributes_to_sql(
    attributes: Mapping[str, ColumnDefinition | Any],
    *,
    context: str | None = None,
    table: Any = None,
) -> dict[str, str]:
    return {
        name: attribute_to_sql(attribute, context=context, table=table, foreign_key=name)
        for name, attribute in attributes.items()
    }
