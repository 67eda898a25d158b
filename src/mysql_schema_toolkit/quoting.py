"""
Identifier quoting, literal escaping and name helpers bound to the
SQLAlchemy MySQL dialect.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from sqlalchemy import String, literal
from sqlalchemy.dialects import mysql
from sqlalchemy.types import TypeEngine

from .models import TableReference

if TYPE_CHECKING:
    from collections.abc import Mapping

# "named" keeps literal rendering from doubling percent signs.
MYSQL_DIALECT = mysql.dialect(paramstyle="named")

_CAMEL_BOUNDARY = re.compile(r"([a-z\d])([A-Z])")
_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")


def quote_identifier(identifier: str) -> str:
    """Always wrap in backticks, doubling any embedded backtick."""
    return MYSQL_DIALECT.identifier_preparer.quote_identifier(str(identifier))


def quote_table(table: TableReference | Mapping[str, Any] | str) -> str:
    """
    Quote a table reference.

    With the default ``.`` delimiter the schema is emitted as a qualifier
    (`` `db`.`t` ``). A custom delimiter prefixes the schema onto the table
    name inside a single identifier (`` `db_t` ``).
    """
    ref = TableReference.coerce(table)
    if not ref.schema:
        return quote_identifier(ref.name)
    if ref.schema_delimiter and ref.schema_delimiter != ".":
        return quote_identifier(ref.qualified_name)
    return f"{quote_identifier(ref.schema)}.{quote_identifier(ref.name)}"


def add_schema(
    table: TableReference | Mapping[str, Any] | str,
    schema: str | None = None,
    schema_delimiter: str | None = None,
) -> TableReference:
    ref = TableReference.coerce(table)
    if not schema:
        return ref
    return TableReference(ref.name, schema, schema_delimiter)


def escape(value: Any) -> str:
    """Render a Python value as a MySQL literal."""
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int | float | Decimal):
        return str(value)
    if isinstance(value, datetime):
        return escape(value.strftime("%Y-%m-%d %H:%M:%S.%f").rstrip("0").rstrip("."))
    if isinstance(value, date | time):
        return escape(value.isoformat())
    if isinstance(value, list | tuple):
        return ", ".join(escape(v) for v in value)
    compiled = literal(str(value), String()).compile(
        dialect=MYSQL_DIALECT, compile_kwargs={"literal_binds": True}
    )
    return str(compiled)


def wrap_single_quote(value: str) -> str:
    """Quote an introspection filter value as a string literal."""
    return escape(str(value))


def underscore(name: str) -> str:
    """``ownerId`` -> ``owner_id``; hyphens become underscores."""
    name = _ACRONYM_BOUNDARY.sub(r"\1_\2", name)
    name = _CAMEL_BOUNDARY.sub(r"\1_\2", name)
    return name.replace("-", "_").lower()


def compile_type(native_type: Any) -> str:
    """Compile a native type into its SQL fragment."""
    if isinstance(native_type, type) and issubclass(native_type, TypeEngine):
        native_type = native_type()
    if isinstance(native_type, TypeEngine):
        return native_type.compile(dialect=MYSQL_DIALECT)
    return str(native_type)


__all__ = [
    "MYSQL_DIALECT",
    "add_schema",
    "compile_type",
    "escape",
    "quote_identifier",
    "quote_table",
    "underscore",
    "wrap_single_quote",
]
