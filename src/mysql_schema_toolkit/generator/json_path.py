"""
Structured-value (JSON column) accessors and cast remapping for MySQL.

Dot notation such as ``profile.tags.0`` is normalised to a MySQL JSON path
(``$.tags[0]``) and rendered with the ``->>`` unquoting extractor.
Expressions that are already JSON (``json_extract(...)``, ``col->>'$.a'``)
are passed through verbatim.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from ..exceptions import ParameterError
from ..models import Cast, JsonAccessor
from ..quoting import escape, quote_identifier
from .tokenizer import is_json_statement

_INNER_INDEX = re.compile(r"\.(\d+)(?=\.)")
_TRAILING_INDEX = re.compile(r"\.(\d+)$")
_LEADING_INDICES = re.compile(r"(\[\d+\])+$")


def to_json_value(value: Any) -> Any:
    """MySQL stores JSON booleans and null as their literal strings."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return value


def parse_condition_object(
    conditions: Mapping[str, Any],
    path: tuple[str, ...] = (),
) -> list[tuple[tuple[str, ...], Any]]:
    """Flatten a nested condition tree into ``(path, value)`` leaves."""
    leaves: list[tuple[tuple[str, ...], Any]] = []
    for key, value in conditions.items():
        if isinstance(value, Mapping):
            leaves.extend(parse_condition_object(value, (*path, str(key))))
        else:
            leaves.append(((*path, str(key)), value))
    return leaves


def normalize_path(path: str) -> str:
    """``a.0.b`` -> ``a[0].b`` and ``a.b.1`` -> ``a.b[1]``."""
    path = _INNER_INDEX.sub(r"[\1]", path)
    return _TRAILING_INDEX.sub(r"[\1]", path)


def compile_json_conditions(conditions: Mapping[str, Any]) -> str:
    fragments = []
    for path, value in parse_condition_object(conditions):
        column, *subpath = path
        json_path = "$." + ".".join(subpath)
        fragments.append(
            f"{quote_identifier(column)}->>{escape(json_path)}"
            f" = {escape(str(to_json_value(value)))}"
        )
    return " and ".join(fragments)


def compile_json_path(path: str, value: Any = None) -> str:
    """
    Compile a single JSON lookup, optionally compared to ``value``.

    Raises:
        InvalidJsonStatementError: If ``path`` looks like JSON but is malformed.
    """
    if is_json_statement(path):
        sql = path
    else:
        segments = normalize_path(path).split(".")
        column = segments.pop(0)
        start_with_dot = True

        match = _LEADING_INDICES.search(column)
        if match:
            segments.insert(0, column[match.start() :])
            column = column[: match.start()]
            start_with_dot = False

        json_path = "$"
        if segments:
            json_path += ("." if start_with_dot else "") + ".".join(segments)
        sql = f"{quote_identifier(column)}->>{escape(json_path)}"

    if value is not None:
        sql += f" = {escape(value)}"
    return sql


def handle_json(accessor: JsonAccessor) -> str:
    if accessor.conditions:
        return compile_json_conditions(accessor.conditions)
    if accessor.path:
        return compile_json_path(accessor.path, accessor.value)
    raise ParameterError(
        "Json accessor requires conditions or a path",
        expected=("conditions", "path"),
    )


def cast_type(cast: Cast) -> str:
    """Remap a requested cast target to one MySQL's ``CAST`` accepts."""
    requested = cast.type
    if re.search(r"timestamp", requested, re.IGNORECASE):
        return "datetime"
    if cast.json and re.search(r"boolean", requested, re.IGNORECASE):
        # true/false cannot be cast to boolean inside a JSON structure
        return "char"
    if re.search(r"double precision|boolean|integer", requested, re.IGNORECASE):
        return "decimal"
    if re.search(r"text", requested, re.IGNORECASE):
        return "char"
    return requested


def compile_cast(cast: Cast) -> str:
    """Render ``CAST(<value> AS <type>)`` with the remapped type."""
    if isinstance(cast.value, JsonAccessor):
        inner = handle_json(cast.value)
    else:
        inner = escape(cast.value)
    return f"CAST({inner} AS {cast_type(cast).upper()})"
