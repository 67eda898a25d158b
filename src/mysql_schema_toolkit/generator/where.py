"""
Compile WHERE conditions into MySQL text.

Accepted inputs:

- raw SQL text, used verbatim;
- a SQLAlchemy clause, compiled against the MySQL dialect;
- a :class:`JsonAccessor`;
- a shorthand mapping ``{"status": "active", "id": [1, 2]}`` (ANDed
  equality, ``IS NULL`` for ``None``, ``IN`` for lists);
- a condition tree ``{"op": "=", "attr": "status", "val": "active"}``
  with ``and`` / ``or`` / ``not`` nodes holding ``conditions``.

Leaf operators are strategies registered in a :class:`WhereOperatorRegistry`.
"""

from __future__ import annotations

import operator as op_module
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, cast

from sqlalchemy import ColumnElement, and_, column, not_, or_
from sqlalchemy.sql.elements import ClauseElement, quoted_name

from ..exceptions import ParameterError
from ..models import JsonAccessor
from ..quoting import MYSQL_DIALECT
from .json_path import handle_json

LOGICAL_OPERATORS = ("and", "or", "not")


class WhereOperator(ABC):
    """Strategy compiling one leaf operator into a SQLAlchemy expression."""

    @property
    @abstractmethod
    def name(self) -> str: ...

    @abstractmethod
    def apply(self, col: Any, value: Any) -> ColumnElement[bool]: ...


class _ComparisonOperator(WhereOperator):
    def __init__(self, name: str, fn: Any) -> None:
        self._name = name
        self._fn = fn

    @property
    def name(self) -> str:
        return self._name

    def apply(self, col: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", self._fn(col, value))


class InOperator(WhereOperator):
    @property
    def name(self) -> str:
        return "in"

    def apply(self, col: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", col.in_(list(value)))


class NotInOperator(WhereOperator):
    @property
    def name(self) -> str:
        return "not_in"

    def apply(self, col: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", col.not_in(list(value)))


class BetweenOperator(WhereOperator):
    @property
    def name(self) -> str:
        return "between"

    def apply(self, col: Any, value: Any) -> ColumnElement[bool]:
        low, high = value
        return cast("ColumnElement[bool]", col.between(low, high))


class LikeOperator(WhereOperator):
    @property
    def name(self) -> str:
        return "like"

    def apply(self, col: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", col.like(value))


class NotLikeOperator(WhereOperator):
    @property
    def name(self) -> str:
        return "not_like"

    def apply(self, col: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", col.not_like(value))


class RegexOperator(WhereOperator):
    """Rendered by the MySQL dialect as ``REGEXP``."""

    @property
    def name(self) -> str:
        return "regex"

    def apply(self, col: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", col.regexp_match(value))


class NotRegexOperator(WhereOperator):
    @property
    def name(self) -> str:
        return "not_regex"

    def apply(self, col: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", not_(col.regexp_match(value)))


class IsNullOperator(WhereOperator):
    @property
    def name(self) -> str:
        return "is_null"

    def apply(self, col: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", col.is_(None))


class IsNotNullOperator(WhereOperator):
    @property
    def name(self) -> str:
        return "is_not_null"

    def apply(self, col: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", col.is_not(None))


class WhereOperatorRegistry:
    def __init__(self) -> None:
        self._operators: dict[str, WhereOperator] = {}

    def register(self, operator: WhereOperator) -> None:
        self._operators[operator.name] = operator

    def register_all(self, *operators: WhereOperator) -> None:
        for op in operators:
            self.register(op)

    def get(self, name: str) -> WhereOperator | None:
        return self._operators.get(name)

    @property
    def supported_operators(self) -> set[str]:
        return set(self._operators)

    def apply(self, name: str, col: Any, value: Any) -> ColumnElement[bool]:
        op = self.get(name)
        if op is None:
            raise ParameterError(
                f"Unsupported where operator: {name}",
                parameter="op",
                expected=tuple(sorted(self.supported_operators)),
            )
        return op.apply(col, value)


def build_default_where_registry() -> WhereOperatorRegistry:
    registry = WhereOperatorRegistry()
    registry.register_all(
        _ComparisonOperator("=", op_module.eq),
        _ComparisonOperator("!=", op_module.ne),
        _ComparisonOperator(">", op_module.gt),
        _ComparisonOperator("<", op_module.lt),
        _ComparisonOperator(">=", op_module.ge),
        _ComparisonOperator("<=", op_module.le),
        InOperator(),
        NotInOperator(),
        BetweenOperator(),
        LikeOperator(),
        NotLikeOperator(),
        RegexOperator(),
        NotRegexOperator(),
        IsNullOperator(),
        IsNotNullOperator(),
    )
    return registry


DEFAULT_WHERE_REGISTRY: WhereOperatorRegistry = build_default_where_registry()


def compile_where(
    where: Any,
    *,
    registry: WhereOperatorRegistry | None = None,
) -> str:
    """Compile ``where`` into MySQL text; empty input yields ``""``."""
    if where is None:
        return ""
    if isinstance(where, str):
        return where
    if isinstance(where, JsonAccessor):
        return handle_json(where)
    if isinstance(where, ClauseElement):
        return _render(where)
    if isinstance(where, Mapping):
        if not where:
            return ""
        reg = registry or DEFAULT_WHERE_REGISTRY
        if "op" in where:
            return _render(_compile_node(where, reg))
        return _render(_compile_shorthand(where))
    raise ParameterError(
        f"Cannot compile where condition of type {type(where).__name__}",
        parameter="where",
    )


def _column(name: str) -> Any:
    return column(quoted_name(name, quote=True))


def _render(expr: ClauseElement) -> str:
    compiled = expr.compile(
        dialect=MYSQL_DIALECT, compile_kwargs={"literal_binds": True}
    )
    return str(compiled)


def _compile_shorthand(where: Mapping[str, Any]) -> ColumnElement[bool]:
    clauses = []
    for attr, value in where.items():
        col = _column(attr)
        if value is None:
            clauses.append(col.is_(None))
        elif isinstance(value, list | tuple | set):
            clauses.append(col.in_(list(value)))
        else:
            clauses.append(col == value)
    return and_(*clauses)


def _compile_node(data: Mapping[str, Any], registry: WhereOperatorRegistry) -> Any:
    op_str = str(data.get("op", "")).lower()

    if op_str in LOGICAL_OPERATORS:
        conditions = [_compile_node(c, registry) for c in data.get("conditions", [])]
        if not conditions and "condition" in data:
            conditions = [_compile_node(data["condition"], registry)]
        if not conditions:
            raise ParameterError(
                f"Logical operator '{op_str}' has no conditions",
                parameter="conditions",
            )
        if op_str == "and":
            return and_(*conditions)
        if op_str == "or":
            return or_(*conditions)
        return not_(and_(*conditions) if len(conditions) > 1 else conditions[0])

    attr = data.get("attr")
    if not attr:
        raise ParameterError(f"Condition missing 'attr': {dict(data)}", parameter="attr")
    return registry.apply(op_str, _column(attr), data.get("val"))


__all__ = [
    "DEFAULT_WHERE_REGISTRY",
    "WhereOperator",
    "WhereOperatorRegistry",
    "build_default_where_registry",
    "compile_where",
]
