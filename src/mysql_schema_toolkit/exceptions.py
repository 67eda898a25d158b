"""
Exception hierarchy for the MySQL schema toolkit.

All exceptions inherit from ``SchemaToolkitError`` and provide
``to_dict()`` for API-friendly error responses.

- ``ParameterError``: a required argument is missing or malformed.
  Raised before any statement is produced.
- ``UnsupportedOperationError``: MySQL cannot express the requested DDL.
- ``UnknownConstraintError``: introspection found no such constraint.
- ``StatementExecutionError``: the execution channel rejected a statement.
"""

from __future__ import annotations

from typing import Any


class SchemaToolkitError(Exception):
    """Root exception for the toolkit."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class ParameterError(SchemaToolkitError):
    """A required argument is missing or structurally invalid."""

    def __init__(
        self,
        message: str,
        *,
        parameter: str | None = None,
        expected: tuple[str, ...] = (),
    ) -> None:
        self.message = message
        self.parameter = parameter
        self.expected = expected
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "PARAMETER_ERROR",
            "message": self.message,
            "parameter": self.parameter,
            "expected": list(self.expected),
        }


class InvalidJsonStatementError(ParameterError):
    """A JSON expression contains an invalid token or unbalanced brackets."""

    def __init__(self, statement: str) -> None:
        self.statement = statement
        super().__init__(f"Invalid json statement: {statement}", parameter="path")


class UnsupportedOperationError(SchemaToolkitError):
    """The dialect has no way to express the requested operation."""

    def __init__(self, operation: str, dialect: str = "mysql") -> None:
        self.operation = operation
        self.dialect = dialect
        super().__init__(
            f'The method "{operation}" is not defined for {dialect} dialect.'
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "UNSUPPORTED_OPERATION",
            "operation": self.operation,
            "dialect": self.dialect,
        }


class UnknownConstraintError(SchemaToolkitError):
    """No constraint with the requested name exists on the table."""

    def __init__(self, constraint: str, table: str) -> None:
        self.constraint = constraint
        self.table = table
        super().__init__(f"Constraint {constraint} on table {table} does not exist")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "UNKNOWN_CONSTRAINT",
            "constraint": self.constraint,
            "table": self.table,
        }


class StatementExecutionError(SchemaToolkitError):
    """The execution channel failed to run a statement.

    The engine's own error is kept as ``__cause__``.
    """

    def __init__(self, message: str, *, sql: str | None = None) -> None:
        self.message = message
        self.sql = sql
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "STATEMENT_EXECUTION_ERROR",
            "message": self.message,
            "sql": self.sql,
        }


__all__: list[str] = [
    "InvalidJsonStatementError",
    "ParameterError",
    "SchemaToolkitError",
    "StatementExecutionError",
    "UnknownConstraintError",
    "UnsupportedOperationError",
]
