"""IStatementExecutor - Protocol for the statement execution channel."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class IStatementExecutor(Protocol):
    """
    Submits SQL text on a single session and returns the resulting rows.

    Implementations raise ``StatementExecutionError`` (or let the driver's
    own error through) when the engine rejects a statement. The session's
    statement delimiter belongs to the implementation, not to callers.
    """

    async def submit(self, sql: str, **options: Any) -> list[dict[str, Any]]:
        """Run ``sql``; return rows as dictionaries (empty for DDL)."""
        ...
