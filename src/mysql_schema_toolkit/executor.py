"""
SQLAlchemy implementation of the statement execution channel.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .exceptions import StatementExecutionError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncConnection

logger = logging.getLogger(__name__)

# Statements arrive fully rendered; the driver must not look for bind markers.
_RAW_EXECUTION = {"no_parameters": True}


class SQLAlchemyStatementExecutor:
    """
    Runs raw statements on one ``AsyncConnection`` or ``AsyncSession``.

    Text goes to the driver through ``exec_driver_sql`` with
    ``no_parameters``, so literals holding ``:name`` or ``%`` reach the
    server untouched. A session contributes its current connection.
    Transaction boundaries stay with the caller.
    """

    def __init__(self, connection: AsyncConnection | AsyncSession) -> None:
        self._connection = connection

    async def _get_connection(self) -> AsyncConnection:
        if isinstance(self._connection, AsyncSession):
            return await self._connection.connection()
        return self._connection

    async def submit(self, sql: str, **options: Any) -> list[dict[str, Any]]:
        logger.debug("Submitting statement: %s", sql)
        try:
            conn = await self._get_connection()
            result = await conn.exec_driver_sql(sql, execution_options=_RAW_EXECUTION)
        except SQLAlchemyError as e:
            raise StatementExecutionError(str(e), sql=sql) from e

        if not result.returns_rows:
            return []
        return [dict(row) for row in result.mappings().all()]
