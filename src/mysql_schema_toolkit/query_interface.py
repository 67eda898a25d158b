"""
Schema operations MySQL cannot express as a single statement.

Each operation runs its statements strictly in order on one executor.
Introspection results are fetched fresh for every call and never cached.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any

from .exceptions import UnknownConstraintError
from .generator.dialects import create_query_generator
from .generator.query_generator import PRIMARY_KEY_CONSTRAINT
from .models import ConstraintDescriptor, TableReference

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from .generator.query_generator import MySQLQueryGenerator
    from .models import RoutineDefinition
    from .ports import IStatementExecutor

logger = logging.getLogger("mysql_schema_toolkit.query_interface")

FUNCTION_DELIMITER = "__END_FUNCTION__"


class FunctionCreationStage(str, Enum):
    INIT = "init"
    DELIMITER_SWITCHED = "delimiter_switched"
    BODY_SUBMITTED = "body_submitted"
    DELIMITER_RESTORED = "delimiter_restored"


class MySQLQueryInterface:
    """
    Orchestrates multi-statement schema changes for MySQL.

    Usage::

        async with engine.connect() as conn:
            qi = MySQLQueryInterface(
                SQLAlchemyStatementExecutor(conn), database="shop"
            )
            await qi.remove_column("orders", "customer_id")

    Args:
        executor: Statement channel bound to a single session.
        generator: Query generator; defaults to the MySQL variant.
        database: Schema used for introspection when a table has none.
    """

    def __init__(
        self,
        executor: IStatementExecutor,
        *,
        generator: MySQLQueryGenerator | None = None,
        database: str | None = None,
    ) -> None:
        self.executor = executor
        self.generator = generator or create_query_generator()
        self.database = database

    def _introspection_target(
        self, table: TableReference | Mapping[str, Any] | str
    ) -> TableReference:
        return TableReference.coerce(table).with_default_schema(self.database)

    async def remove_column(
        self,
        table: TableReference | Mapping[str, Any] | str,
        column: str,
        **options: Any,
    ) -> None:
        """
        Drop ``column`` after dropping every foreign key that touches it.

        MySQL refuses to drop a column that still takes part in a foreign key.
        """
        rows = await self.executor.submit(
            self.generator.get_foreign_key_query(
                self._introspection_target(table), column
            ),
            **options,
        )
        constraint_names = [
            row["constraint_name"]
            for row in rows
            if row.get("constraint_name") != PRIMARY_KEY_CONSTRAINT
        ]
        if constraint_names:
            logger.info(
                "Dropping %d foreign key(s) before removing %s.%s",
                len(constraint_names),
                TableReference.coerce(table),
                column,
            )
        for name in constraint_names:
            await self.executor.submit(
                self.generator.drop_foreign_key_query(table, name), **options
            )

        await self.executor.submit(
            self.generator.remove_column_query(table, column), **options
        )

    async def remove_constraint(
        self,
        table: TableReference | Mapping[str, Any] | str,
        constraint_name: str,
        **options: Any,
    ) -> None:
        """
        Drop a named constraint, choosing the statement from its type.

        Raises:
            UnknownConstraintError: If the table has no such constraint.
        """
        rows = await self.executor.submit(
            self.generator.show_constraints_query(
                self._introspection_target(table), constraint_name
            ),
            **options,
        )
        constraint = ConstraintDescriptor.from_row(rows[0]) if rows else None
        if constraint is None:
            raise UnknownConstraintError(
                constraint_name, str(TableReference.coerce(table))
            )

        logger.info(
            "Dropping %s constraint %s on %s",
            constraint.constraint_type,
            constraint_name,
            TableReference.coerce(table),
        )
        if constraint.is_foreign_key:
            sql = self.generator.drop_foreign_key_query(table, constraint_name)
        else:
            sql = self.generator.remove_index_query(
                constraint.table_name, constraint.constraint_name
            )
        await self.executor.submit(sql, **options)

    async def create_function(
        self,
        function_name: str | None,
        params: Sequence[Any] | None,
        return_type: str | None,
        language: str | None,
        body: str | None,
        options: Sequence[str] | None = None,
        **query_options: Any,
    ) -> None:
        """
        Create a stored function by switching the session delimiter.

        Runs three statements: ``DELIMITER __END_FUNCTION__;``, the function
        text terminated by that delimiter, then ``DELIMITER ;``. A failure
        aborts the sequence and is re-raised as-is. Nothing restores the
        delimiter after a failure past the first step; the session must be
        recovered by the caller.

        Raises:
            ParameterError: Before any statement, if the definition is invalid.
        """
        function_sql = self.generator.create_function(
            function_name, params, return_type, language, body, options
        )
        if not function_sql:
            return

        stage = FunctionCreationStage.INIT
        try:
            await self.executor.submit(
                f"DELIMITER {FUNCTION_DELIMITER};", **query_options
            )
            stage = FunctionCreationStage.DELIMITER_SWITCHED
            await self.executor.submit(
                f"{function_sql}\n{FUNCTION_DELIMITER}", **query_options
            )
            stage = FunctionCreationStage.BODY_SUBMITTED
            await self.executor.submit("DELIMITER ;", **query_options)
            stage = FunctionCreationStage.DELIMITER_RESTORED
        except Exception:
            if stage is not FunctionCreationStage.INIT:
                logger.warning(
                    "create_function %s aborted at stage %s; "
                    "session delimiter is still %s",
                    function_name,
                    stage.value,
                    FUNCTION_DELIMITER,
                )
            raise
        logger.info("Created function %s", function_name)

    async def create_routine(
        self, definition: RoutineDefinition, **query_options: Any
    ) -> None:
        await self.create_function(
            definition.name,
            list(definition.params),
            definition.return_type,
            definition.language,
            definition.body,
            list(definition.options),
            **query_options,
        )

    async def drop_function(
        self,
        function_name: str | None,
        params: Sequence[Any] | None = None,
        **options: Any,
    ) -> None:
        await self.executor.submit(
            self.generator.drop_function(function_name, params), **options
        )

    def rename_function(
        self,
        old_function_name: str,
        params: Sequence[Any] | None,
        new_function_name: str,
    ) -> None:
        """Always raises ``UnsupportedOperationError``; nothing is submitted."""
        self.generator.rename_function(old_function_name, params, new_function_name)
