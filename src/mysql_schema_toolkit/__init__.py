"""MySQL statement generation and schema orchestration."""

from __future__ import annotations

from .exceptions import (
    InvalidJsonStatementError,
    ParameterError,
    SchemaToolkitError,
    StatementExecutionError,
    UnknownConstraintError,
    UnsupportedOperationError,
)
from .executor import SQLAlchemyStatementExecutor
from .generator import (
    MariaDBQueryGenerator,
    MySQLQueryGenerator,
    QueryGenerator,
    SQLDialect,
    compile_where,
    create_query_generator,
    is_json_statement,
)
from .models import (
    Cast,
    ColumnDefinition,
    ColumnReference,
    ConstraintDescriptor,
    IndexSpec,
    JsonAccessor,
    ParameterDirection,
    RoutineDefinition,
    RoutineParameter,
    TableReference,
    UniqueKey,
)
from .options import (
    CreateTableOptions,
    DeleteOptions,
    InsertOptions,
    ShowIndexesOptions,
)
from .ports import IStatementExecutor
from .query_interface import FunctionCreationStage, MySQLQueryInterface

__all__ = [
    # Generator
    "QueryGenerator",
    "MySQLQueryGenerator",
    "MariaDBQueryGenerator",
    "SQLDialect",
    "create_query_generator",
    "compile_where",
    "is_json_statement",
    # Orchestration
    "MySQLQueryInterface",
    "FunctionCreationStage",
    "IStatementExecutor",
    "SQLAlchemyStatementExecutor",
    # Value objects
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
    # Options
    "CreateTableOptions",
    "DeleteOptions",
    "InsertOptions",
    "ShowIndexesOptions",
    # Exceptions
    "SchemaToolkitError",
    "ParameterError",
    "InvalidJsonStatementError",
    "UnsupportedOperationError",
    "UnknownConstraintError",
    "StatementExecutionError",
]
