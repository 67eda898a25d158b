"""
Dialect query generation.

Usage::

    from mysql_schema_toolkit.generator import create_query_generator

    generator = create_query_generator("mysql")
    sql = generator.create_table_query("users", {"id": "INTEGER PRIMARY KEY"})
"""

from __future__ import annotations

from .base import QueryGenerator
from .dialects import SQLDialect, create_query_generator
from .json_path import cast_type, compile_json_path, handle_json
from .query_generator import MariaDBQueryGenerator, MySQLQueryGenerator
from .tokenizer import is_json_statement
from .where import (
    DEFAULT_WHERE_REGISTRY,
    WhereOperator,
    WhereOperatorRegistry,
    compile_where,
)

__all__ = [
    "DEFAULT_WHERE_REGISTRY",
    "MariaDBQueryGenerator",
    "MySQLQueryGenerator",
    "QueryGenerator",
    "SQLDialect",
    "WhereOperator",
    "WhereOperatorRegistry",
    "cast_type",
    "compile_json_path",
    "compile_where",
    "create_query_generator",
    "handle_json",
    "is_json_statement",
]
