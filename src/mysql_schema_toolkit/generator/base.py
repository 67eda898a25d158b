"""
QueryGenerator: the fixed set of statement builders a dialect implements.

Every method is pure: it takes descriptors and returns SQL text, or raises
a ``ParameterError`` / ``UnsupportedOperationError`` before producing any.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from ..quoting import escape, quote_identifier, quote_table

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from ..models import ColumnDefinition, TableReference
    from ..options import (
        CreateTableOptions,
        DeleteOptions,
        InsertOptions,
        ShowIndexesOptions,
    )

    TableLike = TableReference | Mapping[str, Any] | str


class QueryGenerator(ABC):
    """Statement builders shared by every supported dialect variant."""

    dialect_name: str = "abstract"

    def quote_identifier(self, identifier: str) -> str:
        return quote_identifier(identifier)

    def quote_table(self, table: TableLike) -> str:
        return quote_table(table)

    def escape(self, value: Any) -> str:
        return escape(value)

    # -- DDL ---------------------------------------------------------------

    @abstractmethod
    def create_table_query(
        self,
        table: TableLike,
        attributes: Mapping[str, str | ColumnDefinition],
        options: CreateTableOptions | None = None,
    ) -> str: ...

    @abstractmethod
    def add_column_query(
        self, table: TableLike, key: str, attribute: ColumnDefinition | Any
    ) -> str: ...

    @abstractmethod
    def remove_column_query(self, table: TableLike, attribute_name: str) -> str: ...

    @abstractmethod
    def change_column_query(
        self, table: TableLike, attributes: Mapping[str, str | ColumnDefinition]
    ) -> str: ...

    @abstractmethod
    def rename_column_query(
        self,
        table: TableLike,
        attr_before: str,
        attributes: Mapping[str, str | ColumnDefinition],
    ) -> str: ...

    @abstractmethod
    def truncate_table_query(self, table: TableLike) -> str: ...

    @abstractmethod
    def remove_index_query(
        self, table: TableLike, index_name_or_attributes: str | Sequence[str] | Any
    ) -> str: ...

    @abstractmethod
    def drop_foreign_key_query(self, table: TableLike, foreign_key: str) -> str: ...

    # -- DML ---------------------------------------------------------------

    @abstractmethod
    def insert_query(
        self,
        table: TableLike,
        values: Mapping[str, Any],
        options: InsertOptions | None = None,
    ) -> str: ...

    @abstractmethod
    def upsert_query(
        self,
        table: TableLike,
        insert_values: Mapping[str, Any],
        update_values: Mapping[str, Any],
    ) -> str: ...

    @abstractmethod
    def delete_query(
        self,
        table: TableLike,
        where: Any = None,
        options: DeleteOptions | None = None,
    ) -> str: ...

    # -- Introspection -----------------------------------------------------

    @abstractmethod
    def show_tables_query(self) -> str: ...

    @abstractmethod
    def describe_table_query(
        self,
        table: TableLike,
        schema: str | None = None,
        schema_delimiter: str | None = None,
    ) -> str: ...

    @abstractmethod
    def show_indexes_query(
        self, table: TableLike, options: ShowIndexesOptions | None = None
    ) -> str: ...

    @abstractmethod
    def show_constraints_query(
        self, table: TableLike, constraint_name: str | None = None
    ) -> str: ...

    @abstractmethod
    def get_foreign_keys_query(self, table_name: str, schema_name: str) -> str: ...

    @abstractmethod
    def get_foreign_key_query(self, table: TableLike, column_name: str) -> str: ...

    # -- Routines ----------------------------------------------------------

    @abstractmethod
    def create_function(
        self,
        function_name: str | None,
        params: Sequence[Any] | None,
        return_type: str | None,
        language: str | None,
        body: str | None,
        options: Sequence[str] | None = None,
    ) -> str: ...

    @abstractmethod
    def drop_function(
        self, function_name: str | None, params: Sequence[Any] | None = None
    ) -> str: ...

    @abstractmethod
    def rename_function(
        self,
        old_function_name: str,
        params: Sequence[Any] | None,
        new_function_name: str,
    ) -> str: ...
