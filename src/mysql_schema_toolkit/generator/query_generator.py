"""
MySQL statement builders.

MySQL has three quirks this generator works around:

- ``REFERENCES`` cannot sit inline next to ``PRIMARY KEY``, so both are
  moved to trailing table-level clauses in ``CREATE TABLE``;
- there is no routine rename;
- routine bodies contain ``;``, so creation needs delimiter switching
  (done by the query interface, not here).
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from ..exceptions import ParameterError, UnsupportedOperationError
from ..models import (
    Cast,
    ColumnDefinition,
    IndexSpec,
    JsonAccessor,
    ParameterDirection,
    TableReference,
    as_routine_parameters,
)
from ..options import (
    CreateTableOptions,
    DeleteOptions,
    InsertOptions,
    ShowIndexesOptions,
)
from ..quoting import add_schema, underscore, wrap_single_quote
from .attributes import (
    ADD_COLUMN_CONTEXT,
    attribute_to_sql,
    attributes_to_sql,
    foreign_key_name,
    references_to_sql,
)
from .base import QueryGenerator
from .json_path import cast_type, compile_cast, handle_json, to_json_value
from .where import WhereOperatorRegistry, compile_where

if TYPE_CHECKING:
    from .base import TableLike

PRIMARY_KEY_CONSTRAINT = "PRIMARY"

_PRIMARY_KEY = re.compile(r"\s*\bPRIMARY KEY\b")
_INLINE_REFERENCE = re.compile(r"^(.*?)\s*(\bREFERENCES\b.*)$", re.DOTALL)

_FOREIGN_KEY_FIELDS = ",".join(
    [
        "CONSTRAINT_NAME as constraint_name",
        "CONSTRAINT_NAME as constraintName",
        "CONSTRAINT_SCHEMA as constraintSchema",
        "CONSTRAINT_SCHEMA as constraintCatalog",
        "TABLE_NAME as tableName",
        "TABLE_SCHEMA as tableSchema",
        "TABLE_SCHEMA as tableCatalog",
        "COLUMN_NAME as columnName",
        "REFERENCED_TABLE_SCHEMA as referencedTableSchema",
        "REFERENCED_TABLE_SCHEMA as referencedTableCatalog",
        "REFERENCED_TABLE_NAME as referencedTableName",
        "REFERENCED_COLUMN_NAME as referencedColumnName",
    ]
)

_FUNCTION_REQUIRED = ("function_name", "return_type", "language", "body")


def _fragment(definition: str | ColumnDefinition | Any) -> str:
    if isinstance(definition, str):
        return definition
    return attribute_to_sql(definition)


def _split_column(definition: str | ColumnDefinition | Any) -> tuple[str, bool, str | None]:
    """
    Split a column into its inline fragment, primary-key membership and
    reference clause.

    Structured definitions are split on their fields. Raw fragments are
    split on the ``PRIMARY KEY`` and ``REFERENCES`` keywords.
    """
    if isinstance(definition, str):
        fragment = definition
        is_primary = "PRIMARY KEY" in fragment
        if is_primary:
            fragment = _PRIMARY_KEY.sub("", fragment, count=1)
        # A column may carry both a primary key and a reference
        reference = None
        if "REFERENCES" in fragment:
            match = _INLINE_REFERENCE.match(fragment)
            if match:
                fragment, reference = match.group(1), match.group(2)
        return fragment.strip(), is_primary, reference

    if not isinstance(definition, ColumnDefinition):
        definition = ColumnDefinition(type=definition)
    inline = definition.model_copy(update={"primary_key": False, "references": None})
    reference = (
        references_to_sql(definition.references)
        if definition.references is not None
        else None
    )
    return attribute_to_sql(inline), definition.primary_key, reference


def _change_reference(definition: str | ColumnDefinition | Any, fragment: str) -> str | None:
    if isinstance(definition, ColumnDefinition):
        if definition.references is None:
            return None
        return references_to_sql(definition.references)
    if "REFERENCES" in fragment:
        return fragment[fragment.index("REFERENCES") :]
    return None


class MySQLQueryGenerator(QueryGenerator):
    """Pure, stateless builders for MySQL statements."""

    dialect_name = "mysql"

    def __init__(self, where_registry: WhereOperatorRegistry | None = None) -> None:
        self._where_registry = where_registry

    # -- DDL ---------------------------------------------------------------

    def create_table_query(
        self,
        table: TableLike,
        attributes: Mapping[str, str | ColumnDefinition],
        options: CreateTableOptions | None = None,
    ) -> str:
        options = options or CreateTableOptions()
        ref = TableReference.coerce(table)

        primary_keys: list[str] = []
        foreign_keys: dict[str, str] = {}
        columns: list[str] = []

        for name, definition in attributes.items():
            fragment, is_primary, reference = _split_column(definition)
            if is_primary:
                primary_keys.append(name)
            if reference is not None:
                foreign_keys[name] = reference
            columns.append(f"{self.quote_identifier(name)} {fragment}".rstrip())

        for unique_key in options.unique_keys:
            if not unique_key.custom_index:
                continue
            index_name = self.quote_identifier(unique_key.resolved_name(ref.name))
            fields = ", ".join(self.quote_identifier(f) for f in unique_key.fields)
            columns.append(f"UNIQUE {index_name} ({fields})")

        if primary_keys:
            pk_list = ", ".join(self.quote_identifier(pk) for pk in primary_keys)
            columns.append(f"PRIMARY KEY ({pk_list})")

        for name, reference in foreign_keys.items():
            columns.append(f"FOREIGN KEY ({self.quote_identifier(name)}) {reference}")

        sql = f"CREATE TABLE IF NOT EXISTS {self.quote_table(ref)} ({', '.join(columns)})"
        if options.engine:
            sql += f" ENGINE={options.engine}"
        if options.comment:
            sql += " COMMENT " + self.escape(options.comment)
        if options.charset:
            sql += f" DEFAULT CHARSET={options.charset}"
        if options.collate:
            sql += f" COLLATE {options.collate}"
        if options.initial_auto_increment:
            sql += f" AUTO_INCREMENT={options.initial_auto_increment}"
        if options.row_format:
            sql += f" ROW_FORMAT={options.row_format}"
        return sql + ";"

    def add_column_query(
        self, table: TableLike, key: str, attribute: ColumnDefinition | Any
    ) -> str:
        definition = attribute_to_sql(
            attribute, context=ADD_COLUMN_CONTEXT, table=table, foreign_key=key
        )
        return (
            f"ALTER TABLE {self.quote_table(table)} "
            f"ADD {self.quote_identifier(key)} {definition};"
        )

    def remove_column_query(self, table: TableLike, attribute_name: str) -> str:
        return (
            f"ALTER TABLE {self.quote_table(table)} "
            f"DROP {self.quote_identifier(attribute_name)};"
        )

    def change_column_query(
        self, table: TableLike, attributes: Mapping[str, str | ColumnDefinition]
    ) -> str:
        if not attributes:
            raise ParameterError("change_column requires attributes", parameter="attributes")

        changes: list[str] = []
        constraints: list[str] = []
        for name, definition in attributes.items():
            fragment = _fragment(definition)
            column = self.quote_identifier(name)
            reference = _change_reference(definition, fragment)
            if reference is not None:
                fk_name = self.quote_identifier(foreign_key_name(table, name))
                constraints.append(
                    f"ADD CONSTRAINT {fk_name} FOREIGN KEY ({column}) {reference}"
                )
            else:
                changes.append(f"CHANGE {column} {column} {fragment}")

        clauses = ", ".join(changes + constraints)
        return f"ALTER TABLE {self.quote_table(table)} {clauses};"

    def rename_column_query(
        self,
        table: TableLike,
        attr_before: str,
        attributes: Mapping[str, str | ColumnDefinition],
    ) -> str:
        before = self.quote_identifier(attr_before)
        clauses = ", ".join(
            f"CHANGE {before} {self.quote_identifier(name)} {_fragment(definition)}"
            for name, definition in attributes.items()
        )
        return f"ALTER TABLE {self.quote_table(table)} {clauses};"

    def truncate_table_query(self, table: TableLike) -> str:
        return f"TRUNCATE {self.quote_table(table)}"

    def remove_index_query(
        self, table: TableLike, index_name_or_attributes: str | Sequence[str] | IndexSpec
    ) -> str:
        ref = TableReference.coerce(table)
        if isinstance(index_name_or_attributes, str):
            index_name = index_name_or_attributes
        elif isinstance(index_name_or_attributes, IndexSpec):
            index_name = index_name_or_attributes.name or underscore(
                ref.name + "_" + "_".join(index_name_or_attributes.fields)
            )
        else:
            index_name = underscore(ref.name + "_" + "_".join(index_name_or_attributes))
        return f"DROP INDEX {self.quote_identifier(index_name)} ON {self.quote_table(ref)}"

    def drop_foreign_key_query(self, table: TableLike, foreign_key: str) -> str:
        return (
            f"ALTER TABLE {self.quote_table(table)} "
            f"DROP FOREIGN KEY {self.quote_identifier(foreign_key)};"
        )

    def attribute_to_sql(
        self,
        attribute: ColumnDefinition | Any,
        *,
        context: str | None = None,
        table: TableLike | None = None,
        foreign_key: str | None = None,
    ) -> str:
        return attribute_to_sql(
            attribute, context=context, table=table, foreign_key=foreign_key
        )

    def attributes_to_sql(
        self,
        attributes: Mapping[str, ColumnDefinition | Any],
        *,
        context: str | None = None,
        table: TableLike | None = None,
    ) -> dict[str, str]:
        return attributes_to_sql(attributes, context=context, table=table)

    # -- DML ---------------------------------------------------------------

    def insert_query(
        self,
        table: TableLike,
        values: Mapping[str, Any],
        options: InsertOptions | None = None,
    ) -> str:
        if not values:
            raise ParameterError("insert requires at least one value", parameter="values")
        options = options or InsertOptions()

        columns = ", ".join(self.quote_identifier(k) for k in values)
        literals = ", ".join(
            self.escape(json.dumps(v)) if isinstance(v, dict | list) else self.escape(v)
            for v in values.values()
        )
        ignore = " IGNORE" if options.ignore_duplicates else ""
        sql = f"INSERT{ignore} INTO {self.quote_table(table)} ({columns}) VALUES ({literals})"
        if options.on_duplicate:
            sql += f" ON DUPLICATE KEY {options.on_duplicate}"
        return sql + ";"

    def upsert_query(
        self,
        table: TableLike,
        insert_values: Mapping[str, Any],
        update_values: Iterable[str],
    ) -> str:
        assignments = []
        for key in update_values:
            column = self.quote_identifier(key)
            assignments.append(f"{column}=VALUES({column})")
        on_duplicate = "UPDATE " + ", ".join(assignments)
        return self.insert_query(
            table, insert_values, InsertOptions(on_duplicate=on_duplicate)
        )

    def delete_query(
        self,
        table: TableLike,
        where: Any = None,
        options: DeleteOptions | None = None,
    ) -> str:
        options = options or DeleteOptions()
        sql = f"DELETE FROM {self.quote_table(table)}"

        conditions = compile_where(where, registry=self._where_registry)
        if conditions:
            sql += f" WHERE {conditions}"
        if options.limit:
            sql += f" LIMIT {self.escape(options.limit)}"
        return sql

    # -- Introspection -----------------------------------------------------

    def version_query(self) -> str:
        return "SELECT VERSION() as `version`"

    def show_tables_query(self) -> str:
        return "SHOW TABLES;"

    def describe_table_query(
        self,
        table: TableLike,
        schema: str | None = None,
        schema_delimiter: str | None = None,
    ) -> str:
        ref = add_schema(table, schema, schema_delimiter)
        return f"SHOW FULL COLUMNS FROM {self.quote_table(ref)};"

    def show_indexes_query(
        self, table: TableLike, options: ShowIndexesOptions | None = None
    ) -> str:
        options = options or ShowIndexesOptions()
        sql = f"SHOW INDEX FROM {self.quote_table(table)}"
        if options.database:
            sql += f" FROM {self.quote_identifier(options.database)}"
        return sql

    def show_constraints_query(
        self, table: TableLike, constraint_name: str | None = None
    ) -> str:
        ref = TableReference.coerce(table)
        sql = " ".join(
            [
                "SELECT CONSTRAINT_CATALOG AS constraintCatalog,",
                "CONSTRAINT_NAME AS constraintName,",
                "CONSTRAINT_SCHEMA AS constraintSchema,",
                "CONSTRAINT_TYPE AS constraintType,",
                "TABLE_NAME AS tableName,",
                "TABLE_SCHEMA AS tableSchema",
                "from INFORMATION_SCHEMA.TABLE_CONSTRAINTS",
                f"WHERE table_name = {wrap_single_quote(ref.name)}",
            ]
        )
        if constraint_name:
            sql += f" AND constraint_name = {wrap_single_quote(constraint_name)}"
        if ref.schema:
            sql += f" AND TABLE_SCHEMA = {wrap_single_quote(ref.schema)}"
        return sql + ";"

    def get_foreign_keys_query(self, table_name: str, schema_name: str) -> str:
        return (
            f"SELECT {_FOREIGN_KEY_FIELDS} FROM INFORMATION_SCHEMA.KEY_COLUMN_USAGE"
            f" where TABLE_NAME = {wrap_single_quote(table_name)}"
            f" AND CONSTRAINT_NAME!={wrap_single_quote(PRIMARY_KEY_CONSTRAINT)}"
            f" AND CONSTRAINT_SCHEMA={wrap_single_quote(schema_name)}"
            " AND REFERENCED_TABLE_NAME IS NOT NULL;"
        )

    def get_foreign_key_query(self, table: TableLike, column_name: str) -> str:
        """
        Foreign keys where ``column_name`` is either the referenced or the
        referencing side.
        """
        ref = TableReference.coerce(table)
        table_name = wrap_single_quote(ref.name)
        column = wrap_single_quote(column_name)

        referenced = f"REFERENCED_TABLE_NAME = {table_name}"
        if ref.schema:
            referenced += f" AND REFERENCED_TABLE_SCHEMA = {wrap_single_quote(ref.schema)}"
        referenced += f" AND REFERENCED_COLUMN_NAME = {column}"

        referencing = f"TABLE_NAME = {table_name}"
        if ref.schema:
            referencing += f" AND TABLE_SCHEMA = {wrap_single_quote(ref.schema)}"
        referencing += f" AND COLUMN_NAME = {column} AND REFERENCED_TABLE_NAME IS NOT NULL"

        return (
            f"SELECT {_FOREIGN_KEY_FIELDS} FROM INFORMATION_SCHEMA.KEY_COLUMN_USAGE"
            f" WHERE ({referenced}) OR ({referencing})"
        )

    # -- Routines ----------------------------------------------------------

    def create_function(
        self,
        function_name: str | None,
        params: Sequence[Any] | None,
        return_type: str | None,
        language: str | None,
        body: str | None,
        options: Sequence[str] | None = None,
    ) -> str:
        """
        Build a ``CREATE FUNCTION`` block.

        ``language`` is validated but not emitted: MySQL routines are SQL only.

        Raises:
            ParameterError: If a required argument is missing or a parameter
                has no type.
        """
        if not function_name or not return_type or not language or not body:
            raise ParameterError(
                "create_function missing some parameters. Did you pass "
                "function_name, return_type, language and body?",
                expected=_FUNCTION_REQUIRED,
            )

        param_list = self.expand_function_param_list(params)
        expanded_options = self.expand_options(options)
        indented_body = str(body).replace("\n", "\n\t")

        sql = f"CREATE FUNCTION {function_name}({param_list})\nRETURNS {return_type}"
        if expanded_options:
            sql += f"\n\t{expanded_options}"
        return sql + f"\nBEGIN\n\t{indented_body}\nEND;"

    def drop_function(
        self, function_name: str | None, params: Sequence[Any] | None = None
    ) -> str:
        if not function_name:
            raise ParameterError("function_name required", parameter="function_name")
        if params is not None:
            self.expand_function_param_list(params)
        return f"DROP FUNCTION IF EXISTS {function_name};"

    def rename_function(
        self,
        old_function_name: str,
        params: Sequence[Any] | None,
        new_function_name: str,
    ) -> str:
        # Renaming through mysql.proc would also require editing the grant tables
        raise UnsupportedOperationError("rename_function", self.dialect_name)

    def expand_options(self, options: Sequence[str] | Mapping[str, Any] | None) -> str:
        if not options:
            return ""
        if isinstance(options, str):
            return options
        if isinstance(options, Mapping):
            raise ParameterError(
                "routine options must be a list of option clauses", parameter="options"
            )
        return "\n\t".join(options)

    def expand_function_param_list(self, params: Sequence[Any] | None) -> str:
        """
        Render a routine parameter list.

        ``IN`` is MySQL's default direction and is omitted.

        Raises:
            ParameterError: If ``params`` is not a list, or any entry has no type.
        """
        if params is None or isinstance(params, str | Mapping) or not isinstance(
            params, Sequence
        ):
            raise ParameterError(
                "function parameters array required, "
                "including an empty one for no arguments",
                parameter="params",
            )

        fragments = []
        for param in as_routine_parameters(params):
            parts = []
            if param.direction is not ParameterDirection.IN:
                parts.append(param.direction.value)
            if param.name:
                parts.append(param.name)
            parts.append(param.type)
            fragments.append(" ".join(parts))
        return ", ".join(fragments)

    # -- Structured values -------------------------------------------------

    def handle_json(self, accessor: JsonAccessor) -> str:
        return handle_json(accessor)

    def cast_type(self, cast: Cast) -> str:
        return cast_type(cast)

    def compile_cast(self, cast: Cast) -> str:
        return compile_cast(cast)

    def to_json_value(self, value: Any) -> Any:
        return to_json_value(value)


class MariaDBQueryGenerator(MySQLQueryGenerator):
    """MariaDB speaks the same DDL; only error messages name it differently."""

    dialect_name = "mariadb"
