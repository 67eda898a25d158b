import pytest
from pydantic import ValidationError

from mysql_schema_toolkit import (
    ColumnDefinition,
    ConstraintDescriptor,
    ParameterDirection,
    ParameterError,
    RoutineParameter,
    SQLDialect,
    TableReference,
    UniqueKey,
    UnsupportedOperationError,
    create_query_generator,
)
from mysql_schema_toolkit.quoting import escape, quote_table, underscore


class TestTableReference:
    def test_coerce_string(self):
        assert TableReference.coerce("users") == TableReference("users")

    def test_coerce_mapping(self):
        ref = TableReference.coerce({"tableName": "users", "schema": "shop", "delimiter": "_"})
        assert ref == TableReference("users", "shop")
        assert ref.schema_delimiter == "_"
        assert str(ref) == "shop_users"

    def test_mapping_without_name(self):
        with pytest.raises(ParameterError):
            TableReference.coerce({"schema": "shop"})

    def test_unsupported_value(self):
        with pytest.raises(ParameterError):
            TableReference.coerce(42)

    def test_default_schema_never_overrides(self):
        ref = TableReference("t", "archive")
        assert ref.with_default_schema("shop") is ref
        assert TableReference("t").with_default_schema("shop").schema == "shop"
        assert TableReference("t").with_default_schema(None).schema is None

    def test_is_immutable(self):
        ref = TableReference("t")
        with pytest.raises(AttributeError):
            ref.name = "u"


class TestQuoting:
    def test_quote_table(self):
        assert quote_table("t") == "`t`"
        assert quote_table(TableReference("t", "db")) == "`db`.`t`"
        assert quote_table(TableReference("t", "db", "__")) == "`db__t`"

    def test_escape_list(self):
        assert escape([1, "a", None]) == "1, 'a', NULL"

    @pytest.mark.parametrize(
        ("name", "expected"),
        [("ownerId", "owner_id"), ("HTTPServer", "http_server"), ("a-b", "a_b")],
    )
    def test_underscore(self, name, expected):
        assert underscore(name) == expected


def test_column_definition_tracks_explicit_default():
    assert ColumnDefinition(type="INT", default_value=None).has_default is True
    assert ColumnDefinition(type="INT").has_default is False


def test_value_objects_are_frozen():
    key = UniqueKey(fields=["a", "b"])
    assert key.fields == ("a", "b")
    with pytest.raises(ValidationError):
        key.name = "x"


class TestConstraintDescriptor:
    def test_from_row(self):
        descriptor = ConstraintDescriptor.from_row(
            {
                "constraintName": "fk",
                "constraintType": "FOREIGN KEY",
                "tableName": "t",
                "tableSchema": "shop",
            }
        )
        assert descriptor is not None
        assert descriptor.is_foreign_key
        assert descriptor.table_schema == "shop"

    def test_row_without_type(self):
        assert ConstraintDescriptor.from_row({"constraintName": "c"}) is None


class TestRoutineParameter:
    def test_direction_is_normalised(self):
        param = RoutineParameter.from_raw({"type": "int", "direction": "inout"})
        assert param.direction is ParameterDirection.INOUT

    def test_default_direction(self):
        assert RoutineParameter.from_raw({"type": "int"}).direction is ParameterDirection.IN

    def test_instances_pass_through(self):
        param = RoutineParameter(type="int")
        assert RoutineParameter.from_raw(param) is param


class TestCreateQueryGenerator:
    def test_by_enum(self):
        assert create_query_generator(SQLDialect.MARIADB).dialect_name == "mariadb"

    def test_default(self):
        assert create_query_generator().dialect_name == "mysql"

    def test_unknown_dialect(self):
        with pytest.raises(UnsupportedOperationError, match="postgres"):
            create_query_generator("postgres")
