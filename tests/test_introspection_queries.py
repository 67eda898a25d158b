import pytest

from mysql_schema_toolkit import ShowIndexesOptions, TableReference


def test_version(generator):
    assert generator.version_query() == "SELECT VERSION() as `version`"


def test_show_tables(generator):
    assert generator.show_tables_query() == "SHOW TABLES;"


class TestDescribeTable:
    def test_plain(self, generator):
        assert generator.describe_table_query("t") == "SHOW FULL COLUMNS FROM `t`;"

    def test_with_schema(self, generator):
        assert generator.describe_table_query("t", "shop") == (
            "SHOW FULL COLUMNS FROM `shop`.`t`;"
        )

    def test_with_custom_schema_delimiter(self, generator):
        assert generator.describe_table_query("t", "shop", "_") == (
            "SHOW FULL COLUMNS FROM `shop_t`;"
        )


class TestShowIndexes:
    def test_plain(self, generator):
        assert generator.show_indexes_query("t") == "SHOW INDEX FROM `t`"

    def test_with_database(self, generator):
        sql = generator.show_indexes_query("t", ShowIndexesOptions(database="shop"))
        assert sql == "SHOW INDEX FROM `t` FROM `shop`"


class TestShowConstraints:
    def test_columns_are_aliased(self, generator):
        sql = generator.show_constraints_query("t")
        assert sql.startswith(
            "SELECT CONSTRAINT_CATALOG AS constraintCatalog, "
            "CONSTRAINT_NAME AS constraintName, "
            "CONSTRAINT_SCHEMA AS constraintSchema, "
            "CONSTRAINT_TYPE AS constraintType, "
            "TABLE_NAME AS tableName, "
            "TABLE_SCHEMA AS tableSchema "
            "from INFORMATION_SCHEMA.TABLE_CONSTRAINTS"
        )
        assert sql.endswith("WHERE table_name = 't';")

    def test_filters(self, generator):
        sql = generator.show_constraints_query(TableReference("t", "shop"), "c")
        assert sql.endswith(
            "WHERE table_name = 't' AND constraint_name = 'c' AND TABLE_SCHEMA = 'shop';"
        )

    def test_filter_values_are_escaped(self, generator):
        sql = generator.show_constraints_query("o'neil")
        assert sql.endswith("WHERE table_name = 'o''neil';")


class TestForeignKeyQueries:
    def test_all_foreign_keys_of_a_table(self, generator):
        sql = generator.get_foreign_keys_query("orders", "shop")
        assert "FROM INFORMATION_SCHEMA.KEY_COLUMN_USAGE" in sql
        assert sql.endswith(
            " where TABLE_NAME = 'orders' AND CONSTRAINT_NAME!='PRIMARY'"
            " AND CONSTRAINT_SCHEMA='shop' AND REFERENCED_TABLE_NAME IS NOT NULL;"
        )

    def test_both_sides_of_a_column(self, generator):
        sql = generator.get_foreign_key_query({"tableName": "t", "schema": "shop"}, "id")
        assert "CONSTRAINT_NAME as constraint_name" in sql
        assert sql.endswith(
            " WHERE (REFERENCED_TABLE_NAME = 't' AND REFERENCED_TABLE_SCHEMA = 'shop'"
            " AND REFERENCED_COLUMN_NAME = 'id')"
            " OR (TABLE_NAME = 't' AND TABLE_SCHEMA = 'shop' AND COLUMN_NAME = 'id'"
            " AND REFERENCED_TABLE_NAME IS NOT NULL)"
        )

    def test_without_schema(self, generator):
        sql = generator.get_foreign_key_query("t", "id")
        assert "SCHEMA =" not in sql.split(" WHERE ", 1)[1]


@pytest.mark.parametrize("dialect", ["mysql", "MariaDB"])
def test_dialects_share_statements(dialect):
    from mysql_schema_toolkit import create_query_generator

    assert create_query_generator(dialect).show_tables_query() == "SHOW TABLES;"
