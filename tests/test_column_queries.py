import pytest
from sqlalchemy import JSON, Integer, String, Text, func

from mysql_schema_toolkit import (
    ColumnDefinition,
    ColumnReference,
    IndexSpec,
    ParameterError,
    TableReference,
)


class TestAttributeToSql:
    def test_fragments_in_fixed_order(self, generator):
        sql = generator.attribute_to_sql(
            ColumnDefinition(
                type="VARCHAR(255)",
                allow_null=False,
                default_value="abc",
                unique=True,
                comment="display name",
                after="id",
            )
        )
        assert sql == (
            "VARCHAR(255) NOT NULL DEFAULT 'abc' UNIQUE COMMENT 'display name' AFTER `id`"
        )

    def test_sqlalchemy_types_are_compiled(self, generator):
        sql = generator.attribute_to_sql(
            ColumnDefinition(
                type=Integer(), allow_null=False, auto_increment=True, primary_key=True
            )
        )
        assert sql == "INTEGER NOT NULL auto_increment PRIMARY KEY"
        assert generator.attribute_to_sql(String(255)) == "VARCHAR(255)"

    def test_bare_type_is_accepted(self, generator):
        assert generator.attribute_to_sql("DATETIME") == "DATETIME"

    def test_explicit_none_default_renders_null(self, generator):
        sql = generator.attribute_to_sql(ColumnDefinition(type="INTEGER", default_value=None))
        assert sql == "INTEGER DEFAULT NULL"

    def test_omitted_default_renders_nothing(self, generator):
        assert generator.attribute_to_sql(ColumnDefinition(type="INTEGER")) == "INTEGER"

    def test_boolean_default(self, generator):
        sql = generator.attribute_to_sql(ColumnDefinition(type="TINYINT(1)", default_value=True))
        assert sql == "TINYINT(1) DEFAULT true"

    @pytest.mark.parametrize("column_type", ["TEXT", "LONGBLOB", "JSON", Text(), JSON()])
    def test_types_without_defaults_drop_the_default(self, generator, column_type):
        sql = generator.attribute_to_sql(
            ColumnDefinition(type=column_type, default_value="x")
        )
        assert "DEFAULT" not in sql

    def test_binary_columns_drop_the_default(self, generator):
        sql = generator.attribute_to_sql(
            ColumnDefinition(type="VARBINARY(16)", binary=True, default_value="x")
        )
        assert sql == "VARBINARY(16)"

    @pytest.mark.parametrize("default", [func.now(), lambda: 1])
    def test_expression_defaults_stay_out_of_ddl(self, generator, default):
        sql = generator.attribute_to_sql(
            ColumnDefinition(type="DATETIME", default_value=default)
        )
        assert sql == "DATETIME"

    def test_first(self, generator):
        assert generator.attribute_to_sql(ColumnDefinition(type="INT", first=True)) == (
            "INT FIRST"
        )

    def test_references_with_actions(self, generator):
        sql = generator.attribute_to_sql(
            ColumnDefinition(
                type="INTEGER",
                references=ColumnReference(
                    table="owners", on_delete="cascade", on_update="set null"
                ),
            )
        )
        assert sql == (
            "INTEGER REFERENCES `owners` (`id`) ON DELETE CASCADE ON UPDATE SET NULL"
        )

    def test_attributes_to_sql(self, generator):
        result = generator.attributes_to_sql(
            {"id": ColumnDefinition(type="INTEGER"), "name": "VARCHAR(10)"}
        )
        assert result == {"id": "INTEGER", "name": "VARCHAR(10)"}


class TestAddColumn:
    def test_plain_column(self, generator):
        sql = generator.add_column_query(
            "users", "age", ColumnDefinition(type="INTEGER", allow_null=False)
        )
        assert sql == "ALTER TABLE `users` ADD `age` INTEGER NOT NULL;"

    def test_reference_adds_named_constraint(self, generator):
        sql = generator.add_column_query(
            "t",
            "ownerId",
            ColumnDefinition(
                type="INTEGER",
                references=ColumnReference(table="owners", key="pk", on_delete="cascade"),
            ),
        )
        assert sql == (
            "ALTER TABLE `t` ADD `ownerId` INTEGER, "
            "ADD CONSTRAINT `t_ownerId_foreign_idx` FOREIGN KEY (`ownerId`) "
            "REFERENCES `owners` (`pk`) ON DELETE CASCADE;"
        )

    def test_schema_qualified_table(self, generator):
        sql = generator.add_column_query(
            TableReference("users", "shop"), "age", ColumnDefinition(type="INTEGER")
        )
        assert sql == "ALTER TABLE `shop`.`users` ADD `age` INTEGER;"


class TestChangeColumn:
    def test_changes_then_constraints(self, generator):
        sql = generator.change_column_query(
            "t",
            {
                "ownerId": "INTEGER REFERENCES `owners` (`id`)",
                "name": "VARCHAR(100) NOT NULL",
            },
        )
        assert sql == (
            "ALTER TABLE `t` CHANGE `name` `name` VARCHAR(100) NOT NULL, "
            "ADD CONSTRAINT `t_ownerId_foreign_idx` FOREIGN KEY (`ownerId`) "
            "REFERENCES `owners` (`id`);"
        )

    def test_column_definitions(self, generator):
        sql = generator.change_column_query(
            "t", {"age": ColumnDefinition(type="BIGINT", allow_null=False)}
        )
        assert sql == "ALTER TABLE `t` CHANGE `age` `age` BIGINT NOT NULL;"

    def test_reference_keyword_in_comment_is_a_plain_change(self, generator):
        sql = generator.change_column_query(
            "t", {"note": ColumnDefinition(type="TEXT", comment="REFERENCES x")}
        )
        assert sql == "ALTER TABLE `t` CHANGE `note` `note` TEXT COMMENT 'REFERENCES x';"

    def test_structured_reference_becomes_constraint(self, generator):
        sql = generator.change_column_query(
            "t",
            {
                "ownerId": ColumnDefinition(
                    type="INTEGER", references=ColumnReference(table="owners")
                )
            },
        )
        assert sql == (
            "ALTER TABLE `t` ADD CONSTRAINT `t_ownerId_foreign_idx` "
            "FOREIGN KEY (`ownerId`) REFERENCES `owners` (`id`);"
        )

    def test_empty_attributes_rejected(self, generator):
        with pytest.raises(ParameterError):
            generator.change_column_query("t", {})


def test_rename_column(generator):
    sql = generator.rename_column_query("t", "old", {"new": "INTEGER NOT NULL"})
    assert sql == "ALTER TABLE `t` CHANGE `old` `new` INTEGER NOT NULL;"


def test_remove_column(generator):
    assert generator.remove_column_query("t", "c") == "ALTER TABLE `t` DROP `c`;"


def test_truncate_has_no_terminator(generator):
    assert generator.truncate_table_query("t") == "TRUNCATE `t`"


class TestRemoveIndex:
    def test_by_name(self, generator):
        assert generator.remove_index_query("t", "idx") == "DROP INDEX `idx` ON `t`"

    def test_name_derived_from_columns(self, generator):
        sql = generator.remove_index_query("userProfiles", ["firstName", "lastName"])
        assert sql == (
            "DROP INDEX `user_profiles_first_name_last_name` ON `userProfiles`"
        )

    def test_index_spec(self, generator):
        named = IndexSpec(fields=("a",), name="idx_a")
        unnamed = IndexSpec(fields=("a", "b"))
        assert generator.remove_index_query("t", named) == "DROP INDEX `idx_a` ON `t`"
        assert generator.remove_index_query("t", unnamed) == "DROP INDEX `t_a_b` ON `t`"


def test_drop_foreign_key(generator):
    assert generator.drop_foreign_key_query("t", "fk") == (
        "ALTER TABLE `t` DROP FOREIGN KEY `fk`;"
    )


def test_identifiers_with_backticks_are_doubled(generator):
    assert generator.remove_column_query("t", "we`ird") == (
        "ALTER TABLE `t` DROP `we``ird`;"
    )
