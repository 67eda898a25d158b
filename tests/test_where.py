import pytest
from sqlalchemy import column

from mysql_schema_toolkit import ParameterError, compile_where
from mysql_schema_toolkit.generator import (
    DEFAULT_WHERE_REGISTRY,
    WhereOperator,
    WhereOperatorRegistry,
)


@pytest.mark.parametrize("where", [None, {}])
def test_empty_conditions(where):
    assert compile_where(where) == ""


class TestShorthand:
    def test_equality_is_anded(self):
        assert compile_where({"status": "active", "age": 18}) == (
            "`status` = 'active' AND `age` = 18"
        )

    def test_none_is_null_check(self):
        assert compile_where({"deleted_at": None}) == "`deleted_at` IS NULL"

    def test_list_is_membership(self):
        assert compile_where({"id": [1, 2]}) == "`id` IN (1, 2)"


class TestConditionTree:
    def test_and(self):
        where = {
            "op": "and",
            "conditions": [
                {"op": "=", "attr": "status", "val": "active"},
                {"op": ">", "attr": "age", "val": 18},
            ],
        }
        assert compile_where(where) == "`status` = 'active' AND `age` > 18"

    def test_or_nested_in_and(self):
        where = {
            "op": "and",
            "conditions": [
                {"op": "is_not_null", "attr": "email"},
                {
                    "op": "or",
                    "conditions": [
                        {"op": "<", "attr": "age", "val": 13},
                        {"op": ">=", "attr": "age", "val": 65},
                    ],
                },
            ],
        }
        assert compile_where(where) == (
            "`email` IS NOT NULL AND (`age` < 13 OR `age` >= 65)"
        )

    def test_not(self):
        where = {"op": "not", "condition": {"op": "like", "attr": "name", "val": "a%"}}
        assert compile_where(where) == "`name` NOT LIKE 'a%'"

    def test_between(self):
        where = {"op": "between", "attr": "age", "val": [18, 30]}
        assert compile_where(where) == "`age` BETWEEN 18 AND 30"

    def test_regex(self):
        assert compile_where({"op": "regex", "attr": "name", "val": "^a"}) == (
            "`name` REGEXP '^a'"
        )

    def test_unknown_operator(self):
        with pytest.raises(ParameterError, match="Unsupported where operator"):
            compile_where({"op": "fuzzy", "attr": "name", "val": "x"})

    def test_missing_attr(self):
        with pytest.raises(ParameterError):
            compile_where({"op": "=", "val": 1})

    def test_logical_without_conditions(self):
        with pytest.raises(ParameterError):
            compile_where({"op": "and", "conditions": []})


def test_clause_element_is_rendered():
    assert compile_where(column("qty") >= 3) == "qty >= 3"


def test_unsupported_input_type():
    with pytest.raises(ParameterError):
        compile_where(42)


def test_default_registry_operators():
    assert {"=", "!=", "in", "not_in", "between", "like", "regex", "is_null"} <= (
        DEFAULT_WHERE_REGISTRY.supported_operators
    )


def test_custom_operator_registration():
    class StartsWith(WhereOperator):
        @property
        def name(self):
            return "starts_with"

        def apply(self, col, value):
            return col.like(f"{value}%")

    registry = WhereOperatorRegistry()
    registry.register(StartsWith())

    sql = compile_where(
        {"op": "starts_with", "attr": "name", "val": "Jo"}, registry=registry
    )
    assert sql == "`name` LIKE 'Jo%'"
