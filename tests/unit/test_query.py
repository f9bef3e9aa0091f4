"""Tests for schema-aware query execution."""

from __future__ import annotations

import copy
import pickle

import pytest

from typedsql import sql
from typedsql.core.connection import DatabaseConnection
from typedsql.exceptions import (
    MalformedQueryError,
    ParameterMismatchError,
    QueryError,
    UnknownFieldError,
)
from typedsql.query.manager import build_statement, driver_bind_names
from typedsql.query.row import ResultRow, project_row


class TestResultRow:
    """Tests for schema-restricted rows."""

    @pytest.fixture
    def row(self) -> ResultRow:
        return ResultRow({"name": "Aiko", "nenrei": 34})

    def test_item_and_attribute_access(self, row: ResultRow) -> None:
        assert row["name"] == "Aiko"
        assert row.nenrei == 34

    def test_unknown_field_item(self, row: ResultRow) -> None:
        """Reading an unselected field fails with the available names."""
        with pytest.raises(UnknownFieldError) as exc_info:
            row["age"]
        assert exc_info.value.available_fields == ["name", "nenrei"]
        assert "Available fields: name, nenrei" in str(exc_info.value)

    def test_unknown_field_attribute(self, row: ResultRow) -> None:
        with pytest.raises(UnknownFieldError):
            row.dummy  # noqa: B018

    def test_unknown_field_is_key_and_attribute_error(self, row: ResultRow) -> None:
        """Mapping and attribute protocols keep working."""
        assert row.get("age") is None
        assert "age" not in row
        assert not hasattr(row, "age")
        with pytest.raises(KeyError):
            row["age"]

    def test_read_only(self, row: ResultRow) -> None:
        with pytest.raises(AttributeError):
            row.name = "other"  # type: ignore[misc]

    def test_mapping_behaviour(self, row: ResultRow) -> None:
        assert len(row) == 2
        assert list(row) == ["name", "nenrei"]
        assert row == {"name": "Aiko", "nenrei": 34}
        assert row.to_dict() == {"name": "Aiko", "nenrei": 34}

    def test_copy(self, row: ResultRow) -> None:
        assert copy.copy(row) == row
        duplicate = copy.deepcopy(row)
        assert isinstance(duplicate, ResultRow)
        assert duplicate.name == "Aiko"

    def test_pickle(self, row: ResultRow) -> None:
        restored = pickle.loads(pickle.dumps(row))
        assert isinstance(restored, ResultRow)
        assert restored.to_dict() == {"name": "Aiko", "nenrei": 34}
        with pytest.raises(UnknownFieldError):
            restored.age  # noqa: B018


class TestProjectRow:
    """Tests for mapping driver rows onto schema fields."""

    def test_extra_columns_dropped(self) -> None:
        row, unmatched = project_row(["name", "age"], ("Aiko", 34), ["name"])
        assert row.to_dict() == {"name": "Aiko"}
        assert unmatched == []

    def test_case_insensitive_fallback(self) -> None:
        row, _ = project_row(["NAME"], ("Aiko",), ["name"])
        assert row["name"] == "Aiko"

    def test_missing_column_reads_none(self) -> None:
        row, unmatched = project_row(["COUNT(*)"], (3,), ["COUNT"])
        assert row["COUNT"] is None
        assert unmatched == ["COUNT"]


class TestBinding:
    """Tests for parameter binding without a database."""

    def test_schema_available_without_connection(self, person_by_country_sql: str) -> None:
        select = sql(person_by_country_sql)
        assert select.fields == ["name", "nenrei", "count"]
        assert select.parameters == {"country_name", "age"}
        assert select.connection is None

    def test_exact_parameters_accepted(self, person_by_country_sql: str) -> None:
        select = sql(person_by_country_sql)
        bound = select.bind_parameters({"country_name": "japan", "age": 30})
        assert bound == {"country_name": "japan", "age": 30}

    def test_missing_parameter_rejected(self, person_by_country_sql: str) -> None:
        select = sql(person_by_country_sql)
        with pytest.raises(ParameterMismatchError) as exc_info:
            select.bind_parameters({"age": 30})
        assert exc_info.value.missing == ["country_name"]
        assert exc_info.value.unexpected == []

    def test_unexpected_parameter_rejected(self, person_by_country_sql: str) -> None:
        select = sql(person_by_country_sql)
        with pytest.raises(ParameterMismatchError) as exc_info:
            select.bind_parameters({"country_name": "japan", "age": 30, "dummy": 1})
        assert exc_info.value.unexpected == ["dummy"]
        assert "Required parameters: age, country_name" in str(exc_info.value)

    def test_no_parameters(self) -> None:
        select = sql("SELECT x FROM t")
        assert select.bind_parameters() == {}
        with pytest.raises(ParameterMismatchError) as exc_info:
            select.bind_parameters({"x": 1})
        assert "takes no parameters" in str(exc_info.value)

    def test_strict_rejects_malformed(self) -> None:
        with pytest.raises(MalformedQueryError) as exc_info:
            sql("SELECT x, FROM t")
        assert exc_info.value.to_dict()["context"]["issues"][0]["kind"] == "empty_field"

    def test_non_strict_keeps_issues(self) -> None:
        select = sql("SELECT x, FROM t", strict=False)
        assert select.fields == ["x"]
        assert len(select.schema.issues) == 1

    def test_find_without_connection(self) -> None:
        with pytest.raises(QueryError) as exc_info:
            sql("SELECT x FROM t").find()
        assert "No database connection" in str(exc_info.value)


class TestStatement:
    """Tests for the statement handed to the driver."""

    def test_word_names_unchanged(self) -> None:
        assert driver_bind_names(frozenset({"a", "b_1"})) == {"a": "a", "b_1": "b_1"}

    def test_bracket_names_renamed(self) -> None:
        names = driver_bind_names(frozenset({"ids[0]", "ids[1]"}))
        assert names == {"ids[0]": "p_ids_0_", "ids[1]": "p_ids_1_"}

    def test_renamed_names_do_not_collide(self) -> None:
        names = driver_bind_names(frozenset({"a[]", "p_a__"}))
        assert names["p_a__"] == "p_a__"
        assert names["a[]"] == "p_a___2"

    def test_comments_removed(self) -> None:
        statement = build_statement("SELECT x /* :a */ FROM t -- :b\nWHERE c = :c", {"c": "c"})
        assert ":a" not in statement
        assert ":b" not in statement
        assert ":c" in statement

    def test_placeholders_renamed(self) -> None:
        statement = build_statement(
            "SELECT x FROM t WHERE a = :ids[0] OR b = :ids[10]",
            {"ids[0]": "p_ids_0_", "ids[10]": "p_ids_10_"},
        )
        assert statement == "SELECT x FROM t WHERE a = :p_ids_0_ OR b = :p_ids_10_"

    def test_adjacent_placeholders_merged(self) -> None:
        """A run such as :a,:b binds as the single name derived from it."""
        statement = build_statement("SELECT x FROM t WHERE id IN (:a,:b)", {"ab": "ab"})
        assert statement == "SELECT x FROM t WHERE id IN (:ab)"

    def test_trailing_punctuation_kept(self) -> None:
        statement = build_statement(
            "INSERT INTO t VALUES (:id, :name)", {"id": "id", "name": "name"}
        )
        assert statement == "INSERT INTO t VALUES (:id, :name)"

    def test_cast_suffix_folded(self) -> None:
        statement = build_statement("SELECT x FROM t WHERE y = :x::int", {"xint": "xint"})
        assert statement == "SELECT x FROM t WHERE y = :xint"

    def test_multiline_placeholders(self) -> None:
        raw = "SELECT x FROM t\nWHERE a = :a\n\tAND b = :b"
        assert build_statement(raw, {"a": "a", "b": "b"}) == raw


class TestExecution:
    """Tests for executing queries against SQLite."""

    def test_find(self, people_connection: DatabaseConnection) -> None:
        select = sql(
            "SELECT p.name, p.age AS years FROM person p WHERE age > :age",
            people_connection,
        )
        rows = select.find({"age": 40})

        assert sorted(row.name for row in rows) == ["Rosa", "Yui"]
        assert all(set(row) == {"name", "years"} for row in rows)
        with pytest.raises(UnknownFieldError):
            rows[0].age  # noqa: B018

    def test_find_one(self, people_connection: DatabaseConnection) -> None:
        select = sql("SELECT name FROM person WHERE id = :id", people_connection)
        assert select.find_one({"id": 3}) == {"name": "Rosa"}
        assert select.find_one({"id": 99}) is None

    def test_bind_after_creation(self, people_connection: DatabaseConnection) -> None:
        select = sql("SELECT name FROM person WHERE id = :id").bind(people_connection)
        assert select.find_one({"id": 1})["name"] == "Aiko"

    def test_bracket_parameter(self, people_connection: DatabaseConnection) -> None:
        select = sql("SELECT name FROM person WHERE id = :ids[0]", people_connection)
        assert select.parameters == {"ids[0]"}
        assert [row.name for row in select.find({"ids[0]": 2})] == ["Kenji"]

    def test_adjacent_placeholders(self, people_connection: DatabaseConnection) -> None:
        select = sql("SELECT name FROM person WHERE id IN (:a,:b)", people_connection)
        assert select.parameters == {"ab"}
        assert [row.name for row in select.find({"ab": 2})] == ["Kenji"]

    def test_partly_spaced_placeholders(self, people_connection: DatabaseConnection) -> None:
        select = sql("SELECT name FROM person WHERE id IN (:a, :b,:c)", people_connection)
        assert select.parameters == {"a", "bc"}
        rows = select.find({"a": 1, "bc": 3})
        assert sorted(row.name for row in rows) == ["Aiko", "Rosa"]

    def test_schema_edit_does_not_change_fields(
        self, people_connection: DatabaseConnection
    ) -> None:
        select = sql("SELECT name FROM person WHERE id = :id", people_connection)
        select.schema.fields["age"] = "any"
        assert select.fields == ["name"]
        assert select.find_one({"id": 1}) == {"name": "Aiko"}

    def test_commented_placeholder_not_bound(self, people_connection: DatabaseConnection) -> None:
        select = sql(
            "SELECT name FROM person -- filter by :unused later\nWHERE id = :id",
            people_connection,
        )
        assert select.parameters == {"id"}
        assert select.find_one({"id": 4})["name"] == "Yui"

    def test_parameters_checked_before_execution(
        self, people_connection: DatabaseConnection
    ) -> None:
        select = sql("SELECT name FROM person WHERE id = :id", people_connection)
        with pytest.raises(ParameterMismatchError):
            select.find({})

    def test_driver_error_wrapped(self, people_connection: DatabaseConnection) -> None:
        select = sql("SELECT name FROM missing_table", people_connection)
        with pytest.raises(QueryError) as exc_info:
            select.find()
        assert "Query execution failed" in str(exc_info.value)

    def test_missing_column_logged(
        self, people_connection: DatabaseConnection, caplog: pytest.LogCaptureFixture
    ) -> None:
        select = sql("SELECT COUNT(*) FROM person", people_connection)
        with caplog.at_level("WARNING", logger="typedsql.query.manager"):
            row = select.find_one()
        assert row == {"COUNT": None}
        assert "COUNT" in caplog.text
