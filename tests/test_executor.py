"""Unit tests for the query executor."""

from __future__ import annotations

import pytest

from relstore.errors import (
    ColumnCountMismatch,
    ColumnNotFound,
    TableAlreadyExists,
    TableNotFound,
    UniqueViolation,
)
from relstore.executor import ExecutionResult, QueryExecutor
from relstore.parser import Insert
from relstore.table import Database
from relstore.types import NULL, Integer, Text

pytestmark = pytest.mark.unit


class TestCreateTable:
    def test_create_table(self, run, database: Database) -> None:
        result = run("CREATE TABLE users (id INT PRIMARY, name TEXT, email TEXT UNIQUE)")

        assert not result.is_tabular
        assert result.message == "Table 'users' created"
        table = database.get_table("users")
        assert table.column_names == ["id", "name", "email"]
        assert table.columns[0].is_primary
        assert table.columns[2].is_unique
        assert table.indexes == {0: set(), 2: set()}

    def test_create_duplicate_table(self, run, database: Database) -> None:
        run("CREATE TABLE users (id INT PRIMARY)")
        run("INSERT INTO users VALUES (1)")

        with pytest.raises(TableAlreadyExists) as exc_info:
            run("CREATE TABLE users (name TEXT)")

        assert exc_info.value.table_name == "users"
        table = database.get_table("users")
        assert table.column_names == ["id"]
        assert table.rows == [[Integer(1)]]


class TestInsert:
    def test_insert(self, run, database: Database) -> None:
        run("CREATE TABLE t (id INT PRIMARY, name TEXT)")
        result = run("INSERT INTO t VALUES (1, 'Martin')")

        assert result.message == "1 row inserted."
        assert database.get_table("t").rows == [[Integer(1), Text("Martin")]]

    def test_insert_missing_table(self, run) -> None:
        with pytest.raises(TableNotFound, match="Table 'ghost' not found"):
            run("INSERT INTO ghost VALUES (1)")

    def test_primary_key_violation(self, run, database: Database) -> None:
        run("CREATE TABLE t (id INT PRIMARY, name TEXT)")
        run("INSERT INTO t VALUES (1, 'Martin')")

        with pytest.raises(UniqueViolation) as exc_info:
            run("INSERT INTO t VALUES (1, 'Other')")

        assert exc_info.value.column_name == "id"
        table = database.get_table("t")
        assert len(table.rows) == 1
        assert table.indexes == {0: {Integer(1)}}

    def test_unique_violation_is_all_or_nothing(self, run, database: Database) -> None:
        run("CREATE TABLE t (id INT PRIMARY, email TEXT UNIQUE)")
        run("INSERT INTO t VALUES (1, 'a@x')")

        with pytest.raises(UniqueViolation) as exc_info:
            run("INSERT INTO t VALUES (2, 'a@x')")

        assert exc_info.value.column_name == "email"
        table = database.get_table("t")
        assert table.indexes == {0: {Integer(1)}, 1: {Text("a@x")}}
        run("INSERT INTO t VALUES (2, 'b@x')")
        assert len(table.rows) == 2

    @pytest.mark.parametrize("values", ["(1)", "(1, 'a', 'b')", "()"])
    def test_column_count_mismatch(self, run, database: Database, values: str) -> None:
        run("CREATE TABLE t (id INT PRIMARY, name TEXT)")

        with pytest.raises(ColumnCountMismatch):
            run(f"INSERT INTO t VALUES {values}")

        assert database.get_table("t").rows == []

    def test_declared_type_is_not_enforced(self, run, database: Database) -> None:
        run("CREATE TABLE t (id INT, name TEXT)")
        run("INSERT INTO t VALUES ('one', 2)")

        assert database.get_table("t").rows == [[Text("one"), Integer(2)]]

    def test_null_values_via_statement(self, executor: QueryExecutor, run, database: Database) -> None:
        run("CREATE TABLE t (id INT PRIMARY, note TEXT)")
        executor.execute(Insert(table_name="t", values=[Integer(1), NULL]))

        assert database.get_table("t").rows == [[Integer(1), NULL]]


class TestSelect:
    @pytest.fixture
    def users(self, run):
        run("CREATE TABLE users (id INT PRIMARY, name TEXT, age INT)")
        run("INSERT INTO users VALUES (1, 'Alice', 30)")
        run("INSERT INTO users VALUES (2, 'Bob', 25)")
        run("INSERT INTO users VALUES (3, 'Carol', 41)")
        return run

    def test_select_star(self, users) -> None:
        result = users("SELECT * FROM users")

        assert result.is_tabular
        assert result.headers == ["id", "name", "age"]
        assert result.rows == [
            [Integer(1), Text("Alice"), Integer(30)],
            [Integer(2), Text("Bob"), Integer(25)],
            [Integer(3), Text("Carol"), Integer(41)],
        ]

    def test_select_columns_in_requested_order(self, users) -> None:
        result = users("SELECT age, name FROM users")

        assert result.headers == ["age", "name"]
        assert result.rows == [
            [Integer(30), Text("Alice")],
            [Integer(25), Text("Bob")],
            [Integer(41), Text("Carol")],
        ]

    def test_select_repeated_column(self, users) -> None:
        result = users("SELECT id, id FROM users")

        assert result.headers == ["id", "id"]
        assert result.rows[0] == [Integer(1), Integer(1)]

    def test_star_wins_over_named_columns(self, users) -> None:
        result = users("SELECT name, * FROM users")

        assert result.headers == ["id", "name", "age"]

    def test_unknown_column(self, users) -> None:
        with pytest.raises(ColumnNotFound) as exc_info:
            users("SELECT id, salary FROM users")

        assert exc_info.value.column_name == "salary"

    def test_missing_table(self, run) -> None:
        with pytest.raises(TableNotFound):
            run("SELECT * FROM ghost")

    def test_select_star_from_empty_table(self, run) -> None:
        run("CREATE TABLE empty (a INT, b TEXT UNIQUE)")
        result = run("SELECT * FROM empty")

        assert result.headers == ["a", "b"]
        assert result.rows == []
        assert result.row_count == 0

    def test_select_does_not_mutate(self, users, database: Database) -> None:
        result = users("SELECT * FROM users")
        result.rows[0][0] = Integer(99)

        assert database.get_table("users").rows[0][0] == Integer(1)


class TestJoin:
    def test_join_example(self, devs_and_teams) -> None:
        result = devs_and_teams("SELECT * FROM devs JOIN teams ON team_id = id")

        assert result.headers == ["devs.id", "devs.team_id", "teams.id", "teams.name"]
        assert result.rows == [
            [Integer(1), Integer(10), Integer(10), Text("Eng")],
            [Integer(2), Integer(20), Integer(20), Text("Ops")],
        ]

    def test_join_order_and_multiple_matches(self, devs_and_teams) -> None:
        run = devs_and_teams
        run("CREATE TABLE members (team INT, who TEXT)")
        run("INSERT INTO members VALUES (20, 'x')")
        run("INSERT INTO members VALUES (10, 'y')")
        run("INSERT INTO members VALUES (20, 'z')")

        result = run("SELECT * FROM teams JOIN members ON id = team")

        assert result.rows == [
            [Integer(10), Text("Eng"), Integer(10), Text("y")],
            [Integer(20), Text("Ops"), Integer(20), Text("x")],
            [Integer(20), Text("Ops"), Integer(20), Text("z")],
        ]

    def test_unmatched_rows_are_dropped(self, devs_and_teams) -> None:
        run = devs_and_teams
        run("INSERT INTO devs VALUES (3, 30)")
        run("INSERT INTO teams VALUES (40, 'Sales')")

        result = run("SELECT * FROM devs JOIN teams ON team_id = id")

        assert len(result.rows) == 2

    def test_no_coercion_between_integer_and_text(self, run) -> None:
        run("CREATE TABLE a (k INT)")
        run("CREATE TABLE b (k TEXT)")
        run("INSERT INTO a VALUES (1)")
        run("INSERT INTO b VALUES ('1')")

        result = run("SELECT * FROM a JOIN b ON k = k")

        assert result.headers == ["a.k", "b.k"]
        assert result.rows == []

    def test_self_join(self, devs_and_teams) -> None:
        result = devs_and_teams("SELECT * FROM devs JOIN devs ON id = id")

        assert result.headers == ["devs.id", "devs.team_id", "devs.id", "devs.team_id"]
        assert len(result.rows) == 2

    def test_join_missing_right_table(self, devs_and_teams) -> None:
        with pytest.raises(TableNotFound) as exc_info:
            devs_and_teams("SELECT * FROM devs JOIN ghosts ON team_id = id")

        assert exc_info.value.table_name == "ghosts"

    def test_join_missing_left_column(self, devs_and_teams) -> None:
        with pytest.raises(ColumnNotFound) as exc_info:
            devs_and_teams("SELECT * FROM devs JOIN teams ON dept = id")

        assert exc_info.value.column_name == "dept"

    def test_join_missing_right_column(self, devs_and_teams) -> None:
        with pytest.raises(ColumnNotFound) as exc_info:
            devs_and_teams("SELECT * FROM devs JOIN teams ON team_id = team_id")

        assert exc_info.value.column_name == "team_id"
        assert exc_info.value.table_name == "teams"


class TestExecutionResult:
    def test_message_to_dict(self) -> None:
        assert ExecutionResult.from_message("done").to_dict() == {"status": "OK", "message": "done"}

    def test_rows_to_dict(self) -> None:
        result = ExecutionResult.from_rows(["a", "b"], [[Integer(1), NULL], [Integer(2), Text("x")]])

        assert result.to_dict() == {
            "status": "OK",
            "columns": ["a", "b"],
            "rows": [[1, None], [2, "x"]],
            "row_count": 2,
        }
