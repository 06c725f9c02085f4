from __future__ import annotations

import pytest

from rowsink.errors import ValidationError
from rowsink.sql.builder import build_delete, build_insert, build_upsert
from rowsink.sql.placeholders import PlaceholderFormat

DOLLAR = PlaceholderFormat.DOLLAR


class TestBuildInsert:
    def test_insert_with_dollar_placeholders(self) -> None:
        stmt = build_insert("users", ["id", "name"], [1, "x"], placeholder=DOLLAR)

        assert stmt.sql == "INSERT INTO users (id,name) VALUES ($1,$2)"
        assert stmt.args == [1, "x"]

    def test_insert_with_question_placeholders(self) -> None:
        stmt = build_insert("users", ["a", "b", "c"], [1, 2, 3], placeholder=PlaceholderFormat.QUESTION)

        assert stmt.sql == "INSERT INTO users (a,b,c) VALUES (?,?,?)"

    def test_schema_qualified_table(self) -> None:
        stmt = build_insert("public.users", ["id"], [1], placeholder=DOLLAR)

        assert stmt.sql == "INSERT INTO public.users (id) VALUES ($1)"

    def test_plain_insert_has_no_conflict_clause(self) -> None:
        stmt = build_insert("users", ["id", "name"], [1, "x"], placeholder=DOLLAR)

        assert "ON CONFLICT" not in stmt.sql

    def test_no_columns_is_rejected(self) -> None:
        with pytest.raises(ValidationError, match="at least one column"):
            build_insert("users", [], [], placeholder=DOLLAR)

    def test_mismatched_lengths_are_rejected(self) -> None:
        with pytest.raises(ValidationError):
            build_insert("users", ["a", "b"], [1], placeholder=DOLLAR)

    @pytest.mark.parametrize("column", ["na me", "x;DROP TABLE users", "1abc", "a-b", ""])
    def test_unsafe_column_is_rejected(self, column: str) -> None:
        with pytest.raises(ValidationError):
            build_insert("users", [column], [1], placeholder=DOLLAR)

    @pytest.mark.parametrize("table", ["users; --", "a.b.c", ".users", ""])
    def test_unsafe_table_is_rejected(self, table: str) -> None:
        with pytest.raises(ValidationError):
            build_insert(table, ["id"], [1], placeholder=DOLLAR)


class TestBuildUpsert:
    def test_single_payload_column(self) -> None:
        stmt = build_upsert("t", "id", ["id", "val"], [5, "a"], placeholder=DOLLAR)

        assert stmt.sql == (
            "INSERT INTO t (id,val) VALUES ($1,$2) "
            "ON CONFLICT (id) DO UPDATE SET val=EXCLUDED.val;"
        )
        assert stmt.args == [5, "a"]

    def test_multiple_payload_columns_are_comma_separated(self) -> None:
        stmt = build_upsert("t", "id", ["id", "a", "b"], [1, 2, 3], placeholder=DOLLAR)

        assert stmt.sql.endswith("ON CONFLICT (id) DO UPDATE SET a=EXCLUDED.a, b=EXCLUDED.b;")
        assert ",;" not in stmt.sql

    def test_key_column_is_never_assigned(self) -> None:
        stmt = build_upsert("t", "uuid", ["uuid", "name"], ["u1", "n"], placeholder=DOLLAR)

        assert "uuid=EXCLUDED.uuid" not in stmt.sql
        assert "ON CONFLICT (uuid)" in stmt.sql

    def test_key_only_row_does_nothing_on_conflict(self) -> None:
        stmt = build_upsert("t", "id", ["id"], [1], placeholder=DOLLAR)

        assert stmt.sql == "INSERT INTO t (id) VALUES ($1) ON CONFLICT (id) DO NOTHING;"

    def test_unsafe_key_column_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            build_upsert("t", "id) DO NOTHING; --", ["id"], [1], placeholder=DOLLAR)


class TestBuildDelete:
    def test_delete_by_key(self) -> None:
        stmt = build_delete("users", "id", 5, placeholder=DOLLAR)

        assert stmt.sql == "DELETE FROM users WHERE id = $1"
        assert stmt.args == [5]

    def test_delete_with_format_placeholder(self) -> None:
        stmt = build_delete("users", "id", 5, placeholder=PlaceholderFormat.FORMAT)

        assert stmt.sql == "DELETE FROM users WHERE id = %s"

    def test_null_key_value_uses_is_null(self) -> None:
        stmt = build_delete("users", "id", None, placeholder=DOLLAR)

        assert stmt.sql == "DELETE FROM users WHERE id IS NULL"
        assert stmt.args == []


def test_custom_placeholder_strategy_is_accepted() -> None:
    class AtSign:
        def render(self, position: int) -> str:
            return f"@p{position}"

    stmt = build_insert("t", ["a", "b"], [1, 2], placeholder=AtSign())

    assert stmt.sql == "INSERT INTO t (a,b) VALUES (@p1,@p2)"
