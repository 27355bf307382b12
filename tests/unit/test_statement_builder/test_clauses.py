"""Unit tests for field lists, ordering, pagination and clause context."""

from unittest.mock import Mock

import pytest

from sqlbits import DialectInfo, FieldSanitizer, ImproperConfigurationError, LimitStyle, StatementBuilder


def test_add_field_list_with_default_prefix(sqlite_builder: StatementBuilder) -> None:
    """Test the default prefix is written before every field."""
    sqlite_builder.start_with("SELECT").add_field_list(["a", "b"])

    assert sqlite_builder.get_sql_statement() == "SELECT  a,  b"


def test_add_field_list_with_table_prefix(sqlite_builder: StatementBuilder) -> None:
    """Test a table alias prefix is written before every field."""
    sqlite_builder.start_with("SELECT").set_param_prefix("u.").add_field_list(["id", "name"]).add("FROM users u")

    assert sqlite_builder.get_sql_statement() == "SELECT u.id, u.name FROM users u"


def test_add_empty_field_list_selects_all(sqlite_builder: StatementBuilder) -> None:
    """Test an empty field list selects every column."""
    sqlite_builder.start_with("SELECT").set_param_prefix("").add_field_list([]).add("FROM t")

    assert sqlite_builder.get_sql_statement() == "SELECT * FROM t"


def test_add_raw_fragment_prefixes_space(sqlite_builder: StatementBuilder) -> None:
    """Test raw fragments are appended after a single space."""
    sqlite_builder.add("SELECT 1")

    assert sqlite_builder.get_sql_statement() == " SELECT 1"
    assert str(sqlite_builder) == " SELECT 1"


def test_apply_order_by_list(pg_builder: StatementBuilder) -> None:
    """Test directions are matched case-insensitively, defaulting to ascending."""
    pg_builder.start_with("SELECT * FROM t").apply_order_by_list({"name": " desc ", "id": "bogus", "created": None})

    assert pg_builder.get_sql_statement() == "SELECT * FROM t ORDER BY name DESC,id ASC,created ASC"


@pytest.mark.parametrize("order_by", [None, {}])
def test_apply_order_by_list_without_entries_is_noop(pg_builder: StatementBuilder, order_by: "dict | None") -> None:
    """Test nothing is written for a missing or empty ordering."""
    pg_builder.start_with("SELECT * FROM t").apply_order_by_list(order_by)

    assert pg_builder.get_sql_statement() == "SELECT * FROM t"


def test_apply_sort_list_is_alias(pg_builder: StatementBuilder) -> None:
    """Test apply_sort_list behaves like apply_order_by_list."""
    pg_builder.start_with("SELECT * FROM t").apply_sort_list({"id": "DESC"})

    assert pg_builder.get_sql_statement() == "SELECT * FROM t ORDER BY id DESC"


@pytest.mark.parametrize(
    ("limit", "offset", "expected"),
    [
        (10, 0, "SELECT * FROM t LIMIT 10"),
        (10, 20, "SELECT * FROM t LIMIT 10 OFFSET 20"),
        (10, -1, "SELECT * FROM t LIMIT 10"),
        (0, 20, "SELECT * FROM t"),
        (-5, 0, "SELECT * FROM t"),
    ],
)
def test_add_query_limit(pg_builder: StatementBuilder, limit: int, offset: int, expected: str) -> None:
    """Test LIMIT/OFFSET is only written for positive values."""
    pg_builder.start_with("SELECT * FROM t").add_query_limit(limit, offset)

    assert pg_builder.get_sql_statement() == expected


def test_add_query_limit_same_for_known_dialects(mysql_builder: StatementBuilder, sqlite_builder: StatementBuilder) -> None:
    """Test every known dialect takes the LIMIT/OFFSET path."""
    mysql_builder.start_with("SELECT * FROM t").add_query_limit(5, 10)
    sqlite_builder.start_with("SELECT * FROM t").add_query_limit(5, 10)

    assert mysql_builder.get_sql_statement() == "SELECT * FROM t LIMIT 5 OFFSET 10"
    assert sqlite_builder.get_sql_statement() == "SELECT * FROM t LIMIT 5 OFFSET 10"


def test_add_query_limit_fetch_first_style() -> None:
    """Test a custom dialect can paginate with OFFSET/FETCH FIRST."""
    dialect = DialectInfo(name="Oracle", limit_style=LimitStyle.FETCH_FIRST)

    builder = StatementBuilder(dialect).start_with("SELECT * FROM t").add_query_limit(10, 20)
    assert builder.get_sql_statement() == "SELECT * FROM t OFFSET 20 ROWS FETCH FIRST 10 ROWS ONLY"

    builder = StatementBuilder(dialect).start_with("SELECT * FROM t").add_query_limit(10)
    assert builder.get_sql_statement() == "SELECT * FROM t FETCH FIRST 10 ROWS ONLY"


def test_apply_query_limit_from_pager(pg_builder: StatementBuilder) -> None:
    """Test the pager's page size and offset drive the LIMIT clause."""
    pager = Mock()
    pager.pager_page_size.return_value = 25
    pager.pager_query_offset.return_value = 50

    pg_builder.start_with("SELECT * FROM t").apply_query_limit_from_pager(pager)
    pg_builder.apply_query_limit_from_pager(None)

    assert pg_builder.get_sql_statement() == "SELECT * FROM t LIMIT 25 OFFSET 50"


def test_start_where_clause_and_end(pg_builder: StatementBuilder) -> None:
    """Test the WHERE context turns null mode on and ending it restores defaults."""
    pg_builder.start_where_clause()
    assert pg_builder.null_mode
    assert pg_builder.param_prefix == " WHERE "

    pg_builder.end_where_clause()
    assert not pg_builder.null_mode
    assert pg_builder.param_prefix == " "


def test_where_clause_context_restores_previous_state(pg_builder: StatementBuilder) -> None:
    """Test the scoped WHERE clause restores the state it started from."""
    pg_builder.start_with("SELECT * FROM t").set_param_prefix(", ")

    with pg_builder.where_clause() as where:
        assert where.null_mode
        where.must_add_param("status")
        where.set_param_prefix(" AND ").set_param_operator("<>").must_add_param("deleted_at")

    assert pg_builder.get_sql_statement() == 'SELECT * FROM t WHERE "status" IS NULL AND "deleted_at" IS NOT NULL'
    assert pg_builder.param_prefix == ", "
    assert pg_builder.param_operator == "="
    assert not pg_builder.null_mode


def test_state_property_is_a_copy(pg_builder: StatementBuilder) -> None:
    """Test mutating the returned state does not touch the builder."""
    state = pg_builder.state
    state.prefix = " HAVING "

    assert pg_builder.param_prefix == " "


def test_start_with_keeps_parameters(pg_builder: StatementBuilder) -> None:
    """Test start_with replaces the text but keeps bound parameters."""
    pg_builder.start_with("SELECT 1").set_param("a", 1)
    pg_builder.start_with("SELECT 2")

    assert pg_builder.get_sql_statement() == "SELECT 2"
    assert pg_builder.get_param("a") == 1


def test_reset_keeps_dialect_and_clears_the_rest(pg_builder: StatementBuilder) -> None:
    """Test reset returns the builder to a pristine state."""
    pg_builder.start_with("SELECT * FROM t").start_where_clause().append_param("a", 1)
    pg_builder.set_param_set("b", [1]).set_param_operator(" LIKE ")

    pg_builder.reset()

    assert pg_builder.get_sql_statement() == ""
    assert pg_builder.sql_params() == {}
    assert pg_builder.sql_param_sets() == {}
    assert pg_builder.param_prefix == " "
    assert pg_builder.param_operator == "="
    assert not pg_builder.null_mode
    assert pg_builder.dialect.name == "PostgreSQL"


def test_sanitized_field_list(pg_builder: StatementBuilder) -> None:
    """Test only fields the sanitizer defines are written."""
    pg_builder.set_sanitizer(FieldSanitizer(["id", "name", "email"]))
    pg_builder.start_with("SELECT").set_param_prefix("").add_sanitized_field_list(["name", "password", "id"])

    assert pg_builder.get_sql_statement() == "SELECT name, id"


def test_sanitized_field_list_falls_back_to_all(pg_builder: StatementBuilder) -> None:
    """Test an empty request or a fully rejected one selects every column."""
    pg_builder.set_sanitizer(FieldSanitizer(["id"]))
    pg_builder.start_with("SELECT").set_param_prefix("").add_sanitized_field_list(None)
    pg_builder.add_sanitized_field_list(["password"])

    assert pg_builder.get_sql_statement() == "SELECT * *"


def test_sanitized_field_list_requires_sanitizer(pg_builder: StatementBuilder) -> None:
    """Test sanitizing without a sanitizer is a configuration error."""
    with pytest.raises(ImproperConfigurationError):
        pg_builder.add_sanitized_field_list(["id"])


def test_order_by_from_sanitizer(pg_builder: StatementBuilder) -> None:
    """Test non-sortable fields are dropped from the requested ordering."""
    sanitizer = FieldSanitizer(["id", "name", "password"], sortable=["id", "name"], default_sort={"id": "DESC"})
    pg_builder.set_sanitizer(sanitizer).start_with("SELECT * FROM t")

    pg_builder.apply_order_by_from_sanitizer({"name": "desc", "password": "asc"})

    assert pg_builder.get_sql_statement() == "SELECT * FROM t ORDER BY name DESC"


@pytest.mark.parametrize("requested", [None, {}, {"password": "ASC"}])
def test_order_by_from_sanitizer_uses_default_sort(pg_builder: StatementBuilder, requested: "dict | None") -> None:
    """Test the sanitizer's default sort is used when nothing sortable was requested."""
    sanitizer = FieldSanitizer(["id", "password"], sortable=["id"], default_sort={"id": "DESC"})
    pg_builder.set_sanitizer(sanitizer).start_with("SELECT * FROM t")

    pg_builder.apply_order_by_from_sanitizer(requested)

    assert pg_builder.get_sql_statement() == "SELECT * FROM t ORDER BY id DESC"


def test_order_by_from_sanitizer_without_sanitizer_is_noop(pg_builder: StatementBuilder) -> None:
    """Test unsanitized orderings are never written."""
    pg_builder.start_with("SELECT * FROM t").apply_order_by_from_sanitizer({"name; DROP TABLE t": "ASC"})

    assert pg_builder.get_sql_statement() == "SELECT * FROM t"
