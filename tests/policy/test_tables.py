"""Test CTE-aware table extraction."""

from mysql_mcp.policy.tables import extract_tables


def test_simple_select():
    assert extract_tables("SELECT * FROM users LIMIT 10") == ["users"]


def test_join():
    assert extract_tables("SELECT * FROM users JOIN orders ON 1=1") == ["orders", "users"]


def test_database_qualified():
    assert extract_tables("SELECT * FROM shop.users") == ["shop.users"]


def test_backtick_quoted():
    assert extract_tables("SELECT * FROM `order items` LIMIT 1") == ["order items"]


def test_cte_resolved():
    sql = "WITH cte AS (SELECT * FROM customers) SELECT * FROM cte"
    assert extract_tables(sql) == ["customers"]


def test_nested_ctes():
    sql = (
        "WITH a AS (SELECT * FROM raw_events), "
        "b AS (SELECT * FROM a JOIN users ON 1=1) "
        "SELECT * FROM b"
    )
    assert extract_tables(sql) == ["raw_events", "users"]


def test_subquery():
    sql = "SELECT * FROM (SELECT id FROM users) AS sub"
    assert extract_tables(sql) == ["users"]


def test_union():
    sql = "SELECT id FROM users UNION SELECT id FROM customers"
    assert extract_tables(sql) == ["customers", "users"]


def test_insert_includes_target():
    tables = extract_tables("INSERT INTO target SELECT * FROM source")
    assert "target" in tables
    assert "source" in tables


def test_delete_includes_target():
    tables = extract_tables("DELETE FROM users WHERE id IN (SELECT id FROM blacklist)")
    assert "users" in tables
    assert "blacklist" in tables


def test_update_includes_target():
    tables = extract_tables("UPDATE users SET name = 'x' WHERE id IN (SELECT id FROM source)")
    assert "users" in tables
    assert "source" in tables


def test_ddl_fallback():
    tables = extract_tables("CREATE TABLE new_table AS SELECT * FROM old_table")
    assert "old_table" in tables


def test_unparseable_returns_empty():
    assert extract_tables("SELECT FROM WHERE (((") == []


def test_empty_returns_empty():
    assert extract_tables("") == []
