"""Test row-limit rules."""

import pytest

from mysql_mcp.policy import codes
from mysql_mcp.policy.capabilities import CapabilityPolicy
from mysql_mcp.policy.limits import check_limits, limit_values

DEFAULT = CapabilityPolicy()


class TestLimitRequired:
    @pytest.mark.parametrize(
        "sql",
        [
            "SELECT * FROM users",
            "select id from users where active = 1",
            "WITH c AS (SELECT 1) SELECT * FROM c",
        ],
    )
    def test_select_without_limit(self, sql: str) -> None:
        verdict = check_limits(sql, DEFAULT)
        assert not verdict.is_valid
        assert verdict.reason == "SELECT queries must include LIMIT clause"
        assert verdict.code == codes.LIMIT_REQUIRED

    def test_select_with_limit(self) -> None:
        assert check_limits("SELECT * FROM users LIMIT 10", DEFAULT).is_valid

    def test_limit_on_new_line(self) -> None:
        assert check_limits("SELECT * FROM users\nLIMIT\n10", DEFAULT).is_valid

    def test_insert_select_needs_limit(self) -> None:
        # Any SELECT token triggers the rule, even inside a write
        verdict = check_limits("INSERT INTO a SELECT * FROM b", DEFAULT)
        assert verdict.code == codes.LIMIT_REQUIRED

    @pytest.mark.parametrize("sql", ["SHOW TABLES", "DESCRIBE users", "DELETE FROM t WHERE id = 1"])
    def test_non_select_needs_no_limit(self, sql: str) -> None:
        assert check_limits(sql, DEFAULT).is_valid

    def test_limit_placeholder_satisfies_presence(self) -> None:
        assert check_limits("SELECT * FROM users LIMIT ?", DEFAULT).is_valid


class TestLimitCap:
    def test_at_cap(self) -> None:
        assert check_limits("SELECT * FROM users LIMIT 1000", DEFAULT).is_valid

    def test_over_cap(self) -> None:
        verdict = check_limits("SELECT * FROM users LIMIT 1001", DEFAULT)
        assert not verdict.is_valid
        assert verdict.reason == "LIMIT value exceeds maximum allowed (1000)"
        assert verdict.code == codes.LIMIT_EXCEEDED

    def test_custom_cap(self) -> None:
        policy = CapabilityPolicy(max_rows=50)
        assert check_limits("SELECT * FROM users LIMIT 50", policy).is_valid
        verdict = check_limits("SELECT * FROM users LIMIT 51", policy)
        assert verdict.reason == "LIMIT value exceeds maximum allowed (50)"

    def test_offset_comma_form_uses_row_count(self) -> None:
        assert check_limits("SELECT * FROM users LIMIT 5000, 10", DEFAULT).is_valid
        assert not check_limits("SELECT * FROM users LIMIT 0, 5000", DEFAULT).is_valid

    def test_offset_keyword_form(self) -> None:
        assert check_limits("SELECT * FROM users LIMIT 10 OFFSET 5000", DEFAULT).is_valid

    def test_every_limit_checked(self) -> None:
        sql = "SELECT * FROM (SELECT * FROM t LIMIT 99999) s LIMIT 10"
        assert check_limits(sql, DEFAULT).code == codes.LIMIT_EXCEEDED


class TestLimitValues:
    def test_values(self) -> None:
        assert limit_values("select 1 limit 5") == [5]
        assert limit_values("SELECT 1 LIMIT 10, 20") == [20]
        assert limit_values("SELECT 1 LIMIT 3 UNION SELECT 2 LIMIT 4") == [3, 4]

    def test_no_limit(self) -> None:
        assert limit_values("SELECT 1") == []

    def test_placeholder_ignored(self) -> None:
        assert limit_values("SELECT 1 LIMIT ?") == []
