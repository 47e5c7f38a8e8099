"""Unit tests for the read-only statement guard."""

import pytest

from hrchat.agents.validator import (
    find_blocked_keyword,
    is_safe_query,
    is_single_statement,
    strip_sql_comments,
)


class TestStripComments:
    def test_removes_block_and_line_comments(self):
        sql = "/* header */ SELECT staff_id -- trailing\nFROM dice_staff"

        assert strip_sql_comments(sql) == "SELECT staff_id \nFROM dice_staff"

    def test_plain_statement_unchanged(self):
        assert strip_sql_comments("  SELECT 1  ") == "SELECT 1"


class TestIsSafeQuery:
    """Test suite for the SELECT-only guard."""

    @pytest.mark.parametrize(
        "sql",
        [
            "SELECT COUNT(*) FROM dice_staff",
            "select staff_first_name from dice_staff where staff_status='active'",
            "/* count */ SELECT 1",
            "SELECT 1;",
            "SELECT ds.*, dsd.staff_department_name FROM dice_staff ds "
            "LEFT JOIN dice_staff_department dsd ON ds.staff_department = dsd.staff_department_id",
        ],
    )
    def test_accepts_read_only_select(self, sql):
        assert is_safe_query(sql) is True

    @pytest.mark.parametrize(
        "sql",
        [
            "DELETE FROM dice_staff",
            "UPDATE dice_staff SET staff_status='inactive'",
            "SHOW TABLES",
            "WITH t AS (SELECT 1) SELECT * FROM t",
            "",
        ],
    )
    def test_rejects_non_select(self, sql):
        assert is_safe_query(sql) is False

    @pytest.mark.parametrize(
        "sql",
        [
            "SELECT * FROM dice_staff; DROP TABLE dice_staff",
            "SELECT * INTO OUTFILE '/tmp/staff.csv' FROM dice_staff",
            "SELECT LOAD_FILE('/etc/passwd')",
            "SELECT 1 UNION SELECT 2; DELETE FROM chat_logs",
        ],
    )
    def test_rejects_blocked_keywords(self, sql):
        assert is_safe_query(sql) is False

    def test_rejects_multiple_selects(self):
        assert is_safe_query("SELECT 1; SELECT 2") is False

    def test_comment_hides_nothing_from_denylist(self):
        assert is_safe_query("SELECT 1 /* harmless */; DROP TABLE chat_logs") is False

    def test_keyword_inside_column_name_without_space_is_allowed(self):
        # Denylist entries carry a trailing space, so identifiers are not matched
        assert is_safe_query("SELECT last_update_date FROM dice_staff") is True


class TestHelpers:
    def test_find_blocked_keyword_reports_first_match(self):
        assert find_blocked_keyword("SELECT 1; drop table x") == "DROP "

    def test_find_blocked_keyword_none(self):
        assert find_blocked_keyword("SELECT 1") is None

    def test_single_statement(self):
        assert is_single_statement("SELECT 1") is True
        assert is_single_statement("SELECT 1; SELECT 2") is False
