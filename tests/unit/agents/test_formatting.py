"""Unit tests for the deterministic fallback formatter."""

from hrchat.agents.formatting import format_fallback, format_row, readable_key


def test_readable_key():
    assert readable_key("staff_first_name") == "Staff First Name"
    assert readable_key("total") == "Total"


def test_format_row_skips_empty_values():
    row = {"staff_first_name": "Aamir", "staff_middle_name": None, "staff_nickname": "", "age": 0}

    assert format_row(row) == "Staff First Name: Aamir | Age: 0"


def test_format_fallback_single_record():
    text = format_fallback([{"total_employees": 42}], 1, "How many employees?")

    assert text == (
        'Results for "How many employees?":\n\n'
        "Found 1 record:\n\n"
        "1. Total Employees: 42\n"
    )


def test_format_fallback_truncates_to_limit():
    rows = [{"staff_id": i, "staff_first_name": f"Name{i}"} for i in range(1, 13)]

    text = format_fallback(rows, 12, "List them", limit=10)

    assert "Found 12 records:" in text
    assert "10. Staff Id: 10 | Staff First Name: Name10\n" in text
    assert "11. Staff Id: 11" not in text
    assert text.endswith("\n(Showing first 10 of 12 total records)")


def test_format_fallback_total_larger_than_rows_received():
    rows = [{"staff_id": 1}]

    text = format_fallback(rows, 30, "Everyone", limit=10)

    assert "Found 30 records:" in text
    assert text.endswith("(Showing first 10 of 30 total records)")
