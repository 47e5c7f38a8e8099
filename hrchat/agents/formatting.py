"""Deterministic result formatter used when the formatting completion call fails."""

from __future__ import annotations

import re
from typing import Any

_WORD_START = re.compile(r"\b\w")


def readable_key(column: str) -> str:
    """``staff_first_name`` -> ``Staff First Name``."""
    return _WORD_START.sub(lambda match: match.group(0).upper(), column.replace("_", " "))


def format_row(row: dict[str, Any]) -> str:
    """Render one row as ``Key: value`` pairs joined by `` | ``, skipping empty values."""
    return " | ".join(
        f"{readable_key(str(key))}: {value}"
        for key, value in row.items()
        if value is not None and value != ""
    )


def format_fallback(
    rows: list[dict[str, Any]],
    total_count: int,
    question: str,
    limit: int = 10,
) -> str:
    """
    Render query rows as plain text without calling the completion service.

    Args:
        rows: Result rows (may hold more than ``limit``)
        total_count: Total rows the query returned
        question: Original user question, echoed in the header
        limit: Maximum rows rendered

    Returns:
        Multi-line answer text
    """
    plural = "" if total_count == 1 else "s"
    text = f'Results for "{question}":\n\n'
    text += f"Found {total_count} record{plural}:\n\n"

    for index, row in enumerate(rows[:limit], start=1):
        text += f"{index}. {format_row(row)}\n"

    if total_count > limit:
        text += f"\n(Showing first {limit} of {total_count} total records)"

    return text
