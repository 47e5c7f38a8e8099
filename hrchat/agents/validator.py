"""
Read-only statement guard.

A denylist filter, not a sandbox: comments are stripped, the statement must
start with SELECT, must not contain any mutating or file-access keyword, and
must parse (sqlparse) as a single statement. Anything that defeats the
comment-strip step is not caught here.
"""

import logging
import re

import sqlparse

logger = logging.getLogger(__name__)

UNSAFE_QUERY_ERROR = "Unsafe query detected"

BLOCKED_KEYWORDS: tuple[str, ...] = (
    "DELETE ",
    "DROP ",
    "INSERT ",
    "UPDATE ",
    "ALTER ",
    "CREATE ",
    "TRUNCATE ",
    "RENAME ",
    "REPLACE ",
    "EXEC ",
    "EXECUTE ",
    "HANDLER ",
    "LOAD DATA",
    "INTO OUTFILE",
    "INTO DUMPFILE",
    "LOAD_FILE",
)

_BLOCK_COMMENT = re.compile(r"/\*[\s\S]*?\*/")
_LINE_COMMENT = re.compile(r"--.*")


def strip_sql_comments(sql: str) -> str:
    """Remove ``/* */`` and ``--`` comments and surrounding whitespace."""
    without_blocks = _BLOCK_COMMENT.sub("", sql)
    return _LINE_COMMENT.sub("", without_blocks).strip()


def find_blocked_keyword(sql: str) -> str | None:
    """Return the first denylisted keyword present in the normalized statement."""
    normalized = strip_sql_comments(sql).upper()
    for keyword in BLOCKED_KEYWORDS:
        if keyword in normalized:
            return keyword
    return None


def is_single_statement(sql: str) -> bool:
    """True when sqlparse splits the statement into exactly one statement."""
    statements = [stmt for stmt in sqlparse.split(strip_sql_comments(sql)) if stmt.strip()]
    return len(statements) == 1


def is_safe_query(sql: str) -> bool:
    """
    Check that a statement is a single read-only SELECT.

    Args:
        sql: Statement text as extracted from the completion reply

    Returns:
        True if the statement may be executed
    """
    normalized = strip_sql_comments(sql).upper()

    if not normalized.startswith("SELECT"):
        logger.warning("Rejected statement: does not start with SELECT")
        return False

    blocked = find_blocked_keyword(sql)
    if blocked is not None:
        logger.warning(f"Rejected statement: contains blocked keyword {blocked.strip()!r}")
        return False

    if not is_single_statement(sql):
        logger.warning("Rejected statement: more than one statement")
        return False

    return True
