"""
Statement extraction from free-form completion replies.

The model is asked to answer data questions with exactly ``{"sql": "..."}``
but does not always comply. Three ordered tiers recover the statement; the
first one that succeeds wins:

    direct      the whole reply, whitespace-collapsed, is one JSON object
    pattern     a ``{"sql": "..."}`` object embedded in surrounding prose
    aggressive  a ``SELECT`` fragment after a ``"sql":"`` marker, no JSON parsing

When every tier fails the reply is a direct natural-language answer.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from hrchat.models.agent import ExtractionResult

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")
_SQL_OBJECT_PATTERN = re.compile(r'\{\s*"sql"\s*:\s*"([^"]*(?:\\"[^"]*)*)"\s*\}')
_SQL_FRAGMENT_PATTERN = re.compile(r'(?:"sql"\s*:\s*")(SELECT[\s\S]*?)(?:")', re.IGNORECASE)


def _collapse(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


class StatementExtractor:
    """Recover an executable statement from a completion reply."""

    def extract(self, reply: str) -> ExtractionResult:
        """
        Run the three extraction tiers in order.

        Args:
            reply: Raw completion text

        Returns:
            ExtractionResult; ``statement`` is None for a direct answer
        """
        for method, tier in (
            ("direct", self._direct_parse),
            ("pattern", self._pattern_parse),
        ):
            parsed = tier(reply)
            if parsed is not None:
                # A parsed object without a usable "sql" string is an answer, not a query
                statement = self._statement_from(parsed)
                logger.debug(f"Reply parsed by {method} tier (statement={statement is not None})")
                if statement is None:
                    return ExtractionResult()
                return ExtractionResult(statement=statement, method=method)

        fragment = self._aggressive_parse(reply)
        if fragment:
            logger.debug("Statement recovered by aggressive tier")
            return ExtractionResult(statement=fragment, method="aggressive")

        return ExtractionResult()

    def _direct_parse(self, reply: str) -> Any | None:
        cleaned = _collapse(reply)
        if not (cleaned.startswith("{") and cleaned.endswith("}")):
            return None
        try:
            return json.loads(cleaned)
        except json.JSONDecodeError:
            return None

    def _pattern_parse(self, reply: str) -> Any | None:
        match = _SQL_OBJECT_PATTERN.search(reply)
        if match is None:
            return None
        try:
            return json.loads(_WHITESPACE.sub(" ", match.group(0)))
        except json.JSONDecodeError:
            return None

    def _aggressive_parse(self, reply: str) -> str | None:
        match = _SQL_FRAGMENT_PATTERN.search(reply)
        if match is None or not match.group(1):
            return None
        fragment = match.group(1).replace("\\n", " ").replace("\n", " ")
        return _collapse(fragment) or None

    def _statement_from(self, parsed: Any) -> str | None:
        if not isinstance(parsed, dict):
            return None
        sql = parsed.get("sql")
        if isinstance(sql, str) and sql.strip():
            return _collapse(sql)
        return None
