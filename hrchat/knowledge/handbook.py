"""
HR handbook search over the MySQL FULLTEXT index.

The handbook is chunked into ``hr_policy_content`` rows ahead of time; this
module only reads it. Searches that match are recorded in
``hr_policy_searches`` for analytics.
"""

from __future__ import annotations

import logging

from hrchat.connectors.base import BaseConnector, ConnectorError
from hrchat.models.database import PolicySearchStat, PolicySection, PolicyStatus

logger = logging.getLogger(__name__)

_SEARCH_SQL = """
SELECT
    id,
    page_number,
    section_title,
    content,
    MATCH(content) AGAINST(%s IN NATURAL LANGUAGE MODE) AS relevance
FROM hr_policy_content
WHERE MATCH(content) AGAINST(%s IN NATURAL LANGUAGE MODE)
ORDER BY relevance DESC
LIMIT {limit}
"""

_LOG_SEARCH_SQL = "INSERT INTO hr_policy_searches (query, matched_results) VALUES (%s, %s)"

_STATS_SQL = """
SELECT
    query,
    COUNT(*) AS search_count,
    AVG(matched_results) AS avg_results,
    MAX(created_at) AS last_searched
FROM hr_policy_searches
GROUP BY query
ORDER BY search_count DESC
LIMIT 10
"""

_STATUS_SQL = """
SELECT
    COUNT(*) AS total_chunks,
    SUM(content_length) AS total_characters,
    MAX(page_number) AS max_page
FROM hr_policy_content
"""


class HandbookSearch:
    """Relevance-ranked lookup of handbook sections."""

    def __init__(self, connector: BaseConnector, max_sections: int = 5) -> None:
        self.connector = connector
        self.max_sections = max_sections

    async def search(self, query: str) -> list[PolicySection]:
        """
        Find the handbook sections most relevant to a question.

        Returns an empty list when nothing matches or the search fails, so the
        caller can fall through to the data path.
        """
        sql = _SEARCH_SQL.format(limit=int(self.max_sections))
        try:
            result = await self.connector.execute(sql, [query, query])
        except ConnectorError as exc:
            logger.error(f"Handbook search failed: {exc}")
            return []

        sections = [PolicySection(**row) for row in result.rows]
        logger.info(f"Found {len(sections)} matching handbook sections")

        if sections:
            await self._record_search(query, len(sections))
        return sections

    async def _record_search(self, query: str, matched: int) -> None:
        try:
            await self.connector.execute(_LOG_SEARCH_SQL, [query, matched])
        except ConnectorError as exc:
            logger.warning(f"Could not record handbook search: {exc}")

    async def get_search_stats(self) -> list[PolicySearchStat]:
        """Top 10 searched questions with counts."""
        try:
            result = await self.connector.execute(_STATS_SQL)
        except ConnectorError as exc:
            logger.error(f"Handbook search stats failed: {exc}")
            return []
        return [
            PolicySearchStat(
                query=row["query"],
                search_count=int(row["search_count"]),
                avg_results=float(row["avg_results"]) if row.get("avg_results") is not None else None,
                last_searched=row.get("last_searched"),
            )
            for row in result.rows
        ]

    async def get_status(self) -> PolicyStatus:
        """Whether handbook content is loaded, with chunk and size totals."""
        try:
            result = await self.connector.execute(_STATUS_SQL)
        except ConnectorError as exc:
            logger.error(f"Handbook status check failed: {exc}")
            return PolicyStatus(loaded=False, error=str(exc))

        row = result.rows[0] if result.rows else {}
        total_chunks = int(row.get("total_chunks") or 0)
        return PolicyStatus(
            loaded=total_chunks > 0,
            total_chunks=total_chunks,
            total_characters=int(row.get("total_characters") or 0),
            max_page=int(row["max_page"]) if row.get("max_page") is not None else None,
        )
