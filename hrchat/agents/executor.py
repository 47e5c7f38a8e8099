"""
QueryExecutor: run an extracted statement against the HR database.

The statement passes the read-only guard first. Every failure is reported as
a QueryOutcome with ``ok=False`` and never raised, so the pipeline can persist
and surface it.
"""

import logging

from hrchat.agents.validator import UNSAFE_QUERY_ERROR, is_safe_query
from hrchat.connectors.base import BaseConnector, ConnectorError
from hrchat.models.agent import QueryOutcome

logger = logging.getLogger(__name__)


class QueryExecutor:
    """Guarded statement execution over a connector."""

    def __init__(self, connector: BaseConnector, timeout: int | None = None) -> None:
        self.connector = connector
        self.timeout = timeout

    async def execute(self, statement: str) -> QueryOutcome:
        """
        Execute a statement if it passes the read-only guard.

        Args:
            statement: Extracted SQL text

        Returns:
            QueryOutcome with rows on success or the error text on failure
        """
        if not is_safe_query(statement):
            logger.warning(
                "Blocked unsafe statement", extra={"statement": statement[:200]}
            )
            return QueryOutcome(ok=False, error=UNSAFE_QUERY_ERROR)

        try:
            result = await self.connector.execute(statement, timeout=self.timeout)
        except ConnectorError as exc:
            logger.error(f"Query execution failed: {exc}")
            return QueryOutcome(ok=False, error=str(exc))

        logger.info(
            f"Query returned {result.row_count} rows in {result.execution_time_ms:.1f}ms",
            extra={"row_count": result.row_count},
        )
        return QueryOutcome(
            ok=True,
            row_count=result.row_count,
            rows=result.rows,
            execution_time_ms=result.execution_time_ms,
        )
