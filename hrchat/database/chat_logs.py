"""Append-only chat log persistence (``chat_logs``)."""

from __future__ import annotations

import logging

from hrchat.connectors.base import BaseConnector, ConnectorError
from hrchat.models.database import ChatTurn, ConversationStats

logger = logging.getLogger(__name__)

_INSERT_SQL = """
INSERT INTO chat_logs (session_id, message, response, sql_executed, created_at)
VALUES (%s, %s, %s, %s, NOW())
"""

_STATS_SQL = """
SELECT
    COUNT(*) AS total_messages,
    COUNT(CASE WHEN sql_executed IS NOT NULL THEN 1 END) AS queries_executed,
    MIN(created_at) AS first_message,
    MAX(created_at) AS last_message
FROM chat_logs
WHERE session_id = %s
"""


class ChatLogStore:
    """Write chat turns; read per-session totals for reporting."""

    def __init__(self, connector: BaseConnector) -> None:
        self.connector = connector

    async def save_chat(self, turn: ChatTurn) -> bool:
        """
        Persist one chat turn.

        A failed write is logged and reported as False; it never fails the
        request that produced the turn.
        """
        try:
            await self.connector.execute(
                _INSERT_SQL,
                [turn.session_id, turn.message, turn.response, turn.sql_executed],
            )
        except ConnectorError as exc:
            logger.error(
                f"Failed to save chat turn: {exc}", extra={"session_id": turn.session_id}
            )
            return False
        return True

    async def get_conversation_stats(self, session_id: str) -> ConversationStats:
        """Message and query totals for one session."""
        try:
            result = await self.connector.execute(_STATS_SQL, [session_id])
        except ConnectorError as exc:
            logger.error(f"Failed to load conversation stats: {exc}")
            return ConversationStats(session_id=session_id)

        row = result.rows[0] if result.rows else {}
        return ConversationStats(
            session_id=session_id,
            total_messages=int(row.get("total_messages") or 0),
            queries_executed=int(row.get("queries_executed") or 0),
            first_message=row.get("first_message"),
            last_message=row.get("last_message"),
        )
