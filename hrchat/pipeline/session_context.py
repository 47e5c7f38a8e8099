"""
Session Context

Bounded per-session memory of recent queries and answers. Contexts are
immutable: every push returns a new context, so a pipeline run takes a
context in and hands the updated one back to the session store.
"""

from __future__ import annotations

import secrets
import string
import time
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime

DEFAULT_WINDOW_SIZE = 5

_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_session_id(prefix: str = "chat_") -> str:
    """``chat_<millis>_<9 random base36 chars>``."""
    millis = int(time.time() * 1000)
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"{prefix}{millis}_{suffix}"


@dataclass(frozen=True)
class QueryRecord:
    """A statement the pipeline executed for a question."""

    question: str
    sql: str
    row_count: int
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def summary(self) -> str:
        return f'Previous query: "{self.question}" → Result: {self.row_count} rows'


@dataclass(frozen=True)
class ResultRecord:
    """A formatted answer the pipeline returned."""

    question: str
    answer: str
    row_count: int


def _push(window: tuple, item, size: int) -> tuple:
    # FIFO: oldest entries fall off the front once the window is full
    return (*window, item)[-size:]


@dataclass(frozen=True)
class SessionContext:
    """
    Conversation memory for one chat session.

    Tracks:
    - previous_queries: last executed statements and their row counts
    - previous_results: last formatted answers
    - role and the optional identity of an HR caller
    """

    session_id: str
    role: str = "standard"
    previous_queries: tuple[QueryRecord, ...] = ()
    previous_results: tuple[ResultRecord, ...] = ()
    hr_id: str | None = None
    hr_email: str | None = None
    window_size: int = DEFAULT_WINDOW_SIZE

    @classmethod
    def new(
        cls,
        role: str = "standard",
        prefix: str = "chat_",
        hr_id: str | None = None,
        hr_email: str | None = None,
        window_size: int = DEFAULT_WINDOW_SIZE,
    ) -> SessionContext:
        return cls(
            session_id=generate_session_id(prefix),
            role=role,
            hr_id=hr_id,
            hr_email=hr_email,
            window_size=window_size,
        )

    def push_query(self, question: str, sql: str, row_count: int) -> SessionContext:
        record = QueryRecord(question=question, sql=sql, row_count=row_count)
        return replace(
            self, previous_queries=_push(self.previous_queries, record, self.window_size)
        )

    def push_result(self, question: str, answer: str, row_count: int) -> SessionContext:
        record = ResultRecord(question=question, answer=answer, row_count=row_count)
        return replace(
            self, previous_results=_push(self.previous_results, record, self.window_size)
        )

    def with_identity(self, hr_id: str | None, hr_email: str | None) -> SessionContext:
        """Adopt the identity of the current caller; an anonymous call keeps the old one."""
        if not (hr_id or hr_email):
            return self
        return replace(self, hr_id=hr_id, hr_email=hr_email)

    def recent_query_summaries(self, limit: int = 3) -> str:
        """Newline-joined summaries of the last ``limit`` queries."""
        if limit <= 0:
            return ""
        return "\n".join(record.summary() for record in self.previous_queries[-limit:])
