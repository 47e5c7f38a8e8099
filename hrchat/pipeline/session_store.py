"""
In-process session store.

Holds one SessionContext per session id with an idle TTL. Requests on the
same session are serialized by a per-session asyncio.Lock, so two concurrent
messages cannot interleave their history updates.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass

from hrchat.pipeline.session_context import SessionContext

logger = logging.getLogger(__name__)


@dataclass
class _Entry:
    context: SessionContext
    last_seen: float


@dataclass
class SessionHandle:
    """Mutable holder for the context checked out by one request."""

    context: SessionContext
    is_new: bool = False


class SessionStore:
    """Session contexts keyed by session id, expired after ``ttl_seconds`` idle."""

    def __init__(self, ttl_seconds: int = 86400, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, _Entry] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def get(self, session_id: str | None) -> SessionContext | None:
        """Return the live context for ``session_id``, dropping it if expired."""
        if not session_id:
            return None
        entry = self._entries.get(session_id)
        if entry is None:
            return None
        if self._clock() - entry.last_seen > self.ttl_seconds:
            logger.debug(f"Session expired: {session_id}")
            self._entries.pop(session_id, None)
            lock = self._locks.get(session_id)
            if lock is not None and not lock.locked():
                self._locks.pop(session_id, None)
            return None
        return entry.context

    def save(self, context: SessionContext) -> None:
        self._entries[context.session_id] = _Entry(context=context, last_seen=self._clock())

    def purge_expired(self) -> int:
        """Drop every expired session; returns how many were removed."""
        now = self._clock()
        expired = [
            session_id
            for session_id, entry in self._entries.items()
            if now - entry.last_seen > self.ttl_seconds
        ]
        for session_id in expired:
            self._entries.pop(session_id, None)
            lock = self._locks.get(session_id)
            if lock is not None and not lock.locked():
                self._locks.pop(session_id, None)
        if expired:
            logger.info(f"Purged {len(expired)} expired sessions")
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)

    @asynccontextmanager
    async def session(
        self,
        session_id: str | None,
        factory: Callable[[], SessionContext],
    ) -> AsyncIterator[SessionHandle]:
        """
        Check out a session for the duration of one request.

        Unknown or expired ids get a fresh context from ``factory``. Whatever
        context the handle holds on exit is saved back.
        """
        context = self.get(session_id)
        is_new = context is None
        if context is None:
            # Cookie-less clients open a session per request; never looked up again
            self.purge_expired()
            context = factory()
            logger.info(f"New chat session: {context.session_id}")

        lock = self._locks.setdefault(context.session_id, asyncio.Lock())
        async with lock:
            # Another request may have updated the context while we waited
            context = self.get(context.session_id) or context
            handle = SessionHandle(context=context, is_new=is_new)
            try:
                yield handle
            finally:
                self.save(handle.context)
