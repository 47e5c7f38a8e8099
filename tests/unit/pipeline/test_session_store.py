"""Unit tests for the in-process SessionStore."""

import asyncio

import pytest

from hrchat.pipeline.session_context import SessionContext
from hrchat.pipeline.session_store import SessionStore


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class TestSessionStore:
    """Test suite for session checkout, expiry and serialization."""

    @pytest.fixture
    def clock(self):
        return FakeClock()

    @pytest.fixture
    def store(self, clock):
        return SessionStore(ttl_seconds=60, clock=clock)

    @pytest.mark.asyncio
    async def test_unknown_id_creates_context(self, store):
        async with store.session("missing", SessionContext.new) as handle:
            assert handle.is_new is True
            session_id = handle.context.session_id

        assert store.get(session_id) is not None
        assert len(store) == 1

    @pytest.mark.asyncio
    async def test_updated_context_is_saved(self, store):
        async with store.session(None, SessionContext.new) as handle:
            handle.context = handle.context.push_query("q", "SELECT 1", 1)
            session_id = handle.context.session_id

        async with store.session(session_id, SessionContext.new) as handle:
            assert handle.is_new is False
            assert len(handle.context.previous_queries) == 1

    @pytest.mark.asyncio
    async def test_context_saved_even_when_body_raises(self, store):
        with pytest.raises(RuntimeError):
            async with store.session(None, SessionContext.new) as handle:
                session_id = handle.context.session_id
                raise RuntimeError("boom")

        assert store.get(session_id) is not None

    def test_expired_context_is_dropped(self, store, clock):
        context = SessionContext.new()
        store.save(context)

        clock.now += 61

        assert store.get(context.session_id) is None
        assert len(store) == 0

    def test_purge_expired(self, store, clock):
        old = SessionContext.new()
        store.save(old)
        clock.now += 30
        fresh = SessionContext.new()
        store.save(fresh)
        clock.now += 31

        assert store.purge_expired() == 1
        assert store.get(fresh.session_id) is not None

    @pytest.mark.asyncio
    async def test_same_session_requests_are_serialized(self, store):
        async with store.session(None, SessionContext.new) as handle:
            session_id = handle.context.session_id

        order: list[str] = []

        async def turn(label: str):
            async with store.session(session_id, SessionContext.new) as handle:
                order.append(f"{label}-start")
                await asyncio.sleep(0.01)
                handle.context = handle.context.push_query(label, "SELECT 1", 1)
                order.append(f"{label}-end")

        await asyncio.gather(turn("a"), turn("b"))

        assert order in (
            ["a-start", "a-end", "b-start", "b-end"],
            ["b-start", "b-end", "a-start", "a-end"],
        )
        # The second turn saw the first turn's update
        assert len(store.get(session_id).previous_queries) == 2

    @pytest.mark.asyncio
    async def test_cookieless_sessions_expire_without_lookup(self, store, clock):
        for _ in range(50):
            async with store.session(None, SessionContext.new):
                pass
        assert len(store) == 50

        clock.now += 120
        for _ in range(3):
            async with store.session(None, SessionContext.new):
                pass

        assert len(store) == 3
        assert len(store._locks) == 3

    @pytest.mark.asyncio
    async def test_new_session_keeps_live_contexts(self, store, clock):
        async with store.session(None, SessionContext.new) as handle:
            live_id = handle.context.session_id

        clock.now += 30
        async with store.session(None, SessionContext.new):
            pass

        assert store.get(live_id) is not None
        assert len(store) == 2
