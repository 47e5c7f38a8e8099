"""
Pytest configuration and shared fixtures.

This module provides fixtures and configuration used across all tests.
"""

import logging
from typing import Any
from unittest.mock import AsyncMock

import pytest

from hrchat.connectors.base import BaseConnector, QueryResult

# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run integration tests (requires a MySQL database and an Anthropic API key)",
    )


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test (may require external services)"
    )
    config.addinivalue_line("markers", "unit: mark test as unit test (default)")


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless explicitly enabled."""
    if config.getoption("--run-integration"):
        return
    skip_integration = pytest.mark.skip(
        reason="Integration tests disabled (use --run-integration to enable)."
    )
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


# ============================================================================
# Logging Configuration
# ============================================================================


@pytest.fixture(autouse=True)
def configure_test_logging(caplog):
    """Capture all log levels for every test."""
    caplog.set_level(logging.DEBUG)
    yield


# ============================================================================
# Environment and Configuration
# ============================================================================


@pytest.fixture(autouse=True)
def mock_anthropic_api_key(monkeypatch):
    """
    Provide a well-formed Anthropic key and keep a local .env out of the way.

    Runs automatically for all tests; the settings cache is cleared before
    and after so each test sees its own environment.
    """
    from hrchat.config import clear_settings_cache

    clear_settings_cache()

    test_key = "sk-ant-test-key-1234567890"
    monkeypatch.setenv("HRCHAT_ENV_SOURCE", "environment")
    monkeypatch.setenv("LLM_ANTHROPIC_API_KEY", test_key)
    monkeypatch.delenv("DATABASE_URL", raising=False)
    yield test_key

    clear_settings_cache()


# ============================================================================
# Mock LLM Provider
# ============================================================================


@pytest.fixture
def mock_llm_provider():
    """
    Mock completion client.

    Usage:
        def test_agent(mock_llm_provider):
            mock_llm_provider.set_response("test response")
            mock_llm_provider.set_responses(['{"sql":"SELECT 1"}', "One row."])
    """
    from hrchat.llm.models import LLMResponse, LLMUsage

    def _response(content: str) -> LLMResponse:
        return LLMResponse(
            content=content,
            model="mock-model",
            usage=LLMUsage(prompt_tokens=1, completion_tokens=1, total_tokens=2),
            finish_reason="stop",
            provider="mock",
            metadata={},
        )

    class MockLLMProvider:
        def __init__(self):
            self.provider_name = "mock"
            self.generate = AsyncMock()

        def set_response(self, response: str):
            """Set the response that every generate() call returns."""
            self.generate.return_value = _response(response)

        def set_responses(self, responses: list):
            """Queue one reply (or exception) per generate() call."""
            self.generate.side_effect = [
                _response(item) if isinstance(item, str) else item for item in responses
            ]

        def request(self, index: int = 0):
            """The LLMRequest passed to the index-th generate() call."""
            return self.generate.await_args_list[index].args[0]

    return MockLLMProvider()


# ============================================================================
# Fake Database Connector
# ============================================================================


class FakeConnector(BaseConnector):
    """
    In-memory connector answering queries by SQL fragment.

    The most recently registered matching fragment wins; unmatched queries
    return no rows. Every call is recorded in ``calls``.
    """

    def __init__(self):
        super().__init__(host="localhost", port=3306, database="hr", user="test", password="")
        self._connected = True
        self.routes: list[tuple[str, Any]] = []
        self.calls: list[tuple[str, Any]] = []
        self.procedures: list[str] = []
        self.procedure_error: Exception | None = None

    def on(self, fragment: str, rows: list[dict] | None = None, error: Exception | None = None):
        if error is not None:
            outcome: Any = error
        else:
            rows = rows or []
            outcome = QueryResult(
                rows=rows,
                row_count=len(rows),
                columns=list(rows[0].keys()) if rows else [],
                execution_time_ms=1.0,
            )
        self.routes.insert(0, (fragment, outcome))

    def queries_matching(self, fragment: str) -> list[tuple[str, Any]]:
        return [call for call in self.calls if fragment in call[0]]

    async def connect(self) -> None:
        self._connected = True

    async def execute(self, query, params=None, timeout=None) -> QueryResult:
        self.calls.append((query, params))
        for fragment, outcome in self.routes:
            if fragment in query:
                if isinstance(outcome, Exception):
                    raise outcome
                return outcome
        return QueryResult(rows=[], row_count=0, columns=[], execution_time_ms=1.0)

    async def call_procedure(self, name, args=None) -> None:
        self.procedures.append(name)
        if self.procedure_error is not None:
            raise self.procedure_error

    async def close(self) -> None:
        self._connected = False


@pytest.fixture
def fake_connector():
    """Connector double with fragment-routed results."""
    return FakeConnector()


@pytest.fixture
def sample_policy_rows() -> list[dict]:
    """Handbook sections as returned by the FULLTEXT search."""
    return [
        {
            "id": 1,
            "page_number": 12,
            "section_title": "Annual Leave",
            "content": "Confirmed employees are entitled to 20 days of annual leave.",
            "relevance": 3.2,
        },
        {
            "id": 2,
            "page_number": 13,
            "section_title": "Carry Forward",
            "content": "Up to 10 unused days may be carried forward.",
            "relevance": 1.4,
        },
    ]


# ============================================================================
# API Fixtures
# ============================================================================


@pytest.fixture
def api_state(mock_llm_provider, fake_connector):
    """Populate app_state without running the lifespan; restored afterwards."""
    from hrchat.api.main import app_state
    from hrchat.config import get_settings
    from hrchat.pipeline.orchestrator import HRChatPipeline
    from hrchat.pipeline.session_store import SessionStore

    saved = dict(app_state)
    app_state.update(
        pipeline=HRChatPipeline(mock_llm_provider, fake_connector, settings=get_settings()),
        connector=fake_connector,
        llm_provider=mock_llm_provider,
        session_store=SessionStore(),
    )
    yield app_state
    app_state.clear()
    app_state.update(saved)


@pytest.fixture
def client(api_state):
    """Test client over an initialized app."""
    from fastapi.testclient import TestClient

    from hrchat.api.main import app

    return TestClient(app)


@pytest.fixture
def bare_client():
    """Test client over an app whose components never initialized."""
    from fastapi.testclient import TestClient

    from hrchat.api.main import app, app_state

    saved = dict(app_state)
    app_state.update(pipeline=None, connector=None, llm_provider=None, session_store=None)
    yield TestClient(app)
    app_state.clear()
    app_state.update(saved)
