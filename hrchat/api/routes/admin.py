"""
Admin Routes

Schema catalog, handbook index and per-session statistics.
"""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from hrchat.connectors.base import BaseConnector, ConnectorError
from hrchat.connectors.base import ConnectionError as ConnectorConnectionError
from hrchat.database.catalog import SchemaCatalog
from hrchat.database.chat_logs import ChatLogStore
from hrchat.knowledge.handbook import HandbookSearch
from hrchat.models.api import (
    PolicyStatsResponse,
    PolicyStatusResponse,
    RefreshResponse,
    SchemaResponse,
    SessionStatsResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _connector() -> BaseConnector:
    from hrchat.api.main import app_state

    connector = app_state["connector"]
    if connector is None:
        raise ConnectorConnectionError("Database connector not initialized")
    return connector


def _catalog() -> SchemaCatalog:
    from hrchat.api.main import app_state

    pipeline = app_state["pipeline"]
    if pipeline is not None:
        return pipeline.catalog
    return SchemaCatalog(_connector())


@router.get("/schema", response_model=SchemaResponse, response_model_by_alias=True)
async def get_schema() -> SchemaResponse:
    """Plain schema listing and catalogued table names."""
    catalog = _catalog()
    return SchemaResponse(
        schema_text=await catalog.get_schema(),
        tables=await catalog.get_table_list(),
    )


@router.post("/refresh", response_model=RefreshResponse, response_model_by_alias=True)
async def refresh_schema():
    """
    Rebuild the schema metadata tables.

    Returns:
        The refreshed schema text, or 500 if the stored procedure fails
    """
    catalog = _catalog()
    try:
        await catalog.refresh_schema()
    except ConnectorError as exc:
        logger.error(f"Schema refresh failed: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": f"Schema refresh failed: {exc}"},
        )

    return RefreshResponse(
        message="Schema refreshed successfully",
        schema_text=await catalog.get_schema(),
    )


@router.get("/policy/status", response_model=PolicyStatusResponse)
async def policy_status() -> PolicyStatusResponse:
    """Whether handbook content is loaded."""
    handbook = HandbookSearch(_connector())
    return PolicyStatusResponse(status=await handbook.get_status())


@router.get("/policy/stats", response_model=PolicyStatsResponse)
async def policy_stats() -> PolicyStatsResponse:
    """Most searched handbook questions."""
    handbook = HandbookSearch(_connector())
    return PolicyStatsResponse(stats=await handbook.get_search_stats())


@router.get("/sessions/{session_id}/stats", response_model=SessionStatsResponse)
async def session_stats(session_id: str) -> SessionStatsResponse:
    """Message and query totals for one chat session."""
    chat_logs = ChatLogStore(_connector())
    return SessionStatsResponse(stats=await chat_logs.get_conversation_stats(session_id))
