"""
HR database record models.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class ChatTurn(BaseModel):
    """One persisted request/response pair in ``chat_logs``."""

    session_id: str = Field(..., min_length=1, description="Chat session identifier")
    message: str = Field(..., description="User message text")
    response: str = Field(..., description="Bot response text")
    sql_executed: str | None = Field(None, description="Statement executed for this turn")
    created_at: datetime | None = Field(None, description="Set by the database on insert")


class PolicySection(BaseModel):
    """A handbook chunk matched by full-text search."""

    id: int
    page_number: int | None = None
    section_title: str | None = None
    content: str
    relevance: float = 0.0


class PolicySearchStat(BaseModel):
    """Aggregated handbook search analytics for one query text."""

    query: str
    search_count: int
    avg_results: float | None = None
    last_searched: datetime | None = None


class PolicyStatus(BaseModel):
    """Whether the handbook index is loaded, and how big it is."""

    loaded: bool
    total_chunks: int = 0
    total_characters: int = 0
    max_page: int | None = None
    error: str | None = None


class ConversationStats(BaseModel):
    """Per-session totals from ``chat_logs``."""

    session_id: str
    total_messages: int = 0
    queries_executed: int = 0
    first_message: datetime | None = None
    last_message: datetime | None = None


class SchemaTable(BaseModel):
    """One row of ``db_schema_info``."""

    table_name: str
    table_columns: str | None = None
    sample_data: str | None = None


class TableRelationship(BaseModel):
    """One row of ``db_relationships_info``."""

    from_table: str
    from_column: str
    to_table: str
    to_column: str
    relationship_type: str | None = None
