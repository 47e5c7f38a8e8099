"""
HR Chat Models Module

Pydantic models for type-safe data validation throughout the application.

Available Models:
    Agent Models:
        - ClassificationResult: Policy-vs-data intent decision
        - ExtractionResult: Statement recovered from a completion reply
        - QueryOutcome: Structured query execution result

    Database Models:
        - ChatTurn: Persisted chat log row
        - PolicySection: Matched handbook chunk
        - PolicySearchStat, PolicyStatus: Handbook analytics
        - ConversationStats: Per-session totals
        - SchemaTable, TableRelationship: Schema metadata rows

    API Models:
        - ChatRequest, ChatResponse, HistoryMessage, QueryContextInfo
        - HealthResponse, ReadinessResponse, ErrorResponse
        - SchemaResponse, RefreshResponse
        - PolicyStatusResponse, PolicyStatsResponse, SessionStatsResponse

Usage:
    from hrchat.models import ChatRequest, ChatResponse, QueryOutcome
"""

from hrchat.models.agent import ClassificationResult, ExtractionResult, QueryOutcome
from hrchat.models.api import (
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    HealthResponse,
    HistoryMessage,
    PolicyStatsResponse,
    PolicyStatusResponse,
    QueryContextInfo,
    ReadinessResponse,
    RefreshResponse,
    SchemaResponse,
    SessionStatsResponse,
)
from hrchat.models.database import (
    ChatTurn,
    ConversationStats,
    PolicySearchStat,
    PolicySection,
    PolicyStatus,
    SchemaTable,
    TableRelationship,
)

__all__ = [
    # Agent models
    "ClassificationResult",
    "ExtractionResult",
    "QueryOutcome",
    # Database models
    "ChatTurn",
    "ConversationStats",
    "PolicySearchStat",
    "PolicySection",
    "PolicyStatus",
    "SchemaTable",
    "TableRelationship",
    # API models
    "ChatRequest",
    "ChatResponse",
    "ErrorResponse",
    "HealthResponse",
    "HistoryMessage",
    "PolicyStatsResponse",
    "PolicyStatusResponse",
    "QueryContextInfo",
    "ReadinessResponse",
    "RefreshResponse",
    "SchemaResponse",
    "SessionStatsResponse",
]
