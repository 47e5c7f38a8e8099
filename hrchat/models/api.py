"""
API Request/Response Models

Pydantic models for FastAPI endpoints. Response field names follow the
camelCase wire format the chat widget consumes (``isPolicyAnswer``,
``accessLevel``...), declared through aliases.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from hrchat.models.database import ConversationStats, PolicySearchStat, PolicyStatus


class HistoryMessage(BaseModel):
    """Chat message supplied by the caller as conversation history."""

    role: Literal["user", "assistant"] = Field(..., description="Message role")
    content: str = Field(..., description="Message content")


class ChatRequest(BaseModel):
    """Request body shared by the three chat endpoints."""

    # Emptiness is checked by the pipeline so the error body matches the other failures
    message: str | None = Field(default="", description="User's natural language question")
    history: list[HistoryMessage] = Field(
        default_factory=list, description="Previous messages in the conversation"
    )
    hr_id: str | None = Field(default=None, alias="hrId", description="HR staff identifier")
    hr_email: str | None = Field(default=None, alias="hrEmail", description="HR staff email")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "message": "How many employees are active?",
                "history": [],
            }
        },
    )


class QueryContextInfo(BaseModel):
    """Lightweight context flags returned with query answers."""

    has_history: bool = Field(..., alias="hasHistory")
    previous_queries: int = Field(..., alias="previousQueries")

    model_config = ConfigDict(populate_by_name=True)


class ChatResponse(BaseModel):
    """
    Body returned by the chat endpoints.

    Unset fields are dropped on serialization, so each exit path only carries
    the keys it fills in.
    """

    success: bool = Field(..., description="Whether the request produced an answer")
    response: str | None = Field(None, description="Answer text")
    error: str | None = Field(None, description="Error text on failure")
    count: int | None = Field(None, description="Total rows returned by the query")
    sql: str | None = Field(None, description="Statement that was executed or attempted")
    context: QueryContextInfo | None = None
    is_policy_answer: bool | None = Field(None, alias="isPolicyAnswer")
    source: str | None = Field(None, description="Document that grounded a policy answer")
    policy_pages: list[int] | None = Field(None, alias="policyPages")
    access_level: str | None = Field(None, alias="accessLevel")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "success": True,
                "response": "There are 42 active employees.",
                "count": 1,
                "sql": "SELECT COUNT(*) as total_employees FROM dice_staff WHERE staff_status='active'",
                "context": {"hasHistory": False, "previousQueries": 1},
            }
        },
    )

    def to_body(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True, by_alias=True)


class ErrorResponse(BaseModel):
    """Error response model."""

    success: bool = Field(default=False)
    error: str = Field(..., description="Human-readable error message")


class HealthResponse(BaseModel):
    """Response model for the liveness endpoint."""

    status: str = Field(..., description="Service status")
    message: str = Field(..., description="Service description")
    version: str = Field(..., description="API version")
    timestamp: str = Field(..., description="Current timestamp (ISO 8601)")


class ReadinessResponse(BaseModel):
    """Response model for readiness check endpoint."""

    status: str = Field(..., description="Readiness status: 'ready' or 'not_ready'")
    version: str = Field(..., description="API version")
    timestamp: str = Field(..., description="Current timestamp (ISO 8601)")
    checks: dict[str, bool] = Field(..., description="Individual readiness checks")


class SchemaResponse(BaseModel):
    """Schema text plus table names for the admin surface."""

    success: bool = True
    schema_text: str = Field(..., alias="schema")
    tables: list[str] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


class RefreshResponse(BaseModel):
    """Result of rebuilding the schema metadata tables."""

    success: bool = True
    message: str
    schema_text: str = Field(..., alias="schema")

    model_config = ConfigDict(populate_by_name=True)


class PolicyStatusResponse(BaseModel):
    success: bool = True
    status: PolicyStatus


class PolicyStatsResponse(BaseModel):
    success: bool = True
    stats: list[PolicySearchStat] = Field(default_factory=list)


class SessionStatsResponse(BaseModel):
    success: bool = True
    stats: ConversationStats
