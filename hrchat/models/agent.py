"""
Agent I/O Models

Pydantic models passed between the pipeline stages: classification,
statement extraction and query execution results.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class ClassificationResult(BaseModel):
    """Outcome of the rule-based intent classifier."""

    is_policy: bool = Field(..., description="Whether the message is a handbook question")
    reason: str = Field(..., description="Which rule decided the outcome")

    model_config = ConfigDict(frozen=True)


class ExtractionResult(BaseModel):
    """
    Statement recovered from a free-form completion reply.

    ``statement`` is None when no tier recognized a query; the reply is then a
    direct natural-language answer.
    """

    statement: str | None = Field(None, description="Executable statement, if any")
    method: Literal["direct", "pattern", "aggressive"] | None = Field(
        None, description="Extraction tier that produced the result"
    )

    model_config = ConfigDict(frozen=True)

    @property
    def has_statement(self) -> bool:
        return bool(self.statement)


class QueryOutcome(BaseModel):
    """Structured result of running a statement; errors are data, not exceptions."""

    ok: bool = Field(..., description="Whether the statement ran")
    row_count: int = Field(default=0, ge=0, description="Number of rows returned")
    rows: list[dict[str, Any]] = Field(default_factory=list, description="Returned rows")
    error: str | None = Field(None, description="Rejection or execution error text")
    execution_time_ms: float | None = Field(None, description="Execution time in ms")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "ok": True,
                "row_count": 1,
                "rows": [{"total_employees": 42}],
                "error": None,
            }
        }
    )
