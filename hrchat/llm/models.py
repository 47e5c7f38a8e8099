"""
LLM Request and Response Models

Pydantic models for completion service interactions.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class LLMMessage(BaseModel):
    """Single message in an LLM conversation."""

    role: Literal["system", "user", "assistant"] = Field(
        ...,
        description="Message role"
    )
    content: str = Field(
        ...,
        description="Message content",
        min_length=1
    )


class LLMRequest(BaseModel):
    """Request to an LLM provider."""

    messages: List[LLMMessage] = Field(
        ...,
        description="Conversation messages (a leading 'system' message becomes the system instruction)",
        min_length=1
    )
    temperature: Optional[float] = Field(
        None,
        ge=0.0,
        le=1.0,
        description="Sampling temperature (overrides default)"
    )
    max_tokens: Optional[int] = Field(
        None,
        gt=0,
        description="Maximum tokens to generate (overrides default)"
    )
    model: Optional[str] = Field(
        None,
        description="Specific model to use (overrides default)"
    )
    metadata: Dict[str, Any] = Field(
        default_factory=dict,
        description="Additional provider-specific parameters"
    )

    @classmethod
    def from_conversation(
        cls,
        messages: List[Dict[str, str]],
        system_prompt: str = "",
        **kwargs: Any,
    ) -> "LLMRequest":
        """
        Build a request from role-tagged dicts plus an optional system instruction.

        Messages with empty content are dropped; the system instruction is only
        attached when it is non-empty.
        """
        llm_messages: List[LLMMessage] = []
        if system_prompt:
            llm_messages.append(LLMMessage(role="system", content=system_prompt))
        for message in messages:
            content = message.get("content") or ""
            if not content.strip():
                continue
            llm_messages.append(LLMMessage(role=message["role"], content=content))
        return cls(messages=llm_messages, **kwargs)


class LLMUsage(BaseModel):
    """Token usage information."""

    prompt_tokens: int = Field(
        ...,
        ge=0,
        description="Number of tokens in the prompt"
    )
    completion_tokens: int = Field(
        ...,
        ge=0,
        description="Number of tokens in the completion"
    )
    total_tokens: int = Field(
        ...,
        ge=0,
        description="Total tokens used"
    )


class LLMResponse(BaseModel):
    """Response from an LLM provider."""

    content: str = Field(
        ...,
        description="Generated text content"
    )
    model: str = Field(
        ...,
        description="Model that generated the response"
    )
    usage: LLMUsage = Field(
        ...,
        description="Token usage information"
    )
    finish_reason: Literal["stop", "length", "content_filter", "error"] = Field(
        ...,
        description="Reason the generation stopped"
    )
    provider: str = Field(
        ...,
        description="Provider that handled the request"
    )
    metadata: Dict[str, Any] = Field(
        default_factory=dict,
        description="Additional provider-specific response data"
    )
