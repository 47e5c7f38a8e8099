"""Response synthesis: phrase query rows as a natural answer."""

from __future__ import annotations

import json
import logging
from typing import Any

from hrchat.agents.formatting import format_fallback
from hrchat.llm.base import BaseLLMProvider, LLMError
from hrchat.llm.models import LLMMessage, LLMRequest
from hrchat.prompts.loader import PromptLoader

logger = logging.getLogger(__name__)


class ResponseSynthesizer:
    """
    Second completion call of a data answer.

    Best effort: a provider failure falls back to the deterministic formatter
    instead of failing the request.
    """

    def __init__(
        self,
        llm_provider: BaseLLMProvider,
        prompts: PromptLoader | None = None,
        row_limit: int = 15,
        fallback_row_limit: int = 10,
    ) -> None:
        self.llm = llm_provider
        self.prompts = prompts or PromptLoader()
        self.row_limit = row_limit
        self.fallback_row_limit = fallback_row_limit

    async def synthesize(
        self,
        *,
        question: str,
        sql: str,
        rows: list[dict[str, Any]],
        total_count: int,
        previous_context: str = "",
    ) -> str:
        """
        Format rows into an answer, falling back to plain text on provider errors.

        Args:
            question: Original user question
            sql: Statement that produced the rows
            rows: Result rows
            total_count: Total rows returned by the statement
            previous_context: Recent query summaries, one per line
        """
        shown = rows[: self.row_limit]
        prompt = self.prompts.render(
            "agents/response_formatter.md",
            question=question,
            sql=sql,
            shown_count=len(shown),
            total_count=total_count,
            rows_json=json.dumps(shown, indent=2, default=str, ensure_ascii=False),
            previous_context=previous_context,
        )

        try:
            response = await self.llm.generate(
                LLMRequest(messages=[LLMMessage(role="user", content=prompt)])
            )
        except LLMError as exc:
            logger.warning(f"Formatting call failed, using fallback formatter: {exc}")
            return format_fallback(rows, total_count, question, limit=self.fallback_row_limit)

        answer = response.content.strip()
        if not answer:
            logger.warning("Formatting call returned empty text, using fallback formatter")
            return format_fallback(rows, total_count, question, limit=self.fallback_row_limit)
        return answer
