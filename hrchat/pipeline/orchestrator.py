"""
HR Chat Pipeline Orchestrator

LangGraph state machine answering one chat message.

Flow:
    1. classify: policy question or data question
    2. policy_lookup -> policy_answer for handbook questions with matches
    3. generate: query-generation completion call (provider error ends here)
    4. extract -> direct_answer when the reply holds no statement
    5. execute -> query_error | no_results | format
    6. persist: one chat turn for every answer produced above

The session context goes in with the request and comes back out with the
outcome; the pipeline itself keeps no per-session state.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, TypedDict

from langgraph.graph import END, StateGraph

from hrchat.agents.classifier import IntentClassifier
from hrchat.agents.executor import QueryExecutor
from hrchat.agents.extraction import StatementExtractor
from hrchat.agents.response_synthesis import ResponseSynthesizer
from hrchat.config import Settings, get_settings
from hrchat.connectors.base import BaseConnector
from hrchat.database.catalog import SchemaCatalog
from hrchat.database.chat_logs import ChatLogStore
from hrchat.knowledge.handbook import HandbookSearch
from hrchat.llm.base import BaseLLMProvider, LLMError
from hrchat.llm.models import LLMRequest
from hrchat.models.agent import ClassificationResult, QueryOutcome
from hrchat.models.api import ChatResponse, HistoryMessage, QueryContextInfo
from hrchat.models.database import ChatTurn, PolicySection
from hrchat.pipeline.roles import RoleProfile, get_role
from hrchat.pipeline.session_context import SessionContext
from hrchat.prompts.loader import PromptLoader

logger = logging.getLogger(__name__)

MESSAGE_REQUIRED = "Message is required"
IDENTITY_REQUIRED = "HR ID or Email is required for authentication"
NO_RECORDS_FOUND = "No records found matching your criteria."
POLICY_ERROR_ANSWER = "Error retrieving policy information"


# ============================================================================
# Pipeline State Schema
# ============================================================================


class PipelineState(TypedDict, total=False):
    """State carried through the graph for one message."""

    # Input
    message: str
    history: list[dict[str, str]]
    role: RoleProfile
    session: SessionContext

    # Classifier / policy lookup
    classification: ClassificationResult | None
    policy_sections: list[PolicySection]

    # Generation
    previous_context: str
    reply: str | None

    # Extraction / execution
    statement: str | None
    extraction_method: str | None
    query_outcome: QueryOutcome | None

    # Terminal response
    status_code: int
    response: ChatResponse | None
    log_response: str | None
    log_sql: str | None

    # Pipeline metadata
    current_stage: str | None
    llm_calls: int
    stage_timings: dict[str, float]


@dataclass(frozen=True)
class PipelineOutcome:
    """HTTP status, JSON body and the updated session context."""

    status_code: int
    body: dict[str, Any]
    session: SessionContext


# ============================================================================
# HR Chat Pipeline
# ============================================================================


class HRChatPipeline:
    """
    One parameterized pipeline for every chat role.

    Usage:
        pipeline = HRChatPipeline(llm_provider, connector)
        session = SessionContext.new()
        outcome = await pipeline.run("How many employees?", [], session, role="standard")
        print(outcome.status_code, outcome.body)
    """

    def __init__(
        self,
        llm_provider: BaseLLMProvider,
        connector: BaseConnector,
        *,
        settings: Settings | None = None,
        prompts: PromptLoader | None = None,
        classifier: IntentClassifier | None = None,
        extractor: StatementExtractor | None = None,
    ):
        self.config = settings or get_settings()
        self.llm = llm_provider
        self.connector = connector
        self.prompts = prompts or PromptLoader()

        limits = self.config.pipeline
        self.classifier = classifier or IntentClassifier()
        self.extractor = extractor or StatementExtractor()
        self.handbook = HandbookSearch(connector, max_sections=limits.policy_max_sections)
        self.catalog = SchemaCatalog(connector, prompts=self.prompts)
        self.chat_logs = ChatLogStore(connector)
        self.executor = QueryExecutor(connector, timeout=self.config.database.timeout)
        self.synthesizer = ResponseSynthesizer(
            llm_provider,
            prompts=self.prompts,
            row_limit=limits.format_row_limit,
            fallback_row_limit=limits.fallback_row_limit,
        )

        self.graph = self._build_graph()
        logger.info("HRChatPipeline initialized")

    def _build_graph(self) -> StateGraph:
        """
        Build LangGraph state machine.

        Returns:
            Compiled LangGraph
        """
        workflow = StateGraph(PipelineState)

        workflow.add_node("classify", self._run_classify)
        workflow.add_node("policy_lookup", self._run_policy_lookup)
        workflow.add_node("policy_answer", self._run_policy_answer)
        workflow.add_node("generate", self._run_generate)
        workflow.add_node("extract", self._run_extract)
        workflow.add_node("direct_answer", self._run_direct_answer)
        workflow.add_node("execute", self._run_execute)
        workflow.add_node("query_error", self._run_query_error)
        workflow.add_node("no_results", self._run_no_results)
        workflow.add_node("format", self._run_format)
        workflow.add_node("persist", self._run_persist)

        workflow.set_entry_point("classify")

        workflow.add_conditional_edges(
            "classify",
            self._should_lookup_policy,
            {
                "policy": "policy_lookup",
                "data": "generate",
            },
        )
        workflow.add_conditional_edges(
            "policy_lookup",
            self._should_answer_from_handbook,
            {
                "answer": "policy_answer",
                "data": "generate",
            },
        )
        workflow.add_conditional_edges(
            "generate",
            self._should_extract,
            {
                "extract": "extract",
                "error": END,
            },
        )
        workflow.add_conditional_edges(
            "extract",
            self._should_execute,
            {
                "execute": "execute",
                "answer": "direct_answer",
            },
        )
        workflow.add_conditional_edges(
            "execute",
            self._route_query_outcome,
            {
                "error": "query_error",
                "empty": "no_results",
                "rows": "format",
            },
        )

        for stage in ("policy_answer", "direct_answer", "query_error", "no_results", "format"):
            workflow.add_edge(stage, "persist")
        workflow.add_edge("persist", END)

        return workflow.compile()

    # ========================================================================
    # Public API
    # ========================================================================

    def validate(
        self,
        message: str | None,
        role: RoleProfile,
        hr_id: str | None = None,
        hr_email: str | None = None,
    ) -> str | None:
        """Return the validation error for a request, or None when it may proceed."""
        if not message or not message.strip():
            return MESSAGE_REQUIRED
        if role.requires_identity and not (hr_id or hr_email):
            return IDENTITY_REQUIRED
        return None

    async def run(
        self,
        message: str,
        history: Sequence[HistoryMessage | dict[str, str]] | None,
        session: SessionContext,
        role: RoleProfile | str = "standard",
        hr_id: str | None = None,
        hr_email: str | None = None,
    ) -> PipelineOutcome:
        """
        Answer one chat message.

        Args:
            message: User message
            history: Caller-supplied prior messages ({role, content})
            session: Session context before this message
            role: Role profile or its name
            hr_id: HR caller identifier (elevated role)
            hr_email: HR caller email (elevated role)

        Returns:
            PipelineOutcome with the response body and the updated session
        """
        profile = role if isinstance(role, RoleProfile) else get_role(role)

        error = self.validate(message, profile, hr_id, hr_email)
        if error is not None:
            logger.info(f"Rejected chat request: {error}")
            body = ChatResponse(success=False, error=error).to_body()
            return PipelineOutcome(status_code=400, body=body, session=session)

        if profile.requires_identity:
            session = session.with_identity(hr_id, hr_email)

        initial_state: PipelineState = {
            "message": message,
            "history": self._normalize_history(history),
            "role": profile,
            "session": session,
            "classification": None,
            "policy_sections": [],
            "previous_context": "",
            "reply": None,
            "statement": None,
            "extraction_method": None,
            "query_outcome": None,
            "status_code": 200,
            "response": None,
            "log_response": None,
            "log_sql": None,
            "current_stage": None,
            "llm_calls": 0,
            "stage_timings": {},
        }

        logger.info(
            f"Starting {profile.name} pipeline for message: {message[:100]}",
            extra={"session_id": session.session_id, "role": profile.name},
        )
        start_time = time.time()

        result = await self.graph.ainvoke(initial_state)

        total_time = (time.time() - start_time) * 1000
        logger.info(
            f"Pipeline complete in {total_time:.1f}ms ({result.get('llm_calls', 0)} LLM calls)",
            extra={"stage_timings": result.get("stage_timings", {})},
        )

        response = result["response"]
        if profile.access_level:
            response = response.model_copy(update={"access_level": profile.access_level})

        return PipelineOutcome(
            status_code=result.get("status_code", 200),
            body=response.to_body(),
            session=result["session"],
        )

    # ========================================================================
    # Nodes
    # ========================================================================

    async def _run_classify(self, state: PipelineState) -> PipelineState:
        start_time = time.time()
        state["current_stage"] = "classify"

        classification = self.classifier.classify(state["message"])
        state["classification"] = classification
        if not classification.is_policy:
            logger.info(f"Not a policy question: {classification.reason}")

        self._record_timing(state, "classify", start_time)
        return state

    async def _run_policy_lookup(self, state: PipelineState) -> PipelineState:
        start_time = time.time()
        state["current_stage"] = "policy_lookup"
        logger.info(f"Policy question detected: {state['classification'].reason}")

        state["policy_sections"] = await self.handbook.search(state["message"])
        if not state["policy_sections"]:
            logger.info("No relevant handbook content found, continuing with data path")

        self._record_timing(state, "policy_lookup", start_time)
        return state

    async def _run_policy_answer(self, state: PipelineState) -> PipelineState:
        start_time = time.time()
        state["current_stage"] = "policy_answer"
        sections = state["policy_sections"]
        organization = self.config.organization_name

        prompt = self.prompts.render(
            "agents/policy_answer.md",
            question=state["message"],
            organization_name=organization,
            sections=sections,
        )
        system_prompt = self.prompts.render(
            "system/policy_assistant.md", organization_name=organization
        )

        try:
            state["llm_calls"] += 1
            response = await self.llm.generate(
                LLMRequest.from_conversation(
                    [{"role": "user", "content": prompt}], system_prompt=system_prompt
                )
            )
            answer = response.content.strip()
        except LLMError as exc:
            logger.error(f"Policy answer call failed: {exc}")
            answer = POLICY_ERROR_ANSWER

        state["response"] = ChatResponse(
            success=True,
            response=answer,
            is_policy_answer=True,
            source=self.config.handbook_source,
            policy_pages=[section.page_number for section in sections if section.page_number],
        )
        state["log_response"] = answer
        state["log_sql"] = None

        self._record_timing(state, "policy_answer", start_time)
        return state

    async def _run_generate(self, state: PipelineState) -> PipelineState:
        start_time = time.time()
        state["current_stage"] = "generate"
        limits = self.config.pipeline
        role = state["role"]
        session = state["session"]

        schema_text = await self.catalog.get_enhanced_schema()
        system_prompt = self.prompts.render(
            "system/sql_assistant.md",
            schema_text=schema_text,
            full_access=role.full_access,
            hr_id=session.hr_id,
            examples=role.examples,
        )

        previous_context = session.recent_query_summaries(limits.context_prompt_queries)
        state["previous_context"] = previous_context

        message = state["message"].strip()
        if previous_context:
            message = (
                f"Context from conversation:\n{previous_context}\n\nCurrent question: {message}"
            )

        recent_history = self._recent_history(state)
        if recent_history:
            logger.debug(f"Including {len(recent_history)} previous messages for context")

        try:
            state["llm_calls"] += 1
            response = await self.llm.generate(
                LLMRequest.from_conversation(
                    [*recent_history, {"role": "user", "content": message}],
                    system_prompt=system_prompt,
                )
            )
        except LLMError as exc:
            logger.error(f"Query generation call failed: {exc}")
            state["status_code"] = 500
            state["response"] = ChatResponse(success=False, error=str(exc))
            self._record_timing(state, "generate", start_time)
            return state

        state["reply"] = response.content.strip()
        logger.debug(f"Reply received: {state['reply'][:200]}")

        self._record_timing(state, "generate", start_time)
        return state

    async def _run_extract(self, state: PipelineState) -> PipelineState:
        start_time = time.time()
        state["current_stage"] = "extract"

        extraction = self.extractor.extract(state["reply"] or "")
        state["statement"] = extraction.statement
        state["extraction_method"] = extraction.method
        if extraction.statement:
            logger.info(
                f"Statement extracted ({extraction.method}): {extraction.statement[:150]}"
            )

        self._record_timing(state, "extract", start_time)
        return state

    async def _run_direct_answer(self, state: PipelineState) -> PipelineState:
        state["current_stage"] = "direct_answer"
        logger.info("Direct answer (no query)")

        answer = state["reply"] or ""
        state["response"] = ChatResponse(success=True, response=answer)
        state["log_response"] = answer
        state["log_sql"] = None
        return state

    async def _run_execute(self, state: PipelineState) -> PipelineState:
        start_time = time.time()
        state["current_stage"] = "execute"

        state["query_outcome"] = await self.executor.execute(state["statement"])

        self._record_timing(state, "execute", start_time)
        return state

    async def _run_query_error(self, state: PipelineState) -> PipelineState:
        state["current_stage"] = "query_error"
        error = state["query_outcome"].error
        statement = state["statement"]
        logger.warning(f"Query failed: {error}")

        state["response"] = ChatResponse(
            success=False, error=f"Database error: {error}", sql=statement
        )
        state["log_response"] = f"Query error: {error}"
        state["log_sql"] = statement
        return state

    async def _run_no_results(self, state: PipelineState) -> PipelineState:
        state["current_stage"] = "no_results"
        statement = state["statement"]

        state["response"] = ChatResponse(
            success=True, response=NO_RECORDS_FOUND, count=0, sql=statement
        )
        state["log_response"] = NO_RECORDS_FOUND
        state["log_sql"] = statement
        return state

    async def _run_format(self, state: PipelineState) -> PipelineState:
        start_time = time.time()
        state["current_stage"] = "format"
        outcome = state["query_outcome"]
        statement = state["statement"]
        question = state["message"]

        session = state["session"].push_query(question, statement, outcome.row_count)

        state["llm_calls"] += 1
        answer = await self.synthesizer.synthesize(
            question=question,
            sql=statement,
            rows=outcome.rows,
            total_count=outcome.row_count,
            previous_context=state["previous_context"],
        )

        session = session.push_result(question, answer, outcome.row_count)
        state["session"] = session

        state["response"] = ChatResponse(
            success=True,
            response=answer,
            count=outcome.row_count,
            sql=statement,
            context=QueryContextInfo(
                has_history=bool(self._recent_history(state)),
                previous_queries=len(session.previous_queries),
            ),
        )
        state["log_response"] = answer
        state["log_sql"] = statement

        self._record_timing(state, "format", start_time)
        return state

    async def _run_persist(self, state: PipelineState) -> PipelineState:
        start_time = time.time()
        state["current_stage"] = "persist"

        await self.chat_logs.save_chat(
            ChatTurn(
                session_id=state["session"].session_id,
                message=state["message"],
                response=state["log_response"] or "",
                sql_executed=state["log_sql"],
            )
        )

        self._record_timing(state, "persist", start_time)
        return state

    # ========================================================================
    # Routing
    # ========================================================================

    def _should_lookup_policy(self, state: PipelineState) -> str:
        classification = state["classification"]
        if classification.is_policy and state["role"].policy_lookup:
            return "policy"
        return "data"

    def _should_answer_from_handbook(self, state: PipelineState) -> str:
        return "answer" if state.get("policy_sections") else "data"

    def _should_extract(self, state: PipelineState) -> str:
        return "error" if state.get("response") is not None else "extract"

    def _should_execute(self, state: PipelineState) -> str:
        return "execute" if state.get("statement") else "answer"

    def _route_query_outcome(self, state: PipelineState) -> str:
        outcome = state["query_outcome"]
        if not outcome.ok:
            return "error"
        if outcome.row_count == 0:
            return "empty"
        return "rows"

    # ========================================================================
    # Helpers
    # ========================================================================

    def _recent_history(self, state: PipelineState) -> list[dict[str, str]]:
        limit = self.config.pipeline.history_messages
        if limit <= 0:
            return []
        return state["history"][-limit:]

    def _normalize_history(
        self, history: Sequence[HistoryMessage | dict[str, str]] | None
    ) -> list[dict[str, str]]:
        messages: list[dict[str, str]] = []
        for item in history or []:
            if isinstance(item, HistoryMessage):
                messages.append({"role": item.role, "content": item.content})
            else:
                messages.append({"role": item["role"], "content": item["content"]})
        return messages

    def _record_timing(self, state: PipelineState, stage: str, start_time: float) -> None:
        elapsed = (time.time() - start_time) * 1000
        state["stage_timings"] = {**state.get("stage_timings", {}), stage: elapsed}


# ============================================================================
# Factory
# ============================================================================


async def create_pipeline(database_url: str | None = None) -> HRChatPipeline:
    """
    Create an HRChatPipeline with a connected MySQL connector.

    Args:
        database_url: Database connection URL (uses config if not provided)

    Returns:
        Initialized pipeline
    """
    from hrchat.connectors.factory import create_connector
    from hrchat.llm.factory import LLMProviderFactory

    config = get_settings()

    db_url = database_url or (str(config.database.url) if config.database.url else None)
    if not db_url:
        raise ValueError("DATABASE_URL must be set or provided to create a pipeline.")

    connector = create_connector(
        database_url=db_url,
        pool_size=config.database.pool_size,
        timeout=config.database.timeout,
    )
    await connector.connect()

    llm_provider = LLMProviderFactory.create_default_provider(config.llm)
    return HRChatPipeline(llm_provider, connector, settings=config)
