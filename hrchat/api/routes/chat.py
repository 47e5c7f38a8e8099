"""
Chat Routes

FastAPI endpoints for the three chat roles. They share one handler and one
pipeline; the role profile decides identity requirements, prompt access
and the response access tag.
"""

import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from hrchat.config import get_settings
from hrchat.models.api import ChatRequest, ChatResponse
from hrchat.pipeline.roles import HR, MANAGER, STANDARD, RoleProfile
from hrchat.pipeline.session_context import SessionContext

logger = logging.getLogger(__name__)

router = APIRouter()

SERVICE_UNAVAILABLE = "Chat service is not initialized. Check database and API key settings."


@router.post("/chat", response_model=ChatResponse, response_model_exclude_none=True)
async def chat(request: Request, chat_request: ChatRequest) -> JSONResponse:
    """Answer a question for a general staff member."""
    return await _handle_chat(request, chat_request, STANDARD)


@router.post("/manager", response_model=ChatResponse, response_model_exclude_none=True)
async def manager_chat(request: Request, chat_request: ChatRequest) -> JSONResponse:
    """Answer a question for a manager."""
    return await _handle_chat(request, chat_request, MANAGER)


@router.post("/chat/hr", response_model=ChatResponse, response_model_exclude_none=True)
async def hr_chat(request: Request, chat_request: ChatRequest) -> JSONResponse:
    """
    Answer a question for an HR user.

    Requires ``hrId`` or ``hrEmail`` in the body. Responses carry
    ``accessLevel: "hr"``.
    """
    return await _handle_chat(request, chat_request, HR)


async def _handle_chat(
    request: Request, chat_request: ChatRequest, role: RoleProfile
) -> JSONResponse:
    from hrchat.api.main import app_state

    pipeline = app_state["pipeline"]
    store = app_state["session_store"]
    if pipeline is None or store is None:
        logger.warning(f"{role.name} chat requested before pipeline initialization")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=ChatResponse(success=False, error=SERVICE_UNAVAILABLE).to_body(),
        )

    logger.info(f"{role.name} chat request received: {(chat_request.message or '')[:100]}")

    # Rejected requests never create a session
    error = pipeline.validate(
        chat_request.message, role, chat_request.hr_id, chat_request.hr_email
    )
    if error is not None:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ChatResponse(success=False, error=error).to_body(),
        )

    settings = get_settings()
    cookie_value = request.cookies.get(settings.session.cookie_name)

    def new_session() -> SessionContext:
        return SessionContext.new(
            role=role.name,
            prefix=role.session_prefix,
            hr_id=chat_request.hr_id,
            hr_email=chat_request.hr_email,
            window_size=settings.pipeline.context_window_size,
        )

    async with store.session(cookie_value, new_session) as handle:
        outcome = await pipeline.run(
            chat_request.message,
            chat_request.history,
            handle.context,
            role=role,
            hr_id=chat_request.hr_id,
            hr_email=chat_request.hr_email,
        )
        handle.context = outcome.session

    response = JSONResponse(status_code=outcome.status_code, content=outcome.body)
    response.set_cookie(
        key=settings.session.cookie_name,
        value=handle.context.session_id,
        max_age=settings.session.ttl_seconds,
        httponly=True,
        samesite="lax",
        secure=settings.session.cookie_secure,
    )
    return response
