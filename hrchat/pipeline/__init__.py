"""
Pipeline package for the HR chat assistant.

Contains the LangGraph orchestrator, role profiles and session handling.
"""

from hrchat.pipeline.orchestrator import HRChatPipeline, PipelineOutcome, create_pipeline
from hrchat.pipeline.roles import HR, MANAGER, ROLES, STANDARD, RoleProfile, get_role
from hrchat.pipeline.session_context import SessionContext, generate_session_id
from hrchat.pipeline.session_store import SessionStore

__all__ = [
    "HRChatPipeline",
    "PipelineOutcome",
    "create_pipeline",
    "RoleProfile",
    "ROLES",
    "STANDARD",
    "MANAGER",
    "HR",
    "get_role",
    "SessionContext",
    "SessionStore",
    "generate_session_id",
]
