"""
FastAPI Application

Main FastAPI application for the HR chat assistant with:
- Lifespan management for connector, completion client and pipeline
- CORS middleware for the chat widget
- Global exception handlers returning ``{success: false, error}``
- Chat, admin and health endpoints

Usage:
    uvicorn hrchat.api.main:app --reload --port 3000
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from hrchat.api.routes import admin, chat, health
from hrchat.config import get_settings
from hrchat.connectors.base import BaseConnector
from hrchat.connectors.base import ConnectionError as ConnectorConnectionError
from hrchat.connectors.factory import create_connector
from hrchat.llm.factory import LLMProviderFactory
from hrchat.pipeline.orchestrator import HRChatPipeline
from hrchat.pipeline.session_store import SessionStore

logger = logging.getLogger(__name__)

# Global state for pipeline and components
app_state = {
    "pipeline": None,
    "connector": None,
    "llm_provider": None,
    "session_store": None,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Lifespan context manager for startup and shutdown.

    Initializes:
    - Session store
    - Database connector (MySQL pool)
    - Completion client (Anthropic)
    - Pipeline orchestrator
    """
    config = get_settings()
    logger.info(f"Starting {config.app_name} API server...")

    try:
        app_state["session_store"] = SessionStore(ttl_seconds=config.session.ttl_seconds)

        # Initialize database connector
        logger.info("Initializing database connector...")
        if config.database.url:
            connector = create_connector(
                database_url=str(config.database.url),
                pool_size=config.database.pool_size,
                timeout=config.database.timeout,
            )
            try:
                await connector.connect()
                app_state["connector"] = connector
            except ConnectorConnectionError as e:
                logger.error(f"Database unavailable at startup: {e}")
                app_state["connector"] = None
        else:
            logger.warning("DATABASE_URL not set; database connector not initialized.")
            app_state["connector"] = None

        # Initialize completion client
        logger.info("Initializing completion client...")
        try:
            app_state["llm_provider"] = LLMProviderFactory.create_default_provider(config.llm)
        except ValueError as e:
            logger.warning(f"Completion client not initialized: {e}")
            app_state["llm_provider"] = None

        # Initialize pipeline
        logger.info("Initializing pipeline orchestrator...")
        if app_state["connector"] is not None and app_state["llm_provider"] is not None:
            app_state["pipeline"] = HRChatPipeline(
                app_state["llm_provider"],
                app_state["connector"],
                settings=config,
            )
        else:
            logger.warning("Pipeline not initialized; database or completion client is missing.")
            app_state["pipeline"] = None

        logger.info(f"{config.app_name} API server started successfully")

        yield  # Application runs here

    finally:
        logger.info(f"Shutting down {config.app_name} API server...")

        if app_state["connector"]:
            try:
                await app_state["connector"].close()
                logger.info("Database connector closed")
            except ConnectorConnectionError as e:
                logger.error(f"Error closing connector: {e}")

        app_state["pipeline"] = None
        app_state["connector"] = None
        app_state["llm_provider"] = None
        app_state["session_store"] = None

        logger.info("API server shut down complete")


config = get_settings()

# Create FastAPI app
app = FastAPI(
    title=f"{config.app_name} API",
    description="Natural-language HR questions answered from the HR database and handbook",
    version=config.version,
    lifespan=lifespan,
)

# CORS middleware for the chat widget
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origin_list,
    allow_credentials="*" not in config.cors_origin_list,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info(f"{request.method} {request.url.path}")
    return await call_next(request)


# Exception handlers
@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed request bodies are client errors, reported in the chat error shape."""
    logger.info(f"Invalid request body: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "error": "Invalid request body"},
    )


@app.exception_handler(ConnectorConnectionError)
async def connection_error_handler(request: Request, exc: ConnectorConnectionError) -> JSONResponse:
    """Handle database connection errors."""
    logger.error(f"Database connection error: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "success": False,
            "error": "Database connection failed. Please try again later.",
        },
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler: the request fails, the process keeps serving."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "error": str(exc) or exc.__class__.__name__},
    )


# Include routers
app.include_router(health.router, prefix="/api", tags=["health"])
app.include_router(chat.router, prefix="/api", tags=["chat"])
app.include_router(admin.router, prefix="/api/admin", tags=["admin"])


# Root endpoint
@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with API information."""
    return {
        "name": f"{config.app_name} API",
        "version": config.version,
        "description": "HR database and handbook assistant",
        "docs": "/docs",
    }


def get_pipeline() -> HRChatPipeline:
    """Get the initialized pipeline instance."""
    if app_state["pipeline"] is None:
        raise RuntimeError("Pipeline not initialized")
    return app_state["pipeline"]


def get_connector() -> BaseConnector:
    """Get the initialized database connector."""
    if app_state["connector"] is None:
        raise RuntimeError("Connector not initialized")
    return app_state["connector"]
