"""FastAPI application entry point.

Configures the application with logging, exception handling, metrics,
health checks and the chat routes.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from recipe_agent import __version__
from recipe_agent.agent.orchestrator import ConversationAgent
from recipe_agent.agent.tools import ToolExecutor
from recipe_agent.api.routes import router
from recipe_agent.config import get_settings
from recipe_agent.embeddings.service import HTTPEmbeddingService
from recipe_agent.exceptions import ErrorCode, RecipeAgentError
from recipe_agent.llm.client import OpenAICompatibleClient
from recipe_agent.logging_config import get_logger, setup_logging
from recipe_agent.observability.metrics import (
    MetricsMiddleware,
    get_metrics,
    get_metrics_content_type,
)
from recipe_agent.recipes.repository import QdrantRecipeRepository
from recipe_agent.retrieval.retriever import RecipeRetriever

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Wires the agent and its collaborators on startup and closes their
    clients on shutdown.
    """
    # Startup
    settings = get_settings()
    setup_logging(level=settings.log_level)
    logger.info(
        "Starting Recipe Agent",
        extra={
            "version": __version__,
            "environment": settings.environment.value,
            "llm_model": settings.llm.model,
            "embedding_model": settings.embedding.model,
        },
    )

    embedding_service = HTTPEmbeddingService(settings.embedding)
    repository = QdrantRecipeRepository(settings.qdrant)
    llm_client = OpenAICompatibleClient(settings.llm)

    retriever = RecipeRetriever(embedding_service, repository)
    app.state.retriever = retriever
    app.state.agent = ConversationAgent(
        llm_client,
        ToolExecutor(retriever, settings.agent),
        settings.agent,
    )

    yield

    # Shutdown
    logger.info("Shutting down Recipe Agent")
    app.state.agent = None
    app.state.retriever = None
    await llm_client.close()
    await embedding_service.close()
    await repository.close()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="Recipe Agent",
        description="Conversational recipe search backed by k-NN retrieval",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    app.add_middleware(MetricsMiddleware)

    # Register exception handlers
    app.add_exception_handler(RecipeAgentError, recipe_agent_exception_handler)

    # Register routes
    app.add_api_route("/health", health_check, methods=["GET"], tags=["Health"])
    app.add_api_route("/health/ready", readiness_check, methods=["GET"], tags=["Health"])
    app.add_api_route("/health/live", liveness_check, methods=["GET"], tags=["Health"])
    app.add_api_route(
        "/metrics",
        metrics_endpoint,
        methods=["GET"],
        tags=["Observability"],
        include_in_schema=False,
    )
    app.include_router(router)

    return app


async def recipe_agent_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle RecipeAgentError exceptions.

    Converts exceptions to structured JSON responses.
    """
    if not isinstance(exc, RecipeAgentError):
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "code": ErrorCode.INTERNAL_ERROR.value,
                    "message": "Internal error",
                    "details": {},
                }
            },
        )

    logger.error(
        f"Request failed: {exc.message}",
        extra={
            "error_code": exc.code.value,
            "path": request.url.path,
            "details": exc.details,
        },
    )

    return JSONResponse(
        status_code=_get_status_code(exc.code),
        content=exc.to_dict(),
    )


def _get_status_code(error_code: ErrorCode) -> int:
    """Map error code to HTTP status code."""
    if error_code in (
        ErrorCode.VALIDATION_ERROR,
        ErrorCode.TRANSCRIPT_INVALID,
        ErrorCode.TOOL_ARGUMENTS_INVALID,
    ):
        return 400

    if error_code in (
        ErrorCode.LLM_RATE_LIMIT,
        ErrorCode.LLM_QUOTA_EXCEEDED,
        ErrorCode.EMBEDDING_QUOTA_EXCEEDED,
    ):
        return 429

    if error_code in (ErrorCode.LLM_TIMEOUT, ErrorCode.EMBEDDING_TIMEOUT):
        return 504

    if error_code in (
        ErrorCode.LLM_SERVICE_ERROR,
        ErrorCode.EMBEDDING_SERVICE_ERROR,
        ErrorCode.VECTOR_STORE_ERROR,
    ):
        return 503

    return 500


async def health_check() -> dict[str, Any]:
    """Basic health check endpoint.

    Returns:
        Health status with version and timestamp.
    """
    return {
        "status": "healthy",
        "version": __version__,
        "timestamp": datetime.now(UTC).isoformat(),
    }


async def readiness_check(request: Request) -> dict[str, Any]:
    """Kubernetes readiness probe.

    Reports whether the agent and retriever have been wired.
    """
    state = request.app.state
    checks: dict[str, str] = {
        "config": "ok",
        "agent": "ok" if getattr(state, "agent", None) else "not_configured",
        "retriever": "ok" if getattr(state, "retriever", None) else "not_configured",
    }

    all_ok = all(v == "ok" for v in checks.values())

    return {
        "status": "ready" if all_ok else "not_ready",
        "checks": checks,
        "timestamp": datetime.now(UTC).isoformat(),
    }


async def liveness_check() -> dict[str, str]:
    """Kubernetes liveness probe."""
    return {"status": "alive"}


async def metrics_endpoint() -> Response:
    """Prometheus scrape endpoint."""
    return Response(content=get_metrics(), media_type=get_metrics_content_type())


# Create the application instance
app = create_app()
