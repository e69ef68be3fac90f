"""Prometheus metrics for the recipe agent.

Provides metrics instrumentation for:
- HTTP request latency and counts
- Agent runs, iterations and tool calls
- LLM token usage and latency
- Embedding request latency
- Recipe retrieval results and scores
"""

import time
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    Histogram,
    generate_latest,
)
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

# HTTP Request Metrics
HTTP_REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint", "status_code"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

HTTP_REQUEST_TOTAL = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

# Agent Metrics
AGENT_RUN_DURATION = Histogram(
    "agent_run_duration_seconds",
    "Agent run duration in seconds",
    ["terminated_by"],
    buckets=[0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0, 120.0],
)

AGENT_RUN_TOTAL = Counter(
    "agent_runs_total",
    "Total agent runs",
    ["terminated_by"],
)

AGENT_ITERATIONS = Histogram(
    "agent_iterations",
    "Model round trips per agent run",
    buckets=[1, 2, 3, 4, 5, 8, 10],
)

TOOL_CALL_TOTAL = Counter(
    "agent_tool_calls_total",
    "Total tool calls executed by the agent",
    ["tool", "status"],
)

# LLM Metrics
LLM_REQUEST_DURATION = Histogram(
    "llm_request_duration_seconds",
    "LLM request duration in seconds",
    ["model", "status"],
    buckets=[0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0, 120.0],
)

LLM_TOKENS_TOTAL = Counter(
    "llm_tokens_total",
    "Total LLM tokens used",
    ["model", "type"],  # "type" label values: prompt, completion
)

LLM_REQUEST_TOTAL = Counter(
    "llm_requests_total",
    "Total LLM requests",
    ["model", "status"],
)

# Embedding Metrics
EMBEDDING_REQUEST_DURATION = Histogram(
    "embedding_request_duration_seconds",
    "Embedding request duration in seconds",
    ["model", "status"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0],
)

EMBEDDING_REQUEST_TOTAL = Counter(
    "embedding_requests_total",
    "Total embedding requests",
    ["model", "status"],
)

EMBEDDING_BATCH_SIZE = Histogram(
    "embedding_batch_size",
    "Embedding batch size",
    ["model"],
    buckets=[1, 5, 10, 25, 50, 100, 250, 500],
)

# Retrieval Metrics
RETRIEVAL_RECIPES_RETURNED = Histogram(
    "retrieval_recipes_returned",
    "Number of recipes returned per search",
    buckets=[0, 1, 2, 3, 5, 10, 20],
)

RETRIEVAL_CORPUS_SIZE = Histogram(
    "retrieval_corpus_size",
    "Recipes scanned per search",
    buckets=[0, 10, 50, 100, 500, 1000, 2500, 5000],
)

RETRIEVAL_TOP_SCORE = Histogram(
    "retrieval_top_score",
    "Top similarity score per search",
    buckets=[0.1, 0.2, 0.3, 0.4, 0.5, 0.6, 0.7, 0.8, 0.9, 1.0],
)


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware to collect HTTP request metrics."""

    def __init__(self, app: ASGIApp) -> None:
        super().__init__(app)

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Process request and collect metrics."""
        # Skip metrics endpoint to avoid recursion
        if request.url.path == "/metrics":
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start_time

        endpoint = self._normalize_endpoint(request.url.path)

        HTTP_REQUEST_DURATION.labels(
            method=request.method,
            endpoint=endpoint,
            status_code=response.status_code,
        ).observe(duration)

        HTTP_REQUEST_TOTAL.labels(
            method=request.method,
            endpoint=endpoint,
            status_code=response.status_code,
        ).inc()

        return response

    def _normalize_endpoint(self, path: str) -> str:
        """Normalize endpoint path to reduce cardinality."""
        if path.startswith("/health"):
            return "/health"
        if path.startswith("/api/v1/"):
            parts = path.split("/")
            if len(parts) >= 4:
                return f"/api/v1/{parts[3]}"
        return path


def get_metrics() -> bytes:
    """Generate Prometheus metrics output."""
    return generate_latest()


def get_metrics_content_type() -> str:
    """Get the content type for metrics response."""
    return CONTENT_TYPE_LATEST


def track_agent_run(
    terminated_by: str,
    duration: float,
    iterations: int,
) -> None:
    """Track one completed agent run.

    Args:
        terminated_by: Terminal state (final_answer, iteration_limit, error).
        duration: Run duration in seconds.
        iterations: Model round trips performed.
    """
    AGENT_RUN_DURATION.labels(terminated_by=terminated_by).observe(duration)
    AGENT_RUN_TOTAL.labels(terminated_by=terminated_by).inc()
    AGENT_ITERATIONS.observe(iterations)


def track_tool_call(tool: str, success: bool = True) -> None:
    """Track one tool execution."""
    TOOL_CALL_TOTAL.labels(tool=tool, status="success" if success else "error").inc()


def track_llm_request(
    model: str,
    duration: float,
    prompt_tokens: int,
    completion_tokens: int,
    success: bool = True,
) -> None:
    """Track LLM request metrics.

    Args:
        model: LLM model name.
        duration: Request duration in seconds.
        prompt_tokens: Number of prompt tokens.
        completion_tokens: Number of completion tokens.
        success: Whether the request succeeded.
    """
    status = "success" if success else "error"

    LLM_REQUEST_DURATION.labels(model=model, status=status).observe(duration)
    LLM_REQUEST_TOTAL.labels(model=model, status=status).inc()

    if success:
        LLM_TOKENS_TOTAL.labels(model=model, type="prompt").inc(prompt_tokens)
        LLM_TOKENS_TOTAL.labels(model=model, type="completion").inc(completion_tokens)


def track_embedding_request(
    model: str,
    duration: float,
    batch_size: int,
    success: bool = True,
) -> None:
    """Track embedding request metrics.

    Args:
        model: Embedding model name.
        duration: Request duration in seconds.
        batch_size: Number of texts in the batch.
        success: Whether the request succeeded.
    """
    status = "success" if success else "error"

    EMBEDDING_REQUEST_DURATION.labels(model=model, status=status).observe(duration)
    EMBEDDING_REQUEST_TOTAL.labels(model=model, status=status).inc()
    EMBEDDING_BATCH_SIZE.labels(model=model).observe(batch_size)


def track_retrieval_request(
    recipes_returned: int,
    corpus_size: int,
    top_score: float,
) -> None:
    """Track recipe retrieval metrics.

    Args:
        recipes_returned: Recipes left after the similarity threshold.
        corpus_size: Recipes scanned by the index.
        top_score: Highest similarity score, 0 when nothing matched.
    """
    RETRIEVAL_RECIPES_RETURNED.observe(recipes_returned)
    RETRIEVAL_CORPUS_SIZE.observe(corpus_size)
    if top_score > 0:
        RETRIEVAL_TOP_SCORE.observe(top_score)
