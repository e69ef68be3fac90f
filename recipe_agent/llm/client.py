"""LLM client interface and implementations."""

import time
from abc import ABC, abstractmethod
from typing import Any

import httpx

from recipe_agent.config import LLMSettings, get_settings
from recipe_agent.exceptions import ErrorCode, LLMError, provider_error_code
from recipe_agent.llm.models import (
    FunctionCall,
    GenerationResult,
    Message,
    ToolCall,
    ToolDefinition,
)
from recipe_agent.logging_config import get_logger
from recipe_agent.observability.metrics import track_llm_request

logger = get_logger(__name__)


class LLMClient(ABC):
    """Abstract base class for LLM clients.

    Defines the interface for tool-aware chat completion.
    """

    @abstractmethod
    async def complete(
        self,
        messages: list[Message],
        tools: list[ToolDefinition] | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> GenerationResult:
        """Request one assistant turn.

        Args:
            messages: Conversation so far, in order.
            tools: Functions the model may call.
            temperature: Sampling temperature override.
            max_tokens: Maximum tokens override.

        Returns:
            GenerationResult with text and/or tool calls.

        Raises:
            LLMError: If the completion fails.
        """
        ...

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Get the model name."""
        ...


class OpenAICompatibleClient(LLMClient):
    """LLM client for OpenAI-compatible chat completion APIs.

    Works with:
    - OpenAI API
    - vLLM
    - Ollama (localhost:11434/v1)
    - Any OpenAI-compatible endpoint that supports tools
    """

    def __init__(
        self,
        settings: LLMSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the OpenAI-compatible client.

        Args:
            settings: LLM configuration.
            client: HTTP client (for testing).
        """
        self._settings = settings or get_settings().llm
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._settings.timeout,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def model_name(self) -> str:
        """Get the model name."""
        return self._settings.model

    def _build_payload(
        self,
        messages: list[Message],
        tools: list[ToolDefinition] | None,
        temperature: float | None,
        max_tokens: int | None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "model": self._settings.model,
            "messages": [msg.to_api_dict() for msg in messages],
            "temperature": (
                temperature if temperature is not None else self._settings.temperature
            ),
            "max_tokens": max_tokens or self._settings.max_tokens,
        }
        if tools:
            payload["tools"] = [tool.to_api_dict() for tool in tools]
            payload["tool_choice"] = "auto"
        return payload

    async def complete(
        self,
        messages: list[Message],
        tools: list[ToolDefinition] | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> GenerationResult:
        """Request one assistant turn from the chat completions API."""
        client = await self._get_client()
        url = f"{self._settings.base_url}/chat/completions"
        payload = self._build_payload(messages, tools, temperature, max_tokens)

        headers = {}
        api_key = self._settings.api_key.get_secret_value()
        if api_key != "not-required":
            headers["Authorization"] = f"Bearer {api_key}"

        start = time.perf_counter()
        try:
            response = await client.post(url, json=payload, headers=headers)
            response.raise_for_status()
            result = self._parse_response(response)

        except LLMError:
            self._track_failure(start)
            raise

        except httpx.TimeoutException as e:
            self._track_failure(start)
            logger.error(f"LLM request timed out: {e}")
            raise LLMError(
                "LLM request timed out",
                code=ErrorCode.LLM_TIMEOUT,
                details={"timeout": self._settings.timeout},
            ) from e

        except httpx.HTTPStatusError as e:
            self._track_failure(start)
            status = e.response.status_code
            provider_code = provider_error_code(e.response)
            logger.error(
                f"LLM request failed: {status}",
                extra={"status": status, "provider_code": provider_code},
            )

            if provider_code == "insufficient_quota":
                raise LLMError(
                    "LLM quota exceeded",
                    code=ErrorCode.LLM_QUOTA_EXCEEDED,
                    details={"status_code": status},
                ) from e

            if status == 429:
                raise LLMError(
                    "Rate limit exceeded",
                    code=ErrorCode.LLM_RATE_LIMIT,
                    details={"status_code": status},
                ) from e

            raise LLMError(
                f"LLM service returned {status}",
                code=ErrorCode.LLM_SERVICE_ERROR,
                details={"status_code": status, "provider_code": provider_code},
            ) from e

        except httpx.RequestError as e:
            self._track_failure(start)
            logger.error(f"LLM connection error: {e}")
            raise LLMError(
                f"Failed to connect to LLM service: {e}",
                code=ErrorCode.LLM_SERVICE_ERROR,
                details={"url": url},
            ) from e

        track_llm_request(
            model=result.model,
            duration=time.perf_counter() - start,
            prompt_tokens=result.prompt_tokens,
            completion_tokens=result.completion_tokens,
        )
        return result

    def _track_failure(self, start: float) -> None:
        track_llm_request(
            model=self._settings.model,
            duration=time.perf_counter() - start,
            prompt_tokens=0,
            completion_tokens=0,
            success=False,
        )

    def _parse_response(self, response: httpx.Response) -> GenerationResult:
        """Turn a chat completions response body into a GenerationResult."""
        try:
            data = response.json()
            message = data["choices"][0]["message"]
            usage = data.get("usage") or {}

            tool_calls = [
                ToolCall(
                    id=raw["id"],
                    type=raw.get("type", "function"),
                    function=FunctionCall(
                        name=raw["function"]["name"],
                        arguments=raw["function"].get("arguments") or "{}",
                    ),
                )
                for raw in message.get("tool_calls") or []
            ]

            return GenerationResult(
                content=message.get("content"),
                tool_calls=tool_calls,
                model=data.get("model", self._settings.model),
                prompt_tokens=usage.get("prompt_tokens", 0),
                completion_tokens=usage.get("completion_tokens", 0),
                total_tokens=usage.get("total_tokens", 0),
            )

        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise LLMError(
                f"Invalid response from LLM: {e}",
                code=ErrorCode.LLM_SERVICE_ERROR,
                details={"error": str(e)},
            ) from e
