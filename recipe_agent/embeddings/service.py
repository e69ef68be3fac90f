"""Embedding service interface and implementations."""

import time
from abc import ABC, abstractmethod

import httpx

from recipe_agent.config import EmbeddingSettings, get_settings
from recipe_agent.embeddings.models import EmbeddingResult
from recipe_agent.exceptions import EmbeddingError, ErrorCode, provider_error_code
from recipe_agent.logging_config import get_logger
from recipe_agent.observability.metrics import track_embedding_request

logger = get_logger(__name__)


class EmbeddingService(ABC):
    """Abstract base class for embedding services.

    Defines the interface for generating text embeddings.
    """

    @abstractmethod
    async def embed(self, text: str) -> EmbeddingResult:
        """Generate embedding for a single text.

        Args:
            text: Text to embed.

        Returns:
            EmbeddingResult with vector.

        Raises:
            EmbeddingError: If embedding fails.
        """
        ...

    @abstractmethod
    async def embed_batch(self, texts: list[str]) -> list[EmbeddingResult]:
        """Generate embeddings for multiple texts.

        Args:
            texts: List of texts to embed.

        Returns:
            List of EmbeddingResult objects, in input order.

        Raises:
            EmbeddingError: If embedding fails.
        """
        ...

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Get the model name used for embeddings."""
        ...


class HTTPEmbeddingService(EmbeddingService):
    """Embedding service using HTTP API.

    Compatible with the OpenAI embeddings API and
    text-embeddings-inference (TEI) servers.
    """

    def __init__(
        self,
        settings: EmbeddingSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the HTTP embedding service.

        Args:
            settings: Embedding configuration. Uses defaults if not provided.
            client: HTTP client. Creates new one if not provided.
        """
        self._settings = settings or get_settings().embedding
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._settings.timeout)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def model_name(self) -> str:
        """Get the model name."""
        return self._settings.model

    def _headers(self) -> dict[str, str]:
        api_key = self._settings.api_key.get_secret_value()
        if api_key and api_key != "not-required":
            return {"Authorization": f"Bearer {api_key}"}
        return {}

    async def embed(self, text: str) -> EmbeddingResult:
        """Generate embedding for a single text."""
        results = await self.embed_batch([text])
        if not results:
            raise EmbeddingError(
                "Embedding service returned no vectors",
                details={"model": self._settings.model},
            )
        return results[0]

    async def embed_batch(self, texts: list[str]) -> list[EmbeddingResult]:
        """Generate embeddings for multiple texts, in configured batch sizes."""
        if not texts:
            return []

        client = await self._get_client()
        url = f"{self._settings.base_url}/embeddings"

        all_results: list[EmbeddingResult] = []
        batch_size = self._settings.batch_size

        for i in range(0, len(texts), batch_size):
            batch = texts[i : i + batch_size]
            start = time.perf_counter()
            try:
                batch_results = await self._embed_batch_request(client, url, batch)
            except EmbeddingError:
                track_embedding_request(
                    model=self._settings.model,
                    duration=time.perf_counter() - start,
                    batch_size=len(batch),
                    success=False,
                )
                raise
            track_embedding_request(
                model=self._settings.model,
                duration=time.perf_counter() - start,
                batch_size=len(batch),
            )
            all_results.extend(batch_results)

        return all_results

    async def _embed_batch_request(
        self,
        client: httpx.AsyncClient,
        url: str,
        texts: list[str],
    ) -> list[EmbeddingResult]:
        """Make embedding request for a batch.

        Raises:
            EmbeddingError: If the request fails, times out or hits a quota.
        """
        payload = {
            "input": texts,
            "model": self._settings.model,
            "encoding_format": "float",
        }

        try:
            response = await client.post(url, json=payload, headers=self._headers())
            response.raise_for_status()
        except httpx.TimeoutException as e:
            logger.error(f"Embedding request timed out: {e}", extra={"url": url})
            raise EmbeddingError(
                "Embedding request timed out",
                code=ErrorCode.EMBEDDING_TIMEOUT,
                details={"timeout": self._settings.timeout},
            ) from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            provider_code = provider_error_code(e.response)
            logger.error(
                f"Embedding request failed: {status}",
                extra={"url": url, "status": status, "provider_code": provider_code},
            )
            if provider_code == "insufficient_quota":
                raise EmbeddingError(
                    "Embedding quota exceeded",
                    code=ErrorCode.EMBEDDING_QUOTA_EXCEEDED,
                    details={"status_code": status},
                ) from e
            raise EmbeddingError(
                f"Embedding service returned {status}",
                code=ErrorCode.EMBEDDING_SERVICE_ERROR,
                details={"status_code": status, "provider_code": provider_code},
            ) from e
        except httpx.RequestError as e:
            logger.error(f"Embedding request error: {e}", extra={"url": url})
            raise EmbeddingError(
                f"Failed to connect to embedding service: {e}",
                code=ErrorCode.EMBEDDING_SERVICE_ERROR,
                details={"url": url},
            ) from e

        try:
            data = response.json()
            embeddings = sorted(
                data["data"],
                key=lambda item: item.get("index", 0),
            )
            if len(embeddings) != len(texts):
                raise EmbeddingError(
                    f"Expected {len(texts)} embeddings, got {len(embeddings)}",
                    code=ErrorCode.EMBEDDING_SERVICE_ERROR,
                    details={"expected": len(texts), "received": len(embeddings)},
                )

            return [
                EmbeddingResult(
                    text=texts[i],
                    embedding=emb_data["embedding"],
                    model=self._settings.model,
                )
                for i, emb_data in enumerate(embeddings)
            ]

        except (AttributeError, KeyError, IndexError, TypeError, ValueError) as e:
            raise EmbeddingError(
                f"Invalid response from embedding service: {e}",
                code=ErrorCode.EMBEDDING_SERVICE_ERROR,
                details={"error": str(e)},
            ) from e
