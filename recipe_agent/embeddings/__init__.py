"""Embedding service module."""

from recipe_agent.embeddings.models import EmbeddingResult
from recipe_agent.embeddings.service import EmbeddingService, HTTPEmbeddingService

__all__ = [
    "EmbeddingResult",
    "EmbeddingService",
    "HTTPEmbeddingService",
]
