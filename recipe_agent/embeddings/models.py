"""Embedding data models."""

from pydantic import BaseModel, Field, computed_field


class EmbeddingResult(BaseModel):
    """Vector produced for one input text.

    Attributes:
        text: The text that was embedded.
        embedding: The embedding vector.
        model: The embedding model that produced it.
    """

    text: str = Field(description="Original text")
    embedding: list[float] = Field(description="Embedding vector")
    model: str = Field(description="Model used for embedding")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def dimensions(self) -> int:
        """Number of dimensions in the embedding."""
        return len(self.embedding)
