"""Vector index data models."""

from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")

Vector = list[float]


class DistanceMetric(str, Enum):
    """Metric used to rank neighbours."""

    COSINE = "cosine"
    EUCLIDEAN = "euclidean"

    @property
    def higher_is_better(self) -> bool:
        """Whether larger scores mean closer neighbours."""
        return self is DistanceMetric.COSINE


class IndexedItem(BaseModel, Generic[T]):
    """An entry held by a vector index.

    Attributes:
        id: Identifier, unique within one index instance.
        vector: The embedding vector.
        payload: Object returned when the item matches.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: str = Field(description="Unique item identifier")
    vector: Vector = Field(description="Embedding vector")
    payload: T = Field(description="Item payload")


class SearchResult(BaseModel, Generic[T]):
    """Result from a nearest-neighbour search.

    For cosine the score is a similarity in [-1, 1] (higher is closer).
    For euclidean it is a distance >= 0 (lower is closer).

    Attributes:
        id: Identifier of the matched item.
        payload: The matched item's payload.
        score: Similarity or distance, depending on the metric.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: str = Field(description="Item identifier")
    payload: T = Field(description="Item payload")
    score: float = Field(description="Similarity or distance score")
