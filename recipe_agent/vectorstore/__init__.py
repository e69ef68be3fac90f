"""Vector math and nearest-neighbour index module."""

from recipe_agent.vectorstore.index import NearestNeighborIndex, VectorIndex
from recipe_agent.vectorstore.models import (
    DistanceMetric,
    IndexedItem,
    SearchResult,
    Vector,
)
from recipe_agent.vectorstore.similarity import cosine_similarity, euclidean_distance

__all__ = [
    "DistanceMetric",
    "IndexedItem",
    "NearestNeighborIndex",
    "SearchResult",
    "Vector",
    "VectorIndex",
    "cosine_similarity",
    "euclidean_distance",
]
