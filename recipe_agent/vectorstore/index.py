"""Vector index interface and brute-force k-NN implementation."""

from abc import ABC, abstractmethod
from collections.abc import Callable, Collection, Iterable, Sequence
from typing import Generic, TypeVar

from recipe_agent.logging_config import get_logger
from recipe_agent.vectorstore.models import (
    DistanceMetric,
    IndexedItem,
    SearchResult,
    Vector,
)
from recipe_agent.vectorstore.similarity import cosine_similarity, euclidean_distance

logger = get_logger(__name__)

T = TypeVar("T")

_SCORERS: dict[DistanceMetric, Callable[[Sequence[float], Sequence[float]], float]] = {
    DistanceMetric.COSINE: cosine_similarity,
    DistanceMetric.EUCLIDEAN: euclidean_distance,
}


class VectorIndex(ABC, Generic[T]):
    """Abstract base class for vector indexes.

    Defines the interface for adding vectors and finding nearest neighbours.
    """

    @abstractmethod
    def add(self, payload: T, vector: Vector, item_id: str) -> None:
        """Add an item to the index.

        Args:
            payload: Object returned when the item matches.
            vector: The item's embedding.
            item_id: Identifier, unique within the index.
        """
        ...

    @abstractmethod
    def search(
        self,
        query_vector: Vector,
        exclude_ids: Collection[str] = (),
    ) -> list[SearchResult[T]]:
        """Find the nearest neighbours of a query vector.

        Args:
            query_vector: The vector to search for.
            exclude_ids: Identifiers that must not appear in the results.

        Returns:
            Results ordered best first.

        Raises:
            DimensionMismatchError: If the query and stored vectors differ in length.
        """
        ...

    @abstractmethod
    def clear(self) -> None:
        """Remove every item."""
        ...

    @abstractmethod
    def __len__(self) -> int: ...

    def add_all(self, items: Iterable[IndexedItem[T]]) -> None:
        """Add several items."""
        for item in items:
            self.add(item.payload, item.vector, item.id)


class NearestNeighborIndex(VectorIndex[T]):
    """Exact k-nearest-neighbour search by linear scan.

    Every query scores every stored item, O(n * d). Suited to corpora of
    hundreds to low thousands of items.
    """

    def __init__(
        self,
        k: int = 3,
        metric: DistanceMetric = DistanceMetric.COSINE,
    ) -> None:
        """Initialize the index.

        Args:
            k: Number of neighbours to return.
            metric: Metric used to score and order neighbours.
        """
        if k < 1:
            raise ValueError(f"k must be at least 1, got {k}")
        self._k = k
        self._metric = DistanceMetric(metric)
        self._items: list[IndexedItem[T]] = []
        self._ids: set[str] = set()

    @property
    def k(self) -> int:
        return self._k

    @property
    def metric(self) -> DistanceMetric:
        return self._metric

    def __len__(self) -> int:
        return len(self._items)

    def add(self, payload: T, vector: Vector, item_id: str) -> None:
        """Append an item, skipping empty vectors and repeated ids."""
        if not vector:
            logger.warning(
                f"Skipping item {item_id} due to empty vector",
                extra={"item_id": item_id},
            )
            return

        if item_id in self._ids:
            logger.warning(
                f"Skipping duplicate item {item_id}",
                extra={"item_id": item_id},
            )
            return

        self._items.append(IndexedItem(id=item_id, vector=vector, payload=payload))
        self._ids.add(item_id)

    def search(
        self,
        query_vector: Vector,
        exclude_ids: Collection[str] = (),
    ) -> list[SearchResult[T]]:
        """Return the k best items not in ``exclude_ids``.

        Cosine results are ordered by descending similarity, euclidean by
        ascending distance. Equal scores keep insertion order.
        """
        if not self._items:
            return []

        excluded = set(exclude_ids)
        scorer = _SCORERS[self._metric]

        scored = [
            SearchResult(
                id=item.id,
                payload=item.payload,
                score=scorer(query_vector, item.vector),
            )
            for item in self._items
            if item.id not in excluded
        ]

        # list.sort is stable, reverse included
        scored.sort(key=lambda r: r.score, reverse=self._metric.higher_is_better)

        return scored[: self._k]

    def clear(self) -> None:
        self._items = []
        self._ids = set()
