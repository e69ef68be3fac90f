"""Recipe retriever: semantic k-NN search over the recipe corpus."""

from collections.abc import Collection

from recipe_agent.embeddings.service import EmbeddingService
from recipe_agent.exceptions import ErrorCode, RecipeAgentError, RetrievalError
from recipe_agent.logging_config import get_logger
from recipe_agent.observability.metrics import track_retrieval_request
from recipe_agent.recipes.models import Recipe
from recipe_agent.recipes.repository import RecipeRepository
from recipe_agent.retrieval.models import RecipeMatch
from recipe_agent.vectorstore.index import NearestNeighborIndex
from recipe_agent.vectorstore.models import DistanceMetric

logger = get_logger(__name__)

DEFAULT_LIMIT = 3
QUERY_MIN_SIMILARITY = 0.6
INGREDIENT_MIN_SIMILARITY = 0.3


class RecipeRetriever:
    """Finds recipes semantically similar to a text query.

    A fresh index is built from the current corpus on every call, so results
    are never stale and nothing is shared between calls.
    """

    def __init__(
        self,
        embedding_service: EmbeddingService,
        repository: RecipeRepository,
    ) -> None:
        """Initialize the recipe retriever.

        Args:
            embedding_service: Service embedding the query text.
            repository: Source of recipes and their stored embeddings.
        """
        self._embedding_service = embedding_service
        self._repository = repository

    async def search_by_query(
        self,
        query: str,
        limit: int = DEFAULT_LIMIT,
        min_similarity: float = QUERY_MIN_SIMILARITY,
        exclude_ids: Collection[str] = (),
    ) -> list[RecipeMatch]:
        """Search recipes by cosine similarity to ``query``.

        Args:
            query: Free-text description, e.g. "pasta with tomatoes".
            limit: Maximum number of recipes to return.
            min_similarity: Results scoring below this are dropped.
            exclude_ids: Recipe ids that must not be returned.

        Returns:
            Matches ordered by descending similarity.

        Raises:
            EmbeddingError: If the query cannot be embedded.
            VectorStoreError: If the corpus cannot be loaded.
            DimensionMismatchError: If query and corpus dimensions differ.
            RetrievalError: On any other failure.
        """
        if not query.strip():
            return []

        if exclude_ids:
            logger.info(
                f"Excluding {len(exclude_ids)} previously suggested recipes",
                extra={"excluded": len(exclude_ids)},
            )

        try:
            embedding_result = await self._embedding_service.embed(query)
            query_vector = embedding_result.embedding

            recipes = await self._repository.load_recipes_with_embeddings()

            index: NearestNeighborIndex[Recipe] = NearestNeighborIndex(
                k=limit,
                metric=DistanceMetric.COSINE,
            )
            for recipe in recipes:
                if recipe.has_embedding:
                    index.add(recipe, recipe.embedding, recipe.id)

            neighbours = index.search(query_vector, exclude_ids)

        except RecipeAgentError:
            raise
        except Exception as e:
            logger.error(f"Recipe search failed: {e}")
            raise RetrievalError(
                f"Recipe search failed: {e}",
                code=ErrorCode.RETRIEVAL_ERROR,
                details={"query": query[:100], "error": str(e)},
            ) from e

        matches = [
            RecipeMatch(recipe=n.payload, similarity=n.score)
            for n in neighbours
            if n.score >= min_similarity
        ]

        track_retrieval_request(
            recipes_returned=len(matches),
            corpus_size=len(index),
            top_score=matches[0].similarity if matches else 0.0,
        )

        logger.debug(
            f"Found {len(matches)} similar recipes",
            extra={
                "query_length": len(query),
                "corpus_size": len(index),
                "limit": limit,
                "min_similarity": min_similarity,
                "results": [(m.recipe.name, round(m.similarity, 3)) for m in matches],
            },
        )

        return matches

    async def search_by_ingredients(
        self,
        ingredients: list[str],
        limit: int = DEFAULT_LIMIT,
        min_similarity: float = INGREDIENT_MIN_SIMILARITY,
        exclude_ids: Collection[str] = (),
    ) -> list[RecipeMatch]:
        """Search recipes containing the given ingredients."""
        names = [name.strip() for name in ingredients if name.strip()]
        if not names:
            return []
        return await self.search_by_query(
            f"recipe with {', '.join(names)}",
            limit=limit,
            min_similarity=min_similarity,
            exclude_ids=exclude_ids,
        )
