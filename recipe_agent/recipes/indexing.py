"""Embedding and storing recipes so they become searchable."""

from recipe_agent.embeddings.service import EmbeddingService
from recipe_agent.logging_config import get_logger
from recipe_agent.recipes.models import Recipe
from recipe_agent.recipes.repository import RecipeRepository
from recipe_agent.recipes.text import build_recipe_text

logger = get_logger(__name__)


class RecipeIndexer:
    """Computes recipe embeddings and writes them to a repository."""

    def __init__(
        self,
        embedding_service: EmbeddingService,
        repository: RecipeRepository,
    ) -> None:
        self._embedding_service = embedding_service
        self._repository = repository

    async def index(self, recipes: list[Recipe]) -> int:
        """Embed recipes in batch and upsert them.

        Args:
            recipes: Recipes to (re)index. Existing embeddings are replaced.

        Returns:
            Number of recipes written.

        Raises:
            EmbeddingError: If the embedding service fails.
            VectorStoreError: If the repository write fails.
        """
        if not recipes:
            return 0

        texts = [build_recipe_text(recipe) for recipe in recipes]
        results = await self._embedding_service.embed_batch(texts)

        embedded = [
            recipe.model_copy(update={"embedding": result.embedding})
            for recipe, result in zip(recipes, results, strict=True)
        ]

        written = await self._repository.upsert(embedded)
        logger.info(
            f"Indexed {written} recipes",
            extra={"model": self._embedding_service.model_name},
        )
        return written
