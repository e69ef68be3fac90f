"""Recipe datastore interface and implementations."""

from abc import ABC, abstractmethod
from uuid import NAMESPACE_URL, uuid5

from pydantic import ValidationError as PydanticValidationError
from qdrant_client import AsyncQdrantClient
from qdrant_client.models import Distance, PointStruct, Record, VectorParams

from recipe_agent.config import QdrantSettings, get_settings
from recipe_agent.exceptions import ErrorCode, VectorStoreError
from recipe_agent.logging_config import get_logger
from recipe_agent.recipes.models import Recipe

logger = get_logger(__name__)


class RecipeRepository(ABC):
    """Abstract base class for recipe datastores.

    Defines the reads the retriever needs and the writes the indexer needs.
    """

    @abstractmethod
    async def load_recipes_with_embeddings(self) -> list[Recipe]:
        """Load every recipe that has a non-empty stored embedding.

        Returns:
            Recipes in datastore order. Empty when nothing is indexed.

        Raises:
            VectorStoreError: If the datastore cannot be read.
        """
        ...

    @abstractmethod
    async def upsert(self, recipes: list[Recipe]) -> int:
        """Insert or replace recipes together with their embeddings.

        Args:
            recipes: Recipes to store.

        Returns:
            Number of recipes written.

        Raises:
            VectorStoreError: If the write fails.
        """
        ...


class InMemoryRecipeRepository(RecipeRepository):
    """Recipe store held in process memory.

    Used for tests and local experiments.
    """

    def __init__(self, recipes: list[Recipe] | None = None) -> None:
        self._recipes: dict[str, Recipe] = {}
        for recipe in recipes or []:
            self._recipes[recipe.id] = recipe

    async def load_recipes_with_embeddings(self) -> list[Recipe]:
        return [r for r in self._recipes.values() if r.has_embedding]

    async def upsert(self, recipes: list[Recipe]) -> int:
        for recipe in recipes:
            self._recipes[recipe.id] = recipe
        return len(recipes)


def recipe_point_id(recipe_id: str) -> str:
    """Map a recipe id onto a stable Qdrant point id (UUID)."""
    return str(uuid5(NAMESPACE_URL, f"recipe:{recipe_id}"))


class QdrantRecipeRepository(RecipeRepository):
    """Recipe store backed by a Qdrant collection.

    Each point holds the recipe as payload and its embedding as vector.
    """

    def __init__(
        self,
        settings: QdrantSettings | None = None,
        client: AsyncQdrantClient | None = None,
    ) -> None:
        """Initialize the Qdrant recipe repository.

        Args:
            settings: Qdrant configuration.
            client: Existing client (for testing).
        """
        self._settings = settings or get_settings().qdrant
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> AsyncQdrantClient:
        """Get or create Qdrant client."""
        if self._client is None:
            api_key = None
            if self._settings.api_key:
                api_key = self._settings.api_key.get_secret_value()

            self._client = AsyncQdrantClient(
                url=self._settings.url,
                api_key=api_key,
            )
        return self._client

    async def close(self) -> None:
        """Close the Qdrant client."""
        if self._owns_client and self._client is not None:
            await self._client.close()
            self._client = None

    @property
    def collection(self) -> str:
        return self._settings.collection_name

    async def ensure_collection(self, dimensions: int) -> None:
        """Create the recipe collection if it does not exist yet."""
        client = await self._get_client()

        try:
            if await client.collection_exists(self.collection):
                return

            await client.create_collection(
                collection_name=self.collection,
                vectors_config=VectorParams(
                    size=dimensions,
                    distance=Distance.COSINE,
                ),
            )
            logger.info(
                f"Created collection: {self.collection}",
                extra={"dimensions": dimensions},
            )

        except Exception as e:
            raise VectorStoreError(
                f"Failed to create collection: {e}",
                code=ErrorCode.VECTOR_STORE_ERROR,
                details={"collection": self.collection, "error": str(e)},
            ) from e

    async def load_recipes_with_embeddings(self) -> list[Recipe]:
        """Scroll through the collection, returning recipes with vectors."""
        client = await self._get_client()
        recipes: list[Recipe] = []

        try:
            if not await client.collection_exists(self.collection):
                logger.info(f"Collection {self.collection} does not exist yet")
                return []

            offset = None
            while True:
                points, offset = await client.scroll(
                    collection_name=self.collection,
                    limit=self._settings.scroll_batch_size,
                    offset=offset,
                    with_payload=True,
                    with_vectors=True,
                )
                for point in points:
                    recipe = self._to_recipe(point)
                    if recipe is not None:
                        recipes.append(recipe)
                if offset is None:
                    break

        except Exception as e:
            raise VectorStoreError(
                f"Failed to load recipes: {e}",
                code=ErrorCode.VECTOR_STORE_ERROR,
                details={"collection": self.collection, "error": str(e)},
            ) from e

        logger.debug(
            f"Loaded {len(recipes)} recipes with embeddings",
            extra={"collection": self.collection},
        )
        return recipes

    def _to_recipe(self, point: Record) -> Recipe | None:
        """Convert a scrolled point to a Recipe, or None if it is unusable."""
        vector = point.vector
        if not isinstance(vector, list) or not vector:
            return None

        try:
            return Recipe.model_validate({**(point.payload or {}), "embedding": vector})
        except PydanticValidationError as e:
            logger.warning(
                f"Skipping malformed recipe point {point.id}",
                extra={"point_id": str(point.id), "error": str(e)},
            )
            return None

    async def upsert(self, recipes: list[Recipe]) -> int:
        """Store recipes that carry an embedding; others are skipped."""
        indexed = [r for r in recipes if r.has_embedding]
        if not indexed:
            return 0

        await self.ensure_collection(len(indexed[0].embedding))
        client = await self._get_client()

        try:
            points = [
                PointStruct(
                    id=recipe_point_id(recipe.id),
                    vector=recipe.embedding,
                    payload=recipe.model_dump(exclude={"embedding"}),
                )
                for recipe in indexed
            ]

            await client.upsert(
                collection_name=self.collection,
                points=points,
            )

            logger.debug(
                f"Upserted {len(points)} recipes",
                extra={"collection": self.collection},
            )
            return len(points)

        except Exception as e:
            raise VectorStoreError(
                f"Failed to upsert recipes: {e}",
                code=ErrorCode.VECTOR_STORE_ERROR,
                details={"collection": self.collection, "error": str(e)},
            ) from e
