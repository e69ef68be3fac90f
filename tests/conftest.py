"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncGenerator, Callable
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from recipe_agent.api.app import app
from recipe_agent.embeddings.models import EmbeddingResult
from recipe_agent.recipes.models import Recipe, RecipeIngredient

RecipeFactory = Callable[..., Recipe]


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client for FastAPI app.

    The lifespan does not run under ASGITransport, so nothing is wired
    unless a test sets ``app.state`` itself.

    Yields:
        AsyncClient configured for testing.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.state.agent = None
    app.state.retriever = None


@pytest.fixture
def recipe_factory() -> RecipeFactory:
    """Build recipes with sensible defaults."""

    def _make(
        recipe_id: str,
        name: str | None = None,
        embedding: list[float] | None = None,
        **overrides: Any,
    ) -> Recipe:
        data: dict[str, Any] = {
            "id": recipe_id,
            "name": name or f"Recipe {recipe_id}",
            "description": f"Description of {name or recipe_id}",
            "prep_time_min": 10,
            "cook_time_min": 20,
            "servings": 2,
            "ingredients": [
                RecipeIngredient(name="tomato", amount=2, unit="pcs"),
                RecipeIngredient(name="olive oil", amount=1.5, unit="tbsp"),
            ],
            "instructions": ["Chop", "Cook"],
            "tags": ["dinner"],
            "calories": 420.4,
            "protein_g": 18.6,
            "carbohydrates_g": 50.2,
            "total_fat_g": 12.0,
            "embedding": embedding or [],
        }
        data.update(overrides)
        return Recipe(**data)

    return _make


@pytest.fixture
def sample_recipes(recipe_factory: RecipeFactory) -> list[Recipe]:
    """Small corpus; similarity to [1, 0, 0] is 1.0, 0.8, 0.6, 0.0."""
    return [
        recipe_factory("r1", "Tomato Pasta", [1.0, 0.0, 0.0]),
        recipe_factory("r2", "Garlic Bread", [0.8, 0.6, 0.0]),
        recipe_factory("r3", "Green Salad", [0.6, 0.8, 0.0]),
        recipe_factory("r4", "Chocolate Cake", [0.0, 0.0, 1.0]),
        recipe_factory("r5", "Unindexed Soup"),
    ]


@pytest.fixture
def mock_embedding_service() -> MagicMock:
    """Embedding service returning a fixed query vector."""
    service = MagicMock()
    service.model_name = "test-embedding"
    service.embed = AsyncMock(
        return_value=EmbeddingResult(
            text="query",
            embedding=[1.0, 0.0, 0.0],
            model="test-embedding",
        )
    )
    return service
