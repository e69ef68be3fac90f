"""Tests for the recipe indexing script."""

import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from pydantic import ValidationError

from recipe_agent.embeddings.models import EmbeddingResult
from recipe_agent.recipes.repository import InMemoryRecipeRepository
from scripts import index_recipes

RECIPES = [
    {
        "id": "a",
        "name": "Tomato Pasta",
        "ingredients": [{"name": "tomato", "amount": 2}],
        "tags": ["Vegetarian"],
    },
    {"id": "b", "name": "Green Salad"},
    {"id": "c", "name": "Lentil Soup"},
]


@pytest.fixture
def recipes_file(tmp_path: Path) -> Path:
    path = tmp_path / "recipes.json"
    path.write_text(json.dumps(RECIPES))
    return path


class _Repository(InMemoryRecipeRepository):
    """In-memory store that records collection setup."""

    def __init__(self) -> None:
        super().__init__()
        self.ensure_collection = AsyncMock()
        self.close = AsyncMock()


def _embedding_service() -> MagicMock:
    service = MagicMock()
    service.model_name = "test-embedding"
    service.embed = AsyncMock(
        return_value=EmbeddingResult(text="recipe", embedding=[0.1, 0.2], model="m")
    )
    service.embed_batch = AsyncMock(
        side_effect=lambda texts: [
            EmbeddingResult(text=t, embedding=[0.1, 0.2], model="m") for t in texts
        ]
    )
    service.close = AsyncMock()
    return service


class TestLoadRecipes:
    """Tests for load_recipes."""

    def test_loads_array(self, recipes_file: Path) -> None:
        recipes = index_recipes.load_recipes(recipes_file)

        assert [r.id for r in recipes] == ["a", "b", "c"]
        assert recipes[0].ingredients[0].name == "tomato"

    def test_rejects_invalid_recipe(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text(json.dumps([{"name": "no id"}]))

        with pytest.raises(ValidationError):
            index_recipes.load_recipes(path)


class TestRunIndexing:
    """Tests for run_indexing."""

    @pytest.fixture
    def wired(self, monkeypatch: pytest.MonkeyPatch) -> tuple[MagicMock, _Repository]:
        service = _embedding_service()
        repository = _Repository()
        monkeypatch.setattr(index_recipes, "HTTPEmbeddingService", lambda _s: service)
        monkeypatch.setattr(index_recipes, "QdrantRecipeRepository", lambda _s: repository)
        monkeypatch.setattr(index_recipes, "setup_logging", lambda **_kw: None)
        return service, repository

    async def test_indexes_all(
        self, recipes_file: Path, wired: tuple[MagicMock, _Repository]
    ) -> None:
        service, repository = wired

        written = await index_recipes.run_indexing(recipes_file)

        assert written == 3
        repository.ensure_collection.assert_called_once_with(2)
        stored = await repository.load_recipes_with_embeddings()
        assert [r.id for r in stored] == ["a", "b", "c"]
        service.close.assert_called_once()
        repository.close.assert_called_once()

    async def test_limit(
        self, recipes_file: Path, wired: tuple[MagicMock, _Repository]
    ) -> None:
        _, repository = wired

        written = await index_recipes.run_indexing(recipes_file, limit=1)

        assert written == 1
        assert [r.id for r in await repository.load_recipes_with_embeddings()] == ["a"]
