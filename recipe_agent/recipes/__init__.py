"""Recipe corpus module."""

from recipe_agent.recipes.indexing import RecipeIndexer
from recipe_agent.recipes.models import (
    CompactRecipe,
    Recipe,
    RecipeIngredient,
    UIRecipe,
)
from recipe_agent.recipes.repository import (
    InMemoryRecipeRepository,
    QdrantRecipeRepository,
    RecipeRepository,
)
from recipe_agent.recipes.text import build_recipe_text

__all__ = [
    "CompactRecipe",
    "InMemoryRecipeRepository",
    "QdrantRecipeRepository",
    "Recipe",
    "RecipeIndexer",
    "RecipeIngredient",
    "RecipeRepository",
    "UIRecipe",
    "build_recipe_text",
]
