"""Retrieval data models."""

from pydantic import BaseModel, Field

from recipe_agent.recipes.models import Recipe, UIRecipe


class RecipeMatch(BaseModel):
    """A recipe returned by a similarity search.

    Attributes:
        recipe: The matched recipe.
        similarity: Cosine similarity to the query, in [-1, 1].
    """

    recipe: Recipe = Field(description="Matched recipe")
    similarity: float = Field(description="Cosine similarity to the query")


class FormattedResults(BaseModel):
    """Search results prepared for the user interface.

    Attributes:
        text_response: Sentence introducing the results, with optional advice.
        recipes: Recipe cards, best match first.
        has_recipes: Whether anything matched.
    """

    text_response: str
    recipes: list[UIRecipe] = Field(default_factory=list)
    has_recipes: bool = False
