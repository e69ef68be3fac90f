"""Recipe data models."""

from pydantic import BaseModel, Field


class RecipeIngredient(BaseModel):
    """An ingredient line of a recipe.

    Attributes:
        name: Ingredient name.
        amount: Quantity, if any.
        unit: Unit of the quantity.
    """

    name: str = Field(description="Ingredient name")
    amount: float | None = Field(default=None, description="Quantity")
    unit: str = Field(default="", description="Unit of measure")

    def to_line(self) -> str:
        """Render as ``"<amount> <unit> <name>"``."""
        amount = f"{self.amount:g}" if self.amount is not None else ""
        return " ".join(part for part in (amount, self.unit, self.name) if part)


class Recipe(BaseModel):
    """A recipe from the corpus.

    Attributes:
        id: Datastore identifier.
        embedding: Stored embedding; empty when the recipe was never indexed.
    """

    id: str = Field(description="Recipe identifier")
    name: str = Field(description="Recipe name")
    description: str = Field(default="", description="Short description")
    prep_time_min: int = Field(default=0, ge=0, description="Preparation time")
    cook_time_min: int | None = Field(default=None, ge=0, description="Cooking time")
    servings: int | None = Field(default=None, ge=1, description="Servings")
    difficulty: str | None = Field(default=None, description="easy, medium or hard")
    cuisine: str | None = Field(default=None, description="Cuisine")
    image: str | None = Field(default=None, description="Image URL")
    ingredients: list[RecipeIngredient] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    author: str | None = Field(default=None, description="Author username")

    calories: float = Field(default=0.0, ge=0)
    protein_g: float = Field(default=0.0, ge=0)
    carbohydrates_g: float = Field(default=0.0, ge=0)
    total_fat_g: float = Field(default=0.0, ge=0)

    embedding: list[float] = Field(default_factory=list, description="Stored embedding")

    @property
    def has_embedding(self) -> bool:
        return len(self.embedding) > 0

    def ingredient_lines(self) -> list[str]:
        return [ing.to_line() for ing in self.ingredients]


class CompactRecipe(BaseModel):
    """Minimal recipe summary handed back to the model."""

    id: str
    title: str
    description: str
    ingredients: list[str] = Field(description="First few ingredient lines")


class UIRecipe(BaseModel):
    """Recipe card shown to the user.

    Attributes:
        similarity: Match strength as an integer percentage.
        protein: Rounded grams, e.g. ``"32g"``.
    """

    id: str
    title: str
    description: str
    prep_time: str
    cook_time: str | None = None
    servings: int = 1
    difficulty: str | None = None
    cuisine: str | None = None
    similarity: int
    calories: int
    protein: str
    carbs: str
    fat: str
    ingredients: list[str] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    author: str
    image: str | None = None
