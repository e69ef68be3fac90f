"""Text representation of a recipe for embedding."""

from recipe_agent.recipes.models import Recipe

DIET_TAGS = frozenset(
    {
        "Vegan",
        "Vegetarian",
        "Gluten-Free",
        "Low-Carb",
        "High-Protein",
        "Keto",
        "Paleo",
        "Dairy-Free",
    }
)


def build_recipe_text(recipe: Recipe) -> str:
    """Build the text that gets embedded for a recipe.

    Only the name, ingredient lines and diet tags are used, which keeps
    ingredient-driven queries close to the recipes that contain them.
    """
    lines = [
        f"Recipe: {recipe.name}",
        f"Ingredients: {', '.join(recipe.ingredient_lines())}",
    ]

    diet_tags = [tag for tag in recipe.tags if tag in DIET_TAGS]
    if diet_tags:
        lines.append(f"Diet: {', '.join(diet_tags)}")

    return "\n".join(lines)
