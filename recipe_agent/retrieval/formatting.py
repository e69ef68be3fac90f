"""Formatting of recipe matches for the model and for the UI."""

import math

from recipe_agent.profile import FitnessGoal, UserProfile
from recipe_agent.recipes.models import CompactRecipe, UIRecipe
from recipe_agent.retrieval.models import FormattedResults, RecipeMatch

MODEL_INGREDIENT_LIMIT = 5

NO_MATCHES_MESSAGE = (
    "I couldn't find any recipes matching your search. "
    "Try describing different ingredients or cooking methods!"
)

_GOAL_DISPLAY = {
    FitnessGoal.WEIGHT_LOSS: "weight loss",
    FitnessGoal.WEIGHT_GAIN: "weight gain",
    FitnessGoal.HEALTH: "general health",
}


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards positive infinity."""
    return math.floor(value + 0.5)


def format_for_model(matches: list[RecipeMatch]) -> list[CompactRecipe]:
    """Summarize matches for the model, keeping only the first few ingredients."""
    return [
        CompactRecipe(
            id=m.recipe.id,
            title=m.recipe.name,
            description=m.recipe.description,
            ingredients=m.recipe.ingredient_lines()[:MODEL_INGREDIENT_LIMIT],
        )
        for m in matches
    ]


def format_recipe_for_ui(match: RecipeMatch) -> UIRecipe:
    recipe = match.recipe
    return UIRecipe(
        id=recipe.id,
        title=recipe.name,
        description=recipe.description,
        prep_time=f"{recipe.prep_time_min} min",
        cook_time=f"{recipe.cook_time_min} min" if recipe.cook_time_min else None,
        servings=recipe.servings or 1,
        difficulty=recipe.difficulty,
        cuisine=recipe.cuisine,
        similarity=round_half_up(match.similarity * 100),
        calories=round_half_up(recipe.calories),
        protein=f"{round_half_up(recipe.protein_g)}g",
        carbs=f"{round_half_up(recipe.carbohydrates_g)}g",
        fat=f"{round_half_up(recipe.total_fat_g)}g",
        ingredients=recipe.ingredient_lines(),
        instructions=list(recipe.instructions),
        tags=list(recipe.tags),
        author=recipe.author or "Unknown Chef",
        image=recipe.image,
    )


def format_for_ui(matches: list[RecipeMatch]) -> list[UIRecipe]:
    """Build full recipe cards, similarity as an integer percentage."""
    return [format_recipe_for_ui(m) for m in matches]


def personalized_advice(top: UIRecipe, goal: FitnessGoal) -> str:
    """One paragraph relating the best match to the user's fitness goal."""
    advice = (
        f"Based on your {_GOAL_DISPLAY.get(goal, 'fitness')} goal, "
        f'I\'d especially recommend "{top.title}".'
    )

    if goal is FitnessGoal.WEIGHT_LOSS:
        advice += (
            f" At {top.calories} calories per serving, it fits well within a calorie"
            f" deficit while providing {top.protein} of protein to help maintain"
            " muscle mass."
        )
    elif goal is FitnessGoal.WEIGHT_GAIN:
        advice += (
            f" With {top.calories} calories and {top.protein} of protein per serving,"
            " it's perfect for supporting your muscle-building goals."
        )
    else:
        advice += (
            f" It offers a balanced {top.calories} calories with {top.protein} of"
            " protein, making it ideal for maintaining overall health."
        )

    return advice


def format_search_results(
    matches: list[RecipeMatch],
    user_profile: UserProfile | None = None,
) -> FormattedResults:
    """Prepare matches for display.

    No matches is a normal outcome and yields a fixed message.
    """
    if not matches:
        return FormattedResults(text_response=NO_MATCHES_MESSAGE)

    recipes = format_for_ui(matches)
    count = len(recipes)
    if count > 1:
        text = (
            f"Great! I found {count} recipes that match your request. Here are your"
            " top options based on your ingredients and preferences:"
        )
    else:
        text = (
            "Great! I found 1 recipe that matches your request. Here is a perfect"
            " option based on your ingredients and preferences:"
        )

    if user_profile is not None and user_profile.fitness_goal is not None:
        text += f"\n\n{personalized_advice(recipes[0], user_profile.fitness_goal)}"

    return FormattedResults(text_response=text, recipes=recipes, has_recipes=True)
