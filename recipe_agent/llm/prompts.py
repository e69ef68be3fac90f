"""System prompts for the recipe agent."""

from collections.abc import Sequence

from recipe_agent.profile import FitnessGoal, UserProfile

BASE_SYSTEM_PROMPT = """You are an AI Chef Assistant for Chef Circle, a recipe and meal planning app. You can help users in several ways:

1. Search for recipes when users ask for recipe suggestions or mention ingredients they want to cook with
2. Answer general cooking questions, techniques, and provide cooking advice

IMPORTANT CONVERSATION GUIDELINES:
- For follow-up recipe requests (e.g., "give me other recipes", "more options", "alternatives", "different recipes"), use the search_recipes tool with exclude_recipe_ids to avoid repeating suggestions from previous responses in the conversation.
- If no new recipes are found after exclusions, respond naturally: "I've already suggested the best matches for your query. Would you like to try different ingredients or cooking styles?" or "Those were the top recipes matching your criteria. Let me know if you'd like suggestions for a different type of dish!"
- Always be conversational and reference previous suggestions when appropriate for context.
- Keep track of the conversation flow and provide helpful alternatives when users ask for more options.

Always be friendly, helpful, and focus on culinary topics. Use the available functions to provide the best assistance."""

AGENT_INSTRUCTIONS = """

AGENTIC BEHAVIOR INSTRUCTIONS:
You are now acting as an autonomous agent.
1. THINK: Plan your steps.
2. ACT: Use 'search_recipes' to find data. You can search multiple times.
3. OBSERVE: Analyze results.
4. ANSWER: Provide a final helpful response.
"""

RECOMMENDATION_GUIDELINES = """RECIPE RECOMMENDATION GUIDELINES:
- ALWAYS consider the user's fitness goal when suggesting recipes
- For Weight Loss: Prioritize lower-calorie, high-protein, nutrient-dense options
- For Weight Gain: Focus on calorie-dense, protein-rich meals for muscle building
- For General Health: Emphasize balanced nutrition and variety
- Mention how each recipe supports their specific fitness goal
- Include calorie and macro information when relevant
- Suggest portion adjustments if needed to meet their targets"""

_GOAL_TEXT = {
    FitnessGoal.WEIGHT_LOSS: (
        "Weight Loss - seeking recipes that support calorie deficit and fat burning"
    ),
    FitnessGoal.WEIGHT_GAIN: (
        "Weight Gain - needs high-calorie, nutrient-dense recipes for muscle building"
    ),
    FitnessGoal.HEALTH: (
        "General Health - maintaining balanced nutrition and overall wellness"
    ),
}


def _fmt(value: float | int | str | None) -> str:
    if value is None:
        return "not set"
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


class PromptBuilder:
    """Builds the system prompt for a conversation.

    The output depends only on the arguments, so two calls with the same
    profile and exclusion list produce identical prompts.
    """

    def create_system_prompt(
        self,
        user_profile: UserProfile | None = None,
        exclude_ids: Sequence[str] = (),
    ) -> str:
        """Compose base instructions with optional personalization.

        Args:
            user_profile: Profile of the requesting user.
            exclude_ids: Recipe ids the user has already been shown.

        Returns:
            The system prompt text.
        """
        prompt = BASE_SYSTEM_PROMPT

        if (
            user_profile is not None
            and user_profile.is_premium
            and user_profile.daily_calories
        ):
            prompt += self._build_nutrition_context(user_profile)

        if exclude_ids:
            prompt += (
                "\n\nIMPORTANT: The user has already seen these recipe IDs in previous"
                f" responses: [{', '.join(exclude_ids)}]. When using the search_recipes"
                " tool, ALWAYS include these IDs in the exclude_recipe_ids parameter"
                " to avoid suggesting the same recipes again."
            )

        return prompt

    def create_agent_prompt(
        self,
        user_profile: UserProfile | None = None,
        exclude_ids: Sequence[str] = (),
    ) -> str:
        """System prompt followed by the think/act/observe/answer instructions."""
        return self.create_system_prompt(user_profile, exclude_ids) + AGENT_INSTRUCTIONS

    def _build_nutrition_context(self, profile: UserProfile) -> str:
        lines = [
            "",
            "",
            "USER'S NUTRITION PROFILE & FITNESS GOAL:",
            f"- PRIMARY GOAL: {self._fitness_goal_text(profile.fitness_goal)}",
            f"- Daily Calories: {_fmt(profile.daily_calories)} kcal",
            f"- Daily Protein: {_fmt(profile.daily_proteins)}g",
            f"- Daily Carbs: {_fmt(profile.daily_carbs)}g",
            f"- Daily Fats: {_fmt(profile.daily_fats)}g",
            f"- Current Weight: {_fmt(profile.weight)}kg",
            f"- Height: {_fmt(profile.height)}cm",
            f"- Age: {_fmt(profile.age)} years",
            f"- Activity Level: {_fmt(profile.activity_level)}",
            f"- Gender: {_fmt(profile.biological_gender)}",
            "",
            RECOMMENDATION_GUIDELINES,
        ]
        return "\n".join(lines)

    @staticmethod
    def _fitness_goal_text(goal: FitnessGoal | None) -> str:
        return _GOAL_TEXT.get(goal, _GOAL_TEXT[FitnessGoal.HEALTH])
