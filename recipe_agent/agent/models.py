"""Conversation agent data models."""

from enum import Enum

from pydantic import BaseModel, Field, field_validator

from recipe_agent.llm.models import Message
from recipe_agent.profile import UserProfile
from recipe_agent.recipes.models import UIRecipe


class TerminationReason(str, Enum):
    """How an agent run ended."""

    FINAL_ANSWER = "final_answer"
    ITERATION_LIMIT = "iteration_limit"
    ERROR = "error"


class Intent(str, Enum):
    """Coarse classification of a finished turn."""

    SEARCH_RECIPES = "search_recipes"
    GENERAL_CHAT = "general_chat"
    ERROR = "error"


class AgentRequest(BaseModel):
    """One user turn handed to the agent.

    Attributes:
        message: The new user message.
        history: Prior conversation, oldest first. Owned by the caller.
        exclude_ids: Recipe ids already shown to the user.
        user_profile: Optional personalization data.
    """

    message: str = Field(description="New user message")
    history: list[Message] = Field(default_factory=list, description="Prior messages")
    exclude_ids: list[str] = Field(
        default_factory=list,
        description="Recipe ids already shown to the user",
    )
    user_profile: UserProfile | None = Field(default=None, description="User profile")

    @field_validator("exclude_ids")
    @classmethod
    def _dedupe_exclude_ids(cls, value: list[str]) -> list[str]:
        return list(dict.fromkeys(value))


class AgentResponse(BaseModel):
    """Outcome of one agent run.

    Attributes:
        final_text: Text shown to the user.
        recipes: Recipes found by tool calls, deduplicated, in discovery order.
        suggested_recipe_ids: Ids of ``recipes``, for the next turn's exclusions.
        is_follow_up: Whether the request carried exclusion ids.
        terminated_by: Terminal state of the loop.
        intent: search_recipes when recipes were found, general_chat otherwise.
        iterations: Model round trips performed.
        success: False only when the run errored.
    """

    final_text: str
    recipes: list[UIRecipe] = Field(default_factory=list)
    suggested_recipe_ids: list[str] = Field(default_factory=list)
    is_follow_up: bool = False
    terminated_by: TerminationReason
    intent: Intent
    iterations: int = 0
    success: bool = True

    @property
    def has_recipes(self) -> bool:
        return bool(self.recipes)
