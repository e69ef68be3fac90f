"""Conversation agent module."""

from recipe_agent.agent.models import (
    AgentRequest,
    AgentResponse,
    Intent,
    TerminationReason,
)
from recipe_agent.agent.orchestrator import ConversationAgent
from recipe_agent.agent.tools import (
    SEARCH_RECIPES_TOOL,
    RecipeCollector,
    SearchRecipesArgs,
    ToolExecutor,
    ToolOutcome,
    ToolRegistry,
    parse_search_recipes_args,
)

__all__ = [
    "SEARCH_RECIPES_TOOL",
    "AgentRequest",
    "AgentResponse",
    "ConversationAgent",
    "Intent",
    "RecipeCollector",
    "SearchRecipesArgs",
    "TerminationReason",
    "ToolExecutor",
    "ToolOutcome",
    "ToolRegistry",
    "parse_search_recipes_args",
]
