"""Recipe retrieval module."""

from recipe_agent.retrieval.formatting import (
    format_for_model,
    format_for_ui,
    format_search_results,
)
from recipe_agent.retrieval.models import FormattedResults, RecipeMatch
from recipe_agent.retrieval.retriever import RecipeRetriever

__all__ = [
    "FormattedResults",
    "RecipeMatch",
    "RecipeRetriever",
    "format_for_model",
    "format_for_ui",
    "format_search_results",
]
