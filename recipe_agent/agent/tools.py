"""Tools the conversation agent may call, and their executor."""

import asyncio
import json
from collections.abc import Awaitable, Callable, Iterable, Sequence

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from recipe_agent.config import AgentSettings, get_settings
from recipe_agent.exceptions import ErrorCode, RecipeAgentError, ToolError
from recipe_agent.llm.models import ToolCall, ToolDefinition
from recipe_agent.logging_config import get_logger
from recipe_agent.observability.metrics import track_tool_call
from recipe_agent.recipes.models import UIRecipe
from recipe_agent.retrieval.formatting import format_for_model, format_for_ui
from recipe_agent.retrieval.retriever import RecipeRetriever

logger = get_logger(__name__)

SEARCH_RECIPES = "search_recipes"

SEARCH_RECIPES_TOOL = ToolDefinition(
    name=SEARCH_RECIPES,
    description=(
        "Search for recipes based on query. Returns recipe summaries. Use this to"
        " find options for the user. You can call this multiple times with"
        " different queries if needed."
    ),
    parameters={
        "type": "object",
        "properties": {
            "query": {
                "type": "string",
                "description": "Search keywords (ingredients, dish name, cuisine)",
            },
            "ingredients": {"type": "array", "items": {"type": "string"}},
            "exclude_recipe_ids": {"type": "array", "items": {"type": "string"}},
        },
        "required": ["query"],
    },
)

# Short codes reported back to the model. Anything unlisted is "search_failed".
_OBSERVATION_ERRORS: dict[ErrorCode, str] = {
    ErrorCode.TOOL_ARGUMENTS_INVALID: "invalid_arguments",
    ErrorCode.UNKNOWN_TOOL: "unknown_function",
    ErrorCode.EMBEDDING_SERVICE_ERROR: "embedding_unavailable",
    ErrorCode.EMBEDDING_QUOTA_EXCEEDED: "embedding_quota_exceeded",
    ErrorCode.EMBEDDING_TIMEOUT: "timeout",
    ErrorCode.VECTOR_DIMENSION_MISMATCH: "dimension_mismatch",
}


class SearchRecipesArgs(BaseModel):
    """Arguments of the search_recipes tool."""

    query: str = Field(min_length=1, description="Search keywords")
    ingredients: list[str] = Field(default_factory=list)
    exclude_recipe_ids: list[str] = Field(default_factory=list)

    def search_text(self) -> str:
        """Query text with any requested ingredients appended."""
        names = [name.strip() for name in self.ingredients if name.strip()]
        if not names:
            return self.query
        return f"{self.query} with {', '.join(names)}"


def parse_search_recipes_args(raw: str) -> SearchRecipesArgs:
    """Decode and validate the model's JSON arguments.

    Raises:
        ToolError: If the arguments are not valid JSON or have the wrong shape.
    """
    try:
        data = json.loads(raw or "{}")
    except json.JSONDecodeError as e:
        raise ToolError(
            f"Tool arguments are not valid JSON: {e}",
            details={"arguments": raw[:200]},
        ) from e

    if not isinstance(data, dict):
        raise ToolError(
            "Tool arguments must be a JSON object",
            details={"arguments": raw[:200]},
        )

    try:
        return SearchRecipesArgs.model_validate(data)
    except PydanticValidationError as e:
        raise ToolError(
            "Invalid search_recipes arguments",
            details={"errors": e.errors(include_url=False, include_context=False)},
        ) from e


class ToolContext(BaseModel):
    """Request-level data a tool handler may use."""

    exclude_ids: list[str] = Field(default_factory=list)


class ToolOutcome(BaseModel):
    """Result of one tool call.

    Attributes:
        observation: JSON text fed back to the model.
        recipes: UI recipes found, empty on failure.
        error_code: Short error code when the call failed.
    """

    observation: str
    recipes: list[UIRecipe] = Field(default_factory=list)
    error_code: str | None = None

    @property
    def is_error(self) -> bool:
        return self.error_code is not None

    @classmethod
    def error(cls, code: str) -> "ToolOutcome":
        return cls(observation=json.dumps({"error": code}), error_code=code)


ToolHandler = Callable[[str, ToolContext], Awaitable[ToolOutcome]]


class ToolRegistry:
    """Maps tool names to their declaration and handler."""

    def __init__(self) -> None:
        self._tools: dict[str, tuple[ToolDefinition, ToolHandler]] = {}

    def register(self, definition: ToolDefinition, handler: ToolHandler) -> None:
        if definition.name in self._tools:
            raise ValueError(f"Tool already registered: {definition.name}")
        self._tools[definition.name] = (definition, handler)

    def get(self, name: str) -> ToolHandler | None:
        entry = self._tools.get(name)
        return entry[1] if entry else None

    def definitions(self) -> list[ToolDefinition]:
        """Declarations to send with every completion request."""
        return [definition for definition, _ in self._tools.values()]

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)


class ToolExecutor:
    """Executes tool calls issued by the model.

    This is the containment boundary for tool failures: every call returns a
    ToolOutcome, either a success observation or ``{"error": <code>}``.
    Cancellation is not contained.
    """

    def __init__(
        self,
        retriever: RecipeRetriever,
        settings: AgentSettings | None = None,
    ) -> None:
        """Initialize the executor.

        Args:
            retriever: Recipe retriever backing search_recipes.
            settings: Agent configuration (search limit, threshold, timeout).
        """
        self._retriever = retriever
        self._settings = settings or get_settings().agent
        self._registry = ToolRegistry()
        self._registry.register(SEARCH_RECIPES_TOOL, self._search_recipes)

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    def definitions(self) -> list[ToolDefinition]:
        return self._registry.definitions()

    async def execute(
        self,
        tool_call: ToolCall,
        exclude_ids: Sequence[str] = (),
    ) -> ToolOutcome:
        """Run one tool call.

        Args:
            tool_call: The call as issued by the model.
            exclude_ids: Request-level recipe ids that must not be returned.

        Returns:
            The outcome; failures are reported in the observation, not raised.
        """
        name = tool_call.function.name
        handler = self._registry.get(name)
        if handler is None:
            logger.warning(
                f"Model called unknown tool: {name}",
                extra={"tool": name, "tool_call_id": tool_call.id},
            )
            track_tool_call(name, success=False)
            return ToolOutcome.error(_OBSERVATION_ERRORS[ErrorCode.UNKNOWN_TOOL])

        context = ToolContext(exclude_ids=list(exclude_ids))

        try:
            outcome = await asyncio.wait_for(
                handler(tool_call.function.arguments, context),
                timeout=self._settings.tool_timeout,
            )

        except TimeoutError:
            logger.error(
                f"Tool {name} timed out",
                extra={"tool": name, "timeout": self._settings.tool_timeout},
            )
            track_tool_call(name, success=False)
            return ToolOutcome.error("timeout")

        except RecipeAgentError as e:
            code = _OBSERVATION_ERRORS.get(e.code, "search_failed")
            logger.error(
                f"Tool {name} failed: {e.message}",
                extra={"tool": name, "code": e.code.value, "observation": code},
            )
            track_tool_call(name, success=False)
            return ToolOutcome.error(code)

        except Exception as e:
            logger.exception(
                f"Tool {name} raised unexpectedly: {e}",
                extra={"tool": name},
            )
            track_tool_call(name, success=False)
            return ToolOutcome.error("search_failed")

        track_tool_call(name, success=True)
        return outcome

    async def _search_recipes(self, raw_arguments: str, context: ToolContext) -> ToolOutcome:
        args = parse_search_recipes_args(raw_arguments)
        exclude = list(dict.fromkeys([*args.exclude_recipe_ids, *context.exclude_ids]))

        logger.info(
            f"Executing search: {args.query}",
            extra={"excluded": len(exclude), "ingredients": len(args.ingredients)},
        )

        matches = await self._retriever.search_by_query(
            args.search_text(),
            limit=self._settings.search_limit,
            min_similarity=self._settings.tool_min_similarity,
            exclude_ids=exclude,
        )

        summaries = format_for_model(matches)
        observation = json.dumps(
            {
                "status": "success",
                "count": len(summaries),
                "recipes": [summary.model_dump() for summary in summaries],
            }
        )
        return ToolOutcome(observation=observation, recipes=format_for_ui(matches))


class RecipeCollector:
    """Accumulates recipes across tool calls, first occurrence of an id wins."""

    def __init__(self) -> None:
        self._recipes: dict[str, UIRecipe] = {}

    def add(self, recipes: Iterable[UIRecipe]) -> None:
        for recipe in recipes:
            self._recipes.setdefault(recipe.id, recipe)

    @property
    def recipes(self) -> list[UIRecipe]:
        return list(self._recipes.values())

    @property
    def ids(self) -> list[str]:
        return list(self._recipes)

    def __len__(self) -> int:
        return len(self._recipes)
