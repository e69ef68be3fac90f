"""API routes for the chat agent and direct recipe search."""

from datetime import UTC, datetime
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel, Field, field_validator

from recipe_agent.agent.models import AgentRequest, AgentResponse
from recipe_agent.agent.orchestrator import ConversationAgent
from recipe_agent.config import get_settings
from recipe_agent.llm.models import Message, Role
from recipe_agent.logging_config import get_logger
from recipe_agent.profile import UserProfile
from recipe_agent.recipes.models import UIRecipe
from recipe_agent.retrieval.formatting import format_search_results
from recipe_agent.retrieval.retriever import RecipeRetriever

logger = get_logger(__name__)


# Create router
router = APIRouter(prefix="/api/v1", tags=["Chat"])


def _check_exclude_ids(value: list[str]) -> list[str]:
    limit = get_settings().agent.max_exclude_ids
    if len(value) > limit:
        raise ValueError(f"at most {limit} excluded recipe ids are allowed")
    if any(not item.strip() for item in value):
        raise ValueError("excluded recipe ids must be non-empty")
    return value


class ChatMessage(BaseModel):
    """A prior conversation message supplied by the client."""

    role: Literal["user", "assistant"] = Field(description="Message role")
    content: str = Field(description="Message content")

    @field_validator("content")
    @classmethod
    def _check_length(cls, value: str) -> str:
        limit = get_settings().agent.max_message_length
        if len(value) > limit:
            raise ValueError(f"message content exceeds {limit} characters")
        return value


class ChatRequest(BaseModel):
    """Request body for one chat turn."""

    message: str = Field(description="User message")
    conversation_history: list[ChatMessage] = Field(
        default_factory=list,
        description="Prior messages, oldest first",
    )
    exclude_recipe_ids: list[str] = Field(
        default_factory=list,
        description="Recipe ids already shown to the user",
    )
    user_profile: UserProfile | None = Field(
        default=None,
        description="Profile used for personalization",
    )

    @field_validator("message")
    @classmethod
    def _check_message(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("message must not be blank")
        limit = get_settings().agent.max_message_length
        if len(value) > limit:
            raise ValueError(f"message exceeds {limit} characters")
        return value

    @field_validator("conversation_history")
    @classmethod
    def _check_history(cls, value: list[ChatMessage]) -> list[ChatMessage]:
        limit = get_settings().agent.max_history_messages
        if len(value) > limit:
            raise ValueError(f"conversation history exceeds {limit} messages")
        return value

    @field_validator("exclude_recipe_ids")
    @classmethod
    def _check_exclude_ids(cls, value: list[str]) -> list[str]:
        return _check_exclude_ids(value)


class ChatResponse(BaseModel):
    """Response for one chat turn."""

    success: bool = Field(description="Whether the turn completed")
    response: str = Field(description="Reply shown to the user")
    intent: str = Field(description="search_recipes, general_chat or error")
    recipes: list[UIRecipe] = Field(default_factory=list, description="Recipe cards")
    has_recipes: bool = Field(default=False, description="Whether recipes were found")
    suggested_recipe_ids: list[str] = Field(
        default_factory=list,
        description="Ids to exclude on the next turn",
    )
    is_follow_up: bool = Field(default=False, description="Request carried exclusions")
    terminated_by: str = Field(description="How the agent loop ended")
    timestamp: str = Field(description="Response time, ISO 8601")


class SearchRequest(BaseModel):
    """Request body for direct recipe search."""

    query: str = Field(min_length=1, description="What the user wants to cook")
    limit: int = Field(default=3, ge=1, le=20, description="Maximum recipes")
    min_similarity: float | None = Field(
        default=None,
        ge=-1.0,
        le=1.0,
        description="Minimum cosine similarity (default from settings)",
    )
    exclude_recipe_ids: list[str] = Field(default_factory=list)
    user_profile: UserProfile | None = None

    @field_validator("exclude_recipe_ids")
    @classmethod
    def _check_exclude_ids(cls, value: list[str]) -> list[str]:
        return _check_exclude_ids(value)


class SearchResponse(BaseModel):
    """Response from direct recipe search."""

    response: str = Field(description="Sentence introducing the results")
    recipes: list[UIRecipe] = Field(default_factory=list)
    has_recipes: bool = False


def get_agent(request: Request) -> ConversationAgent:
    """Conversation agent wired at startup, or 503."""
    agent = getattr(request.app.state, "agent", None)
    if agent is None:
        logger.warning("Conversation agent not configured")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={
                "error": "Conversation agent not configured",
                "message": "The agent requires the LLM, embedding service and recipe store",
            },
        )
    return agent


def get_retriever(request: Request) -> RecipeRetriever:
    """Recipe retriever wired at startup, or 503."""
    retriever = getattr(request.app.state, "retriever", None)
    if retriever is None:
        logger.warning("Recipe retriever not configured")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={
                "error": "Recipe retriever not configured",
                "message": "Search requires the embedding service and recipe store",
            },
        )
    return retriever


def chat_request_to_agent_request(request: ChatRequest) -> AgentRequest:
    """Convert API ChatRequest to internal AgentRequest."""
    return AgentRequest(
        message=request.message,
        history=[
            Message(role=Role(msg.role), content=msg.content)
            for msg in request.conversation_history
        ],
        exclude_ids=request.exclude_recipe_ids,
        user_profile=request.user_profile,
    )


def agent_response_to_chat_response(response: AgentResponse) -> ChatResponse:
    """Convert internal AgentResponse to API ChatResponse."""
    return ChatResponse(
        success=response.success,
        response=response.final_text,
        intent=response.intent.value,
        recipes=response.recipes,
        has_recipes=response.has_recipes,
        suggested_recipe_ids=response.suggested_recipe_ids,
        is_follow_up=response.is_follow_up,
        terminated_by=response.terminated_by.value,
        timestamp=datetime.now(UTC).isoformat(),
    )


@router.post("/chat", response_model=ChatResponse)
async def chat_endpoint(
    request: ChatRequest,
    agent: ConversationAgent = Depends(get_agent),
) -> ChatResponse:
    """Answer one chat turn, searching recipes when the model decides to."""
    response = await agent.process(chat_request_to_agent_request(request))
    return agent_response_to_chat_response(response)


@router.post("/recipes/search", response_model=SearchResponse)
async def search_endpoint(
    request: SearchRequest,
    retriever: RecipeRetriever = Depends(get_retriever),
) -> SearchResponse:
    """Search recipes directly, without the agent."""
    min_similarity = request.min_similarity
    if min_similarity is None:
        min_similarity = get_settings().agent.query_min_similarity

    matches = await retriever.search_by_query(
        request.query,
        limit=request.limit,
        min_similarity=min_similarity,
        exclude_ids=request.exclude_recipe_ids,
    )
    formatted = format_search_results(matches, request.user_profile)
    return SearchResponse(
        response=formatted.text_response,
        recipes=formatted.recipes,
        has_recipes=formatted.has_recipes,
    )
