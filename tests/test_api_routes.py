"""Tests for chat and search API routes."""

from collections.abc import Callable
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import AsyncClient

from recipe_agent.agent.models import AgentResponse, Intent, TerminationReason
from recipe_agent.api.app import app
from recipe_agent.api.routes import (
    ChatMessage,
    ChatRequest,
    SearchRequest,
    agent_response_to_chat_response,
    chat_request_to_agent_request,
)
from recipe_agent.exceptions import EmbeddingError, ErrorCode, TranscriptError
from recipe_agent.llm.models import Role
from recipe_agent.profile import UserProfile
from recipe_agent.recipes.models import Recipe
from recipe_agent.retrieval.formatting import format_for_ui
from recipe_agent.retrieval.models import RecipeMatch

RecipeFactory = Callable[..., Recipe]


def _mock_agent(response: AgentResponse | None = None, error: Exception | None = None) -> MagicMock:
    agent = MagicMock()
    agent.process = AsyncMock(return_value=response, side_effect=error)
    return agent


class TestChatRequest:
    """Tests for ChatRequest model."""

    def test_defaults(self) -> None:
        req = ChatRequest(message="What can I cook?")
        assert req.conversation_history == []
        assert req.exclude_recipe_ids == []
        assert req.user_profile is None

    def test_blank_message_rejected(self) -> None:
        with pytest.raises(ValueError):
            ChatRequest(message="   ")

    def test_too_long_message_rejected(self) -> None:
        with pytest.raises(ValueError):
            ChatRequest(message="x" * 2001)

    def test_too_many_exclusions_rejected(self) -> None:
        with pytest.raises(ValueError):
            ChatRequest(message="more", exclude_recipe_ids=[f"id{i}" for i in range(101)])

    def test_blank_exclusion_rejected(self) -> None:
        with pytest.raises(ValueError):
            ChatRequest(message="more", exclude_recipe_ids=["a", " "])


class TestSearchRequest:
    """Tests for SearchRequest model."""

    def test_defaults(self) -> None:
        req = SearchRequest(query="pasta")
        assert req.limit == 3
        assert req.min_similarity is None

    def test_limit_bounds(self) -> None:
        with pytest.raises(ValueError):
            SearchRequest(query="pasta", limit=21)


class TestConverters:
    """Tests for request and response converters."""

    def test_chat_request_to_agent_request(self) -> None:
        req = ChatRequest(
            message="Anything else?",
            conversation_history=[
                ChatMessage(role="user", content="Pasta ideas"),
                ChatMessage(role="assistant", content="Try carbonara."),
            ],
            exclude_recipe_ids=["a", "a", "b"],
            user_profile=UserProfile(username="sam"),
        )

        result = chat_request_to_agent_request(req)

        assert result.message == "Anything else?"
        assert [m.role for m in result.history] == [Role.USER, Role.ASSISTANT]
        assert result.exclude_ids == ["a", "b"]
        assert result.user_profile is not None
        assert result.user_profile.username == "sam"

    def test_agent_response_to_chat_response(self, recipe_factory: RecipeFactory) -> None:
        recipes = format_for_ui([RecipeMatch(recipe=recipe_factory("a"), similarity=0.9)])
        agent_response = AgentResponse(
            final_text="Try this.",
            recipes=recipes,
            suggested_recipe_ids=["a"],
            is_follow_up=True,
            terminated_by=TerminationReason.FINAL_ANSWER,
            intent=Intent.SEARCH_RECIPES,
            iterations=2,
        )

        result = agent_response_to_chat_response(agent_response)

        assert result.success is True
        assert result.response == "Try this."
        assert result.intent == "search_recipes"
        assert result.has_recipes is True
        assert result.suggested_recipe_ids == ["a"]
        assert result.is_follow_up is True
        assert result.terminated_by == "final_answer"
        assert result.timestamp


class TestChatEndpoint:
    """Tests for /api/v1/chat endpoint."""

    async def test_returns_503_without_agent(self, client: AsyncClient) -> None:
        """Chat returns 503 when the agent is not configured."""
        response = await client.post("/api/v1/chat", json={"message": "Hi"})

        assert response.status_code == 503
        assert "not configured" in response.json()["detail"]["error"]

    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"message": "  "},
            {"message": "hi", "conversation_history": [{"role": "tool", "content": "{}"}]},
            {"message": "hi", "exclude_recipe_ids": [f"id{i}" for i in range(101)]},
        ],
    )
    async def test_validates_request(self, client: AsyncClient, body: dict) -> None:
        app.state.agent = _mock_agent()

        response = await client.post("/api/v1/chat", json=body)

        assert response.status_code == 422
        app.state.agent.process.assert_not_called()

    async def test_chat_turn(self, client: AsyncClient, recipe_factory: RecipeFactory) -> None:
        recipes = format_for_ui([RecipeMatch(recipe=recipe_factory("a"), similarity=0.75)])
        app.state.agent = _mock_agent(
            AgentResponse(
                final_text="Here is a pasta.",
                recipes=recipes,
                suggested_recipe_ids=["a"],
                terminated_by=TerminationReason.FINAL_ANSWER,
                intent=Intent.SEARCH_RECIPES,
            )
        )

        response = await client.post(
            "/api/v1/chat",
            json={
                "message": "pasta",
                "conversation_history": [{"role": "user", "content": "hello"}],
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["response"] == "Here is a pasta."
        assert data["intent"] == "search_recipes"
        assert data["recipes"][0]["similarity"] == 75
        assert data["suggested_recipe_ids"] == ["a"]

        agent_request = app.state.agent.process.call_args.args[0]
        assert agent_request.message == "pasta"
        assert agent_request.history[0].content == "hello"

    async def test_agent_error_is_reported_in_body(self, client: AsyncClient) -> None:
        app.state.agent = _mock_agent(
            AgentResponse(
                final_text="I encountered an issue.",
                terminated_by=TerminationReason.ERROR,
                intent=Intent.ERROR,
                success=False,
            )
        )

        response = await client.post("/api/v1/chat", json={"message": "pasta"})

        assert response.status_code == 200
        assert response.json()["success"] is False
        assert response.json()["intent"] == "error"

    async def test_invalid_transcript_is_400(self, client: AsyncClient) -> None:
        app.state.agent = _mock_agent(error=TranscriptError("orphan tool message"))

        response = await client.post("/api/v1/chat", json={"message": "pasta"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == ErrorCode.TRANSCRIPT_INVALID.value


class TestSearchEndpoint:
    """Tests for /api/v1/recipes/search endpoint."""

    async def test_returns_503_without_retriever(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/recipes/search", json={"query": "pasta"})

        assert response.status_code == 503

    async def test_search(self, client: AsyncClient, recipe_factory: RecipeFactory) -> None:
        retriever = MagicMock()
        retriever.search_by_query = AsyncMock(
            return_value=[RecipeMatch(recipe=recipe_factory("a", "Tomato Pasta"), similarity=0.9)]
        )
        app.state.retriever = retriever

        response = await client.post(
            "/api/v1/recipes/search",
            json={"query": "pasta", "limit": 5, "exclude_recipe_ids": ["z"]},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["has_recipes"] is True
        assert data["recipes"][0]["title"] == "Tomato Pasta"
        assert "I found 1 recipe" in data["response"]
        retriever.search_by_query.assert_called_once_with(
            "pasta",
            limit=5,
            min_similarity=0.6,
            exclude_ids=["z"],
        )

    async def test_no_matches(self, client: AsyncClient) -> None:
        retriever = MagicMock()
        retriever.search_by_query = AsyncMock(return_value=[])
        app.state.retriever = retriever

        response = await client.post("/api/v1/recipes/search", json={"query": "unicorn"})

        assert response.status_code == 200
        assert response.json()["has_recipes"] is False
        assert response.json()["recipes"] == []

    async def test_embedding_failure(self, client: AsyncClient) -> None:
        retriever = MagicMock()
        retriever.search_by_query = AsyncMock(
            side_effect=EmbeddingError("down", code=ErrorCode.EMBEDDING_SERVICE_ERROR)
        )
        app.state.retriever = retriever

        response = await client.post("/api/v1/recipes/search", json={"query": "pasta"})

        assert response.status_code == 503
        assert response.json()["error"]["code"] == ErrorCode.EMBEDDING_SERVICE_ERROR.value
