"""Conversation agent: a bounded reason-act loop over the recipe tools."""

import asyncio
import time

from recipe_agent.agent.models import (
    AgentRequest,
    AgentResponse,
    Intent,
    TerminationReason,
)
from recipe_agent.agent.tools import RecipeCollector, ToolExecutor, ToolOutcome
from recipe_agent.config import AgentSettings, get_settings
from recipe_agent.llm.client import LLMClient
from recipe_agent.llm.models import Message, Role, ToolCall
from recipe_agent.llm.prompts import PromptBuilder
from recipe_agent.llm.transcript import Transcript
from recipe_agent.logging_config import get_logger
from recipe_agent.observability.metrics import track_agent_run

logger = get_logger(__name__)

EXHAUSTED_MESSAGE = "I'm thinking too hard! Could you try asking more simply?"
EMPTY_REPLY_MESSAGE = "I couldn't generate a response."
ERROR_MESSAGE = "I encountered an issue while processing your request."
RETRY_TIP = "You can simply send your message again, or try rephrasing your question."


class ConversationAgent:
    """Answers one user turn, calling tools until the model gives a final reply.

    Each completion counts as one iteration. The loop ends with the model's
    reply, with a fixed message once ``max_iterations`` completions have been
    spent, or with a generic failure message when the model call fails.
    """

    def __init__(
        self,
        llm_client: LLMClient,
        tool_executor: ToolExecutor,
        settings: AgentSettings | None = None,
        prompt_builder: PromptBuilder | None = None,
    ) -> None:
        """Initialize the agent.

        Args:
            llm_client: Chat completion client.
            tool_executor: Executor for the model's tool calls.
            settings: Agent configuration.
            prompt_builder: System prompt builder.
        """
        self._llm_client = llm_client
        self._tool_executor = tool_executor
        self._settings = settings or get_settings().agent
        self._prompt_builder = prompt_builder or PromptBuilder()

    @property
    def max_iterations(self) -> int:
        return self._settings.max_iterations

    def build_transcript(self, request: AgentRequest) -> Transcript:
        """Seed the transcript: system prompt, prior history, new user message.

        Raises:
            TranscriptError: If the history breaks tool-call correlation.
        """
        system_prompt = self._prompt_builder.create_agent_prompt(
            request.user_profile,
            request.exclude_ids,
        )
        return (
            Transcript([Message(role=Role.SYSTEM, content=system_prompt)])
            .extend(request.history)
            .append(Message(role=Role.USER, content=request.message))
            .validate()
        )

    async def process(self, request: AgentRequest) -> AgentResponse:
        """Run the loop for one request.

        Args:
            request: The user turn.

        Returns:
            AgentResponse; model failures are reported in it, not raised.

        Raises:
            TranscriptError: If the supplied history is invalid.
        """
        transcript = self.build_transcript(request)
        collector = RecipeCollector()
        tools = self._tool_executor.definitions()
        iterations = 0
        start = time.perf_counter()

        logger.info(
            "Processing chat message",
            extra={
                "message_length": len(request.message),
                "history_length": len(request.history),
                "excluded": len(request.exclude_ids),
            },
        )

        final_text: str | None = None
        try:
            while iterations < self.max_iterations:
                iterations += 1
                result = await asyncio.wait_for(
                    self._llm_client.complete(transcript.messages, tools=tools),
                    timeout=self._settings.completion_timeout,
                )
                transcript = transcript.append(result.to_message())

                if not result.has_tool_calls:
                    final_text = result.content or EMPTY_REPLY_MESSAGE
                    break

                logger.debug(
                    f"Iteration {iterations}: model requested "
                    f"{len(result.tool_calls)} tool call(s)",
                    extra={"tools": [tc.function.name for tc in result.tool_calls]},
                )

                outcomes = await self._run_tools(result.tool_calls, request)
                for tool_call, outcome in zip(result.tool_calls, outcomes, strict=True):
                    collector.add(outcome.recipes)
                    transcript = transcript.append(
                        Message(
                            role=Role.TOOL,
                            tool_call_id=tool_call.id,
                            content=outcome.observation,
                        )
                    )

        except Exception as e:
            logger.exception(
                f"Agent loop failed: {e}",
                extra={"iterations": iterations},
            )
            track_agent_run(
                TerminationReason.ERROR.value,
                time.perf_counter() - start,
                iterations,
            )
            return AgentResponse(
                final_text=f"{ERROR_MESSAGE}\n\nTip: {RETRY_TIP}",
                is_follow_up=len(request.exclude_ids) > 0,
                terminated_by=TerminationReason.ERROR,
                intent=Intent.ERROR,
                iterations=iterations,
                success=False,
            )

        if final_text is None:
            terminated_by = TerminationReason.ITERATION_LIMIT
            final_text = EXHAUSTED_MESSAGE
            logger.warning(
                f"Iteration limit of {self.max_iterations} reached",
                extra={"iterations": iterations},
            )
        else:
            terminated_by = TerminationReason.FINAL_ANSWER

        duration = time.perf_counter() - start
        track_agent_run(terminated_by.value, duration, iterations)

        logger.info(
            "Chat message processed",
            extra={
                "terminated_by": terminated_by.value,
                "iterations": iterations,
                "recipes": len(collector),
                "duration_ms": round(duration * 1000, 2),
            },
        )

        return AgentResponse(
            final_text=final_text,
            recipes=collector.recipes,
            suggested_recipe_ids=collector.ids,
            is_follow_up=len(request.exclude_ids) > 0,
            terminated_by=terminated_by,
            intent=Intent.SEARCH_RECIPES if len(collector) else Intent.GENERAL_CHAT,
            iterations=iterations,
        )

    async def _run_tools(
        self,
        tool_calls: list[ToolCall],
        request: AgentRequest,
    ) -> list[ToolOutcome]:
        """Execute calls in issue order; outcomes are returned in that order."""
        if self._settings.parallel_tool_calls and len(tool_calls) > 1:
            return list(
                await asyncio.gather(
                    *(
                        self._tool_executor.execute(tc, request.exclude_ids)
                        for tc in tool_calls
                    )
                )
            )

        outcomes = []
        for tool_call in tool_calls:
            outcomes.append(
                await self._tool_executor.execute(tool_call, request.exclude_ids)
            )
        return outcomes
