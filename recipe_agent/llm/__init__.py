"""LLM client module."""

from recipe_agent.llm.client import LLMClient, OpenAICompatibleClient
from recipe_agent.llm.models import (
    FunctionCall,
    GenerationResult,
    Message,
    Role,
    ToolCall,
    ToolDefinition,
)
from recipe_agent.llm.prompts import PromptBuilder
from recipe_agent.llm.transcript import Transcript

__all__ = [
    "FunctionCall",
    "GenerationResult",
    "LLMClient",
    "Message",
    "OpenAICompatibleClient",
    "PromptBuilder",
    "Role",
    "ToolCall",
    "ToolDefinition",
    "Transcript",
]
