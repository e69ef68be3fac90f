"""LLM data models."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator


class Role(str, Enum):
    """Message role in a conversation."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


class FunctionCall(BaseModel):
    """Function name and raw JSON arguments chosen by the model."""

    name: str = Field(description="Function name")
    arguments: str = Field(default="{}", description="JSON-encoded arguments")


class ToolCall(BaseModel):
    """A tool invocation requested by the model.

    Attributes:
        id: Correlation id echoed back by the matching tool message.
        function: The function to call.
    """

    id: str = Field(description="Tool call id")
    type: str = Field(default="function", description="Tool type")
    function: FunctionCall


class Message(BaseModel):
    """A message in a conversation.

    Attributes:
        role: The role of the message sender.
        content: Text content; assistant messages issuing tool calls may omit it.
        tool_calls: Tool invocations (assistant only).
        tool_call_id: Id of the call this message answers (tool only).
    """

    role: Role = Field(description="Message role")
    content: str | None = Field(default=None, description="Message content")
    tool_calls: list[ToolCall] | None = Field(default=None, description="Tool calls")
    tool_call_id: str | None = Field(default=None, description="Answered tool call")

    @model_validator(mode="after")
    def _check_role_fields(self) -> "Message":
        if self.role is Role.TOOL and not self.tool_call_id:
            raise ValueError("tool messages require tool_call_id")
        if self.tool_calls and self.role is not Role.ASSISTANT:
            raise ValueError("only assistant messages may carry tool_calls")
        return self

    def to_api_dict(self) -> dict[str, Any]:
        """Serialize in chat-completions wire format."""
        data: dict[str, Any] = {"role": self.role.value, "content": self.content}
        if self.tool_calls:
            data["tool_calls"] = [tc.model_dump() for tc in self.tool_calls]
        if self.tool_call_id:
            data["tool_call_id"] = self.tool_call_id
        return data


class ToolDefinition(BaseModel):
    """A function the model may call.

    Attributes:
        parameters: JSON schema of the arguments.
    """

    name: str
    description: str
    parameters: dict[str, Any] = Field(default_factory=dict)

    def to_api_dict(self) -> dict[str, Any]:
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }


class GenerationResult(BaseModel):
    """Result from one chat completion.

    Attributes:
        content: The generated text, None when the model only called tools.
        tool_calls: Tool invocations requested by the model.
        model: Model used for generation.
        prompt_tokens: Number of tokens in the prompt.
        completion_tokens: Number of tokens in the completion.
        total_tokens: Total tokens used.
    """

    content: str | None = Field(default=None, description="Generated text")
    tool_calls: list[ToolCall] = Field(default_factory=list, description="Tool calls")
    model: str = Field(description="Model used")
    prompt_tokens: int = Field(default=0, description="Prompt token count")
    completion_tokens: int = Field(default=0, description="Completion token count")
    total_tokens: int = Field(default=0, description="Total token count")

    @property
    def has_tool_calls(self) -> bool:
        return bool(self.tool_calls)

    def to_message(self) -> Message:
        """The assistant message to append to the transcript."""
        return Message(
            role=Role.ASSISTANT,
            content=self.content,
            tool_calls=self.tool_calls or None,
        )
