"""Ordered, append-only conversation transcript."""

from collections.abc import Iterable, Iterator

from recipe_agent.exceptions import TranscriptError
from recipe_agent.llm.models import Message, Role


class Transcript:
    """Immutable sequence of conversation messages.

    ``append`` and ``extend`` return a new transcript; the original is left
    untouched. Every tool message must answer a tool call issued by an earlier
    assistant message, which ``validate`` enforces.
    """

    __slots__ = ("_messages",)

    def __init__(self, messages: Iterable[Message] = ()) -> None:
        self._messages: tuple[Message, ...] = tuple(messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(self._messages)

    def __getitem__(self, index: int) -> Message:
        return self._messages[index]

    @property
    def messages(self) -> list[Message]:
        """A copy of the messages, in order."""
        return list(self._messages)

    def append(self, message: Message) -> "Transcript":
        return Transcript((*self._messages, message))

    def extend(self, messages: Iterable[Message]) -> "Transcript":
        return Transcript((*self._messages, *messages))

    def validate(self) -> "Transcript":
        """Check the tool-call correlation rule.

        Returns:
            self, for chaining.

        Raises:
            TranscriptError: If a tool message answers an unknown call id.
        """
        issued: set[str] = set()
        for position, message in enumerate(self._messages):
            if message.role is Role.ASSISTANT and message.tool_calls:
                issued.update(tc.id for tc in message.tool_calls)
            elif message.role is Role.TOOL and message.tool_call_id not in issued:
                raise TranscriptError(
                    f"Tool message at position {position} answers unknown "
                    f"tool call {message.tool_call_id!r}",
                    details={
                        "position": position,
                        "tool_call_id": message.tool_call_id,
                    },
                )
        return self
