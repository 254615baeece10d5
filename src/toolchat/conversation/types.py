"""Data types for the conversation transcript.

This module defines the messages exchanged with the inference endpoint, the
tool calls the model emits, and the append-only Transcript that owns them for
the lifetime of one prompt.
"""

import json
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolCall:
    """A request from the model to run a named tool."""

    name: str
    arguments: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Freeze a private copy so later mutation of the source dict is not seen
        object.__setattr__(self, "arguments", MappingProxyType(dict(self.arguments)))

    @staticmethod
    def from_ollama(raw: Mapping[str, Any]) -> "ToolCall":
        """Parse a tool call in Ollama wire format.

        Ollama sends ``{"function": {"name": ..., "arguments": {...}}}``. Some
        models encode the arguments as a JSON string; those are decoded, and
        anything that is not a mapping afterwards becomes an empty mapping.

        Args:
            raw: A single entry of an assistant message's ``tool_calls``

        Returns:
            ToolCall: The parsed tool call
        """
        function = raw.get("function") or {}
        name = function.get("name") or ""
        arguments = function.get("arguments")

        if isinstance(arguments, str):
            try:
                arguments = json.loads(arguments)
            except json.JSONDecodeError:
                logger.warning(f"Could not decode arguments for tool call {name!r}")
                arguments = {}

        if not isinstance(arguments, Mapping):
            arguments = {}

        return ToolCall(name=name, arguments=arguments)

    def to_ollama(self) -> dict[str, Any]:
        """Serialize back to the Ollama wire format."""
        return {"function": {"name": self.name, "arguments": dict(self.arguments)}}


@dataclass
class UserMessage:
    """A message from the user."""

    role: str = "user"
    content: str = ""

    def __post_init__(self) -> None:
        """Validate role is always 'user'."""
        self.role = "user"


@dataclass
class AssistantMessage:
    """A response from the model."""

    role: str = "assistant"
    content: str = ""
    tool_calls: tuple[ToolCall, ...] = ()

    def __post_init__(self) -> None:
        """Validate role is always 'assistant'."""
        self.role = "assistant"
        self.tool_calls = tuple(self.tool_calls)

    @staticmethod
    def from_ollama(raw: Mapping[str, Any]) -> "AssistantMessage":
        """Build an assistant message from the ``message`` field of a reply."""
        tool_calls = raw.get("tool_calls") or []
        return AssistantMessage(
            content=raw.get("content") or "",
            tool_calls=tuple(ToolCall.from_ollama(call) for call in tool_calls),
        )


@dataclass
class ToolMessage:
    """A tool execution result."""

    role: str = "tool"
    tool_name: str = ""
    content: str = ""

    def __post_init__(self) -> None:
        """Validate role is always 'tool'."""
        self.role = "tool"


# Union type for all message types
Message = UserMessage | AssistantMessage | ToolMessage


def message_to_ollama(message: Message) -> dict[str, Any]:
    """Convert a message to the dict shape expected by Ollama's chat API."""
    ollama_msg: dict[str, Any] = {
        "role": message.role,
        "content": message.content,
    }

    if isinstance(message, AssistantMessage) and message.tool_calls:
        ollama_msg["tool_calls"] = [call.to_ollama() for call in message.tool_calls]

    if isinstance(message, ToolMessage) and message.tool_name:
        ollama_msg["tool_name"] = message.tool_name

    return ollama_msg


class Transcript:
    """Ordered, append-only conversation history for one prompt.

    The transcript always starts with a single user message. Each tool
    message must answer a tool call of the assistant message directly before
    it; appends that would break this are rejected.
    """

    def __init__(self, prompt: str) -> None:
        self._messages: list[Message] = [UserMessage(content=prompt)]

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self):
        return iter(self._messages)

    @property
    def messages(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    def append(self, message: Message) -> None:
        """Append a message, enforcing the tool message ordering.

        Raises:
            ValueError: If a tool message does not directly follow an
                assistant message carrying a call to that tool
        """
        if isinstance(message, ToolMessage):
            previous = self._messages[-1]
            if not isinstance(previous, AssistantMessage) or not previous.tool_calls:
                raise ValueError(
                    "Tool message must follow an assistant message with tool calls"
                )
            if message.tool_name and message.tool_name not in {
                call.name for call in previous.tool_calls
            }:
                raise ValueError(
                    f"Tool message for {message.tool_name!r} does not answer any "
                    "tool call of the preceding assistant message"
                )
        self._messages.append(message)

    def last_assistant(self) -> AssistantMessage | None:
        for message in reversed(self._messages):
            if isinstance(message, AssistantMessage):
                return message
        return None

    def to_ollama(self) -> list[dict[str, Any]]:
        """Serialize the whole transcript for the chat endpoint."""
        return [message_to_ollama(message) for message in self._messages]
