"""Conversation transcript types and the tool-calling loop."""

from toolchat.conversation.loop import (
    MAX_TOOL_CALLS_PER_TURN,
    ConversationLoop,
    ConversationResult,
    LoopState,
)
from toolchat.conversation.types import (
    AssistantMessage,
    Message,
    ToolCall,
    ToolMessage,
    Transcript,
    UserMessage,
)

__all__ = [
    "MAX_TOOL_CALLS_PER_TURN",
    "AssistantMessage",
    "ConversationLoop",
    "ConversationResult",
    "LoopState",
    "Message",
    "ToolCall",
    "ToolMessage",
    "Transcript",
    "UserMessage",
]
