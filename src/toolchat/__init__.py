"""toolchat: command-line tool-calling chat client for Ollama.

This package sends a prompt to a local Ollama server, advertises a set of
built-in tools, and runs the tool-calling loop until the model answers.
"""

from toolchat.conversation import ConversationLoop, ConversationResult
from toolchat.tools import ToolRegistry, default_registry

__version__ = "0.1.0"

__all__ = [
    "ConversationLoop",
    "ConversationResult",
    "ToolRegistry",
    "default_registry",
    "__version__",
]
