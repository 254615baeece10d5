"""Ollama client wrapper and integration layer.

This package provides the async chat endpoint used by the conversation loop.
All requests are non-streaming.
"""

from toolchat.ollama.client import ChatEndpoint, OllamaClient, build_chat_payload

__all__ = ["ChatEndpoint", "OllamaClient", "build_chat_payload"]
