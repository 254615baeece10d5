"""Async Ollama client wrapper.

This module provides an async wrapper around the ollama.AsyncClient for
sending non-streaming chat requests. The client is created once at startup
and reused for every turn of the conversation.
"""

import logging
from typing import Any, Protocol, Sequence

import httpx
import ollama

from toolchat.exceptions import EndpointError

logger = logging.getLogger(__name__)


class ChatEndpoint(Protocol):
    """Anything that can answer a single non-streaming chat request."""

    async def chat(self, payload: dict[str, Any]) -> dict[str, Any]: ...


def build_chat_payload(
    model: str,
    messages: list[dict[str, Any]],
    tools: Sequence[dict[str, Any]] | None = None,
    temperature: float = 0.0,
) -> dict[str, Any]:
    """Build the request body for Ollama's /api/chat endpoint.

    The ``tools`` key is only present when at least one tool is advertised.
    An empty list is never sent.

    Args:
        model: The model name to use for the chat
        messages: Transcript in Ollama format
        tools: Serialized tool descriptors, or None for no tools
        temperature: Sampling temperature

    Returns:
        dict: The request body
    """
    payload: dict[str, Any] = {
        "model": model,
        "messages": messages,
        "stream": False,
        "options": {"temperature": temperature},
    }
    if tools:
        payload["tools"] = list(tools)
    return payload


class OllamaClient:
    """Async client for Ollama's chat API.

    Attributes:
        host: The Ollama server URL (e.g., "http://localhost:11434")
        _client: The underlying ollama.AsyncClient instance
    """

    def __init__(self, host: str, timeout: float | None = None) -> None:
        """Initialize the Ollama client.

        Args:
            host: The Ollama server URL
            timeout: Request timeout in seconds, None to wait indefinitely
        """
        self.host = host
        self._client = ollama.AsyncClient(host=host, timeout=timeout)
        logger.debug(f"OllamaClient initialized with host: {host}")

    async def chat(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Send one chat request and wait for the complete reply.

        Args:
            payload: Request body as built by build_chat_payload()

        Returns:
            dict: The reply, containing at least a ``message`` dict with
                  ``role``, ``content`` and optionally ``tool_calls``

        Raises:
            EndpointError: If Ollama is unreachable, answers with an error,
                or the reply cannot be parsed
        """
        logger.debug(
            f"Sending chat request: model={payload.get('model')}, "
            f"messages={len(payload.get('messages', []))}, "
            f"tools={len(payload.get('tools', []))}"
        )

        try:
            response = await self._client.chat(**payload)
        except ollama.ResponseError as e:
            logger.error(f"Ollama API error: {e}")
            raise EndpointError(
                f"Ollama returned an error (status {e.status_code}): {e.error}"
            ) from e
        except (httpx.HTTPError, ConnectionError) as e:
            logger.error(f"Failed to reach Ollama at {self.host}: {e}")
            raise EndpointError(f"Failed to reach Ollama at {self.host}: {e}") from e
        except ValueError as e:
            # json.JSONDecodeError and pydantic.ValidationError both land here
            logger.error(f"Failed to parse Ollama response: {e}")
            raise EndpointError(f"Failed to parse response: {e}") from e

        # Convert the response to a dict if it's not already
        if hasattr(response, "model_dump"):
            response_dict = response.model_dump(exclude_none=True)
        elif isinstance(response, dict):
            response_dict = response
        else:
            raise EndpointError(f"Unexpected response type: {type(response).__name__}")

        if not isinstance(response_dict.get("message"), dict):
            raise EndpointError(f"Response has no message: {response_dict}")

        return response_dict
