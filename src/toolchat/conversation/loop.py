"""Tool-calling conversation loop.

The loop sends the transcript to the chat endpoint, runs the tool the model
asks for, feeds the result back and repeats until the model answers without
requesting a tool.
"""

import enum
import json
import logging
from dataclasses import dataclass
from typing import Iterable

from toolchat.conversation.types import (
    AssistantMessage,
    ToolCall,
    ToolMessage,
    Transcript,
)
from toolchat.exceptions import (
    EndpointError,
    IterationLimitError,
    ToolExecutionError,
    UnknownToolError,
)
from toolchat.ollama.client import ChatEndpoint, build_chat_payload
from toolchat.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

# Only the first tool call of an assistant turn is executed. Further calls in
# the same turn are ignored; the model can request them again next turn.
MAX_TOOL_CALLS_PER_TURN = 1


class LoopState(enum.Enum):
    AWAITING_RESPONSE = "awaiting_response"
    HANDLING_TOOL_CALL = "handling_tool_call"
    DONE = "done"


@dataclass
class ConversationResult:
    """Outcome of a completed conversation."""

    answer: str
    transcript: Transcript
    endpoint_calls: int


class ConversationLoop:
    """Drive a single prompt to a final answer.

    The set of enabled tools is resolved once at construction and stays the
    same for every turn of the conversation.

    Attributes:
        endpoint: Chat endpoint answering one request per turn
        registry: Registry the model's tool calls are dispatched through
        model: Model name sent with every request
        tool_names: Tools advertised to the model
        temperature: Sampling temperature sent with every request
        max_iterations: Maximum number of endpoint calls, None for no limit
    """

    def __init__(
        self,
        endpoint: ChatEndpoint,
        registry: ToolRegistry,
        model: str,
        tool_names: Iterable[str] | None = None,
        temperature: float = 0.0,
        max_iterations: int | None = None,
    ) -> None:
        if max_iterations is not None and max_iterations < 1:
            raise ValueError(f"max_iterations must be at least 1, got {max_iterations}")
        self.endpoint = endpoint
        self.registry = registry
        self.model = model
        self.temperature = temperature
        self.max_iterations = max_iterations
        self.descriptors = registry.list_descriptors(tool_names)
        self._advertised = {descriptor.name for descriptor in self.descriptors}
        self.state = LoopState.AWAITING_RESPONSE

    async def run(self, prompt: str) -> ConversationResult:
        """Run the conversation for one user prompt.

        Returns:
            ConversationResult: The final assistant content and transcript

        Raises:
            EndpointError: If a request to the chat endpoint fails
            IterationLimitError: If max_iterations endpoint calls were made
                without reaching a final answer
        """
        transcript = Transcript(prompt)
        endpoint_calls = 0
        pending: ToolCall | None = None
        self.state = LoopState.AWAITING_RESPONSE

        while self.state is not LoopState.DONE:
            if self.state is LoopState.AWAITING_RESPONSE:
                if self.max_iterations is not None and endpoint_calls >= self.max_iterations:
                    raise IterationLimitError(self.max_iterations)

                reply = await self._request(transcript)
                endpoint_calls += 1
                transcript.append(reply)

                if reply.tool_calls:
                    if len(reply.tool_calls) > MAX_TOOL_CALLS_PER_TURN:
                        logger.info(
                            f"Model requested {len(reply.tool_calls)} tool calls, "
                            f"handling the first {MAX_TOOL_CALLS_PER_TURN}"
                        )
                    pending = reply.tool_calls[0]
                    self.state = LoopState.HANDLING_TOOL_CALL
                else:
                    self.state = LoopState.DONE

            elif self.state is LoopState.HANDLING_TOOL_CALL:
                assert pending is not None
                content = await self._run_tool(pending)
                transcript.append(ToolMessage(tool_name=pending.name, content=content))
                pending = None
                self.state = LoopState.AWAITING_RESPONSE

        final = transcript.last_assistant()
        answer = final.content if final is not None else ""
        logger.info(f"[Final Assistant Response] after {endpoint_calls} call(s)")
        return ConversationResult(
            answer=answer, transcript=transcript, endpoint_calls=endpoint_calls
        )

    async def _request(self, transcript: Transcript) -> AssistantMessage:
        tools = [descriptor.to_ollama() for descriptor in self.descriptors]
        payload = build_chat_payload(
            model=self.model,
            messages=transcript.to_ollama(),
            tools=tools or None,
            temperature=self.temperature,
        )
        logger.info(f"[LLM Call] model={self.model}, messages={len(transcript)}")
        logger.debug(json.dumps(payload, default=str))

        response = await self.endpoint.chat(payload)

        message = response.get("message")
        if not isinstance(message, dict):
            raise EndpointError(f"Response has no message: {response}")

        reply = AssistantMessage.from_ollama(message)
        logger.info(
            f"[LLM Response] content_length={len(reply.content)}, "
            f"tool_calls={len(reply.tool_calls)}"
        )
        logger.debug(json.dumps(response, default=str))
        return reply

    async def _run_tool(self, call: ToolCall) -> str:
        """Execute a tool call, turning every tool failure into content."""
        logger.info(f"[Tool Call] Running tool: {call.name}")
        logger.info(f"Arguments: {json.dumps(dict(call.arguments), default=str)}")

        try:
            result = await self.registry.execute(call.name, call.arguments)
        except UnknownToolError as e:
            logger.error(
                f"[Tool Error] {e} (advertised tools: "
                f"{', '.join(sorted(self._advertised)) or 'none'})"
            )
            return f"Error: {e}"
        except ToolExecutionError as e:
            logger.warning(f"[Tool Error] {call.name}: {e}")
            return f"Error: {e}"
        except Exception as e:
            logger.exception(f"[Tool Error] {call.name} failed unexpectedly: {e}")
            return f"Error: {e}"

        result = str(result)
        logger.info(f"[Tool Result] Output: {result}")
        return result
