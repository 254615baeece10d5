"""Pytest configuration and shared fixtures for toolchat tests.

This module provides a scripted chat endpoint and simple in-memory tools so
the conversation loop can be exercised without Ollama or the network.
"""

import sys
from typing import Any, Mapping

import pytest

from toolchat.config import ToolchatSettings
from toolchat.exceptions import ToolExecutionError
from toolchat.tools.registry import ToolDescriptor, ToolRegistry


def tool_call(name: str, **arguments: Any) -> dict[str, Any]:
    """Build a tool call in Ollama wire format."""
    return {"function": {"name": name, "arguments": arguments}}


def reply(content: str = "", tool_calls: list[dict] | None = None) -> dict[str, Any]:
    """Build a non-streaming Ollama chat reply."""
    message: dict[str, Any] = {"role": "assistant", "content": content}
    if tool_calls is not None:
        message["tool_calls"] = tool_calls
    return {"model": "qwen3:4b", "message": message, "done": True}


class ScriptedEndpoint:
    """Chat endpoint that answers with a fixed sequence of replies.

    Every payload it receives is recorded. A reply may also be an exception
    instance, which is raised instead of answering.
    """

    def __init__(self, replies: list[Any]) -> None:
        self.replies = list(replies)
        self.payloads: list[dict[str, Any]] = []

    async def chat(self, payload: dict[str, Any]) -> dict[str, Any]:
        self.payloads.append(payload)
        if not self.replies:
            raise AssertionError("ScriptedEndpoint ran out of replies")
        response = self.replies.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class EchoTool:
    """Tool returning its ``text`` argument, or failing when asked to."""

    def __init__(self, name: str = "echo") -> None:
        self.name = name
        self.calls: list[dict[str, Any]] = []

    def describe(self) -> ToolDescriptor:
        return ToolDescriptor(
            name=self.name,
            description="Echo the given text",
            properties={"text": {"type": "string", "description": "Text to echo"}},
            required=("text",),
        )

    async def execute(self, arguments: Mapping[str, Any]) -> str:
        self.calls.append(dict(arguments))
        if arguments.get("fail"):
            raise ToolExecutionError(self.name, "echo refused")
        return str(arguments.get("text", ""))


@pytest.fixture
def echo_tool():
    return EchoTool()


@pytest.fixture
def registry(echo_tool):
    return ToolRegistry([echo_tool, EchoTool("shout")])


@pytest.fixture
def test_settings():
    """Create settings that do not depend on the environment."""
    return ToolchatSettings(
        ollama_host="http://localhost:11434",
        default_model="qwen3:4b",
        max_iterations=10,
        tool_timeout=5.0,
        log_level="DEBUG",
    )


# Stand-in for bc: answers a fixed set of expressions, pads its output with
# whitespace and wraps long numbers the way GNU bc does unless
# BC_LINE_LENGTH is 0.
FAKE_BC_SOURCE = r'''
import os
import sys

expression = sys.stdin.read().strip()
line_length = int(os.environ.get("BC_LINE_LENGTH", "70"))

if expression == "2+2":
    result = "4"
elif expression == "2^300":
    result = str(2 ** 300)
else:
    sys.stderr.write("(standard_in) 1: syntax error\n")
    sys.exit(0)

if line_length > 1:
    width = line_length - 1
    chunks = [result[i:i + width] for i in range(0, len(result), width)]
    result = "\\\n".join(chunks)

print("  " + result + "  ")
'''


@pytest.fixture
def fake_bc(tmp_path):
    """Path to an executable that behaves like bc for a few expressions."""
    script = tmp_path / "fake_bc"
    script.write_text(f"#!{sys.executable}\n" + FAKE_BC_SOURCE.lstrip())
    script.chmod(0o755)
    return str(script)
