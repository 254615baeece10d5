"""Tool registry: descriptors, the tool interface and name-based dispatch.

A ToolRegistry is an explicit value built at startup and handed to the
conversation loop. It maps a tool name to an implementation that can describe
itself to the model and execute a call.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Protocol

from toolchat.exceptions import UnknownToolError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolDescriptor:
    """Static declaration of a tool, advertised to the inference server."""

    name: str
    description: str
    properties: dict[str, dict[str, Any]] = field(default_factory=dict)
    required: tuple[str, ...] = ()

    def to_ollama(self) -> dict[str, Any]:
        """Serialize in the ``{"type": "function", "function": {...}}`` shape."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": {
                    "type": "object",
                    "properties": self.properties,
                    "required": list(self.required),
                },
            },
        }


class Tool(Protocol):
    """Interface implemented by every tool adapter."""

    def describe(self) -> ToolDescriptor: ...

    async def execute(self, arguments: Mapping[str, Any]) -> str: ...


def parse_tool_names(value: str | None) -> list[str]:
    """Split a comma-separated list of tool names, dropping blanks."""
    if not value:
        return []
    return [name.strip() for name in value.split(",") if name.strip()]


class ToolRegistry:
    """Ordered mapping from tool name to implementation."""

    def __init__(self, tools: Iterable[Tool] = ()) -> None:
        self._tools: dict[str, Tool] = {}
        for tool in tools:
            self.register(tool)

    def register(self, tool: Tool) -> None:
        """Add a tool at the end of the registry order.

        Raises:
            ValueError: If a tool with the same name is already registered
        """
        name = tool.describe().name
        if name in self._tools:
            raise ValueError(f"Tool '{name}' is already registered")
        self._tools[name] = tool
        logger.debug(f"Registered tool: {name}")

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def names(self) -> list[str]:
        return list(self._tools)

    def get(self, name: str) -> Tool | None:
        return self._tools.get(name)

    def list_descriptors(
        self, selected_names: Iterable[str] | None
    ) -> tuple[ToolDescriptor, ...]:
        """Return descriptors for the selected tools, in registry order.

        An empty or missing selection means no tools are advertised at all.
        Selected names that are not registered are skipped with a warning.

        Args:
            selected_names: Names the user enabled

        Returns:
            tuple[ToolDescriptor, ...]: Descriptors of the enabled tools
        """
        selected = set(selected_names or ())
        if not selected:
            return ()

        unknown = selected - self._tools.keys()
        if unknown:
            logger.warning(
                f"Ignoring unknown tool names: {', '.join(sorted(unknown))} "
                f"(available: {', '.join(self._tools)})"
            )

        return tuple(
            tool.describe() for name, tool in self._tools.items() if name in selected
        )

    async def execute(self, name: str, arguments: Mapping[str, Any]) -> str:
        """Run the named tool.

        Raises:
            UnknownToolError: If no tool with this name is registered
            ToolExecutionError: If the tool's underlying operation fails
        """
        tool = self._tools.get(name)
        if tool is None:
            raise UnknownToolError(name)
        return await tool.execute(arguments)
