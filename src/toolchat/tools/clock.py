"""Current date/time tool reading the host system clock via ``date``."""

from typing import Any, Mapping

from toolchat.tools.process import run_command
from toolchat.tools.registry import ToolDescriptor

NAME = "get_current_datetime"

DESCRIPTOR = ToolDescriptor(
    name=NAME,
    description="Get the current local date and time",
)


class CurrentDateTime:
    """Return the output of the host ``date`` command."""

    def __init__(self, date_path: str = "date", timeout: float | None = 30.0) -> None:
        self.date_path = date_path
        self.timeout = timeout

    def describe(self) -> ToolDescriptor:
        return DESCRIPTOR

    async def execute(self, arguments: Mapping[str, Any]) -> str:
        return await run_command(NAME, [self.date_path], timeout=self.timeout)
