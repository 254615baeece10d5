"""Calculator tool backed by the ``bc`` arbitrary precision calculator."""

import logging
import os
from typing import Any, Mapping

from toolchat.exceptions import ToolExecutionError
from toolchat.tools.process import run_command
from toolchat.tools.registry import ToolDescriptor

logger = logging.getLogger(__name__)

NAME = "calculator"

DESCRIPTOR = ToolDescriptor(
    name=NAME,
    description=(
        "Perform basic arithmetic calculations such as addition, subtraction, "
        "multiplication, and division"
    ),
    properties={
        "expression": {
            "type": "string",
            "description": "The arithmetic expression to evaluate, e.g. 2 + 2 * (3 - 1)",
        }
    },
    required=("expression",),
)


class Calculator:
    """Evaluate arithmetic expressions with ``bc -l``.

    The expression is written to bc's stdin and bc is started without a
    shell, so input such as ``1; rm -rf /`` is only ever seen by bc.
    """

    def __init__(self, bc_path: str = "bc", timeout: float | None = 30.0) -> None:
        self.bc_path = bc_path
        self.timeout = timeout

    def describe(self) -> ToolDescriptor:
        return DESCRIPTOR

    async def execute(self, arguments: Mapping[str, Any]) -> str:
        expression = arguments.get("expression")
        if not isinstance(expression, str) or not expression.strip():
            raise ToolExecutionError(
                NAME, "Argument 'expression' must be a non-empty string"
            )

        # bc only evaluates once it sees a newline
        result = await run_command(
            NAME,
            [self.bc_path, "-l", "-q"],
            stdin=expression.strip() + "\n",
            timeout=self.timeout,
            # 0 disables the 70 column line wrapping of GNU bc
            env={**os.environ, "BC_LINE_LENGTH": "0"},
        )
        # bc implementations ignoring BC_LINE_LENGTH end wrapped lines with a backslash
        result = result.replace("\\\n", "")
        logger.debug(f"{expression!r} evaluated to {result!r}")
        return result
