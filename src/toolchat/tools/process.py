"""Subprocess helper shared by the tools that shell out to host utilities."""

import asyncio
import logging
from typing import Mapping

from toolchat.exceptions import ToolExecutionError

logger = logging.getLogger(__name__)


async def run_command(
    tool_name: str,
    argv: list[str],
    stdin: str | None = None,
    timeout: float | None = None,
    env: Mapping[str, str] | None = None,
) -> str:
    """Run a host command and return its trimmed standard output.

    The command is executed from an argument vector, never through a shell,
    so text passed on stdin cannot start further processes.

    Args:
        tool_name: Name of the calling tool, used in error reports
        argv: Program and arguments
        stdin: Text written to the process's standard input
        timeout: Seconds to wait before killing the process
        env: Environment for the process, None to inherit ours

    Returns:
        str: Standard output with surrounding whitespace removed

    Raises:
        ToolExecutionError: If the program is missing, times out, exits
            non-zero, gets undecodable input or reports an error on stderr
    """
    logger.debug(f"Running command for {tool_name}: {argv}")

    # Encode before spawning so bad input never leaves an orphaned process
    try:
        input_bytes = stdin.encode() if stdin is not None else None
    except UnicodeEncodeError as e:
        raise ToolExecutionError(tool_name, f"Input is not valid text: {e}") from e

    try:
        process = await asyncio.create_subprocess_exec(
            *argv,
            stdin=asyncio.subprocess.PIPE if stdin is not None else asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=dict(env) if env is not None else None,
        )
    except FileNotFoundError as e:
        raise ToolExecutionError(tool_name, f"Command not found: {argv[0]}") from e
    except OSError as e:
        raise ToolExecutionError(tool_name, f"Failed to start {argv[0]}: {e}") from e

    try:
        stdout, stderr = await asyncio.wait_for(
            process.communicate(input_bytes), timeout=timeout
        )
    except asyncio.TimeoutError as e:
        process.kill()
        await process.wait()
        raise ToolExecutionError(
            tool_name, f"{argv[0]} timed out after {timeout} seconds"
        ) from e

    output = stdout.decode(errors="replace").strip()
    diagnostic = stderr.decode(errors="replace").strip()

    if process.returncode != 0:
        raise ToolExecutionError(
            tool_name,
            diagnostic or f"{argv[0]} exited with status {process.returncode}",
        )
    if diagnostic:
        # bc reports syntax errors on stderr but still exits 0
        raise ToolExecutionError(tool_name, diagnostic)

    return output
