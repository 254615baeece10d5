"""CLI entry point for toolchat.

This module provides the command-line interface for sending a prompt to
Ollama. It can be invoked as `toolchat` (via the script entry point) or
`python -m toolchat`.
"""

import argparse
import asyncio
import logging
import sys

from pydantic import ValidationError

from toolchat import __version__
from toolchat.config import ToolchatSettings
from toolchat.conversation import ConversationLoop
from toolchat.exceptions import ToolchatError
from toolchat.ollama import OllamaClient
from toolchat.tools import ToolRegistry, default_registry, parse_tool_names


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="toolchat",
        description="Send a prompt to a local Ollama model, letting it call tools",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"toolchat {__version__}",
    )

    parser.add_argument(
        "-p",
        "--prompt",
        type=str,
        default=None,
        help="Prompt to send to the LLM (required unless --list-tools is given)",
    )

    parser.add_argument(
        "-m",
        "--model",
        type=str,
        default=None,
        help="Model to use, e.g. qwen3:4b or qwen3:8b (default: qwen3:4b, can be set via TOOLCHAT_DEFAULT_MODEL)",
    )

    parser.add_argument(
        "-t",
        "--tools",
        type=str,
        default=None,
        help="Comma-separated list of tool names to enable, e.g. calculator,get_current_weather",
    )

    parser.add_argument(
        "--list-tools",
        action="store_true",
        help="List the available tools and exit",
    )

    parser.add_argument(
        "--ollama-host",
        type=str,
        default=None,
        help="Ollama server URL (default: http://localhost:11434, can be set via TOOLCHAT_OLLAMA_HOST)",
    )

    parser.add_argument(
        "--max-iterations",
        type=int,
        default=None,
        help="Maximum number of model calls per prompt (default: 50, can be set via TOOLCHAT_MAX_ITERATIONS)",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO, can be set via TOOLCHAT_LOG_LEVEL)",
    )

    return parser


def list_tools(registry: ToolRegistry) -> str:
    lines = []
    for name in registry.names():
        descriptor = registry.get(name).describe()
        lines.append(f"{descriptor.name}: {descriptor.description}")
    return "\n".join(lines)


async def run_prompt(
    settings: ToolchatSettings,
    prompt: str,
    model: str,
    tool_names: list[str],
    registry: ToolRegistry,
) -> str:
    """Run one prompt through the conversation loop and return the answer."""
    client = OllamaClient(host=settings.ollama_host, timeout=settings.request_timeout)
    loop = ConversationLoop(
        endpoint=client,
        registry=registry,
        model=model,
        tool_names=tool_names,
        temperature=settings.temperature,
        max_iterations=settings.max_iterations,
    )
    result = await loop.run(prompt)
    return result.answer


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the toolchat CLI.

    Returns:
        int: Process exit code, 0 on success and 1 on a fatal error
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    # Build settings, CLI args override environment variables
    settings_kwargs = {}
    if args.ollama_host is not None:
        settings_kwargs["ollama_host"] = args.ollama_host
    if args.max_iterations is not None:
        settings_kwargs["max_iterations"] = args.max_iterations
    if args.log_level is not None:
        settings_kwargs["log_level"] = args.log_level

    try:
        settings = ToolchatSettings(**settings_kwargs)
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(loc) for loc in error['loc'])}: {error['msg']}"
            for error in e.errors()
        )
        parser.error(f"invalid settings: {errors}")

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    registry = default_registry(
        tool_timeout=settings.tool_timeout,
        weather_api_url=settings.weather_api_url,
    )

    if args.list_tools:
        print(list_tools(registry))
        return 0

    if not args.prompt:
        parser.error("the following arguments are required: -p/--prompt")

    model = args.model or settings.default_model
    tool_names = parse_tool_names(args.tools)

    try:
        answer = asyncio.run(
            run_prompt(settings, args.prompt, model, tool_names, registry)
        )
    except ToolchatError as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        return 1

    print(answer)
    return 0


if __name__ == "__main__":
    sys.exit(main())
