"""Tool registry and the built-in tool adapters.

Tools are advertised to the model through their descriptors and executed by
name when the model asks for them.
"""

from toolchat.tools.calculator import Calculator
from toolchat.tools.clock import CurrentDateTime
from toolchat.tools.registry import (
    Tool,
    ToolDescriptor,
    ToolRegistry,
    parse_tool_names,
)
from toolchat.tools.weather import CurrentWeather


def default_registry(
    tool_timeout: float | None = 30.0,
    weather_api_url: str | None = None,
) -> ToolRegistry:
    """Build the registry of built-in tools.

    Args:
        tool_timeout: Seconds each tool may take before it is aborted
        weather_api_url: Override for the Open-Meteo forecast endpoint

    Returns:
        ToolRegistry: Weather, calculator and date/time tools, in that order
    """
    weather = (
        CurrentWeather(api_url=weather_api_url, timeout=tool_timeout)
        if weather_api_url
        else CurrentWeather(timeout=tool_timeout)
    )
    return ToolRegistry(
        [
            weather,
            Calculator(timeout=tool_timeout),
            CurrentDateTime(timeout=tool_timeout),
        ]
    )


__all__ = [
    "Calculator",
    "CurrentDateTime",
    "CurrentWeather",
    "Tool",
    "ToolDescriptor",
    "ToolRegistry",
    "default_registry",
    "parse_tool_names",
]
