"""Weather tool: query current conditions via the Open-Meteo API."""

import logging
from typing import Any, Mapping

import httpx

from toolchat.tools.registry import ToolDescriptor

logger = logging.getLogger(__name__)

NAME = "get_current_weather"

DEFAULT_API_URL = "https://api.open-meteo.com/v1/forecast"

DESCRIPTOR = ToolDescriptor(
    name=NAME,
    description="Get the current weather for a location given by its coordinates",
    properties={
        "latitude": {
            "type": "number",
            "description": "Latitude of the location in decimal degrees, e.g. 37.77",
        },
        "longitude": {
            "type": "number",
            "description": "Longitude of the location in decimal degrees, e.g. -122.42",
        },
        "format": {
            "type": "string",
            "description": "The unit to return the temperature in, 'celsius' or 'fahrenheit'",
            "enum": ["celsius", "fahrenheit"],
        },
    },
    required=("latitude", "longitude"),
)

# WMO weather interpretation codes as used by Open-Meteo
WEATHER_CODES: dict[int, str] = {
    0: "Clear sky",
    1: "Mainly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Fog",
    48: "Depositing rime fog",
    51: "Light drizzle",
    53: "Moderate drizzle",
    55: "Dense drizzle",
    56: "Light freezing drizzle",
    57: "Dense freezing drizzle",
    61: "Slight rain",
    63: "Moderate rain",
    65: "Heavy rain",
    66: "Light freezing rain",
    67: "Heavy freezing rain",
    71: "Slight snow fall",
    73: "Moderate snow fall",
    75: "Heavy snow fall",
    77: "Snow grains",
    80: "Slight rain showers",
    81: "Moderate rain showers",
    82: "Violent rain showers",
    85: "Slight snow showers",
    86: "Heavy snow showers",
    95: "Thunderstorm",
    96: "Thunderstorm with slight hail",
    99: "Thunderstorm with heavy hail",
}

CURRENT_FIELDS = (
    "temperature_2m",
    "apparent_temperature",
    "relative_humidity_2m",
    "wind_speed_10m",
    "weather_code",
)


def describe_weather_code(code: Any) -> str:
    try:
        return WEATHER_CODES.get(int(code), f"Unknown (code {code})")
    except (TypeError, ValueError):
        return f"Unknown (code {code})"


def _coordinate(arguments: Mapping[str, Any], key: str, bound: float) -> float | None:
    value = arguments.get(key)
    # bool is an int subclass but never a coordinate
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not -bound <= number <= bound:
        return None
    return number


class CurrentWeather:
    """Fetch and summarize current conditions for a coordinate pair.

    This tool fails soft: every problem, from missing arguments to network
    errors, is reported as an "Error: ..." string instead of an exception.
    """

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        timeout: float | None = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_url = api_url
        self.timeout = timeout
        self._transport = transport

    def describe(self) -> ToolDescriptor:
        return DESCRIPTOR

    async def execute(self, arguments: Mapping[str, Any]) -> str:
        latitude = _coordinate(arguments, "latitude", 90)
        longitude = _coordinate(arguments, "longitude", 180)
        if latitude is None or longitude is None:
            return (
                "Error: 'latitude' (-90..90) and 'longitude' (-180..180) "
                "are required numeric arguments"
            )

        unit = str(arguments.get("format") or "celsius").lower()
        if unit not in ("celsius", "fahrenheit"):
            return f"Error: unsupported format '{unit}', use 'celsius' or 'fahrenheit'"

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                resp = await client.get(
                    self.api_url,
                    params={
                        "latitude": latitude,
                        "longitude": longitude,
                        "current": ",".join(CURRENT_FIELDS),
                        "temperature_unit": unit,
                        "wind_speed_unit": "kmh",
                    },
                )
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Weather API error: {e}")
            return f"Error: weather service returned status {e.response.status_code}"
        except httpx.HTTPError as e:
            logger.error(f"Weather API error: {e}")
            return f"Error: could not reach weather service: {e}"
        except ValueError as e:
            logger.error(f"Weather API returned invalid JSON: {e}")
            return "Error: could not parse weather service response"

        return self._format(data, latitude, longitude)

    @staticmethod
    def _format(data: Any, latitude: float, longitude: float) -> str:
        current = data.get("current") if isinstance(data, dict) else None
        if not isinstance(current, dict) or "weather_code" not in current:
            logger.error(f"Unexpected weather response: {data}")
            return "Error: weather service response is missing current conditions"

        units = data.get("current_units")
        if not isinstance(units, dict):
            units = {}

        def reading(key: str) -> str:
            value = current.get(key, "?")
            return f"{value}{units.get(key, '')}"

        return "\n".join(
            [
                f"Current weather at {latitude}, {longitude} ({current.get('time', 'now')}):",
                f"Condition: {describe_weather_code(current['weather_code'])}",
                f"Temperature: {reading('temperature_2m')}",
                f"Feels like: {reading('apparent_temperature')}",
                f"Humidity: {reading('relative_humidity_2m')}",
                f"Wind speed: {reading('wind_speed_10m')}",
            ]
        )
