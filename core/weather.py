# =============================================================================
# core/weather.py  -  Current Weather Lookup (wttr.in)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Fetches the current conditions for a city from wttr.in and renders them
#   as a short emoji-prefixed text block.
#
# WHY WTTR.IN?
#   - Free, no API key required
#   - Accepts a free-form city name in the URL path
#   - ?format=j1 returns structured JSON with both Celsius and Fahrenheit
#
# RESPONSE SHAPE WE RELY ON:
#   {
#     "current_condition": [{ "temp_C", "temp_F", "weatherDesc": [{"value"}],
#                             "humidity", "windspeedKmph",
#                             "FeelsLikeC", "FeelsLikeF" }],
#     "nearest_area":      [{ "areaName": [{"value"}], "country": [{"value"}] }]
#   }
#
#   Only the first element of each array is used.  A missing array, an empty
#   array or a missing field is a MalformedResponseError, never an IndexError
#   or KeyError leaking out of this module.
#
# HTTP:
#   One httpx.AsyncClient per call with a bounded timeout.  Tests pass an
#   httpx.MockTransport through `transport` instead of touching the network.
# =============================================================================

import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx

from core.config import DEFAULT_HTTP_TIMEOUT_SECONDS, DEFAULT_WEATHER_API_URL
from core.errors import MalformedResponseError, UpstreamHttpError, UpstreamRequestError
from core.models import WeatherRecord

logger = logging.getLogger(__name__)

WEATHER_API = "Weather API"


# =============================================================================
# Payload parsing
# =============================================================================
def _first(payload: dict, key: str) -> dict:
    items = payload.get(key)
    if not isinstance(items, list) or not items or not isinstance(items[0], dict):
        raise MalformedResponseError(WEATHER_API, f"missing {key}[0]")
    return items[0]


def _field(section: dict, section_name: str, key: str) -> str:
    if key not in section or section[key] is None:
        raise MalformedResponseError(WEATHER_API, f"missing {section_name}.{key}")
    return str(section[key])


def _value(section: dict, section_name: str, key: str) -> str:
    """Read the ``[{"value": ...}]`` wrapper wttr.in uses for text fields."""
    items = section.get(key)
    if not isinstance(items, list) or not items or not isinstance(items[0], dict) or "value" not in items[0]:
        raise MalformedResponseError(WEATHER_API, f"missing {section_name}.{key}[0].value")
    return str(items[0]["value"])


def parse_weather(payload: Any) -> WeatherRecord:
    """Map a wttr.in ``format=j1`` payload to a WeatherRecord.

    Raises:
        MalformedResponseError: if any field the display needs is absent.
    """
    if not isinstance(payload, dict):
        raise MalformedResponseError(WEATHER_API, "expected a JSON object")

    current = _first(payload, "current_condition")
    area = _first(payload, "nearest_area")

    return WeatherRecord(
        location=f"{_value(area, 'nearest_area', 'areaName')}, {_value(area, 'nearest_area', 'country')}",
        temperature_c=_field(current, "current_condition", "temp_C"),
        temperature_f=_field(current, "current_condition", "temp_F"),
        description=_value(current, "current_condition", "weatherDesc"),
        humidity_pct=_field(current, "current_condition", "humidity"),
        wind_kmh=_field(current, "current_condition", "windspeedKmph"),
        feels_like_c=_field(current, "current_condition", "FeelsLikeC"),
        feels_like_f=_field(current, "current_condition", "FeelsLikeF"),
    )


# =============================================================================
# Display
# =============================================================================
def format_weather(record: WeatherRecord) -> str:
    """Render a WeatherRecord as the fixed six-field text block."""
    return (
        f"🌤️ Weather in {record.location}:\n"
        f"📍 Location: {record.location}\n"
        f"🌡️ Temperature: {record.temperature_c}°C ({record.temperature_f}°F)\n"
        f"🌈 Condition: {record.description}\n"
        f"💧 Humidity: {record.humidity_pct}%\n"
        f"💨 Wind Speed: {record.wind_kmh} km/h\n"
        f"🤔 Feels Like: {record.feels_like_c}°C ({record.feels_like_f}°F)"
    )


# =============================================================================
# Client
# =============================================================================
class WeatherClient:
    """Async client for the wttr.in JSON endpoint."""

    def __init__(
        self,
        base_url: str = DEFAULT_WEATHER_API_URL,
        timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def url_for(self, city: str) -> str:
        return f"{self.base_url}/{quote(city, safe='')}"

    async def fetch_weather(self, city: str) -> WeatherRecord:
        """Fetch current conditions for ``city``.

        Raises:
            UpstreamHttpError: non-2xx status (message carries the code).
            UpstreamRequestError: connection failure or timeout.
            MalformedResponseError: body is not the expected JSON shape.
        """
        url = self.url_for(city)
        logger.debug("GET %s", url)

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(url, params={"format": "j1"})
        except httpx.RequestError as e:
            logger.warning("Weather request for %r failed: %s", city, e)
            raise UpstreamRequestError(WEATHER_API, str(e) or type(e).__name__) from e

        if not response.is_success:
            raise UpstreamHttpError(WEATHER_API, response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            raise MalformedResponseError(WEATHER_API, "body is not valid JSON") from e

        return parse_weather(payload)

    async def describe(self, city: str) -> str:
        """Fetch and render in one step."""
        return format_weather(await self.fetch_weather(city))
