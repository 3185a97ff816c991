# =============================================================================
# core/models.py  -  Data Models (the "nouns" of the system)
# =============================================================================
#
# These dataclasses define the shape of every value that flows through one
# tool call.  All of them are request-scoped: built for a call, discarded
# once the response is produced.  Nothing here is persisted.
#
#   ToolRequest   →  Dispatcher  →  ToolResponse | ProtocolFailure
#                        │
#                        ├── WeatherRecord         (core/weather.py)
#                        └── ExchangeRateSnapshot  (core/exchange.py)
# =============================================================================

from dataclasses import dataclass, field
from typing import Any, Union


# -----------------------------------------------------------------------------
# Tool envelopes
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ToolRequest:
    """One incoming tool invocation."""

    name: str                                      # "calculate", "get_weather", ...
    arguments: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class TextContent:
    text: str
    type: str = "text"


@dataclass(frozen=True)
class ToolResponse:
    """The answer to one tool invocation.

    Every current code path produces exactly one text item.
    """

    content: tuple[TextContent, ...]
    is_error: bool = False

    @classmethod
    def text(cls, text: str, is_error: bool = False) -> "ToolResponse":
        return cls(content=(TextContent(text=text),), is_error=is_error)

    @property
    def first_text(self) -> str:
        return self.content[0].text

    def to_dict(self) -> dict:
        """Wire shape used by MCP clients (camelCase ``isError``)."""
        payload: dict[str, Any] = {
            "content": [{"type": item.type, "text": item.text} for item in self.content]
        }
        if self.is_error:
            payload["isError"] = True
        return payload


@dataclass(frozen=True)
class ProtocolFailure:
    """A call the protocol layer must reject instead of answering.

    Only produced for tool names the dispatcher does not know.
    """

    reason: str


DispatchOutcome = Union[ToolResponse, ProtocolFailure]


# -----------------------------------------------------------------------------
# ToolSpec - static metadata for "list available tools"
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    input_schema: dict[str, Any]


# -----------------------------------------------------------------------------
# WeatherRecord - one city's current conditions
# -----------------------------------------------------------------------------
# Values are copied through from the provider as strings.  The provider
# already reports both Celsius and Fahrenheit, so no conversion happens here.
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class WeatherRecord:
    location: str                      # "{areaName}, {country}"
    temperature_c: str
    temperature_f: str
    description: str                   # e.g. "Partly cloudy"
    humidity_pct: str
    wind_kmh: str
    feels_like_c: str
    feels_like_f: str


# -----------------------------------------------------------------------------
# ExchangeRateSnapshot - allow-listed rates against one base currency
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ExchangeRateSnapshot:
    base: str                          # "USD"
    rates: dict[str, float]            # insertion order = allow-list order
    date: str                          # provider's "last updated" date
