# =============================================================================
# core/dispatcher.py  -  Tool Dispatcher
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Routes a ToolRequest to one of three handlers and wraps whatever happens
#   into a uniform ToolResponse.
#
# TWO OUTCOMES, KEPT DISTINCT:
#   handle() returns either
#     - ToolResponse     for every call to a known tool, success or failure
#                        (failures carry is_error=True and a kind prefix), or
#     - ProtocolFailure  for an unknown tool name.
#
#   An unknown tool is the ONLY case the protocol layer must reject; all
#   other failures are answered.  call_tool() is the variant for protocol
#   code: it raises UnknownToolError instead of returning ProtocolFailure.
#
# ERROR PREFIXES:
#   calculate           →  "Error: ..."
#   get_weather         →  "Weather Error: ..."
#   get_exchange_rates  →  "Exchange Rate Error: ..."
# =============================================================================

import logging
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Mapping, Optional

import httpx

from core.calculator import calculate
from core.config import Settings
from core.errors import MissingArgumentError, UnknownToolError
from core.exchange import DEFAULT_BASE, ExchangeRateClient
from core.models import DispatchOutcome, ProtocolFailure, ToolRequest, ToolResponse, ToolSpec
from core.weather import WeatherClient

logger = logging.getLogger(__name__)

Handler = Callable[[dict[str, Any]], Awaitable[ToolResponse]]


# =============================================================================
# Tool catalog (what "list tools" advertises)
# =============================================================================
CALCULATE = ToolSpec(
    name="calculate",
    description="Perform basic arithmetic calculations",
    input_schema={
        "type": "object",
        "properties": {
            "expression": {
                "type": "string",
                "description": 'Mathematical expression to evaluate (e.g., "2 + 2", "10 * 5")',
            },
        },
        "required": ["expression"],
    },
)

GET_WEATHER = ToolSpec(
    name="get_weather",
    description="Get current weather information for a city",
    input_schema={
        "type": "object",
        "properties": {
            "city": {
                "type": "string",
                "description": 'City name (e.g., "Istanbul", "London", "New York")',
            },
        },
        "required": ["city"],
    },
)

GET_EXCHANGE_RATES = ToolSpec(
    name="get_exchange_rates",
    description="Get current USD exchange rates",
    input_schema={
        "type": "object",
        "properties": {
            "base": {
                "type": "string",
                "description": "Base currency (default: USD)",
                "default": DEFAULT_BASE,
            },
        },
    },
)

TOOL_SPECS: tuple[ToolSpec, ...] = (CALCULATE, GET_WEATHER, GET_EXCHANGE_RATES)


def _required_str(arguments: Mapping[str, Any], key: str) -> str:
    value = arguments.get(key)
    if value is None:
        raise MissingArgumentError(key)
    if not isinstance(value, str):
        raise TypeError(f"Argument {key!r} must be a string")
    return value


def _failure(prefix: str, error: Exception) -> ToolResponse:
    return ToolResponse.text(f"{prefix}{error}", is_error=True)


# =============================================================================
# Handlers
# =============================================================================
# Each handler turns any exception into exactly one error-flagged response.
# Classified failures are ToolServerError subclasses.
# =============================================================================
async def handle_calculate(arguments: dict[str, Any]) -> ToolResponse:
    try:
        return ToolResponse.text(calculate(_required_str(arguments, "expression")))
    except Exception as e:
        logger.info("calculate failed: %s", e)
        return _failure("Error: ", e)


def make_weather_handler(client: WeatherClient) -> Handler:
    async def handle_get_weather(arguments: dict[str, Any]) -> ToolResponse:
        try:
            return ToolResponse.text(await client.describe(_required_str(arguments, "city")))
        except Exception as e:
            logger.warning("get_weather failed: %s", e)
            return _failure("Weather Error: ", e)

    return handle_get_weather


def make_exchange_handler(client: ExchangeRateClient) -> Handler:
    async def handle_get_exchange_rates(arguments: dict[str, Any]) -> ToolResponse:
        try:
            base = arguments.get("base") or DEFAULT_BASE
            if not isinstance(base, str):
                raise TypeError("Argument 'base' must be a string")
            return ToolResponse.text(await client.describe(base))
        except Exception as e:
            logger.warning("get_exchange_rates failed: %s", e)
            return _failure("Exchange Rate Error: ", e)

    return handle_get_exchange_rates


# =============================================================================
# Dispatcher
# =============================================================================
class Dispatcher:
    """Immutable name → handler table with a uniform calling convention."""

    def __init__(self, handlers: Mapping[str, Handler], specs: tuple[ToolSpec, ...] = TOOL_SPECS):
        self._handlers = MappingProxyType(dict(handlers))
        self._specs = tuple(spec for spec in specs if spec.name in self._handlers)

    @property
    def tool_names(self) -> tuple[str, ...]:
        return tuple(self._handlers)

    def list_tools(self) -> tuple[ToolSpec, ...]:
        return self._specs

    async def handle(self, request: ToolRequest) -> DispatchOutcome:
        handler = self._handlers.get(request.name)
        if handler is None:
            logger.warning("Rejected call to unknown tool %r", request.name)
            return ProtocolFailure(reason=str(UnknownToolError(request.name)))
        return await handler(dict(request.arguments or {}))

    async def call_tool(self, name: str, arguments: Optional[dict[str, Any]] = None) -> ToolResponse:
        """Dispatch for protocol code.

        Raises:
            UnknownToolError: ``name`` is not a registered tool.
        """
        outcome = await self.handle(ToolRequest(name=name, arguments=arguments or {}))
        if isinstance(outcome, ProtocolFailure):
            raise UnknownToolError(name)
        return outcome


def build_dispatcher(
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Dispatcher:
    """Wire the three tools against the configured providers."""
    weather = WeatherClient(settings.weather_api_url, settings.http_timeout_seconds, transport)
    exchange = ExchangeRateClient(settings.exchange_api_url, settings.http_timeout_seconds, transport)
    return Dispatcher({
        CALCULATE.name: handle_calculate,
        GET_WEATHER.name: make_weather_handler(weather),
        GET_EXCHANGE_RATES.name: make_exchange_handler(exchange),
    })
