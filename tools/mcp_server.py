# =============================================================================
# tools/mcp_server.py  -  FastMCP Tool Server (ALL tools in one place)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Exposes the three tools over MCP.  Each tool is a thin wrapper around
#   core.dispatcher - it builds a ToolRequest, awaits the dispatcher and
#   translates the ToolResponse into what FastMCP expects.
#
# HOW IT WORKS (the flow):
#   1. An MCP client lists tools and sees calculate, get_weather and
#      get_exchange_rates
#   2. It calls one by name (e.g. "get_weather" with {"city": "London"})
#   3. FastMCP routes the call to the decorated function below
#   4. The function hands it to the Dispatcher and gets a ToolResponse back
#   5. Success → the text is returned as the tool's content
#      Failure → ToolError(text), which FastMCP sends as an isError result
#                carrying exactly that text
#
# UNKNOWN TOOLS:
#   A call to a name the dispatcher does not know is answered with a JSON-RPC
#   error (INVALID_PARAMS, "Unknown tool: ..."), not with an isError result.
#   Clients can tell "no such tool" apart from a tool that ran and failed.
#   FastMCP would otherwise report it as an ordinary error result, so the
#   low-level CallToolRequest handler is wrapped below.
#
# RUNNING THIS SERVER:
#     a) python main.py
#     b) python -m tools.mcp_server
#   Both speak MCP over stdio.
# =============================================================================

import logging
import sys

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from mcp import types
from mcp.shared.exceptions import McpError

from core.config import SERVER_NAME, SERVER_VERSION, load_settings
from core.dispatcher import CALCULATE, GET_EXCHANGE_RATES, GET_WEATHER, build_dispatcher
from core.errors import UnknownToolError
from core.exchange import DEFAULT_BASE
from core.models import ToolResponse

# =============================================================================
# Logging Setup
# =============================================================================
# Logs go to STDERR.  STDOUT is the MCP transport; anything printed there
# would corrupt the JSON-RPC stream.
#
# ANSI colours:
#   CYAN   incoming calls (tool name + parameters)
#   GREEN  responses
#   YELLOW intermediate status / failures
# =============================================================================

_CYAN = "\033[36m"     # Requests (tool calls with params)
_GREEN = "\033[32m"    # Responses
_YELLOW = "\033[33m"   # Status/progress messages
_RESET = "\033[0m"     # Reset to default terminal color

settings = load_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s [MCP] %(message)s",
    datefmt="%H:%M:%S",
    stream=sys.stderr,
)


def _log_request(tool_name: str, **params) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items())
    logging.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    """Log an intermediate status message in YELLOW."""
    logging.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, response: ToolResponse) -> ToolResponse:
    """Log the tool response text on one line in GREEN, then return it."""
    flat = response.first_text.replace("\n", " | ")
    logging.info(f"{_GREEN}  ← {tool_name} response: {flat}{_RESET}")
    return response


def _unwrap(response: ToolResponse) -> str:
    if response.is_error:
        _log_status("reported as error")
        raise ToolError(response.first_text)
    return response.first_text


# =============================================================================
# Create the FastMCP server instance
# =============================================================================
mcp = FastMCP(SERVER_NAME, version=SERVER_VERSION)
dispatcher = build_dispatcher(settings)


# =============================================================================
# TOOL 1: calculate
# =============================================================================
@mcp.tool(name=CALCULATE.name, description=CALCULATE.description)
async def calculate(expression: str) -> str:
    """Evaluate an arithmetic expression.

    Args:
        expression: Digits, + - * /, decimal points, parentheses and spaces
                    (e.g. "2 + 2", "(3+4)*2").

    Returns:
        "Result: {expression} = {value}".
    """
    _log_request(CALCULATE.name, expression=expression)
    response = await dispatcher.call_tool(CALCULATE.name, {"expression": expression})
    return _unwrap(_log_response(CALCULATE.name, response))


# =============================================================================
# TOOL 2: get_weather
# =============================================================================
@mcp.tool(name=GET_WEATHER.name, description=GET_WEATHER.description)
async def get_weather(city: str) -> str:
    """Current conditions for a city, from wttr.in.

    Args:
        city: City name (e.g. "Istanbul", "London", "New York").
    """
    _log_request(GET_WEATHER.name, city=city)
    response = await dispatcher.call_tool(GET_WEATHER.name, {"city": city})
    return _unwrap(_log_response(GET_WEATHER.name, response))


# =============================================================================
# TOOL 3: get_exchange_rates
# =============================================================================
@mcp.tool(name=GET_EXCHANGE_RATES.name, description=GET_EXCHANGE_RATES.description)
async def get_exchange_rates(base: str = DEFAULT_BASE) -> str:
    """Latest rates for EUR, GBP, JPY, TRY, CAD, AUD and CHF.

    Args:
        base: Base currency code (default: USD).
    """
    _log_request(GET_EXCHANGE_RATES.name, base=base)
    response = await dispatcher.call_tool(GET_EXCHANGE_RATES.name, {"base": base})
    return _unwrap(_log_response(GET_EXCHANGE_RATES.name, response))


# =============================================================================
# Unknown tools: protocol-level failure
# =============================================================================
# The low-level MCP server turns any exception raised by a tool into an
# isError result.  McpError raised from the request handler itself becomes
# a JSON-RPC error response instead, which is what an unknown name gets.
# =============================================================================
_call_tool_handler = mcp._mcp_server.request_handlers[types.CallToolRequest]


async def _reject_unknown_tools(request: types.CallToolRequest):
    name = request.params.name
    if name not in dispatcher.tool_names:
        _log_status(f"rejected unknown tool {name!r}")
        raise McpError(types.ErrorData(code=types.INVALID_PARAMS, message=str(UnknownToolError(name))))
    return await _call_tool_handler(request)


mcp._mcp_server.request_handlers[types.CallToolRequest] = _reject_unknown_tools


# =============================================================================
# Server entry point
# =============================================================================
def run() -> None:
    logging.info("Weather & Calculator MCP server running on stdio")
    mcp.run()


if __name__ == "__main__":
    run()
