# =============================================================================
# main.py  -  Entry Point for the Weather & Calculator MCP Server
# =============================================================================
#
# HOW TO RUN:
#   uv run python main.py
#
# WHAT HAPPENS:
#   1. Loads a local .env file, if present (WEATHER_API_URL, LOG_LEVEL, ...)
#   2. Imports the FastMCP server (tools/mcp_server.py), which reads the
#      settings and registers calculate, get_weather, get_exchange_rates
#   3. Serves MCP over stdio until the client disconnects
#
# CONNECTING A CLIENT:
#   Any MCP client that can launch a stdio server works, e.g.
#     { "command": "uv", "args": ["run", "python", "/path/to/main.py"] }
# =============================================================================

from dotenv import load_dotenv

# Must happen BEFORE importing the server: settings are read at import time.
load_dotenv()

from tools.mcp_server import run  # noqa: E402


if __name__ == "__main__":
    run()
