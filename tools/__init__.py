# =============================================================================
# tools/__init__.py
# =============================================================================
# This package contains the FastMCP binding.
#
# ARCHITECTURAL ROLE:
#   tools/ is the translation layer between MCP and core/.  It:
#     1. Registers each tool with its name, description and typed parameters
#     2. Forwards calls to core.dispatcher.Dispatcher
#     3. Turns error-flagged responses into FastMCP ToolErrors
#
# WHAT TOOLS DO NOT DO:
#   - No arithmetic, HTTP or formatting (that's in core/)
# =============================================================================
