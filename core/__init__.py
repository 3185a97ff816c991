# =============================================================================
# core/__init__.py
# =============================================================================
# This package contains ALL the logic behind the three tools:
#   calculator.py  expression sanitizer + arithmetic evaluator
#   weather.py     wttr.in client and display template
#   exchange.py    exchangerate-api.com client and display template
#   dispatcher.py  tool name → handler routing and error envelopes
#
# ARCHITECTURAL RULE:
#   Nothing in this package imports FastMCP.  The dispatcher can be driven
#   from a test, a REPL or any other protocol adapter; tools/ is just the
#   MCP wiring.
# =============================================================================
