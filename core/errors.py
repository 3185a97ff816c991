# =============================================================================
# core/errors.py  -  Error Taxonomy
# =============================================================================
#
# Every failure the tool server knows how to describe is one of these.
# The dispatcher turns all of them except UnknownToolError into an
# error-flagged ToolResponse; UnknownToolError is the one failure that is
# raised to the protocol layer instead.
#
#   ToolServerError
#   ├── ConfigError               bad environment at startup
#   ├── MissingArgumentError      required tool argument absent
#   ├── EvaluationError           calculate
#   │   ├── InvalidCharactersError
#   │   └── ExpressionSyntaxError
#   ├── ProviderError             weather / exchange HTTP providers
#   │   ├── UpstreamHttpError     non-2xx status
#   │   ├── UpstreamRequestError  connection failure or timeout
#   │   └── MalformedResponseError
#   └── UnknownToolError
# =============================================================================


class ToolServerError(Exception):
    """Base class for every error raised by the tool server."""


class ConfigError(ToolServerError):
    """An environment variable could not be interpreted."""


class MissingArgumentError(ToolServerError):
    def __init__(self, argument: str):
        self.argument = argument
        super().__init__(f"Missing required argument: {argument}")


# -----------------------------------------------------------------------------
# calculate
# -----------------------------------------------------------------------------
class EvaluationError(ToolServerError):
    """The expression could not be turned into a number."""


class InvalidCharactersError(EvaluationError):
    def __init__(self):
        super().__init__("Invalid characters in expression")


class ExpressionSyntaxError(EvaluationError):
    def __init__(self, message: str, position: int):
        self.position = position
        super().__init__(f"{message} at position {position}")


# -----------------------------------------------------------------------------
# HTTP providers
# -----------------------------------------------------------------------------
class ProviderError(ToolServerError):
    """A third-party API call did not produce usable data.

    Attributes:
        api: Human-readable provider label used in messages
             (e.g. "Weather API", "Exchange rate API").
    """

    def __init__(self, api: str, message: str):
        self.api = api
        super().__init__(message)


class UpstreamHttpError(ProviderError):
    def __init__(self, api: str, status_code: int):
        self.status_code = status_code
        super().__init__(api, f"{api} error: {status_code}")


class UpstreamRequestError(ProviderError):
    def __init__(self, api: str, reason: str):
        super().__init__(api, f"{api} request failed: {reason}")


class MalformedResponseError(ProviderError):
    def __init__(self, api: str, detail: str):
        self.detail = detail
        super().__init__(api, f"{api} returned a malformed response: {detail}")


# -----------------------------------------------------------------------------
# Dispatch
# -----------------------------------------------------------------------------
class UnknownToolError(ToolServerError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")
