# =============================================================================
# core/config.py  -  Runtime Settings
# =============================================================================
#
# All knobs come from environment variables.  main.py loads a local .env file
# (python-dotenv) before anything reads them, so either works:
#
#   WEATHER_API_URL=https://wttr.in
#   EXCHANGE_API_URL=https://api.exchangerate-api.com/v4/latest
#   HTTP_TIMEOUT_SECONDS=5
#   LOG_LEVEL=INFO
#
# Settings is frozen: it is read once at startup and shared by every call.
# =============================================================================

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.errors import ConfigError

SERVER_NAME = "weather-calculator"
SERVER_VERSION = "0.2.0"

DEFAULT_WEATHER_API_URL = "https://wttr.in"
DEFAULT_EXCHANGE_API_URL = "https://api.exchangerate-api.com/v4/latest"
DEFAULT_HTTP_TIMEOUT_SECONDS = 5.0


class Settings(BaseSettings):
    """Provider endpoints, outbound timeout and log level."""

    model_config = SettingsConfigDict(
        extra="ignore",
        frozen=True,
        populate_by_name=True,  # Settings(weather_api_url=...) in tests
    )

    weather_api_url: str = Field(default=DEFAULT_WEATHER_API_URL, alias="WEATHER_API_URL")
    exchange_api_url: str = Field(default=DEFAULT_EXCHANGE_API_URL, alias="EXCHANGE_API_URL")
    http_timeout_seconds: float = Field(default=DEFAULT_HTTP_TIMEOUT_SECONDS, alias="HTTP_TIMEOUT_SECONDS")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @field_validator("weather_api_url", "exchange_api_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("http_timeout_seconds")
    @classmethod
    def timeout_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("HTTP_TIMEOUT_SECONDS must be positive")
        return v

    @field_validator("log_level")
    @classmethod
    def upper_log_level(cls, v: str) -> str:
        return v.upper()


def load_settings() -> Settings:
    """Build Settings from the current environment.

    Raises:
        ConfigError: if a variable cannot be interpreted
                     (e.g. HTTP_TIMEOUT_SECONDS is not a positive number).
    """
    try:
        return Settings()
    except ValidationError as e:
        raise ConfigError(f"Invalid environment: {e}") from e
