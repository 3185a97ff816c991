"""
Tests for the tool dispatcher: routing, error envelopes, and the
unknown-tool protocol failure.

Tests core/dispatcher.py
"""

import pytest

from core.config import Settings
from core.dispatcher import TOOL_SPECS, Dispatcher, build_dispatcher, handle_calculate
from core.errors import UnknownToolError
from core.models import ProtocolFailure, ToolRequest, ToolResponse


def _dispatcher(provider) -> Dispatcher:
    settings = Settings(weather_api_url="https://wttr.example", exchange_api_url="https://rates.example/v4/latest")
    return build_dispatcher(settings, transport=provider.transport)


class TestCatalog:
    def test_lists_three_tools(self, stub_provider):
        names = [spec.name for spec in _dispatcher(stub_provider()).list_tools()]
        assert names == ["calculate", "get_weather", "get_exchange_rates"]

    def test_required_arguments(self):
        schemas = {spec.name: spec.input_schema for spec in TOOL_SPECS}
        assert schemas["calculate"]["required"] == ["expression"]
        assert schemas["get_weather"]["required"] == ["city"]
        assert "required" not in schemas["get_exchange_rates"]
        assert schemas["get_exchange_rates"]["properties"]["base"]["default"] == "USD"

    def test_handler_table_is_copied(self):
        handlers = {"calculate": handle_calculate}
        dispatcher = Dispatcher(handlers)

        handlers["other"] = handle_calculate

        assert dispatcher.tool_names == ("calculate",)
        assert [spec.name for spec in dispatcher.list_tools()] == ["calculate"]


class TestCalculate:
    @pytest.mark.asyncio
    async def test_success(self, stub_provider):
        outcome = await _dispatcher(stub_provider()).handle(
            ToolRequest("calculate", {"expression": "(3+4)*2"})
        )

        assert isinstance(outcome, ToolResponse)
        assert outcome.is_error is False
        assert len(outcome.content) == 1
        assert outcome.content[0].type == "text"
        assert outcome.first_text == "Result: (3+4)*2 = 14"

    @pytest.mark.asyncio
    async def test_invalid_characters(self, stub_provider):
        outcome = await _dispatcher(stub_provider()).handle(
            ToolRequest("calculate", {"expression": "2 + 2; alert(1)"})
        )

        assert outcome.is_error is True
        assert outcome.first_text == "Error: Invalid characters in expression"

    @pytest.mark.asyncio
    async def test_syntax_error(self, stub_provider):
        outcome = await _dispatcher(stub_provider()).handle(ToolRequest("calculate", {"expression": "2 +"}))

        assert outcome.is_error is True
        assert outcome.first_text.startswith("Error: Unexpected end of input")

    @pytest.mark.asyncio
    async def test_missing_expression(self, stub_provider):
        outcome = await _dispatcher(stub_provider()).handle(ToolRequest("calculate", {}))

        assert outcome.is_error is True
        assert outcome.first_text == "Error: Missing required argument: expression"

    @pytest.mark.asyncio
    async def test_non_string_expression(self, stub_provider):
        outcome = await _dispatcher(stub_provider()).handle(ToolRequest("calculate", {"expression": 4}))

        assert outcome.is_error is True
        assert outcome.first_text.startswith("Error: ")


class TestWeather:
    @pytest.mark.asyncio
    async def test_success(self, stub_provider, weather_payload):
        provider = stub_provider(payload=weather_payload)
        outcome = await _dispatcher(provider).handle(ToolRequest("get_weather", {"city": "London"}))

        assert outcome.is_error is False
        text = outcome.first_text
        assert "London, United Kingdom" in text
        markers = ["📍 Location:", "🌡️ Temperature:", "🌈 Condition:", "💧 Humidity:", "💨 Wind Speed:", "🤔 Feels Like:"]
        positions = [text.index(marker) for marker in markers]
        assert positions == sorted(positions)

    @pytest.mark.asyncio
    async def test_http_error(self, stub_provider):
        provider = stub_provider(status_code=500, body="oops")
        outcome = await _dispatcher(provider).handle(ToolRequest("get_weather", {"city": "London"}))

        assert outcome.is_error is True
        assert outcome.first_text == "Weather Error: Weather API error: 500"

    @pytest.mark.asyncio
    async def test_malformed_payload(self, stub_provider):
        provider = stub_provider(payload={"current_condition": []})
        outcome = await _dispatcher(provider).handle(ToolRequest("get_weather", {"city": "London"}))

        assert outcome.is_error is True
        assert outcome.first_text.startswith("Weather Error: Weather API returned a malformed response")

    @pytest.mark.asyncio
    async def test_missing_city(self, stub_provider):
        provider = stub_provider()
        outcome = await _dispatcher(provider).handle(ToolRequest("get_weather", {}))

        assert outcome.first_text == "Weather Error: Missing required argument: city"
        assert provider.requests == []


class TestExchangeRates:
    @pytest.mark.asyncio
    async def test_default_base(self, stub_provider, rates_payload):
        provider = stub_provider(payload=rates_payload)
        outcome = await _dispatcher(provider).handle(ToolRequest("get_exchange_rates", {}))

        assert outcome.is_error is False
        assert outcome.first_text.startswith("💱 Exchange Rates (Base: USD)")
        assert provider.last_url.path == "/v4/latest/USD"

    @pytest.mark.asyncio
    async def test_http_error(self, stub_provider):
        provider = stub_provider(status_code=429, body="slow down")
        outcome = await _dispatcher(provider).handle(ToolRequest("get_exchange_rates", {"base": "EUR"}))

        assert outcome.is_error is True
        assert outcome.first_text == "Exchange Rate Error: Exchange rate API error: 429"


class TestUnknownTool:
    @pytest.mark.asyncio
    async def test_handle_returns_protocol_failure(self, stub_provider):
        outcome = await _dispatcher(stub_provider()).handle(ToolRequest("launch_rockets", {}))

        assert isinstance(outcome, ProtocolFailure)
        assert not isinstance(outcome, ToolResponse)
        assert outcome.reason == "Unknown tool: launch_rockets"

    @pytest.mark.asyncio
    async def test_call_tool_raises(self, stub_provider):
        with pytest.raises(UnknownToolError, match="Unknown tool: launch_rockets"):
            await _dispatcher(stub_provider()).call_tool("launch_rockets", {})

    @pytest.mark.asyncio
    async def test_call_tool_answers_known_tools(self, stub_provider):
        response = await _dispatcher(stub_provider()).call_tool("calculate", {"expression": "10 * 5"})
        assert response.to_dict() == {"content": [{"type": "text", "text": "Result: 10 * 5 = 50"}]}

    @pytest.mark.asyncio
    async def test_error_wire_shape(self, stub_provider):
        response = await _dispatcher(stub_provider()).call_tool("calculate", {"expression": "x"})
        assert response.to_dict()["isError"] is True
