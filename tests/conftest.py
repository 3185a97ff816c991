# conftest.py
# Put the repository root on sys.path so `core` and `tools` import without
# an install, and provide provider payloads plus a stub HTTP transport.

import json
import sys
from pathlib import Path

import httpx
import pytest

ROOT = Path(__file__).resolve().parents[1]
ROOT_STR = str(ROOT)

if ROOT_STR not in sys.path:
    sys.path.insert(0, ROOT_STR)


@pytest.fixture
def weather_payload():
    """A trimmed wttr.in ?format=j1 response for London."""
    return {
        "current_condition": [
            {
                "temp_C": "14",
                "temp_F": "57",
                "weatherDesc": [{"value": "Partly cloudy"}],
                "humidity": "72",
                "windspeedKmph": "19",
                "FeelsLikeC": "12",
                "FeelsLikeF": "54",
            }
        ],
        "nearest_area": [
            {
                "areaName": [{"value": "London"}],
                "country": [{"value": "United Kingdom"}],
            }
        ],
    }


@pytest.fixture
def rates_payload():
    return {
        "base": "USD",
        "date": "2024-01-01",
        "rates": {"USD": 1, "EUR": 0.9123, "GBP": 0.78642, "JPY": 141.2, "XYZ": 5},
    }


class StubProvider:
    """Records requests and answers each with a canned response."""

    def __init__(self, status_code=200, payload=None, body=None, error=None):
        self.status_code = status_code
        self.payload = payload
        self.body = body
        self.error = error
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.body is not None:
            return httpx.Response(self.status_code, text=self.body)
        return httpx.Response(self.status_code, content=json.dumps(self.payload).encode())

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    @property
    def last_url(self) -> httpx.URL:
        return self.requests[-1].url


@pytest.fixture
def stub_provider():
    return StubProvider
