# =============================================================================
# core/exchange.py  -  Exchange Rate Lookup (exchangerate-api.com)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Fetches the latest rates for a base currency and keeps only a fixed set
#   of popular currencies, in a fixed order.
#
# RESPONSE SHAPE WE RELY ON:
#   GET {base_url}/{BASE}  →  { "rates": { "EUR": 0.91, ... }, "date": "2024-01-01" }
#
# FILTERING:
#   The provider returns ~160 currencies.  Only POPULAR_CURRENCIES are kept;
#   a code the provider does not report (or reports as 0) is skipped
#   silently.
# =============================================================================

import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx

from core.config import DEFAULT_EXCHANGE_API_URL, DEFAULT_HTTP_TIMEOUT_SECONDS
from core.errors import MalformedResponseError, UpstreamHttpError, UpstreamRequestError
from core.models import ExchangeRateSnapshot

logger = logging.getLogger(__name__)

EXCHANGE_API = "Exchange rate API"
DEFAULT_BASE = "USD"
POPULAR_CURRENCIES = ("EUR", "GBP", "JPY", "TRY", "CAD", "AUD", "CHF")


def filter_rates(rates: dict[str, Any]) -> dict[str, float]:
    """Keep the allow-listed currencies, in allow-list order."""
    kept = {}
    for code in POPULAR_CURRENCIES:
        rate = rates.get(code)
        if not rate:
            continue
        if isinstance(rate, bool) or not isinstance(rate, (int, float)):
            raise MalformedResponseError(EXCHANGE_API, f"rate for {code} is not a number")
        kept[code] = float(rate)
    return kept


def parse_rates(base: str, payload: Any) -> ExchangeRateSnapshot:
    """Build a snapshot from the provider payload.

    Raises:
        MalformedResponseError: ``rates`` or ``date`` is missing.
    """
    if not isinstance(payload, dict):
        raise MalformedResponseError(EXCHANGE_API, "expected a JSON object")
    rates = payload.get("rates")
    if not isinstance(rates, dict):
        raise MalformedResponseError(EXCHANGE_API, "missing rates")
    date = payload.get("date")
    if date is None:
        raise MalformedResponseError(EXCHANGE_API, "missing date")
    return ExchangeRateSnapshot(base=base, rates=filter_rates(rates), date=str(date))


def format_rates(snapshot: ExchangeRateSnapshot) -> str:
    lines = [f"💱 Exchange Rates (Base: {snapshot.base})", ""]
    lines.extend(f"{code}: {rate:.4f}" for code, rate in snapshot.rates.items())
    lines.append("")
    lines.append(f"📅 Last Updated: {snapshot.date}")
    return "\n".join(lines)


class ExchangeRateClient:
    """Async client for the exchangerate-api.com v4 ``latest`` endpoint."""

    def __init__(
        self,
        base_url: str = DEFAULT_EXCHANGE_API_URL,
        timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def url_for(self, base: str) -> str:
        return f"{self.base_url}/{quote(base, safe='')}"

    async def fetch_rates(self, base: Optional[str] = DEFAULT_BASE) -> ExchangeRateSnapshot:
        """Fetch the allow-listed rates against ``base`` (``"USD"`` when empty).

        Raises:
            UpstreamHttpError: non-2xx status (message carries the code).
            UpstreamRequestError: connection failure or timeout.
            MalformedResponseError: body is not the expected JSON shape.
        """
        base = base or DEFAULT_BASE
        url = self.url_for(base)
        logger.debug("GET %s", url)

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(url)
        except httpx.RequestError as e:
            logger.warning("Exchange rate request for %r failed: %s", base, e)
            raise UpstreamRequestError(EXCHANGE_API, str(e) or type(e).__name__) from e

        if not response.is_success:
            raise UpstreamHttpError(EXCHANGE_API, response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            raise MalformedResponseError(EXCHANGE_API, "body is not valid JSON") from e

        return parse_rates(base, payload)

    async def describe(self, base: Optional[str] = DEFAULT_BASE) -> str:
        return format_rates(await self.fetch_rates(base))
