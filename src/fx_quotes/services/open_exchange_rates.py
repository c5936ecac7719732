from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

import requests
from requests import Response
from requests.adapters import HTTPAdapter
from urllib3.util import Retry

from fx_quotes.domain.quotes import FxRate

from .rates import RatesRepository

logger = logging.getLogger(__name__)

_REQUEST_FAILED = "Open Exchange Rates request failed"


def _error_message(payload: dict[str, Any]) -> str:
    return payload.get("description") or payload.get("message") or _REQUEST_FAILED


# API docs: https://docs.openexchangerates.org/reference/latest-json
class OpenExchangeRatesAPIError(RuntimeError):
    def __init__(self, message: str, *, status_code: int | None = None, payload: Any | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


@dataclass(frozen=True)
class LatestRates:
    timestamp: datetime
    base: str
    rates: dict[str, Decimal]


class OpenExchangeRatesClient:
    def __init__(
        self,
        *,
        app_id: str,
        base_url: str = "https://openexchangerates.org/api",
        timeout: float = 10.0,
        session: requests.Session | None = None,
        retry_attempts: int = 5,
        retry_backoff_seconds: float = 1,
    ) -> None:
        if not app_id:
            msg = "app_id must be provided"
            raise ValueError(msg)

        self.app_id = app_id
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or self._build_session(retry_attempts, retry_backoff_seconds)

    @staticmethod
    def _build_session(retry_attempts: int, retry_backoff_seconds: float) -> requests.Session:
        session = requests.Session()
        retries = Retry(
            total=retry_attempts,
            backoff_factor=retry_backoff_seconds,
            status_forcelist=[429],
            allowed_methods=frozenset({"GET"}),
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retries)
        session.mount("https://", adapter)
        session.mount("http://", adapter)
        return session

    def get_latest_rates(self) -> LatestRates:
        payload = self._request("GET", "/latest.json")

        timestamp_raw = payload.get("timestamp")
        base_currency = payload.get("base")
        rates_raw = payload.get("rates")
        if timestamp_raw is None or base_currency is None or not isinstance(rates_raw, dict):
            raise OpenExchangeRatesAPIError("Open Exchange Rates payload missing required fields", payload=payload)

        return LatestRates(
            timestamp=datetime.fromtimestamp(int(timestamp_raw), tz=timezone.utc),
            base=str(base_currency).upper(),
            rates={code_raw.upper(): Decimal(str(rate)) for code_raw, rate in rates_raw.items()},
        )

    def _request(self, method: str, path: str) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = self._session.request(method, url, params={"app_id": self.app_id}, timeout=self.timeout)
            response.raise_for_status()
        except requests.HTTPError as exc:
            raise self._http_error(exc.response) from exc
        except requests.RequestException as exc:
            raise OpenExchangeRatesAPIError(_REQUEST_FAILED) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise OpenExchangeRatesAPIError("Open Exchange Rates returned invalid JSON", payload=response.text) from exc

        if not isinstance(payload, dict):
            raise OpenExchangeRatesAPIError("Open Exchange Rates returned unexpected payload type", payload=payload)
        if payload.get("error"):
            raise OpenExchangeRatesAPIError(_error_message(payload), payload=payload)
        return payload

    @staticmethod
    def _http_error(response: Response | None) -> OpenExchangeRatesAPIError:
        if response is None:
            return OpenExchangeRatesAPIError(_REQUEST_FAILED)

        try:
            payload: Any = response.json()
        except ValueError:
            payload = response.text
        message = _error_message(payload) if isinstance(payload, dict) else _REQUEST_FAILED
        return OpenExchangeRatesAPIError(message, status_code=response.status_code, payload=payload)


class OpenExchangeRatesRepository(RatesRepository):
    """Rates repository backed by the Open Exchange Rates ``latest`` endpoint.

    The free plan only publishes USD-based rates, so every pair is computed as
    a cross rate through the payload base.
    """

    def __init__(self, *, client: OpenExchangeRatesClient) -> None:
        self.client = client

    async def get_rate(self, from_currency: str, to_currency: str) -> FxRate | None:
        snapshot = await asyncio.to_thread(self.client.get_latest_rates)
        return self._to_fx_rate(snapshot, from_currency, to_currency)

    def _to_fx_rate(self, snapshot: LatestRates, from_currency: str, to_currency: str) -> FxRate | None:
        from_rate = self._resolve_rate(snapshot, from_currency.upper())
        to_rate = self._resolve_rate(snapshot, to_currency.upper())
        if from_rate is None or to_rate is None or from_rate == 0:
            logger.info("Open Exchange Rates has no rate for %s->%s", from_currency, to_currency)
            return None

        return FxRate(
            from_currency=from_currency,
            to_currency=to_currency,
            rate=to_rate / from_rate,
            timestamp_utc=snapshot.timestamp,
        )

    @staticmethod
    def _resolve_rate(snapshot: LatestRates, currency: str) -> Decimal | None:
        if currency == snapshot.base:
            return Decimal("1")
        return snapshot.rates.get(currency)


__all__ = ["LatestRates", "OpenExchangeRatesAPIError", "OpenExchangeRatesClient", "OpenExchangeRatesRepository"]
