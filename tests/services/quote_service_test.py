from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterator

import pytest

from fx_quotes.domain.errors import InvalidAmountError, RateNotFoundError, SameCurrencyError
from fx_quotes.domain.quotes import ConversionQuote, FxRate
from fx_quotes.services.quote_service import QUOTE_RETRIEVED_TEMPLATE, QuoteService


class _StubRatesRepository:
    def __init__(self, rate: FxRate | None = None, error: Exception | None = None) -> None:
        self.rate = rate
        self.error = error
        self.calls: list[tuple[str, str]] = []

    async def get_rate(self, from_currency: str, to_currency: str) -> FxRate | None:
        self.calls.append((from_currency, to_currency))
        if self.error is not None:
            raise self.error
        return self.rate


class _RecordingLogger:
    def __init__(self) -> None:
        self.entries: list[tuple[str, tuple[object, ...]]] = []

    def log_information(self, template: str, *args: object) -> None:
        self.entries.append((template, args))


def _fx_rate(from_currency: str, to_currency: str, rate: str) -> FxRate:
    return FxRate(
        from_currency=from_currency,
        to_currency=to_currency,
        rate=Decimal(rate),
        timestamp_utc=datetime.now(timezone.utc),
    )


@pytest.mark.parametrize(
    ("base_currency", "quote_currency", "rate", "final_result"),
    [
        ("GBP", "USD", "1.6", Decimal("160")),
        ("USD", "GBP", "1.7", Decimal("170")),
    ],
)
def test_get_quote_returns_converted_amount_for_supported_pair(
    base_currency: str, quote_currency: str, rate: str, final_result: Decimal
) -> None:
    repository = _StubRatesRepository(rate=_fx_rate(base_currency, quote_currency, rate))
    service = QuoteService(repository, _RecordingLogger())

    result = asyncio.run(service.get_quote(base_currency, quote_currency, 100))

    assert result == ConversionQuote(
        base_currency=base_currency,
        base_amount=Decimal("100"),
        quote_currency=quote_currency,
        quote_amount=final_result,
    )
    assert repository.calls == [(base_currency, quote_currency)]


def test_get_quote_keeps_exact_decimal_precision() -> None:
    repository = _StubRatesRepository(rate=_fx_rate("EUR", "JPY", "161.2345"))
    service = QuoteService(repository, _RecordingLogger())

    result = asyncio.run(service.get_quote("EUR", "JPY", Decimal("0.33")))

    assert result.quote_amount == Decimal("53.207385")


def test_get_quote_raises_same_currency_error_without_lookup() -> None:
    repository = _StubRatesRepository(rate=_fx_rate("GBP", "GBP", "1.6"))
    logger = _RecordingLogger()
    service = QuoteService(repository, logger)

    with pytest.raises(SameCurrencyError, match="^You cannot convert currency GBP to itself$") as exc_info:
        asyncio.run(service.get_quote("GBP", "GBP", 100))

    assert exc_info.value.currency == "GBP"
    assert repository.calls == []
    assert logger.entries == []


@pytest.mark.parametrize("amount", [0, -1, Decimal("-0.01"), Decimal("NaN"), Decimal("Infinity"), "-Infinity"])
def test_get_quote_rejects_non_positive_or_non_finite_amounts(amount: int | Decimal | str) -> None:
    repository = _StubRatesRepository(rate=_fx_rate("GBP", "USD", "1.6"))
    logger = _RecordingLogger()
    service = QuoteService(repository, logger)

    with pytest.raises(InvalidAmountError):
        asyncio.run(service.get_quote("GBP", "USD", amount))

    assert repository.calls == []
    assert logger.entries == []


def test_get_quote_raises_rate_not_found_when_repository_has_no_rate() -> None:
    logger = _RecordingLogger()
    service = QuoteService(_StubRatesRepository(rate=None), logger)

    with pytest.raises(RateNotFoundError, match="GBP->XYZ") as exc_info:
        asyncio.run(service.get_quote("GBP", "XYZ", 100))

    assert (exc_info.value.from_currency, exc_info.value.to_currency) == ("GBP", "XYZ")
    assert logger.entries == []


def test_get_quote_propagates_repository_errors() -> None:
    error = ConnectionError("rates backend unavailable")
    service = QuoteService(_StubRatesRepository(error=error), _RecordingLogger())

    with pytest.raises(ConnectionError) as exc_info:
        asyncio.run(service.get_quote("GBP", "USD", 100))

    assert exc_info.value is error


def test_get_quote_logs_once_with_currencies_and_elapsed_time() -> None:
    ticks: Iterator[float] = iter([10.0, 10.25])
    logger = _RecordingLogger()
    service = QuoteService(
        _StubRatesRepository(rate=_fx_rate("GBP", "USD", "1.6")),
        logger,
        clock=lambda: next(ticks),
    )

    asyncio.run(service.get_quote("GBP", "USD", 100))

    assert logger.entries == [(QUOTE_RETRIEVED_TEMPLATE, ("GBP", "USD", 250))]
    assert QUOTE_RETRIEVED_TEMPLATE == "Retrieved quote for currencies %s->%s in %dms"


def test_concurrent_quotes_are_independent() -> None:
    repository = _StubRatesRepository(rate=_fx_rate("GBP", "USD", "1.6"))
    logger = _RecordingLogger()
    service = QuoteService(repository, logger)

    async def run_both() -> list[ConversionQuote]:
        return list(
            await asyncio.gather(
                service.get_quote("GBP", "USD", 100),
                service.get_quote("GBP", "USD", 200),
            )
        )

    first, second = asyncio.run(run_both())

    assert first.quote_amount == Decimal("160")
    assert second.quote_amount == Decimal("320")
    assert len(repository.calls) == 2
    assert len(logger.entries) == 2
