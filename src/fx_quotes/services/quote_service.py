from __future__ import annotations

from decimal import Decimal
from time import perf_counter
from typing import Callable

from fx_quotes.domain.errors import InvalidAmountError, RateNotFoundError, SameCurrencyError
from fx_quotes.domain.quotes import ConversionQuote, to_decimal

from .logger_adapter import LoggerAdapter
from .rates import RatesRepository

QUOTE_RETRIEVED_TEMPLATE = "Retrieved quote for currencies %s->%s in %dms"


class QuoteService:
    def __init__(
        self,
        rates_repository: RatesRepository,
        logger: LoggerAdapter,
        *,
        clock: Callable[[], float] = perf_counter,
    ) -> None:
        self.rates_repository = rates_repository
        self.logger = logger
        self._clock = clock

    async def get_quote(
        self,
        base_currency: str,
        quote_currency: str,
        amount: Decimal | int | str,
    ) -> ConversionQuote:
        if base_currency == quote_currency:
            raise SameCurrencyError(base_currency)

        base_amount = to_decimal(amount)
        if not base_amount.is_finite() or base_amount <= 0:
            raise InvalidAmountError(base_amount)

        started = self._clock()
        fx_rate = await self.rates_repository.get_rate(base_currency, quote_currency)
        if fx_rate is None:
            raise RateNotFoundError(base_currency, quote_currency)

        quote_amount = base_amount * fx_rate.rate
        elapsed_ms = int((self._clock() - started) * 1000)

        self.logger.log_information(QUOTE_RETRIEVED_TEMPLATE, base_currency, quote_currency, elapsed_ms)

        return ConversionQuote(
            base_currency=base_currency,
            base_amount=base_amount,
            quote_currency=quote_currency,
            quote_amount=quote_amount,
        )


__all__ = ["QUOTE_RETRIEVED_TEMPLATE", "QuoteService"]
