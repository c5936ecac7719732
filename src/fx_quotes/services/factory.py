from __future__ import annotations

from fx_quotes.config import AppSettings
from fx_quotes.db.db import init_db
from fx_quotes.db.repositories import SqlRatesRepository

from .logger_adapter import StdlibLoggerAdapter
from .open_exchange_rates import OpenExchangeRatesClient, OpenExchangeRatesRepository
from .quote_service import QuoteService
from .rates import RatesRepository


def build_rates_repository(settings: AppSettings) -> RatesRepository:
    if settings.rates_source == "database":
        return SqlRatesRepository(init_db(settings.database_url))
    if settings.rates_source == "open-exchange-rates":
        if not settings.open_exchange_rates_app_id:
            msg = "open_exchange_rates_app_id must be set to use the open-exchange-rates source"
            raise ValueError(msg)
        client = OpenExchangeRatesClient(app_id=settings.open_exchange_rates_app_id)
        return OpenExchangeRatesRepository(client=client)
    msg = f"Unknown rates source: {settings.rates_source}"
    raise ValueError(msg)


def build_quote_service(settings: AppSettings) -> QuoteService:
    return QuoteService(rates_repository=build_rates_repository(settings), logger=StdlibLoggerAdapter())


__all__ = ["build_quote_service", "build_rates_repository"]
