from __future__ import annotations

import argparse
import asyncio
import logging
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Sequence

from fx_quotes.config import AppSettings, config
from fx_quotes.db.db import init_db
from fx_quotes.db.repositories import SqlRatesRepository
from fx_quotes.domain.errors import QuoteError
from fx_quotes.domain.quotes import ConversionQuote, FxRate
from fx_quotes.services.factory import build_quote_service

logger = logging.getLogger(__name__)


def run_quote(settings: AppSettings, base_currency: str, quote_currency: str, amount: Decimal) -> ConversionQuote:
    service = build_quote_service(settings)
    return asyncio.run(service.get_quote(base_currency.upper(), quote_currency.upper(), amount))


def run_add_rate(settings: AppSettings, from_currency: str, to_currency: str, rate: Decimal) -> FxRate:
    repository = SqlRatesRepository(init_db(settings.database_url))
    stored = repository.add(
        FxRate(
            from_currency=from_currency,
            to_currency=to_currency,
            rate=rate,
            timestamp_utc=datetime.now(timezone.utc),
        )
    )
    logger.info("Stored rate %s->%s = %s", stored.from_currency, stored.to_currency, stored.rate)
    return stored


def _decimal_arg(raw: str) -> Decimal:
    try:
        value = Decimal(raw)
    except InvalidOperation as exc:
        raise argparse.ArgumentTypeError(f"invalid decimal value: {raw!r}") from exc
    if not value.is_finite():
        raise argparse.ArgumentTypeError(f"decimal value must be finite: {raw!r}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Convert amounts between currencies using the latest rates.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    quote = subparsers.add_parser("quote", help="Convert an amount from one currency to another.")
    quote.add_argument("base_currency")
    quote.add_argument("quote_currency")
    quote.add_argument("amount", type=_decimal_arg)

    add_rate = subparsers.add_parser("add-rate", help="Store a rate in the rates database.")
    add_rate.add_argument("from_currency")
    add_rate.add_argument("to_currency")
    add_rate.add_argument("rate", type=_decimal_arg)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    settings = config()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    args = build_parser().parse_args(argv)

    if args.command == "add-rate":
        run_add_rate(settings, args.from_currency, args.to_currency, args.rate)
        return 0

    try:
        quote = run_quote(settings, args.base_currency, args.quote_currency, args.amount)
    except QuoteError as exc:
        print(f"error: {exc}")
        return 1

    print(f"{quote.base_amount} {quote.base_currency} = {quote.quote_amount} {quote.quote_currency}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
