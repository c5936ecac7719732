from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class FxRate:
    """Exchange rate for a currency pair as of ``timestamp_utc``."""

    from_currency: str
    to_currency: str
    rate: Decimal
    timestamp_utc: datetime


@dataclass(frozen=True)
class ConversionQuote:
    base_currency: str
    base_amount: Decimal
    quote_currency: str
    quote_amount: Decimal


def to_decimal(value: Decimal | int | str) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


__all__ = ["ConversionQuote", "FxRate", "to_decimal"]
