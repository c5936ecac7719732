from __future__ import annotations

from decimal import Decimal


class QuoteError(Exception):
    """Base class for errors raised while producing a quote."""


class SameCurrencyError(QuoteError):
    def __init__(self, currency: str) -> None:
        super().__init__(f"You cannot convert currency {currency} to itself")
        self.currency = currency


class InvalidAmountError(QuoteError):
    def __init__(self, amount: Decimal) -> None:
        super().__init__("You can only convert a positive amount of money")
        self.amount = amount


class RateNotFoundError(QuoteError):
    def __init__(self, from_currency: str, to_currency: str) -> None:
        super().__init__(f"No rate found for currencies {from_currency}->{to_currency}")
        self.from_currency = from_currency
        self.to_currency = to_currency


__all__ = ["InvalidAmountError", "QuoteError", "RateNotFoundError", "SameCurrencyError"]
