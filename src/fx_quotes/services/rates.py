from __future__ import annotations

from typing import Protocol

from fx_quotes.domain.quotes import FxRate


class RatesRepository(Protocol):
    """Lookup interface for the latest rate of a currency pair."""

    async def get_rate(self, from_currency: str, to_currency: str) -> FxRate | None: ...


__all__ = ["RatesRepository"]
