from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from fx_quotes.domain.quotes import ConversionQuote


class QuoteResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    base_currency: str
    base_amount: Decimal
    quote_currency: str
    quote_amount: Decimal

    @classmethod
    def from_domain(cls, quote: ConversionQuote) -> QuoteResponse:
        return cls(
            base_currency=quote.base_currency,
            base_amount=quote.base_amount,
            quote_currency=quote.quote_currency,
            quote_amount=quote.quote_amount,
        )
