from fastapi import Request

from fx_quotes.services.quote_service import QuoteService


def get_quote_service(request: Request) -> QuoteService:
    return request.app.state.quote_service
