import logging
from contextlib import asynccontextmanager
from decimal import Decimal
from time import perf_counter
from typing import Annotated, AsyncGenerator, Awaitable, Callable

from fastapi import Depends, FastAPI, Request, Response
from fastapi.responses import JSONResponse

from fx_quotes.api.dependencies import get_quote_service
from fx_quotes.api.schemas import QuoteResponse
from fx_quotes.config import config
from fx_quotes.domain.errors import InvalidAmountError, QuoteError, RateNotFoundError, SameCurrencyError
from fx_quotes.services.factory import build_quote_service
from fx_quotes.services.quote_service import QuoteService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI) -> AsyncGenerator[None, None]:
    fastapi_app.state.quote_service = build_quote_service(config())
    yield


app = FastAPI(lifespan=lifespan)


@app.middleware("http")
async def log_process_time(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
    start_time = perf_counter()
    response = await call_next(request)
    process_time = perf_counter() - start_time
    logger.info("Request time: %s %s: %.4fs", request.method, request.url, process_time)
    return response


@app.exception_handler(SameCurrencyError)
@app.exception_handler(InvalidAmountError)
async def bad_request_handler(request: Request, exc: QuoteError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(RateNotFoundError)
async def not_found_handler(request: Request, exc: QuoteError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.get("/quote/{base_currency}/{quote_currency}/{amount}", response_model=QuoteResponse, response_model_by_alias=True)
async def get_quote(
    base_currency: str,
    quote_currency: str,
    amount: Decimal,
    quote_service: Annotated[QuoteService, Depends(get_quote_service)],
) -> QuoteResponse:
    quote = await quote_service.get_quote(base_currency.upper(), quote_currency.upper(), amount)
    return QuoteResponse.from_domain(quote)
