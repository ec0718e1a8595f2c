"""
FastAPI router for public market data.

No authentication required. All routes delegate to use cases.
"""

from fastapi import APIRouter, Depends, Query

from app.application.exchange.get_market_data import (
    GetKlinesUseCase,
    GetMarketPricesUseCase,
)
from app.interfaces.exchange.dependencies import (
    get_klines_use_case,
    get_market_prices_use_case,
)
from app.interfaces.exchange.schemas import ErrorResponse, KlineSchema, TickerSchema

router = APIRouter(prefix="/market", tags=["market"])


@router.get(
    "/prices",
    response_model=list[TickerSchema],
    summary="Current prices for the tracked pairs",
    description="Falls back to a static snapshot when the exchange is unreachable.",
)
def market_prices(
    use_case: GetMarketPricesUseCase = Depends(get_market_prices_use_case),
) -> list[TickerSchema]:
    return [TickerSchema.from_entity(ticker) for ticker in use_case.execute()]


@router.get(
    "/klines",
    response_model=list[KlineSchema],
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
    summary="Historical candlesticks",
)
def klines(
    symbol: str = Query(default="BTCUSDT", max_length=20),
    interval: str = Query(default="1h", max_length=3),
    limit: int = Query(default=200),
    use_case: GetKlinesUseCase = Depends(get_klines_use_case),
) -> list[KlineSchema]:
    return [KlineSchema.from_entity(k) for k in use_case.execute(symbol, interval, limit)]
