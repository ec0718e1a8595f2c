"""
Use cases: Public market data.

GetMarketPricesUseCase falls back to a static snapshot when the provider
returns nothing, so the dashboard always has prices to show.
GetKlinesUseCase propagates provider failures as MarketDataUnavailableError.
"""

import logging
from decimal import Decimal

from app.domain.exchange.entities import Kline, Ticker
from app.domain.exchange.errors import MarketDataUnavailableError, ValidationFailedError
from app.domain.exchange.ports import MarketDataPort

logger = logging.getLogger(__name__)

KLINE_INTERVALS = (
    "1m", "3m", "5m", "15m", "30m",
    "1h", "2h", "4h", "6h", "8h", "12h",
    "1d", "3d", "1w", "1M",
)
MAX_KLINES = 1000

FALLBACK_TICKERS = [
    Ticker(symbol, Decimal(price), Decimal(change), Decimal(volume))
    for symbol, price, change, volume in (
        ("BTCUSDT", "95000", "2.5", "1500000"),
        ("ETHUSDT", "3200", "-1.2", "800000"),
        ("SOLUSDT", "180", "5.8", "200000"),
        ("BNBUSDT", "650", "1.1", "100000"),
        ("ADAUSDT", "0.85", "-0.5", "50000"),
        ("DOGEUSDT", "0.32", "3.2", "30000"),
        ("XRPUSDT", "1.15", "0.8", "40000"),
        ("LTCUSDT", "125", "-2.1", "20000"),
        ("MATICUSDT", "1.85", "4.5", "25000"),
        ("LINKUSDT", "18.5", "1.8", "15000"),
    )
]


class GetMarketPricesUseCase:
    def __init__(self, market: MarketDataPort, symbols: list[str]) -> None:
        self._market = market
        self._symbols = symbols

    def execute(self) -> list[Ticker]:
        try:
            return self._market.get_tickers(self._symbols)
        except MarketDataUnavailableError as exc:
            logger.warning("Serving fallback prices: %s", exc.reason)
            return list(FALLBACK_TICKERS)


class GetKlinesUseCase:
    def __init__(self, market: MarketDataPort) -> None:
        self._market = market

    def execute(self, symbol: str, interval: str = "1h", limit: int = 200) -> list[Kline]:
        symbol = symbol.strip().upper()
        if not symbol:
            raise ValidationFailedError("Symbol is required.")
        if interval not in KLINE_INTERVALS:
            raise ValidationFailedError(f"Unsupported interval: {interval}")
        if not 1 <= limit <= MAX_KLINES:
            raise ValidationFailedError(f"Limit must be between 1 and {MAX_KLINES}.")
        return self._market.get_klines(symbol, interval, limit)
