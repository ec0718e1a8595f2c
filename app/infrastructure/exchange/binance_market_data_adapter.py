"""
Adapter: Binance public market data.

Implements MarketDataPort with the Binance REST API over httpx.
Only unauthenticated endpoints are used:

* ``/api/v3/ticker/24hr`` for last price, 24h change and volume
* ``/api/v3/klines`` for OHLCV candlesticks
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal

import httpx

from app.domain.exchange.entities import Kline, Ticker
from app.domain.exchange.errors import MarketDataUnavailableError
from app.domain.exchange.ports import MarketDataPort

logger = logging.getLogger(__name__)

TICKER_PATH = "/api/v3/ticker/24hr"
KLINES_PATH = "/api/v3/klines"


class BinanceMarketDataAdapter(MarketDataPort):
    """Fetches tickers and klines from Binance.

    A ``client`` can be injected for testing; otherwise one short-lived
    ``httpx.Client`` is opened per call.
    """

    def __init__(
        self,
        base_url: str = "https://api.binance.com",
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client = client

    def _get(self, path: str, params: dict) -> object:
        if self._client is not None:
            resp = self._client.get(f"{self._base_url}{path}", params=params)
            resp.raise_for_status()
            return resp.json()
        with httpx.Client(timeout=self._timeout) as client:
            resp = client.get(f"{self._base_url}{path}", params=params)
            resp.raise_for_status()
            return resp.json()

    def get_tickers(self, symbols: list[str]) -> list[Ticker]:
        """Return one ticker per symbol that could be fetched.

        Symbols that fail individually are skipped. Raises
        MarketDataUnavailableError only when none could be fetched.
        """
        tickers: list[Ticker] = []
        last_error: Exception | None = None
        for symbol in symbols:
            try:
                stats = self._get(TICKER_PATH, {"symbol": symbol})
                tickers.append(
                    Ticker(
                        symbol=stats["symbol"],
                        price=Decimal(str(stats["lastPrice"])),
                        change_percent=Decimal(str(stats["priceChangePercent"])),
                        volume=Decimal(str(stats["volume"])),
                    )
                )
            except (httpx.HTTPError, KeyError, TypeError, ValueError) as exc:
                last_error = exc
                logger.warning("Ticker fetch failed for %s: %s", symbol, exc)

        if symbols and not tickers:
            raise MarketDataUnavailableError(str(last_error or "no data"))
        return tickers

    def get_klines(self, symbol: str, interval: str, limit: int) -> list[Kline]:
        try:
            rows = self._get(
                KLINES_PATH,
                {"symbol": symbol, "interval": interval, "limit": limit},
            )
            return [
                Kline(
                    open_time=datetime.fromtimestamp(row[0] / 1000, tz=timezone.utc),
                    open=Decimal(str(row[1])),
                    high=Decimal(str(row[2])),
                    low=Decimal(str(row[3])),
                    close=Decimal(str(row[4])),
                    volume=Decimal(str(row[5])),
                )
                for row in rows
            ]
        except (httpx.HTTPError, IndexError, TypeError, ValueError) as exc:
            logger.error("Klines fetch failed for %s %s: %s", symbol, interval, exc)
            raise MarketDataUnavailableError("Failed to fetch historical data") from exc
