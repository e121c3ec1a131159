from __future__ import annotations

import asyncio
from collections.abc import Iterable
from decimal import Decimal
import logging

from dashboard.application.market_data.resolver import CryptoSymbolResolver
from dashboard.domain.market_data.schemas import (
    PROVIDER_COINGECKO,
    PROVIDER_FINNHUB,
    CandleSeries,
    Quote,
)
from dashboard.domain.market_data.symbols import is_crypto_symbol, normalize_symbol
from dashboard.infrastructure.clients.coingecko import CoinGeckoClient
from dashboard.infrastructure.clients.finnhub import FinnhubClient
from dashboard.infrastructure.clients.market_data_mapper import (
    map_coingecko_ohlc,
    map_coingecko_price,
    map_finnhub_candles,
    map_finnhub_quote,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEFRAME = "1d"


class QuoteGateway:
    """Uniform quote/candle access over the crypto and equity providers.

    Provider failures surface as ``UpstreamFetchError``; the gateway never
    retries on its own.
    """

    def __init__(
        self,
        *,
        crypto_client: CoinGeckoClient,
        equity_client: FinnhubClient,
        resolver: CryptoSymbolResolver,
    ) -> None:
        self._crypto_client = crypto_client
        self._equity_client = equity_client
        self._resolver = resolver

    async def get_quote(self, symbol: str) -> Quote:
        normalized = normalize_symbol(symbol)
        if is_crypto_symbol(normalized):
            coin_id = self._resolver.resolve(normalized)
            payload = await self._crypto_client.get_simple_price(coin_id=coin_id)
            return map_coingecko_price(symbol=normalized, coin_id=coin_id, payload=payload)

        payload = await self._equity_client.get_quote(symbol=normalized)
        return map_finnhub_quote(symbol=normalized, payload=payload)

    async def get_candles(self, symbol: str, timeframe: str = DEFAULT_TIMEFRAME) -> CandleSeries:
        normalized = normalize_symbol(symbol)
        if is_crypto_symbol(normalized):
            coin_id = self._resolver.resolve(normalized)
            payload = await self._crypto_client.get_ohlc(coin_id=coin_id)
            return CandleSeries(
                symbol=normalized,
                timeframe=timeframe,
                provider=PROVIDER_COINGECKO,
                candles=map_coingecko_ohlc(payload),
            )

        payload = await self._equity_client.get_daily_candles(symbol=normalized)
        return CandleSeries(
            symbol=normalized,
            timeframe=timeframe,
            provider=PROVIDER_FINNHUB,
            candles=map_finnhub_candles(symbol=normalized, payload=payload),
        )

    async def get_quotes(self, symbols: Iterable[str]) -> dict[str, Quote | None]:
        """Fetch one quote per distinct symbol concurrently.

        Waits for every fetch to settle. A failed fetch maps its symbol to
        ``None`` without affecting the others.
        """
        unique_symbols = list(dict.fromkeys(symbols))
        if not unique_symbols:
            return {}

        results = await asyncio.gather(
            *(self.get_quote(symbol) for symbol in unique_symbols),
            return_exceptions=True,
        )

        quotes: dict[str, Quote | None] = {}
        for symbol, result in zip(unique_symbols, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.warning(
                    "Quote fetch failed",
                    extra={"symbol": symbol, "error": str(result)},
                )
                quotes[symbol] = None
                continue
            quotes[symbol] = result
        return quotes

    async def get_last_prices(self, symbols: Iterable[str]) -> dict[str, Decimal | None]:
        quotes = await self.get_quotes(symbols)
        return {symbol: quote.last if quote is not None else None for symbol, quote in quotes.items()}
