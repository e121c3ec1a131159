from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal, InvalidOperation
from typing import Any

from dashboard.domain.errors import NoCandleDataError, UpstreamFetchError
from dashboard.domain.market_data.schemas import (
    PROVIDER_COINGECKO,
    PROVIDER_FINNHUB,
    Candle,
    Quote,
    quantize_price,
)


def map_coingecko_price(*, symbol: str, coin_id: str, payload: Any) -> Quote:
    row = payload.get(coin_id) if isinstance(payload, dict) else None
    last = _to_price(row.get("usd")) if isinstance(row, dict) else None
    return Quote(symbol=symbol, last=last, provider=PROVIDER_COINGECKO)


def map_finnhub_quote(*, symbol: str, payload: Any) -> Quote:
    if not isinstance(payload, dict):
        raise UpstreamFetchError("Finnhub returned an unexpected quote payload", provider=PROVIDER_FINNHUB)
    return Quote(
        symbol=symbol,
        last=_to_price(payload.get("c")),
        change=_to_decimal(payload.get("d")),
        change_pct=_to_decimal(payload.get("dp")),
        provider=PROVIDER_FINNHUB,
    )


def map_coingecko_ohlc(payload: Any) -> list[Candle]:
    """Rows arrive as ``[t_ms, open, high, low, close]`` without volume."""
    if not isinstance(payload, list):
        raise UpstreamFetchError("CoinGecko returned an unexpected OHLC payload", provider=PROVIDER_COINGECKO)

    candles: list[Candle] = []
    for row in payload:
        if not isinstance(row, Sequence) or len(row) < 5:
            continue
        t, o, h, l, c = row[:5]  # noqa: E741
        candle = _build_candle(t=t, o=o, h=h, l=l, c=c, v=None)
        if candle is not None:
            candles.append(candle)
    return sorted(candles, key=lambda candle: candle.t)


def map_finnhub_candles(*, symbol: str, payload: Any) -> list[Candle]:
    """Zip Finnhub's parallel ``t/o/h/l/c/v`` arrays into rows.

    Finnhub timestamps are in seconds; candles carry milliseconds.
    """
    if not isinstance(payload, dict) or payload.get("s") != "ok":
        raise NoCandleDataError(f"No candles for {symbol}", provider=PROVIDER_FINNHUB)

    timestamps = payload.get("t") or []
    volumes = payload.get("v") or []
    candles: list[Candle] = []
    for index, t in enumerate(timestamps):
        try:
            t_ms = int(t) * 1000
        except (TypeError, ValueError):
            continue
        candle = _build_candle(
            t=t_ms,
            o=_at(payload.get("o"), index),
            h=_at(payload.get("h"), index),
            l=_at(payload.get("l"), index),
            c=_at(payload.get("c"), index),
            v=_at(volumes, index),
        )
        if candle is not None:
            candles.append(candle)
    return sorted(candles, key=lambda candle: candle.t)


def _build_candle(*, t: Any, o: Any, h: Any, l: Any, c: Any, v: Any) -> Candle | None:  # noqa: E741
    prices = [_to_decimal(value) for value in (o, h, l, c)]
    if any(price is None for price in prices):
        return None
    try:
        timestamp = int(t)
    except (TypeError, ValueError):
        return None
    open_, high, low, close = prices
    return Candle(t=timestamp, o=open_, h=high, l=low, c=close, v=_to_decimal(v))


def _at(values: Any, index: int) -> Any:
    if not isinstance(values, list) or index >= len(values):
        return None
    return values[index]


def _to_decimal(value: Any) -> Decimal | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None


def _to_price(value: Any) -> Decimal | None:
    price = _to_decimal(value)
    return quantize_price(price) if price is not None else None
