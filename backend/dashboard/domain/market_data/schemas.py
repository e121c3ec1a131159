from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

PROVIDER_COINGECKO = "coingecko"
PROVIDER_FINNHUB = "finnhub"


@dataclass(slots=True)
class Quote:
    symbol: str
    last: Decimal | None
    provider: str
    change: Decimal | None = None
    change_pct: Decimal | None = None


@dataclass(slots=True)
class Candle:
    t: int
    o: Decimal
    h: Decimal
    l: Decimal  # noqa: E741
    c: Decimal
    v: Decimal | None = None


@dataclass(slots=True)
class CandleSeries:
    symbol: str
    timeframe: str
    provider: str
    candles: list[Candle] = field(default_factory=list)


PRICE_QUANTUM = Decimal("1e-8")


def quantize_price(value: Decimal) -> Decimal:
    """Round a price to the scale prices are stored at (``Numeric(20, 8)``)."""
    return value.quantize(PRICE_QUANTUM)
