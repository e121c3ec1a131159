from __future__ import annotations

from pydantic import BaseModel


class QuoteOut(BaseModel):
    symbol: str
    last: float | None
    change: float | None = None
    change_pct: float | None = None
    provider: str


class CandleOut(BaseModel):
    t: int
    o: float
    h: float
    l: float  # noqa: E741
    c: float
    v: float | None = None


class CandleSeriesOut(BaseModel):
    symbol: str
    tf: str
    provider: str
    candles: list[CandleOut]
