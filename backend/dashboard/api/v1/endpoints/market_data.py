from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from dashboard.api.deps import get_quote_gateway
from dashboard.api.v1.dto.market_data import CandleSeriesOut, QuoteOut
from dashboard.api.v1.dto.mappers import to_candle_series_out, to_quote_out
from dashboard.application.market_data.gateway import DEFAULT_TIMEFRAME, QuoteGateway

router = APIRouter()


@router.get("/quote", response_model=QuoteOut)
async def get_quote(
    symbol: str = Query(min_length=1, max_length=20),
    gateway: QuoteGateway = Depends(get_quote_gateway),
) -> QuoteOut:
    quote = await gateway.get_quote(symbol)
    return to_quote_out(quote)


@router.get("/candles", response_model=CandleSeriesOut)
async def get_candles(
    symbol: str = Query(min_length=1, max_length=20),
    tf: str = Query(DEFAULT_TIMEFRAME, min_length=1, max_length=8),
    gateway: QuoteGateway = Depends(get_quote_gateway),
) -> CandleSeriesOut:
    series = await gateway.get_candles(symbol, tf)
    return to_candle_series_out(series)
