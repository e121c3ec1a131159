from __future__ import annotations

from decimal import Decimal

from dashboard.api.v1.dto.alerts import AlertEventOut, AlertOut, EvaluationOut
from dashboard.api.v1.dto.market_data import CandleOut, CandleSeriesOut, QuoteOut
from dashboard.api.v1.dto.portfolio import (
    HoldingOut,
    HoldingsOut,
    HoldingsTotalsOut,
    LotOut,
    PortfolioDetailOut,
    PortfolioOut,
)
from dashboard.api.v1.dto.watchlist import WatchlistDetailOut, WatchlistItemOut, WatchlistOut
from dashboard.domain.alerts.schemas import Alert, EvaluationSummary
from dashboard.domain.market_data.schemas import CandleSeries, Quote
from dashboard.domain.portfolio.schemas import Lot, Portfolio, Valuation
from dashboard.domain.watchlist.schemas import Watchlist, WatchlistItem


def _num(value: Decimal | None) -> float | None:
    return float(value) if value is not None else None


def to_quote_out(quote: Quote) -> QuoteOut:
    return QuoteOut(
        symbol=quote.symbol,
        last=_num(quote.last),
        change=_num(quote.change),
        change_pct=_num(quote.change_pct),
        provider=quote.provider,
    )


def to_candle_series_out(series: CandleSeries) -> CandleSeriesOut:
    return CandleSeriesOut(
        symbol=series.symbol,
        tf=series.timeframe,
        provider=series.provider,
        candles=[
            CandleOut(
                t=candle.t,
                o=float(candle.o),
                h=float(candle.h),
                l=float(candle.l),
                c=float(candle.c),
                v=_num(candle.v),
            )
            for candle in series.candles
        ],
    )


def to_watchlist_out(watchlist: Watchlist) -> WatchlistOut:
    return WatchlistOut(id=watchlist.id, name=watchlist.name, created_at=watchlist.created_at)


def to_watchlist_item_out(item: WatchlistItem) -> WatchlistItemOut:
    return WatchlistItemOut(
        id=item.id,
        symbol=item.symbol,
        asset_type=item.asset_type,
        position=item.position,
    )


def to_watchlist_detail_out(watchlist: Watchlist) -> WatchlistDetailOut:
    return WatchlistDetailOut(
        id=watchlist.id,
        name=watchlist.name,
        created_at=watchlist.created_at,
        items=[to_watchlist_item_out(item) for item in sorted(watchlist.items, key=lambda item: item.position)],
    )


def to_lot_out(lot: Lot) -> LotOut:
    return LotOut(
        id=lot.id,
        symbol=lot.symbol,
        qty=float(lot.qty),
        cost_basis=float(lot.cost_basis),
        fee=float(lot.fee),
        trade_date=lot.trade_date,
    )


def to_portfolio_out(portfolio: Portfolio) -> PortfolioOut:
    return PortfolioOut(id=portfolio.id, name=portfolio.name, created_at=portfolio.created_at)


def to_portfolio_detail_out(portfolio: Portfolio) -> PortfolioDetailOut:
    return PortfolioDetailOut(
        id=portfolio.id,
        name=portfolio.name,
        created_at=portfolio.created_at,
        lots=[to_lot_out(lot) for lot in portfolio.lots],
    )


def to_holdings_out(valuation: Valuation) -> HoldingsOut:
    totals = valuation.totals
    return HoldingsOut(
        holdings=[
            HoldingOut(
                symbol=holding.symbol,
                qty=float(holding.qty),
                avg_cost=float(holding.avg_cost),
                market_price=float(holding.market_price),
                market_value=float(holding.market_value),
                total_cost=float(holding.total_cost),
                total_fees=float(holding.total_fees),
                unrealized_pl=float(holding.unrealized_pl),
                unrealized_pl_pct=float(holding.unrealized_pl_pct),
            )
            for holding in valuation.holdings
        ],
        totals=HoldingsTotalsOut(
            total_value=float(totals.total_value),
            total_cost=float(totals.total_cost),
            total_unrealized_pl=float(totals.total_unrealized_pl),
            total_unrealized_pl_pct=float(totals.total_unrealized_pl_pct),
        ),
    )


def to_alert_out(alert: Alert) -> AlertOut:
    return AlertOut(
        id=alert.id,
        symbol=alert.symbol,
        rule_type=alert.rule_type,
        value=float(alert.value),
        last_seen_price=_num(alert.last_seen_price),
        is_active=alert.is_active,
        channel=alert.channel,
        recent_events=[
            AlertEventOut(id=event.id, price=float(event.price), triggered_at=event.triggered_at)
            for event in alert.recent_events
        ],
    )


def to_evaluation_out(summary: EvaluationSummary) -> EvaluationOut:
    return EvaluationOut(checked=summary.checked, triggered=summary.triggered)
