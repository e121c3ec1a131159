from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal

from dashboard.domain.portfolio.schemas import (
    ZERO,
    Holding,
    HoldingsTotals,
    Position,
    Valuation,
)

_HUNDRED = Decimal("100")


def value_positions(
    positions: Mapping[str, Position],
    prices: Mapping[str, Decimal | None],
) -> Valuation:
    """Value positions at the given prices.

    A symbol without a price is valued at zero rather than failing the whole
    valuation, so its unrealized P/L equals ``-total_cost``.
    """
    holdings = [
        _value_position(position, prices.get(symbol))
        for symbol, position in sorted(positions.items())
    ]

    total_value = sum((holding.market_value for holding in holdings), ZERO)
    total_cost = sum((holding.total_cost for holding in holdings), ZERO)
    total_unrealized_pl = sum((holding.unrealized_pl for holding in holdings), ZERO)

    return Valuation(
        holdings=holdings,
        totals=HoldingsTotals(
            total_value=total_value,
            total_cost=total_cost,
            total_unrealized_pl=total_unrealized_pl,
            total_unrealized_pl_pct=_pct(total_unrealized_pl, total_cost),
        ),
    )


def _value_position(position: Position, price: Decimal | None) -> Holding:
    market_price = price if price is not None else ZERO
    market_value = position.qty * market_price
    unrealized_pl = market_value - position.total_cost
    return Holding(
        symbol=position.symbol,
        qty=position.qty,
        avg_cost=position.avg_cost,
        market_price=market_price,
        market_value=market_value,
        total_cost=position.total_cost,
        total_fees=position.total_fees,
        unrealized_pl=unrealized_pl,
        unrealized_pl_pct=_pct(unrealized_pl, position.total_cost),
    )


def _pct(part: Decimal, whole: Decimal) -> Decimal:
    if whole > 0:
        return part / whole * _HUNDRED
    return ZERO
