from __future__ import annotations

from collections.abc import Iterable

from dashboard.domain.portfolio.schemas import Lot, Position


def aggregate_lots(lots: Iterable[Lot]) -> dict[str, Position]:
    """Collapse purchase lots into one position per symbol.

    Cost is accumulated as ``qty * cost_basis`` per lot, so the position's
    average cost is the quantity-weighted mean of the lots' cost bases.
    """
    positions: dict[str, Position] = {}
    for lot in lots:
        position = positions.get(lot.symbol)
        if position is None:
            position = Position(symbol=lot.symbol)
            positions[lot.symbol] = position
        position.qty += lot.qty
        position.total_cost += lot.qty * lot.cost_basis
        position.total_fees += lot.fee
    return positions
