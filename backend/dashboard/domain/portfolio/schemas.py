from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

ZERO = Decimal("0")
DEFAULT_PORTFOLIO_NAME = "My Portfolio"


@dataclass(slots=True)
class Lot:
    id: int
    portfolio_id: int
    symbol: str
    qty: Decimal
    cost_basis: Decimal
    trade_date: datetime
    fee: Decimal = ZERO
    created_at: datetime | None = None


@dataclass(slots=True)
class NewLot:
    symbol: str
    qty: Decimal
    cost_basis: Decimal
    trade_date: datetime
    fee: Decimal = ZERO


@dataclass(slots=True)
class Portfolio:
    id: int
    user_id: int
    name: str
    created_at: datetime | None = None
    lots: list[Lot] = field(default_factory=list)


@dataclass(slots=True)
class Position:
    symbol: str
    qty: Decimal = ZERO
    total_cost: Decimal = ZERO
    total_fees: Decimal = ZERO

    @property
    def avg_cost(self) -> Decimal:
        if self.qty > 0:
            return self.total_cost / self.qty
        return ZERO


@dataclass(slots=True)
class Holding:
    symbol: str
    qty: Decimal
    avg_cost: Decimal
    market_price: Decimal
    market_value: Decimal
    total_cost: Decimal
    total_fees: Decimal
    unrealized_pl: Decimal
    unrealized_pl_pct: Decimal


@dataclass(slots=True)
class HoldingsTotals:
    total_value: Decimal
    total_cost: Decimal
    total_unrealized_pl: Decimal
    total_unrealized_pl_pct: Decimal


@dataclass(slots=True)
class Valuation:
    holdings: list[Holding]
    totals: HoldingsTotals
