from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class PortfolioCreate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)


class LotCreate(BaseModel):
    symbol: str = Field(min_length=1, max_length=20)
    qty: Decimal = Field(gt=0)
    cost_basis: Decimal = Field(ge=0)
    fee: Decimal = Field(default=Decimal("0"), ge=0)
    trade_date: datetime


class LotOut(BaseModel):
    id: int
    symbol: str
    qty: float
    cost_basis: float
    fee: float
    trade_date: datetime


class PortfolioOut(BaseModel):
    id: int
    name: str
    created_at: datetime | None = None


class PortfolioDetailOut(PortfolioOut):
    lots: list[LotOut]


class HoldingOut(BaseModel):
    symbol: str
    qty: float
    avg_cost: float
    market_price: float
    market_value: float
    total_cost: float
    total_fees: float
    unrealized_pl: float
    unrealized_pl_pct: float


class HoldingsTotalsOut(BaseModel):
    total_value: float
    total_cost: float
    total_unrealized_pl: float
    total_unrealized_pl_pct: float


class HoldingsOut(BaseModel):
    holdings: list[HoldingOut]
    totals: HoldingsTotalsOut
