from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class AlertCreate(BaseModel):
    symbol: str = Field(min_length=1, max_length=20)
    value: Decimal = Field(gt=0)


class AlertUpdate(BaseModel):
    is_active: bool


class AlertEventOut(BaseModel):
    id: int
    price: float
    triggered_at: datetime


class AlertOut(BaseModel):
    id: int
    symbol: str
    rule_type: str
    value: float
    last_seen_price: float | None = None
    is_active: bool
    channel: str
    recent_events: list[AlertEventOut] = []


class EvaluationOut(BaseModel):
    checked: int
    triggered: int
