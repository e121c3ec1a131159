from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

RULE_PRICE_CROSS = "price_cross"
CHANNEL_IN_APP = "inapp"


@dataclass(slots=True)
class AlertEvent:
    id: int
    alert_id: int
    price: Decimal
    triggered_at: datetime


@dataclass(slots=True)
class Alert:
    id: int
    user_id: int
    symbol: str
    value: Decimal
    rule_type: str = RULE_PRICE_CROSS
    last_seen_price: Decimal | None = None
    is_active: bool = True
    channel: str = CHANNEL_IN_APP
    created_at: datetime | None = None
    recent_events: list[AlertEvent] = field(default_factory=list)


@dataclass(slots=True)
class CrossingDecision:
    previous_price: Decimal | None
    current_price: Decimal
    crossed: bool


@dataclass(slots=True)
class EvaluationSummary:
    checked: int = 0
    triggered: int = 0
