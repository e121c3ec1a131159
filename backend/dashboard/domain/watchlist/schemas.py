from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

ASSET_TYPES = ("stock", "etf", "crypto", "commodity", "bond")


@dataclass(slots=True)
class WatchlistItem:
    id: int
    watchlist_id: int
    symbol: str
    asset_type: str
    position: int
    created_at: datetime | None = None


@dataclass(slots=True)
class Watchlist:
    id: int
    user_id: int
    name: str
    created_at: datetime | None = None
    items: list[WatchlistItem] = field(default_factory=list)
