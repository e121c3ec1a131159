from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

AssetType = Literal["stock", "etf", "crypto", "commodity", "bond"]


class WatchlistCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)


class WatchlistUpdate(BaseModel):
    name: str = Field(min_length=1, max_length=255)


class WatchlistItemCreate(BaseModel):
    symbol: str = Field(min_length=1, max_length=20)
    asset_type: AssetType


class WatchlistItemOut(BaseModel):
    id: int
    symbol: str
    asset_type: str
    position: int


class WatchlistOut(BaseModel):
    id: int
    name: str
    created_at: datetime | None = None


class WatchlistDetailOut(WatchlistOut):
    items: list[WatchlistItemOut]


class DeletedOut(BaseModel):
    success: bool = True
