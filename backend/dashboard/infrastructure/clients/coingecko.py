from __future__ import annotations

from typing import Any

from dashboard.domain.market_data.schemas import PROVIDER_COINGECKO
from dashboard.infrastructure.clients.http import JsonHttpClient, TransportFactory

CANDLE_WINDOW_DAYS = 30


class CoinGeckoClient:
    """Public CoinGecko REST endpoints, keyed by CoinGecko coin id."""

    def __init__(
        self,
        *,
        base_url: str = "https://api.coingecko.com/api/v3",
        timeout_seconds: float = 10.0,
        max_retries: int = 2,
        retry_status_codes: tuple[int, ...] | list[int] = (429, 500, 502, 503, 504),
        transport_factory: TransportFactory | None = None,
    ) -> None:
        self._http = JsonHttpClient(
            base_url=base_url,
            provider=PROVIDER_COINGECKO,
            timeout_seconds=timeout_seconds,
            max_retries=max_retries,
            retry_status_codes=retry_status_codes,
            transport_factory=transport_factory,
        )

    async def get_simple_price(self, *, coin_id: str) -> dict[str, Any]:
        return await self._http.get_json(
            "/simple/price",
            params={"ids": coin_id, "vs_currencies": "usd"},
        )

    async def get_ohlc(self, *, coin_id: str) -> list[Any]:
        return await self._http.get_json(
            f"/coins/{coin_id}/ohlc",
            params={"vs_currency": "usd", "days": CANDLE_WINDOW_DAYS},
        )
