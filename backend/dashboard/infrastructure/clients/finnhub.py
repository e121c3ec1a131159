from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from dashboard.domain.errors import UpstreamFetchError
from dashboard.domain.market_data.schemas import PROVIDER_FINNHUB
from dashboard.infrastructure.clients.http import JsonHttpClient, TransportFactory

CANDLE_WINDOW_DAYS = 365
CANDLE_RESOLUTION = "D"


class FinnhubClient:
    def __init__(
        self,
        api_key: str | None,
        *,
        base_url: str = "https://finnhub.io/api/v1",
        timeout_seconds: float = 10.0,
        max_retries: int = 2,
        retry_status_codes: tuple[int, ...] | list[int] = (429, 500, 502, 503, 504),
        transport_factory: TransportFactory | None = None,
    ) -> None:
        self.api_key = api_key
        self._http = JsonHttpClient(
            base_url=base_url,
            provider=PROVIDER_FINNHUB,
            timeout_seconds=timeout_seconds,
            max_retries=max_retries,
            retry_status_codes=retry_status_codes,
            transport_factory=transport_factory,
        )

    async def get_quote(self, *, symbol: str) -> dict[str, Any]:
        return await self._http.get_json(
            "/quote",
            params={"symbol": symbol, "token": self._require_api_key()},
        )

    async def get_daily_candles(self, *, symbol: str, now: datetime | None = None) -> dict[str, Any]:
        now = now or datetime.now(tz=timezone.utc)
        to_ts = int(now.timestamp())
        from_ts = int((now - timedelta(days=CANDLE_WINDOW_DAYS)).timestamp())
        return await self._http.get_json(
            "/stock/candle",
            params={
                "symbol": symbol,
                "resolution": CANDLE_RESOLUTION,
                "from": from_ts,
                "to": to_ts,
                "token": self._require_api_key(),
            },
        )

    def _require_api_key(self) -> str:
        if not self.api_key:
            raise UpstreamFetchError("Finnhub API key is not configured", provider=PROVIDER_FINNHUB)
        return self.api_key
