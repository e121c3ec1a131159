from __future__ import annotations

from collections.abc import Callable, Collection
from typing import Any

import httpx

from dashboard.domain.errors import UpstreamFetchError
from dashboard.infrastructure.clients.transport import (
    DEFAULT_RETRY_STATUS_CODES,
    RetryingTransport,
)

TransportFactory = Callable[[], httpx.AsyncBaseTransport]


class JsonHttpClient:
    """Opens a short-lived ``httpx.AsyncClient`` per call and returns decoded JSON.

    Transport, status and decoding failures are raised as ``UpstreamFetchError``.
    """

    def __init__(
        self,
        *,
        base_url: str,
        provider: str,
        timeout_seconds: float = 10.0,
        max_retries: int = 2,
        retry_status_codes: Collection[int] = DEFAULT_RETRY_STATUS_CODES,
        transport_factory: TransportFactory | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.provider = provider
        self._timeout = httpx.Timeout(timeout_seconds)
        self._max_retries = max_retries
        self._retry_status_codes = frozenset(retry_status_codes)
        self._transport_factory = transport_factory or httpx.AsyncHTTPTransport

    async def get_json(self, path: str, *, params: dict[str, Any] | None = None) -> Any:
        transport = RetryingTransport(
            self._transport_factory(),
            max_retries=self._max_retries,
            status_codes=self._retry_status_codes,
        )
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self._timeout,
                transport=transport,
                headers={"Accept": "application/json"},
            ) as client:
                response = await client.get(path, params=params)
                response.raise_for_status()
                return response.json()
        except httpx.TimeoutException as exc:
            raise UpstreamFetchError(f"{self.provider} request timed out", provider=self.provider) from exc
        except httpx.HTTPStatusError as exc:
            raise UpstreamFetchError(
                f"{self.provider} responded with status {exc.response.status_code}",
                provider=self.provider,
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise UpstreamFetchError(f"{self.provider} request failed", provider=self.provider) from exc
        except ValueError as exc:
            raise UpstreamFetchError(f"{self.provider} returned invalid JSON", provider=self.provider) from exc
