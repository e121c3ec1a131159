from __future__ import annotations

from collections.abc import Collection
import logging

import httpx
from tenacity import AsyncRetrying, RetryCallState, retry_if_result, stop_after_attempt

logger = logging.getLogger(__name__)

IDEMPOTENT_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})
DEFAULT_RETRY_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


class RetryingTransport(httpx.AsyncBaseTransport):
    """Re-sends idempotent requests that fail with a retryable status code.

    At most ``max_retries`` extra attempts are made. Non-idempotent methods
    and other status codes are returned as-is on the first attempt. When the
    attempts run out the last upstream response is returned, not raised.
    """

    def __init__(
        self,
        wrapped: httpx.AsyncBaseTransport | None = None,
        *,
        max_retries: int = 2,
        status_codes: Collection[int] = DEFAULT_RETRY_STATUS_CODES,
    ) -> None:
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        self._wrapped = wrapped or httpx.AsyncHTTPTransport()
        self._max_retries = max_retries
        self._status_codes = frozenset(status_codes)

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        if request.method.upper() not in IDEMPOTENT_METHODS:
            return await self._wrapped.handle_async_request(request)

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._max_retries + 1),
            retry=retry_if_result(self._is_retryable),
            before_sleep=_log_retry,
            retry_error_callback=_last_response,
        )
        return await retrying(self._send, request, [])

    async def aclose(self) -> None:
        await self._wrapped.aclose()

    async def _send(self, request: httpx.Request, sent: list[httpx.Response]) -> httpx.Response:
        # Release the connection held by the response being retried.
        if sent:
            await sent.pop().aclose()
        response = await self._wrapped.handle_async_request(request)
        sent.append(response)
        return response

    def _is_retryable(self, response: httpx.Response) -> bool:
        return response.status_code in self._status_codes


def _last_response(retry_state: RetryCallState) -> httpx.Response:
    return retry_state.outcome.result()


def _log_retry(retry_state: RetryCallState) -> None:
    request = retry_state.args[0]
    logger.warning(
        "Retrying upstream request",
        extra={
            "url": f"{request.url.host}{request.url.path}",
            "status_code": retry_state.outcome.result().status_code,
            "attempt": retry_state.attempt_number,
        },
    )
