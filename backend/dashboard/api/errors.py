from __future__ import annotations

from dataclasses import dataclass
import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from dashboard.domain.errors import (
    NoCandleDataError,
    NotFoundError,
    PersistenceError,
    UnmappedSymbolError,
    UpstreamFetchError,
    ValidationError,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ApiError:
    status_code: int
    code: str
    message: str
    details: dict | None = None


def upstream_api_error(exc: UpstreamFetchError) -> ApiError:
    if isinstance(exc, UnmappedSymbolError):
        return ApiError(
            status_code=400,
            code="MARKET_DATA_SYMBOL_UNSUPPORTED",
            message=str(exc),
            details={"symbol": exc.symbol},
        )
    if isinstance(exc, NoCandleDataError):
        return ApiError(status_code=404, code="MARKET_DATA_NO_CANDLES", message=str(exc))
    return ApiError(
        status_code=502,
        code="MARKET_DATA_UPSTREAM_UNAVAILABLE",
        message="market data upstream unavailable",
        details={"provider": exc.provider, "reason": str(exc)},
    )


def _error_response(*, status_code: int, code: str, message: str, details: dict | list | None = None) -> JSONResponse:
    error_payload: dict = {
        "code": code,
        "message": message,
    }
    if details is not None:
        error_payload["details"] = details
    return JSONResponse(status_code=status_code, content={"error": jsonable_encoder(error_payload)})


def install_api_error_handlers(application: FastAPI) -> None:
    @application.exception_handler(RequestValidationError)
    async def _handle_request_validation(_: Request, exc: RequestValidationError) -> JSONResponse:
        return _error_response(
            status_code=400,
            code="VALIDATION_ERROR",
            message="Invalid input",
            details={"fields": exc.errors()},
        )

    @application.exception_handler(ValidationError)
    async def _handle_validation(_: Request, exc: ValidationError) -> JSONResponse:
        return _error_response(
            status_code=400,
            code="VALIDATION_ERROR",
            message=str(exc),
            details=exc.details,
        )

    @application.exception_handler(NotFoundError)
    async def _handle_not_found(_: Request, exc: NotFoundError) -> JSONResponse:
        return _error_response(status_code=404, code="NOT_FOUND", message=str(exc))

    @application.exception_handler(UpstreamFetchError)
    async def _handle_upstream(_: Request, exc: UpstreamFetchError) -> JSONResponse:
        api_error = upstream_api_error(exc)
        if api_error.status_code >= 500:
            logger.warning("Upstream market data failure", extra={"provider": exc.provider, "reason": str(exc)})
        return _error_response(
            status_code=api_error.status_code,
            code=api_error.code,
            message=api_error.message,
            details=api_error.details,
        )

    @application.exception_handler(PersistenceError)
    async def _handle_persistence(_: Request, exc: PersistenceError) -> JSONResponse:
        logger.error("Persistence failure", exc_info=exc)
        return _error_response(status_code=500, code="PERSISTENCE_ERROR", message=str(exc))

    @application.exception_handler(Exception)
    async def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error", exc_info=exc, extra={"path": request.url.path})
        return _error_response(
            status_code=500,
            code="INTERNAL_ERROR",
            message=str(exc) or "Internal server error",
        )
