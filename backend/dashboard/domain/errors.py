from __future__ import annotations


class DashboardError(Exception):
    """Base error for domain and application layers."""


class ValidationError(DashboardError, ValueError):
    """Raised when input to a write operation is malformed."""

    def __init__(self, message: str, *, details: dict | None = None) -> None:
        super().__init__(message)
        self.details = details


class NotFoundError(DashboardError, LookupError):
    """Raised when a referenced entity does not exist for the user."""

    def __init__(self, entity: str, entity_id: int | str) -> None:
        super().__init__(f"{entity} not found")
        self.entity = entity
        self.entity_id = entity_id


class PersistenceError(DashboardError, RuntimeError):
    """Raised when a store operation fails."""


class UpstreamFetchError(DashboardError):
    """Raised when a quote or candle provider call fails."""

    def __init__(
        self,
        message: str,
        *,
        provider: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code


class UnmappedSymbolError(UpstreamFetchError):
    """Raised when a crypto symbol has no provider coin id."""

    def __init__(self, symbol: str) -> None:
        super().__init__(f"Symbol {symbol} is not mapped to a crypto provider id", provider="coingecko")
        self.symbol = symbol


class NoCandleDataError(UpstreamFetchError):
    """Raised when the provider reports no candles for the requested window."""
