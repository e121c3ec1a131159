from __future__ import annotations

from decimal import Decimal
from typing import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from dashboard.api.deps import (
    get_alerts_service,
    get_portfolio_service,
    get_quote_gateway,
    get_user_service,
    get_watchlist_service,
)
from dashboard.api.errors import install_api_error_handlers
from dashboard.api.v1.router import api_router
from dashboard.application.alerts.service import AlertsApplicationService
from dashboard.application.portfolio.service import PortfolioApplicationService
from dashboard.application.users.service import UserApplicationService
from dashboard.application.watchlist.service import WatchlistApplicationService
from dashboard.domain.errors import UnmappedSymbolError, UpstreamFetchError
from dashboard.domain.market_data.schemas import Candle, CandleSeries, Quote
from dashboard.domain.market_data.symbols import is_crypto_symbol, normalize_symbol
from dashboard.infrastructure.db import models  # noqa: F401
from dashboard.infrastructure.db.base import Base
from dashboard.infrastructure.db.uow import SqlAlchemyUnitOfWork


class FakeQuoteGateway:
    def __init__(self) -> None:
        self.prices: dict[str, Decimal] = {
            "AAPL": Decimal("203.12"),
            "BTC-USD": Decimal("64000"),
        }
        self.unavailable: set[str] = set()
        self.candle_calls: list[tuple[str, str]] = []

    async def get_quote(self, symbol: str) -> Quote:
        normalized = normalize_symbol(symbol)
        if normalized in self.unavailable:
            raise UpstreamFetchError("finnhub responded with status 503", provider="finnhub", status_code=503)
        if is_crypto_symbol(normalized) and normalized not in self.prices:
            raise UnmappedSymbolError(normalized)
        return Quote(
            symbol=normalized,
            last=self.prices.get(normalized),
            change=Decimal("-0.85"),
            change_pct=Decimal("-0.42"),
            provider="coingecko" if is_crypto_symbol(normalized) else "finnhub",
        )

    async def get_candles(self, symbol: str, timeframe: str = "1d") -> CandleSeries:
        normalized = normalize_symbol(symbol)
        self.candle_calls.append((normalized, timeframe))
        return CandleSeries(
            symbol=normalized,
            timeframe=timeframe,
            provider="finnhub",
            candles=[
                Candle(
                    t=1_700_000_000_000,
                    o=Decimal("10"),
                    h=Decimal("12"),
                    l=Decimal("9"),
                    c=Decimal("11"),
                    v=Decimal("1000"),
                )
            ],
        )

    async def get_last_prices(self, symbols) -> dict[str, Decimal | None]:
        return {symbol: self.prices.get(symbol) for symbol in dict.fromkeys(symbols)}


@pytest.fixture
def quote_gateway() -> FakeQuoteGateway:
    return FakeQuoteGateway()


@pytest.fixture
def uow() -> SqlAlchemyUnitOfWork:
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session_factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    return SqlAlchemyUnitOfWork(session_factory=session_factory)


@pytest.fixture
def api_client(
    uow: SqlAlchemyUnitOfWork,
    quote_gateway: FakeQuoteGateway,
) -> Generator[TestClient, None, None]:
    app = FastAPI()
    install_api_error_handlers(app)
    app.include_router(api_router, prefix="/api/v1")
    app.dependency_overrides[get_user_service] = lambda: UserApplicationService(uow=uow)
    app.dependency_overrides[get_quote_gateway] = lambda: quote_gateway
    app.dependency_overrides[get_watchlist_service] = lambda: WatchlistApplicationService(uow=uow)
    app.dependency_overrides[get_portfolio_service] = lambda: PortfolioApplicationService(
        uow=uow,
        quote_gateway=quote_gateway,
    )
    app.dependency_overrides[get_alerts_service] = lambda: AlertsApplicationService(
        uow=uow,
        quote_gateway=quote_gateway,
    )
    with TestClient(app) as client:
        yield client
