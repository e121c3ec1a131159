from __future__ import annotations

from functools import lru_cache

from dashboard.application.alerts.service import AlertsApplicationService
from dashboard.application.market_data.gateway import QuoteGateway
from dashboard.application.market_data.resolver import CryptoSymbolResolver
from dashboard.application.portfolio.service import PortfolioApplicationService
from dashboard.application.users.service import UserApplicationService
from dashboard.application.watchlist.service import WatchlistApplicationService
from dashboard.core.config import settings
from dashboard.infrastructure.clients.coingecko import CoinGeckoClient
from dashboard.infrastructure.clients.finnhub import FinnhubClient
from dashboard.infrastructure.db.session import SessionLocal
from dashboard.infrastructure.db.uow import SqlAlchemyUnitOfWork


@lru_cache
def _quote_gateway() -> QuoteGateway:
    return QuoteGateway(
        crypto_client=CoinGeckoClient(
            base_url=settings.coingecko_base_url,
            timeout_seconds=settings.market_data_timeout_seconds,
            max_retries=settings.market_data_max_retries,
            retry_status_codes=settings.market_data_retry_status_codes,
        ),
        equity_client=FinnhubClient(
            settings.finnhub_api_key,
            base_url=settings.finnhub_base_url,
            timeout_seconds=settings.market_data_timeout_seconds,
            max_retries=settings.market_data_max_retries,
            retry_status_codes=settings.market_data_retry_status_codes,
        ),
        resolver=CryptoSymbolResolver(settings.crypto_coin_ids),
    )


def build_uow() -> SqlAlchemyUnitOfWork:
    return SqlAlchemyUnitOfWork(session_factory=SessionLocal)


def build_quote_gateway() -> QuoteGateway:
    return _quote_gateway()


def build_user_service() -> UserApplicationService:
    return UserApplicationService(uow=build_uow())


def build_watchlist_service() -> WatchlistApplicationService:
    return WatchlistApplicationService(uow=build_uow())


def build_portfolio_service() -> PortfolioApplicationService:
    return PortfolioApplicationService(uow=build_uow(), quote_gateway=build_quote_gateway())


def build_alerts_service() -> AlertsApplicationService:
    return AlertsApplicationService(uow=build_uow(), quote_gateway=build_quote_gateway())
