from __future__ import annotations

from fastapi import Depends

from dashboard.application.alerts.service import AlertsApplicationService
from dashboard.application.container import (
    build_alerts_service,
    build_portfolio_service,
    build_quote_gateway,
    build_user_service,
    build_watchlist_service,
)
from dashboard.application.market_data.gateway import QuoteGateway
from dashboard.application.portfolio.service import PortfolioApplicationService
from dashboard.application.users.service import UserApplicationService
from dashboard.application.watchlist.service import WatchlistApplicationService
from dashboard.core.config import settings
from dashboard.domain.users.schemas import User


def get_user_service() -> UserApplicationService:
    return build_user_service()


def get_quote_gateway() -> QuoteGateway:
    return build_quote_gateway()


def get_watchlist_service() -> WatchlistApplicationService:
    return build_watchlist_service()


def get_portfolio_service() -> PortfolioApplicationService:
    return build_portfolio_service()


def get_alerts_service() -> AlertsApplicationService:
    return build_alerts_service()


def get_current_user(service: UserApplicationService = Depends(get_user_service)) -> User:
    # No authentication: every request acts as the configured demo user.
    return service.get_or_create(email=settings.demo_user_email)
