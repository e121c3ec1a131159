from dashboard.infrastructure.repositories.alert_repository import SqlAlchemyAlertRepository
from dashboard.infrastructure.repositories.portfolio_repository import SqlAlchemyPortfolioRepository
from dashboard.infrastructure.repositories.user_repository import SqlAlchemyUserRepository
from dashboard.infrastructure.repositories.watchlist_repository import SqlAlchemyWatchlistRepository

__all__ = [
    "SqlAlchemyAlertRepository",
    "SqlAlchemyPortfolioRepository",
    "SqlAlchemyUserRepository",
    "SqlAlchemyWatchlistRepository",
]
