from dashboard.infrastructure.db.models.alert import AlertEventModel, AlertModel
from dashboard.infrastructure.db.models.portfolio import LotModel, PortfolioModel
from dashboard.infrastructure.db.models.user import UserModel
from dashboard.infrastructure.db.models.watchlist import WatchlistItemModel, WatchlistModel

__all__ = [
    "AlertEventModel",
    "AlertModel",
    "LotModel",
    "PortfolioModel",
    "UserModel",
    "WatchlistItemModel",
    "WatchlistModel",
]
