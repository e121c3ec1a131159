from __future__ import annotations

from dashboard.domain.alerts.schemas import Alert, AlertEvent
from dashboard.domain.portfolio.schemas import Lot, Portfolio
from dashboard.domain.users.schemas import User
from dashboard.domain.watchlist.schemas import Watchlist, WatchlistItem
from dashboard.infrastructure.db.models.alert import AlertEventModel, AlertModel
from dashboard.infrastructure.db.models.portfolio import LotModel, PortfolioModel
from dashboard.infrastructure.db.models.user import UserModel
from dashboard.infrastructure.db.models.watchlist import WatchlistItemModel, WatchlistModel


def user_to_domain(model: UserModel) -> User:
    return User(id=model.id, email=model.email, created_at=model.created_at)


def watchlist_item_to_domain(model: WatchlistItemModel) -> WatchlistItem:
    return WatchlistItem(
        id=model.id,
        watchlist_id=model.watchlist_id,
        symbol=model.symbol,
        asset_type=model.asset_type,
        position=model.position,
        created_at=model.created_at,
    )


def watchlist_to_domain(model: WatchlistModel, *, with_items: bool = False) -> Watchlist:
    items = [watchlist_item_to_domain(item) for item in model.items] if with_items else []
    return Watchlist(
        id=model.id,
        user_id=model.user_id,
        name=model.name,
        created_at=model.created_at,
        items=items,
    )


def lot_to_domain(model: LotModel) -> Lot:
    return Lot(
        id=model.id,
        portfolio_id=model.portfolio_id,
        symbol=model.symbol,
        qty=model.qty,
        cost_basis=model.cost_basis,
        fee=model.fee,
        trade_date=model.trade_date,
        created_at=model.created_at,
    )


def portfolio_to_domain(model: PortfolioModel, *, with_lots: bool = False) -> Portfolio:
    lots = [lot_to_domain(lot) for lot in model.lots] if with_lots else []
    return Portfolio(
        id=model.id,
        user_id=model.user_id,
        name=model.name,
        created_at=model.created_at,
        lots=lots,
    )


def alert_event_to_domain(model: AlertEventModel) -> AlertEvent:
    return AlertEvent(
        id=model.id,
        alert_id=model.alert_id,
        price=model.price,
        triggered_at=model.triggered_at,
    )


def alert_to_domain(model: AlertModel, *, recent_events: list[AlertEventModel] | None = None) -> Alert:
    return Alert(
        id=model.id,
        user_id=model.user_id,
        symbol=model.symbol,
        value=model.value,
        rule_type=model.rule_type,
        last_seen_price=model.last_seen_price,
        is_active=model.is_active,
        channel=model.channel,
        created_at=model.created_at,
        recent_events=[alert_event_to_domain(event) for event in recent_events or []],
    )
