from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from dashboard.domain.alerts.schemas import Alert, AlertEvent
from dashboard.domain.errors import PersistenceError
from dashboard.domain.portfolio.schemas import Lot, NewLot, Portfolio
from dashboard.domain.watchlist.schemas import Watchlist, WatchlistItem


class FakeUoW:
    def __init__(self, *, watchlist_repo=None, portfolio_repo=None, alert_repo=None) -> None:
        self.watchlist_repo = watchlist_repo
        self.portfolio_repo = portfolio_repo
        self.alert_repo = alert_repo
        self.user_repo = None
        self.commits = 0
        self.rollbacks = 0

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type:
            self.rollback()
        return None

    def commit(self) -> None:
        self.commits += 1

    def rollback(self) -> None:
        self.rollbacks += 1


class FakeQuoteGateway:
    def __init__(self, prices: dict[str, Decimal | None] | None = None) -> None:
        self.prices = prices or {}
        self.requested: list[list[str]] = []

    async def get_last_prices(self, symbols) -> dict[str, Decimal | None]:
        unique = list(dict.fromkeys(symbols))
        self.requested.append(unique)
        return {symbol: self.prices.get(symbol) for symbol in unique}


class FakeAlertRepository:
    def __init__(self, alerts: list[Alert] | None = None) -> None:
        self.alerts: dict[int, Alert] = {alert.id: alert for alert in alerts or []}
        self.events: list[AlertEvent] = []
        self.failing_alert_ids: set[int] = set()
        self.stale_alert_ids: set[int] = set()

    def list_alerts(self, *, user_id: int) -> list[Alert]:
        return [alert for alert in self.alerts.values() if alert.user_id == user_id and alert.is_active]

    def list_price_cross_alerts(self, *, user_id: int) -> list[Alert]:
        # Copies, like rows mapped out of a session.
        return [replace(alert) for alert in self.list_alerts(user_id=user_id)]

    def create_alert(self, *, user_id: int, symbol: str, value: Decimal) -> Alert:
        alert = Alert(id=len(self.alerts) + 1, user_id=user_id, symbol=symbol, value=value)
        self.alerts[alert.id] = alert
        return alert

    def set_active(self, *, user_id: int, alert_id: int, is_active: bool) -> Alert | None:
        alert = self.alerts.get(alert_id)
        if alert is None or alert.user_id != user_id:
            return None
        alert.is_active = is_active
        return alert

    def delete_alert(self, *, user_id: int, alert_id: int) -> bool:
        alert = self.alerts.get(alert_id)
        if alert is None or alert.user_id != user_id:
            return False
        del self.alerts[alert_id]
        return True

    def record_price(
        self,
        *,
        alert_id: int,
        expected_last_seen: Decimal | None,
        current_price: Decimal,
        triggered_at: datetime | None = None,
    ) -> bool:
        if alert_id in self.failing_alert_ids:
            raise PersistenceError(f"Failed to record price for alert {alert_id}")
        alert = self.alerts[alert_id]
        if alert_id in self.stale_alert_ids or alert.last_seen_price != expected_last_seen:
            return False
        alert.last_seen_price = current_price
        if triggered_at is not None:
            self.events.append(
                AlertEvent(
                    id=len(self.events) + 1,
                    alert_id=alert_id,
                    price=current_price,
                    triggered_at=triggered_at,
                )
            )
        return True


class FakeWatchlistRepository:
    def __init__(self) -> None:
        self.watchlists: dict[int, Watchlist] = {}

    def list_watchlists(self, *, user_id: int) -> list[Watchlist]:
        return [watchlist for watchlist in self.watchlists.values() if watchlist.user_id == user_id]

    def get_watchlist(self, *, user_id: int, watchlist_id: int) -> Watchlist | None:
        watchlist = self.watchlists.get(watchlist_id)
        if watchlist is None or watchlist.user_id != user_id:
            return None
        return watchlist

    def create_watchlist(self, *, user_id: int, name: str) -> Watchlist:
        watchlist = Watchlist(id=len(self.watchlists) + 1, user_id=user_id, name=name)
        self.watchlists[watchlist.id] = watchlist
        return watchlist

    def rename_watchlist(self, *, user_id: int, watchlist_id: int, name: str) -> Watchlist | None:
        watchlist = self.get_watchlist(user_id=user_id, watchlist_id=watchlist_id)
        if watchlist is not None:
            watchlist.name = name
        return watchlist

    def delete_watchlist(self, *, user_id: int, watchlist_id: int) -> bool:
        if self.get_watchlist(user_id=user_id, watchlist_id=watchlist_id) is None:
            return False
        del self.watchlists[watchlist_id]
        return True

    def has_symbol(self, *, watchlist_id: int, symbol: str) -> bool:
        return any(item.symbol == symbol for item in self.watchlists[watchlist_id].items)

    def add_item(self, *, watchlist_id: int, symbol: str, asset_type: str) -> WatchlistItem:
        items = self.watchlists[watchlist_id].items
        position = max((item.position for item in items), default=-1) + 1
        item = WatchlistItem(
            id=sum(len(w.items) for w in self.watchlists.values()) + 1,
            watchlist_id=watchlist_id,
            symbol=symbol,
            asset_type=asset_type,
            position=position,
        )
        items.append(item)
        return item

    def remove_item(self, *, watchlist_id: int, item_id: int) -> bool:
        items = self.watchlists[watchlist_id].items
        for item in items:
            if item.id == item_id:
                items.remove(item)
                return True
        return False


class FakePortfolioRepository:
    def __init__(self) -> None:
        self.portfolios: dict[int, Portfolio] = {}
        self._next_lot_id = 1

    def list_portfolios(self, *, user_id: int) -> list[Portfolio]:
        return [portfolio for portfolio in self.portfolios.values() if portfolio.user_id == user_id]

    def get_portfolio(self, *, user_id: int, portfolio_id: int) -> Portfolio | None:
        portfolio = self.portfolios.get(portfolio_id)
        if portfolio is None or portfolio.user_id != user_id:
            return None
        return portfolio

    def create_portfolio(self, *, user_id: int, name: str) -> Portfolio:
        portfolio = Portfolio(id=len(self.portfolios) + 1, user_id=user_id, name=name)
        self.portfolios[portfolio.id] = portfolio
        return portfolio

    def delete_portfolio(self, *, user_id: int, portfolio_id: int) -> bool:
        if self.get_portfolio(user_id=user_id, portfolio_id=portfolio_id) is None:
            return False
        del self.portfolios[portfolio_id]
        return True

    def add_lot(self, *, portfolio_id: int, lot: NewLot) -> Lot:
        created = Lot(
            id=self._next_lot_id,
            portfolio_id=portfolio_id,
            symbol=lot.symbol,
            qty=lot.qty,
            cost_basis=lot.cost_basis,
            trade_date=lot.trade_date,
            fee=lot.fee,
            created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
        )
        self._next_lot_id += 1
        self.portfolios[portfolio_id].lots.append(created)
        return created

    def remove_lot(self, *, portfolio_id: int, lot_id: int) -> bool:
        lots = self.portfolios[portfolio_id].lots
        for lot in lots:
            if lot.id == lot_id:
                lots.remove(lot)
                return True
        return False


@pytest.fixture
def alert_repo() -> FakeAlertRepository:
    return FakeAlertRepository()


@pytest.fixture
def watchlist_repo() -> FakeWatchlistRepository:
    return FakeWatchlistRepository()


@pytest.fixture
def portfolio_repo() -> FakePortfolioRepository:
    return FakePortfolioRepository()


@pytest.fixture
def quote_gateway() -> FakeQuoteGateway:
    return FakeQuoteGateway()


@pytest.fixture
def uow(
    watchlist_repo: FakeWatchlistRepository,
    portfolio_repo: FakePortfolioRepository,
    alert_repo: FakeAlertRepository,
) -> FakeUoW:
    return FakeUoW(watchlist_repo=watchlist_repo, portfolio_repo=portfolio_repo, alert_repo=alert_repo)
