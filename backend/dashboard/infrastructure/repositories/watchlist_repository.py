from __future__ import annotations

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from dashboard.domain.errors import ValidationError
from dashboard.domain.watchlist.schemas import Watchlist, WatchlistItem
from dashboard.infrastructure.db.mappers import watchlist_item_to_domain, watchlist_to_domain
from dashboard.infrastructure.db.models.watchlist import WatchlistItemModel, WatchlistModel


class SqlAlchemyWatchlistRepository:
    def __init__(self, *, session: Session) -> None:
        self._session = session

    def list_watchlists(self, *, user_id: int) -> list[Watchlist]:
        rows = (
            self._session.execute(
                select(WatchlistModel)
                .where(WatchlistModel.user_id == user_id)
                .order_by(WatchlistModel.created_at, WatchlistModel.id)
            )
            .scalars()
            .all()
        )
        return [watchlist_to_domain(row) for row in rows]

    def get_watchlist(self, *, user_id: int, watchlist_id: int) -> Watchlist | None:
        row = self._session.execute(
            select(WatchlistModel)
            .options(selectinload(WatchlistModel.items))
            .where(WatchlistModel.id == watchlist_id, WatchlistModel.user_id == user_id)
        ).scalar_one_or_none()
        return watchlist_to_domain(row, with_items=True) if row is not None else None

    def create_watchlist(self, *, user_id: int, name: str) -> Watchlist:
        watchlist = WatchlistModel(user_id=user_id, name=name)
        self._session.add(watchlist)
        self._session.flush()
        return watchlist_to_domain(watchlist)

    def rename_watchlist(self, *, user_id: int, watchlist_id: int, name: str) -> Watchlist | None:
        row = self._get_owned(user_id=user_id, watchlist_id=watchlist_id)
        if row is None:
            return None
        row.name = name
        self._session.flush()
        return watchlist_to_domain(row)

    def delete_watchlist(self, *, user_id: int, watchlist_id: int) -> bool:
        row = self._get_owned(user_id=user_id, watchlist_id=watchlist_id)
        if row is None:
            return False
        self._session.delete(row)
        self._session.flush()
        return True

    def has_symbol(self, *, watchlist_id: int, symbol: str) -> bool:
        found = self._session.execute(
            select(WatchlistItemModel.id).where(
                WatchlistItemModel.watchlist_id == watchlist_id,
                WatchlistItemModel.symbol == symbol,
            )
        ).first()
        return found is not None

    def add_item(self, *, watchlist_id: int, symbol: str, asset_type: str) -> WatchlistItem:
        max_position = self._session.execute(
            select(func.max(WatchlistItemModel.position)).where(WatchlistItemModel.watchlist_id == watchlist_id)
        ).scalar_one()
        position = 0 if max_position is None else max_position + 1

        item = WatchlistItemModel(
            watchlist_id=watchlist_id,
            symbol=symbol,
            asset_type=asset_type,
            position=position,
        )
        self._session.add(item)
        try:
            self._session.flush()
        except IntegrityError as exc:
            self._session.rollback()
            raise ValidationError("Symbol already in watchlist", details={"symbol": symbol}) from exc
        return watchlist_item_to_domain(item)

    def remove_item(self, *, watchlist_id: int, item_id: int) -> bool:
        result = self._session.execute(
            delete(WatchlistItemModel).where(
                WatchlistItemModel.watchlist_id == watchlist_id,
                WatchlistItemModel.id == item_id,
            )
        )
        self._session.flush()
        return result.rowcount > 0

    def _get_owned(self, *, user_id: int, watchlist_id: int) -> WatchlistModel | None:
        return self._session.execute(
            select(WatchlistModel).where(WatchlistModel.id == watchlist_id, WatchlistModel.user_id == user_id)
        ).scalar_one_or_none()
