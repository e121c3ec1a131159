from __future__ import annotations

import logging

from dashboard.application.common import normalize_name, require_repo, validate_user_id
from dashboard.domain.errors import NotFoundError, ValidationError
from dashboard.domain.market_data.symbols import normalize_symbol
from dashboard.domain.watchlist.schemas import ASSET_TYPES, Watchlist, WatchlistItem
from dashboard.infrastructure.db.uow import SqlAlchemyUnitOfWork

logger = logging.getLogger(__name__)


class WatchlistApplicationService:
    def __init__(self, *, uow: SqlAlchemyUnitOfWork) -> None:
        self._uow = uow

    def list_watchlists(self, *, user_id: int) -> list[Watchlist]:
        validate_user_id(user_id=user_id)
        with self._uow as uow:
            repo = require_repo(uow, "watchlist_repo")
            return repo.list_watchlists(user_id=user_id)

    def get_watchlist(self, *, user_id: int, watchlist_id: int) -> Watchlist:
        validate_user_id(user_id=user_id)
        with self._uow as uow:
            repo = require_repo(uow, "watchlist_repo")
            watchlist = repo.get_watchlist(user_id=user_id, watchlist_id=watchlist_id)
        if watchlist is None:
            raise NotFoundError("Watchlist", watchlist_id)
        return watchlist

    def create_watchlist(self, *, user_id: int, name: str) -> Watchlist:
        validate_user_id(user_id=user_id)
        normalized = normalize_name(name)
        with self._uow as uow:
            repo = require_repo(uow, "watchlist_repo")
            watchlist = repo.create_watchlist(user_id=user_id, name=normalized)
            uow.commit()
        logger.info("Watchlist created", extra={"user_id": user_id, "watchlist_id": watchlist.id})
        return watchlist

    def rename_watchlist(self, *, user_id: int, watchlist_id: int, name: str) -> Watchlist:
        validate_user_id(user_id=user_id)
        normalized = normalize_name(name)
        with self._uow as uow:
            repo = require_repo(uow, "watchlist_repo")
            watchlist = repo.rename_watchlist(user_id=user_id, watchlist_id=watchlist_id, name=normalized)
            if watchlist is None:
                raise NotFoundError("Watchlist", watchlist_id)
            uow.commit()
        return watchlist

    def delete_watchlist(self, *, user_id: int, watchlist_id: int) -> None:
        validate_user_id(user_id=user_id)
        with self._uow as uow:
            repo = require_repo(uow, "watchlist_repo")
            if not repo.delete_watchlist(user_id=user_id, watchlist_id=watchlist_id):
                raise NotFoundError("Watchlist", watchlist_id)
            uow.commit()

    def add_item(self, *, user_id: int, watchlist_id: int, symbol: str, asset_type: str) -> WatchlistItem:
        validate_user_id(user_id=user_id)
        normalized = normalize_symbol(symbol)
        normalized_type = asset_type.strip().lower()
        if normalized_type not in ASSET_TYPES:
            raise ValidationError(
                f"asset_type must be one of: {', '.join(ASSET_TYPES)}",
                details={"asset_type": asset_type},
            )

        with self._uow as uow:
            repo = require_repo(uow, "watchlist_repo")
            if repo.get_watchlist(user_id=user_id, watchlist_id=watchlist_id) is None:
                raise NotFoundError("Watchlist", watchlist_id)
            if repo.has_symbol(watchlist_id=watchlist_id, symbol=normalized):
                raise ValidationError("Symbol already in watchlist", details={"symbol": normalized})
            item = repo.add_item(watchlist_id=watchlist_id, symbol=normalized, asset_type=normalized_type)
            uow.commit()
        return item

    def remove_item(self, *, user_id: int, watchlist_id: int, item_id: int) -> None:
        validate_user_id(user_id=user_id)
        with self._uow as uow:
            repo = require_repo(uow, "watchlist_repo")
            if repo.get_watchlist(user_id=user_id, watchlist_id=watchlist_id) is None:
                raise NotFoundError("Watchlist", watchlist_id)
            if not repo.remove_item(watchlist_id=watchlist_id, item_id=item_id):
                raise NotFoundError("Watchlist item", item_id)
            uow.commit()
