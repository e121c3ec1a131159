from __future__ import annotations

from fastapi import APIRouter, Depends

from dashboard.api.deps import get_current_user, get_watchlist_service
from dashboard.api.v1.dto.mappers import (
    to_watchlist_detail_out,
    to_watchlist_item_out,
    to_watchlist_out,
)
from dashboard.api.v1.dto.watchlist import (
    DeletedOut,
    WatchlistCreate,
    WatchlistDetailOut,
    WatchlistItemCreate,
    WatchlistItemOut,
    WatchlistOut,
    WatchlistUpdate,
)
from dashboard.application.watchlist.service import WatchlistApplicationService
from dashboard.domain.users.schemas import User

router = APIRouter()


@router.get("", response_model=list[WatchlistOut])
def list_watchlists(
    service: WatchlistApplicationService = Depends(get_watchlist_service),
    current_user: User = Depends(get_current_user),
) -> list[WatchlistOut]:
    watchlists = service.list_watchlists(user_id=current_user.id)
    return [to_watchlist_out(watchlist) for watchlist in watchlists]


@router.post("", response_model=WatchlistOut)
def create_watchlist(
    payload: WatchlistCreate,
    service: WatchlistApplicationService = Depends(get_watchlist_service),
    current_user: User = Depends(get_current_user),
) -> WatchlistOut:
    watchlist = service.create_watchlist(user_id=current_user.id, name=payload.name)
    return to_watchlist_out(watchlist)


@router.get("/{watchlist_id}", response_model=WatchlistDetailOut)
def get_watchlist(
    watchlist_id: int,
    service: WatchlistApplicationService = Depends(get_watchlist_service),
    current_user: User = Depends(get_current_user),
) -> WatchlistDetailOut:
    watchlist = service.get_watchlist(user_id=current_user.id, watchlist_id=watchlist_id)
    return to_watchlist_detail_out(watchlist)


@router.patch("/{watchlist_id}", response_model=WatchlistOut)
def rename_watchlist(
    watchlist_id: int,
    payload: WatchlistUpdate,
    service: WatchlistApplicationService = Depends(get_watchlist_service),
    current_user: User = Depends(get_current_user),
) -> WatchlistOut:
    watchlist = service.rename_watchlist(user_id=current_user.id, watchlist_id=watchlist_id, name=payload.name)
    return to_watchlist_out(watchlist)


@router.delete("/{watchlist_id}", response_model=DeletedOut)
def delete_watchlist(
    watchlist_id: int,
    service: WatchlistApplicationService = Depends(get_watchlist_service),
    current_user: User = Depends(get_current_user),
) -> DeletedOut:
    service.delete_watchlist(user_id=current_user.id, watchlist_id=watchlist_id)
    return DeletedOut()


@router.post("/{watchlist_id}/items", response_model=WatchlistItemOut)
def add_watchlist_item(
    watchlist_id: int,
    payload: WatchlistItemCreate,
    service: WatchlistApplicationService = Depends(get_watchlist_service),
    current_user: User = Depends(get_current_user),
) -> WatchlistItemOut:
    item = service.add_item(
        user_id=current_user.id,
        watchlist_id=watchlist_id,
        symbol=payload.symbol,
        asset_type=payload.asset_type,
    )
    return to_watchlist_item_out(item)


@router.delete("/{watchlist_id}/items/{item_id}", response_model=DeletedOut)
def delete_watchlist_item(
    watchlist_id: int,
    item_id: int,
    service: WatchlistApplicationService = Depends(get_watchlist_service),
    current_user: User = Depends(get_current_user),
) -> DeletedOut:
    service.remove_item(user_id=current_user.id, watchlist_id=watchlist_id, item_id=item_id)
    return DeletedOut()
