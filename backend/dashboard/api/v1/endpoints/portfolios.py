from __future__ import annotations

from fastapi import APIRouter, Depends

from dashboard.api.deps import get_current_user, get_portfolio_service
from dashboard.api.v1.dto.mappers import (
    to_holdings_out,
    to_lot_out,
    to_portfolio_detail_out,
    to_portfolio_out,
)
from dashboard.api.v1.dto.portfolio import (
    HoldingsOut,
    LotCreate,
    LotOut,
    PortfolioCreate,
    PortfolioDetailOut,
    PortfolioOut,
)
from dashboard.api.v1.dto.watchlist import DeletedOut
from dashboard.application.portfolio.service import PortfolioApplicationService
from dashboard.domain.users.schemas import User

router = APIRouter()


@router.get("", response_model=list[PortfolioOut])
def list_portfolios(
    service: PortfolioApplicationService = Depends(get_portfolio_service),
    current_user: User = Depends(get_current_user),
) -> list[PortfolioOut]:
    return [to_portfolio_out(portfolio) for portfolio in service.list_portfolios(user_id=current_user.id)]


@router.post("", response_model=PortfolioOut)
def create_portfolio(
    payload: PortfolioCreate | None = None,
    service: PortfolioApplicationService = Depends(get_portfolio_service),
    current_user: User = Depends(get_current_user),
) -> PortfolioOut:
    name = payload.name if payload is not None else None
    portfolio = service.create_portfolio(user_id=current_user.id, name=name)
    return to_portfolio_out(portfolio)


@router.get("/{portfolio_id}", response_model=PortfolioDetailOut)
def get_portfolio(
    portfolio_id: int,
    service: PortfolioApplicationService = Depends(get_portfolio_service),
    current_user: User = Depends(get_current_user),
) -> PortfolioDetailOut:
    portfolio = service.get_portfolio(user_id=current_user.id, portfolio_id=portfolio_id)
    return to_portfolio_detail_out(portfolio)


@router.delete("/{portfolio_id}", response_model=DeletedOut)
def delete_portfolio(
    portfolio_id: int,
    service: PortfolioApplicationService = Depends(get_portfolio_service),
    current_user: User = Depends(get_current_user),
) -> DeletedOut:
    service.delete_portfolio(user_id=current_user.id, portfolio_id=portfolio_id)
    return DeletedOut()


@router.post("/{portfolio_id}/lots", response_model=LotOut)
def add_lot(
    portfolio_id: int,
    payload: LotCreate,
    service: PortfolioApplicationService = Depends(get_portfolio_service),
    current_user: User = Depends(get_current_user),
) -> LotOut:
    lot = service.add_lot(
        user_id=current_user.id,
        portfolio_id=portfolio_id,
        symbol=payload.symbol,
        qty=payload.qty,
        cost_basis=payload.cost_basis,
        fee=payload.fee,
        trade_date=payload.trade_date,
    )
    return to_lot_out(lot)


@router.delete("/{portfolio_id}/lots/{lot_id}", response_model=DeletedOut)
def delete_lot(
    portfolio_id: int,
    lot_id: int,
    service: PortfolioApplicationService = Depends(get_portfolio_service),
    current_user: User = Depends(get_current_user),
) -> DeletedOut:
    service.remove_lot(user_id=current_user.id, portfolio_id=portfolio_id, lot_id=lot_id)
    return DeletedOut()


@router.get("/{portfolio_id}/holdings", response_model=HoldingsOut)
async def get_holdings(
    portfolio_id: int,
    service: PortfolioApplicationService = Depends(get_portfolio_service),
    current_user: User = Depends(get_current_user),
) -> HoldingsOut:
    valuation = await service.get_holdings(user_id=current_user.id, portfolio_id=portfolio_id)
    return to_holdings_out(valuation)
