from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.orm import Session, selectinload

from dashboard.domain.portfolio.schemas import Lot, NewLot, Portfolio
from dashboard.infrastructure.db.mappers import lot_to_domain, portfolio_to_domain
from dashboard.infrastructure.db.models.portfolio import LotModel, PortfolioModel


class SqlAlchemyPortfolioRepository:
    def __init__(self, *, session: Session) -> None:
        self._session = session

    def list_portfolios(self, *, user_id: int) -> list[Portfolio]:
        rows = (
            self._session.execute(
                select(PortfolioModel)
                .where(PortfolioModel.user_id == user_id)
                .order_by(PortfolioModel.created_at, PortfolioModel.id)
            )
            .scalars()
            .all()
        )
        return [portfolio_to_domain(row) for row in rows]

    def get_portfolio(self, *, user_id: int, portfolio_id: int) -> Portfolio | None:
        row = self._session.execute(
            select(PortfolioModel)
            .options(selectinload(PortfolioModel.lots))
            .where(PortfolioModel.id == portfolio_id, PortfolioModel.user_id == user_id)
        ).scalar_one_or_none()
        return portfolio_to_domain(row, with_lots=True) if row is not None else None

    def create_portfolio(self, *, user_id: int, name: str) -> Portfolio:
        portfolio = PortfolioModel(user_id=user_id, name=name)
        self._session.add(portfolio)
        self._session.flush()
        return portfolio_to_domain(portfolio)

    def delete_portfolio(self, *, user_id: int, portfolio_id: int) -> bool:
        row = self._session.execute(
            select(PortfolioModel).where(PortfolioModel.id == portfolio_id, PortfolioModel.user_id == user_id)
        ).scalar_one_or_none()
        if row is None:
            return False
        self._session.delete(row)
        self._session.flush()
        return True

    def add_lot(self, *, portfolio_id: int, lot: NewLot) -> Lot:
        model = LotModel(
            portfolio_id=portfolio_id,
            symbol=lot.symbol,
            qty=lot.qty,
            cost_basis=lot.cost_basis,
            fee=lot.fee,
            trade_date=lot.trade_date,
        )
        self._session.add(model)
        self._session.flush()
        return lot_to_domain(model)

    def remove_lot(self, *, portfolio_id: int, lot_id: int) -> bool:
        result = self._session.execute(
            delete(LotModel).where(LotModel.portfolio_id == portfolio_id, LotModel.id == lot_id)
        )
        self._session.flush()
        return result.rowcount > 0
