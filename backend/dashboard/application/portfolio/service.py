from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from decimal import Decimal
import logging

from dashboard.application.common import normalize_name, require_repo, validate_user_id
from dashboard.application.market_data.gateway import QuoteGateway
from dashboard.domain.errors import NotFoundError, ValidationError
from dashboard.domain.market_data.symbols import normalize_symbol
from dashboard.domain.portfolio.aggregation import aggregate_lots
from dashboard.domain.portfolio.schemas import (
    DEFAULT_PORTFOLIO_NAME,
    ZERO,
    Lot,
    NewLot,
    Portfolio,
    Valuation,
)
from dashboard.domain.portfolio.valuation import value_positions
from dashboard.infrastructure.db.uow import SqlAlchemyUnitOfWork

logger = logging.getLogger(__name__)


class PortfolioApplicationService:
    def __init__(
        self,
        *,
        uow: SqlAlchemyUnitOfWork,
        quote_gateway: QuoteGateway,
    ) -> None:
        self._uow = uow
        self._quote_gateway = quote_gateway

    def list_portfolios(self, *, user_id: int) -> list[Portfolio]:
        validate_user_id(user_id=user_id)
        with self._uow as uow:
            repo = require_repo(uow, "portfolio_repo")
            return repo.list_portfolios(user_id=user_id)

    def get_portfolio(self, *, user_id: int, portfolio_id: int) -> Portfolio:
        validate_user_id(user_id=user_id)
        with self._uow as uow:
            repo = require_repo(uow, "portfolio_repo")
            portfolio = repo.get_portfolio(user_id=user_id, portfolio_id=portfolio_id)
        if portfolio is None:
            raise NotFoundError("Portfolio", portfolio_id)
        return portfolio

    def create_portfolio(self, *, user_id: int, name: str | None = None) -> Portfolio:
        validate_user_id(user_id=user_id)
        normalized = normalize_name(name) if name is not None else DEFAULT_PORTFOLIO_NAME
        with self._uow as uow:
            repo = require_repo(uow, "portfolio_repo")
            portfolio = repo.create_portfolio(user_id=user_id, name=normalized)
            uow.commit()
        logger.info("Portfolio created", extra={"user_id": user_id, "portfolio_id": portfolio.id})
        return portfolio

    def delete_portfolio(self, *, user_id: int, portfolio_id: int) -> None:
        validate_user_id(user_id=user_id)
        with self._uow as uow:
            repo = require_repo(uow, "portfolio_repo")
            if not repo.delete_portfolio(user_id=user_id, portfolio_id=portfolio_id):
                raise NotFoundError("Portfolio", portfolio_id)
            uow.commit()

    def add_lot(
        self,
        *,
        user_id: int,
        portfolio_id: int,
        symbol: str,
        qty: Decimal,
        cost_basis: Decimal,
        trade_date: datetime,
        fee: Decimal = ZERO,
    ) -> Lot:
        validate_user_id(user_id=user_id)
        new_lot = _build_new_lot(symbol=symbol, qty=qty, cost_basis=cost_basis, trade_date=trade_date, fee=fee)
        with self._uow as uow:
            repo = require_repo(uow, "portfolio_repo")
            if repo.get_portfolio(user_id=user_id, portfolio_id=portfolio_id) is None:
                raise NotFoundError("Portfolio", portfolio_id)
            lot = repo.add_lot(portfolio_id=portfolio_id, lot=new_lot)
            uow.commit()
        return lot

    def remove_lot(self, *, user_id: int, portfolio_id: int, lot_id: int) -> None:
        validate_user_id(user_id=user_id)
        with self._uow as uow:
            repo = require_repo(uow, "portfolio_repo")
            if repo.get_portfolio(user_id=user_id, portfolio_id=portfolio_id) is None:
                raise NotFoundError("Portfolio", portfolio_id)
            if not repo.remove_lot(portfolio_id=portfolio_id, lot_id=lot_id):
                raise NotFoundError("Lot", lot_id)
            uow.commit()

    async def get_holdings(self, *, user_id: int, portfolio_id: int) -> Valuation:
        portfolio = await asyncio.to_thread(self.get_portfolio, user_id=user_id, portfolio_id=portfolio_id)
        positions = aggregate_lots(portfolio.lots)

        prices: dict[str, Decimal | None] = {}
        if positions:
            prices = await self._quote_gateway.get_last_prices(positions.keys())

        missing = sorted(symbol for symbol in positions if prices.get(symbol) is None)
        if missing:
            logger.warning(
                "Valuing positions without a price at zero",
                extra={"portfolio_id": portfolio_id, "symbols": missing},
            )
        return value_positions(positions, prices)


def _build_new_lot(
    *,
    symbol: str,
    qty: Decimal,
    cost_basis: Decimal,
    trade_date: datetime,
    fee: Decimal,
) -> NewLot:
    if qty <= 0:
        raise ValidationError("qty must be greater than 0", details={"qty": str(qty)})
    if cost_basis < 0:
        raise ValidationError("cost_basis must be >= 0", details={"cost_basis": str(cost_basis)})
    if fee < 0:
        raise ValidationError("fee must be >= 0", details={"fee": str(fee)})
    if trade_date.tzinfo is None:
        trade_date = trade_date.replace(tzinfo=timezone.utc)
    return NewLot(
        symbol=normalize_symbol(symbol),
        qty=qty,
        cost_basis=cost_basis,
        trade_date=trade_date,
        fee=fee,
    )
