from __future__ import annotations

from typing import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from dashboard.domain.errors import PersistenceError
from dashboard.infrastructure.repositories.alert_repository import SqlAlchemyAlertRepository
from dashboard.infrastructure.repositories.portfolio_repository import SqlAlchemyPortfolioRepository
from dashboard.infrastructure.repositories.user_repository import SqlAlchemyUserRepository
from dashboard.infrastructure.repositories.watchlist_repository import SqlAlchemyWatchlistRepository


class SqlAlchemyUnitOfWork:
    def __init__(self, *, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory
        self.session: Session | None = None
        self.user_repo: SqlAlchemyUserRepository | None = None
        self.watchlist_repo: SqlAlchemyWatchlistRepository | None = None
        self.portfolio_repo: SqlAlchemyPortfolioRepository | None = None
        self.alert_repo: SqlAlchemyAlertRepository | None = None

    def __enter__(self) -> "SqlAlchemyUnitOfWork":
        self.session = self._session_factory()
        self.user_repo = SqlAlchemyUserRepository(session=self.session)
        self.watchlist_repo = SqlAlchemyWatchlistRepository(session=self.session)
        self.portfolio_repo = SqlAlchemyPortfolioRepository(session=self.session)
        self.alert_repo = SqlAlchemyAlertRepository(session=self.session)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self.session is None:
            return
        if exc_type is not None:
            self.session.rollback()
        self.session.close()
        self.session = None
        self.user_repo = None
        self.watchlist_repo = None
        self.portfolio_repo = None
        self.alert_repo = None

    def commit(self) -> None:
        if self.session is None:
            raise RuntimeError("Unit of work has no active session")
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise PersistenceError("Failed to commit unit of work") from exc

    def rollback(self) -> None:
        if self.session is None:
            raise RuntimeError("Unit of work has no active session")
        self.session.rollback()
