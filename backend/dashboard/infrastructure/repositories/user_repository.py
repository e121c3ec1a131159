from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from dashboard.domain.users.schemas import User
from dashboard.infrastructure.db.mappers import user_to_domain
from dashboard.infrastructure.db.models.user import UserModel


class SqlAlchemyUserRepository:
    def __init__(self, *, session: Session) -> None:
        self._session = session

    def get_by_email(self, *, email: str) -> User | None:
        row = self._session.execute(select(UserModel).where(UserModel.email == email)).scalar_one_or_none()
        return user_to_domain(row) if row is not None else None

    def get_or_create(self, *, email: str) -> User:
        existing = self.get_by_email(email=email)
        if existing is not None:
            return existing

        user = UserModel(email=email)
        self._session.add(user)
        try:
            self._session.flush()
        except IntegrityError:
            # Created concurrently by another request.
            self._session.rollback()
            row = self._session.execute(select(UserModel).where(UserModel.email == email)).scalar_one()
            return user_to_domain(row)
        return user_to_domain(user)
