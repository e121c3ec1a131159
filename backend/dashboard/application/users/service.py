from __future__ import annotations

from dashboard.application.common import require_repo
from dashboard.domain.errors import ValidationError
from dashboard.domain.users.schemas import User
from dashboard.infrastructure.db.uow import SqlAlchemyUnitOfWork


class UserApplicationService:
    def __init__(self, *, uow: SqlAlchemyUnitOfWork) -> None:
        self._uow = uow

    def get_or_create(self, *, email: str) -> User:
        normalized = email.strip().lower()
        if not normalized:
            raise ValidationError("Email is required")
        with self._uow as uow:
            repo = require_repo(uow, "user_repo")
            user = repo.get_or_create(email=normalized)
            uow.commit()
            return user
