from __future__ import annotations

from typing import Any

from dashboard.domain.errors import ValidationError


def validate_user_id(*, user_id: int) -> None:
    if user_id < 1:
        raise ValidationError("Invalid user id", details={"user_id": user_id})


def normalize_name(name: str, *, field: str = "name", max_length: int = 255) -> str:
    normalized = name.strip()
    if not normalized:
        raise ValidationError(f"{field} is required", details={field: name})
    if len(normalized) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters", details={field: name})
    return normalized


def require_repo(uow: object, name: str) -> Any:
    repo = getattr(uow, name, None)
    if repo is None:
        raise RuntimeError(f"{name} not configured")
    return repo
