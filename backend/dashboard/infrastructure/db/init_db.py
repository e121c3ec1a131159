from __future__ import annotations

from dashboard.infrastructure.db.base import Base
from dashboard.infrastructure.db.session import engine

# Ensure models are registered with SQLAlchemy metadata.
from dashboard.infrastructure.db import models  # noqa: F401


def init_db() -> None:
    Base.metadata.create_all(bind=engine)
