from __future__ import annotations

import asyncio
import logging

from dashboard.application.container import build_alerts_service, build_user_service
from dashboard.core.celery_app import celery_app
from dashboard.core.config import settings

logger = logging.getLogger(__name__)


@celery_app.task(name="dashboard.tasks.alerts.evaluate_price_alerts")
def evaluate_price_alerts(user_id: int | None = None) -> dict[str, int]:
    if user_id is None:
        user_id = build_user_service().get_or_create(email=settings.demo_user_email).id
    summary = asyncio.run(build_alerts_service().evaluate_all(user_id=user_id))
    logger.info(
        "Price alerts evaluated",
        extra={"user_id": user_id, "checked": summary.checked, "triggered": summary.triggered},
    )
    return {"checked": summary.checked, "triggered": summary.triggered}
