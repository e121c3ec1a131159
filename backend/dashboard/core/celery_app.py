from __future__ import annotations

from celery import Celery
from celery.signals import setup_logging

from dashboard.core.config import settings
from dashboard.core.logging import configure_logging

celery_app = Celery(
    "dashboard",
    broker=settings.redis_url,
    include=["dashboard.tasks.alerts"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    beat_schedule={
        "evaluate-price-alerts": {
            "task": "dashboard.tasks.alerts.evaluate_price_alerts",
            "schedule": settings.alerts_eval_interval_seconds,
        },
    },
)


@setup_logging.connect
def _configure_worker_logging(**_: object) -> None:
    configure_logging()
