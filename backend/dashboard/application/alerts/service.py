from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import datetime, timezone
from decimal import Decimal
import logging

from dashboard.application.common import require_repo, validate_user_id
from dashboard.application.market_data.gateway import QuoteGateway
from dashboard.domain.alerts.crossing import decide_crossing
from dashboard.domain.alerts.schemas import Alert, EvaluationSummary
from dashboard.domain.errors import NotFoundError, PersistenceError, ValidationError
from dashboard.domain.market_data.schemas import quantize_price
from dashboard.domain.market_data.symbols import normalize_symbol
from dashboard.infrastructure.db.uow import SqlAlchemyUnitOfWork

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class AlertsApplicationService:
    def __init__(
        self,
        *,
        uow: SqlAlchemyUnitOfWork,
        quote_gateway: QuoteGateway,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._uow = uow
        self._quote_gateway = quote_gateway
        self._clock = clock

    def list_alerts(self, *, user_id: int) -> list[Alert]:
        validate_user_id(user_id=user_id)
        with self._uow as uow:
            repo = require_repo(uow, "alert_repo")
            return repo.list_alerts(user_id=user_id)

    def create_alert(self, *, user_id: int, symbol: str, value: Decimal) -> Alert:
        validate_user_id(user_id=user_id)
        normalized = normalize_symbol(symbol)
        if value <= 0:
            raise ValidationError("value must be greater than 0", details={"value": str(value)})
        with self._uow as uow:
            repo = require_repo(uow, "alert_repo")
            alert = repo.create_alert(user_id=user_id, symbol=normalized, value=value)
            uow.commit()
        logger.info("Alert created", extra={"user_id": user_id, "alert_id": alert.id, "symbol": normalized})
        return alert

    def set_active(self, *, user_id: int, alert_id: int, is_active: bool) -> Alert:
        validate_user_id(user_id=user_id)
        with self._uow as uow:
            repo = require_repo(uow, "alert_repo")
            alert = repo.set_active(user_id=user_id, alert_id=alert_id, is_active=is_active)
            if alert is None:
                raise NotFoundError("Alert", alert_id)
            uow.commit()
        return alert

    def delete_alert(self, *, user_id: int, alert_id: int) -> None:
        validate_user_id(user_id=user_id)
        with self._uow as uow:
            repo = require_repo(uow, "alert_repo")
            if not repo.delete_alert(user_id=user_id, alert_id=alert_id):
                raise NotFoundError("Alert", alert_id)
            uow.commit()

    async def evaluate_all(self, *, user_id: int) -> EvaluationSummary:
        """Run one evaluation tick over the user's active price-cross alerts.

        Quotes are fetched once per distinct symbol before any alert is
        evaluated. Each alert is then written in its own transaction; an alert
        whose price is unavailable, or whose write fails, is left for the
        next tick without affecting the others. Store calls run in worker
        threads so the event loop stays free while they block.
        """
        validate_user_id(user_id=user_id)
        alerts = await asyncio.to_thread(self._list_price_cross_alerts, user_id)

        summary = EvaluationSummary(checked=len(alerts))
        if not alerts:
            return summary

        prices = await self._quote_gateway.get_last_prices(alert.symbol for alert in alerts)

        for alert in alerts:
            current = prices.get(alert.symbol)
            if current is None:
                logger.info(
                    "Skipping alert without a price",
                    extra={"alert_id": alert.id, "symbol": alert.symbol},
                )
                continue
            try:
                if await asyncio.to_thread(self._apply_tick, alert, quantize_price(current)):
                    summary.triggered += 1
            except PersistenceError:
                logger.exception("Failed to persist alert evaluation", extra={"alert_id": alert.id})

        logger.info(
            "Alert evaluation finished",
            extra={"user_id": user_id, "checked": summary.checked, "triggered": summary.triggered},
        )
        return summary

    def _list_price_cross_alerts(self, user_id: int) -> list[Alert]:
        with self._uow as uow:
            repo = require_repo(uow, "alert_repo")
            return repo.list_price_cross_alerts(user_id=user_id)

    def _apply_tick(self, alert: Alert, current: Decimal) -> bool:
        decision = decide_crossing(alert, current=current)
        triggered_at = self._clock() if decision.crossed else None

        with self._uow as uow:
            repo = require_repo(uow, "alert_repo")
            applied = repo.record_price(
                alert_id=alert.id,
                expected_last_seen=decision.previous_price,
                current_price=decision.current_price,
                triggered_at=triggered_at,
            )
            if not applied:
                uow.rollback()
                logger.warning(
                    "Alert changed by a concurrent evaluation, skipping",
                    extra={"alert_id": alert.id},
                )
                return False
            uow.commit()

        if decision.crossed:
            logger.info(
                "Alert triggered",
                extra={
                    "alert_id": alert.id,
                    "symbol": alert.symbol,
                    "threshold": str(alert.value),
                    "price": str(current),
                },
            )
        return decision.crossed
