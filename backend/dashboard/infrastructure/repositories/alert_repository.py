from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from dashboard.domain.alerts.schemas import RULE_PRICE_CROSS, Alert
from dashboard.domain.errors import PersistenceError
from dashboard.infrastructure.db.mappers import alert_to_domain
from dashboard.infrastructure.db.models.alert import AlertEventModel, AlertModel

RECENT_EVENTS_LIMIT = 5


class SqlAlchemyAlertRepository:
    def __init__(self, *, session: Session) -> None:
        self._session = session

    def list_alerts(self, *, user_id: int, events_limit: int = RECENT_EVENTS_LIMIT) -> list[Alert]:
        rows = (
            self._session.execute(
                select(AlertModel)
                .where(AlertModel.user_id == user_id, AlertModel.is_active.is_(True))
                .order_by(AlertModel.created_at.desc(), AlertModel.id.desc())
            )
            .scalars()
            .all()
        )
        events_by_alert = self._recent_events(alert_ids=[row.id for row in rows], limit=events_limit)
        return [alert_to_domain(row, recent_events=events_by_alert.get(row.id, [])) for row in rows]

    def list_price_cross_alerts(self, *, user_id: int) -> list[Alert]:
        rows = (
            self._session.execute(
                select(AlertModel)
                .where(
                    AlertModel.user_id == user_id,
                    AlertModel.is_active.is_(True),
                    AlertModel.rule_type == RULE_PRICE_CROSS,
                )
                .order_by(AlertModel.id)
            )
            .scalars()
            .all()
        )
        return [alert_to_domain(row) for row in rows]

    def get_alert(self, *, user_id: int, alert_id: int) -> Alert | None:
        row = self._get_owned(user_id=user_id, alert_id=alert_id)
        return alert_to_domain(row) if row is not None else None

    def create_alert(self, *, user_id: int, symbol: str, value: Decimal) -> Alert:
        alert = AlertModel(user_id=user_id, symbol=symbol, value=value, rule_type=RULE_PRICE_CROSS)
        self._session.add(alert)
        self._session.flush()
        return alert_to_domain(alert)

    def set_active(self, *, user_id: int, alert_id: int, is_active: bool) -> Alert | None:
        row = self._get_owned(user_id=user_id, alert_id=alert_id)
        if row is None:
            return None
        row.is_active = is_active
        self._session.flush()
        return alert_to_domain(row)

    def delete_alert(self, *, user_id: int, alert_id: int) -> bool:
        row = self._get_owned(user_id=user_id, alert_id=alert_id)
        if row is None:
            return False
        self._session.delete(row)
        self._session.flush()
        return True

    def record_price(
        self,
        *,
        alert_id: int,
        expected_last_seen: Decimal | None,
        current_price: Decimal,
        triggered_at: datetime | None = None,
    ) -> bool:
        """Compare-and-swap ``last_seen_price`` and optionally append an event.

        Returns False without writing when another evaluation already moved
        ``last_seen_price`` away from ``expected_last_seen``.
        """
        if expected_last_seen is None:
            matches_expected = AlertModel.last_seen_price.is_(None)
        else:
            matches_expected = AlertModel.last_seen_price == expected_last_seen

        try:
            result = self._session.execute(
                update(AlertModel)
                .where(AlertModel.id == alert_id, matches_expected)
                .values(last_seen_price=current_price)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                return False
            if triggered_at is not None:
                self._session.add(
                    AlertEventModel(alert_id=alert_id, price=current_price, triggered_at=triggered_at)
                )
            self._session.flush()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to record price for alert {alert_id}") from exc
        return True

    def _recent_events(self, *, alert_ids: list[int], limit: int) -> dict[int, list[AlertEventModel]]:
        if not alert_ids:
            return {}
        rows = (
            self._session.execute(
                select(AlertEventModel)
                .where(AlertEventModel.alert_id.in_(alert_ids))
                .order_by(AlertEventModel.triggered_at.desc(), AlertEventModel.id.desc())
            )
            .scalars()
            .all()
        )
        grouped: dict[int, list[AlertEventModel]] = defaultdict(list)
        for row in rows:
            if len(grouped[row.alert_id]) < limit:
                grouped[row.alert_id].append(row)
        return grouped

    def _get_owned(self, *, user_id: int, alert_id: int) -> AlertModel | None:
        return self._session.execute(
            select(AlertModel).where(AlertModel.id == alert_id, AlertModel.user_id == user_id)
        ).scalar_one_or_none()
