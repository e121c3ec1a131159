from __future__ import annotations

import asyncio
import time
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from dashboard.application.alerts.service import AlertsApplicationService
from dashboard.domain.alerts.schemas import Alert
from dashboard.domain.errors import NotFoundError, ValidationError

NOW = datetime(2026, 3, 2, 15, 30, tzinfo=timezone.utc)


def _service(uow, quote_gateway) -> AlertsApplicationService:
    return AlertsApplicationService(uow=uow, quote_gateway=quote_gateway, clock=lambda: NOW)


def _alert(alert_id: int, symbol: str, value: str, last_seen: str | None = None) -> Alert:
    return Alert(
        id=alert_id,
        user_id=1,
        symbol=symbol,
        value=Decimal(value),
        last_seen_price=Decimal(last_seen) if last_seen is not None else None,
    )


def _evaluate(service: AlertsApplicationService):
    return asyncio.run(service.evaluate_all(user_id=1))


def test_first_tick_records_baseline_without_triggering(uow, alert_repo, quote_gateway) -> None:
    alert_repo.alerts[1] = _alert(1, "AAPL", "100")
    quote_gateway.prices = {"AAPL": Decimal("150")}

    summary = _evaluate(_service(uow, quote_gateway))

    assert (summary.checked, summary.triggered) == (1, 0)
    assert alert_repo.alerts[1].last_seen_price == Decimal("150")
    assert alert_repo.events == []


def test_crossing_records_event_and_updates_last_seen(uow, alert_repo, quote_gateway) -> None:
    alert_repo.alerts[1] = _alert(1, "AAPL", "100", last_seen="95")
    quote_gateway.prices = {"AAPL": Decimal("101")}

    summary = _evaluate(_service(uow, quote_gateway))

    assert (summary.checked, summary.triggered) == (1, 1)
    assert alert_repo.alerts[1].last_seen_price == Decimal("101")
    assert len(alert_repo.events) == 1
    event = alert_repo.events[0]
    assert (event.alert_id, event.price, event.triggered_at) == (1, Decimal("101"), NOW)


def test_repeated_tick_at_same_price_does_not_retrigger(uow, alert_repo, quote_gateway) -> None:
    alert_repo.alerts[1] = _alert(1, "AAPL", "100", last_seen="95")
    quote_gateway.prices = {"AAPL": Decimal("105")}
    service = _service(uow, quote_gateway)

    first = _evaluate(service)
    second = _evaluate(service)

    assert first.triggered == 1
    assert second.triggered == 0
    assert len(alert_repo.events) == 1


def test_quotes_are_fetched_once_per_distinct_symbol(uow, alert_repo, quote_gateway) -> None:
    alert_repo.alerts[1] = _alert(1, "BTC-USD", "50000", last_seen="49000")
    alert_repo.alerts[2] = _alert(2, "BTC-USD", "60000", last_seen="49000")
    alert_repo.alerts[3] = _alert(3, "AAPL", "200", last_seen="190")
    quote_gateway.prices = {"BTC-USD": Decimal("51000"), "AAPL": Decimal("195")}

    summary = _evaluate(_service(uow, quote_gateway))

    assert quote_gateway.requested == [["BTC-USD", "AAPL"]]
    assert (summary.checked, summary.triggered) == (3, 1)
    assert [event.alert_id for event in alert_repo.events] == [1]


def test_missing_price_leaves_alert_untouched(uow, alert_repo, quote_gateway) -> None:
    alert_repo.alerts[1] = _alert(1, "XYZ", "10", last_seen="9")
    alert_repo.alerts[2] = _alert(2, "AAPL", "100", last_seen="99")
    quote_gateway.prices = {"XYZ": None, "AAPL": Decimal("100")}

    summary = _evaluate(_service(uow, quote_gateway))

    assert (summary.checked, summary.triggered) == (2, 1)
    assert alert_repo.alerts[1].last_seen_price == Decimal("9")


def test_persistence_failure_does_not_stop_the_batch(uow, alert_repo, quote_gateway) -> None:
    alert_repo.alerts[1] = _alert(1, "AAPL", "100", last_seen="90")
    alert_repo.alerts[2] = _alert(2, "MSFT", "300", last_seen="290")
    alert_repo.failing_alert_ids.add(1)
    quote_gateway.prices = {"AAPL": Decimal("110"), "MSFT": Decimal("310")}

    summary = _evaluate(_service(uow, quote_gateway))

    assert (summary.checked, summary.triggered) == (2, 1)
    assert alert_repo.alerts[1].last_seen_price == Decimal("90")
    assert alert_repo.alerts[2].last_seen_price == Decimal("310")
    assert uow.rollbacks == 1


def test_concurrent_update_is_skipped_without_event(uow, alert_repo, quote_gateway) -> None:
    alert_repo.alerts[1] = _alert(1, "AAPL", "100", last_seen="90")
    alert_repo.stale_alert_ids.add(1)
    quote_gateway.prices = {"AAPL": Decimal("110")}

    summary = _evaluate(_service(uow, quote_gateway))

    assert summary.triggered == 0
    assert alert_repo.events == []
    assert uow.rollbacks == 1
    assert uow.commits == 0


def test_no_active_alerts_skips_quote_fetch(uow, alert_repo, quote_gateway) -> None:
    inactive = _alert(1, "AAPL", "100")
    inactive.is_active = False
    alert_repo.alerts[1] = inactive

    summary = _evaluate(_service(uow, quote_gateway))

    assert (summary.checked, summary.triggered) == (0, 0)
    assert quote_gateway.requested == []


def test_create_alert_normalizes_symbol(uow, alert_repo, quote_gateway) -> None:
    alert = _service(uow, quote_gateway).create_alert(user_id=1, symbol=" btc-usd ", value=Decimal("65000"))

    assert alert.symbol == "BTC-USD"
    assert alert.last_seen_price is None
    assert uow.commits == 1


def test_create_alert_rejects_non_positive_threshold(uow, quote_gateway) -> None:
    with pytest.raises(ValidationError):
        _service(uow, quote_gateway).create_alert(user_id=1, symbol="AAPL", value=Decimal("0"))


def test_set_active_and_delete_unknown_alert_raise_not_found(uow, quote_gateway) -> None:
    service = _service(uow, quote_gateway)

    with pytest.raises(NotFoundError):
        service.set_active(user_id=1, alert_id=42, is_active=False)
    with pytest.raises(NotFoundError):
        service.delete_alert(user_id=1, alert_id=42)


def test_deactivated_alert_is_not_evaluated(uow, alert_repo, quote_gateway) -> None:
    alert_repo.alerts[1] = _alert(1, "AAPL", "100", last_seen="90")
    service = _service(uow, quote_gateway)
    service.set_active(user_id=1, alert_id=1, is_active=False)
    quote_gateway.prices = {"AAPL": Decimal("110")}

    summary = _evaluate(service)

    assert summary.checked == 0
    assert alert_repo.events == []


def test_downward_crossing_triggers(uow, alert_repo, quote_gateway) -> None:
    alert_repo.alerts[1] = _alert(1, "AAPL", "100", last_seen="105")
    quote_gateway.prices = {"AAPL": Decimal("95")}

    summary = _evaluate(_service(uow, quote_gateway))

    assert summary.triggered == 1
    assert alert_repo.alerts[1].last_seen_price == Decimal("95")
    assert [event.price for event in alert_repo.events] == [Decimal("95")]


def test_staying_at_threshold_does_not_trigger(uow, alert_repo, quote_gateway) -> None:
    alert_repo.alerts[1] = _alert(1, "AAPL", "100", last_seen="100")
    quote_gateway.prices = {"AAPL": Decimal("100")}

    summary = _evaluate(_service(uow, quote_gateway))

    assert (summary.checked, summary.triggered) == (1, 0)
    assert alert_repo.events == []
    assert uow.commits == 1


def test_price_is_rounded_to_stored_scale_before_deciding(uow, alert_repo, quote_gateway) -> None:
    alert_repo.alerts[1] = _alert(1, "AAPL", "100", last_seen="99")
    quote_gateway.prices = {"AAPL": Decimal("99.999999999")}
    service = _service(uow, quote_gateway)

    first = _evaluate(service)
    second = _evaluate(service)
    quote_gateway.prices = {"AAPL": Decimal("50")}
    third = _evaluate(service)

    assert [first.triggered, second.triggered, third.triggered] == [1, 0, 1]
    assert [event.price for event in alert_repo.events] == [Decimal("100.00000000"), Decimal("50")]
    assert alert_repo.alerts[1].last_seen_price == Decimal("50")


def test_evaluation_keeps_event_loop_responsive(uow, alert_repo, quote_gateway, monkeypatch) -> None:
    for alert_id, symbol in enumerate(["AAPL", "MSFT", "NVDA"], start=1):
        alert_repo.alerts[alert_id] = _alert(alert_id, symbol, "100", last_seen="90")
    quote_gateway.prices = {"AAPL": Decimal("110"), "MSFT": Decimal("110"), "NVDA": Decimal("110")}
    record_price = alert_repo.record_price

    def slow_record_price(**kwargs):
        time.sleep(0.2)
        return record_price(**kwargs)

    monkeypatch.setattr(alert_repo, "record_price", slow_record_price)
    service = _service(uow, quote_gateway)

    async def run_with_heartbeat():
        beats = 0
        task = asyncio.create_task(service.evaluate_all(user_id=1))
        while not task.done():
            await asyncio.sleep(0.01)
            beats += 1
        return await task, beats

    summary, beats = asyncio.run(run_with_heartbeat())

    assert summary.triggered == 3
    assert beats >= 10
