from __future__ import annotations

from decimal import Decimal

from dashboard.domain.alerts.schemas import Alert, CrossingDecision


def has_crossed(*, last_seen: Decimal | None, current: Decimal, threshold: Decimal) -> bool:
    """Return whether the price moved across ``threshold`` between two ticks.

    The threshold belongs to the "above" side. A missing previous price is a
    baseline observation and never counts as a crossing.
    """
    if last_seen is None:
        return False

    was_below = last_seen < threshold
    was_above = not was_below
    is_above = current >= threshold
    is_below = not is_above
    return (was_below and is_above) or (was_above and is_below)


def decide_crossing(alert: Alert, *, current: Decimal) -> CrossingDecision:
    return CrossingDecision(
        previous_price=alert.last_seen_price,
        current_price=current,
        crossed=has_crossed(
            last_seen=alert.last_seen_price,
            current=current,
            threshold=alert.value,
        ),
    )
