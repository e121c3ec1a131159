from __future__ import annotations

from fastapi import APIRouter, Depends

from dashboard.api.deps import get_alerts_service, get_current_user
from dashboard.api.v1.dto.alerts import AlertCreate, AlertOut, AlertUpdate
from dashboard.api.v1.dto.mappers import to_alert_out
from dashboard.api.v1.dto.watchlist import DeletedOut
from dashboard.application.alerts.service import AlertsApplicationService
from dashboard.domain.users.schemas import User

router = APIRouter()


@router.get("", response_model=list[AlertOut])
def list_alerts(
    service: AlertsApplicationService = Depends(get_alerts_service),
    current_user: User = Depends(get_current_user),
) -> list[AlertOut]:
    return [to_alert_out(alert) for alert in service.list_alerts(user_id=current_user.id)]


@router.post("", response_model=AlertOut)
def create_alert(
    payload: AlertCreate,
    service: AlertsApplicationService = Depends(get_alerts_service),
    current_user: User = Depends(get_current_user),
) -> AlertOut:
    alert = service.create_alert(user_id=current_user.id, symbol=payload.symbol, value=payload.value)
    return to_alert_out(alert)


@router.patch("/{alert_id}", response_model=AlertOut)
def update_alert(
    alert_id: int,
    payload: AlertUpdate,
    service: AlertsApplicationService = Depends(get_alerts_service),
    current_user: User = Depends(get_current_user),
) -> AlertOut:
    alert = service.set_active(user_id=current_user.id, alert_id=alert_id, is_active=payload.is_active)
    return to_alert_out(alert)


@router.delete("/{alert_id}", response_model=DeletedOut)
def delete_alert(
    alert_id: int,
    service: AlertsApplicationService = Depends(get_alerts_service),
    current_user: User = Depends(get_current_user),
) -> DeletedOut:
    service.delete_alert(user_id=current_user.id, alert_id=alert_id)
    return DeletedOut()
