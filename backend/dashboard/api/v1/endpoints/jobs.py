from __future__ import annotations

from fastapi import APIRouter, Depends

from dashboard.api.deps import get_alerts_service, get_current_user
from dashboard.api.v1.dto.alerts import EvaluationOut
from dashboard.api.v1.dto.mappers import to_evaluation_out
from dashboard.application.alerts.service import AlertsApplicationService
from dashboard.domain.users.schemas import User

router = APIRouter()


@router.api_route("/alerts-eval", methods=["GET", "POST"], response_model=EvaluationOut)
async def evaluate_alerts(
    service: AlertsApplicationService = Depends(get_alerts_service),
    current_user: User = Depends(get_current_user),
) -> EvaluationOut:
    summary = await service.evaluate_all(user_id=current_user.id)
    return to_evaluation_out(summary)
