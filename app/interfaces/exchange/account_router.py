"""
FastAPI router for alerts, activity log and profile summary.

All routes delegate to use cases. No business logic here.
"""

from fastapi import APIRouter, Depends, Query

from app.application.exchange.dtos import UpdateAlertCommand
from app.application.exchange.get_activity_log import GetActivityLogUseCase
from app.application.exchange.get_profile import GetProfileUseCase
from app.application.exchange.manage_alerts import ListAlertsUseCase, UpdateAlertUseCase
from app.domain.exchange.entities import User
from app.interfaces.exchange.dependencies import (
    get_activity_log_use_case,
    get_current_user,
    get_list_alerts_use_case,
    get_profile_use_case,
    get_update_alert_use_case,
)
from app.interfaces.exchange.schemas import (
    ActivitySchema,
    AlertActionRequest,
    AlertActionResponse,
    AlertListResponse,
    AlertSchema,
    ErrorResponse,
    ProfileResponse,
)

router = APIRouter(tags=["account"])


@router.get("/alerts", response_model=AlertListResponse, summary="My alerts")
def list_alerts(
    user: User = Depends(get_current_user),
    use_case: ListAlertsUseCase = Depends(get_list_alerts_use_case),
) -> AlertListResponse:
    result = use_case.execute(user.id)
    return AlertListResponse(
        alerts=[AlertSchema.from_entity(alert) for alert in result.alerts],
        unread_count=result.unread_count,
        total=result.total,
    )


@router.post(
    "/alerts",
    response_model=AlertActionResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Mark an alert read or delete it",
)
def update_alert(
    payload: AlertActionRequest,
    user: User = Depends(get_current_user),
    use_case: UpdateAlertUseCase = Depends(get_update_alert_use_case),
) -> AlertActionResponse:
    message = use_case.execute(
        UpdateAlertCommand(user_id=user.id, alert_id=payload.alert_id, action=payload.action)
    )
    return AlertActionResponse(message=message)


@router.get(
    "/activity-log",
    response_model=list[ActivitySchema],
    summary="My recent activity",
    description="Returns the ten most recent entries unless full=true.",
)
def activity_log(
    full: bool = Query(default=False),
    user: User = Depends(get_current_user),
    use_case: GetActivityLogUseCase = Depends(get_activity_log_use_case),
) -> list[ActivitySchema]:
    return [ActivitySchema.from_entity(entry) for entry in use_case.execute(user.id, full)]


@router.get("/profile", response_model=ProfileResponse, summary="Profile summary")
def profile(
    user: User = Depends(get_current_user),
    use_case: GetProfileUseCase = Depends(get_profile_use_case),
) -> ProfileResponse:
    view = use_case.execute(user.id)
    return ProfileResponse(
        username=view.username,
        email=view.email,
        tier=view.tier,
        fee_discount=view.fee_discount,
        since=view.since,
        auth_status=view.auth_status,
        security_score=view.security_score,
    )
