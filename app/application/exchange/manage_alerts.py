"""
Use cases: List the caller's alerts and mark them read or deleted.

Deletion is soft: the alert is hidden from listings but kept.
"""

import logging
from dataclasses import dataclass

from app.application.exchange.dtos import UpdateAlertCommand
from app.domain.exchange.entities import Alert
from app.domain.exchange.errors import AlertNotFoundError, ValidationFailedError
from app.domain.exchange.ports import UnitOfWork

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AlertList:
    alerts: list[Alert]
    unread_count: int
    total: int


class ListAlertsUseCase:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def execute(self, user_id: str) -> AlertList:
        with self._uow as uow:
            alerts = uow.alerts.list_for_user(user_id)
        return AlertList(
            alerts=alerts,
            unread_count=sum(1 for alert in alerts if not alert.read),
            total=len(alerts),
        )


class UpdateAlertUseCase:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def execute(self, command: UpdateAlertCommand) -> str:
        """Apply ``read`` or ``delete`` and return a confirmation message."""
        action = command.action.strip().lower()
        if action not in ("read", "delete"):
            raise ValidationFailedError("Invalid action. Must be 'read' or 'delete'.")

        with self._uow as uow:
            alert = uow.alerts.get_by_id(command.alert_id)
            if alert is None or alert.user_id != command.user_id or alert.deleted:
                raise AlertNotFoundError(command.alert_id)
            if action == "read":
                alert.read = True
            else:
                alert.deleted = True
            uow.alerts.save(alert)
            uow.commit()

        return "Alert marked as read" if action == "read" else "Alert deleted"
