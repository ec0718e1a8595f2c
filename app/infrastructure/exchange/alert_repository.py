"""
Adapter: Alert repository.

Implements AlertRepository port. Deleting an alert is a soft delete.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.domain.exchange.entities import Alert, AlertType
from app.domain.exchange.ports import AlertRepository
from app.infrastructure.exchange.models import AlertRow


def _to_entity(row: AlertRow) -> Alert:
    return Alert(
        id=row.id,
        user_id=row.user_id,
        type=AlertType(row.type),
        title=row.title,
        message=row.message,
        read=row.read,
        deleted=row.deleted,
        created_at=row.created_at,
    )


class SqlAlchemyAlertRepository(AlertRepository):
    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, alert_id: str) -> Optional[Alert]:
        row = self._session.get(AlertRow, alert_id)
        return _to_entity(row) if row else None

    def list_for_user(self, user_id: str) -> list[Alert]:
        rows = self._session.scalars(
            select(AlertRow)
            .where(AlertRow.user_id == user_id, AlertRow.deleted.is_(False))
            .order_by(AlertRow.created_at.desc())
        )
        return [_to_entity(row) for row in rows]

    def add(self, alert: Alert) -> None:
        self._session.add(
            AlertRow(
                id=alert.id,
                user_id=alert.user_id,
                type=alert.type.value,
                title=alert.title,
                message=alert.message,
                read=alert.read,
                deleted=alert.deleted,
                created_at=alert.created_at,
            )
        )
        self._session.flush()

    def save(self, alert: Alert) -> None:
        row = self._session.get(AlertRow, alert.id)
        if row is None:
            raise LookupError(f"alerts row missing: {alert.id}")
        row.read = alert.read
        row.deleted = alert.deleted
        self._session.flush()
