"""
Adapter: Audit log repository.

Implements AuditLogRepository port.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.domain.exchange.entities import AuditLog, AuditStatus
from app.domain.exchange.ports import AuditLogRepository
from app.infrastructure.exchange.models import AuditLogRow


class SqlAlchemyAuditLogRepository(AuditLogRepository):
    def __init__(self, session: Session) -> None:
        self._session = session

    def add(self, entry: AuditLog) -> None:
        self._session.add(
            AuditLogRow(
                id=entry.id,
                user_id=entry.user_id,
                admin_id=entry.admin_id,
                action=entry.action,
                resource_type=entry.resource_type,
                resource_id=entry.resource_id,
                changes=entry.changes,
                status=entry.status.value,
                created_at=entry.created_at,
            )
        )
        self._session.flush()

    def list_recent(self, limit: int = 100) -> list[AuditLog]:
        rows = self._session.scalars(
            select(AuditLogRow).order_by(AuditLogRow.created_at.desc()).limit(limit)
        )
        return [
            AuditLog(
                id=row.id,
                user_id=row.user_id,
                admin_id=row.admin_id,
                action=row.action,
                resource_type=row.resource_type,
                resource_id=row.resource_id,
                changes=dict(row.changes or {}),
                status=AuditStatus(row.status),
                created_at=row.created_at,
            )
            for row in rows
        ]
