"""
Adapter: Activity log repository.

Implements ActivityRepository port.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.domain.exchange.entities import ActivityEntry
from app.domain.exchange.ports import ActivityRepository
from app.infrastructure.exchange.models import ActivityRow


class SqlAlchemyActivityRepository(ActivityRepository):
    def __init__(self, session: Session) -> None:
        self._session = session

    def add(self, entry: ActivityEntry) -> None:
        self._session.add(
            ActivityRow(
                id=entry.id,
                user_id=entry.user_id,
                action=entry.action,
                details=entry.details,
                created_at=entry.created_at,
            )
        )
        self._session.flush()

    def list_for_user(
        self, user_id: str, limit: Optional[int] = None
    ) -> list[ActivityEntry]:
        stmt = (
            select(ActivityRow)
            .where(ActivityRow.user_id == user_id)
            .order_by(ActivityRow.created_at.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        return [
            ActivityEntry(
                id=row.id,
                user_id=row.user_id,
                action=row.action,
                details=row.details,
                created_at=row.created_at,
            )
            for row in self._session.scalars(stmt)
        ]
