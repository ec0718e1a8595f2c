"""Use case: Newest-first account activity, 10 entries unless ``full``."""

from app.domain.exchange.entities import ActivityEntry
from app.domain.exchange.ports import UnitOfWork

RECENT_LIMIT = 10


class GetActivityLogUseCase:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def execute(self, user_id: str, full: bool = False) -> list[ActivityEntry]:
        with self._uow as uow:
            return uow.activity.list_for_user(
                user_id, limit=None if full else RECENT_LIMIT
            )
