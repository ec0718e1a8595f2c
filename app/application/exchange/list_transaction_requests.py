"""
Use cases: List deposit/withdraw requests.

ListTransactionRequestsUseCase returns the caller's own requests.
ListPendingRequestsUseCase is the admin queue, enriched with the owner's
username and email.
"""

from app.application.exchange.dtos import PendingRequestView
from app.domain.exchange.entities import RequestStatus, TransactionRequest
from app.domain.exchange.ports import UnitOfWork


class ListTransactionRequestsUseCase:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def execute(self, user_id: str) -> list[TransactionRequest]:
        with self._uow as uow:
            return uow.requests.list_for_user(user_id)


class ListPendingRequestsUseCase:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def execute(self) -> list[PendingRequestView]:
        views: list[PendingRequestView] = []
        with self._uow as uow:
            owners = {}
            for request in uow.requests.list_all(RequestStatus.PENDING.value):
                if request.user_id not in owners:
                    owners[request.user_id] = uow.users.get_by_id(request.user_id)
                owner = owners[request.user_id]
                views.append(
                    PendingRequestView(
                        request=request,
                        username=owner.username if owner else None,
                        email=owner.email if owner else None,
                    )
                )
        return views
