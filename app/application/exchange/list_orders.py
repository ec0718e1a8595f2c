"""Use case: List the caller's orders, newest first."""

from app.domain.exchange.entities import Order
from app.domain.exchange.ports import UnitOfWork


class ListOrdersUseCase:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def execute(self, user_id: str) -> list[Order]:
        with self._uow as uow:
            return uow.orders.list_for_user(user_id)
