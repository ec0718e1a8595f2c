"""
Use case: Cancel one of the caller's pending orders.

Failure cases: OrderNotFoundError (unknown or someone else's order),
    OrderNotCancellableError (already filled or cancelled).
"""

import logging

from app.application.exchange.dtos import CancelOrderCommand
from app.domain.exchange.entities import Order, OrderStatus
from app.domain.exchange.errors import OrderNotCancellableError, OrderNotFoundError
from app.domain.exchange.ports import UnitOfWork

logger = logging.getLogger(__name__)


class CancelOrderUseCase:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def execute(self, command: CancelOrderCommand) -> Order:
        with self._uow as uow:
            order = uow.orders.get_by_id(command.order_id)
            if order is None or order.user_id != command.user_id:
                raise OrderNotFoundError(command.order_id)
            if order.status is not OrderStatus.PENDING:
                raise OrderNotCancellableError(order.id, order.status.value)

            order.cancel()
            uow.orders.save(order)
            uow.commit()

        logger.info("Order %s cancelled by %s", order.id, command.user_id)
        return order
