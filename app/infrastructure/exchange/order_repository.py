"""
Adapter: Order repository.

Implements OrderRepository port.
"""

from decimal import Decimal
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.domain.exchange.entities import Order, OrderSide, OrderStatus, OrderType
from app.domain.exchange.ports import OrderRepository
from app.infrastructure.exchange.models import OrderRow


def _to_entity(row: OrderRow) -> Order:
    return Order(
        id=row.id,
        user_id=row.user_id,
        side=OrderSide(row.side),
        order_type=OrderType(row.order_type),
        symbol=row.symbol,
        quantity=Decimal(row.quantity),
        price=Decimal(row.price),
        leverage=Decimal(row.leverage),
        status=OrderStatus(row.status),
        executed_quantity=Decimal(row.executed_quantity),
        created_at=row.created_at,
    )


class SqlAlchemyOrderRepository(OrderRepository):
    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, order_id: str) -> Optional[Order]:
        row = self._session.get(OrderRow, order_id)
        return _to_entity(row) if row else None

    def list_for_user(self, user_id: str) -> list[Order]:
        rows = self._session.scalars(
            select(OrderRow)
            .where(OrderRow.user_id == user_id)
            .order_by(OrderRow.created_at.desc())
        )
        return [_to_entity(row) for row in rows]

    def add(self, order: Order) -> None:
        self._session.add(
            OrderRow(
                id=order.id,
                user_id=order.user_id,
                side=order.side.value,
                order_type=order.order_type.value,
                symbol=order.symbol,
                quantity=order.quantity,
                price=order.price,
                leverage=order.leverage,
                status=order.status.value,
                executed_quantity=order.executed_quantity,
                created_at=order.created_at,
            )
        )
        self._session.flush()

    def save(self, order: Order) -> None:
        row = self._session.get(OrderRow, order.id)
        if row is None:
            raise LookupError(f"orders row missing: {order.id}")
        row.status = order.status.value
        row.executed_quantity = order.executed_quantity
        self._session.flush()

    def count(self) -> int:
        return self._session.scalar(select(func.count()).select_from(OrderRow)) or 0
