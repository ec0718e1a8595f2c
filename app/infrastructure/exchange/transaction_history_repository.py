"""
Adapter: Transaction history repository.

Implements TransactionHistoryRepository port. Rows are append-only.
"""

from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.domain.exchange.entities import HistoryStatus, HistoryType, TransactionHistory
from app.domain.exchange.ports import TransactionHistoryRepository
from app.infrastructure.exchange.models import TransactionHistoryRow


def _optional_decimal(value) -> Decimal | None:
    return None if value is None else Decimal(value)


class SqlAlchemyTransactionHistoryRepository(TransactionHistoryRepository):
    def __init__(self, session: Session) -> None:
        self._session = session

    def list_for_user(self, user_id: str) -> list[TransactionHistory]:
        rows = self._session.scalars(
            select(TransactionHistoryRow)
            .where(TransactionHistoryRow.user_id == user_id)
            .order_by(TransactionHistoryRow.created_at.desc())
        )
        return [
            TransactionHistory(
                id=row.id,
                user_id=row.user_id,
                type=HistoryType(row.type),
                amount=Decimal(row.amount),
                symbol=row.symbol,
                quantity=_optional_decimal(row.quantity),
                price=_optional_decimal(row.price),
                description=row.description,
                status=HistoryStatus(row.status),
                balance_before=Decimal(row.balance_before),
                balance_after=Decimal(row.balance_after),
                created_at=row.created_at,
            )
            for row in rows
        ]

    def add(self, entry: TransactionHistory) -> None:
        self._session.add(
            TransactionHistoryRow(
                id=entry.id,
                user_id=entry.user_id,
                type=entry.type.value,
                amount=entry.amount,
                symbol=entry.symbol,
                quantity=entry.quantity,
                price=entry.price,
                description=entry.description,
                status=entry.status.value,
                balance_before=entry.balance_before,
                balance_after=entry.balance_after,
                created_at=entry.created_at,
            )
        )
        self._session.flush()
