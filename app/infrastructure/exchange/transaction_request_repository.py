"""
Adapter: Transaction request repository.

Implements TransactionRequestRepository port.
"""

from decimal import Decimal
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.domain.exchange.entities import (
    RequestStatus,
    RequestType,
    TransactionRequest,
)
from app.domain.exchange.errors import ConcurrentUpdateError
from app.domain.exchange.ports import TransactionRequestRepository
from app.infrastructure.exchange.models import TransactionRequestRow


def _to_entity(row: TransactionRequestRow) -> TransactionRequest:
    return TransactionRequest(
        id=row.id,
        user_id=row.user_id,
        type=RequestType(row.type),
        amount=Decimal(row.amount),
        status=RequestStatus(row.status),
        reason=row.reason,
        processed_by=row.processed_by,
        created_at=row.created_at,
        executed_at=row.executed_at,
    )


class SqlAlchemyTransactionRequestRepository(TransactionRequestRepository):
    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, request_id: str) -> Optional[TransactionRequest]:
        row = self._session.get(TransactionRequestRow, request_id)
        return _to_entity(row) if row else None

    def list_all(self, status: Optional[str] = None) -> list[TransactionRequest]:
        stmt = select(TransactionRequestRow).order_by(
            TransactionRequestRow.created_at.desc()
        )
        if status:
            stmt = stmt.where(TransactionRequestRow.status == status)
        return [_to_entity(row) for row in self._session.scalars(stmt)]

    def list_for_user(self, user_id: str) -> list[TransactionRequest]:
        rows = self._session.scalars(
            select(TransactionRequestRow)
            .where(TransactionRequestRow.user_id == user_id)
            .order_by(TransactionRequestRow.created_at.desc())
        )
        return [_to_entity(row) for row in rows]

    def add(self, request: TransactionRequest) -> None:
        self._session.add(
            TransactionRequestRow(
                id=request.id,
                user_id=request.user_id,
                type=request.type.value,
                amount=request.amount,
                status=request.status.value,
                reason=request.reason,
                processed_by=request.processed_by,
                created_at=request.created_at,
                executed_at=request.executed_at,
            )
        )
        self._session.flush()

    def save(self, request: TransactionRequest) -> None:
        row = self._session.get(TransactionRequestRow, request.id)
        if row is None:
            raise LookupError(f"transaction_requests row missing: {request.id}")
        row.status = request.status.value
        row.reason = request.reason
        row.processed_by = request.processed_by
        row.executed_at = request.executed_at
        try:
            self._session.flush()
        except StaleDataError as exc:
            raise ConcurrentUpdateError("Transaction request", request.id) from exc
