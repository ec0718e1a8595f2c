"""
Adapter: KYC repository.

Implements KycRepository port. A user may have several records over time;
the latest submission is the one that counts.
"""

from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.domain.exchange.entities import IdType, KycRecord, KycStatus
from app.domain.exchange.ports import KycRepository
from app.infrastructure.exchange.models import KycRow

_FIELDS = (
    "user_id",
    "full_name",
    "date_of_birth",
    "address",
    "phone_number",
    "nationality",
    "id_number",
    "city",
    "postal_code",
    "country",
    "document_url",
    "selfie_url",
    "rejection_reason",
    "submitted_at",
    "verified_at",
    "verified_by",
)


def _to_entity(row: KycRow) -> KycRecord:
    return KycRecord(
        id=row.id,
        status=KycStatus(row.status),
        id_type=IdType(row.id_type) if row.id_type else None,
        **{name: getattr(row, name) for name in _FIELDS},
    )


def _apply(row: KycRow, record: KycRecord) -> None:
    for name in _FIELDS:
        setattr(row, name, getattr(record, name))
    row.status = record.status.value
    row.id_type = record.id_type.value if record.id_type else None


class SqlAlchemyKycRepository(KycRepository):
    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, kyc_id: str) -> Optional[KycRecord]:
        row = self._session.get(KycRow, kyc_id)
        return _to_entity(row) if row else None

    def latest_for_user(self, user_id: str) -> Optional[KycRecord]:
        row = self._session.scalars(
            select(KycRow)
            .where(KycRow.user_id == user_id)
            .order_by(KycRow.submitted_at.desc())
            .limit(1)
        ).first()
        return _to_entity(row) if row else None

    def list_by_status(self, status: str) -> list[KycRecord]:
        rows = self._session.scalars(
            select(KycRow)
            .where(KycRow.status == status)
            .order_by(KycRow.submitted_at.desc())
        )
        return [_to_entity(row) for row in rows]

    def count_by_status(self, status: str) -> int:
        return (
            self._session.scalar(
                select(func.count()).select_from(KycRow).where(KycRow.status == status)
            )
            or 0
        )

    def add(self, record: KycRecord) -> None:
        row = KycRow(id=record.id)
        _apply(row, record)
        self._session.add(row)
        self._session.flush()

    def save(self, record: KycRecord) -> None:
        row = self._session.get(KycRow, record.id)
        if row is None:
            raise LookupError(f"kyc_records row missing: {record.id}")
        _apply(row, record)
        self._session.flush()
