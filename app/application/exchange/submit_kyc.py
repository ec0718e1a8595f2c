"""
Use case: Submit identity verification details.

Input: SubmitKycCommand
Output: The stored KycRecord (status pending).
Side effects: Stores the record, writes audit ``kyc_submitted`` and an
    activity entry.
Failure cases: ValidationFailedError, UserNotFoundError,
    KycAlreadySubmittedError (a complete pending or an approved record
    already exists).
"""

import logging

from app.application.exchange.dtos import SubmitKycCommand
from app.domain.exchange.entities import (
    ActivityEntry,
    AuditLog,
    IdType,
    KycRecord,
    KycStatus,
)
from app.domain.exchange.errors import (
    KycAlreadySubmittedError,
    UserNotFoundError,
    ValidationFailedError,
)
from app.domain.exchange.policies import evaluate_kyc, parse_choice
from app.domain.exchange.ports import UnitOfWork

logger = logging.getLogger(__name__)


def _clean(value):
    if value is None:
        return None
    value = value.strip()
    return value or None


class SubmitKycUseCase:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def execute(self, command: SubmitKycCommand) -> KycRecord:
        missing = [
            label
            for label, value in (
                ("full_name", command.full_name),
                ("date_of_birth", command.date_of_birth),
                ("address", command.address),
            )
            if not _clean(value)
        ]
        if missing:
            raise ValidationFailedError(
                f"Missing required fields: {', '.join(missing)}"
            )
        id_type = _clean(command.id_type)

        record = KycRecord(
            user_id=command.user_id,
            full_name=_clean(command.full_name),
            date_of_birth=_clean(command.date_of_birth),
            address=_clean(command.address),
            phone_number=_clean(command.phone_number),
            nationality=_clean(command.nationality),
            id_type=parse_choice(IdType, id_type, "id_type") if id_type else None,
            id_number=_clean(command.id_number),
            city=_clean(command.city),
            postal_code=_clean(command.postal_code),
            country=_clean(command.country),
            document_url=_clean(command.document_url),
            selfie_url=_clean(command.selfie_url),
            status=KycStatus.PENDING,
        )

        with self._uow as uow:
            if uow.users.get_by_id(command.user_id) is None:
                raise UserNotFoundError(command.user_id)

            current = evaluate_kyc(uow.kyc.latest_for_user(command.user_id))
            if current.status in (KycStatus.PENDING, KycStatus.APPROVED):
                raise KycAlreadySubmittedError(current.status.value)

            uow.kyc.add(record)
            uow.audit_logs.add(
                AuditLog(
                    user_id=command.user_id,
                    action="kyc_submitted",
                    resource_type="kyc",
                    resource_id=record.id,
                    changes={"status": record.status.value},
                )
            )
            uow.activity.add(
                ActivityEntry(
                    user_id=command.user_id,
                    action="KYC Submitted",
                    details="Identity verification submitted for review",
                )
            )
            uow.commit()

        logger.info("KYC %s submitted by %s", record.id, command.user_id)
        return record
