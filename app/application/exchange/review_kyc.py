"""
Use cases: Admin KYC review queue and decisions.

ReviewKycUseCase
    Input: ReviewKycCommand (kyc_id, status approved|rejected, admin_id,
        reason)
    Side effects (one unit of work): record status, verifier and reason;
        user.kyc_verified; audit ``kyc_<status>``; user alert.
    Failure cases: ValidationFailedError, KycNotFoundError.
"""

import logging

from app.application.exchange.dtos import ReviewKycCommand
from app.domain.exchange.entities import (
    Alert,
    AlertType,
    AuditLog,
    KycRecord,
    KycStatus,
    utcnow,
)
from app.domain.exchange.errors import KycNotFoundError, ValidationFailedError
from app.domain.exchange.ports import UnitOfWork

logger = logging.getLogger(__name__)

_DECISIONS = (KycStatus.APPROVED, KycStatus.REJECTED)


class ListPendingKycUseCase:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def execute(self) -> list[KycRecord]:
        with self._uow as uow:
            return uow.kyc.list_by_status(KycStatus.PENDING.value)


class ReviewKycUseCase:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def execute(self, command: ReviewKycCommand) -> KycRecord:
        decision = next(
            (status for status in _DECISIONS if status.value == command.status), None
        )
        if decision is None:
            raise ValidationFailedError("Invalid status provided")
        reason = (command.reason or "").strip() or None
        if decision is KycStatus.REJECTED and not reason:
            raise ValidationFailedError("Rejection reason is required")

        with self._uow as uow:
            record = uow.kyc.get_by_id(command.kyc_id)
            if record is None:
                raise KycNotFoundError(command.kyc_id)

            record.status = decision
            record.verified_at = utcnow()
            record.verified_by = command.admin_id
            record.rejection_reason = reason if decision is KycStatus.REJECTED else None
            uow.kyc.save(record)

            user = uow.users.get_by_id(record.user_id)
            if user is not None:
                user.kyc_verified = decision is KycStatus.APPROVED
                user.updated_at = utcnow()
                uow.users.save(user)

            uow.audit_logs.add(
                AuditLog(
                    user_id=record.user_id,
                    admin_id=command.admin_id,
                    action=f"kyc_{decision.value}",
                    resource_type="kyc",
                    resource_id=record.id,
                    changes={"status": decision.value, "reason": reason},
                )
            )
            if decision is KycStatus.APPROVED:
                title = "KYC Approved"
                message = "Your identity has been verified. You can now deposit and withdraw funds."
            else:
                title = "KYC Rejected"
                message = f"Your identity verification was rejected. Reason: {reason}"
            uow.alerts.add(
                Alert(
                    user_id=record.user_id,
                    type=AlertType.SYSTEM,
                    title=title,
                    message=message,
                )
            )
            uow.commit()

        logger.info(
            "KYC %s %s by admin %s", record.id, decision.value, command.admin_id
        )
        return record
