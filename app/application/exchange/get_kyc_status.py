"""Use case: Report the caller's effective KYC status and missing fields."""

from app.application.exchange.dtos import KycStatusView
from app.domain.exchange.policies import evaluate_kyc
from app.domain.exchange.ports import UnitOfWork


class GetKycStatusUseCase:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def execute(self, user_id: str) -> KycStatusView:
        with self._uow as uow:
            evaluation = evaluate_kyc(uow.kyc.latest_for_user(user_id))
        return KycStatusView(
            status=evaluation.label, missing_fields=evaluation.missing_fields
        )
