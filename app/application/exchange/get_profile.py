"""
Use case: Account profile summary.

Derives a display tier, fee discount, membership date, verification
status and a coarse security score from the stored user and KYC state.
"""

from app.application.exchange.dtos import ProfileView
from app.domain.exchange.entities import KycStatus
from app.domain.exchange.errors import UserNotFoundError
from app.domain.exchange.policies import evaluate_kyc
from app.domain.exchange.ports import UnitOfWork

_AUTH_STATUS = {
    KycStatus.APPROVED: "Verified (Level 2 KYC)",
    KycStatus.PENDING: "Pending Review",
    KycStatus.REJECTED: "Rejected",
    KycStatus.UNSUBMITTED: "Not Verified",
}


class GetProfileUseCase:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def execute(self, user_id: str) -> ProfileView:
        with self._uow as uow:
            user = uow.users.get_by_id(user_id)
            if user is None:
                raise UserNotFoundError(user_id)
            kyc = evaluate_kyc(uow.kyc.latest_for_user(user_id))

        verified = kyc.is_approved or user.kyc_verified
        factors = sum((verified, user.two_factor_enabled))
        return ProfileView(
            username=user.username,
            email=user.email,
            tier="Platinum Trader" if user.is_admin else "Standard Trader",
            fee_discount="20%" if user.is_admin else "0%",
            since=user.created_at.strftime("%b %Y"),
            auth_status=_AUTH_STATUS[kyc.status],
            security_score=("Low", "Medium", "High")[factors],
        )
