"""
Use case: Ask an admin to deposit or withdraw funds.

Input: SubmitRequestCommand (user_id, type, amount)
Output: The pending TransactionRequest.
Side effects: Stores the request. No balance changes until an admin
    approves it.
Failure cases: ValidationFailedError, UserNotFoundError, KycRequiredError,
    InsufficientFundsError (withdrawal above current balance).
"""

import logging

from app.application.exchange.dtos import SubmitRequestCommand
from app.domain.exchange.entities import RequestType, TransactionRequest
from app.domain.exchange.errors import (
    InsufficientFundsError,
    KycRequiredError,
    UserNotFoundError,
    ValidationFailedError,
)
from app.domain.exchange.policies import ensure_finite, evaluate_kyc, parse_choice
from app.domain.exchange.ports import UnitOfWork

logger = logging.getLogger(__name__)


class SubmitTransactionRequestUseCase:
    """Creates a pending request once the user's KYC is approved."""

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def execute(self, command: SubmitRequestCommand) -> TransactionRequest:
        kind = parse_choice(RequestType, command.type, "type")
        ensure_finite(amount=command.amount)
        if command.amount <= 0:
            raise ValidationFailedError("Amount must be positive.")

        with self._uow as uow:
            user = uow.users.get_by_id(command.user_id)
            if user is None:
                raise UserNotFoundError(command.user_id)

            kyc = evaluate_kyc(uow.kyc.latest_for_user(user.id))
            if not kyc.is_approved:
                logger.info(
                    "Request blocked for %s: KYC %s", user.id, kyc.status.value
                )
                raise KycRequiredError(kyc.status.value, kyc.missing_fields)

            if kind is RequestType.WITHDRAW and user.balance < command.amount:
                raise InsufficientFundsError(str(command.amount), str(user.balance))

            request = TransactionRequest(
                user_id=user.id, type=kind, amount=command.amount
            )
            uow.requests.add(request)
            uow.commit()

        logger.info("%s request %s submitted by %s", kind.value, request.id, user.id)
        return request
