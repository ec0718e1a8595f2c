"""
Use case: Admin approves or rejects a deposit/withdraw request.

Input: ProcessRequestCommand (request_id, action, admin_id, reason)
Output: The updated TransactionRequest.
Side effects (one unit of work):
    approve - balance change, history row, request marked executed,
              audit ``<type>_executed``, transaction alert.
    reject  - request marked rejected with reason, audit
              ``<type>_rejected``, transaction alert.
Failure cases: ValidationFailedError, RequestNotFoundError,
    RequestAlreadyProcessedError, UserNotFoundError,
    InsufficientFundsError.
"""

import logging

from app.application.exchange.dtos import ProcessRequestCommand
from app.domain.exchange.entities import (
    Alert,
    AlertType,
    AuditLog,
    HistoryType,
    RequestStatus,
    RequestType,
    TransactionHistory,
    TransactionRequest,
    utcnow,
)
from app.domain.exchange.errors import (
    InsufficientFundsError,
    RequestAlreadyProcessedError,
    RequestNotFoundError,
    UserNotFoundError,
    ValidationFailedError,
)
from app.domain.exchange.policies import format_money
from app.domain.exchange.ports import UnitOfWork

logger = logging.getLogger(__name__)

APPROVE = "approve"
REJECT = "reject"


class ProcessTransactionRequestUseCase:
    """Executes or rejects a pending request atomically."""

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def execute(self, command: ProcessRequestCommand) -> TransactionRequest:
        action = command.action.strip().lower()
        if action not in (APPROVE, REJECT):
            raise ValidationFailedError("Invalid action. Must be 'approve' or 'reject'.")
        reason = (command.reason or "").strip()

        with self._uow as uow:
            request = uow.requests.get_by_id(command.request_id)
            if request is None:
                raise RequestNotFoundError(command.request_id)
            if not request.is_pending:
                raise RequestAlreadyProcessedError(request.id, request.status.value)
            if action == REJECT and not reason:
                raise ValidationFailedError("Reason required for rejection")

            if action == APPROVE:
                self._approve(uow, request, command.admin_id)
            else:
                self._reject(uow, request, command.admin_id, reason)
            uow.commit()

        logger.info(
            "Request %s %s by admin %s", request.id, request.status.value, command.admin_id
        )
        return request

    def _approve(
        self, uow: UnitOfWork, request: TransactionRequest, admin_id: str
    ) -> None:
        user = uow.users.get_by_id(request.user_id)
        if user is None:
            raise UserNotFoundError(request.user_id)

        before = user.balance
        if request.type is RequestType.WITHDRAW:
            if before < request.amount:
                raise InsufficientFundsError(
                    str(request.amount),
                    str(before),
                    message="Cannot approve withdrawal: User has insufficient balance",
                )
            after = before - request.amount
        else:
            after = before + request.amount

        user.set_balance(after)
        uow.users.save(user)

        label = request.type.value.capitalize()
        uow.history.add(
            TransactionHistory(
                user_id=user.id,
                type=HistoryType(request.type.value),
                amount=request.amount,
                description=f"{label} processed by Admin",
                balance_before=before,
                balance_after=after,
            )
        )

        request.status = RequestStatus.EXECUTED
        request.executed_at = utcnow()
        request.processed_by = admin_id
        uow.requests.save(request)

        uow.audit_logs.add(
            AuditLog(
                user_id=user.id,
                admin_id=admin_id,
                action=f"{request.type.value}_executed",
                resource_type="transaction_request",
                resource_id=request.id,
                changes={
                    "amount": str(request.amount),
                    "balance_before": str(before),
                    "balance_after": str(after),
                },
            )
        )
        uow.alerts.add(
            Alert(
                user_id=user.id,
                type=AlertType.TRANSACTION,
                title=f"{label} Approved and Executed",
                message=(
                    f"Your {request.type.value} of {format_money(request.amount)} "
                    "has been successfully processed."
                ),
            )
        )

    def _reject(
        self, uow: UnitOfWork, request: TransactionRequest, admin_id: str, reason: str
    ) -> None:
        request.status = RequestStatus.REJECTED
        request.reason = reason
        request.processed_by = admin_id
        uow.requests.save(request)

        label = request.type.value.capitalize()
        uow.audit_logs.add(
            AuditLog(
                user_id=request.user_id,
                admin_id=admin_id,
                action=f"{request.type.value}_rejected",
                resource_type="transaction_request",
                resource_id=request.id,
                changes={"amount": str(request.amount), "reason": reason},
            )
        )
        uow.alerts.add(
            Alert(
                user_id=request.user_id,
                type=AlertType.TRANSACTION,
                title=f"{label} Rejected",
                message=(
                    f"Your {request.type.value} request for "
                    f"{format_money(request.amount)} has been rejected. "
                    f"Reason: {reason}"
                ),
            )
        )
