"""
Use case: Admin credit or debit of a user's balance.

Input: AdminBalanceCommand (user_id, signed amount, admin_id, reason)
Output: The new balance.
Side effects (one unit of work): balance update, history row
    ("Admin credit: <reason>"), audit ``balance_update``.
Failure cases: ValidationFailedError (zero amount), UserNotFoundError,
    InsufficientFundsError (debit below zero).
"""

import logging
from decimal import Decimal

from app.application.exchange.dtos import AdminBalanceCommand
from app.domain.exchange.entities import AuditLog, HistoryType, TransactionHistory
from app.domain.exchange.errors import (
    InsufficientFundsError,
    UserNotFoundError,
    ValidationFailedError,
)
from app.domain.exchange.policies import ensure_finite
from app.domain.exchange.ports import UnitOfWork

logger = logging.getLogger(__name__)

DEFAULT_REASON = "Manual adjustment"


class AdjustUserBalanceUseCase:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def execute(self, command: AdminBalanceCommand) -> Decimal:
        ensure_finite(amount=command.amount)
        if command.amount == 0:
            raise ValidationFailedError("User ID and non-zero amount are required")
        reason = (command.reason or "").strip() or DEFAULT_REASON
        credit = command.amount > 0

        with self._uow as uow:
            user = uow.users.get_by_id(command.user_id)
            if user is None:
                raise UserNotFoundError(command.user_id)

            before = user.balance
            after = before + command.amount
            if after < 0:
                raise InsufficientFundsError(
                    str(-command.amount),
                    str(before),
                    message="Insufficient balance for debit",
                )

            user.set_balance(after)
            uow.users.save(user)
            uow.history.add(
                TransactionHistory(
                    user_id=user.id,
                    type=HistoryType.DEPOSIT if credit else HistoryType.WITHDRAW,
                    amount=abs(command.amount),
                    description=f"Admin {'credit' if credit else 'debit'}: {reason}",
                    balance_before=before,
                    balance_after=after,
                )
            )
            uow.audit_logs.add(
                AuditLog(
                    user_id=user.id,
                    admin_id=command.admin_id,
                    action="balance_update",
                    resource_type="user_balance",
                    resource_id=user.id,
                    changes={
                        "amount": str(command.amount),
                        "reason": reason,
                        "balance_before": str(before),
                        "balance_after": str(after),
                    },
                )
            )
            uow.commit()

        logger.info(
            "Admin %s adjusted balance of %s by %s",
            command.admin_id,
            command.user_id,
            command.amount,
        )
        return after
