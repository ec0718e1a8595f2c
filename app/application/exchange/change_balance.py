"""
Use case: Direct deposit or withdrawal by the account holder.

Input: BalanceChangeCommand (user_id, type, amount)
Output: BalanceChangeResult (message, new_balance)
Side effects: Updates the balance and appends a transaction history row
    in one unit of work.
Failure cases: ValidationFailedError, UserNotFoundError,
    InsufficientFundsError.
"""

import logging

from app.application.exchange.dtos import BalanceChangeCommand, BalanceChangeResult
from app.domain.exchange.entities import HistoryType, RequestType, TransactionHistory
from app.domain.exchange.errors import (
    InsufficientFundsError,
    UserNotFoundError,
    ValidationFailedError,
)
from app.domain.exchange.policies import ensure_finite, format_money, parse_choice
from app.domain.exchange.ports import UnitOfWork

logger = logging.getLogger(__name__)


class ChangeBalanceUseCase:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def execute(self, command: BalanceChangeCommand) -> BalanceChangeResult:
        kind = parse_choice(RequestType, command.type, "type")
        ensure_finite(amount=command.amount)
        if command.amount <= 0:
            raise ValidationFailedError("Amount must be positive.")

        with self._uow as uow:
            user = uow.users.get_by_id(command.user_id)
            if user is None:
                raise UserNotFoundError(command.user_id)

            before = user.balance
            if kind is RequestType.DEPOSIT:
                after = before + command.amount
            else:
                if before < command.amount:
                    raise InsufficientFundsError(str(command.amount), str(before))
                after = before - command.amount

            user.set_balance(after)
            uow.users.save(user)
            label = kind.value.capitalize()
            uow.history.add(
                TransactionHistory(
                    user_id=user.id,
                    type=HistoryType(kind.value),
                    amount=command.amount,
                    description=f"{label} of {format_money(command.amount)}",
                    balance_before=before,
                    balance_after=after,
                )
            )
            uow.commit()

        logger.info("%s of %s for user %s", label, command.amount, command.user_id)
        return BalanceChangeResult(message=f"{label} successful", new_balance=after)
