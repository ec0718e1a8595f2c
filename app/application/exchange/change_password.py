"""
Use case: Change the caller's password.

Input: ChangePasswordCommand (user_id, current_password, new_password)
Output: None.
Side effects: Stores the new hash and writes a "Password Change" activity.
Failure cases: UserNotFoundError, InvalidCredentialsError,
    WeakPasswordError.
"""

import logging

from app.application.exchange.dtos import ChangePasswordCommand
from app.domain.exchange.entities import ActivityEntry, utcnow
from app.domain.exchange.errors import InvalidCredentialsError, UserNotFoundError
from app.domain.exchange.policies import validate_password
from app.domain.exchange.ports import PasswordHasher, UnitOfWork

logger = logging.getLogger(__name__)


class ChangePasswordUseCase:
    def __init__(self, uow: UnitOfWork, hasher: PasswordHasher) -> None:
        self._uow = uow
        self._hasher = hasher

    def execute(self, command: ChangePasswordCommand) -> None:
        with self._uow as uow:
            user = uow.users.get_by_id(command.user_id)
            if user is None:
                raise UserNotFoundError(command.user_id)
            if not self._hasher.verify(command.current_password, user.password_hash):
                raise InvalidCredentialsError()
            validate_password(command.new_password)

            user.password_hash = self._hasher.hash(command.new_password)
            user.updated_at = utcnow()
            uow.users.save(user)
            uow.activity.add(
                ActivityEntry(
                    user_id=user.id,
                    action="Password Change",
                    details="Password was successfully updated",
                )
            )
            uow.commit()

        logger.info("Password changed for user %s", command.user_id)
