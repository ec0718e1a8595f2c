"""
Use case: Register a new trader account.

Input: SignUpCommand (name, email, password)
Output: The created User.
Side effects: Persists the user with the signup bonus as opening balance
    and writes an activity entry.
Failure cases: ValidationFailedError, WeakPasswordError,
    EmailAlreadyRegisteredError.
"""

import logging
import random
from decimal import Decimal
from typing import Optional

from app.application.exchange.dtos import SignUpCommand
from app.domain.exchange.entities import ActivityEntry, Role, User
from app.domain.exchange.errors import EmailAlreadyRegisteredError, ValidationFailedError
from app.domain.exchange.policies import generate_username, validate_password
from app.domain.exchange.ports import PasswordHasher, UnitOfWork

logger = logging.getLogger(__name__)

MIN_EMAIL_LENGTH = 5


def normalize_email(email: str) -> str:
    """Trim and lower-case an email, rejecting obviously invalid ones."""
    email = email.strip().lower()
    if "@" not in email or len(email) < MIN_EMAIL_LENGTH:
        raise ValidationFailedError("A valid email address is required.")
    return email


class SignUpUseCase:
    """Creates a trader account with a starting balance."""

    def __init__(
        self,
        uow: UnitOfWork,
        hasher: PasswordHasher,
        signup_bonus: Decimal,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._uow = uow
        self._hasher = hasher
        self._signup_bonus = signup_bonus
        self._rng = rng

    def execute(self, command: SignUpCommand) -> User:
        email = normalize_email(command.email)
        name = command.name.strip()
        if not name:
            raise ValidationFailedError("Name is required.")
        validate_password(command.password)

        with self._uow as uow:
            if uow.users.get_by_email(email) is not None:
                raise EmailAlreadyRegisteredError(email)

            user = User(
                username=generate_username(email, self._rng),
                email=email,
                display_name=name,
                password_hash=self._hasher.hash(command.password),
                roles=[Role.TRADER],
                balance=self._signup_bonus,
            )
            uow.users.add(user)
            uow.activity.add(
                ActivityEntry(
                    user_id=user.id,
                    action="Account Created",
                    details="Signed up with email and password",
                )
            )
            uow.commit()

        logger.info("Registered user %s (%s)", user.id, user.username)
        return user
