"""
Use case: Password login.

Input: LoginCommand (email, password, client_ip)
Output: AuthSession (user, access_token, refresh_token)
Side effects: Counts the attempt against the login throttle, records
    last_login and a "User Login" activity entry on success.
Failure cases: LoginThrottledError, AuthenticationError,
    AccountDisabledError.
"""

import logging

from app.application.exchange.dtos import AuthSession, LoginCommand
from app.domain.exchange.entities import ActivityEntry, utcnow
from app.domain.exchange.errors import AccountDisabledError, AuthenticationError
from app.domain.exchange.ports import (
    LoginThrottle,
    PasswordHasher,
    TokenService,
    UnitOfWork,
)

logger = logging.getLogger(__name__)

BAD_CREDENTIALS = "Invalid email or password"


class LoginUseCase:
    """Verifies credentials and issues a token pair.

    Every attempt counts against the throttle key ``ip:email``; a
    successful login clears it.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        hasher: PasswordHasher,
        tokens: TokenService,
        throttle: LoginThrottle,
    ) -> None:
        self._uow = uow
        self._hasher = hasher
        self._tokens = tokens
        self._throttle = throttle

    def execute(self, command: LoginCommand) -> AuthSession:
        email = command.email.strip().lower()
        throttle_key = f"{command.client_ip}:{email}"
        self._throttle.hit(throttle_key)

        with self._uow as uow:
            user = uow.users.get_by_email(email)
            if user is None or not self._hasher.verify(
                command.password, user.password_hash
            ):
                logger.warning("Failed login attempt from %s", command.client_ip)
                raise AuthenticationError(BAD_CREDENTIALS)
            if not user.is_active:
                raise AccountDisabledError(user.id, user.status.value)

            user.last_login = utcnow()
            uow.users.save(user)
            uow.activity.add(
                ActivityEntry(
                    user_id=user.id,
                    action="User Login",
                    details=f"Logged in from IP: {command.client_ip}",
                )
            )
            uow.commit()

        self._throttle.reset(throttle_key)
        pair = self._tokens.issue(user)
        logger.info("User %s logged in", user.id)
        return AuthSession(
            user=user,
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
        )
