"""
Use case: Resolve a bearer access token to the current user.

The user is re-read on every call so role and status changes take effect
immediately, without waiting for the token to expire.
"""

from app.domain.exchange.entities import User
from app.domain.exchange.errors import AccountDisabledError, AuthenticationError
from app.domain.exchange.ports import TokenService, UnitOfWork


class AuthenticateUseCase:
    def __init__(self, uow: UnitOfWork, tokens: TokenService) -> None:
        self._uow = uow
        self._tokens = tokens

    def execute(self, access_token: str) -> User:
        """Return the active user the token belongs to.

        Raises:
            AuthenticationError: If the token is invalid or the user is gone.
            AccountDisabledError: If the account is inactive or banned.
        """
        claims = self._tokens.verify_access(access_token)
        with self._uow as uow:
            user = uow.users.get_by_id(claims.user_id)
        if user is None:
            raise AuthenticationError("Invalid or expired token")
        if not user.is_active:
            raise AccountDisabledError(user.id, user.status.value)
        return user
