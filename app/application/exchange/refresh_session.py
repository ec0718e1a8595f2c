"""
Use case: Exchange a refresh token for a new token pair.

Failure cases: AuthenticationError (bad token or unknown user),
    AccountDisabledError.
"""

from app.application.exchange.dtos import AuthSession
from app.domain.exchange.errors import AccountDisabledError, AuthenticationError
from app.domain.exchange.ports import TokenService, UnitOfWork


class RefreshSessionUseCase:
    def __init__(self, uow: UnitOfWork, tokens: TokenService) -> None:
        self._uow = uow
        self._tokens = tokens

    def execute(self, refresh_token: str) -> AuthSession:
        claims = self._tokens.verify_refresh(refresh_token)
        with self._uow as uow:
            user = uow.users.get_by_id(claims.user_id)
        if user is None:
            raise AuthenticationError("Invalid or expired token")
        if not user.is_active:
            raise AccountDisabledError(user.id, user.status.value)

        pair = self._tokens.issue(user)
        return AuthSession(
            user=user,
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
        )
