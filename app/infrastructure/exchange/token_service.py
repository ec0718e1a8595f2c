"""
Adapter: bearer token issuance and verification.

Implements TokenService port with python-jose HS256 JWTs.
Access and refresh tokens are signed with different secrets and carry a
``kid`` header so keys can be rotated later.
"""

import logging
from datetime import datetime, timedelta, timezone
from uuid import uuid4

from jose import JWTError, jwt

from app.domain.exchange.entities import TokenClaims, TokenPair, User
from app.domain.exchange.errors import AuthenticationError
from app.domain.exchange.ports import TokenService

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
ACCESS_TOKEN_KID = "v1_access_key"
REFRESH_TOKEN_KID = "v1_refresh_key"
REFRESH_ROLE = "refresh"


class JwtTokenService(TokenService):
    """Issues short-lived access tokens and long-lived refresh tokens."""

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        issuer: str,
        audience: str,
        access_ttl: timedelta = timedelta(minutes=15),
        refresh_ttl: timedelta = timedelta(days=7),
    ) -> None:
        self._access_secret = access_secret
        self._refresh_secret = refresh_secret
        self._issuer = issuer
        self._audience = audience
        self._access_ttl = access_ttl
        self._refresh_ttl = refresh_ttl

    def _encode(
        self,
        user_id: str,
        roles: list[str],
        secret: str,
        ttl: timedelta,
        kid: str,
    ) -> str:
        now = datetime.now(timezone.utc)
        claims = {
            "sub": user_id,
            "user_id": user_id,
            "roles": roles,
            "iss": self._issuer,
            "aud": self._audience,
            "iat": int(now.timestamp()),
            "exp": int((now + ttl).timestamp()),
            "jti": str(uuid4()),
        }
        return jwt.encode(
            claims, secret, algorithm=ALGORITHM, headers={"kid": kid, "typ": "JWT"}
        )

    def _decode(self, token: str, secret: str) -> TokenClaims:
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[ALGORITHM],
                audience=self._audience,
                issuer=self._issuer,
            )
        except JWTError as exc:
            logger.info("Token verification failed: %s", type(exc).__name__)
            raise AuthenticationError("Invalid or expired token") from exc

        user_id = payload.get("user_id") or payload.get("sub")
        if not user_id:
            raise AuthenticationError("Invalid or expired token")
        return TokenClaims(
            user_id=user_id,
            roles=list(payload.get("roles") or []),
            token_id=payload.get("jti", ""),
        )

    def issue(self, user: User) -> TokenPair:
        roles = [role.value for role in user.roles]
        return TokenPair(
            access_token=self._encode(
                user.id, roles, self._access_secret, self._access_ttl, ACCESS_TOKEN_KID
            ),
            refresh_token=self._encode(
                user.id,
                [REFRESH_ROLE],
                self._refresh_secret,
                self._refresh_ttl,
                REFRESH_TOKEN_KID,
            ),
        )

    def verify_access(self, token: str) -> TokenClaims:
        return self._decode(token, self._access_secret)

    def verify_refresh(self, token: str) -> TokenClaims:
        claims = self._decode(token, self._refresh_secret)
        if REFRESH_ROLE not in claims.roles:
            raise AuthenticationError("Invalid or expired token")
        return claims
