"""
Adapter: User repository.

Implements UserRepository port on top of a SQLAlchemy session.
"""

from decimal import Decimal
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.domain.exchange.entities import Role, User, UserStatus
from app.domain.exchange.errors import ConcurrentUpdateError
from app.domain.exchange.ports import UserRepository
from app.infrastructure.exchange.models import UserRow


def _to_entity(row: UserRow) -> User:
    return User(
        id=row.id,
        username=row.username,
        email=row.email,
        display_name=row.display_name,
        password_hash=row.password_hash,
        roles=[Role(value) for value in row.roles or []],
        balance=Decimal(row.balance),
        kyc_verified=row.kyc_verified,
        two_factor_enabled=row.two_factor_enabled,
        status=UserStatus(row.status),
        created_at=row.created_at,
        updated_at=row.updated_at,
        last_login=row.last_login,
    )


def _apply(row: UserRow, user: User) -> None:
    row.username = user.username
    row.email = user.email
    row.display_name = user.display_name
    row.password_hash = user.password_hash
    row.roles = [role.value for role in user.roles]
    row.balance = user.balance
    row.kyc_verified = user.kyc_verified
    row.two_factor_enabled = user.two_factor_enabled
    row.status = user.status.value
    row.created_at = user.created_at
    row.updated_at = user.updated_at
    row.last_login = user.last_login


class SqlAlchemyUserRepository(UserRepository):
    """Stores user accounts in the ``users`` table."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, user_id: str) -> Optional[User]:
        row = self._session.get(UserRow, user_id)
        return _to_entity(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        row = self._session.scalars(
            select(UserRow).where(func.lower(UserRow.email) == email.lower())
        ).first()
        return _to_entity(row) if row else None

    def list_all(self) -> list[User]:
        rows = self._session.scalars(select(UserRow).order_by(UserRow.created_at))
        return [_to_entity(row) for row in rows]

    def add(self, user: User) -> None:
        row = UserRow(id=user.id)
        _apply(row, user)
        self._session.add(row)
        self._session.flush()

    def save(self, user: User) -> None:
        row = self._session.get(UserRow, user.id)
        if row is None:
            raise LookupError(f"users row missing: {user.id}")
        _apply(row, user)
        try:
            self._session.flush()
        except StaleDataError as exc:
            raise ConcurrentUpdateError("User", user.id) from exc

    def count(self) -> int:
        return self._session.scalar(select(func.count()).select_from(UserRow)) or 0
