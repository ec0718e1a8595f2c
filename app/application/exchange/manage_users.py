"""
Use cases: Admin user management.

List, create and update accounts. Creation and updates write audit log
entries attributed to the acting admin (None when run from the CLI).
"""

import logging
from decimal import Decimal

from app.application.exchange.dtos import CreateUserCommand, UpdateUserCommand
from app.application.exchange.signup import normalize_email
from app.domain.exchange.entities import AuditLog, Role, User, UserStatus, utcnow
from app.domain.exchange.errors import (
    EmailAlreadyRegisteredError,
    UserNotFoundError,
    ValidationFailedError,
)
from app.domain.exchange.policies import parse_choice, validate_password
from app.domain.exchange.ports import PasswordHasher, UnitOfWork

logger = logging.getLogger(__name__)


class ListUsersUseCase:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def execute(self) -> list[User]:
        with self._uow as uow:
            return uow.users.list_all()


class CreateUserUseCase:
    """Creates an account with a single role and a zero balance."""

    def __init__(self, uow: UnitOfWork, hasher: PasswordHasher) -> None:
        self._uow = uow
        self._hasher = hasher

    def execute(self, command: CreateUserCommand) -> User:
        username = command.username.strip()
        if not username:
            raise ValidationFailedError("Username, email, and password are required")
        email = normalize_email(command.email)
        validate_password(command.password)
        role = parse_choice(Role, command.role, "role")

        with self._uow as uow:
            if uow.users.get_by_email(email) is not None:
                raise EmailAlreadyRegisteredError(email)

            user = User(
                username=username,
                email=email,
                display_name=username,
                password_hash=self._hasher.hash(command.password),
                roles=[role],
                balance=Decimal("0"),
            )
            uow.users.add(user)
            uow.audit_logs.add(
                AuditLog(
                    admin_id=command.admin_id,
                    action="user_created",
                    resource_type="user",
                    resource_id=user.id,
                    changes={"email": email, "role": role.value},
                )
            )
            uow.commit()

        logger.info("User %s created with role %s", user.id, role.value)
        return user


class UpdateUserUseCase:
    """Changes an account's status and/or replaces its role."""

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def execute(self, command: UpdateUserCommand) -> User:
        changes: dict[str, str] = {}
        status = role = None
        if command.status:
            status = parse_choice(UserStatus, command.status, "status")
            changes["status"] = status.value
        if command.role:
            role = parse_choice(Role, command.role, "role")
            changes["role"] = role.value
        if not changes:
            raise ValidationFailedError("No updateable fields provided")

        with self._uow as uow:
            user = uow.users.get_by_id(command.user_id)
            if user is None:
                raise UserNotFoundError(command.user_id)
            if status is not None:
                user.status = status
            if role is not None:
                user.roles = [role]
            user.updated_at = utcnow()
            uow.users.save(user)
            uow.audit_logs.add(
                AuditLog(
                    user_id=user.id,
                    admin_id=command.admin_id,
                    action="user_updated",
                    resource_type="user",
                    resource_id=user.id,
                    changes=changes,
                )
            )
            uow.commit()

        logger.info("User %s updated: %s", user.id, changes)
        return user
