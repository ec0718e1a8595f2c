"""
Operations CLI for the exchange backend.

Usage:
    # Create the database schema
    python -m app.cli init-db

    # Create an admin account
    python -m app.cli create-admin --email ops@luno.test --password 'S3cure!pass'

    # Change the role of an existing account
    python -m app.cli set-role --email trader@luno.test --role admin

    # List all accounts
    python -m app.cli list-users
"""

import argparse
import logging
import sys

from app.application.exchange.dtos import CreateUserCommand, UpdateUserCommand
from app.application.exchange.manage_users import (
    CreateUserUseCase,
    ListUsersUseCase,
    UpdateUserUseCase,
)
from app.core.config import settings
from app.domain.exchange.errors import LunoDomainError, UserNotFoundError
from app.infrastructure.database import build_engine, build_session_factory, init_db
from app.infrastructure.exchange.password_hasher import PasslibPasswordHasher
from app.infrastructure.exchange.unit_of_work import SqlAlchemyUnitOfWork
from app.shared.logging import configure_logging

logger = logging.getLogger(__name__)


def _unit_of_work(args: argparse.Namespace) -> SqlAlchemyUnitOfWork:
    engine = build_engine(args.database_url)
    init_db(engine)
    return SqlAlchemyUnitOfWork(build_session_factory(engine))


def cmd_init_db(args: argparse.Namespace) -> None:
    """Create every table that does not exist yet."""
    init_db(build_engine(args.database_url))


def cmd_create_admin(args: argparse.Namespace) -> None:
    """Create an account holding only the admin role."""
    use_case = CreateUserUseCase(_unit_of_work(args), PasslibPasswordHasher())
    user = use_case.execute(
        CreateUserCommand(
            username=args.username or args.email.split("@")[0],
            email=args.email,
            password=args.password,
            role="admin",
        )
    )
    logger.info("Admin %s created (%s)", user.email, user.id)


def cmd_set_role(args: argparse.Namespace) -> None:
    """Replace the role of the account registered under --email."""
    uow = _unit_of_work(args)
    with uow:
        user = uow.users.get_by_email(args.email)
    if user is None:
        raise UserNotFoundError(args.email)
    UpdateUserUseCase(uow).execute(UpdateUserCommand(user_id=user.id, role=args.role))
    logger.info("%s is now %s", user.email, args.role)


def cmd_list_users(args: argparse.Namespace) -> None:
    for user in ListUsersUseCase(_unit_of_work(args)).execute():
        logger.info(
            "%s | %s | %s | %s | balance=%s",
            user.id,
            user.email,
            ",".join(role.value for role in user.roles),
            user.status.value,
            user.balance,
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m app.cli",
        description="Luno exchange operations",
    )
    parser.add_argument(
        "--database-url",
        default=settings.database_url,
        help="SQLAlchemy URL (default: DATABASE_URL setting)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="Create the database schema")

    p_admin = sub.add_parser("create-admin", help="Create an admin account")
    p_admin.add_argument("--email", required=True)
    p_admin.add_argument("--password", required=True)
    p_admin.add_argument("--username", default=None)

    p_role = sub.add_parser("set-role", help="Change an account's role")
    p_role.add_argument("--email", required=True)
    p_role.add_argument("--role", required=True, choices=["admin", "trader", "guest"])

    sub.add_parser("list-users", help="List all accounts")

    return parser


COMMANDS = {
    "init-db": cmd_init_db,
    "create-admin": cmd_create_admin,
    "set-role": cmd_set_role,
    "list-users": cmd_list_users,
}


def main(argv: list[str] | None = None) -> int:
    configure_logging(level=settings.log_level)
    args = build_parser().parse_args(argv)
    try:
        COMMANDS[args.command](args)
    except LunoDomainError as exc:
        logger.error("%s", exc.message)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
