"""
Adapter: SQLAlchemy unit of work.

One session per unit of work. Every repository shares that session, so a
single ``commit()`` makes all writes of an operation visible together and
any exception inside the ``with`` block discards all of them.
"""

import logging

from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from app.domain.exchange.errors import ConcurrentUpdateError
from app.domain.exchange.ports import UnitOfWork
from app.infrastructure.exchange.activity_repository import SqlAlchemyActivityRepository
from app.infrastructure.exchange.alert_repository import SqlAlchemyAlertRepository
from app.infrastructure.exchange.asset_repository import SqlAlchemyAssetRepository
from app.infrastructure.exchange.audit_log_repository import SqlAlchemyAuditLogRepository
from app.infrastructure.exchange.kyc_repository import SqlAlchemyKycRepository
from app.infrastructure.exchange.order_repository import SqlAlchemyOrderRepository
from app.infrastructure.exchange.transaction_history_repository import (
    SqlAlchemyTransactionHistoryRepository,
)
from app.infrastructure.exchange.transaction_request_repository import (
    SqlAlchemyTransactionRequestRepository,
)
from app.infrastructure.exchange.user_repository import SqlAlchemyUserRepository

logger = logging.getLogger(__name__)


class SqlAlchemyUnitOfWork(UnitOfWork):
    """Unit of work bound to a fresh session from ``session_factory``."""

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory
        self._session: Session | None = None

    def __enter__(self) -> "SqlAlchemyUnitOfWork":
        self._session = self._session_factory()
        self.users = SqlAlchemyUserRepository(self._session)
        self.assets = SqlAlchemyAssetRepository(self._session)
        self.orders = SqlAlchemyOrderRepository(self._session)
        self.requests = SqlAlchemyTransactionRequestRepository(self._session)
        self.history = SqlAlchemyTransactionHistoryRepository(self._session)
        self.kyc = SqlAlchemyKycRepository(self._session)
        self.audit_logs = SqlAlchemyAuditLogRepository(self._session)
        self.alerts = SqlAlchemyAlertRepository(self._session)
        self.activity = SqlAlchemyActivityRepository(self._session)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if exc_type is not None:
                logger.debug("Rolling back unit of work after %s", exc_type.__name__)
            # Uncommitted work is discarded.
            self.rollback()
        finally:
            if self._session is not None:
                self._session.close()
                self._session = None

    def commit(self) -> None:
        if self._session is None:
            raise RuntimeError("Unit of work used outside a with-block")
        try:
            self._session.commit()
        except StaleDataError as exc:
            raise ConcurrentUpdateError("Record") from exc

    def rollback(self) -> None:
        if self._session is not None:
            self._session.rollback()
