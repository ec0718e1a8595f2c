"""
Port interfaces (ABCs) for the exchange bounded context.

Ports define the contracts that the domain requires from the outside world.
Infrastructure adapters implement these interfaces.
The domain layer never depends on concrete implementations.
"""

from abc import ABC, abstractmethod
from typing import Optional

from app.domain.exchange.entities import (
    ActivityEntry,
    Alert,
    Asset,
    AuditLog,
    KycRecord,
    Kline,
    Order,
    Ticker,
    TokenClaims,
    TokenPair,
    TransactionHistory,
    TransactionRequest,
    User,
)


class UserRepository(ABC):
    """Port for persisting and retrieving user accounts."""

    @abstractmethod
    def get_by_id(self, user_id: str) -> Optional[User]:
        raise NotImplementedError

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    @abstractmethod
    def list_all(self) -> list[User]:
        raise NotImplementedError

    @abstractmethod
    def add(self, user: User) -> None:
        raise NotImplementedError

    @abstractmethod
    def save(self, user: User) -> None:
        """Persist changes to an existing user."""
        raise NotImplementedError

    @abstractmethod
    def count(self) -> int:
        raise NotImplementedError


class AssetRepository(ABC):
    """Port for per-user symbol positions."""

    @abstractmethod
    def list_for_user(self, user_id: str) -> list[Asset]:
        raise NotImplementedError

    @abstractmethod
    def get_for_user(self, user_id: str, symbol: str) -> Optional[Asset]:
        raise NotImplementedError

    @abstractmethod
    def add(self, asset: Asset) -> None:
        raise NotImplementedError

    @abstractmethod
    def save(self, asset: Asset) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, asset_id: str) -> None:
        raise NotImplementedError


class OrderRepository(ABC):
    """Port for orders."""

    @abstractmethod
    def get_by_id(self, order_id: str) -> Optional[Order]:
        raise NotImplementedError

    @abstractmethod
    def list_for_user(self, user_id: str) -> list[Order]:
        """Return the user's orders, newest first."""
        raise NotImplementedError

    @abstractmethod
    def add(self, order: Order) -> None:
        raise NotImplementedError

    @abstractmethod
    def save(self, order: Order) -> None:
        raise NotImplementedError

    @abstractmethod
    def count(self) -> int:
        raise NotImplementedError


class TransactionRequestRepository(ABC):
    """Port for deposit/withdraw requests awaiting admin review."""

    @abstractmethod
    def get_by_id(self, request_id: str) -> Optional[TransactionRequest]:
        raise NotImplementedError

    @abstractmethod
    def list_all(self, status: Optional[str] = None) -> list[TransactionRequest]:
        """Return requests, newest first, optionally filtered by status."""
        raise NotImplementedError

    @abstractmethod
    def list_for_user(self, user_id: str) -> list[TransactionRequest]:
        raise NotImplementedError

    @abstractmethod
    def add(self, request: TransactionRequest) -> None:
        raise NotImplementedError

    @abstractmethod
    def save(self, request: TransactionRequest) -> None:
        raise NotImplementedError


class TransactionHistoryRepository(ABC):
    """Port for the append-only balance movement trail."""

    @abstractmethod
    def list_for_user(self, user_id: str) -> list[TransactionHistory]:
        raise NotImplementedError

    @abstractmethod
    def add(self, entry: TransactionHistory) -> None:
        raise NotImplementedError


class KycRepository(ABC):
    """Port for identity verification records."""

    @abstractmethod
    def get_by_id(self, kyc_id: str) -> Optional[KycRecord]:
        raise NotImplementedError

    @abstractmethod
    def latest_for_user(self, user_id: str) -> Optional[KycRecord]:
        """Return the most recently submitted record for a user."""
        raise NotImplementedError

    @abstractmethod
    def list_by_status(self, status: str) -> list[KycRecord]:
        raise NotImplementedError

    @abstractmethod
    def count_by_status(self, status: str) -> int:
        raise NotImplementedError

    @abstractmethod
    def add(self, record: KycRecord) -> None:
        raise NotImplementedError

    @abstractmethod
    def save(self, record: KycRecord) -> None:
        raise NotImplementedError


class AuditLogRepository(ABC):
    @abstractmethod
    def add(self, entry: AuditLog) -> None:
        raise NotImplementedError

    @abstractmethod
    def list_recent(self, limit: int = 100) -> list[AuditLog]:
        raise NotImplementedError


class AlertRepository(ABC):
    @abstractmethod
    def get_by_id(self, alert_id: str) -> Optional[Alert]:
        raise NotImplementedError

    @abstractmethod
    def list_for_user(self, user_id: str) -> list[Alert]:
        """Return the user's non-deleted alerts, newest first."""
        raise NotImplementedError

    @abstractmethod
    def add(self, alert: Alert) -> None:
        raise NotImplementedError

    @abstractmethod
    def save(self, alert: Alert) -> None:
        raise NotImplementedError


class ActivityRepository(ABC):
    @abstractmethod
    def add(self, entry: ActivityEntry) -> None:
        raise NotImplementedError

    @abstractmethod
    def list_for_user(
        self, user_id: str, limit: Optional[int] = None
    ) -> list[ActivityEntry]:
        raise NotImplementedError


class UnitOfWork(ABC):
    """Port grouping repositories that must commit or roll back together.

    Used as a context manager. Leaving the block with an exception rolls
    back; callers commit explicitly.
    """

    users: UserRepository
    assets: AssetRepository
    orders: OrderRepository
    requests: TransactionRequestRepository
    history: TransactionHistoryRepository
    kyc: KycRepository
    audit_logs: AuditLogRepository
    alerts: AlertRepository
    activity: ActivityRepository

    def __enter__(self) -> "UnitOfWork":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.rollback()

    @abstractmethod
    def commit(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def rollback(self) -> None:
        raise NotImplementedError


class PasswordHasher(ABC):
    """Port for one-way password hashing."""

    @abstractmethod
    def hash(self, password: str) -> str:
        raise NotImplementedError

    @abstractmethod
    def verify(self, password: str, password_hash: str) -> bool:
        raise NotImplementedError


class TokenService(ABC):
    """Port for issuing and verifying bearer tokens."""

    @abstractmethod
    def issue(self, user: User) -> TokenPair:
        raise NotImplementedError

    @abstractmethod
    def verify_access(self, token: str) -> TokenClaims:
        """Return the token's claims or raise AuthenticationError."""
        raise NotImplementedError

    @abstractmethod
    def verify_refresh(self, token: str) -> TokenClaims:
        raise NotImplementedError


class LoginThrottle(ABC):
    """Port for brute-force protection on the login endpoint."""

    @abstractmethod
    def hit(self, key: str) -> None:
        """Record an attempt or raise LoginThrottledError."""
        raise NotImplementedError

    @abstractmethod
    def reset(self, key: str) -> None:
        raise NotImplementedError


class MarketDataPort(ABC):
    """Port for public market data (tickers and candlesticks)."""

    @abstractmethod
    def get_tickers(self, symbols: list[str]) -> list[Ticker]:
        raise NotImplementedError

    @abstractmethod
    def get_klines(self, symbol: str, interval: str, limit: int) -> list[Kline]:
        raise NotImplementedError


class DocumentStorage(ABC):
    """Port for storing KYC documents and handing out download links."""

    @property
    @abstractmethod
    def max_bytes(self) -> int:
        """Largest document size accepted by ``save``."""
        raise NotImplementedError

    @abstractmethod
    def save(self, content: bytes, content_type: str) -> str:
        """Store the document and return its name."""
        raise NotImplementedError

    @abstractmethod
    def path_for(self, name: str) -> str:
        """Return a local filesystem path for a stored document."""
        raise NotImplementedError

    @abstractmethod
    def create_download_token(self, name: str) -> str:
        raise NotImplementedError

    @abstractmethod
    def resolve_download_token(self, token: str) -> str:
        """Return the document name a token grants access to."""
        raise NotImplementedError
