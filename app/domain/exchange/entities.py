"""
Domain entities for the exchange bounded context.

Entities represent core business objects with identity and lifecycle.
They contain no framework imports and no IO operations.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import uuid4


def new_id() -> str:
    """Return a fresh entity identifier."""
    return str(uuid4())


def utcnow() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class Role(Enum):
    """Account role. A user may hold several."""

    ADMIN = "admin"
    TRADER = "trader"
    GUEST = "guest"


class UserStatus(Enum):
    """Account lifecycle status."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    BANNED = "banned"


class OrderSide(Enum):
    BUY = "BUY"
    SELL = "SELL"


class OrderType(Enum):
    MARKET = "MARKET"
    LIMIT = "LIMIT"


class OrderStatus(Enum):
    PENDING = "PENDING"
    FILLED = "FILLED"
    CANCELLED = "CANCELLED"


class RequestType(Enum):
    """Kind of funds movement a user can ask an admin for."""

    DEPOSIT = "deposit"
    WITHDRAW = "withdraw"


class RequestStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    EXECUTED = "executed"


class HistoryType(Enum):
    DEPOSIT = "deposit"
    WITHDRAW = "withdraw"
    BUY = "buy"
    SELL = "sell"
    FEE = "fee"


class HistoryStatus(Enum):
    COMPLETED = "completed"
    PENDING = "pending"
    FAILED = "failed"


class KycStatus(Enum):
    """Identity verification state."""

    UNSUBMITTED = "unsubmitted"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class IdType(Enum):
    PASSPORT = "passport"
    DRIVING_LICENSE = "driving_license"
    NATIONAL_ID = "national_id"


class AlertType(Enum):
    PRICE = "price"
    ORDER = "order"
    BALANCE = "balance"
    TRANSACTION = "transaction"
    SYSTEM = "system"


class AuditStatus(Enum):
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass
class User:
    """A registered account holding a cash balance."""

    username: str
    email: str
    password_hash: str
    id: str = field(default_factory=new_id)
    display_name: Optional[str] = None
    roles: list[Role] = field(default_factory=lambda: [Role.TRADER])
    balance: Decimal = Decimal("0")
    kyc_verified: bool = False
    two_factor_enabled: bool = False
    status: UserStatus = UserStatus.ACTIVE
    created_at: datetime = field(default_factory=utcnow)
    updated_at: Optional[datetime] = None
    last_login: Optional[datetime] = None

    @property
    def role(self) -> Role:
        """Primary role: the first one granted."""
        return self.roles[0] if self.roles else Role.GUEST

    @property
    def is_admin(self) -> bool:
        return Role.ADMIN in self.roles

    @property
    def is_active(self) -> bool:
        return self.status is UserStatus.ACTIVE

    def set_balance(self, new_balance: Decimal) -> None:
        self.balance = new_balance
        self.updated_at = utcnow()


@dataclass
class Asset:
    """A per-user position in a single symbol."""

    user_id: str
    symbol: str
    quantity: Decimal
    average_price: Decimal
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)

    @property
    def cost_basis(self) -> Decimal:
        return self.quantity * self.average_price

    def add(self, quantity: Decimal, price: Decimal) -> None:
        """Increase the position, blending the average price by quantity."""
        total = self.quantity + quantity
        self.average_price = (
            self.quantity * self.average_price + quantity * price
        ) / total
        self.quantity = total

    def reduce(self, quantity: Decimal) -> Decimal:
        """Decrease the position and return what remains.

        The average price is the cost basis of what is left and is not
        changed by a reduction.
        """
        self.quantity = self.quantity - quantity
        return self.quantity


@dataclass
class Order:
    """A buy/sell intent and its fill state."""

    user_id: str
    side: OrderSide
    symbol: str
    quantity: Decimal
    price: Decimal
    order_type: OrderType = OrderType.MARKET
    leverage: Decimal = Decimal("1")
    id: str = field(default_factory=new_id)
    status: OrderStatus = OrderStatus.PENDING
    executed_quantity: Decimal = Decimal("0")
    created_at: datetime = field(default_factory=utcnow)

    @property
    def value(self) -> Decimal:
        """Notional value: quantity times price."""
        return self.quantity * self.price

    @property
    def margin_required(self) -> Decimal:
        return self.value / self.leverage

    def fill(self) -> None:
        self.status = OrderStatus.FILLED
        self.executed_quantity = self.quantity

    def cancel(self) -> None:
        self.status = OrderStatus.CANCELLED


@dataclass
class TransactionRequest:
    """A deposit or withdrawal awaiting admin approval."""

    user_id: str
    type: RequestType
    amount: Decimal
    id: str = field(default_factory=new_id)
    status: RequestStatus = RequestStatus.PENDING
    reason: Optional[str] = None
    processed_by: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)
    executed_at: Optional[datetime] = None

    @property
    def is_pending(self) -> bool:
        return self.status is RequestStatus.PENDING


@dataclass(frozen=True)
class TransactionHistory:
    """An immutable audit-trail row for a balance movement."""

    user_id: str
    type: HistoryType
    amount: Decimal
    description: str
    balance_before: Decimal
    balance_after: Decimal
    status: HistoryStatus = HistoryStatus.COMPLETED
    symbol: Optional[str] = None
    quantity: Optional[Decimal] = None
    price: Optional[Decimal] = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)


@dataclass
class KycRecord:
    """An identity verification submission."""

    user_id: str
    full_name: Optional[str] = None
    date_of_birth: Optional[str] = None
    address: Optional[str] = None
    phone_number: Optional[str] = None
    nationality: Optional[str] = None
    id_type: Optional[IdType] = None
    id_number: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    document_url: Optional[str] = None
    selfie_url: Optional[str] = None
    id: str = field(default_factory=new_id)
    status: KycStatus = KycStatus.PENDING
    rejection_reason: Optional[str] = None
    submitted_at: datetime = field(default_factory=utcnow)
    verified_at: Optional[datetime] = None
    verified_by: Optional[str] = None


@dataclass(frozen=True)
class AuditLog:
    """A compliance record of who changed what."""

    action: str
    resource_type: str
    resource_id: str
    changes: dict[str, Any] = field(default_factory=dict)
    user_id: Optional[str] = None
    admin_id: Optional[str] = None
    status: AuditStatus = AuditStatus.SUCCESS
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)


@dataclass
class Alert:
    """A user-facing notification."""

    user_id: str
    type: AlertType
    title: str
    message: str
    id: str = field(default_factory=new_id)
    read: bool = False
    deleted: bool = False
    created_at: datetime = field(default_factory=utcnow)


@dataclass(frozen=True)
class ActivityEntry:
    """A line in a user's account activity log."""

    user_id: str
    action: str
    details: str
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)


@dataclass(frozen=True)
class Ticker:
    """Latest quote for a trading pair."""

    symbol: str
    price: Decimal
    change_percent: Decimal
    volume: Decimal


@dataclass(frozen=True)
class Kline:
    """One OHLCV candlestick."""

    open_time: datetime
    open: Decimal
    high: Decimal
    low: Decimal
    close: Decimal
    volume: Decimal


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


@dataclass(frozen=True)
class TokenClaims:
    """Verified claims carried by an access or refresh token."""

    user_id: str
    roles: list[str]
    token_id: str
