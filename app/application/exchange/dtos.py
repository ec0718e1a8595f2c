"""
Data Transfer Objects for the exchange application layer.

DTOs carry data between the interface and application layers.
They are plain dataclasses with no behavior.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from app.domain.exchange.entities import (
    Asset,
    Order,
    TransactionHistory,
    TransactionRequest,
    User,
)


# --- Auth ---


@dataclass(frozen=True)
class SignUpCommand:
    name: str
    email: str
    password: str


@dataclass(frozen=True)
class LoginCommand:
    """Input DTO for a password login.

    Attributes:
        email: Account email, matched case-insensitively.
        password: Plain-text password.
        client_ip: Caller address, used as part of the throttle key.
    """

    email: str
    password: str
    client_ip: str = "unknown"


@dataclass(frozen=True)
class ChangePasswordCommand:
    user_id: str
    current_password: str
    new_password: str


@dataclass(frozen=True)
class AuthSession:
    """Output DTO for login and session refresh."""

    user: User
    access_token: str
    refresh_token: str


# --- Portfolio ---


@dataclass(frozen=True)
class PortfolioView:
    """Balance plus positions valued at their average price.

    Attributes:
        balance: Cash balance.
        assets: Open positions.
        total_portfolio_value: balance + sum(quantity * average_price).
    """

    balance: Decimal
    assets: list[Asset]
    total_portfolio_value: Decimal


@dataclass(frozen=True)
class AccountOverview:
    portfolio: PortfolioView
    orders: list[Order]
    requests: list[TransactionRequest]
    transaction_history: list[TransactionHistory]


@dataclass(frozen=True)
class BalanceChangeCommand:
    """Direct deposit/withdrawal by the account holder."""

    user_id: str
    type: str
    amount: Decimal


@dataclass(frozen=True)
class BalanceChangeResult:
    message: str
    new_balance: Decimal


# --- Orders ---


@dataclass(frozen=True)
class PlaceOrderCommand:
    """Input DTO for placing an order.

    Attributes:
        user_id: Owner of the order.
        side: "BUY" or "SELL".
        symbol: Trading pair, e.g. BTCUSDT. Upper-cased by the use case.
        quantity: Units of the base asset. Must be positive.
        price: Execution price in quote currency. Must be positive.
        leverage: Margin divisor. Must be positive.
        order_type: "MARKET" executes now, "LIMIT" is stored pending.
    """

    user_id: str
    side: str
    symbol: str
    quantity: Decimal
    price: Decimal
    leverage: Decimal = Decimal("1")
    order_type: str = "MARKET"


@dataclass(frozen=True)
class PlaceOrderResult:
    order: Order
    message: str
    success: bool = True


@dataclass(frozen=True)
class CancelOrderCommand:
    user_id: str
    order_id: str


# --- Transaction requests ---


@dataclass(frozen=True)
class SubmitRequestCommand:
    user_id: str
    type: str
    amount: Decimal


@dataclass(frozen=True)
class ProcessRequestCommand:
    """Admin decision on a pending deposit/withdraw request."""

    request_id: str
    action: str
    admin_id: str
    reason: Optional[str] = None


@dataclass(frozen=True)
class PendingRequestView:
    """A pending request enriched with its owner's identity."""

    request: TransactionRequest
    username: Optional[str]
    email: Optional[str]


# --- KYC ---


@dataclass(frozen=True)
class SubmitKycCommand:
    user_id: str
    full_name: str
    date_of_birth: str
    address: str
    phone_number: Optional[str] = None
    nationality: Optional[str] = None
    id_type: Optional[str] = None
    id_number: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    document_url: Optional[str] = None
    selfie_url: Optional[str] = None


@dataclass(frozen=True)
class KycStatusView:
    status: str
    missing_fields: list[str]


@dataclass(frozen=True)
class ReviewKycCommand:
    kyc_id: str
    status: str
    admin_id: str
    reason: Optional[str] = None


@dataclass(frozen=True)
class UploadDocumentCommand:
    user_id: str
    content: bytes
    content_type: str


@dataclass(frozen=True)
class StoredDocument:
    file_name: str
    content_type: str


# --- Alerts, activity, profile ---


@dataclass(frozen=True)
class UpdateAlertCommand:
    user_id: str
    alert_id: str
    action: str


@dataclass(frozen=True)
class ProfileView:
    username: str
    email: str
    tier: str
    fee_discount: str
    since: str
    auth_status: str
    security_score: str


# --- Admin ---


@dataclass(frozen=True)
class CreateUserCommand:
    username: str
    email: str
    password: str
    role: str = "trader"
    admin_id: Optional[str] = None


@dataclass(frozen=True)
class UpdateUserCommand:
    user_id: str
    status: Optional[str] = None
    role: Optional[str] = None
    admin_id: Optional[str] = None


@dataclass(frozen=True)
class AdminBalanceCommand:
    """Signed balance adjustment: positive credits, negative debits."""

    user_id: str
    amount: Decimal
    admin_id: str
    reason: Optional[str] = None


@dataclass(frozen=True)
class SeizeAssetsCommand:
    """Remove a position (or part of it) from a user.

    Attributes:
        symbol: A trading pair, or "ALL" for every position.
        quantity: Units to remove. None removes the whole position.
    """

    user_id: str
    symbol: str
    admin_id: str
    quantity: Optional[Decimal] = None


@dataclass(frozen=True)
class RestoreAssetCommand:
    user_id: str
    symbol: str
    quantity: Decimal
    price: Decimal
    admin_id: str


@dataclass(frozen=True)
class AssetAdjustmentResult:
    message: str
    affected_symbols: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class AnalyticsView:
    total_users: int
    total_orders: int
    pending_kyc: int
    approved_kyc: int
