"""
Pydantic schemas for exchange API request/response validation.

These schemas enforce input validation and define the API contract.
Money and quantities are exposed as floats; the domain keeps Decimals.
No business logic belongs here.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from app.domain.exchange.entities import (
    ActivityEntry,
    Alert,
    Asset,
    AuditLog,
    KycRecord,
    Kline,
    Order,
    Ticker,
    TransactionHistory,
    TransactionRequest,
    User,
)

EMAIL_MAX_LEN = 190
SYMBOL_DESCRIPTION = "Trading pair, e.g. BTCUSDT"


def _opt_float(value: Optional[Decimal]) -> Optional[float]:
    return None if value is None else float(value)


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    error: str
    detail: str | None = None


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    status: str
    version: str
    database: str


# --- Auth ---


class SignUpRequest(BaseModel):
    """Request schema for self-registration.

    Attributes:
        name: Display name.
        email: Login email (must contain '@', at least 5 characters).
        password: At least 10 characters with upper, lower, digit and symbol.
    """

    name: str = Field(..., min_length=1, max_length=120)
    email: str = Field(..., min_length=5, max_length=EMAIL_MAX_LEN)
    password: str = Field(..., min_length=1, max_length=128)


class SignUpResponse(BaseModel):
    message: str
    user_id: str


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1, max_length=EMAIL_MAX_LEN)
    password: str = Field(..., min_length=1, max_length=128)


class RefreshSessionRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1, max_length=128)
    new_password: str = Field(..., min_length=1, max_length=128)


class UserSchema(BaseModel):
    """Public view of an account. Never includes the password hash."""

    id: str
    username: str
    email: str
    display_name: Optional[str]
    role: str
    roles: list[str]
    balance: float
    kyc_verified: bool
    two_factor_enabled: bool
    status: str
    created_at: datetime
    last_login: Optional[datetime]

    @classmethod
    def from_entity(cls, user: User) -> "UserSchema":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            display_name=user.display_name,
            role=user.role.value,
            roles=[role.value for role in user.roles],
            balance=float(user.balance),
            kyc_verified=user.kyc_verified,
            two_factor_enabled=user.two_factor_enabled,
            status=user.status.value,
            created_at=user.created_at,
            last_login=user.last_login,
        )


class SessionResponse(BaseModel):
    message: str
    user: UserSchema
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


# --- Portfolio ---


class AssetSchema(BaseModel):
    id: str
    symbol: str
    quantity: float
    average_price: float
    value: float

    @classmethod
    def from_entity(cls, asset: Asset) -> "AssetSchema":
        return cls(
            id=asset.id,
            symbol=asset.symbol,
            quantity=float(asset.quantity),
            average_price=float(asset.average_price),
            value=float(asset.cost_basis),
        )


class PortfolioResponse(BaseModel):
    balance: float
    assets: list[AssetSchema]
    total_portfolio_value: float


class BalanceChangeRequest(BaseModel):
    type: Literal["deposit", "withdraw"]
    amount: float = Field(..., gt=0, allow_inf_nan=False)


class BalanceChangeResponse(BaseModel):
    message: str
    new_balance: float


class OrderSchema(BaseModel):
    id: str
    user_id: str
    type: str = Field(..., description="BUY or SELL")
    order_type: str
    symbol: str
    quantity: float
    price: float
    leverage: float
    status: str
    executed_quantity: float
    created_at: datetime

    @classmethod
    def from_entity(cls, order: Order) -> "OrderSchema":
        return cls(
            id=order.id,
            user_id=order.user_id,
            type=order.side.value,
            order_type=order.order_type.value,
            symbol=order.symbol,
            quantity=float(order.quantity),
            price=float(order.price),
            leverage=float(order.leverage),
            status=order.status.value,
            executed_quantity=float(order.executed_quantity),
            created_at=order.created_at,
        )


class TransactionRequestSchema(BaseModel):
    id: str
    user_id: str
    type: str
    amount: float
    status: str
    reason: Optional[str]
    processed_by: Optional[str]
    created_at: datetime
    executed_at: Optional[datetime]

    @classmethod
    def from_entity(cls, request: TransactionRequest) -> "TransactionRequestSchema":
        return cls(
            id=request.id,
            user_id=request.user_id,
            type=request.type.value,
            amount=float(request.amount),
            status=request.status.value,
            reason=request.reason,
            processed_by=request.processed_by,
            created_at=request.created_at,
            executed_at=request.executed_at,
        )


class TransactionHistorySchema(BaseModel):
    id: str
    type: str
    amount: float
    symbol: Optional[str]
    quantity: Optional[float]
    price: Optional[float]
    description: str
    status: str
    balance_before: float
    balance_after: float
    created_at: datetime

    @classmethod
    def from_entity(cls, entry: TransactionHistory) -> "TransactionHistorySchema":
        return cls(
            id=entry.id,
            type=entry.type.value,
            amount=float(entry.amount),
            symbol=entry.symbol,
            quantity=_opt_float(entry.quantity),
            price=_opt_float(entry.price),
            description=entry.description,
            status=entry.status.value,
            balance_before=float(entry.balance_before),
            balance_after=float(entry.balance_after),
            created_at=entry.created_at,
        )


class AccountOverviewResponse(BaseModel):
    portfolio: PortfolioResponse
    orders: list[OrderSchema]
    requests: list[TransactionRequestSchema]
    transaction_history: list[TransactionHistorySchema]


# --- Orders ---


class PlaceOrderRequest(BaseModel):
    """Request schema for placing an order.

    Attributes:
        type: BUY or SELL (case-insensitive).
        symbol: Trading pair; upper-cased before use.
        quantity: Units of the base asset.
        price: Price per unit in the quote currency.
        leverage: Margin divisor; margin required is value / leverage.
        order_type: MARKET executes immediately, LIMIT is stored pending.
    """

    type: str = Field(..., min_length=3, max_length=4)
    symbol: str = Field(..., min_length=2, max_length=20, description=SYMBOL_DESCRIPTION)
    quantity: float = Field(..., gt=0, allow_inf_nan=False)
    price: float = Field(..., gt=0, allow_inf_nan=False)
    leverage: float = Field(default=1.0, gt=0, allow_inf_nan=False)
    order_type: str = Field(default="MARKET", max_length=6)


class PlaceOrderResponse(BaseModel):
    success: bool
    order: OrderSchema
    message: str


class OrderListResponse(BaseModel):
    orders: list[OrderSchema]


class CancelOrderRequest(BaseModel):
    order_id: str = Field(..., min_length=1)
    action: Literal["CANCEL"]


class CancelOrderResponse(BaseModel):
    message: str
    order: OrderSchema


# --- Transaction requests ---


class SubmitTransactionRequest(BaseModel):
    type: Literal["deposit", "withdraw"]
    amount: float = Field(..., gt=0, allow_inf_nan=False)


class SubmitTransactionResponse(BaseModel):
    message: str
    request: TransactionRequestSchema


class TransactionRequestListResponse(BaseModel):
    requests: list[TransactionRequestSchema]


# --- KYC ---


class KycSubmitRequest(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=190)
    date_of_birth: str = Field(..., min_length=1, max_length=32)
    address: str = Field(..., min_length=1, max_length=500)
    phone_number: Optional[str] = Field(default=None, max_length=64)
    nationality: Optional[str] = Field(default=None, max_length=64)
    id_type: Optional[Literal["passport", "driving_license", "national_id"]] = None
    id_number: Optional[str] = Field(default=None, max_length=64)
    city: Optional[str] = Field(default=None, max_length=120)
    postal_code: Optional[str] = Field(default=None, max_length=32)
    country: Optional[str] = Field(default=None, max_length=64)
    document_url: Optional[str] = Field(default=None, max_length=255)
    selfie_url: Optional[str] = Field(default=None, max_length=255)


class KycSubmitResponse(BaseModel):
    message: str
    kyc_id: str


class KycStatusResponse(BaseModel):
    status: str
    missing_fields: list[str]


class UploadedDocumentResponse(BaseModel):
    file_name: str
    content_type: str


class KycRecordSchema(BaseModel):
    id: str
    user_id: str
    full_name: Optional[str]
    date_of_birth: Optional[str]
    address: Optional[str]
    phone_number: Optional[str]
    nationality: Optional[str]
    id_type: Optional[str]
    id_number: Optional[str]
    city: Optional[str]
    postal_code: Optional[str]
    country: Optional[str]
    document_url: Optional[str]
    selfie_url: Optional[str]
    status: str
    rejection_reason: Optional[str]
    submitted_at: datetime
    verified_at: Optional[datetime]
    verified_by: Optional[str]

    @classmethod
    def from_entity(cls, record: KycRecord) -> "KycRecordSchema":
        return cls(
            id=record.id,
            user_id=record.user_id,
            full_name=record.full_name,
            date_of_birth=record.date_of_birth,
            address=record.address,
            phone_number=record.phone_number,
            nationality=record.nationality,
            id_type=record.id_type.value if record.id_type else None,
            id_number=record.id_number,
            city=record.city,
            postal_code=record.postal_code,
            country=record.country,
            document_url=record.document_url,
            selfie_url=record.selfie_url,
            status=record.status.value,
            rejection_reason=record.rejection_reason,
            submitted_at=record.submitted_at,
            verified_at=record.verified_at,
            verified_by=record.verified_by,
        )


# --- Alerts, activity, profile ---


class AlertSchema(BaseModel):
    id: str
    type: str
    title: str
    message: str
    read: bool
    created_at: datetime

    @classmethod
    def from_entity(cls, alert: Alert) -> "AlertSchema":
        return cls(
            id=alert.id,
            type=alert.type.value,
            title=alert.title,
            message=alert.message,
            read=alert.read,
            created_at=alert.created_at,
        )


class AlertListResponse(BaseModel):
    alerts: list[AlertSchema]
    unread_count: int
    total: int


class AlertActionRequest(BaseModel):
    alert_id: str = Field(..., min_length=1)
    action: Literal["read", "delete"]


class AlertActionResponse(BaseModel):
    message: str
    success: bool = True


class ActivitySchema(BaseModel):
    id: str
    action: str
    details: str
    time: datetime

    @classmethod
    def from_entity(cls, entry: ActivityEntry) -> "ActivitySchema":
        return cls(
            id=entry.id, action=entry.action, details=entry.details, time=entry.created_at
        )


class ProfileResponse(BaseModel):
    username: str
    email: str
    tier: str
    fee_discount: str
    since: str
    auth_status: str
    security_score: str


# --- Market data ---


class TickerSchema(BaseModel):
    """A price board row; ``symbol`` is the base asset (BTC, ETH, ...)."""

    symbol: str
    price: float
    change: float
    volume: float

    @classmethod
    def from_entity(cls, ticker: Ticker) -> "TickerSchema":
        return cls(
            symbol=ticker.symbol.removesuffix("USDT") or ticker.symbol,
            price=float(ticker.price),
            change=float(ticker.change_percent),
            volume=float(ticker.volume),
        )


class KlineSchema(BaseModel):
    """One candlestick; ``date`` is the open time in epoch milliseconds."""

    date: int
    open: float
    high: float
    low: float
    close: float
    volume: float

    @classmethod
    def from_entity(cls, kline: Kline) -> "KlineSchema":
        return cls(
            date=int(kline.open_time.timestamp() * 1000),
            open=float(kline.open),
            high=float(kline.high),
            low=float(kline.low),
            close=float(kline.close),
            volume=float(kline.volume),
        )


# --- Admin ---


class AdminUserListResponse(BaseModel):
    users: list[UserSchema]
    total: int
    correlation_id: str


class CreateUserRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=120)
    email: str = Field(..., min_length=5, max_length=EMAIL_MAX_LEN)
    password: str = Field(..., min_length=1, max_length=128)
    role: str = Field(default="trader", max_length=16)


class CreateUserResponse(BaseModel):
    message: str
    user: UserSchema
    correlation_id: str


class UpdateUserRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    status: Optional[str] = Field(default=None, max_length=16)
    role: Optional[str] = Field(default=None, max_length=16)


class AdminMessageResponse(BaseModel):
    message: str
    correlation_id: str


class AdminBalanceRequest(BaseModel):
    """Signed adjustment: positive credits, negative debits."""

    user_id: str = Field(..., min_length=1)
    amount: float = Field(..., allow_inf_nan=False)
    reason: Optional[str] = Field(default=None, max_length=500)


class AdminBalanceResponse(BaseModel):
    message: str
    new_balance: float
    correlation_id: str


class SeizeAssetsRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    symbol: str = Field(..., min_length=1, max_length=20, description='Pair or "ALL"')
    quantity: Optional[float] = Field(default=None, allow_inf_nan=False)


class RestoreAssetRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    symbol: str = Field(..., min_length=1, max_length=20, description=SYMBOL_DESCRIPTION)
    quantity: float = Field(..., allow_inf_nan=False)
    price: float = Field(..., allow_inf_nan=False)


class AssetAdjustmentResponse(BaseModel):
    message: str
    success: bool = True
    correlation_id: str


class PendingRequestSchema(TransactionRequestSchema):
    username: Optional[str]
    email: Optional[str]


class PendingRequestListResponse(BaseModel):
    requests: list[PendingRequestSchema]
    total: int
    correlation_id: str


class ProcessRequestRequest(BaseModel):
    request_id: str = Field(..., min_length=1)
    action: str = Field(..., description="approve or reject")
    reason: Optional[str] = Field(default=None, max_length=500)


class ProcessRequestResponse(BaseModel):
    message: str
    request: TransactionRequestSchema
    correlation_id: str


class KycQueueResponse(BaseModel):
    kyc_requests: list[KycRecordSchema]


class KycReviewRequest(BaseModel):
    status: str = Field(..., description="approved or rejected")
    reason: Optional[str] = Field(default=None, max_length=500)


class DocumentLinkResponse(BaseModel):
    download_url: str
    expires_in_seconds: int


class AnalyticsResponse(BaseModel):
    total_users: int
    total_orders: int
    pending_kyc: int
    approved_kyc: int


class AuditLogSchema(BaseModel):
    id: str
    user_id: Optional[str]
    admin_id: Optional[str]
    action: str
    resource_type: str
    resource_id: str
    changes: dict[str, Any]
    status: str
    created_at: datetime

    @classmethod
    def from_entity(cls, entry: AuditLog) -> "AuditLogSchema":
        return cls(
            id=entry.id,
            user_id=entry.user_id,
            admin_id=entry.admin_id,
            action=entry.action,
            resource_type=entry.resource_type,
            resource_id=entry.resource_id,
            changes=entry.changes,
            status=entry.status.value,
            created_at=entry.created_at,
        )


class AuditLogListResponse(BaseModel):
    logs: list[AuditLogSchema]
    total: int
