"""
Domain-specific errors for the exchange bounded context.

All errors raised from the domain and application layers are defined here.
These are mapped to HTTP responses at the interface layer.
No framework imports allowed.
"""


class LunoDomainError(Exception):
    """Base error for all exchange domain errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


# --- Authentication / authorization ---


class AuthenticationError(LunoDomainError):
    """Raised when credentials or a bearer token cannot be accepted."""

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class InvalidCredentialsError(LunoDomainError):
    """Raised when a logged-in user supplies a wrong current password."""

    def __init__(self) -> None:
        super().__init__("Incorrect current password")


class PermissionDeniedError(LunoDomainError):
    """Raised when the caller lacks the role required for an action."""

    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message)


class AccountDisabledError(LunoDomainError):
    """Raised when an inactive or banned account tries to act."""

    def __init__(self, user_id: str, status: str) -> None:
        super().__init__(f"Account {status}")
        self.user_id = user_id
        self.status = status


class LoginThrottledError(LunoDomainError):
    """Raised when too many login attempts were made for one key."""

    def __init__(self, retry_after_seconds: int) -> None:
        super().__init__("Too many login attempts. Try again later.")
        self.retry_after_seconds = retry_after_seconds


class WeakPasswordError(LunoDomainError):
    """Raised when a password does not satisfy the password policy."""


class EmailAlreadyRegisteredError(LunoDomainError):
    def __init__(self, email: str) -> None:
        super().__init__("User with this email already exists")
        self.email = email


# --- Lookups ---


class UserNotFoundError(LunoDomainError):
    def __init__(self, user_id: str) -> None:
        super().__init__(f"User not found: {user_id}")
        self.user_id = user_id


class OrderNotFoundError(LunoDomainError):
    def __init__(self, order_id: str) -> None:
        super().__init__(f"Order not found: {order_id}")
        self.order_id = order_id


class RequestNotFoundError(LunoDomainError):
    def __init__(self, request_id: str) -> None:
        super().__init__(f"Request not found: {request_id}")
        self.request_id = request_id


class KycNotFoundError(LunoDomainError):
    def __init__(self, kyc_id: str) -> None:
        super().__init__(f"KYC record not found: {kyc_id}")
        self.kyc_id = kyc_id


class AlertNotFoundError(LunoDomainError):
    def __init__(self, alert_id: str) -> None:
        super().__init__(f"Alert not found: {alert_id}")
        self.alert_id = alert_id


class DocumentNotFoundError(LunoDomainError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Document not found: {name}")
        self.name = name


class AssetNotFoundError(LunoDomainError):
    """Raised when a user holds no position in the requested symbol."""

    def __init__(self, user_id: str, symbol: str, message: str | None = None) -> None:
        super().__init__(message or f"Asset not found: {symbol}")
        self.user_id = user_id
        self.symbol = symbol


# --- Business rules ---


class ValidationFailedError(LunoDomainError):
    """Raised when a request passes schema checks but breaks a business rule."""


class InsufficientFundsError(LunoDomainError):
    """Raised when a balance cannot cover a debit."""

    def __init__(
        self, required: str, available: str, message: str = "Insufficient balance"
    ) -> None:
        super().__init__(message)
        self.required = required
        self.available = available


class InsufficientAssetError(LunoDomainError):
    """Raised when a position is smaller than the quantity to remove."""

    def __init__(
        self,
        symbol: str,
        held: str,
        wanted: str,
        message: str = "Insufficient asset quantity",
    ) -> None:
        super().__init__(message)
        self.symbol = symbol
        self.held = held
        self.wanted = wanted


class KycRequiredError(LunoDomainError):
    """Raised when an action needs an approved identity verification."""

    def __init__(self, kyc_status: str, missing_fields: list[str]) -> None:
        super().__init__(
            "KYC verification required to initiate financial transactions."
        )
        self.kyc_status = kyc_status
        self.missing_fields = missing_fields


class KycAlreadySubmittedError(LunoDomainError):
    def __init__(self, status: str) -> None:
        super().__init__(f"KYC already in '{status}' state.")
        self.status = status


class RequestAlreadyProcessedError(LunoDomainError):
    def __init__(self, request_id: str, status: str) -> None:
        super().__init__(f"Request already {status}")
        self.request_id = request_id
        self.status = status


class OrderNotCancellableError(LunoDomainError):
    def __init__(self, order_id: str, status: str) -> None:
        super().__init__(f"Order is {status} and cannot be cancelled")
        self.order_id = order_id
        self.status = status


class ConcurrentUpdateError(LunoDomainError):
    """Raised when a row changed between being read and being written."""

    def __init__(self, resource: str, resource_id: str | None = None) -> None:
        super().__init__(f"{resource} was modified concurrently; retry the operation")
        self.resource = resource
        self.resource_id = resource_id


# --- External systems ---


class MarketDataUnavailableError(LunoDomainError):
    """Raised when the upstream market data provider cannot be reached."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Market data unavailable: {reason}")
        self.reason = reason


class InvalidDocumentError(LunoDomainError):
    """Raised when an uploaded document is empty, too large or of a bad type."""
