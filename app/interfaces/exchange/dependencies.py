"""
Dependency injection for the exchange bounded context.

Provides FastAPI dependency functions that wire infrastructure
adapters into use cases via constructor injection.
These are the composition root for the exchange context.
"""

from datetime import timedelta
from decimal import Decimal
from functools import lru_cache

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from app.application.exchange.adjust_user_balance import AdjustUserBalanceUseCase
from app.application.exchange.authenticate import AuthenticateUseCase
from app.application.exchange.cancel_order import CancelOrderUseCase
from app.application.exchange.change_balance import ChangeBalanceUseCase
from app.application.exchange.change_password import ChangePasswordUseCase
from app.application.exchange.get_account_overview import GetAccountOverviewUseCase
from app.application.exchange.get_activity_log import GetActivityLogUseCase
from app.application.exchange.get_analytics import (
    GetAnalyticsUseCase,
    ListAuditLogsUseCase,
)
from app.application.exchange.get_kyc_status import GetKycStatusUseCase
from app.application.exchange.get_market_data import (
    GetKlinesUseCase,
    GetMarketPricesUseCase,
)
from app.application.exchange.get_portfolio import GetPortfolioUseCase
from app.application.exchange.get_profile import GetProfileUseCase
from app.application.exchange.kyc_documents import (
    CreateDocumentLinkUseCase,
    ResolveDocumentDownloadUseCase,
    UploadKycDocumentUseCase,
)
from app.application.exchange.list_orders import ListOrdersUseCase
from app.application.exchange.list_transaction_requests import (
    ListPendingRequestsUseCase,
    ListTransactionRequestsUseCase,
)
from app.application.exchange.login import LoginUseCase
from app.application.exchange.manage_alerts import ListAlertsUseCase, UpdateAlertUseCase
from app.application.exchange.manage_user_assets import (
    RestoreAssetUseCase,
    SeizeAssetsUseCase,
)
from app.application.exchange.manage_users import (
    CreateUserUseCase,
    ListUsersUseCase,
    UpdateUserUseCase,
)
from app.application.exchange.place_order import PlaceOrderUseCase
from app.application.exchange.process_transaction_request import (
    ProcessTransactionRequestUseCase,
)
from app.application.exchange.refresh_session import RefreshSessionUseCase
from app.application.exchange.review_kyc import ListPendingKycUseCase, ReviewKycUseCase
from app.application.exchange.signup import SignUpUseCase
from app.application.exchange.submit_kyc import SubmitKycUseCase
from app.application.exchange.submit_transaction_request import (
    SubmitTransactionRequestUseCase,
)
from app.core.config import settings
from app.domain.exchange.entities import User
from app.domain.exchange.errors import AuthenticationError, PermissionDeniedError
from app.domain.exchange.ports import (
    DocumentStorage,
    LoginThrottle,
    MarketDataPort,
    PasswordHasher,
    TokenService,
    UnitOfWork,
)
from app.infrastructure.database import build_engine, build_session_factory
from app.infrastructure.exchange.binance_market_data_adapter import (
    BinanceMarketDataAdapter,
)
from app.infrastructure.exchange.document_storage import LocalDocumentStorage
from app.infrastructure.exchange.password_hasher import PasslibPasswordHasher
from app.infrastructure.exchange.token_service import JwtTokenService
from app.infrastructure.exchange.unit_of_work import SqlAlchemyUnitOfWork
from app.shared.security.rate_limiting import login_throttle

bearer_scheme = HTTPBearer(auto_error=False)


# --- Infrastructure singletons ---


@lru_cache
def get_engine() -> Engine:
    """Build the SQLAlchemy engine once from application settings."""
    return build_engine(settings.database_url)


@lru_cache
def get_session_factory() -> sessionmaker:
    return build_session_factory(get_engine())


def get_unit_of_work(
    session_factory: sessionmaker = Depends(get_session_factory),
) -> UnitOfWork:
    return SqlAlchemyUnitOfWork(session_factory)


@lru_cache
def get_password_hasher() -> PasswordHasher:
    return PasslibPasswordHasher()


@lru_cache
def get_token_service() -> TokenService:
    return JwtTokenService(
        access_secret=settings.jwt_secret,
        refresh_secret=settings.refresh_secret,
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
        access_ttl=timedelta(minutes=settings.access_token_ttl_minutes),
        refresh_ttl=timedelta(days=settings.refresh_token_ttl_days),
    )


def get_login_throttle() -> LoginThrottle:
    return login_throttle


@lru_cache
def get_market_data() -> MarketDataPort:
    return BinanceMarketDataAdapter(
        base_url=settings.binance_base_url,
        timeout=settings.binance_timeout_seconds,
    )


@lru_cache
def get_document_storage() -> DocumentStorage:
    return LocalDocumentStorage(
        upload_dir=settings.upload_dir,
        secret=settings.jwt_secret,
        max_bytes=settings.max_upload_bytes,
        link_ttl=timedelta(minutes=settings.download_link_ttl_minutes),
    )


# --- Authentication ---


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    uow: UnitOfWork = Depends(get_unit_of_work),
    tokens: TokenService = Depends(get_token_service),
) -> User:
    """Resolve the bearer token to an active, freshly loaded user."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError()
    return AuthenticateUseCase(uow, tokens).execute(credentials.credentials)


def require_admin(user: User = Depends(get_current_user)) -> User:
    """Allow only users whose stored roles include admin."""
    if not user.is_admin:
        raise PermissionDeniedError()
    return user


# --- Auth use cases ---


def get_signup_use_case(
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> SignUpUseCase:
    return SignUpUseCase(uow, hasher, signup_bonus=Decimal(str(settings.signup_bonus)))


def get_login_use_case(
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
    throttle: LoginThrottle = Depends(get_login_throttle),
) -> LoginUseCase:
    return LoginUseCase(uow, hasher, tokens, throttle)


def get_refresh_session_use_case(
    uow: UnitOfWork = Depends(get_unit_of_work),
    tokens: TokenService = Depends(get_token_service),
) -> RefreshSessionUseCase:
    return RefreshSessionUseCase(uow, tokens)


def get_change_password_use_case(
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> ChangePasswordUseCase:
    return ChangePasswordUseCase(uow, hasher)


# --- Portfolio and orders ---


def get_portfolio_use_case(
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> GetPortfolioUseCase:
    return GetPortfolioUseCase(uow)


def get_change_balance_use_case(
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> ChangeBalanceUseCase:
    return ChangeBalanceUseCase(uow)


def get_account_overview_use_case(
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> GetAccountOverviewUseCase:
    return GetAccountOverviewUseCase(uow)


def get_place_order_use_case(
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> PlaceOrderUseCase:
    return PlaceOrderUseCase(uow)


def get_cancel_order_use_case(
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> CancelOrderUseCase:
    return CancelOrderUseCase(uow)


def get_list_orders_use_case(
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> ListOrdersUseCase:
    return ListOrdersUseCase(uow)


# --- Transaction requests ---


def get_submit_request_use_case(
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> SubmitTransactionRequestUseCase:
    return SubmitTransactionRequestUseCase(uow)


def get_list_requests_use_case(
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> ListTransactionRequestsUseCase:
    return ListTransactionRequestsUseCase(uow)


def get_list_pending_requests_use_case(
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> ListPendingRequestsUseCase:
    return ListPendingRequestsUseCase(uow)


def get_process_request_use_case(
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> ProcessTransactionRequestUseCase:
    return ProcessTransactionRequestUseCase(uow)


# --- KYC ---


def get_submit_kyc_use_case(
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> SubmitKycUseCase:
    return SubmitKycUseCase(uow)


def get_kyc_status_use_case(
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> GetKycStatusUseCase:
    return GetKycStatusUseCase(uow)


def get_list_pending_kyc_use_case(
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> ListPendingKycUseCase:
    return ListPendingKycUseCase(uow)


def get_review_kyc_use_case(
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> ReviewKycUseCase:
    return ReviewKycUseCase(uow)


def get_upload_document_use_case(
    storage: DocumentStorage = Depends(get_document_storage),
) -> UploadKycDocumentUseCase:
    return UploadKycDocumentUseCase(storage)


def get_document_link_use_case(
    storage: DocumentStorage = Depends(get_document_storage),
) -> CreateDocumentLinkUseCase:
    return CreateDocumentLinkUseCase(storage)


def get_resolve_document_use_case(
    storage: DocumentStorage = Depends(get_document_storage),
) -> ResolveDocumentDownloadUseCase:
    return ResolveDocumentDownloadUseCase(storage)


# --- Alerts, activity, profile ---


def get_list_alerts_use_case(
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> ListAlertsUseCase:
    return ListAlertsUseCase(uow)


def get_update_alert_use_case(
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> UpdateAlertUseCase:
    return UpdateAlertUseCase(uow)


def get_activity_log_use_case(
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> GetActivityLogUseCase:
    return GetActivityLogUseCase(uow)


def get_profile_use_case(
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> GetProfileUseCase:
    return GetProfileUseCase(uow)


# --- Market data ---


def get_market_prices_use_case(
    market: MarketDataPort = Depends(get_market_data),
) -> GetMarketPricesUseCase:
    return GetMarketPricesUseCase(market, symbols=list(settings.market_symbols))


def get_klines_use_case(
    market: MarketDataPort = Depends(get_market_data),
) -> GetKlinesUseCase:
    return GetKlinesUseCase(market)


# --- Admin ---


def get_list_users_use_case(
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> ListUsersUseCase:
    return ListUsersUseCase(uow)


def get_create_user_use_case(
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> CreateUserUseCase:
    return CreateUserUseCase(uow, hasher)


def get_update_user_use_case(
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> UpdateUserUseCase:
    return UpdateUserUseCase(uow)


def get_adjust_balance_use_case(
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> AdjustUserBalanceUseCase:
    return AdjustUserBalanceUseCase(uow)


def get_seize_assets_use_case(
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> SeizeAssetsUseCase:
    return SeizeAssetsUseCase(uow)


def get_restore_asset_use_case(
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> RestoreAssetUseCase:
    return RestoreAssetUseCase(uow)


def get_analytics_use_case(
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> GetAnalyticsUseCase:
    return GetAnalyticsUseCase(uow)


def get_audit_logs_use_case(
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> ListAuditLogsUseCase:
    return ListAuditLogsUseCase(uow)
