"""
Application configuration.

Loads settings from environment variables and .env file.
All configuration is centralized here; no scattered magic strings.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MARKET_SYMBOLS = [
    "BTCUSDT",
    "ETHUSDT",
    "SOLUSDT",
    "BNBUSDT",
    "ADAUSDT",
    "DOGEUSDT",
    "XRPUSDT",
    "LTCUSDT",
    "MATICUSDT",
    "LINKUSDT",
]


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Attributes:
        project_name: Display name for the API.
        version: Current API version string.
        debug: Enable debug mode. Must be False in production.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        database_url: SQLAlchemy URL of the system of record.
        jwt_secret: Signing key for access tokens.
        refresh_secret: Signing key for refresh tokens.
        jwt_issuer: ``iss`` claim written to and required on tokens.
        jwt_audience: ``aud`` claim written to and required on tokens.
        access_token_ttl_minutes: Lifetime of access tokens.
        refresh_token_ttl_days: Lifetime of refresh tokens.
        signup_bonus: Starting cash balance given to self-registered users.
        rate_limit_enabled: Master switch for slowapi limits.
        rate_limit_default: Default rate limit for all endpoints.
        rate_limit_auth: Rate limit for the signup/login endpoints.
        login_max_attempts: Login attempts allowed per ip+email per window.
        login_window_minutes: Length of the login throttle window.
        binance_base_url: Base URL of the Binance public REST API.
        binance_timeout_seconds: HTTP timeout for market data calls.
        market_symbols: Pairs listed by the price board.
        upload_dir: Directory KYC documents are written to.
        max_upload_bytes: Largest accepted KYC document.
        download_link_ttl_minutes: Lifetime of admin document download links.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    project_name: str = "Luno Exchange"
    version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    database_url: str = "sqlite:///./luno.db"

    jwt_secret: str = "change-me-access-secret"
    refresh_secret: str = "change-me-refresh-secret"
    jwt_issuer: str = "luno-app"
    jwt_audience: str = "luno-web"
    access_token_ttl_minutes: int = 15
    refresh_token_ttl_days: int = 7

    signup_bonus: float = 1000.0

    rate_limit_enabled: bool = True
    rate_limit_default: str = "60/minute"
    rate_limit_auth: str = "10/minute"
    login_max_attempts: int = 5
    login_window_minutes: int = 15

    binance_base_url: str = "https://api.binance.com"
    binance_timeout_seconds: float = 10.0
    market_symbols: list[str] = DEFAULT_MARKET_SYMBOLS

    upload_dir: str = "./data/kyc"
    max_upload_bytes: int = 5 * 1_048_576  # 5 MB
    download_link_ttl_minutes: int = 15


settings = Settings()
