"""
Shared fixtures for the exchange test suite.

Every test gets its own in-memory SQLite database. API tests run the real
application with the database, market data provider, document storage and
login throttle swapped through FastAPI dependency overrides.
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from app.application.exchange.dtos import CreateUserCommand
from app.application.exchange.manage_users import CreateUserUseCase
from app.domain.exchange.entities import Kline, Ticker
from app.domain.exchange.errors import MarketDataUnavailableError
from app.domain.exchange.ports import MarketDataPort
from app.infrastructure.database import build_engine, build_session_factory, init_db
from app.infrastructure.exchange.document_storage import LocalDocumentStorage
from app.infrastructure.exchange.password_hasher import PasslibPasswordHasher
from app.infrastructure.exchange.unit_of_work import SqlAlchemyUnitOfWork
from app.interfaces.exchange import dependencies
from app.main import app
from app.shared.security.rate_limiting import MovingWindowLoginThrottle, limiter

STRONG_PASSWORD = "Sup3r!Secret"
ADMIN_EMAIL = "admin@luno.test"


class FakeMarketData(MarketDataPort):
    """In-memory market data with switchable failures."""

    def __init__(self) -> None:
        self.fail_tickers = False
        self.fail_klines = False

    def get_tickers(self, symbols: list[str]) -> list[Ticker]:
        if self.fail_tickers:
            raise MarketDataUnavailableError("connection refused")
        return [
            Ticker(symbol, Decimal("100.5"), Decimal("1.25"), Decimal("42"))
            for symbol in symbols[:2]
        ]

    def get_klines(self, symbol: str, interval: str, limit: int) -> list[Kline]:
        if self.fail_klines:
            raise MarketDataUnavailableError("Failed to fetch historical data")
        opened = datetime(2024, 1, 1, tzinfo=timezone.utc)
        return [
            Kline(
                open_time=opened,
                open=Decimal("1"),
                high=Decimal("2"),
                low=Decimal("0.5"),
                close=Decimal("1.5"),
                volume=Decimal("10"),
            )
        ][:limit]


@pytest.fixture
def session_factory():
    engine = build_engine("sqlite://")
    init_db(engine)
    yield build_session_factory(engine)
    engine.dispose()


@pytest.fixture
def uow(session_factory) -> SqlAlchemyUnitOfWork:
    return SqlAlchemyUnitOfWork(session_factory)


@pytest.fixture(scope="session")
def hasher() -> PasslibPasswordHasher:
    return PasslibPasswordHasher()


@pytest.fixture
def market() -> FakeMarketData:
    return FakeMarketData()


@pytest.fixture
def storage(tmp_path) -> LocalDocumentStorage:
    return LocalDocumentStorage(
        upload_dir=str(tmp_path / "kyc"), secret="test-secret", max_bytes=1024
    )


@pytest.fixture
def throttle() -> MovingWindowLoginThrottle:
    return MovingWindowLoginThrottle(max_attempts=5, window_minutes=15)


@pytest.fixture
def client(session_factory, market, storage, throttle):
    """TestClient over the real app; the lifespan is not run."""
    app.dependency_overrides[dependencies.get_session_factory] = lambda: session_factory
    app.dependency_overrides[dependencies.get_market_data] = lambda: market
    app.dependency_overrides[dependencies.get_document_storage] = lambda: storage
    app.dependency_overrides[dependencies.get_login_throttle] = lambda: throttle
    limiter.enabled = False
    yield TestClient(app)
    limiter.enabled = True
    app.dependency_overrides.clear()


@pytest.fixture
def admin_user(uow, hasher):
    return CreateUserUseCase(uow, hasher).execute(
        CreateUserCommand(
            username="root", email=ADMIN_EMAIL, password=STRONG_PASSWORD, role="admin"
        )
    )


@pytest.fixture
def login(client):
    """Log in and return bearer headers."""

    def _login(email: str, password: str = STRONG_PASSWORD) -> dict:
        resp = client.post(
            "/api/v1/auth/login", json={"email": email, "password": password}
        )
        assert resp.status_code == 200, resp.text
        return {"Authorization": f"Bearer {resp.json()['access_token']}"}

    return _login


@pytest.fixture
def register(client, login):
    """Sign up a trader and return bearer headers for it."""

    def _register(email: str, name: str = "Trader") -> dict:
        resp = client.post(
            "/api/v1/auth/signup",
            json={"name": name, "email": email, "password": STRONG_PASSWORD},
        )
        assert resp.status_code == 201, resp.text
        return login(email)

    return _register


@pytest.fixture
def trader_headers(register) -> dict:
    return register("trader@luno.test")


@pytest.fixture
def admin_headers(login, admin_user) -> dict:
    return login(ADMIN_EMAIL)
