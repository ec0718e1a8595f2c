"""
Tests for the exchange infrastructure adapters.

Token service, document storage, login throttle, the Binance adapter and
versioned row writes.
HTTP calls go through httpx.MockTransport; nothing leaves the process.
"""

from datetime import timedelta
from decimal import Decimal

import httpx
import pytest
from jose import jwt

from app.domain.exchange.entities import RequestType, Role, TransactionRequest, User
from app.domain.exchange.errors import (
    AuthenticationError,
    ConcurrentUpdateError,
    DocumentNotFoundError,
    InvalidDocumentError,
    LoginThrottledError,
    MarketDataUnavailableError,
)
from app.infrastructure.database import build_engine, build_session_factory, init_db
from app.infrastructure.exchange.binance_market_data_adapter import (
    BinanceMarketDataAdapter,
)
from app.infrastructure.exchange.document_storage import LocalDocumentStorage
from app.infrastructure.exchange.token_service import JwtTokenService
from app.infrastructure.exchange.unit_of_work import SqlAlchemyUnitOfWork
from app.shared.security.rate_limiting import MovingWindowLoginThrottle

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"0" * 32


@pytest.fixture
def tokens() -> JwtTokenService:
    return JwtTokenService(
        access_secret="access-secret",
        refresh_secret="refresh-secret",
        issuer="luno-app",
        audience="luno-web",
    )


@pytest.fixture
def user() -> User:
    return User(username="ada", email="ada@x.io", password_hash="h", roles=[Role.TRADER])


class TestJwtTokenService:
    def test_access_token_round_trip(self, tokens, user) -> None:
        pair = tokens.issue(user)
        claims = tokens.verify_access(pair.access_token)
        assert claims.user_id == user.id
        assert claims.roles == ["trader"]
        assert claims.token_id

    def test_tokens_carry_kid_header(self, tokens, user) -> None:
        pair = tokens.issue(user)
        assert jwt.get_unverified_header(pair.access_token)["kid"] == "v1_access_key"
        assert jwt.get_unverified_header(pair.refresh_token)["kid"] == "v1_refresh_key"

    def test_refresh_token_is_not_an_access_token(self, tokens, user) -> None:
        pair = tokens.issue(user)
        with pytest.raises(AuthenticationError):
            tokens.verify_access(pair.refresh_token)
        assert tokens.verify_refresh(pair.refresh_token).roles == ["refresh"]

    def test_access_token_is_not_a_refresh_token(self, tokens, user) -> None:
        pair = tokens.issue(user)
        with pytest.raises(AuthenticationError):
            tokens.verify_refresh(pair.access_token)

    def test_expired_token_rejected(self, user) -> None:
        expired = JwtTokenService(
            "a", "r", "luno-app", "luno-web", access_ttl=timedelta(seconds=-1)
        )
        with pytest.raises(AuthenticationError):
            expired.verify_access(expired.issue(user).access_token)

    def test_wrong_audience_rejected(self, tokens, user) -> None:
        other = JwtTokenService("access-secret", "refresh-secret", "luno-app", "other-web")
        with pytest.raises(AuthenticationError):
            tokens.verify_access(other.issue(user).access_token)


class TestLocalDocumentStorage:
    def test_save_and_resolve_download_token(self, storage) -> None:
        name = storage.save(PNG_BYTES, "image/png")
        assert name.startswith("kyc_") and name.endswith(".png")

        token = storage.create_download_token(name)
        assert storage.resolve_download_token(token) == name
        with open(storage.path_for(name), "rb") as fh:
            assert fh.read() == PNG_BYTES

    @pytest.mark.parametrize(
        "content, content_type",
        [(PNG_BYTES, "text/html"), (b"", "image/png"), (b"x" * 2048, "application/pdf")],
    )
    def test_invalid_uploads_rejected(self, storage, content, content_type) -> None:
        with pytest.raises(InvalidDocumentError):
            storage.save(content, content_type)

    @pytest.mark.parametrize("name", ["../secret.png", "sub/kyc.png", ".env", "kyc_missing.png"])
    def test_path_for_rejects_unknown_or_nested_names(self, storage, name) -> None:
        with pytest.raises(DocumentNotFoundError):
            storage.path_for(name)

    def test_tampered_token_rejected(self, storage, tmp_path) -> None:
        name = storage.save(PNG_BYTES, "image/png")
        other = LocalDocumentStorage(str(tmp_path / "kyc"), secret="other", max_bytes=1024)
        with pytest.raises(AuthenticationError):
            storage.resolve_download_token(other.create_download_token(name))

    def test_expired_link_rejected(self, tmp_path) -> None:
        storage = LocalDocumentStorage(
            str(tmp_path), secret="s", max_bytes=1024, link_ttl=timedelta(seconds=-1)
        )
        name = storage.save(PNG_BYTES, "image/png")
        with pytest.raises(AuthenticationError):
            storage.resolve_download_token(storage.create_download_token(name))


class TestMovingWindowLoginThrottle:
    def test_blocks_after_max_attempts(self) -> None:
        throttle = MovingWindowLoginThrottle(max_attempts=2, window_minutes=15)
        throttle.hit("ip:a@x.io")
        throttle.hit("ip:a@x.io")
        with pytest.raises(LoginThrottledError) as exc_info:
            throttle.hit("ip:a@x.io")
        assert exc_info.value.retry_after_seconds >= 1

    def test_keys_are_independent_and_reset_clears(self) -> None:
        throttle = MovingWindowLoginThrottle(max_attempts=1, window_minutes=15)
        throttle.hit("ip:a@x.io")
        throttle.hit("ip:b@x.io")
        throttle.reset("ip:a@x.io")
        throttle.hit("ip:a@x.io")


def _adapter(handler) -> BinanceMarketDataAdapter:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return BinanceMarketDataAdapter(base_url="https://binance.test", client=client)


class TestBinanceMarketDataAdapter:
    def test_tickers_skip_failing_symbols(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            symbol = request.url.params["symbol"]
            if symbol == "BADUSDT":
                return httpx.Response(400, json={"code": -1121, "msg": "Invalid symbol."})
            return httpx.Response(
                200,
                json={
                    "symbol": symbol,
                    "lastPrice": "64000.10",
                    "priceChangePercent": "-1.50",
                    "volume": "1234.5",
                },
            )

        tickers = _adapter(handler).get_tickers(["BTCUSDT", "BADUSDT"])
        assert len(tickers) == 1
        assert tickers[0].symbol == "BTCUSDT"
        assert tickers[0].price == Decimal("64000.10")
        assert tickers[0].change_percent == Decimal("-1.50")

    def test_tickers_raise_when_every_symbol_fails(self) -> None:
        adapter = _adapter(lambda request: httpx.Response(503))
        with pytest.raises(MarketDataUnavailableError):
            adapter.get_tickers(["BTCUSDT", "ETHUSDT"])

    def test_klines_are_parsed(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/v3/klines"
            assert request.url.params["interval"] == "4h"
            return httpx.Response(
                200,
                json=[[1704067200000, "1.0", "2.0", "0.5", "1.5", "99.0", 1704081599999]],
            )

        klines = _adapter(handler).get_klines("BTCUSDT", "4h", 1)
        assert klines[0].open_time.year == 2024
        assert klines[0].close == Decimal("1.5")
        assert klines[0].volume == Decimal("99.0")

    def test_klines_failure_raises(self) -> None:
        adapter = _adapter(lambda request: httpx.Response(500))
        with pytest.raises(MarketDataUnavailableError) as exc_info:
            adapter.get_klines("BTCUSDT", "1h", 10)
        assert exc_info.value.reason == "Failed to fetch historical data"


class TestVersionedWrites:
    @pytest.fixture
    def factory(self, tmp_path):
        engine = build_engine(f"sqlite:///{tmp_path / 'versions.db'}")
        init_db(engine)
        yield build_session_factory(engine)
        engine.dispose()

    def test_stale_user_write_is_rejected(self, factory, user) -> None:
        with SqlAlchemyUnitOfWork(factory) as uow:
            uow.users.add(user)
            uow.commit()

        first, second = SqlAlchemyUnitOfWork(factory), SqlAlchemyUnitOfWork(factory)
        with first, second:
            mine = first.users.get_by_id(user.id)
            theirs = second.users.get_by_id(user.id)

            mine.set_balance(Decimal("10"))
            first.users.save(mine)
            first.commit()

            theirs.set_balance(Decimal("99"))
            with pytest.raises(ConcurrentUpdateError) as exc_info:
                second.users.save(theirs)
            assert exc_info.value.resource_id == user.id

        with SqlAlchemyUnitOfWork(factory) as uow:
            assert uow.users.get_by_id(user.id).balance == Decimal("10")

    def test_stale_request_write_is_rejected(self, factory, user) -> None:
        request = TransactionRequest(
            user_id=user.id, type=RequestType.DEPOSIT, amount=Decimal("5")
        )
        with SqlAlchemyUnitOfWork(factory) as uow:
            uow.requests.add(request)
            uow.commit()

        first, second = SqlAlchemyUnitOfWork(factory), SqlAlchemyUnitOfWork(factory)
        with first, second:
            mine = first.requests.get_by_id(request.id)
            theirs = second.requests.get_by_id(request.id)

            mine.reason = "first"
            first.requests.save(mine)
            first.commit()

            theirs.reason = "second"
            with pytest.raises(ConcurrentUpdateError):
                second.requests.save(theirs)
