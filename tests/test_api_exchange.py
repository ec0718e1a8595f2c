"""
Tests for the exchange API endpoints.

Runs the real FastAPI application against an in-memory database.
Validates request validation, response schemas, auth and error mapping.
"""

import pytest

from app.shared.security.rate_limiting import MovingWindowLoginThrottle
from app.interfaces.exchange import dependencies
from app.main import app

PASSWORD = "Sup3r!Secret"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"0" * 32

KYC_FORM = {
    "full_name": "Grace Hopper",
    "date_of_birth": "1906-12-09",
    "address": "1 Navy Way",
    "id_type": "passport",
    "id_number": "X123",
}


def _order(client, headers, **overrides):
    payload = {"type": "BUY", "symbol": "BTCUSDT", "quantity": 0.01, "price": 50000}
    payload.update(overrides)
    return client.post("/api/v1/orders", json=payload, headers=headers)


def _send_raw(client, method: str, path: str, body: str, headers: dict):
    """Send a literal JSON body so tokens like Infinity reach the server untouched."""
    return client.request(
        method, path, content=body, headers={**headers, "Content-Type": "application/json"}
    )


@pytest.fixture
def verified_trader(client, trader_headers, admin_headers) -> dict:
    """A trader whose KYC (with an uploaded document) is approved."""
    upload = client.post(
        "/api/v1/kyc/uploads",
        files={"file": ("passport.png", PNG_BYTES, "image/png")},
        headers=trader_headers,
    )
    assert upload.status_code == 201, upload.text
    form = dict(KYC_FORM, document_url=upload.json()["file_name"])
    kyc_id = client.post("/api/v1/kyc", json=form, headers=trader_headers).json()["kyc_id"]
    resp = client.put(
        f"/api/v1/admin/kyc/{kyc_id}", json={"status": "approved"}, headers=admin_headers
    )
    assert resp.status_code == 200, resp.text
    return trader_headers


class TestHealthAndMiddleware:
    def test_health(self, client) -> None:
        resp = client.get("/api/v1/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"
        assert resp.json()["database"] == "up"

    def test_security_headers_present(self, client) -> None:
        resp = client.get("/api/v1/health")
        assert resp.headers["X-Content-Type-Options"] == "nosniff"
        assert resp.headers["X-Frame-Options"] == "DENY"
        assert resp.headers["Cache-Control"] == "no-store"
        assert "Content-Security-Policy" in resp.headers

    def test_request_id_is_echoed(self, client) -> None:
        resp = client.get("/api/v1/health", headers={"X-Request-ID": "req-42"})
        assert resp.headers["X-Request-ID"] == "req-42"

    def test_request_id_is_generated(self, client) -> None:
        assert client.get("/api/v1/health").headers["X-Request-ID"]


class TestAuthEndpoints:
    def test_signup_returns_user_id(self, client) -> None:
        resp = client.post(
            "/api/v1/auth/signup",
            json={"name": "Ada", "email": "ada@luno.test", "password": PASSWORD},
        )
        assert resp.status_code == 201
        assert resp.json()["message"] == "User created successfully"
        assert resp.json()["user_id"]

    def test_duplicate_signup_conflicts(self, client, trader_headers) -> None:
        resp = client.post(
            "/api/v1/auth/signup",
            json={"name": "Again", "email": "TRADER@luno.test", "password": PASSWORD},
        )
        assert resp.status_code == 409
        assert resp.json()["error"] == "User with this email already exists"

    def test_weak_password_is_400(self, client) -> None:
        resp = client.post(
            "/api/v1/auth/signup",
            json={"name": "Ada", "email": "ada@luno.test", "password": "password"},
        )
        assert resp.status_code == 400

    def test_missing_fields_is_422(self, client) -> None:
        assert client.post("/api/v1/auth/signup", json={"email": "a@b.io"}).status_code == 422

    def test_login_returns_session(self, client, trader_headers) -> None:
        resp = client.post(
            "/api/v1/auth/login", json={"email": "trader@luno.test", "password": PASSWORD}
        )
        body = resp.json()
        assert resp.status_code == 200
        assert body["token_type"] == "bearer"
        assert body["user"]["role"] == "trader"
        assert body["user"]["balance"] == 1000.0
        assert "password_hash" not in body["user"]

    def test_bad_credentials_are_401(self, client, trader_headers) -> None:
        resp = client.post(
            "/api/v1/auth/login", json={"email": "trader@luno.test", "password": "Nope!12345"}
        )
        assert resp.status_code == 401
        assert resp.json()["error"] == "Invalid email or password"

    def test_login_throttle_returns_429_with_retry_after(self, client, trader_headers) -> None:
        strict_throttle = MovingWindowLoginThrottle(max_attempts=2, window_minutes=15)
        app.dependency_overrides[dependencies.get_login_throttle] = (
            lambda: strict_throttle
        )
        payload = {"email": "trader@luno.test", "password": "Nope!12345"}
        for _ in range(2):
            assert client.post("/api/v1/auth/login", json=payload).status_code == 401
        resp = client.post("/api/v1/auth/login", json=payload)
        assert resp.status_code == 429
        assert int(resp.headers["Retry-After"]) >= 1

    def test_refresh_session(self, client, trader_headers) -> None:
        login = client.post(
            "/api/v1/auth/login", json={"email": "trader@luno.test", "password": PASSWORD}
        ).json()
        resp = client.post(
            "/api/v1/auth/session", json={"refresh_token": login["refresh_token"]}
        )
        assert resp.status_code == 200
        me = client.get(
            "/api/v1/auth/me",
            headers={"Authorization": f"Bearer {resp.json()['access_token']}"},
        )
        assert me.json()["email"] == "trader@luno.test"

    def test_access_token_cannot_refresh(self, client, trader_headers) -> None:
        token = trader_headers["Authorization"].split()[1]
        resp = client.post("/api/v1/auth/session", json={"refresh_token": token})
        assert resp.status_code == 401

    def test_change_password(self, client, trader_headers) -> None:
        wrong = client.post(
            "/api/v1/auth/change-password",
            json={"current_password": "Nope!12345", "new_password": "N3w!Password"},
            headers=trader_headers,
        )
        assert wrong.status_code == 400
        ok = client.post(
            "/api/v1/auth/change-password",
            json={"current_password": PASSWORD, "new_password": "N3w!Password"},
            headers=trader_headers,
        )
        assert ok.status_code == 200
        relogin = client.post(
            "/api/v1/auth/login",
            json={"email": "trader@luno.test", "password": "N3w!Password"},
        )
        assert relogin.status_code == 200


class TestAuthorization:
    @pytest.mark.parametrize(
        "method, path",
        [
            ("get", "/api/v1/portfolio"),
            ("get", "/api/v1/orders"),
            ("get", "/api/v1/alerts"),
            ("get", "/api/v1/profile"),
            ("get", "/api/v1/admin/users"),
        ],
    )
    def test_missing_token_is_401(self, client, method, path) -> None:
        resp = getattr(client, method)(path)
        assert resp.status_code == 401
        assert resp.headers["WWW-Authenticate"] == "Bearer"

    def test_garbage_token_is_401(self, client) -> None:
        resp = client.get("/api/v1/portfolio", headers={"Authorization": "Bearer nope"})
        assert resp.status_code == 401

    def test_trader_cannot_use_admin_routes(self, client, trader_headers) -> None:
        assert client.get("/api/v1/admin/users", headers=trader_headers).status_code == 403
        assert client.get("/api/v1/admin/analytics", headers=trader_headers).status_code == 403

    def test_banned_user_is_locked_out_immediately(
        self, client, trader_headers, admin_headers
    ) -> None:
        user_id = client.get("/api/v1/auth/me", headers=trader_headers).json()["id"]
        resp = client.put(
            "/api/v1/admin/users",
            json={"user_id": user_id, "status": "banned"},
            headers=admin_headers,
        )
        assert resp.status_code == 200
        blocked = client.get("/api/v1/portfolio", headers=trader_headers)
        assert blocked.status_code == 403
        assert blocked.json()["error"] == "Account banned"


class TestOrdersEndpoint:
    def test_market_buy_then_portfolio(self, client, trader_headers) -> None:
        resp = _order(client, trader_headers)
        body = resp.json()
        assert resp.status_code == 200
        assert body["success"] is True
        assert body["order"]["status"] == "FILLED"
        assert body["order"]["type"] == "BUY"

        portfolio = client.get("/api/v1/portfolio", headers=trader_headers).json()
        assert portfolio["balance"] == pytest.approx(500.0)
        assert portfolio["assets"][0]["symbol"] == "BTCUSDT"
        assert portfolio["total_portfolio_value"] == pytest.approx(1000.0)

        orders = client.get("/api/v1/orders", headers=trader_headers).json()["orders"]
        assert len(orders) == 1

    def test_insufficient_balance_is_400(self, client, trader_headers) -> None:
        resp = _order(client, trader_headers, quantity=1)
        assert resp.status_code == 400
        assert resp.json()["error"] == "Insufficient balance"

    def test_sell_without_position_is_400(self, client, trader_headers) -> None:
        resp = _order(client, trader_headers, type="SELL", symbol="ETHUSDT")
        assert resp.status_code == 400
        assert resp.json()["error"] == "No asset to sell"

    def test_negative_quantity_is_422(self, client, trader_headers) -> None:
        assert _order(client, trader_headers, quantity=-1).status_code == 422

    def test_unknown_side_is_400(self, client, trader_headers) -> None:
        assert _order(client, trader_headers, type="HOLD").status_code == 400

    @pytest.mark.parametrize(
        "field, token",
        [("price", "Infinity"), ("quantity", "NaN"), ("leverage", "Infinity")],
    )
    def test_non_finite_numbers_are_422(self, client, trader_headers, field, token) -> None:
        values = {"quantity": "0.01", "price": "50000", "leverage": "1"}
        values[field] = token
        body = (
            '{"type": "BUY", "symbol": "BTCUSDT", '
            f'"quantity": {values["quantity"]}, "price": {values["price"]}, '
            f'"leverage": {values["leverage"]}}}'
        )
        resp = _send_raw(client, "POST", "/api/v1/orders", body, trader_headers)
        assert resp.status_code == 422

        portfolio = client.get("/api/v1/portfolio", headers=trader_headers).json()
        assert portfolio["balance"] == pytest.approx(1000.0)
        assert portfolio["assets"] == []

    def test_cancel_limit_order(self, client, trader_headers) -> None:
        order = _order(client, trader_headers, order_type="LIMIT").json()["order"]
        assert order["status"] == "PENDING"

        payload = {"order_id": order["id"], "action": "CANCEL"}
        resp = client.put("/api/v1/orders", json=payload, headers=trader_headers)
        assert resp.status_code == 200
        assert resp.json()["order"]["status"] == "CANCELLED"

        again = client.put("/api/v1/orders", json=payload, headers=trader_headers)
        assert again.status_code == 409

    def test_cancel_unknown_order_is_404(self, client, trader_headers) -> None:
        resp = client.put(
            "/api/v1/orders",
            json={"order_id": "missing", "action": "CANCEL"},
            headers=trader_headers,
        )
        assert resp.status_code == 404


class TestPortfolioEndpoint:
    def test_direct_deposit(self, client, trader_headers) -> None:
        resp = client.post(
            "/api/v1/portfolio",
            json={"type": "deposit", "amount": 250},
            headers=trader_headers,
        )
        assert resp.status_code == 200
        assert resp.json() == {"message": "Deposit successful", "new_balance": 1250.0}

    @pytest.mark.parametrize("token", ["Infinity", "-Infinity", "NaN"])
    def test_non_finite_amount_is_422(self, client, trader_headers, token) -> None:
        body = f'{{"type": "deposit", "amount": {token}}}'
        resp = _send_raw(client, "POST", "/api/v1/portfolio", body, trader_headers)
        assert resp.status_code == 422

        balance = client.get("/api/v1/portfolio", headers=trader_headers).json()["balance"]
        assert balance == pytest.approx(1000.0)

    def test_overview_of_other_user_requires_admin(
        self, client, trader_headers, admin_headers
    ) -> None:
        admin_id = client.get("/api/v1/auth/me", headers=admin_headers).json()["id"]
        resp = client.get(
            f"/api/v1/portfolio/transactions?user_id={admin_id}", headers=trader_headers
        )
        assert resp.status_code == 403

    def test_overview_lists_history(self, client, trader_headers) -> None:
        _order(client, trader_headers)
        body = client.get("/api/v1/portfolio/transactions", headers=trader_headers).json()
        assert len(body["orders"]) == 1
        assert body["transaction_history"][0]["type"] == "buy"


class TestKycAndRequestFlow:
    def test_request_without_kyc_is_403_with_details(self, client, trader_headers) -> None:
        resp = client.post(
            "/api/v1/requests", json={"type": "deposit", "amount": 100}, headers=trader_headers
        )
        body = resp.json()
        assert resp.status_code == 403
        assert body["kyc_status"] == "unsubmitted"
        assert "documentImage" in body["missing_fields"]

    def test_kyc_status_and_duplicate_submission(self, client, trader_headers) -> None:
        form = dict(KYC_FORM, document_url="kyc_any.png")
        assert client.post("/api/v1/kyc", json=form, headers=trader_headers).status_code == 201

        status = client.get("/api/v1/kyc/status", headers=trader_headers).json()
        assert status == {"status": "Pending Review", "missing_fields": []}

        assert client.post("/api/v1/kyc", json=form, headers=trader_headers).status_code == 409

    def test_upload_rejects_unsupported_type(self, client, trader_headers) -> None:
        resp = client.post(
            "/api/v1/kyc/uploads",
            files={"file": ("notes.txt", b"hello", "text/plain")},
            headers=trader_headers,
        )
        assert resp.status_code == 400

    def test_upload_over_size_limit_is_400(self, client, trader_headers, storage) -> None:
        oversized = PNG_BYTES + b"0" * (storage.max_bytes * 2)
        resp = client.post(
            "/api/v1/kyc/uploads",
            files={"file": ("passport.png", oversized, "image/png")},
            headers=trader_headers,
        )
        assert resp.status_code == 400
        assert resp.json()["error"] == f"File exceeds the {storage.max_bytes} byte limit"

    def test_withdraw_request_above_balance_is_400(
        self, client, verified_trader, admin_headers
    ) -> None:
        resp = client.post(
            "/api/v1/requests", json={"type": "withdraw", "amount": 5000}, headers=verified_trader
        )
        assert resp.status_code == 400
        assert resp.json()["error"] == "Insufficient balance"

        pending = client.get("/api/v1/admin/requests", headers=admin_headers).json()
        assert pending["total"] == 0

    def test_non_finite_request_amount_is_422(self, client, verified_trader) -> None:
        body = '{"type": "deposit", "amount": Infinity}'
        resp = _send_raw(client, "POST", "/api/v1/requests", body, verified_trader)
        assert resp.status_code == 422

    def test_deposit_request_approved_by_admin(
        self, client, verified_trader, admin_headers
    ) -> None:
        submitted = client.post(
            "/api/v1/requests", json={"type": "deposit", "amount": 500}, headers=verified_trader
        )
        assert submitted.status_code == 200
        assert submitted.json()["request"]["status"] == "pending"

        pending = client.get("/api/v1/admin/requests", headers=admin_headers).json()
        assert pending["total"] == 1
        assert pending["requests"][0]["email"] == "trader@luno.test"
        assert pending["correlation_id"]

        request_id = pending["requests"][0]["id"]
        resp = client.put(
            "/api/v1/admin/requests",
            json={"request_id": request_id, "action": "approve"},
            headers=admin_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["request"]["status"] == "executed"

        balance = client.get("/api/v1/portfolio", headers=verified_trader).json()["balance"]
        assert balance == pytest.approx(1500.0)

        again = client.put(
            "/api/v1/admin/requests",
            json={"request_id": request_id, "action": "approve"},
            headers=admin_headers,
        )
        assert again.status_code == 409
        assert again.json()["error"] == "Request already executed"

    def test_reject_without_reason_is_400(
        self, client, verified_trader, admin_headers
    ) -> None:
        request_id = client.post(
            "/api/v1/requests", json={"type": "withdraw", "amount": 10}, headers=verified_trader
        ).json()["request"]["id"]
        resp = client.put(
            "/api/v1/admin/requests",
            json={"request_id": request_id, "action": "reject"},
            headers=admin_headers,
        )
        assert resp.status_code == 400

    def test_unknown_request_is_404(self, client, admin_headers) -> None:
        resp = client.put(
            "/api/v1/admin/requests",
            json={"request_id": "missing", "action": "approve"},
            headers=admin_headers,
        )
        assert resp.status_code == 404

    def test_admin_downloads_document(self, client, trader_headers, admin_headers) -> None:
        name = client.post(
            "/api/v1/kyc/uploads",
            files={"file": ("id.png", PNG_BYTES, "image/png")},
            headers=trader_headers,
        ).json()["file_name"]

        link = client.get(f"/api/v1/admin/files?path={name}", headers=admin_headers).json()
        assert link["download_url"].startswith("/api/v1/files/download?token=")
        assert link["expires_in_seconds"] == 900

        resp = client.get(link["download_url"])
        assert resp.status_code == 200
        assert resp.content == PNG_BYTES

    def test_bad_download_token_is_401(self, client) -> None:
        assert client.get("/api/v1/files/download?token=bogus").status_code == 401

    def test_kyc_queue_and_rejection(self, client, trader_headers, admin_headers) -> None:
        form = dict(KYC_FORM, document_url="kyc_any.png")
        client.post("/api/v1/kyc", json=form, headers=trader_headers)
        queue = client.get("/api/v1/admin/kyc", headers=admin_headers).json()["kyc_requests"]
        assert len(queue) == 1

        kyc_id = queue[0]["id"]
        no_reason = client.put(
            f"/api/v1/admin/kyc/{kyc_id}", json={"status": "rejected"}, headers=admin_headers
        )
        assert no_reason.status_code == 400
        resp = client.put(
            f"/api/v1/admin/kyc/{kyc_id}",
            json={"status": "rejected", "reason": "Blurry photo"},
            headers=admin_headers,
        )
        assert resp.json()["message"] == "KYC rejected successfully"
        status = client.get("/api/v1/kyc/status", headers=trader_headers).json()
        assert status["status"] == "Rejected"


class TestAdminEndpoints:
    def test_list_and_create_users(self, client, admin_headers) -> None:
        created = client.post(
            "/api/v1/admin/users",
            json={"username": "bob", "email": "bob@luno.test", "password": PASSWORD},
            headers=admin_headers,
        )
        assert created.status_code == 201
        assert created.json()["user"]["roles"] == ["trader"]
        assert created.json()["user"]["balance"] == 0.0

        users = client.get("/api/v1/admin/users", headers=admin_headers).json()
        assert users["total"] == 2

        duplicate = client.post(
            "/api/v1/admin/users",
            json={"username": "bob", "email": "bob@luno.test", "password": PASSWORD},
            headers=admin_headers,
        )
        assert duplicate.status_code == 409

    def test_update_user_validates_role(self, client, trader_headers, admin_headers) -> None:
        user_id = client.get("/api/v1/auth/me", headers=trader_headers).json()["id"]
        resp = client.put(
            "/api/v1/admin/users",
            json={"user_id": user_id, "role": "owner"},
            headers=admin_headers,
        )
        assert resp.status_code == 400
        empty = client.put(
            "/api/v1/admin/users", json={"user_id": user_id}, headers=admin_headers
        )
        assert empty.json()["error"] == "No updateable fields provided"

    def test_balance_adjustment(self, client, trader_headers, admin_headers) -> None:
        user_id = client.get("/api/v1/auth/me", headers=trader_headers).json()["id"]
        resp = client.post(
            "/api/v1/admin/balance",
            json={"user_id": user_id, "amount": 100, "reason": "Promo"},
            headers=admin_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["new_balance"] == pytest.approx(1100.0)

        overdraw = client.post(
            "/api/v1/admin/balance",
            json={"user_id": user_id, "amount": -5000},
            headers=admin_headers,
        )
        assert overdraw.status_code == 400
        assert overdraw.json()["error"] == "Insufficient balance for debit"

    def test_non_finite_admin_amounts_are_422(
        self, client, trader_headers, admin_headers
    ) -> None:
        user_id = client.get("/api/v1/auth/me", headers=trader_headers).json()["id"]
        calls = [
            ("POST", "/api/v1/admin/balance", f'{{"user_id": "{user_id}", "amount": -Infinity}}'),
            ("POST", "/api/v1/admin/balance", f'{{"user_id": "{user_id}", "amount": NaN}}'),
            (
                "PUT",
                "/api/v1/admin/assets",
                f'{{"user_id": "{user_id}", "symbol": "BTCUSDT", "quantity": 1, "price": Infinity}}',
            ),
            (
                "POST",
                "/api/v1/admin/assets",
                f'{{"user_id": "{user_id}", "symbol": "BTCUSDT", "quantity": NaN}}',
            ),
        ]
        for method, path, body in calls:
            resp = _send_raw(client, method, path, body, admin_headers)
            assert resp.status_code == 422, (method, path, resp.text)

        portfolio = client.get("/api/v1/portfolio", headers=trader_headers).json()
        assert portfolio["balance"] == pytest.approx(1000.0)
        assert portfolio["assets"] == []

    def test_restore_and_seize_assets(self, client, trader_headers, admin_headers) -> None:
        user_id = client.get("/api/v1/auth/me", headers=trader_headers).json()["id"]
        restore = client.put(
            "/api/v1/admin/assets",
            json={"user_id": user_id, "symbol": "BTCUSDT", "quantity": 1, "price": 100},
            headers=admin_headers,
        )
        assert restore.status_code == 200
        assert restore.json()["message"] == "Successfully restored 1 BTC to user"

        missing = client.post(
            "/api/v1/admin/assets",
            json={"user_id": user_id, "symbol": "ETHUSDT"},
            headers=admin_headers,
        )
        assert missing.status_code == 404

        seize = client.post(
            "/api/v1/admin/assets",
            json={"user_id": user_id, "symbol": "ALL"},
            headers=admin_headers,
        )
        assert seize.status_code == 200
        assert client.get("/api/v1/portfolio", headers=trader_headers).json()["assets"] == []

        empty = client.post(
            "/api/v1/admin/assets",
            json={"user_id": user_id, "symbol": "ALL"},
            headers=admin_headers,
        )
        assert empty.status_code == 400

    def test_analytics_and_audit_logs(self, client, trader_headers, admin_headers) -> None:
        _order(client, trader_headers)
        stats = client.get("/api/v1/admin/analytics", headers=admin_headers).json()
        assert stats == {"total_users": 2, "total_orders": 1, "pending_kyc": 0, "approved_kyc": 0}

        logs = client.get("/api/v1/admin/audit-logs?limit=5", headers=admin_headers).json()
        actions = [entry["action"] for entry in logs["logs"]]
        assert "market_order_executed" in actions
        assert "user_created" in actions


class TestAccountEndpoints:
    def test_alerts_read_and_delete(self, client, trader_headers) -> None:
        _order(client, trader_headers)
        alerts = client.get("/api/v1/alerts", headers=trader_headers).json()
        assert alerts["unread_count"] == 1
        alert_id = alerts["alerts"][0]["id"]

        resp = client.post(
            "/api/v1/alerts",
            json={"alert_id": alert_id, "action": "read"},
            headers=trader_headers,
        )
        assert resp.json() == {"message": "Alert marked as read", "success": True}

        client.post(
            "/api/v1/alerts",
            json={"alert_id": alert_id, "action": "delete"},
            headers=trader_headers,
        )
        assert client.get("/api/v1/alerts", headers=trader_headers).json()["total"] == 0

    def test_unknown_alert_is_404(self, client, trader_headers) -> None:
        resp = client.post(
            "/api/v1/alerts",
            json={"alert_id": "missing", "action": "read"},
            headers=trader_headers,
        )
        assert resp.status_code == 404

    def test_activity_log(self, client, trader_headers) -> None:
        entries = client.get("/api/v1/activity-log", headers=trader_headers).json()
        actions = {entry["action"] for entry in entries}
        assert {"Account Created", "User Login"} <= actions

    def test_profile(self, client, trader_headers, admin_headers) -> None:
        trader = client.get("/api/v1/profile", headers=trader_headers).json()
        assert trader["tier"] == "Standard Trader"
        assert trader["fee_discount"] == "0%"
        assert trader["auth_status"] == "Not Verified"
        assert trader["security_score"] == "Low"

        admin = client.get("/api/v1/profile", headers=admin_headers).json()
        assert admin["tier"] == "Platinum Trader"
        assert admin["fee_discount"] == "20%"


class TestMarketEndpoints:
    def test_prices_strip_quote_asset(self, client) -> None:
        tickers = client.get("/api/v1/market/prices").json()
        assert tickers[0] == {"symbol": "BTC", "price": 100.5, "change": 1.25, "volume": 42.0}

    def test_prices_fall_back_when_provider_is_down(self, client, market) -> None:
        market.fail_tickers = True
        tickers = client.get("/api/v1/market/prices").json()
        assert len(tickers) == 10

    def test_klines(self, client) -> None:
        resp = client.get("/api/v1/market/klines?symbol=ETHUSDT&interval=1d&limit=10")
        assert resp.status_code == 200
        assert resp.json()[0]["date"] == 1704067200000

    def test_klines_bad_interval_is_400(self, client) -> None:
        assert client.get("/api/v1/market/klines?interval=7h").status_code == 400

    def test_klines_provider_failure_is_502(self, client, market) -> None:
        market.fail_klines = True
        resp = client.get("/api/v1/market/klines")
        assert resp.status_code == 502
        assert resp.json()["error"] == "Failed to fetch market data"
