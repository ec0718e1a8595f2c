"""
Tests for the exchange domain layer.

Tests entities, policies and error classes in isolation.
No external dependencies or IO required.
"""

import random
from decimal import Decimal

import pytest

from app.domain.exchange.entities import (
    Asset,
    KycRecord,
    KycStatus,
    Order,
    OrderSide,
    OrderStatus,
    Role,
    User,
    UserStatus,
)
from app.domain.exchange.errors import (
    ConcurrentUpdateError,
    InsufficientAssetError,
    KycRequiredError,
    RequestAlreadyProcessedError,
    ValidationFailedError,
    WeakPasswordError,
)
from app.domain.exchange.policies import (
    REQUIRED_KYC_FIELDS,
    ensure_finite,
    evaluate_kyc,
    format_money,
    format_quantity,
    generate_username,
    parse_choice,
    validate_password,
)


def _complete_kyc(**overrides) -> KycRecord:
    fields = dict(
        user_id="u1",
        full_name="Ada Lovelace",
        date_of_birth="1815-12-10",
        address="12 St James's Square",
        document_url="kyc_abc.png",
    )
    fields.update(overrides)
    return KycRecord(**fields)


class TestUserEntity:
    def test_primary_role_is_first_granted(self) -> None:
        user = User(username="a", email="a@x.io", password_hash="h", roles=[Role.ADMIN, Role.TRADER])
        assert user.role is Role.ADMIN
        assert user.is_admin

    def test_user_without_roles_is_guest(self) -> None:
        user = User(username="a", email="a@x.io", password_hash="h", roles=[])
        assert user.role is Role.GUEST
        assert not user.is_admin

    def test_banned_user_is_not_active(self) -> None:
        user = User(username="a", email="a@x.io", password_hash="h", status=UserStatus.BANNED)
        assert not user.is_active

    def test_set_balance_stamps_update_time(self) -> None:
        user = User(username="a", email="a@x.io", password_hash="h")
        assert user.updated_at is None
        user.set_balance(Decimal("12.5"))
        assert user.balance == Decimal("12.5")
        assert user.updated_at is not None


class TestAssetEntity:
    def test_add_blends_average_price(self) -> None:
        asset = Asset(user_id="u1", symbol="BTCUSDT", quantity=Decimal("1"), average_price=Decimal("100"))
        asset.add(Decimal("1"), Decimal("200"))
        assert asset.quantity == Decimal("2")
        assert asset.average_price == Decimal("150")

    def test_reduce_keeps_average_price(self) -> None:
        asset = Asset(user_id="u1", symbol="BTCUSDT", quantity=Decimal("3"), average_price=Decimal("10"))
        remaining = asset.reduce(Decimal("1"))
        assert remaining == Decimal("2")
        assert asset.average_price == Decimal("10")

    def test_cost_basis(self) -> None:
        asset = Asset(user_id="u1", symbol="ETHUSDT", quantity=Decimal("0.5"), average_price=Decimal("3000"))
        assert asset.cost_basis == Decimal("1500.0")


class TestOrderEntity:
    def test_margin_required_divides_by_leverage(self) -> None:
        order = Order(
            user_id="u1",
            side=OrderSide.BUY,
            symbol="BTCUSDT",
            quantity=Decimal("2"),
            price=Decimal("100"),
            leverage=Decimal("4"),
        )
        assert order.value == Decimal("200")
        assert order.margin_required == Decimal("50")

    def test_fill_sets_executed_quantity(self) -> None:
        order = Order(user_id="u1", side=OrderSide.SELL, symbol="X", quantity=Decimal("3"), price=Decimal("1"))
        order.fill()
        assert order.status is OrderStatus.FILLED
        assert order.executed_quantity == Decimal("3")


class TestPasswordPolicy:
    def test_strong_password_accepted(self) -> None:
        validate_password("Sup3r!Secret")

    @pytest.mark.parametrize(
        "password",
        ["Sh0rt!", "alllowercase1!", "ALLUPPERCASE1!", "NoDigitsHere!", "NoSymbols123"],
    )
    def test_weak_passwords_rejected(self, password: str) -> None:
        with pytest.raises(WeakPasswordError):
            validate_password(password)


class TestGenerateUsername:
    def test_uses_local_part_and_four_digits(self) -> None:
        name = generate_username("jane.doe+x@example.com", random.Random(7))
        assert name.startswith("janedoex")
        suffix = name[len("janedoex"):]
        assert len(suffix) == 4 and suffix.isdigit()

    def test_falls_back_when_local_part_has_no_alphanumerics(self) -> None:
        assert generate_username("...@example.com", random.Random(1)).startswith("user")


class TestEvaluateKyc:
    def test_no_record_is_unsubmitted_with_every_field_missing(self) -> None:
        evaluation = evaluate_kyc(None)
        assert evaluation.status is KycStatus.UNSUBMITTED
        assert evaluation.missing_fields == list(REQUIRED_KYC_FIELDS.values())
        assert evaluation.label == "Not Verified"

    def test_incomplete_pending_record_counts_as_unsubmitted(self) -> None:
        evaluation = evaluate_kyc(_complete_kyc(document_url=None, address="  "))
        assert evaluation.status is KycStatus.UNSUBMITTED
        assert evaluation.missing_fields == ["address", "documentImage"]

    def test_complete_pending_record(self) -> None:
        evaluation = evaluate_kyc(_complete_kyc())
        assert evaluation.status is KycStatus.PENDING
        assert evaluation.missing_fields == []
        assert evaluation.label == "Pending Review"

    def test_approved_record_is_final_even_if_incomplete(self) -> None:
        evaluation = evaluate_kyc(_complete_kyc(document_url=None, status=KycStatus.APPROVED))
        assert evaluation.is_approved
        assert evaluation.missing_fields == []


class TestParseChoice:
    def test_returns_matching_member(self) -> None:
        assert parse_choice(Role, "guest", "role") is Role.GUEST

    def test_unknown_value_lists_allowed_values(self) -> None:
        with pytest.raises(ValidationFailedError) as exc_info:
            parse_choice(Role, "owner", "role")
        assert exc_info.value.message == "Invalid role. Must be one of: admin, trader, guest"


class TestEnsureFinite:
    def test_finite_and_missing_amounts_pass(self) -> None:
        ensure_finite(amount=Decimal("-12.5"), price=None)

    @pytest.mark.parametrize("raw", ["Infinity", "-Infinity", "NaN", "sNaN"])
    def test_non_finite_amount_rejected(self, raw) -> None:
        with pytest.raises(ValidationFailedError) as exc_info:
            ensure_finite(quantity=Decimal("1"), price=Decimal(raw))
        assert exc_info.value.message == "Price must be a finite number."


class TestFormatting:
    def test_format_quantity_strips_trailing_zeros(self) -> None:
        assert format_quantity(Decimal("0.0100000000")) == "0.01"
        assert format_quantity(Decimal("1E+2")) == "100"

    def test_format_money(self) -> None:
        assert format_money(Decimal("1234.5")) == "$1234.50"


class TestDomainErrors:
    def test_kyc_required_carries_status_and_missing_fields(self) -> None:
        exc = KycRequiredError("unsubmitted", ["fullName"])
        assert exc.kyc_status == "unsubmitted"
        assert exc.missing_fields == ["fullName"]

    def test_request_already_processed_message(self) -> None:
        assert RequestAlreadyProcessedError("r1", "executed").message == "Request already executed"

    def test_insufficient_asset_custom_message(self) -> None:
        exc = InsufficientAssetError("BTCUSDT", "0", "1", message="No asset to sell")
        assert str(exc) == "No asset to sell"

    def test_concurrent_update_names_the_resource(self) -> None:
        exc = ConcurrentUpdateError("User", "u1")
        assert exc.resource_id == "u1"
        assert exc.message == "User was modified concurrently; retry the operation"
