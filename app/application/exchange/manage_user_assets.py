"""
Use cases: Admin asset seizure and restoration.

SeizeAssetsUseCase removes one position, part of one, or every position
("ALL") from a user. RestoreAssetUseCase adds units back at a given price,
blending into an existing position's average price. Both run in one unit
of work and notify the user with a system alert.
"""

import logging

from app.application.exchange.dtos import (
    AssetAdjustmentResult,
    RestoreAssetCommand,
    SeizeAssetsCommand,
)
from app.domain.exchange.entities import Alert, AlertType, Asset, AuditLog
from app.domain.exchange.errors import (
    AssetNotFoundError,
    InsufficientAssetError,
    UserNotFoundError,
    ValidationFailedError,
)
from app.domain.exchange.policies import ensure_finite, format_money, format_quantity
from app.domain.exchange.ports import UnitOfWork

logger = logging.getLogger(__name__)

ALL_ASSETS = "ALL"


def _base_asset(symbol: str) -> str:
    return symbol.removesuffix("USDT") or symbol


class SeizeAssetsUseCase:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def execute(self, command: SeizeAssetsCommand) -> AssetAdjustmentResult:
        symbol = command.symbol.strip().upper()
        if not symbol:
            raise ValidationFailedError(
                'symbol is required (use "ALL" to seize all assets)'
            )
        ensure_finite(quantity=command.quantity)
        if command.quantity is not None and command.quantity <= 0:
            raise ValidationFailedError("quantity must be positive")
        if symbol == ALL_ASSETS and command.quantity is not None:
            raise ValidationFailedError("quantity cannot be combined with ALL")

        with self._uow as uow:
            if uow.users.get_by_id(command.user_id) is None:
                raise UserNotFoundError(command.user_id)

            holdings = uow.assets.list_for_user(command.user_id)
            if not holdings:
                raise ValidationFailedError("User has no assets to seize")

            if symbol == ALL_ASSETS:
                targets = holdings
            else:
                targets = [asset for asset in holdings if asset.symbol == symbol]
                if not targets:
                    raise AssetNotFoundError(
                        command.user_id, symbol, "Asset not found for user"
                    )

            seized = {}
            for asset in targets:
                amount = command.quantity or asset.quantity
                if amount > asset.quantity:
                    raise InsufficientAssetError(
                        asset.symbol, str(asset.quantity), str(amount)
                    )
                if asset.reduce(amount) <= 0:
                    uow.assets.delete(asset.id)
                else:
                    uow.assets.save(asset)
                seized[asset.symbol] = amount

            uow.audit_logs.add(
                AuditLog(
                    user_id=command.user_id,
                    admin_id=command.admin_id,
                    action="asset_seized",
                    resource_type="asset",
                    resource_id=command.user_id,
                    changes={sym: str(qty) for sym, qty in seized.items()},
                )
            )
            described = ", ".join(
                f"{format_quantity(qty)} {_base_asset(sym)}" for sym, qty in seized.items()
            )
            uow.alerts.add(
                Alert(
                    user_id=command.user_id,
                    type=AlertType.SYSTEM,
                    title="Assets Seized",
                    message=f"An administrator removed {described} from your account.",
                )
            )
            uow.commit()

        logger.info(
            "Admin %s seized %s from %s", command.admin_id, list(seized), command.user_id
        )
        label = "all assets" if symbol == ALL_ASSETS else symbol
        return AssetAdjustmentResult(
            message=f"Successfully seized {label} from user",
            affected_symbols=list(seized),
        )


class RestoreAssetUseCase:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def execute(self, command: RestoreAssetCommand) -> AssetAdjustmentResult:
        symbol = command.symbol.strip().upper()
        if not symbol:
            raise ValidationFailedError("symbol is required")
        ensure_finite(quantity=command.quantity, price=command.price)
        if command.quantity <= 0:
            raise ValidationFailedError("quantity must be positive")
        if command.price <= 0:
            raise ValidationFailedError("price must be positive")

        with self._uow as uow:
            if uow.users.get_by_id(command.user_id) is None:
                raise UserNotFoundError(command.user_id)

            position = uow.assets.get_for_user(command.user_id, symbol)
            if position is None:
                uow.assets.add(
                    Asset(
                        user_id=command.user_id,
                        symbol=symbol,
                        quantity=command.quantity,
                        average_price=command.price,
                    )
                )
            else:
                position.add(command.quantity, command.price)
                uow.assets.save(position)

            uow.audit_logs.add(
                AuditLog(
                    user_id=command.user_id,
                    admin_id=command.admin_id,
                    action="asset_restored",
                    resource_type="asset",
                    resource_id=command.user_id,
                    changes={
                        "symbol": symbol,
                        "quantity": str(command.quantity),
                        "price": str(command.price),
                    },
                )
            )
            quantity = format_quantity(command.quantity)
            uow.alerts.add(
                Alert(
                    user_id=command.user_id,
                    type=AlertType.SYSTEM,
                    title="Assets Restored",
                    message=(
                        f"{quantity} {_base_asset(symbol)} was restored to your "
                        f"account at {format_money(command.price)}."
                    ),
                )
            )
            uow.commit()

        logger.info(
            "Admin %s restored %s %s to %s",
            command.admin_id,
            command.quantity,
            symbol,
            command.user_id,
        )
        return AssetAdjustmentResult(
            message=f"Successfully restored {quantity} {_base_asset(symbol)} to user",
            affected_symbols=[symbol],
        )
