"""
Use case: Place a buy or sell order.

Input: PlaceOrderCommand (user_id, side, symbol, quantity, price,
    leverage, order_type)
Output: PlaceOrderResult (order, message)
Side effects:
    LIMIT  - stores the order as PENDING.
    MARKET - in one unit of work: moves the balance, creates/updates/
             deletes the asset position, stores the order FILLED, appends
             a history row, an audit log entry and an order alert.
Failure cases: ValidationFailedError, UserNotFoundError,
    InsufficientFundsError, InsufficientAssetError.
"""

import logging
from decimal import Decimal

from app.application.exchange.dtos import PlaceOrderCommand, PlaceOrderResult
from app.domain.exchange.entities import (
    Alert,
    AlertType,
    Asset,
    AuditLog,
    HistoryType,
    Order,
    OrderSide,
    OrderType,
    TransactionHistory,
    User,
)
from app.domain.exchange.errors import (
    InsufficientAssetError,
    InsufficientFundsError,
    UserNotFoundError,
    ValidationFailedError,
)
from app.domain.exchange.policies import (
    ensure_finite,
    format_money,
    format_quantity,
    parse_choice,
)
from app.domain.exchange.ports import UnitOfWork

logger = logging.getLogger(__name__)


class PlaceOrderUseCase:
    """Validates an order and, for market orders, settles it immediately.

    The order value is ``quantity * price`` and the margin required is
    ``value / leverage``. Every check runs before the first write, and all
    writes share one unit of work, so a rejected order changes nothing.
    """

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def execute(self, command: PlaceOrderCommand) -> PlaceOrderResult:
        side = parse_choice(OrderSide, command.side.strip().upper(), "order side")
        order_type = parse_choice(
            OrderType, command.order_type.strip().upper(), "order type"
        )
        symbol = command.symbol.strip().upper()
        if not symbol:
            raise ValidationFailedError("Symbol is required.")
        ensure_finite(
            quantity=command.quantity, price=command.price, leverage=command.leverage
        )
        for label, value in (
            ("quantity", command.quantity),
            ("price", command.price),
            ("leverage", command.leverage),
        ):
            if value <= 0:
                raise ValidationFailedError(f"Order {label} must be positive.")

        order = Order(
            user_id=command.user_id,
            side=side,
            symbol=symbol,
            quantity=command.quantity,
            price=command.price,
            order_type=order_type,
            leverage=command.leverage,
        )

        with self._uow as uow:
            user = uow.users.get_by_id(command.user_id)
            if user is None:
                raise UserNotFoundError(command.user_id)

            if side is OrderSide.BUY and user.balance < order.margin_required:
                raise InsufficientFundsError(
                    str(order.margin_required), str(user.balance)
                )

            if order_type is OrderType.LIMIT:
                uow.orders.add(order)
                uow.commit()
                logger.info("Limit order %s placed by %s", order.id, user.id)
                return PlaceOrderResult(
                    order=order, message="Limit order placed successfully"
                )

            self._execute_market(uow, user, order)
            uow.commit()

        logger.info(
            "Market %s %s %s @ %s executed for %s",
            order.side.value,
            order.quantity,
            order.symbol,
            order.price,
            order.user_id,
        )
        return PlaceOrderResult(order=order, message="Market order executed successfully")

    def _execute_market(self, uow: UnitOfWork, user: User, order: Order) -> None:
        balance_before = user.balance
        value = order.value
        position = uow.assets.get_for_user(user.id, order.symbol)

        if order.side is OrderSide.BUY:
            if balance_before < value:
                raise InsufficientFundsError(str(value), str(balance_before))
            balance_after = balance_before - value
            if position is None:
                uow.assets.add(
                    Asset(
                        user_id=user.id,
                        symbol=order.symbol,
                        quantity=order.quantity,
                        average_price=order.price,
                    )
                )
            else:
                position.add(order.quantity, order.price)
                uow.assets.save(position)
        else:
            if position is None:
                raise InsufficientAssetError(
                    order.symbol, "0", str(order.quantity), message="No asset to sell"
                )
            if position.quantity < order.quantity:
                raise InsufficientAssetError(
                    order.symbol, str(position.quantity), str(order.quantity)
                )
            balance_after = balance_before + value
            if position.reduce(order.quantity) <= Decimal("0"):
                uow.assets.delete(position.id)
            else:
                uow.assets.save(position)

        user.set_balance(balance_after)
        uow.users.save(user)

        order.fill()
        uow.orders.add(order)

        side = order.side.value
        quantity = format_quantity(order.quantity)
        uow.history.add(
            TransactionHistory(
                user_id=user.id,
                type=HistoryType(side.lower()),
                amount=value,
                symbol=order.symbol,
                quantity=order.quantity,
                price=order.price,
                description=(
                    f"Market {side} order for {quantity} {order.symbol} "
                    f"at {format_money(order.price)}"
                ),
                balance_before=balance_before,
                balance_after=balance_after,
            )
        )
        uow.audit_logs.add(
            AuditLog(
                user_id=user.id,
                action="market_order_executed",
                resource_type="order",
                resource_id=order.id,
                changes={
                    "symbol": order.symbol,
                    "side": side,
                    "quantity": str(order.quantity),
                    "price": str(order.price),
                    "leverage": str(order.leverage),
                    "order_value": str(value),
                    "balance_before": str(balance_before),
                    "balance_after": str(balance_after),
                },
            )
        )
        uow.alerts.add(
            Alert(
                user_id=user.id,
                type=AlertType.ORDER,
                title=f"Market {side} Order Executed",
                message=(
                    f"Your {side} order for {quantity} {order.symbol} at "
                    f"{format_money(order.price)} has been executed. "
                    f"Total: {format_money(value)}"
                ),
            )
        )
