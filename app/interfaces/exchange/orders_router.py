"""
FastAPI router for orders.

All routes delegate to use cases. No business logic here.
"""

from decimal import Decimal

from fastapi import APIRouter, Depends

from app.application.exchange.cancel_order import CancelOrderUseCase
from app.application.exchange.dtos import CancelOrderCommand, PlaceOrderCommand
from app.application.exchange.list_orders import ListOrdersUseCase
from app.application.exchange.place_order import PlaceOrderUseCase
from app.domain.exchange.entities import User
from app.interfaces.exchange.dependencies import (
    get_cancel_order_use_case,
    get_current_user,
    get_list_orders_use_case,
    get_place_order_use_case,
)
from app.interfaces.exchange.schemas import (
    CancelOrderRequest,
    CancelOrderResponse,
    ErrorResponse,
    OrderListResponse,
    OrderSchema,
    PlaceOrderRequest,
    PlaceOrderResponse,
)

router = APIRouter(prefix="/orders", tags=["orders"])


@router.get("", response_model=OrderListResponse, summary="List my orders")
def list_orders(
    user: User = Depends(get_current_user),
    use_case: ListOrdersUseCase = Depends(get_list_orders_use_case),
) -> OrderListResponse:
    return OrderListResponse(
        orders=[OrderSchema.from_entity(order) for order in use_case.execute(user.id)]
    )


@router.post(
    "",
    response_model=PlaceOrderResponse,
    responses={400: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
    summary="Place an order",
    description=(
        "MARKET orders settle immediately at the given price. "
        "LIMIT orders are stored as PENDING."
    ),
)
def place_order(
    payload: PlaceOrderRequest,
    user: User = Depends(get_current_user),
    use_case: PlaceOrderUseCase = Depends(get_place_order_use_case),
) -> PlaceOrderResponse:
    result = use_case.execute(
        PlaceOrderCommand(
            user_id=user.id,
            side=payload.type,
            symbol=payload.symbol,
            quantity=Decimal(str(payload.quantity)),
            price=Decimal(str(payload.price)),
            leverage=Decimal(str(payload.leverage)),
            order_type=payload.order_type,
        )
    )
    return PlaceOrderResponse(
        success=result.success,
        order=OrderSchema.from_entity(result.order),
        message=result.message,
    )


@router.put(
    "",
    response_model=CancelOrderResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    summary="Cancel a pending order",
)
def cancel_order(
    payload: CancelOrderRequest,
    user: User = Depends(get_current_user),
    use_case: CancelOrderUseCase = Depends(get_cancel_order_use_case),
) -> CancelOrderResponse:
    order = use_case.execute(CancelOrderCommand(user_id=user.id, order_id=payload.order_id))
    return CancelOrderResponse(
        message="Order cancelled successfully", order=OrderSchema.from_entity(order)
    )
