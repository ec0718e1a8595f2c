"""
FastAPI router for portfolio balance, positions and account overview.

All routes delegate to use cases. No business logic here.
"""

from decimal import Decimal

from fastapi import APIRouter, Depends, Query

from app.application.exchange.change_balance import ChangeBalanceUseCase
from app.application.exchange.dtos import BalanceChangeCommand, PortfolioView
from app.application.exchange.get_account_overview import GetAccountOverviewUseCase
from app.application.exchange.get_portfolio import GetPortfolioUseCase
from app.domain.exchange.entities import User
from app.interfaces.exchange.dependencies import (
    get_account_overview_use_case,
    get_change_balance_use_case,
    get_current_user,
    get_portfolio_use_case,
)
from app.interfaces.exchange.schemas import (
    AccountOverviewResponse,
    AssetSchema,
    BalanceChangeRequest,
    BalanceChangeResponse,
    ErrorResponse,
    OrderSchema,
    PortfolioResponse,
    TransactionHistorySchema,
    TransactionRequestSchema,
)

router = APIRouter(prefix="/portfolio", tags=["portfolio"])


def _portfolio_response(view: PortfolioView) -> PortfolioResponse:
    return PortfolioResponse(
        balance=float(view.balance),
        assets=[AssetSchema.from_entity(asset) for asset in view.assets],
        total_portfolio_value=float(view.total_portfolio_value),
    )


@router.get("", response_model=PortfolioResponse, summary="Balance and positions")
def get_portfolio(
    user: User = Depends(get_current_user),
    use_case: GetPortfolioUseCase = Depends(get_portfolio_use_case),
) -> PortfolioResponse:
    return _portfolio_response(use_case.execute(user.id))


@router.post(
    "",
    response_model=BalanceChangeResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Deposit or withdraw funds directly",
)
def change_balance(
    payload: BalanceChangeRequest,
    user: User = Depends(get_current_user),
    use_case: ChangeBalanceUseCase = Depends(get_change_balance_use_case),
) -> BalanceChangeResponse:
    result = use_case.execute(
        BalanceChangeCommand(
            user_id=user.id, type=payload.type, amount=Decimal(str(payload.amount))
        )
    )
    return BalanceChangeResponse(
        message=result.message, new_balance=float(result.new_balance)
    )


@router.get(
    "/transactions",
    response_model=AccountOverviewResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Portfolio, orders, requests and history",
    description="Admins may pass user_id to inspect another account.",
)
def get_account_overview(
    user_id: str | None = Query(default=None),
    user: User = Depends(get_current_user),
    use_case: GetAccountOverviewUseCase = Depends(get_account_overview_use_case),
) -> AccountOverviewResponse:
    overview = use_case.execute(user, user_id)
    return AccountOverviewResponse(
        portfolio=_portfolio_response(overview.portfolio),
        orders=[OrderSchema.from_entity(o) for o in overview.orders],
        requests=[TransactionRequestSchema.from_entity(r) for r in overview.requests],
        transaction_history=[
            TransactionHistorySchema.from_entity(h) for h in overview.transaction_history
        ],
    )
