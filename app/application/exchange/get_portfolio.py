"""
Use case: Get the caller's balance and positions.

Input: user_id
Output: PortfolioView
Side effects: None.
Failure cases: UserNotFoundError.
"""

from decimal import Decimal

from app.application.exchange.dtos import PortfolioView
from app.domain.exchange.entities import Asset, User
from app.domain.exchange.errors import UserNotFoundError
from app.domain.exchange.ports import UnitOfWork


def build_portfolio_view(user: User, assets: list[Asset]) -> PortfolioView:
    """Value positions at their average price and add the cash balance."""
    asset_value = sum((asset.cost_basis for asset in assets), Decimal("0"))
    return PortfolioView(
        balance=user.balance,
        assets=assets,
        total_portfolio_value=user.balance + asset_value,
    )


class GetPortfolioUseCase:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def execute(self, user_id: str) -> PortfolioView:
        with self._uow as uow:
            user = uow.users.get_by_id(user_id)
            if user is None:
                raise UserNotFoundError(user_id)
            assets = uow.assets.list_for_user(user_id)
        return build_portfolio_view(user, assets)
