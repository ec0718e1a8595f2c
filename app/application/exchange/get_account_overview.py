"""
Use case: Get a full account overview.

Input: the requesting user and an optional target user id.
Output: AccountOverview (portfolio, orders, requests, transaction history)
Side effects: None.
Failure cases: PermissionDeniedError when a non-admin asks for another
    account, UserNotFoundError.
"""

import logging
from typing import Optional

from app.application.exchange.dtos import AccountOverview
from app.application.exchange.get_portfolio import build_portfolio_view
from app.domain.exchange.entities import User
from app.domain.exchange.errors import PermissionDeniedError, UserNotFoundError
from app.domain.exchange.ports import UnitOfWork

logger = logging.getLogger(__name__)


class GetAccountOverviewUseCase:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def execute(
        self, requester: User, user_id: Optional[str] = None
    ) -> AccountOverview:
        target_id = user_id or requester.id
        if target_id != requester.id and not requester.is_admin:
            logger.warning(
                "User %s denied access to account %s", requester.id, target_id
            )
            raise PermissionDeniedError()

        with self._uow as uow:
            user = uow.users.get_by_id(target_id)
            if user is None:
                raise UserNotFoundError(target_id)
            return AccountOverview(
                portfolio=build_portfolio_view(
                    user, uow.assets.list_for_user(target_id)
                ),
                orders=uow.orders.list_for_user(target_id),
                requests=uow.requests.list_for_user(target_id),
                transaction_history=uow.history.list_for_user(target_id),
            )
