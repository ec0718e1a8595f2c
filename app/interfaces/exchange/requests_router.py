"""
FastAPI router for deposit/withdraw requests awaiting admin approval.

All routes delegate to use cases. No business logic here.
"""

from decimal import Decimal

from fastapi import APIRouter, Depends

from app.application.exchange.dtos import SubmitRequestCommand
from app.application.exchange.list_transaction_requests import (
    ListTransactionRequestsUseCase,
)
from app.application.exchange.submit_transaction_request import (
    SubmitTransactionRequestUseCase,
)
from app.domain.exchange.entities import User
from app.interfaces.exchange.dependencies import (
    get_current_user,
    get_list_requests_use_case,
    get_submit_request_use_case,
)
from app.interfaces.exchange.schemas import (
    ErrorResponse,
    SubmitTransactionRequest,
    SubmitTransactionResponse,
    TransactionRequestListResponse,
    TransactionRequestSchema,
)

router = APIRouter(prefix="/requests", tags=["requests"])


@router.get("", response_model=TransactionRequestListResponse, summary="List my requests")
def list_requests(
    user: User = Depends(get_current_user),
    use_case: ListTransactionRequestsUseCase = Depends(get_list_requests_use_case),
) -> TransactionRequestListResponse:
    return TransactionRequestListResponse(
        requests=[
            TransactionRequestSchema.from_entity(r) for r in use_case.execute(user.id)
        ]
    )


@router.post(
    "",
    response_model=SubmitTransactionResponse,
    responses={400: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
    summary="Request a deposit or withdrawal",
    description="Requires approved KYC. An admin executes or rejects the request.",
)
def submit_request(
    payload: SubmitTransactionRequest,
    user: User = Depends(get_current_user),
    use_case: SubmitTransactionRequestUseCase = Depends(get_submit_request_use_case),
) -> SubmitTransactionResponse:
    request = use_case.execute(
        SubmitRequestCommand(
            user_id=user.id, type=payload.type, amount=Decimal(str(payload.amount))
        )
    )
    return SubmitTransactionResponse(
        message=(
            f"{payload.type.capitalize()} request submitted successfully for review."
        ),
        request=TransactionRequestSchema.from_entity(request),
    )
