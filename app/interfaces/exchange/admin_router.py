"""
FastAPI router for the admin console.

Every route requires an account whose stored roles include admin.
All routes delegate to use cases. No business logic here.
Mutating responses echo the request correlation id for support lookups.
"""

from decimal import Decimal

from fastapi import APIRouter, Depends, Query, status

from app.application.exchange.adjust_user_balance import AdjustUserBalanceUseCase
from app.application.exchange.dtos import (
    AdminBalanceCommand,
    CreateUserCommand,
    ProcessRequestCommand,
    RestoreAssetCommand,
    ReviewKycCommand,
    SeizeAssetsCommand,
    UpdateUserCommand,
)
from app.application.exchange.get_analytics import (
    GetAnalyticsUseCase,
    ListAuditLogsUseCase,
)
from app.application.exchange.kyc_documents import CreateDocumentLinkUseCase
from app.application.exchange.list_transaction_requests import (
    ListPendingRequestsUseCase,
)
from app.application.exchange.manage_user_assets import (
    RestoreAssetUseCase,
    SeizeAssetsUseCase,
)
from app.application.exchange.manage_users import (
    CreateUserUseCase,
    ListUsersUseCase,
    UpdateUserUseCase,
)
from app.application.exchange.process_transaction_request import (
    ProcessTransactionRequestUseCase,
)
from app.application.exchange.review_kyc import ListPendingKycUseCase, ReviewKycUseCase
from app.core.config import settings
from app.domain.exchange.entities import User
from app.interfaces.exchange.dependencies import (
    get_adjust_balance_use_case,
    get_analytics_use_case,
    get_audit_logs_use_case,
    get_create_user_use_case,
    get_document_link_use_case,
    get_list_pending_kyc_use_case,
    get_list_pending_requests_use_case,
    get_list_users_use_case,
    get_process_request_use_case,
    get_restore_asset_use_case,
    get_review_kyc_use_case,
    get_seize_assets_use_case,
    get_update_user_use_case,
    require_admin,
)
from app.interfaces.exchange.schemas import (
    AdminBalanceRequest,
    AdminBalanceResponse,
    AdminMessageResponse,
    AdminUserListResponse,
    AnalyticsResponse,
    AssetAdjustmentResponse,
    AuditLogListResponse,
    AuditLogSchema,
    CreateUserRequest,
    CreateUserResponse,
    DocumentLinkResponse,
    ErrorResponse,
    KycQueueResponse,
    KycRecordSchema,
    KycReviewRequest,
    MessageResponse,
    PendingRequestListResponse,
    PendingRequestSchema,
    ProcessRequestRequest,
    ProcessRequestResponse,
    RestoreAssetRequest,
    SeizeAssetsRequest,
    TransactionRequestSchema,
    UpdateUserRequest,
    UserSchema,
)
from app.shared.request_context import get_request_id

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    responses={401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)

DOWNLOAD_PATH = "/api/v1/files/download"


def _decimal(value: float | None) -> Decimal | None:
    return None if value is None else Decimal(str(value))


# --- Users ---


@router.get("/users", response_model=AdminUserListResponse, summary="List all users")
def list_users(
    admin: User = Depends(require_admin),
    use_case: ListUsersUseCase = Depends(get_list_users_use_case),
) -> AdminUserListResponse:
    users = [UserSchema.from_entity(user) for user in use_case.execute()]
    return AdminUserListResponse(
        users=users, total=len(users), correlation_id=get_request_id()
    )


@router.post(
    "/users",
    response_model=CreateUserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    summary="Create a user",
)
def create_user(
    payload: CreateUserRequest,
    admin: User = Depends(require_admin),
    use_case: CreateUserUseCase = Depends(get_create_user_use_case),
) -> CreateUserResponse:
    user = use_case.execute(
        CreateUserCommand(
            username=payload.username,
            email=payload.email,
            password=payload.password,
            role=payload.role,
            admin_id=admin.id,
        )
    )
    return CreateUserResponse(
        message="User created successfully",
        user=UserSchema.from_entity(user),
        correlation_id=get_request_id(),
    )


@router.put(
    "/users",
    response_model=AdminMessageResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Change a user's status or role",
)
def update_user(
    payload: UpdateUserRequest,
    admin: User = Depends(require_admin),
    use_case: UpdateUserUseCase = Depends(get_update_user_use_case),
) -> AdminMessageResponse:
    use_case.execute(
        UpdateUserCommand(
            user_id=payload.user_id,
            status=payload.status,
            role=payload.role,
            admin_id=admin.id,
        )
    )
    return AdminMessageResponse(
        message="User updated successfully", correlation_id=get_request_id()
    )


# --- Balances and assets ---


@router.post(
    "/balance",
    response_model=AdminBalanceResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Credit or debit a user's balance",
)
def adjust_balance(
    payload: AdminBalanceRequest,
    admin: User = Depends(require_admin),
    use_case: AdjustUserBalanceUseCase = Depends(get_adjust_balance_use_case),
) -> AdminBalanceResponse:
    new_balance = use_case.execute(
        AdminBalanceCommand(
            user_id=payload.user_id,
            amount=Decimal(str(payload.amount)),
            admin_id=admin.id,
            reason=payload.reason,
        )
    )
    return AdminBalanceResponse(
        message="Balance updated successfully",
        new_balance=float(new_balance),
        correlation_id=get_request_id(),
    )


@router.post(
    "/assets",
    response_model=AssetAdjustmentResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Seize one position or all positions",
)
def seize_assets(
    payload: SeizeAssetsRequest,
    admin: User = Depends(require_admin),
    use_case: SeizeAssetsUseCase = Depends(get_seize_assets_use_case),
) -> AssetAdjustmentResponse:
    result = use_case.execute(
        SeizeAssetsCommand(
            user_id=payload.user_id,
            symbol=payload.symbol,
            admin_id=admin.id,
            quantity=_decimal(payload.quantity),
        )
    )
    return AssetAdjustmentResponse(
        message=result.message, correlation_id=get_request_id()
    )


@router.put(
    "/assets",
    response_model=AssetAdjustmentResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Restore a position to a user",
)
def restore_asset(
    payload: RestoreAssetRequest,
    admin: User = Depends(require_admin),
    use_case: RestoreAssetUseCase = Depends(get_restore_asset_use_case),
) -> AssetAdjustmentResponse:
    result = use_case.execute(
        RestoreAssetCommand(
            user_id=payload.user_id,
            symbol=payload.symbol,
            quantity=Decimal(str(payload.quantity)),
            price=Decimal(str(payload.price)),
            admin_id=admin.id,
        )
    )
    return AssetAdjustmentResponse(
        message=result.message, correlation_id=get_request_id()
    )


# --- Transaction requests ---


@router.get(
    "/requests",
    response_model=PendingRequestListResponse,
    summary="Pending deposit/withdraw requests",
)
def list_pending_requests(
    admin: User = Depends(require_admin),
    use_case: ListPendingRequestsUseCase = Depends(get_list_pending_requests_use_case),
) -> PendingRequestListResponse:
    requests = [
        PendingRequestSchema(
            **TransactionRequestSchema.from_entity(view.request).model_dump(),
            username=view.username,
            email=view.email,
        )
        for view in use_case.execute()
    ]
    return PendingRequestListResponse(
        requests=requests, total=len(requests), correlation_id=get_request_id()
    )


@router.put(
    "/requests",
    response_model=ProcessRequestResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
    summary="Approve or reject a request",
    description="Approval moves the funds and marks the request executed.",
)
def process_request(
    payload: ProcessRequestRequest,
    admin: User = Depends(require_admin),
    use_case: ProcessTransactionRequestUseCase = Depends(get_process_request_use_case),
) -> ProcessRequestResponse:
    request = use_case.execute(
        ProcessRequestCommand(
            request_id=payload.request_id,
            action=payload.action,
            admin_id=admin.id,
            reason=payload.reason,
        )
    )
    verb = "approved and executed" if request.status.value == "executed" else "rejected"
    return ProcessRequestResponse(
        message=f"Request {verb} successfully",
        request=TransactionRequestSchema.from_entity(request),
        correlation_id=get_request_id(),
    )


# --- KYC ---


@router.get("/kyc", response_model=KycQueueResponse, summary="Pending KYC submissions")
def list_pending_kyc(
    admin: User = Depends(require_admin),
    use_case: ListPendingKycUseCase = Depends(get_list_pending_kyc_use_case),
) -> KycQueueResponse:
    return KycQueueResponse(
        kyc_requests=[KycRecordSchema.from_entity(r) for r in use_case.execute()]
    )


@router.put(
    "/kyc/{kyc_id}",
    response_model=MessageResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Approve or reject a KYC submission",
)
def review_kyc(
    kyc_id: str,
    payload: KycReviewRequest,
    admin: User = Depends(require_admin),
    use_case: ReviewKycUseCase = Depends(get_review_kyc_use_case),
) -> MessageResponse:
    record = use_case.execute(
        ReviewKycCommand(
            kyc_id=kyc_id, status=payload.status, admin_id=admin.id, reason=payload.reason
        )
    )
    return MessageResponse(message=f"KYC {record.status.value} successfully")


@router.get(
    "/files",
    response_model=DocumentLinkResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Signed download link for a KYC document",
)
def document_link(
    path: str = Query(default=""),
    admin: User = Depends(require_admin),
    use_case: CreateDocumentLinkUseCase = Depends(get_document_link_use_case),
) -> DocumentLinkResponse:
    token = use_case.execute(path)
    return DocumentLinkResponse(
        download_url=f"{DOWNLOAD_PATH}?token={token}",
        expires_in_seconds=settings.download_link_ttl_minutes * 60,
    )


# --- Reporting ---


@router.get("/analytics", response_model=AnalyticsResponse, summary="Platform counts")
def analytics(
    admin: User = Depends(require_admin),
    use_case: GetAnalyticsUseCase = Depends(get_analytics_use_case),
) -> AnalyticsResponse:
    view = use_case.execute()
    return AnalyticsResponse(
        total_users=view.total_users,
        total_orders=view.total_orders,
        pending_kyc=view.pending_kyc,
        approved_kyc=view.approved_kyc,
    )


@router.get("/audit-logs", response_model=AuditLogListResponse, summary="Audit trail")
def audit_logs(
    limit: int = Query(default=100),
    admin: User = Depends(require_admin),
    use_case: ListAuditLogsUseCase = Depends(get_audit_logs_use_case),
) -> AuditLogListResponse:
    logs = [AuditLogSchema.from_entity(entry) for entry in use_case.execute(limit)]
    return AuditLogListResponse(logs=logs, total=len(logs))
