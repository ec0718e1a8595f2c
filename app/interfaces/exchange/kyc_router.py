"""
FastAPI router for identity verification (KYC).

All routes delegate to use cases. No business logic here.
"""

from fastapi import APIRouter, Depends, File, UploadFile, status

from app.application.exchange.dtos import SubmitKycCommand, UploadDocumentCommand
from app.application.exchange.get_kyc_status import GetKycStatusUseCase
from app.application.exchange.kyc_documents import UploadKycDocumentUseCase
from app.application.exchange.submit_kyc import SubmitKycUseCase
from app.domain.exchange.entities import User
from app.interfaces.exchange.dependencies import (
    get_current_user,
    get_kyc_status_use_case,
    get_submit_kyc_use_case,
    get_upload_document_use_case,
)
from app.interfaces.exchange.schemas import (
    ErrorResponse,
    KycStatusResponse,
    KycSubmitRequest,
    KycSubmitResponse,
    UploadedDocumentResponse,
)

router = APIRouter(prefix="/kyc", tags=["kyc"])


@router.post(
    "",
    response_model=KycSubmitResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    summary="Submit KYC details",
)
def submit_kyc(
    payload: KycSubmitRequest,
    user: User = Depends(get_current_user),
    use_case: SubmitKycUseCase = Depends(get_submit_kyc_use_case),
) -> KycSubmitResponse:
    record = use_case.execute(SubmitKycCommand(user_id=user.id, **payload.model_dump()))
    return KycSubmitResponse(message="KYC submitted successfully", kyc_id=record.id)


@router.get("/status", response_model=KycStatusResponse, summary="My KYC status")
def kyc_status(
    user: User = Depends(get_current_user),
    use_case: GetKycStatusUseCase = Depends(get_kyc_status_use_case),
) -> KycStatusResponse:
    view = use_case.execute(user.id)
    return KycStatusResponse(status=view.status, missing_fields=view.missing_fields)


@router.post(
    "/uploads",
    response_model=UploadedDocumentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
    summary="Upload an identity document or selfie",
    description="Accepts JPEG, PNG, WebP or PDF. Returns the stored file name.",
)
def upload_document(
    file: UploadFile = File(...),
    user: User = Depends(get_current_user),
    use_case: UploadKycDocumentUseCase = Depends(get_upload_document_use_case),
) -> UploadedDocumentResponse:
    # One byte past the limit is enough for storage to reject an oversized file.
    content = file.file.read(use_case.max_bytes + 1)
    stored = use_case.execute(
        UploadDocumentCommand(
            user_id=user.id,
            content=content,
            content_type=file.content_type or "application/octet-stream",
        )
    )
    return UploadedDocumentResponse(
        file_name=stored.file_name, content_type=stored.content_type
    )
