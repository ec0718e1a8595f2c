"""
FastAPI router serving KYC documents through signed download links.

The link itself is the credential; no bearer token is needed.
"""

import mimetypes

from fastapi import APIRouter, Depends, Query
from fastapi.responses import FileResponse

from app.application.exchange.kyc_documents import ResolveDocumentDownloadUseCase
from app.interfaces.exchange.dependencies import get_resolve_document_use_case
from app.interfaces.exchange.schemas import ErrorResponse

router = APIRouter(prefix="/files", tags=["files"])


@router.get(
    "/download",
    response_class=FileResponse,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Download a KYC document",
)
def download(
    token: str = Query(..., min_length=1),
    use_case: ResolveDocumentDownloadUseCase = Depends(get_resolve_document_use_case),
) -> FileResponse:
    path = use_case.execute(token)
    media_type, _ = mimetypes.guess_type(path)
    return FileResponse(path, media_type=media_type or "application/octet-stream")
