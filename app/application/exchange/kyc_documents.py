"""
Use cases: KYC document upload and time-limited download links.

Documents are uploaded by the account holder before submitting KYC; the
returned name goes into ``document_url`` or ``selfie_url``. Admins get a
short-lived download link to review them.
"""

import logging

from app.application.exchange.dtos import StoredDocument, UploadDocumentCommand
from app.domain.exchange.errors import ValidationFailedError
from app.domain.exchange.ports import DocumentStorage

logger = logging.getLogger(__name__)


class UploadKycDocumentUseCase:
    def __init__(self, storage: DocumentStorage) -> None:
        self._storage = storage

    @property
    def max_bytes(self) -> int:
        return self._storage.max_bytes

    def execute(self, command: UploadDocumentCommand) -> StoredDocument:
        name = self._storage.save(command.content, command.content_type)
        logger.info("User %s uploaded KYC document %s", command.user_id, name)
        return StoredDocument(file_name=name, content_type=command.content_type)


class CreateDocumentLinkUseCase:
    def __init__(self, storage: DocumentStorage) -> None:
        self._storage = storage

    def execute(self, name: str) -> str:
        """Return a download token for ``name``.

        Raises:
            ValidationFailedError: If no name is given.
            DocumentNotFoundError: If no such document is stored.
        """
        name = (name or "").strip()
        if not name:
            raise ValidationFailedError("File path is required")
        return self._storage.create_download_token(name)


class ResolveDocumentDownloadUseCase:
    def __init__(self, storage: DocumentStorage) -> None:
        self._storage = storage

    def execute(self, token: str) -> str:
        """Return the local path of the document the token grants."""
        return self._storage.path_for(self._storage.resolve_download_token(token))
