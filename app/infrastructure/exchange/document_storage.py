"""
Adapter: local KYC document storage.

Implements DocumentStorage port on the local filesystem. Documents are
stored under ``upload_dir`` with random names. Download links carry a
short-lived signed token (python-jose) naming the document.
"""

import logging
import os
from datetime import datetime, timedelta, timezone
from uuid import uuid4

from jose import JWTError, jwt

from app.domain.exchange.errors import (
    AuthenticationError,
    DocumentNotFoundError,
    InvalidDocumentError,
)
from app.domain.exchange.ports import DocumentStorage

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
DOWNLOAD_AUDIENCE = "luno-document"

ALLOWED_CONTENT_TYPES = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "application/pdf": ".pdf",
}


class LocalDocumentStorage(DocumentStorage):
    def __init__(
        self,
        upload_dir: str,
        secret: str,
        max_bytes: int,
        link_ttl: timedelta = timedelta(minutes=15),
    ) -> None:
        self._upload_dir = os.path.abspath(upload_dir)
        self._secret = secret
        self._max_bytes = max_bytes
        self._link_ttl = link_ttl

    @property
    def max_bytes(self) -> int:
        return self._max_bytes

    def save(self, content: bytes, content_type: str) -> str:
        extension = ALLOWED_CONTENT_TYPES.get(content_type)
        if extension is None:
            raise InvalidDocumentError(f"Unsupported file type: {content_type}")
        if not content:
            raise InvalidDocumentError("Uploaded file is empty")
        if len(content) > self._max_bytes:
            raise InvalidDocumentError(
                f"File exceeds the {self._max_bytes} byte limit"
            )

        os.makedirs(self._upload_dir, exist_ok=True)
        name = f"kyc_{uuid4().hex}{extension}"
        with open(os.path.join(self._upload_dir, name), "wb") as fh:
            fh.write(content)
        logger.info("Stored KYC document %s (%d bytes)", name, len(content))
        return name

    def path_for(self, name: str) -> str:
        # Names are flat; anything with a path component is rejected.
        if not name or os.path.basename(name) != name or name.startswith("."):
            raise DocumentNotFoundError(name)
        path = os.path.join(self._upload_dir, name)
        if not os.path.isfile(path):
            raise DocumentNotFoundError(name)
        return path

    def create_download_token(self, name: str) -> str:
        self.path_for(name)
        expires = datetime.now(timezone.utc) + self._link_ttl
        return jwt.encode(
            {"doc": name, "aud": DOWNLOAD_AUDIENCE, "exp": int(expires.timestamp())},
            self._secret,
            algorithm=ALGORITHM,
        )

    def resolve_download_token(self, token: str) -> str:
        try:
            payload = jwt.decode(
                token, self._secret, algorithms=[ALGORITHM], audience=DOWNLOAD_AUDIENCE
            )
        except JWTError as exc:
            raise AuthenticationError("Invalid or expired download link") from exc
        name = payload.get("doc")
        if not name:
            raise AuthenticationError("Invalid or expired download link")
        return name
