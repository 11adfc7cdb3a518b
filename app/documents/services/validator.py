"""
Upload validation.

Checks the declared content type and byte size of an upload. Runs before
any blob or metadata write, so a rejection has no side effects.
"""

from __future__ import annotations

from loguru import logger

from docvault_core.config import settings
from docvault_core.domain.exceptions import (
    InvalidContentTypeError,
    InvalidUploadError,
    SizeLimitExceededError,
)


class IngestValidator:
    """
    Validates uploads against a single accepted content type and a size cap.

    Usage:
        validator = IngestValidator()
        validator.validate("application/pdf", 1024)
    """

    def __init__(
        self,
        allowed_content_type: str | None = None,
        max_bytes: int | None = None,
    ):
        self.allowed_content_type = _normalize(
            allowed_content_type or settings.ALLOWED_CONTENT_TYPE
        )
        self.max_bytes = max_bytes if max_bytes is not None else settings.MAX_UPLOAD_BYTES

    def validate(self, content_type: str | None, size_bytes: int) -> None:
        """
        Validate an upload before it is stored.

        Args:
            content_type: Declared MIME type (parameters are ignored).
            size_bytes: Declared size of the content.

        Raises:
            InvalidContentTypeError: Content type is not the accepted one.
            InvalidUploadError: Upload is empty.
            SizeLimitExceededError: Upload is larger than max_bytes.
        """
        if _normalize(content_type) != self.allowed_content_type:
            logger.info(f"Rejected upload with content type {content_type!r}")
            raise InvalidContentTypeError(content_type, self.allowed_content_type)

        if size_bytes <= 0:
            raise InvalidUploadError("Uploaded file is empty")

        if size_bytes > self.max_bytes:
            logger.info(f"Rejected upload of {size_bytes} bytes (limit {self.max_bytes})")
            raise SizeLimitExceededError(size_bytes, self.max_bytes)


def _normalize(content_type: str | None) -> str:
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()
