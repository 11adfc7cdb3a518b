"""
Document service exceptions.

This module defines the error taxonomy of the document lifecycle. Validation
errors are raised before any store is touched; NotFoundError covers both an
absent record and a record whose blob is missing; StorageError wraps blob or
metadata I/O failures.
"""

from __future__ import annotations

from docvault_core.runtime.errors import ErrorCode, RetryableError, TerminalError


class InvalidContentTypeError(TerminalError):
    """Declared content type is not the accepted one."""

    def __init__(self, content_type: str | None, allowed: str):
        super().__init__(
            code=ErrorCode.INVALID_CONTENT_TYPE,
            message_safe=f"Only {allowed} files are allowed",
            message_debug=f"content_type={content_type!r}",
        )
        self.content_type = content_type


class SizeLimitExceededError(TerminalError):
    """Upload is larger than the configured maximum."""

    def __init__(self, size_bytes: int, limit: int):
        super().__init__(
            code=ErrorCode.SIZE_LIMIT_EXCEEDED,
            message_safe=f"File size exceeds {_format_limit(limit)} limit",
            message_debug=f"size_bytes={size_bytes} limit={limit}",
        )
        self.size_bytes = size_bytes
        self.limit = limit


class InvalidUploadError(TerminalError):
    """Upload is missing, empty, or its declared size does not match its content."""

    def __init__(self, message: str):
        super().__init__(code=ErrorCode.INVALID_UPLOAD, message_safe=message)


class NotFoundError(TerminalError):
    """Document (or its blob) does not exist."""

    def __init__(self, message: str = "Document not found", message_debug: str | None = None):
        super().__init__(
            code=ErrorCode.NOT_FOUND,
            message_safe=message,
            message_debug=message_debug,
        )


class StorageError(RetryableError):
    """Blob store or metadata store I/O failure."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(
            code=ErrorCode.STORAGE_ERROR,
            message_safe=message,
            message_debug=repr(cause) if cause else None,
            cause=cause,
        )


def _format_limit(limit: int) -> str:
    mib = limit / (1024 * 1024)
    if mib >= 1 and mib.is_integer():
        return f"{int(mib)}MB"
    return f"{limit} bytes"
