"""
Standardized error model with retry semantics.

Every failure that leaves the document service is a ServiceError carrying a
stable machine-readable code, so callers (and the HTTP layer) branch on the
error kind rather than on message text.
"""

from __future__ import annotations

import uuid
from typing import Any


class ServiceError(Exception):
    """Standardized service error with retry classification.

    Attributes:
        code: Error code for programmatic handling.
        message_safe: Safe message for logging and user display.
        message_debug: Optional detailed message for debugging.
        retryable: Whether the caller may retry the operation.
        cause: Optional underlying exception.
        debug_id: Unique identifier for support correlation.
    """

    def __init__(
        self,
        code: str,
        message_safe: str,
        message_debug: str | None = None,
        retryable: bool = False,
        cause: Exception | None = None,
        debug_id: str | None = None,
    ):
        super().__init__(message_safe)
        self.code = code
        self.message_safe = message_safe
        self.message_debug = message_debug
        self.retryable = retryable
        self.cause = cause
        self.debug_id = debug_id or str(uuid.uuid4())[:8]

    def __str__(self) -> str:
        return f"[{self.code}] {self.message_safe}"

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(code={self.code!r}, "
            f"message_safe={self.message_safe!r}, "
            f"retryable={self.retryable}, "
            f"debug_id={self.debug_id!r})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for API responses.

        Returns:
            Dictionary with error details (excludes debug info).
        """
        return {
            "code": self.code,
            "message": self.message_safe,
            "debug_id": self.debug_id,
        }


class RetryableError(ServiceError):
    """Error for transient failures; retrying is the caller's decision."""

    def __init__(
        self,
        code: str,
        message_safe: str,
        message_debug: str | None = None,
        cause: Exception | None = None,
        debug_id: str | None = None,
    ):
        super().__init__(
            code=code,
            message_safe=message_safe,
            message_debug=message_debug,
            retryable=True,
            cause=cause,
            debug_id=debug_id,
        )


class TerminalError(ServiceError):
    """Error that will fail the same way on retry (bad input, missing resource)."""

    def __init__(
        self,
        code: str,
        message_safe: str,
        message_debug: str | None = None,
        cause: Exception | None = None,
        debug_id: str | None = None,
    ):
        super().__init__(
            code=code,
            message_safe=message_safe,
            message_debug=message_debug,
            retryable=False,
            cause=cause,
            debug_id=debug_id,
        )


class ErrorCode:
    """Stable error codes exposed to callers."""

    # Validation (raised before any write)
    INVALID_CONTENT_TYPE = "INVALID_CONTENT_TYPE"
    INVALID_UPLOAD = "INVALID_UPLOAD"
    SIZE_LIMIT_EXCEEDED = "SIZE_LIMIT_EXCEEDED"

    # Lookup
    NOT_FOUND = "NOT_FOUND"

    # Blob or metadata I/O
    STORAGE_ERROR = "STORAGE_ERROR"

    # Internal
    INTERNAL_ERROR = "INTERNAL_ERROR"
