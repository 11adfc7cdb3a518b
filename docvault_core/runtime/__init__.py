"""
Service runtime layer for docvault.

- ServiceError: Standardized errors with retry semantics
- ErrorCode: Stable codes carried by every ServiceError
"""

from .errors import ErrorCode, RetryableError, ServiceError, TerminalError

__all__ = [
    "ErrorCode",
    "ServiceError",
    "RetryableError",
    "TerminalError",
]
