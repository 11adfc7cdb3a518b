from .documents import BlobInfo, DocumentDownload, DocumentRecord, NewDocument
from .exceptions import (
    InvalidContentTypeError,
    InvalidUploadError,
    NotFoundError,
    SizeLimitExceededError,
    StorageError,
)

__all__ = [
    "BlobInfo",
    "DocumentDownload",
    "DocumentRecord",
    "NewDocument",
    "InvalidContentTypeError",
    "InvalidUploadError",
    "NotFoundError",
    "SizeLimitExceededError",
    "StorageError",
]
