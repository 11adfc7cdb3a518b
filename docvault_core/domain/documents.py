"""
Domain models for stored documents.

A DocumentRecord describes one blob: the user-supplied display name, the
server-generated storage key that locates the bytes, the size and the
creation time. Records are immutable once inserted.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterator

from pydantic import BaseModel, Field


class NewDocument(BaseModel):
    """Insert payload for the metadata store (id and creation time are assigned on insert)."""

    original_name: str = Field(..., description="User-supplied filename, display only")
    storage_key: str = Field(..., description="Server-generated key locating the blob")
    size_bytes: int = Field(..., gt=0, description="Size of the blob in bytes")

    model_config = {"frozen": True}


class DocumentRecord(NewDocument):
    """A persisted document record with its server-assigned id and creation time."""

    id: int = Field(..., description="Server-assigned, monotonically increasing id")
    created_at: datetime = Field(..., description="Assigned by the metadata store at insertion")

    def to_summary(self) -> dict:
        """Public representation used by the HTTP layer (storage key omitted)."""
        return {
            "id": self.id,
            "filename": self.original_name,
            "filesize": self.size_bytes,
            "created_at": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class DocumentDownload:
    """Display name plus a stream over the blob bytes."""

    original_name: str
    size_bytes: int
    stream: Iterator[bytes]


@dataclass(frozen=True)
class BlobInfo:
    """A blob as seen by the blob store, without any metadata knowledge."""

    key: str
    size_bytes: int
    modified_at: datetime
