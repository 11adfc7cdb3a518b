"""
Document module protocols.

The document service talks to exactly two stores. The blob store knows
nothing about metadata and the metadata store knows nothing about bytes;
only DocumentService coordinates them.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Protocol, runtime_checkable

from docvault_core.domain.documents import BlobInfo, DocumentRecord, NewDocument


@runtime_checkable
class BlobStore(Protocol):
    """Durable whole-object storage of raw bytes under a storage key."""

    def store(self, key: str, content: bytes) -> None:
        """
        Write the full content under key.

        Readers never observe partial content. An existing key, or any I/O
        failure, raises StorageError and leaves nothing under key.
        """
        ...

    def exists(self, key: str) -> bool:
        """Return True if a blob is stored under key."""
        ...

    def retrieve(self, key: str) -> Iterator[bytes]:
        """Return an iterator over the blob's bytes; NotFoundError if absent."""
        ...

    def delete(self, key: str) -> None:
        """Remove the blob. Deleting an absent key is not an error."""
        ...

    def iter_blobs(self) -> Iterator[BlobInfo]:
        """Yield every stored blob (used for out-of-band reconciliation)."""
        ...


@runtime_checkable
class MetadataStore(Protocol):
    """Durable table of document records keyed by server-assigned id."""

    def insert(self, document: NewDocument) -> DocumentRecord:
        """Insert a record and return it with its assigned id."""
        ...

    def list_documents(self) -> Iterable[DocumentRecord]:
        """Restartable iterable of records, newest first."""
        ...

    def get_by_id(self, document_id: int) -> DocumentRecord:
        """Return the record; NotFoundError if absent."""
        ...

    def delete_by_id(self, document_id: int) -> None:
        """Delete the record; NotFoundError if absent."""
        ...
