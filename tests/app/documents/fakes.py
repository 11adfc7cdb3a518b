"""
Fake implementations of the document store protocols for testing.
"""

import itertools
import threading
from datetime import datetime, timezone
from typing import Iterator

from app.documents.protocols import BlobStore, MetadataStore
from docvault_core.domain.documents import BlobInfo, DocumentRecord, NewDocument
from docvault_core.domain.exceptions import NotFoundError, StorageError


class FakeBlobStore(BlobStore):
    """Dict-backed blob store with switchable failures."""

    def __init__(self):
        self.blobs: dict[str, bytes] = {}
        self.modified: dict[str, datetime] = {}
        self.fail_store = False
        self.fail_delete = False
        self.store_calls: list[str] = []
        self.delete_calls: list[str] = []
        self._lock = threading.Lock()

    def store(self, key: str, content: bytes) -> None:
        self.store_calls.append(key)
        if self.fail_store:
            raise StorageError("Error saving document", cause=OSError("disk full"))
        with self._lock:
            if key in self.blobs:
                raise StorageError("Error saving document", cause=FileExistsError(key))
            self.blobs[key] = bytes(content)
            self.modified[key] = datetime.now(timezone.utc)

    def exists(self, key: str) -> bool:
        return key in self.blobs

    def retrieve(self, key: str) -> Iterator[bytes]:
        try:
            content = self.blobs[key]
        except KeyError:
            raise NotFoundError() from None
        return iter([content[i : i + 4096] for i in range(0, len(content), 4096)])

    def delete(self, key: str) -> None:
        self.delete_calls.append(key)
        if self.fail_delete:
            raise StorageError("Error deleting document", cause=OSError("read-only"))
        with self._lock:
            self.blobs.pop(key, None)
            self.modified.pop(key, None)

    def iter_blobs(self) -> Iterator[BlobInfo]:
        for key, content in list(self.blobs.items()):
            yield BlobInfo(key=key, size_bytes=len(content), modified_at=self.modified[key])


class FakeMetadataStore(MetadataStore):
    """In-memory record table with switchable failures."""

    def __init__(self):
        self.records: dict[int, DocumentRecord] = {}
        self.fail_insert = False
        self.fail_delete = False
        self.insert_calls = 0
        self.delete_calls: list[int] = []
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def insert(self, document: NewDocument) -> DocumentRecord:
        self.insert_calls += 1
        if self.fail_insert:
            raise StorageError("Error saving document metadata", cause=RuntimeError("db down"))
        with self._lock:
            if any(r.storage_key == document.storage_key for r in self.records.values()):
                raise StorageError("Error saving document metadata")
            record = DocumentRecord(
                id=next(self._ids),
                created_at=datetime.now(timezone.utc),
                **document.model_dump(),
            )
            self.records[record.id] = record
        return record

    def list_documents(self) -> list[DocumentRecord]:
        return sorted(
            self.records.values(),
            key=lambda r: (r.created_at, r.id),
            reverse=True,
        )

    def get_by_id(self, document_id: int) -> DocumentRecord:
        try:
            return self.records[document_id]
        except KeyError:
            raise NotFoundError() from None

    def delete_by_id(self, document_id: int) -> None:
        self.delete_calls.append(document_id)
        if self.fail_delete:
            raise StorageError("Error deleting document")
        with self._lock:
            if self.records.pop(document_id, None) is None:
                raise NotFoundError()
