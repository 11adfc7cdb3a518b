"""
DocumentService: create/read/delete lifecycle across the blob and metadata stores.

There is no transaction spanning the two stores. Consistency comes from the
order of the steps:

- upload writes the blob first and the record second; if the record insert
  fails the blob is deleted again (best effort). A crash in between leaves
  an orphaned blob, which is invisible to users and swept out-of-band.
- delete removes the blob first and the record second. A crash in between
  leaves a record without a blob, which download reports as not found.
- download checks that the blob exists before streaming it; a record whose
  blob is missing is logged as a data error and reported as not found.
"""

from __future__ import annotations

from typing import Iterable

from loguru import logger

from docvault_core.domain.documents import DocumentDownload, DocumentRecord, NewDocument
from docvault_core.domain.exceptions import InvalidUploadError, NotFoundError, StorageError

from app.documents.protocols import BlobStore, MetadataStore
from app.documents.services.naming import BlobNamer
from app.documents.services.validator import IngestValidator


class DocumentService:
    """
    Sole owner of the cross-store invariants.

    Usage:
        service = DocumentService(blob_store=LocalBlobStore(), metadata_store=DocumentRepository())
        record = service.upload("report.pdf", "application/pdf", content)
        download = service.download(record.id)
        service.delete(record.id)
    """

    def __init__(
        self,
        blob_store: BlobStore,
        metadata_store: MetadataStore,
        validator: IngestValidator | None = None,
        namer: BlobNamer | None = None,
    ):
        """
        Args:
            blob_store: Where document bytes are kept.
            metadata_store: Where document records are kept.
            validator: Upload policy (defaults to settings-based IngestValidator).
            namer: Storage key generator (defaults to BlobNamer).
        """
        self.blob_store = blob_store
        self.metadata_store = metadata_store
        self.validator = validator or IngestValidator()
        self.namer = namer or BlobNamer()

    def upload(
        self,
        original_name: str,
        content_type: str | None,
        content: bytes,
        size_bytes: int | None = None,
    ) -> DocumentRecord:
        """
        Validate, store and record a new document.

        Args:
            original_name: Filename supplied by the client (display only).
            content_type: Declared MIME type.
            content: Document bytes.
            size_bytes: Declared size (defaults to len(content)).

        Returns:
            DocumentRecord: The inserted record.

        Raises:
            InvalidContentTypeError, InvalidUploadError, SizeLimitExceededError:
                Rejected before any write.
            StorageError: Blob write or metadata insert failed.
        """
        if size_bytes is None:
            size_bytes = len(content)

        self.validator.validate(content_type, size_bytes)
        if len(content) != size_bytes:
            raise InvalidUploadError("Declared size does not match uploaded content")

        key = self.namer.name_for(original_name)
        self.blob_store.store(key, content)

        try:
            record = self.metadata_store.insert(
                NewDocument(
                    original_name=original_name,
                    storage_key=key,
                    size_bytes=size_bytes,
                )
            )
        except Exception as e:
            logger.warning(f"Metadata insert failed for blob {key}, removing blob")
            self._compensate_blob(key)
            if isinstance(e, StorageError):
                raise
            raise StorageError("Error saving document metadata", cause=e) from e

        logger.info(f"Uploaded document {record.id} '{original_name}' as {key}")
        return record

    def list_documents(self) -> Iterable[DocumentRecord]:
        """All records, newest first. Blob existence is not checked here."""
        return self.metadata_store.list_documents()

    def download(self, document_id: int) -> DocumentDownload:
        """
        Open a stored document for reading.

        Raises:
            NotFoundError: No record, or the record's blob is missing.
            StorageError: A store could not be read.
        """
        record = self.metadata_store.get_by_id(document_id)

        if not self.blob_store.exists(record.storage_key):
            logger.warning(
                f"Dangling record: document {record.id} points at missing blob {record.storage_key}"
            )
            raise NotFoundError(message_debug=f"blob {record.storage_key} missing")

        stream = self.blob_store.retrieve(record.storage_key)
        return DocumentDownload(
            original_name=record.original_name,
            size_bytes=record.size_bytes,
            stream=stream,
        )

    def delete(self, document_id: int) -> None:
        """
        Delete a document's blob, then its record.

        Raises:
            NotFoundError: No record with this id; nothing is deleted.
            StorageError: The record could not be deleted.
        """
        record = self.metadata_store.get_by_id(document_id)

        try:
            self.blob_store.delete(record.storage_key)
        except StorageError as e:
            logger.warning(
                f"Blob delete failed for document {record.id} ({record.storage_key}): {e}"
            )

        self.metadata_store.delete_by_id(document_id)
        logger.info(f"Deleted document {record.id} ({record.storage_key})")

    def _compensate_blob(self, key: str) -> None:
        try:
            self.blob_store.delete(key)
        except Exception as e:
            # Never mask the insert failure; the orphan is left for reconciliation.
            logger.error(f"Compensating delete failed, orphaned blob {key}: {e}")
