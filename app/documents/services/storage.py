"""
Blob store backends for document persistence.

This module provides:
- MinIOBlobStore: Object storage backend using MinIO
- get_blob_store: Factory function to get the configured backend

The backend is selected based on the USE_LOCAL_STORAGE setting.
"""

from __future__ import annotations

import io
from typing import Iterator

from loguru import logger
from minio.error import S3Error

from docvault_core.config import settings
from docvault_core.domain.documents import BlobInfo
from docvault_core.domain.exceptions import NotFoundError, StorageError
from docvault_core.infrastructure.minio import get_minio_client

from app.documents.protocols import BlobStore

_MISSING_OBJECT_CODES = {"NoSuchKey", "NoSuchObject", "ResourceNotFound"}


class MinIOBlobStore:
    """
    MinIO-based blob store.

    Objects are stored flat in one bucket, named by storage key. S3 puts
    are whole-object writes, so readers never see partial content.

    S3 has no create-only put, so store() checks for the key first and
    refuses to overwrite. Two writers racing on the same key between that
    check and the put can still overwrite each other; keys carry a random
    token, and UNIQUE(storage_key) rejects the second record.

    Implements the BlobStore protocol.

    Usage:
        store = MinIOBlobStore()
        store.store("report-1718000000000-3f2a9c1b7d4e.pdf", content)
    """

    def __init__(self, bucket: str | None = None, chunk_size: int | None = None):
        self._client = get_minio_client()
        self.bucket = bucket or settings.MINIO_BUCKET_DOCUMENTS
        self.chunk_size = chunk_size or settings.DOWNLOAD_CHUNK_SIZE
        self.content_type = settings.ALLOWED_CONTENT_TYPE

        self.ensure_bucket_exists(self.bucket)

    def ensure_bucket_exists(self, bucket_name: str) -> None:
        """Create bucket if it doesn't exist."""
        try:
            if not self._client.bucket_exists(bucket_name):
                self._client.make_bucket(bucket_name)
                logger.info(f"Created MinIO bucket '{bucket_name}'")
        except Exception as e:
            logger.warning(f"Could not ensure bucket '{bucket_name}' exists: {e}")

    def store(self, key: str, content: bytes) -> None:
        """
        Upload content under key.

        Raises:
            StorageError: The key is taken or the upload failed.
        """
        if self.exists(key):
            logger.error(f"Storage key collision for {self.bucket}/{key}")
            raise StorageError("Error saving document", cause=FileExistsError(key))

        logger.info(f"Uploading blob to {self.bucket}/{key}")
        try:
            self._client.put_object(
                bucket_name=self.bucket,
                object_name=key,
                data=io.BytesIO(content),
                length=len(content),
                content_type=self.content_type,
            )
        except Exception as e:
            logger.error(f"Failed to upload blob {key}: {e}")
            raise StorageError("Error saving document", cause=e) from e

    def exists(self, key: str) -> bool:
        try:
            self._client.stat_object(self.bucket, key)
        except S3Error as e:
            if e.code in _MISSING_OBJECT_CODES:
                return False
            raise StorageError("Error reading document", cause=e) from e
        except Exception as e:
            raise StorageError("Error reading document", cause=e) from e
        return True

    def retrieve(self, key: str) -> Iterator[bytes]:
        """
        Open the object and return an iterator over its chunks.

        Raises:
            NotFoundError: No object under key.
            StorageError: The object could not be fetched.
        """
        try:
            response = self._client.get_object(self.bucket, key)
        except S3Error as e:
            if e.code in _MISSING_OBJECT_CODES:
                raise NotFoundError(message_debug=f"object {key} missing") from e
            raise StorageError("Error reading document", cause=e) from e
        except Exception as e:
            raise StorageError("Error reading document", cause=e) from e

        logger.info(f"Streaming {self.bucket}/{key}")
        return self._iter_response(response)

    def delete(self, key: str) -> None:
        """Delete the object; S3 deletes of absent keys succeed."""
        logger.info(f"Deleting {self.bucket}/{key}")
        try:
            self._client.remove_object(self.bucket, key)
        except S3Error as e:
            if e.code in _MISSING_OBJECT_CODES:
                return
            raise StorageError("Error deleting document", cause=e) from e
        except Exception as e:
            raise StorageError("Error deleting document", cause=e) from e

    def iter_blobs(self) -> Iterator[BlobInfo]:
        try:
            for obj in self._client.list_objects(self.bucket, recursive=True):
                yield BlobInfo(
                    key=obj.object_name,
                    size_bytes=obj.size,
                    modified_at=obj.last_modified,
                )
        except S3Error as e:
            logger.error(f"Failed to list bucket {self.bucket}: {e}")
            raise StorageError("Error listing documents", cause=e) from e

    def _iter_response(self, response) -> Iterator[bytes]:
        try:
            yield from response.stream(self.chunk_size)
        finally:
            response.close()
            response.release_conn()


def get_blob_store() -> BlobStore:
    """
    Factory function to get the configured blob store.

    Uses the USE_LOCAL_STORAGE setting to choose between the filesystem
    and MinIO backends.

    Returns:
        BlobStore: The configured blob store instance.
    """
    if settings.USE_LOCAL_STORAGE:
        from .local_storage import LocalBlobStore

        logger.info("Using LocalBlobStore backend")
        return LocalBlobStore()

    logger.info("Using MinIOBlobStore backend")
    return MinIOBlobStore()
