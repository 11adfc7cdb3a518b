"""
Documents module factory.

Builds the blob store, metadata store and DocumentService once per process
and hands them out through FastAPI dependencies.
"""

from __future__ import annotations

from datetime import timedelta
from functools import lru_cache

from app.documents.protocols import BlobStore, MetadataStore
from app.documents.services.document_service import DocumentService
from app.documents.services.metadata_repository import get_document_repository
from app.documents.services.reconcile import StorageReconciler
from app.documents.services.storage import get_blob_store


@lru_cache()
def get_blob_store_service() -> BlobStore:
    """Get the configured blob store instance."""
    return get_blob_store()


@lru_cache()
def get_metadata_store() -> MetadataStore:
    """Get the metadata store, creating its schema on first use."""
    repository = get_document_repository()
    repository.ensure_schema()
    return repository


def get_document_service() -> DocumentService:
    """
    Get the document service.

    Wires up dependencies: BlobStore, MetadataStore.
    """
    return DocumentService(
        blob_store=get_blob_store_service(),
        metadata_store=get_metadata_store(),
    )


def get_storage_reconciler(grace: timedelta | None = None) -> StorageReconciler:
    """Get a reconciler over the configured stores."""
    return StorageReconciler(
        blob_store=get_blob_store_service(),
        metadata_store=get_metadata_store(),
        grace=grace,
    )
