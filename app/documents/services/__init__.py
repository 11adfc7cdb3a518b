# Document services

from .naming import BlobNamer
from .validator import IngestValidator
from .local_storage import LocalBlobStore
from .storage import MinIOBlobStore, get_blob_store
from .metadata_repository import DocumentListing, DocumentRepository
from .document_service import DocumentService
from .reconcile import ReconciliationReport, StorageReconciler

__all__ = [
    # Leaf components
    "BlobNamer",
    "IngestValidator",
    # Blob stores
    "LocalBlobStore",
    "MinIOBlobStore",
    "get_blob_store",
    # Metadata store
    "DocumentListing",
    "DocumentRepository",
    # Orchestration
    "DocumentService",
    "ReconciliationReport",
    "StorageReconciler",
]
