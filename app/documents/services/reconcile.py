"""
Out-of-band consistency checks between the blob store and the metadata store.

Finds records whose blob is missing (dangling records, reported only) and
blobs that no record references (orphaned blobs, optionally deleted).
Blobs younger than the grace period are skipped, so an upload between its
blob write and its record insert is never mistaken for an orphan.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from loguru import logger
from pydantic import BaseModel, Field

from docvault_core.config import settings
from docvault_core.domain.exceptions import StorageError

from app.documents.protocols import BlobStore, MetadataStore


class ReconciliationReport(BaseModel):
    """Result of a reconciliation scan (and optional sweep)."""

    checked_records: int = 0
    checked_blobs: int = 0
    dangling_records: list[int] = Field(default_factory=list)
    orphaned_blobs: list[str] = Field(default_factory=list)
    swept_blobs: list[str] = Field(default_factory=list)
    sweep_failures: list[str] = Field(default_factory=list)
    cutoff: datetime


class StorageReconciler:
    """
    Compares both stores and reports invariant violations.

    Usage:
        reconciler = StorageReconciler(blob_store, metadata_store)
        report = reconciler.scan()
        reconciler.sweep(report)
    """

    def __init__(
        self,
        blob_store: BlobStore,
        metadata_store: MetadataStore,
        grace: timedelta | None = None,
    ):
        self.blob_store = blob_store
        self.metadata_store = metadata_store
        self.grace = grace if grace is not None else timedelta(minutes=settings.ORPHAN_GRACE_MINUTES)

    def scan(self) -> ReconciliationReport:
        cutoff = datetime.now(timezone.utc) - self.grace
        report = ReconciliationReport(cutoff=cutoff)

        referenced: set[str] = set()
        for record in self.metadata_store.list_documents():
            report.checked_records += 1
            referenced.add(record.storage_key)
            if not self.blob_store.exists(record.storage_key):
                logger.warning(
                    f"Dangling record: document {record.id} points at missing blob {record.storage_key}"
                )
                report.dangling_records.append(record.id)

        for blob in self.blob_store.iter_blobs():
            report.checked_blobs += 1
            if blob.key in referenced or blob.modified_at >= cutoff:
                continue
            report.orphaned_blobs.append(blob.key)

        logger.info(
            f"Reconciliation scan: records={report.checked_records} blobs={report.checked_blobs} "
            f"dangling={len(report.dangling_records)} orphaned={len(report.orphaned_blobs)}"
        )
        return report

    def sweep(self, report: ReconciliationReport | None = None) -> ReconciliationReport:
        """
        Delete orphaned blobs. Records are never touched.

        Args:
            report: A previous scan result (a fresh scan is run if omitted).
        """
        report = report or self.scan()

        for key in report.orphaned_blobs:
            try:
                self.blob_store.delete(key)
            except StorageError as e:
                logger.warning(f"Failed to delete orphaned blob {key}: {e}")
                report.sweep_failures.append(key)
                continue
            report.swept_blobs.append(key)

        logger.info(
            f"Reconciliation sweep: deleted={len(report.swept_blobs)} failed={len(report.sweep_failures)}"
        )
        return report
