"""
DocumentRepository: PostgreSQL table of document records.

Stores descriptive metadata only - the bytes live in the blob store and are
referenced via storage_key. Every driver error is translated into
StorageError so callers never handle psycopg exceptions directly.
"""

from __future__ import annotations

from typing import Any, Iterator

import psycopg
from loguru import logger

from docvault_core.domain.documents import DocumentRecord, NewDocument
from docvault_core.domain.exceptions import NotFoundError, StorageError
from docvault_core.infrastructure.postgres import get_db_connection

SCHEMA_STATEMENTS = (
    """
    CREATE TABLE IF NOT EXISTS documents (
        id BIGSERIAL PRIMARY KEY,
        original_name TEXT NOT NULL,
        storage_key TEXT NOT NULL UNIQUE,
        size_bytes BIGINT NOT NULL CHECK (size_bytes > 0),
        created_at TIMESTAMPTZ NOT NULL DEFAULT now()
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS documents_created_at_idx
        ON documents (created_at DESC, id DESC)
    """,
)

_COLUMNS = "id, original_name, storage_key, size_bytes, created_at"


class DocumentRepository:
    """
    Repository for document records in PostgreSQL.

    Opens a connection per operation, so one instance can be shared by
    concurrent request workers.

    Usage:
        repo = DocumentRepository()
        repo.ensure_schema()
        record = repo.insert(NewDocument(...))
        for record in repo.list_documents():
            ...
    """

    def __init__(self, dsn: str | None = None):
        """
        Args:
            dsn: PostgreSQL connection string (defaults to settings.POSTGRES_DSN).
        """
        self.dsn = dsn

    def ensure_schema(self) -> None:
        """Create the documents table and listing index if missing."""
        try:
            with get_db_connection(self.dsn) as conn:
                cursor = conn.cursor()
                for statement in SCHEMA_STATEMENTS:
                    cursor.execute(statement)
                conn.commit()
        except psycopg.Error as e:
            logger.error(f"Failed to create documents schema: {e}")
            raise StorageError("Database error", cause=e) from e

        logger.info("Documents schema ready")

    def insert(self, document: NewDocument) -> DocumentRecord:
        """
        Insert a new document record.

        Args:
            document: Name, storage key and size.

        Returns:
            DocumentRecord: The stored record with its assigned id and created_at.

        Raises:
            StorageError: The insert failed (including a duplicate storage key).
        """
        try:
            with get_db_connection(self.dsn) as conn:
                cursor = conn.cursor()
                cursor.execute(
                    f"""
                    INSERT INTO documents (original_name, storage_key, size_bytes)
                    VALUES (%s, %s, %s)
                    RETURNING {_COLUMNS}
                    """,
                    (
                        document.original_name,
                        document.storage_key,
                        document.size_bytes,
                    ),
                )
                row = cursor.fetchone()
                conn.commit()
        except psycopg.Error as e:
            logger.error(f"Failed to insert document {document.storage_key}: {e}")
            raise StorageError("Error saving document metadata", cause=e) from e

        record = _row_to_record(row)
        logger.info(f"Created document {record.id} ({record.storage_key})")
        return record

    def list_documents(self) -> "DocumentListing":
        """Return a restartable listing of all records, newest first."""
        return DocumentListing(self.dsn)

    def get_by_id(self, document_id: int) -> DocumentRecord:
        """
        Get a document record by id.

        Raises:
            NotFoundError: No record with this id.
            StorageError: The query failed.
        """
        try:
            with get_db_connection(self.dsn) as conn:
                cursor = conn.cursor()
                cursor.execute(
                    f"SELECT {_COLUMNS} FROM documents WHERE id = %s",
                    (document_id,),
                )
                row = cursor.fetchone()
        except psycopg.Error as e:
            logger.error(f"Failed to fetch document {document_id}: {e}")
            raise StorageError("Database error", cause=e) from e

        if not row:
            raise NotFoundError(message_debug=f"no record with id={document_id}")

        return _row_to_record(row)

    def delete_by_id(self, document_id: int) -> None:
        """
        Delete a document record by id.

        Raises:
            NotFoundError: No record with this id.
            StorageError: The delete failed.
        """
        try:
            with get_db_connection(self.dsn) as conn:
                cursor = conn.cursor()
                cursor.execute("DELETE FROM documents WHERE id = %s", (document_id,))
                deleted = cursor.rowcount
                conn.commit()
        except psycopg.Error as e:
            logger.error(f"Failed to delete document {document_id}: {e}")
            raise StorageError("Error deleting document", cause=e) from e

        if deleted == 0:
            raise NotFoundError(message_debug=f"no record with id={document_id}")

        logger.info(f"Deleted document record {document_id}")


class DocumentListing:
    """
    Lazy, restartable listing of document records.

    Nothing is queried until iteration starts; every new iteration runs the
    query again and streams rows from the cursor.
    """

    QUERY = f"SELECT {_COLUMNS} FROM documents ORDER BY created_at DESC, id DESC"

    def __init__(self, dsn: str | None = None):
        self.dsn = dsn

    def __iter__(self) -> Iterator[DocumentRecord]:
        try:
            with get_db_connection(self.dsn) as conn:
                cursor = conn.cursor()
                cursor.execute(self.QUERY)
                for row in cursor:
                    yield _row_to_record(row)
        except psycopg.Error as e:
            logger.error(f"Failed to list documents: {e}")
            raise StorageError("Database error", cause=e) from e


def _row_to_record(row: tuple[Any, ...]) -> DocumentRecord:
    return DocumentRecord(
        id=row[0],
        original_name=row[1],
        storage_key=row[2],
        size_bytes=row[3],
        created_at=row[4],
    )


def get_document_repository() -> DocumentRepository:
    """Factory function for DocumentRepository."""
    return DocumentRepository()
