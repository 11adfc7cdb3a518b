"""
Unit tests for DocumentRepository.

Tests the record operations using mocked PostgreSQL.
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import psycopg
import pytest

from app.documents.protocols import MetadataStore
from app.documents.services.metadata_repository import DocumentListing, DocumentRepository
from docvault_core.domain.documents import DocumentRecord, NewDocument
from docvault_core.domain.exceptions import NotFoundError, StorageError

CREATED_AT = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
ROW = (7, "report.pdf", "report-1714564800000-abc123def456.pdf", 1024, CREATED_AT)


class TestInsert:
    """Tests for inserting document records."""

    def test_insert_executes_insert_returning(self, mock_postgres):
        mock_cursor = mock_postgres["cursor"]
        mock_cursor.fetchone.return_value = ROW

        record = DocumentRepository().insert(_new_document())

        query = str(mock_cursor.execute.call_args[0][0]).upper()
        assert "INSERT INTO DOCUMENTS" in query
        assert "RETURNING" in query
        params = mock_cursor.execute.call_args[0][1]
        assert params == ("report.pdf", ROW[2], 1024)
        mock_postgres["connection"].commit.assert_called_once()
        assert record == DocumentRecord(
            id=7,
            original_name="report.pdf",
            storage_key=ROW[2],
            size_bytes=1024,
            created_at=CREATED_AT,
        )

    def test_created_at_is_assigned_by_database(self, mock_postgres):
        mock_cursor = mock_postgres["cursor"]
        mock_cursor.fetchone.return_value = ROW

        record = DocumentRepository().insert(_new_document())

        query = str(mock_cursor.execute.call_args[0][0]).upper()
        insert_columns = query.split("VALUES")[0]
        assert "CREATED_AT" not in insert_columns
        assert record.created_at == CREATED_AT

    def test_insert_failure_is_storage_error(self, mock_postgres):
        mock_postgres["cursor"].execute.side_effect = psycopg.errors.UniqueViolation("dup")

        with pytest.raises(StorageError) as exc_info:
            DocumentRepository().insert(_new_document())

        assert exc_info.value.message_safe == "Error saving document metadata"

    def test_connection_failure_is_storage_error(self):
        with patch(
            "app.documents.services.metadata_repository.get_db_connection",
            side_effect=psycopg.OperationalError("refused"),
        ):
            with pytest.raises(StorageError):
                DocumentRepository().insert(_new_document())

    def test_uses_configured_dsn(self, mock_postgres):
        mock_postgres["cursor"].fetchone.return_value = ROW

        DocumentRepository(dsn="host=db dbname=docs").insert(_new_document())

        mock_postgres["get_connection"].assert_called_with("host=db dbname=docs")


class TestGetById:
    """Tests for fetching records by id."""

    def test_get_by_id_returns_record(self, mock_postgres):
        mock_postgres["cursor"].fetchone.return_value = ROW

        record = DocumentRepository().get_by_id(7)

        assert record.id == 7
        assert record.original_name == "report.pdf"
        assert mock_postgres["cursor"].execute.call_args[0][1] == (7,)

    def test_get_by_id_not_found(self, mock_postgres):
        mock_postgres["cursor"].fetchone.return_value = None

        with pytest.raises(NotFoundError):
            DocumentRepository().get_by_id(999)

    def test_get_by_id_db_error(self, mock_postgres):
        mock_postgres["cursor"].execute.side_effect = psycopg.OperationalError("gone")

        with pytest.raises(StorageError):
            DocumentRepository().get_by_id(7)


class TestDeleteById:
    """Tests for deleting records."""

    def test_delete_commits(self, mock_postgres):
        mock_postgres["cursor"].rowcount = 1

        DocumentRepository().delete_by_id(7)

        query = str(mock_postgres["cursor"].execute.call_args[0][0]).upper()
        assert "DELETE FROM DOCUMENTS" in query
        mock_postgres["connection"].commit.assert_called_once()

    def test_delete_missing_is_not_found(self, mock_postgres):
        mock_postgres["cursor"].rowcount = 0

        with pytest.raises(NotFoundError):
            DocumentRepository().delete_by_id(7)


class TestListDocuments:
    """Tests for the lazy document listing."""

    def test_listing_is_lazy(self, mock_postgres):
        listing = DocumentRepository().list_documents()

        assert isinstance(listing, DocumentListing)
        mock_postgres["get_connection"].assert_not_called()

    def test_listing_orders_newest_first(self, mock_postgres):
        mock_postgres["cursor"].__iter__.return_value = iter([ROW])

        records = list(DocumentRepository().list_documents())

        assert [r.id for r in records] == [7]
        query = str(mock_postgres["cursor"].execute.call_args[0][0]).upper()
        assert "ORDER BY CREATED_AT DESC, ID DESC" in query

    def test_listing_is_restartable(self, mock_postgres):
        mock_postgres["cursor"].__iter__.side_effect = lambda: iter([ROW])
        listing = DocumentRepository().list_documents()

        first = list(listing)
        second = list(listing)

        assert first == second
        assert mock_postgres["cursor"].execute.call_count == 2

    def test_listing_error_is_storage_error(self, mock_postgres):
        mock_postgres["cursor"].execute.side_effect = psycopg.OperationalError("gone")

        with pytest.raises(StorageError):
            list(DocumentRepository().list_documents())


class TestSchema:
    """Tests for schema creation."""

    def test_ensure_schema_creates_table(self, mock_postgres):
        DocumentRepository().ensure_schema()

        statements = " ".join(
            str(c[0][0]).upper() for c in mock_postgres["cursor"].execute.call_args_list
        )
        assert "CREATE TABLE IF NOT EXISTS DOCUMENTS" in statements
        assert "STORAGE_KEY TEXT NOT NULL UNIQUE" in statements
        assert "CREATED_AT TIMESTAMPTZ NOT NULL DEFAULT NOW()" in statements
        mock_postgres["connection"].commit.assert_called_once()

    def test_implements_protocol(self):
        assert isinstance(DocumentRepository(), MetadataStore)


def _new_document() -> NewDocument:
    return NewDocument(
        original_name="report.pdf",
        storage_key=ROW[2],
        size_bytes=1024,
    )


@pytest.fixture
def mock_postgres():
    """Provides mock PostgreSQL connection and cursor."""
    with patch("app.documents.services.metadata_repository.get_db_connection") as mock_get_conn:
        mock_conn = MagicMock()
        mock_cursor = MagicMock()

        mock_conn.cursor.return_value = mock_cursor
        mock_conn.__enter__ = MagicMock(return_value=mock_conn)
        mock_conn.__exit__ = MagicMock(return_value=False)

        mock_get_conn.return_value = mock_conn

        yield {
            "get_connection": mock_get_conn,
            "connection": mock_conn,
            "cursor": mock_cursor,
        }
