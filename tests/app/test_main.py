"""
Unit tests for the FastAPI application.

These tests verify that the documents router is mounted, that the health
endpoint works, and that errors are rendered with the failure envelope.
"""

import pytest
from fastapi import APIRouter
from fastapi.testclient import TestClient

from app.documents.factory import get_document_service
from app.documents.services.document_service import DocumentService
from docvault_core.domain.exceptions import NotFoundError, StorageError
from tests.app.documents.fakes import FakeBlobStore, FakeMetadataStore


class TestAppHealth:
    """Tests for the health endpoint."""

    def test_health_endpoint_returns_ok(self, test_client):
        """The /health endpoint should return status ok."""
        response = test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_health_endpoint_includes_service_name(self, test_client):
        """The /health endpoint should include the service name."""
        response = test_client.get("/health")

        assert response.json()["service"] == "docvault"


class TestAppRouterMounting:
    """Tests for router mounting."""

    def test_documents_router_mounted(self, test_client):
        """Document endpoints should be accessible under /documents/*."""
        paths = test_client.get("/openapi.json").json()["paths"]

        assert "/documents/upload" in paths
        assert "/documents" in paths
        assert "/documents/{document_id}" in paths

    def test_non_integer_id_is_rejected(self, test_client):
        response = test_client.get("/documents/abc")

        assert response.status_code == 422


class TestAppErrorHandlers:
    """Tests for the error envelope."""

    def test_service_error_envelope(self, error_client):
        response = error_client.get("/_test/not-found")

        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["code"] == "NOT_FOUND"
        assert body["message"] == "Document not found"
        assert "debug_id" in body

    def test_storage_error_hides_cause(self, error_client):
        response = error_client.get("/_test/storage")

        assert response.status_code == 500
        assert "secret-host" not in response.text

    def test_unhandled_exception_is_500(self, error_client):
        response = error_client.get("/_test/crash")

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "code": "INTERNAL_ERROR",
            "message": "Internal server error",
        }


class TestAppCORS:
    """Tests for CORS configuration."""

    def test_cors_allows_any_origin(self, test_client):
        """CORS should allow requests from browser front ends."""
        response = test_client.options(
            "/documents",
            headers={
                "Origin": "http://localhost:5173",
                "Access-Control-Request-Method": "GET",
            },
        )

        assert "access-control-allow-origin" in response.headers


class TestAppOpenAPI:
    """Tests for OpenAPI documentation."""

    def test_openapi_schema_available(self, test_client):
        """The OpenAPI schema should be accessible at /openapi.json."""
        response = test_client.get("/openapi.json")

        assert response.status_code == 200
        assert "openapi" in response.json()

    def test_docs_endpoint_available(self, test_client):
        """The Swagger UI should be accessible at /docs."""
        response = test_client.get("/docs")

        assert response.status_code == 200


# --- Fixtures ---


@pytest.fixture
def test_client():
    """
    Provides a TestClient for the FastAPI app, with the document service
    bound to in-memory stores.
    """
    from app.main import app

    service = DocumentService(blob_store=FakeBlobStore(), metadata_store=FakeMetadataStore())
    app.dependency_overrides[get_document_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture(scope="module")
def error_client():
    """TestClient with extra routes that raise, for exercising the handlers."""
    from app.main import app

    router = APIRouter(prefix="/_test")

    @router.get("/not-found")
    def not_found():
        raise NotFoundError()

    @router.get("/storage")
    def storage():
        raise StorageError("Error saving document", cause=ConnectionError("secret-host:5432"))

    @router.get("/crash")
    def crash():
        raise RuntimeError("boom")

    app.include_router(router)
    yield TestClient(app, raise_server_exceptions=False)
    app.router.routes[:] = [
        r for r in app.router.routes if not getattr(r, "path", "").startswith("/_test")
    ]
