"""
Pydantic schemas for the documents API.

Response shapes use the public field names (filename, filesize, created_at)
and never expose storage keys.
"""

from __future__ import annotations

from pydantic import BaseModel


class DocumentSummary(BaseModel):
    """Public view of a document record."""

    id: int
    filename: str
    filesize: int
    created_at: str


class UploadResponse(BaseModel):
    """Response model for document upload."""

    success: bool = True
    message: str = "Document uploaded successfully"
    document: DocumentSummary


class DocumentListResponse(BaseModel):
    """Response model for listing documents."""

    success: bool = True
    documents: list[DocumentSummary]


class DeleteResponse(BaseModel):
    """Response model for document deletion."""

    success: bool = True
    message: str = "Document deleted successfully"


class ErrorResponse(BaseModel):
    """Body of every failed request."""

    success: bool = False
    code: str
    message: str
    debug_id: str | None = None
