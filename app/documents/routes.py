"""
Document routes.

Thin translation between HTTP and DocumentService:
- Upload a PDF
- List documents
- Download a document
- Delete a document

Errors are raised as ServiceError subclasses and rendered by the
application-level exception handlers.
"""

from __future__ import annotations

import asyncio
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import StreamingResponse

from docvault_core.config import settings
from docvault_core.domain.exceptions import InvalidUploadError

from app.documents.factory import get_document_service
from app.documents.schemas import (
    DeleteResponse,
    DocumentListResponse,
    DocumentSummary,
    ErrorResponse,
    UploadResponse,
)
from app.documents.services.document_service import DocumentService

router = APIRouter(prefix="/documents", tags=["Documents"])

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    413: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.post("/upload", response_model=UploadResponse, responses=_ERROR_RESPONSES)
async def upload_document(
    file: UploadFile | None = File(default=None),
    service: DocumentService = Depends(get_document_service),
):
    """
    Upload a single PDF (multipart field "file").

    Returns:
        UploadResponse: The stored document's id, filename, size and timestamp.
    """
    if file is None:
        raise InvalidUploadError("No file provided")

    # Reject on the parsed part size before pulling the body into memory
    if file.size is not None:
        service.validator.validate(file.content_type, file.size)

    content = await file.read()
    record = await asyncio.to_thread(
        service.upload,
        file.filename or "document",
        file.content_type,
        content,
        len(content),
    )

    return UploadResponse(document=DocumentSummary(**record.to_summary()))


@router.get("", response_model=DocumentListResponse, responses=_ERROR_RESPONSES)
def list_documents(service: DocumentService = Depends(get_document_service)):
    """List all documents, newest first."""
    documents = [DocumentSummary(**record.to_summary()) for record in service.list_documents()]
    return DocumentListResponse(documents=documents)


@router.get("/{document_id}", response_class=StreamingResponse, responses=_ERROR_RESPONSES)
def download_document(
    document_id: int,
    service: DocumentService = Depends(get_document_service),
):
    """Stream a document back under its original filename."""
    download = service.download(document_id)
    return StreamingResponse(
        download.stream,
        media_type=settings.ALLOWED_CONTENT_TYPE,
        headers={"Content-Disposition": content_disposition(download.original_name)},
    )


@router.delete("/{document_id}", response_model=DeleteResponse, responses=_ERROR_RESPONSES)
def delete_document(
    document_id: int,
    service: DocumentService = Depends(get_document_service),
):
    """Delete a document's blob and record."""
    service.delete(document_id)
    return DeleteResponse()


def content_disposition(filename: str) -> str:
    """Attachment header preserving the original (possibly non-ASCII) filename."""
    quoted = quote(filename)
    if quoted != filename:
        return f"attachment; filename*=utf-8''{quoted}"
    return f'attachment; filename="{filename}"'
