"""
FastAPI application for docvault.

Usage:
    uvicorn app.main:app --reload --port 5000
    python -m app.main
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from app.documents.routes import router as documents_router
from docvault_core.config import settings
from docvault_core.logging import setup_logging
from docvault_core.runtime.errors import ErrorCode, ServiceError

# Initialize logging
setup_logging()

STATUS_BY_CODE = {
    ErrorCode.INVALID_CONTENT_TYPE: 400,
    ErrorCode.INVALID_UPLOAD: 400,
    ErrorCode.SIZE_LIMIT_EXCEEDED: 413,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.STORAGE_ERROR: 500,
}

app = FastAPI(
    title="docvault",
    description="PDF document storage with consistent blob and metadata lifecycle",
    version=settings.SERVICE_VERSION,
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    status_code = STATUS_BY_CODE.get(exc.code, 500)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc!r} ({exc.message_debug})")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc}")

    return JSONResponse(status_code=status_code, content={"success": False, **exc.to_dict()})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.opt(exception=exc).error(f"Unhandled exception on {request.method} {request.url.path}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "code": ErrorCode.INTERNAL_ERROR,
            "message": "Internal server error",
        },
    )


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(documents_router)


@app.get("/health")
def health():
    """
    Health check endpoint.

    Returns:
        dict: Status and service information.
    """
    return {"status": "ok", "service": settings.SERVICE_NAME, "version": settings.SERVICE_VERSION}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.APP_HOST, port=settings.APP_PORT)
