"""
Unified configuration for docvault.

This module provides a single Settings class that consolidates all
environment variables used by the document service and its storage backends.
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Determine project root for .env file loading (allows running from any CWD)
PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """
    Unified settings for docvault.

    Environment variables are loaded from .env file and can be overridden
    by actual environment variables.
    """

    # Service identification
    SERVICE_NAME: str = "docvault"
    SERVICE_VERSION: str = "1.0.0"

    # App host/port
    APP_HOST: str = "0.0.0.0"
    APP_PORT: int = 5000

    LOG_LEVEL: str = "INFO"

    # PostgreSQL (metadata store)
    POSTGRES_DSN: str = "host=localhost port=5432 dbname=postgres user=postgres password=postgres"

    # Blob storage backend selection
    USE_LOCAL_STORAGE: bool = True
    LOCAL_STORAGE_PATH: str = str(PROJECT_ROOT / "uploads")

    # MinIO Configuration
    MINIO_ENDPOINT: str = "localhost:9000"
    MINIO_ACCESS_KEY: str = "minioadmin"
    MINIO_SECRET_KEY: str = "minioadmin"
    MINIO_BUCKET_DOCUMENTS: str = "documents"
    MINIO_SECURE: bool = False

    # Upload policy
    ALLOWED_CONTENT_TYPE: str = "application/pdf"
    BLOB_EXTENSION: str = ".pdf"
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024  # 10 MiB

    DOWNLOAD_CHUNK_SIZE: int = 64 * 1024

    # CORS
    CORS_ORIGINS: list[str] = ["*"]

    # Reconciliation: blobs younger than this are never treated as orphans
    ORPHAN_GRACE_MINUTES: int = 60

    model_config = SettingsConfigDict(
        env_file=PROJECT_ROOT / ".env",
        extra="ignore"
    )


# Global settings instance
settings = Settings()  # type: ignore
