"""
Local filesystem blob store.

Blobs are flat files named by their storage key inside a single base
directory. Writes go to a temp file first and are linked into place, so a
blob is either fully present or absent.
"""

from __future__ import annotations

import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import BinaryIO, Iterator

from loguru import logger

from docvault_core.config import settings
from docvault_core.domain.documents import BlobInfo
from docvault_core.domain.exceptions import NotFoundError, StorageError

TEMP_PREFIX = ".tmp-"


class LocalBlobStore:
    """
    File-system based blob store.

    Implements the BlobStore protocol.

    Usage:
        store = LocalBlobStore(base_path="/var/lib/docvault/uploads")
        store.store("report-1718000000000-3f2a9c1b7d4e.pdf", content)
        data = b"".join(store.retrieve("report-1718000000000-3f2a9c1b7d4e.pdf"))
    """

    def __init__(self, base_path: str | Path | None = None, chunk_size: int | None = None):
        """
        Initialize local storage.

        Args:
            base_path: Directory holding all blobs (created if missing).
            chunk_size: Read size used when streaming blobs back.
        """
        self.base_path = Path(base_path or settings.LOCAL_STORAGE_PATH)
        self.base_path.mkdir(parents=True, exist_ok=True)
        self.chunk_size = chunk_size or settings.DOWNLOAD_CHUNK_SIZE
        logger.info(f"LocalBlobStore initialized at {self.base_path}")

    def store(self, key: str, content: bytes) -> None:
        """
        Write content under key without ever exposing a partial file.

        Raises:
            StorageError: The key is taken or the write failed.
        """
        target_file = self._path_for(key)
        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(prefix=TEMP_PREFIX, dir=self.base_path)
            with os.fdopen(fd, "wb") as tmp:
                tmp.write(content)
                tmp.flush()
                os.fsync(tmp.fileno())
            # link() refuses to replace an existing file
            os.link(tmp_path, target_file)
        except FileExistsError as e:
            logger.error(f"Storage key collision for {key}")
            raise StorageError("Error saving document", cause=e) from e
        except OSError as e:
            logger.error(f"Failed to write blob {key}: {e}")
            raise StorageError("Error saving document", cause=e) from e
        finally:
            if tmp_path is not None:
                try:
                    os.unlink(tmp_path)
                except FileNotFoundError:
                    pass
                except OSError as e:
                    logger.warning(f"Could not remove temp file {tmp_path}: {e}")

        logger.info(f"Stored blob {key} ({len(content)} bytes)")

    def exists(self, key: str) -> bool:
        return self._path_for(key).is_file()

    def retrieve(self, key: str) -> Iterator[bytes]:
        """
        Open the blob and return an iterator over its chunks.

        The file is opened before returning, so a concurrent delete cannot
        cut the stream short.

        Raises:
            NotFoundError: No blob under key.
            StorageError: The blob could not be opened.
        """
        target_file = self._path_for(key)
        try:
            handle = target_file.open("rb")
        except FileNotFoundError as e:
            raise NotFoundError(message_debug=f"blob {key} missing") from e
        except OSError as e:
            raise StorageError("Error reading document", cause=e) from e

        logger.info(f"Streaming blob {key}")
        return _iter_chunks(handle, self.chunk_size)

    def delete(self, key: str) -> None:
        """
        Delete the blob if present.

        Raises:
            StorageError: The file exists but could not be removed.
        """
        target_file = self._path_for(key)
        try:
            target_file.unlink()
            logger.info(f"Deleted blob {key}")
        except FileNotFoundError:
            logger.debug(f"Blob already absent: {key}")
        except OSError as e:
            logger.error(f"Failed to delete blob {key}: {e}")
            raise StorageError("Error deleting document", cause=e) from e

    def iter_blobs(self) -> Iterator[BlobInfo]:
        for entry in self.base_path.iterdir():
            if entry.name.startswith(".") or not entry.is_file():
                continue
            try:
                stat = entry.stat()
            except FileNotFoundError:
                # Deleted while listing
                continue
            yield BlobInfo(
                key=entry.name,
                size_bytes=stat.st_size,
                modified_at=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
            )

    def _path_for(self, key: str) -> Path:
        if not key or key.startswith(".") or "/" in key or "\\" in key or "\x00" in key:
            raise StorageError("Invalid storage key", cause=ValueError(key))
        return self.base_path / key


def _iter_chunks(handle: BinaryIO, chunk_size: int) -> Iterator[bytes]:
    try:
        while chunk := handle.read(chunk_size):
            yield chunk
    finally:
        handle.close()
