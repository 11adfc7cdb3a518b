"""
Storage key generation for uploaded documents.
"""

from __future__ import annotations

import re
import time
import uuid

from docvault_core.config import settings

MAX_STEM_LENGTH = 64
_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


class BlobNamer:
    """
    Derives a storage key from an untrusted filename.

    Keys look like ``<stem>-<millis>-<token><ext>``, e.g.
    ``report-1718000000000-3f2a9c1b7d4e.pdf``. Uniqueness comes from the
    timestamp plus a random token; it is not coordinated across processes.
    """

    def __init__(self, extension: str | None = None):
        extension = extension if extension is not None else settings.BLOB_EXTENSION
        if extension and not extension.startswith("."):
            extension = f".{extension}"
        self.extension = extension

    def name_for(self, original_name: str | None) -> str:
        stem = sanitize_stem(original_name)
        millis = int(time.time() * 1000)
        token = uuid.uuid4().hex[:12]
        return f"{stem}-{millis}-{token}{self.extension}"


def sanitize_stem(original_name: str | None) -> str:
    """Reduce a filename to a short, path-safe stem."""
    name = (original_name or "").replace("\\", "/").rsplit("/", 1)[-1]
    # Drop the last extension only; "archive.tar.gz" -> "archive.tar"
    if "." in name.lstrip("."):
        name = name[: name.rfind(".")]
    stem = _UNSAFE_CHARS.sub("_", name).lstrip(".")[:MAX_STEM_LENGTH]
    return stem or "document"
