"""
Spooling of client image uploads to local temporary files.
The caller owns the returned file and must remove it once transferred.
"""
from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import BinaryIO
from uuid import uuid4

from src.app.domain.errors import InvalidUploadError
from src.app.domain.models import UploadedImage

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {
    "image/jpeg",
    "image/png",
    "image/webp",
    "image/gif",
}

CHUNK_SIZE_BYTES = 64 * 1024


def _sanitize_filename(filename: str) -> str:
    """Sanitize filename for storage."""
    filename = os.path.basename(filename)
    filename = re.sub(r'[^a-zA-Z0-9._-]', '_', filename)
    if len(filename) > 100:
        name, ext = os.path.splitext(filename)
        filename = name[:95] + ext
    return filename or "image"


def spool_upload(
    source: BinaryIO,
    filename: str,
    content_type: str,
    temp_dir: str | Path,
    max_bytes: int,
) -> UploadedImage:
    """
    Copy an uploaded stream to a temp file.

    Raises:
        InvalidUploadError: If the content type is not an image or the file is too large
    """
    if content_type not in ALLOWED_IMAGE_TYPES:
        raise InvalidUploadError(
            f"content type '{content_type}' not allowed. "
            f"Allowed types: {', '.join(sorted(ALLOWED_IMAGE_TYPES))}"
        )

    safe_filename = _sanitize_filename(filename)
    directory = Path(temp_dir)
    directory.mkdir(parents=True, exist_ok=True)
    target = directory / f"{uuid4().hex}_{safe_filename}"

    size = 0
    try:
        with target.open("wb") as out:
            while True:
                chunk = source.read(CHUNK_SIZE_BYTES)
                if not chunk:
                    break
                size += len(chunk)
                if size > max_bytes:
                    raise InvalidUploadError(f"file too large. Maximum size: {max_bytes // (1024 * 1024)}MB")
                out.write(chunk)
    except Exception:
        target.unlink(missing_ok=True)
        raise

    if size == 0:
        target.unlink(missing_ok=True)
        raise InvalidUploadError("file is empty")

    logger.debug("Spooled upload %s (%d bytes) to %s", safe_filename, size, target)
    return UploadedImage(path=target, filename=safe_filename, content_type=content_type, size_bytes=size)
