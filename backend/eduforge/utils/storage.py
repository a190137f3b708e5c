"""Local-disk file storage.

Files land under ``settings.UPLOAD_DIR/<folder>/`` with a random name and are
served from ``settings.UPLOAD_URL_PREFIX``. Validation against the configured
size/type limits happens before anything is written.
"""

import logging
import os
import uuid
from typing import List, Optional

from ..core.config import settings
from ..schemas.file import StoredFile
from .errors import ValidationFailed

logger = logging.getLogger(__name__)


def file_extension(filename: str) -> str:
    _, ext = os.path.splitext(filename or "")
    return ext.lower().lstrip(".")


def validate_upload(filename: str, size: int, max_bytes: int, allowed: List[str]) -> None:
    if not filename:
        raise ValidationFailed("No file provided", {"file": "required"})
    if size <= 0:
        raise ValidationFailed("File is empty", {"file": "empty"})
    if size > max_bytes:
        raise ValidationFailed(
            f"File size exceeds maximum allowed size of {max_bytes // (1024 * 1024)}MB",
            {"file": "too_large"},
        )
    ext = file_extension(filename)
    if allowed and ext not in allowed:
        raise ValidationFailed(
            f"File type not allowed. Allowed types: {', '.join(allowed)}",
            {"file": "type_not_allowed"},
        )


def save_bytes(
    data: bytes,
    filename: str,
    content_type: Optional[str] = None,
    folder: str = "files",
) -> StoredFile:
    """Write ``data`` to disk and return its stored-file descriptor."""
    target_dir = os.path.join(settings.UPLOAD_DIR, folder)
    os.makedirs(target_dir, exist_ok=True)
    ext = file_extension(filename)
    unique_name = f"{uuid.uuid4().hex}.{ext}" if ext else uuid.uuid4().hex
    save_path = os.path.join(target_dir, unique_name)
    with open(save_path, "wb") as buffer:
        buffer.write(data)
    logger.info("stored %s (%d bytes) as %s", filename, len(data), save_path)
    url = f"{settings.UPLOAD_URL_PREFIX.rstrip('/')}/{folder}/{unique_name}"
    return StoredFile(
        file_name=filename,
        file_url=url,
        file_type=content_type,
        file_size=len(data),
    )


def remove_stored(stored: StoredFile, folder: str = "files") -> None:
    """Best-effort cleanup when the surrounding transaction fails."""
    name = stored.file_url.rsplit("/", 1)[-1]
    path = os.path.join(settings.UPLOAD_DIR, folder, name)
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
