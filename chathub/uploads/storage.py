"""Blob store boundary for chat attachments.

Files are checked against the configured size and type allow-list before a
single byte is written, then saved through Django's storage API under
``MEDIA_ROOT`` with a generated name. Clients fetch them from
``/uploads/<stored name>``.
"""

from __future__ import annotations

import logging
import secrets
import time
from contextlib import suppress
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from django.conf import settings
from django.core.files.storage import FileSystemStorage
from PIL import Image

logger = logging.getLogger(__name__)

# extension -> format Pillow must detect in the file body
IMAGE_FORMATS = {
    ".jpg": "JPEG",
    ".jpeg": "JPEG",
    ".png": "PNG",
    ".gif": "GIF",
}


class UploadRejected(Exception):  # noqa: N818
    """The upload does not satisfy the constraints; nothing was stored."""

    MISSING = "missing"
    TOO_LARGE = "too_large"
    TYPE_NOT_ALLOWED = "type_not_allowed"

    def __init__(self, reason: str, detail: str):
        super().__init__(detail)
        self.reason = reason
        self.detail = detail


@dataclass(frozen=True)
class UploadConstraints:
    max_bytes: int
    allowed_types: dict[str, tuple[str, ...]]

    @classmethod
    def from_settings(cls) -> UploadConstraints:
        return cls(
            max_bytes=settings.UPLOAD_MAX_BYTES,
            allowed_types={
                ext.lower(): tuple(t.lower() for t in types)
                for ext, types in settings.UPLOAD_ALLOWED_TYPES.items()
            },
        )

    def check(self, name: str, size: int, content_type: str | None) -> None:
        if size > self.max_bytes:
            size_mb = size / (1024 * 1024)
            limit_mb = self.max_bytes / (1024 * 1024)
            msg = f"File too large: {size_mb:.1f} MB > {limit_mb:g} MB"
            raise UploadRejected(UploadRejected.TOO_LARGE, msg)
        ext = Path(name).suffix.lower()
        allowed = self.allowed_types.get(ext)
        mime = (content_type or "").split(";")[0].strip().lower()
        if not allowed or mime not in allowed:
            accepted = ", ".join(sorted(self.allowed_types))
            msg = f"Unsupported file type '{ext or mime}'. Allowed: {accepted}"
            raise UploadRejected(UploadRejected.TYPE_NOT_ALLOWED, msg)


def verify_image(file_obj, ext: str) -> None:
    """Reject image uploads whose body is not an image of the named format."""

    expected = IMAGE_FORMATS.get(ext.lower())
    if expected is None:
        return
    try:
        with Image.open(file_obj) as image:
            detected = image.format
            image.verify()
    except (OSError, SyntaxError, Image.DecompressionBombError) as exc:
        msg = "Invalid image file"
        raise UploadRejected(UploadRejected.TYPE_NOT_ALLOWED, msg) from exc
    finally:
        with suppress(Exception):
            file_obj.seek(0)
    if detected != expected:
        msg = f"Invalid image file: {ext} upload contains {detected} data"
        raise UploadRejected(UploadRejected.TYPE_NOT_ALLOWED, msg)


@dataclass(frozen=True)
class StoredUpload:
    filename: str
    original_name: str
    size: int
    url: str

    def to_response(self) -> dict[str, Any]:
        return {
            "success": True,
            "filename": self.filename,
            "originalName": self.original_name,
            "size": self.size,
            "url": self.url,
        }


def get_storage() -> FileSystemStorage:
    # Built per call so MEDIA_ROOT overrides (tests, env) are honoured.
    return FileSystemStorage(location=settings.MEDIA_ROOT, base_url=settings.MEDIA_URL)


def url_for(stored_name: str) -> str:
    return f"{settings.MEDIA_URL}{stored_name}"


def generate_stored_name(original_name: str) -> str:
    """``<epoch ms>-<random>`` plus the uploaded file's extension."""

    ext = Path(original_name).suffix.lower()
    return f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{ext}"


def store_upload(
    file_obj,
    *,
    constraints: UploadConstraints | None = None,
    storage: FileSystemStorage | None = None,
) -> StoredUpload:
    """Validate and persist an uploaded file.

    Raises ``UploadRejected`` when the file is missing, too large, of a type
    that is not allowed, or an image whose contents do not match its extension.
    Storage errors propagate to the caller.
    """

    if file_obj is None:
        msg = "No file uploaded"
        raise UploadRejected(UploadRejected.MISSING, msg)

    constraints = constraints or UploadConstraints.from_settings()
    storage = storage or get_storage()

    original_name = Path(getattr(file_obj, "name", "") or "").name
    size = getattr(file_obj, "size", 0) or 0
    constraints.check(original_name, size, getattr(file_obj, "content_type", None))
    verify_image(file_obj, Path(original_name).suffix)

    stored_name = storage.save(generate_stored_name(original_name), file_obj)
    logger.info("Stored upload %s (%s, %d bytes)", stored_name, original_name, size)
    return StoredUpload(
        filename=stored_name,
        original_name=original_name,
        size=size,
        url=url_for(stored_name),
    )
