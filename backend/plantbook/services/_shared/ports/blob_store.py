from __future__ import annotations

import threading
from typing import BinaryIO, Protocol
from uuid import uuid4

from plantbook.services._shared.errors import BlobRejectedError

ALLOWED_IMAGE_TYPES: dict[str, str] = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}


def check_blob(mimetype: str | None, size: int, max_bytes: int) -> str:
    """
    Validate an upload against the accepted image types and size limit.

    :param mimetype: Declared content type.
    :param size: Payload size in bytes.
    :param max_bytes: Upper bound (inclusive).
    :returns: File extension for the MIME type.
    :raises BlobRejectedError: On unsupported type, empty or oversize payload.
    """
    ext = ALLOWED_IMAGE_TYPES.get((mimetype or "").lower())
    if ext is None:
        raise BlobRejectedError("Only image files are allowed (jpeg, png, gif, webp)", field="image")
    if size == 0:
        raise BlobRejectedError("Uploaded file is empty", field="image")
    if size > max_bytes:
        raise BlobRejectedError(f"File too large (max {max_bytes} bytes)", field="image")
    return ext


class BlobStore(Protocol):
    """Port for storing user-uploaded images and handing back public URLs."""

    def save(
        self,
        stream: BinaryIO,
        *,
        filename: str | None,
        mimetype: str | None,
        max_bytes: int,
    ) -> str:
        """Persist the stream. :returns: public URL. :raises BlobRejectedError:"""

    def delete(self, url: str) -> bool:
        """Remove a previously saved blob. :returns: True if something was removed."""


class InMemoryBlobStore(BlobStore):
    """Dict-backed blob store for unit tests."""

    def __init__(self, *, url_prefix: str = "/uploads") -> None:
        self.url_prefix = url_prefix.rstrip("/")
        self.blobs: dict[str, bytes] = {}
        self._lock = threading.Lock()

    def save(self, stream, *, filename, mimetype, max_bytes) -> str:
        data = stream.read(max_bytes + 1)
        ext = check_blob(mimetype, len(data), max_bytes)
        url = f"{self.url_prefix}/{uuid4().hex}{ext}"
        with self._lock:
            self.blobs[url] = data
        return url

    def delete(self, url: str) -> bool:
        with self._lock:
            return self.blobs.pop(url, None) is not None
