from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import BinaryIO
from uuid import uuid4

from werkzeug.utils import secure_filename

from plantbook.services._shared.ports import BlobStore, check_blob

LOGGER = logging.getLogger(__name__)

_CHUNK = 64 * 1024


@dataclass(slots=True)
class LocalBlobStore(BlobStore):
    """
    Blob store writing into a local directory served under ``url_prefix``.

    Files get a random name (the client filename is never trusted), so URLs
    are unguessable and uploads never overwrite each other.

    :param root: Target directory (created on first save).
    :param url_prefix: Public URL prefix, e.g. ``/uploads``.
    """

    root: str
    url_prefix: str = "/uploads"

    def _read_capped(self, stream: BinaryIO, max_bytes: int) -> bytes:
        # Read at most max_bytes + 1 so oversize payloads are detected
        # without buffering them entirely.
        chunks: list[bytes] = []
        remaining = max_bytes + 1
        while remaining > 0:
            chunk = stream.read(min(_CHUNK, remaining))
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)
        return b"".join(chunks)

    def path_for(self, url: str) -> str | None:
        """Map a public URL back to a file path, or None when it is not ours."""
        prefix = self.url_prefix.rstrip("/") + "/"
        if not url or not url.startswith(prefix):
            return None
        name = secure_filename(url[len(prefix) :])
        if not name:
            return None
        return os.path.join(self.root, name)

    def save(
        self,
        stream: BinaryIO,
        *,
        filename: str | None,
        mimetype: str | None,
        max_bytes: int,
    ) -> str:
        data = self._read_capped(stream, max_bytes)
        ext = check_blob(mimetype, len(data), max_bytes)

        os.makedirs(self.root, exist_ok=True)
        name = f"{uuid4().hex}{ext}"
        with open(os.path.join(self.root, name), "wb") as fh:
            fh.write(data)
        LOGGER.info("blob.saved", extra={"blob": name, "count": len(data)})
        return f"{self.url_prefix.rstrip('/')}/{name}"

    def delete(self, url: str) -> bool:
        path = self.path_for(url)
        if path is None or not os.path.isfile(path):
            return False
        os.remove(path)
        LOGGER.info("blob.deleted", extra={"blob": os.path.basename(path)})
        return True
