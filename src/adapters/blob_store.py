"""
Local filesystem blob storage.

Each bucket is a directory under base_path; objects are served by the API
under /storage/<bucket>/<path>.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

from src.ports.filestore import BlobStorageError

logger = logging.getLogger(__name__)

_BUCKET_NAME = re.compile(r"^[a-z0-9-]+$")


class LocalBlobStorage:
    def __init__(self, base_path: str | Path, public_base_url: str = "/storage"):
        self.base_path = Path(base_path).resolve()
        self.public_base_url = public_base_url.rstrip("/")
        if not self.base_path.exists():
            os.makedirs(self.base_path, exist_ok=True)

    def _safe_path(self, bucket: str, path: str) -> Path:
        if not _BUCKET_NAME.match(bucket):
            raise ValueError(f"Invalid bucket name: {bucket}")
        root = self.base_path / bucket
        # Prevent traversal
        target = (root / path).resolve()
        if not target.is_relative_to(root.resolve()) or target == root.resolve():
            raise ValueError(f"Path traversal attempt detected: {path}")
        return target

    def upload(self, bucket: str, path: str, data: bytes, content_type: str) -> str:
        try:
            target = self._safe_path(bucket, path)
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(target, "wb") as f:
                f.write(data)
        except (OSError, ValueError) as e:
            raise BlobStorageError(str(e)) from e
        logger.info("Stored %d bytes (%s) at %s/%s", len(data), content_type, bucket, path)
        return str(target.relative_to((self.base_path / bucket).resolve()))

    def get_public_url(self, bucket: str, path: str) -> str:
        return f"{self.public_base_url}/{bucket}/{path}"

    def read(self, bucket: str, path: str) -> bytes:
        """Retrieve bytes. Raises FileNotFoundError."""
        target = self._safe_path(bucket, path)
        if not target.is_file():
            raise FileNotFoundError(f"File not found: {bucket}/{path}")
        with open(target, "rb") as f:
            return f.read()
