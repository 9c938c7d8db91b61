from typing import Protocol


class BlobStorageError(Exception):
    """Raised by blob storage adapters when an object cannot be stored."""


class BlobStoragePort(Protocol):
    def upload(self, bucket: str, path: str, data: bytes, content_type: str) -> str:
        """Store bytes under bucket/path and return the stored path."""
        ...

    def get_public_url(self, bucket: str, path: str) -> str:
        """Public URL for a stored object."""
        ...

    def read(self, bucket: str, path: str) -> bytes:
        """Retrieve bytes. Raises FileNotFoundError."""
        ...
