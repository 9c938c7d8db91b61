"""
Submission component models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePosixPath

from src.components.validation import FieldViolation
from src.domain.entities import BlogPost, BusinessListing
from src.domain.errors import AssetUploadFailed
from src.rules.models import UploadsRules


@dataclass(frozen=True)
class AssetUpload:
    """An image picked in the wizard and not uploaded yet."""

    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def extension(self) -> str:
        return PurePosixPath(self.filename).suffix.lower().lstrip(".") or "bin"


@dataclass(frozen=True)
class UploadConfig:
    max_upload_bytes: int = 5 * 1024 * 1024
    allowed_mime_types: tuple[str, ...] = ("image/jpeg", "image/png", "image/webp", "image/gif")
    listing_bucket: str = "listing-images"
    post_bucket: str = "blog-images"

    @classmethod
    def from_rules(cls, rules: UploadsRules) -> UploadConfig:
        return cls(
            max_upload_bytes=rules.max_upload_bytes,
            allowed_mime_types=tuple(rules.allowlist_mime_types),
            listing_bucket=rules.buckets.get("listing", cls.listing_bucket),
            post_bucket=rules.buckets.get("post", cls.post_bucket),
        )

    def check(self, content_type: str, size: int) -> None:
        """Raises AssetUploadFailed for an oversized or unsupported image."""
        if size > self.max_upload_bytes:
            limit_mb = self.max_upload_bytes // (1024 * 1024)
            raise AssetUploadFailed(f"Image size must be less than {limit_mb}MB")
        if content_type not in self.allowed_mime_types:
            raise AssetUploadFailed(f"Unsupported image type {content_type}")


@dataclass
class SubmissionOutput:
    """Result of one submit attempt."""

    success: bool
    record: BusinessListing | BlogPost | None = None
    created: bool = False
    notification: str = ""
    error_code: str | None = None
    violations: list[FieldViolation] = field(default_factory=list)
    # Set when nobody is signed in; the caller should send the user to login.
    redirect_to_login: bool = False
