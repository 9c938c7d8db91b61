"""
Submission component - Upload, compose and persist a finished draft.
"""

from ._impl import compose_listing, compose_post, normalize_list
from .component import SubmissionPipeline
from .models import AssetUpload, SubmissionOutput, UploadConfig
from .ports import BlobStorageError, BlobStoragePort, ListingRepoPort, PostRepoPort

__all__ = [
    # Entry point
    "SubmissionPipeline",
    # Pure helpers
    "compose_listing",
    "compose_post",
    "normalize_list",
    # Models
    "AssetUpload",
    "SubmissionOutput",
    "UploadConfig",
    # Ports
    "BlobStorageError",
    "BlobStoragePort",
    "ListingRepoPort",
    "PostRepoPort",
]
