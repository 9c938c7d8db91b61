"""
Submission component port definitions.
"""

from __future__ import annotations

from src.components.drafts.ports import DraftStorePort, TimePort
from src.ports.filestore import BlobStorageError, BlobStoragePort
from src.ports.repo import ListingRepoPort, PostRepoPort

__all__ = [
    "BlobStorageError",
    "BlobStoragePort",
    "DraftStorePort",
    "ListingRepoPort",
    "PostRepoPort",
    "TimePort",
]
