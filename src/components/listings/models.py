"""
Listings query component models.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from src.domain.categories import ALL
from src.domain.entities import ListingSort

ApprovalFilter = Literal["all", "pending", "approved", "rejected"]
PublishedFilter = Literal["all", "published", "draft"]

# Cached query key prefixes.
PUBLIC_LISTINGS_KEY = "business-listings"
ADMIN_LISTINGS_KEY = "admin-listings"
ADMIN_STATS_KEY = "admin-listing-stats"


@dataclass(frozen=True)
class ListingFilters:
    """Public directory filters."""

    category: str = ALL
    search: str = ""
    sort: ListingSort = "newest"

    def cache_key(self, prefix: str) -> str:
        return f"{prefix}:{self.category}:{self.sort}:{self.search.strip().lower()}"


@dataclass(frozen=True)
class AdminListingFilters:
    approval: ApprovalFilter = "all"
    published: PublishedFilter = "all"
    category: str = ALL
    search: str = ""

    def cache_key(self, prefix: str) -> str:
        return f"{prefix}:{self.approval}:{self.published}:{self.category}:{self.search.strip().lower()}"


@dataclass(frozen=True)
class ListingStats:
    total: int
    pending: int
    published: int
    total_views: int
