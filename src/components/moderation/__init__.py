"""
Moderation component - Approve, reject, feature, publish, edit and delete listings.
"""

from .component import (
    invalidate_listing_queries,
    run_approve,
    run_delete,
    run_edit,
    run_reject,
    run_set_published,
    run_toggle_featured,
)
from .models import (
    ADMIN_LISTINGS_KEY,
    ADMIN_STATS_KEY,
    LISTING_CACHE_KEYS,
    PUBLIC_LISTINGS_KEY,
    ListingEdit,
    ModerationOutput,
)
from .ports import QueryCachePort

__all__ = [
    # Entry points
    "run_approve",
    "run_reject",
    "run_toggle_featured",
    "run_set_published",
    "run_edit",
    "run_delete",
    "invalidate_listing_queries",
    # Models
    "ListingEdit",
    "ModerationOutput",
    # Cache keys
    "ADMIN_LISTINGS_KEY",
    "ADMIN_STATS_KEY",
    "PUBLIC_LISTINGS_KEY",
    "LISTING_CACHE_KEYS",
    # Ports
    "QueryCachePort",
]
