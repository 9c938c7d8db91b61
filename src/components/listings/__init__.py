"""
Listings component - Public directory and admin listing queries.
"""

from .component import (
    SEARCH_FIELDS,
    SORT_ORDERS,
    ListingListOutput,
    ensure_published_slug_free,
    run_admin_categories,
    run_get_public,
    run_list_admin,
    run_list_public,
    run_record_contact,
    run_record_view,
    run_stats,
)
from .models import (
    ADMIN_LISTINGS_KEY,
    ADMIN_STATS_KEY,
    PUBLIC_LISTINGS_KEY,
    AdminListingFilters,
    ListingFilters,
    ListingStats,
)
from .ports import QueryCachePort

__all__ = [
    # Public
    "run_list_public",
    "run_get_public",
    "run_record_view",
    "run_record_contact",
    # Slugs
    "ensure_published_slug_free",
    # Admin
    "run_list_admin",
    "run_admin_categories",
    "run_stats",
    # Models
    "ListingFilters",
    "AdminListingFilters",
    "ListingListOutput",
    "ListingStats",
    "SEARCH_FIELDS",
    "SORT_ORDERS",
    # Cache keys
    "PUBLIC_LISTINGS_KEY",
    "ADMIN_LISTINGS_KEY",
    "ADMIN_STATS_KEY",
    # Ports
    "QueryCachePort",
]
