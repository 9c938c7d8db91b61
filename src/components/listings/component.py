"""
Listings component - Public directory and admin listing queries.

Public reads only ever see published listings; when approval is required
they must also be approved. Results are cached under the
"business-listings" / "admin-listings" / "admin-listing-stats" key
prefixes, which the moderation component invalidates on every change.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar
from uuid import UUID

from src.domain.categories import ALL
from src.domain.entities import BusinessListing, ListingSort
from src.domain.errors import NotFoundError, ValidationError
from src.domain.query import Contains, Eq, OrderBy, Predicate

from .models import (
    ADMIN_LISTINGS_KEY,
    ADMIN_STATS_KEY,
    PUBLIC_LISTINGS_KEY,
    AdminListingFilters,
    ListingFilters,
    ListingStats,
)
from .ports import ListingRepoPort, QueryCachePort

SEARCH_FIELDS = ("title", "description", "city")

SORT_ORDERS: dict[ListingSort, tuple[OrderBy, ...]] = {
    "newest": (OrderBy("created_at", descending=True),),
    "oldest": (OrderBy("created_at"),),
    "most-viewed": (OrderBy("views_count", descending=True),),
    "featured": (OrderBy("is_featured", descending=True), OrderBy("created_at", descending=True)),
}

T = TypeVar("T")


@dataclass
class ListingListOutput:
    listings: list[BusinessListing]
    total: int


def _cached(cache: QueryCachePort | None, key: str, loader: Callable[[], T]) -> T:
    if cache is None:
        return loader()
    result: Any = cache.get_or_load(key, loader)
    return result


def _public_predicates(require_approval: bool) -> list[Predicate]:
    predicates: list[Predicate] = [Eq("is_published", True)]
    if require_approval:
        predicates.append(Eq("approval_status", "approved"))
    return predicates


# --- Public ---


def run_list_public(
    filters: ListingFilters,
    *,
    repo: ListingRepoPort,
    cache: QueryCachePort | None = None,
    require_approval: bool = True,
) -> ListingListOutput:
    def load() -> list[BusinessListing]:
        predicates = _public_predicates(require_approval)
        if filters.category != ALL:
            predicates.append(Eq("category", filters.category))
        if filters.search.strip():
            predicates.append(Contains(SEARCH_FIELDS, filters.search.strip()))
        return repo.select(predicates, SORT_ORDERS[filters.sort])

    listings = _cached(cache, filters.cache_key(PUBLIC_LISTINGS_KEY), load)
    return ListingListOutput(listings=listings, total=len(listings))


def run_get_public(
    slug: str,
    *,
    repo: ListingRepoPort,
    require_approval: bool = True,
) -> BusinessListing:
    """Raises NotFoundError unless a visible listing has this slug."""
    found = repo.select([Eq("slug", slug), *_public_predicates(require_approval)], limit=1)
    if not found:
        raise NotFoundError("Listing", slug)
    return found[0]


def _count(listing_id: UUID, column: str, repo: ListingRepoPort) -> BusinessListing:
    # Only the counter column is written, so moderation state is never touched.
    counted = repo.increment(listing_id, column)
    if counted is None:
        raise NotFoundError("Listing", listing_id)
    return counted


def run_record_view(listing: BusinessListing, *, repo: ListingRepoPort) -> BusinessListing:
    """Count one detail page view."""
    return _count(listing.id, "views_count", repo)


def run_record_contact(listing_id: UUID, *, repo: ListingRepoPort) -> BusinessListing:
    return _count(listing_id, "contact_clicks", repo)


# --- Slugs ---


def ensure_published_slug_free(
    slug: str, listing_id: UUID, *, repo: ListingRepoPort
) -> None:
    """Raises ValidationError when another published listing already uses slug."""
    clashes = repo.select([Eq("slug", slug), Eq("is_published", True)])
    if any(c.id != listing_id for c in clashes):
        raise ValidationError("slug", "A published listing already uses this slug")


# --- Admin ---


def run_list_admin(
    filters: AdminListingFilters,
    *,
    repo: ListingRepoPort,
    cache: QueryCachePort | None = None,
) -> ListingListOutput:
    def load() -> list[BusinessListing]:
        predicates: list[Predicate] = []
        if filters.approval != ALL:
            predicates.append(Eq("approval_status", filters.approval))
        if filters.published != ALL:
            predicates.append(Eq("is_published", filters.published == "published"))
        if filters.category != ALL:
            predicates.append(Eq("category", filters.category))
        if filters.search.strip():
            predicates.append(Contains(("title",), filters.search.strip()))
        return repo.select(predicates, SORT_ORDERS["newest"])

    listings = _cached(cache, filters.cache_key(ADMIN_LISTINGS_KEY), load)
    return ListingListOutput(listings=listings, total=len(listings))


def run_admin_categories(
    *, repo: ListingRepoPort, cache: QueryCachePort | None = None
) -> list[str]:
    """Distinct categories in use, for the admin filter."""

    def load() -> list[str]:
        return sorted({listing.category for listing in repo.select()})

    return _cached(cache, f"{ADMIN_LISTINGS_KEY}:categories", load)


def run_stats(*, repo: ListingRepoPort, cache: QueryCachePort | None = None) -> ListingStats:
    def load() -> ListingStats:
        listings = repo.select()
        return ListingStats(
            total=len(listings),
            pending=sum(1 for x in listings if x.approval_status == "pending"),
            published=sum(
                1 for x in listings if x.is_published and x.approval_status == "approved"
            ),
            total_views=sum(x.views_count for x in listings),
        )

    return _cached(cache, ADMIN_STATS_KEY, load)
