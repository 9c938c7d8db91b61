"""Public business directory."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException

from src.adapters.query_cache import InMemoryQueryCache
from src.adapters.sqlite.repos import SQLiteListingRepo
from src.api.deps import get_listing_repo, get_query_cache, get_rules
from src.api.schemas import CategoriesResponse, ListingListResponse, OperationResponse
from src.components.listings import (
    ListingFilters,
    run_get_public,
    run_list_public,
    run_record_contact,
    run_record_view,
)
from src.domain.categories import ALL
from src.domain.entities import BusinessListing, ListingSort
from src.domain.errors import NotFoundError
from src.rules.models import Rules

router = APIRouter()


@router.get("", response_model=ListingListResponse)
def list_listings(
    category: str = ALL,
    search: str = "",
    sort: ListingSort = "newest",
    repo: SQLiteListingRepo = Depends(get_listing_repo),
    cache: InMemoryQueryCache = Depends(get_query_cache),
    rules: Rules = Depends(get_rules),
) -> ListingListResponse:
    result = run_list_public(
        ListingFilters(category=category, search=search, sort=sort),
        repo=repo,
        cache=cache,
        require_approval=rules.listings.public_requires_approval,
    )
    return ListingListResponse(listings=result.listings, total=result.total)


@router.get("/categories", response_model=CategoriesResponse)
def list_categories() -> CategoriesResponse:
    return CategoriesResponse.build()


@router.get("/{slug}", response_model=BusinessListing)
def get_listing(
    slug: str,
    repo: SQLiteListingRepo = Depends(get_listing_repo),
    rules: Rules = Depends(get_rules),
) -> BusinessListing:
    """Listing detail; each successful fetch counts as one view."""
    try:
        listing = run_get_public(
            slug, repo=repo, require_approval=rules.listings.public_requires_approval
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail="Listing not found") from e
    return run_record_view(listing, repo=repo)


@router.post("/{listing_id}/contact", response_model=OperationResponse)
def record_contact(
    listing_id: UUID,
    repo: SQLiteListingRepo = Depends(get_listing_repo),
) -> OperationResponse:
    try:
        run_record_contact(listing_id, repo=repo)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail="Listing not found") from e
    return OperationResponse(success=True)
