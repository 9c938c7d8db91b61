"""Admin moderation of business listings."""

from uuid import UUID

from fastapi import APIRouter, Depends

from src.adapters.clock import SystemClock
from src.adapters.query_cache import InMemoryQueryCache
from src.adapters.sqlite.repos import SQLiteListingRepo
from src.api.deps import (
    get_clock,
    get_listing_repo,
    get_query_cache,
    get_wizard_config,
    require_admin,
)
from src.api.errors import raise_for_failure
from src.api.schemas import ListingListResponse, OperationResponse, PublishRequest, RejectRequest
from src.components.listings import (
    AdminListingFilters,
    ListingStats,
    run_admin_categories,
    run_list_admin,
    run_stats,
)
from src.components.listings.models import ApprovalFilter, PublishedFilter
from src.components.moderation import (
    ListingEdit,
    ModerationOutput,
    run_approve,
    run_delete,
    run_edit,
    run_reject,
    run_set_published,
    run_toggle_featured,
)
from src.components.wizard import WizardConfig
from src.domain.categories import ALL
from src.domain.entities import BusinessListing, SessionContext

router = APIRouter()


def _unwrap(result: ModerationOutput) -> BusinessListing:
    if not result.success or result.listing is None:
        raise_for_failure(result.error_code, result.notification, result.violations)
    return result.listing


@router.get("", response_model=ListingListResponse)
def list_listings(
    approval: ApprovalFilter = "all",
    published: PublishedFilter = "all",
    category: str = ALL,
    search: str = "",
    _: SessionContext = Depends(require_admin),
    repo: SQLiteListingRepo = Depends(get_listing_repo),
    cache: InMemoryQueryCache = Depends(get_query_cache),
) -> ListingListResponse:
    filters = AdminListingFilters(
        approval=approval, published=published, category=category, search=search
    )
    result = run_list_admin(filters, repo=repo, cache=cache)
    return ListingListResponse(listings=result.listings, total=result.total)


@router.get("/stats")
def listing_stats(
    _: SessionContext = Depends(require_admin),
    repo: SQLiteListingRepo = Depends(get_listing_repo),
    cache: InMemoryQueryCache = Depends(get_query_cache),
) -> ListingStats:
    return run_stats(repo=repo, cache=cache)


@router.get("/categories")
def categories_in_use(
    _: SessionContext = Depends(require_admin),
    repo: SQLiteListingRepo = Depends(get_listing_repo),
    cache: InMemoryQueryCache = Depends(get_query_cache),
) -> list[str]:
    return run_admin_categories(repo=repo, cache=cache)


@router.post("/{listing_id}/approve", response_model=BusinessListing)
def approve_listing(
    listing_id: UUID,
    session: SessionContext = Depends(require_admin),
    repo: SQLiteListingRepo = Depends(get_listing_repo),
    cache: InMemoryQueryCache = Depends(get_query_cache),
    clock: SystemClock = Depends(get_clock),
) -> BusinessListing:
    return _unwrap(run_approve(listing_id, session, repo=repo, cache=cache, clock=clock))


@router.post("/{listing_id}/reject", response_model=BusinessListing)
def reject_listing(
    listing_id: UUID,
    req: RejectRequest,
    session: SessionContext = Depends(require_admin),
    repo: SQLiteListingRepo = Depends(get_listing_repo),
    cache: InMemoryQueryCache = Depends(get_query_cache),
    clock: SystemClock = Depends(get_clock),
) -> BusinessListing:
    return _unwrap(
        run_reject(listing_id, req.reason, session, repo=repo, cache=cache, clock=clock)
    )


@router.post("/{listing_id}/feature", response_model=BusinessListing)
def toggle_featured(
    listing_id: UUID,
    session: SessionContext = Depends(require_admin),
    repo: SQLiteListingRepo = Depends(get_listing_repo),
    cache: InMemoryQueryCache = Depends(get_query_cache),
    clock: SystemClock = Depends(get_clock),
) -> BusinessListing:
    return _unwrap(run_toggle_featured(listing_id, session, repo=repo, cache=cache, clock=clock))


@router.post("/{listing_id}/publish", response_model=BusinessListing)
def set_published(
    listing_id: UUID,
    req: PublishRequest,
    session: SessionContext = Depends(require_admin),
    repo: SQLiteListingRepo = Depends(get_listing_repo),
    cache: InMemoryQueryCache = Depends(get_query_cache),
    clock: SystemClock = Depends(get_clock),
) -> BusinessListing:
    return _unwrap(
        run_set_published(
            listing_id, req.published, session, repo=repo, cache=cache, clock=clock
        )
    )


@router.patch("/{listing_id}", response_model=BusinessListing)
def edit_listing(
    listing_id: UUID,
    edit: ListingEdit,
    session: SessionContext = Depends(require_admin),
    repo: SQLiteListingRepo = Depends(get_listing_repo),
    cache: InMemoryQueryCache = Depends(get_query_cache),
    clock: SystemClock = Depends(get_clock),
    config: WizardConfig = Depends(get_wizard_config),
) -> BusinessListing:
    return _unwrap(
        run_edit(
            listing_id,
            edit,
            session,
            repo=repo,
            cache=cache,
            clock=clock,
            config=config.validation,
        )
    )


@router.delete("/{listing_id}", response_model=OperationResponse)
def delete_listing(
    listing_id: UUID,
    session: SessionContext = Depends(require_admin),
    repo: SQLiteListingRepo = Depends(get_listing_repo),
    cache: InMemoryQueryCache = Depends(get_query_cache),
) -> OperationResponse:
    result = run_delete(listing_id, session, repo=repo, cache=cache)
    if not result.success:
        raise_for_failure(result.error_code, result.notification)
    return OperationResponse(success=True, notification=result.notification)
