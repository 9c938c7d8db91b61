"""
Moderation component - Admin actions on business listings.

Shell Layer - checks the admin session, loads the listing, applies the
change and converts DirectoryError into ModerationOutput. Every change
invalidates the cached listing queries.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from uuid import UUID

from src.components.listings import ensure_published_slug_free
from src.components.validation import FieldViolation, ValidationConfig, validate_fields
from src.components.wizard import listing_to_draft
from src.domain import state
from src.domain.entities import BusinessListing, SessionContext
from src.domain.errors import AuthRequired, DirectoryError, NotFoundError, ValidationError

from .models import LISTING_CACHE_KEYS, ListingEdit, ModerationOutput
from .ports import ListingRepoPort, QueryCachePort, TimePort

logger = logging.getLogger(__name__)

_CHECKED_FIELDS = frozenset(
    {"title", "category", "description", "address", "city", "phone", "email", "website", "price_range"}
)
# Stored as NULL when blank.
_OPTIONAL_FIELDS = frozenset({"email", "website", "price_range"})


def _require_admin(session: SessionContext | None) -> SessionContext:
    if session is None:
        raise AuthRequired()
    if not session.is_admin:
        raise AuthRequired("Admin access required")
    return session


def _load(repo: ListingRepoPort, listing_id: UUID) -> BusinessListing:
    listing = repo.get_by_id(listing_id)
    if listing is None:
        raise NotFoundError("Listing", listing_id)
    return listing


def invalidate_listing_queries(cache: QueryCachePort) -> None:
    for key in LISTING_CACHE_KEYS:
        cache.invalidate(key)


def _failure(error: DirectoryError) -> ModerationOutput:
    if isinstance(error, ValidationError):
        return ModerationOutput(
            success=False,
            notification=error.message,
            error_code=error.code,
            violations=[FieldViolation(error.field, error.message, error.code)],
        )
    return ModerationOutput(success=False, notification=str(error), error_code=error.code)


def _apply(
    action: str,
    listing_id: UUID,
    session: SessionContext | None,
    change: Callable[[BusinessListing, SessionContext], BusinessListing],
    *,
    repo: ListingRepoPort,
    cache: QueryCachePort,
    notification: str,
) -> ModerationOutput:
    try:
        admin = _require_admin(session)
        current = _load(repo, listing_id)
        changed = change(current, admin)
        if changed.is_published and (
            not current.is_published or changed.slug != current.slug
        ):
            ensure_published_slug_free(changed.slug, changed.id, repo=repo)
        updated = repo.update(changed)
    except DirectoryError as e:
        logger.warning("Moderation %s on listing %s failed: %s", action, listing_id, e)
        return _failure(e)

    invalidate_listing_queries(cache)
    logger.info("Listing %s: %s by %s", listing_id, action, admin.user_id)
    return ModerationOutput(success=True, listing=updated, notification=notification)


# --- Entry points ---


def run_approve(
    listing_id: UUID,
    session: SessionContext | None,
    *,
    repo: ListingRepoPort,
    cache: QueryCachePort,
    clock: TimePort,
) -> ModerationOutput:
    return _apply(
        "approve",
        listing_id,
        session,
        lambda listing, admin: state.approve(listing, admin.user_id, clock.now_utc()),
        repo=repo,
        cache=cache,
        notification="Listing approved successfully",
    )


def run_reject(
    listing_id: UUID,
    reason: str,
    session: SessionContext | None,
    *,
    repo: ListingRepoPort,
    cache: QueryCachePort,
    clock: TimePort,
) -> ModerationOutput:
    """Reject a pending listing. A blank reason fails and changes nothing."""
    return _apply(
        "reject",
        listing_id,
        session,
        lambda listing, admin: state.reject(listing, reason, admin.user_id, clock.now_utc()),
        repo=repo,
        cache=cache,
        notification="Listing rejected",
    )


def run_toggle_featured(
    listing_id: UUID,
    session: SessionContext | None,
    *,
    repo: ListingRepoPort,
    cache: QueryCachePort,
    clock: TimePort,
) -> ModerationOutput:
    def change(listing: BusinessListing, admin: SessionContext) -> BusinessListing:
        return listing.model_copy(
            update={"is_featured": not listing.is_featured, "updated_at": clock.now_utc()}
        )

    return _apply(
        "toggle_featured",
        listing_id,
        session,
        change,
        repo=repo,
        cache=cache,
        notification="Featured status updated",
    )


def run_set_published(
    listing_id: UUID,
    published: bool,
    session: SessionContext | None,
    *,
    repo: ListingRepoPort,
    cache: QueryCachePort,
    clock: TimePort,
) -> ModerationOutput:
    def change(listing: BusinessListing, admin: SessionContext) -> BusinessListing:
        return listing.model_copy(update={"is_published": published, "updated_at": clock.now_utc()})

    return _apply(
        "publish" if published else "unpublish",
        listing_id,
        session,
        change,
        repo=repo,
        cache=cache,
        notification="Listing published" if published else "Listing unpublished",
    )


def run_edit(
    listing_id: UUID,
    edit: ListingEdit,
    session: SessionContext | None,
    *,
    repo: ListingRepoPort,
    cache: QueryCachePort,
    clock: TimePort,
    config: ValidationConfig | None = None,
) -> ModerationOutput:
    """Apply an admin edit. Only the supplied fields are checked and written."""
    changes = edit.changes()
    config = config or ValidationConfig()

    def change(listing: BusinessListing, admin: SessionContext) -> BusinessListing:
        draft = listing_to_draft(listing)
        checked = [name for name in changes if name in _CHECKED_FIELDS]
        for name in checked:
            setattr(draft, name, changes[name])
        violations = validate_fields(draft, checked, config)
        if violations:
            raise ValidationError(violations[0].field, violations[0].message)
        updates: dict[str, object] = dict(changes)
        for name in _OPTIONAL_FIELDS & changes.keys():
            updates[name] = str(changes[name]).strip() or None
        updates["updated_at"] = clock.now_utc()
        return listing.model_copy(update=updates)

    return _apply(
        "edit",
        listing_id,
        session,
        change,
        repo=repo,
        cache=cache,
        notification="Listing updated successfully",
    )


def run_delete(
    listing_id: UUID,
    session: SessionContext | None,
    *,
    repo: ListingRepoPort,
    cache: QueryCachePort,
) -> ModerationOutput:
    try:
        admin = _require_admin(session)
        listing = _load(repo, listing_id)
        repo.delete(listing.id)
    except DirectoryError as e:
        logger.warning("Deleting listing %s failed: %s", listing_id, e)
        return _failure(e)

    invalidate_listing_queries(cache)
    logger.info("Listing %s deleted by %s", listing_id, admin.user_id)
    return ModerationOutput(success=True, listing=listing, notification="Listing deleted")
