"""
Per-step draft validation.

Functional Core - every check is independent and returns at most one
violation for its field. Nothing here raises; callers decide whether a
non-empty result blocks navigation or submission.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any
from urllib.parse import urlparse

from src.domain.categories import is_blog_category, is_listing_category, is_price_range
from src.domain.drafts import ListingDraft, PostDraft

from .models import FieldViolation, ValidationConfig

# RFC 5322 simplified
EMAIL_REGEX = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@"
    r"[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)+$"
)

Check = Callable[[Any, ValidationConfig], FieldViolation | None]

# Fields validated when leaving each step.
LISTING_STEP_FIELDS: dict[int, tuple[str, ...]] = {
    1: ("category", "title", "slug"),
    2: ("description", "address", "city", "phone", "email", "website"),
    3: ("featured_image_alt", "price_range"),
    4: (),
}

POST_STEP_FIELDS: dict[int, tuple[str, ...]] = {
    1: ("title", "slug", "category"),
    2: ("content",),
    3: ("featured_image_alt",),
    4: (),
}


# --- Field checks ---


def _min_length(field_name: str, value: str, minimum: int, message: str) -> FieldViolation | None:
    if len(value.strip()) < minimum:
        return FieldViolation(field=field_name, message=message, code=f"{field_name}_too_short")
    return None


def _check_listing_title(draft: ListingDraft, config: ValidationConfig) -> FieldViolation | None:
    title = draft.title.strip()
    if not title:
        return FieldViolation("title", "Title is required", "title_required")
    if len(title) < config.listing_title_min:
        return FieldViolation(
            "title",
            f"Title must be at least {config.listing_title_min} characters",
            "title_too_short",
        )
    if len(title) > config.listing_title_max:
        return FieldViolation(
            "title",
            f"Title must be {config.listing_title_max} characters or less",
            "title_too_long",
        )
    return None


def _check_post_title(draft: PostDraft, config: ValidationConfig) -> FieldViolation | None:
    if not draft.title.strip():
        return FieldViolation("title", "Title is required", "title_required")
    return None


def _check_slug(draft: ListingDraft | PostDraft, config: ValidationConfig) -> FieldViolation | None:
    if not draft.slug.strip():
        return FieldViolation("slug", "URL Slug is required", "slug_required")
    if not re.fullmatch(config.slug_pattern, draft.slug):
        return FieldViolation(
            "slug",
            "Slug must contain only lowercase letters, numbers, and hyphens",
            "slug_invalid",
        )
    return None


def _check_listing_category(draft: ListingDraft, config: ValidationConfig) -> FieldViolation | None:
    if not draft.category:
        return FieldViolation("category", "Category is required", "category_required")
    if not is_listing_category(draft.category):
        return FieldViolation("category", "Unknown category", "category_invalid")
    return None


def _check_post_category(draft: PostDraft, config: ValidationConfig) -> FieldViolation | None:
    if not draft.category:
        return FieldViolation("category", "Please select a category", "category_required")
    if not is_blog_category(draft.category):
        return FieldViolation("category", "Unknown category", "category_invalid")
    return None


def _check_description(draft: ListingDraft, config: ValidationConfig) -> FieldViolation | None:
    return _min_length(
        "description",
        draft.description,
        config.body_min,
        f"Description must be at least {config.body_min} characters",
    )


def _check_content(draft: PostDraft, config: ValidationConfig) -> FieldViolation | None:
    return _min_length(
        "content",
        draft.content,
        config.body_min,
        f"Content must be at least {config.body_min} characters",
    )


def _check_address(draft: ListingDraft, config: ValidationConfig) -> FieldViolation | None:
    return _min_length("address", draft.address, config.address_min, "Full address is required")


def _check_city(draft: ListingDraft, config: ValidationConfig) -> FieldViolation | None:
    return _min_length("city", draft.city, config.city_min, "City is required")


def _check_phone(draft: ListingDraft, config: ValidationConfig) -> FieldViolation | None:
    return _min_length("phone", draft.phone, config.phone_min, "Valid phone number required")


def _check_email(draft: ListingDraft, config: ValidationConfig) -> FieldViolation | None:
    email = draft.email.strip()
    if email and not EMAIL_REGEX.match(email):
        return FieldViolation("email", "Invalid email address", "email_invalid")
    return None


def _check_website(draft: ListingDraft, config: ValidationConfig) -> FieldViolation | None:
    website = draft.website.strip()
    if not website:
        return None
    parsed = urlparse(website)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return FieldViolation("website", "Invalid URL", "website_invalid")
    return None


def _check_image_alt(draft: ListingDraft | PostDraft, config: ValidationConfig) -> FieldViolation | None:
    if draft.has_image and not draft.featured_image_alt.strip():
        return FieldViolation(
            "featured_image_alt",
            "Image Alt Text is required when featured image is present",
            "image_alt_required",
        )
    return None


def _check_price_range(draft: ListingDraft, config: ValidationConfig) -> FieldViolation | None:
    if draft.price_range and not is_price_range(draft.price_range):
        return FieldViolation("price_range", "Unknown price range", "price_range_invalid")
    return None


LISTING_CHECKS: dict[str, Check] = {
    "category": _check_listing_category,
    "title": _check_listing_title,
    "slug": _check_slug,
    "description": _check_description,
    "address": _check_address,
    "city": _check_city,
    "phone": _check_phone,
    "email": _check_email,
    "website": _check_website,
    "featured_image_alt": _check_image_alt,
    "price_range": _check_price_range,
}

POST_CHECKS: dict[str, Check] = {
    "title": _check_post_title,
    "slug": _check_slug,
    "category": _check_post_category,
    "content": _check_content,
    "featured_image_alt": _check_image_alt,
}


# --- Entry points ---


def step_fields(draft: ListingDraft | PostDraft) -> dict[int, tuple[str, ...]]:
    return LISTING_STEP_FIELDS if isinstance(draft, ListingDraft) else POST_STEP_FIELDS


def _checks(draft: ListingDraft | PostDraft) -> dict[str, Check]:
    return LISTING_CHECKS if isinstance(draft, ListingDraft) else POST_CHECKS


def validate_fields(
    draft: ListingDraft | PostDraft,
    fields: tuple[str, ...] | list[str],
    config: ValidationConfig,
) -> list[FieldViolation]:
    """Run the checks for the given fields, in order."""
    checks = _checks(draft)
    violations: list[FieldViolation] = []
    for name in fields:
        check = checks.get(name)
        if check is None:
            continue
        violation = check(draft, config)
        if violation is not None:
            violations.append(violation)
    return violations


def validate_step(
    draft: ListingDraft | PostDraft, step: int, config: ValidationConfig
) -> list[FieldViolation]:
    """Violations for the fields shown on one wizard step."""
    return validate_fields(draft, step_fields(draft).get(step, ()), config)


def validate_all(draft: ListingDraft | PostDraft, config: ValidationConfig) -> list[FieldViolation]:
    """Violations across every step, in step order."""
    violations: list[FieldViolation] = []
    for step in sorted(step_fields(draft)):
        violations.extend(validate_step(draft, step, config))
    return violations
