"""
Record composition for submitted drafts.

Pure functions: a draft plus the uploaded image URL becomes a persisted
record. Values the user typed always win; derived values only fill gaps.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from src.components.derive import (
    DerivationConfig,
    excerpt_from,
    meta_description_from,
    meta_title_from,
    read_time,
    slugify,
)
from src.domain.drafts import ListingDraft, PostDraft
from src.domain.entities import BlogPost, BusinessListing


def normalize_list(values: str | list[str]) -> list[str]:
    """
    Split a comma separated string (or clean a list) into unique items.

    Items are trimmed, empties dropped, first occurrence kept.
    """
    parts = values.split(",") if isinstance(values, str) else values
    result: list[str] = []
    for part in parts:
        item = part.strip()
        if item and item not in result:
            result.append(item)
    return result


def _optional(value: str) -> str | None:
    value = value.strip()
    return value or None


def compose_listing(
    draft: ListingDraft,
    *,
    owner_id: UUID,
    image_url: str | None,
    existing: BusinessListing | None,
    now: datetime,
    config: DerivationConfig,
) -> BusinessListing:
    title = draft.title.strip()
    description = draft.description.strip()
    city = draft.city.strip()
    values = {
        "category": draft.category,
        "title": title,
        "slug": draft.slug.strip() or slugify(title),
        "description": description,
        "address": draft.address.strip(),
        "city": city,
        "state": _optional(draft.state),
        "postal_code": _optional(draft.postal_code),
        "phone": draft.phone.strip(),
        "email": _optional(draft.email),
        "website": _optional(draft.website),
        "whatsapp_number": _optional(draft.whatsapp_number),
        "featured_image_url": image_url,
        "featured_image_alt": _optional(draft.featured_image_alt) if image_url else None,
        "price_range": _optional(draft.price_range),
        "amenities": normalize_list(draft.amenities),
        "meta_title": _optional(draft.meta_title) or meta_title_from(title, city),
        "meta_description": _optional(draft.meta_description)
        or meta_description_from(description, config.meta_description_max),
        "keywords": normalize_list(draft.keywords),
        "is_published": draft.is_published,
        "updated_at": now,
    }
    if existing is not None:
        return existing.model_copy(update=values)
    return BusinessListing(user_id=owner_id, created_at=now, **values)


def compose_post(
    draft: PostDraft,
    *,
    author_id: UUID,
    image_url: str | None,
    existing: BlogPost | None,
    now: datetime,
    config: DerivationConfig,
) -> BlogPost:
    title = draft.title.strip()
    content = draft.content.strip()
    if "read_time" in draft.auto_derived or draft.read_time < 1:
        minutes = read_time(content, config.words_per_minute)
    else:
        minutes = draft.read_time
    values = {
        "title": title,
        "slug": draft.slug.strip() or slugify(title),
        "category": draft.category,
        "content": content,
        "excerpt": draft.excerpt.strip() or excerpt_from(content, config.excerpt_max),
        "featured_image_url": image_url,
        "featured_image_alt": _optional(draft.featured_image_alt) if image_url else None,
        "meta_description": _optional(draft.meta_description),
        "tags": normalize_list(draft.tags),
        "read_time": minutes,
        "is_featured": draft.is_featured,
        "published": draft.published,
        "updated_at": now,
    }
    if existing is not None:
        return existing.model_copy(update=values)
    return BlogPost(author_id=author_id, created_at=now, **values)
