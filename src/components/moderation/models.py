"""
Moderation component models.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel

from src.components.listings.models import (
    ADMIN_LISTINGS_KEY,
    ADMIN_STATS_KEY,
    PUBLIC_LISTINGS_KEY,
)
from src.components.validation import FieldViolation
from src.domain.entities import BusinessListing

# Cached listing queries that go stale when any listing changes.
LISTING_CACHE_KEYS = (ADMIN_LISTINGS_KEY, ADMIN_STATS_KEY, PUBLIC_LISTINGS_KEY)


class ListingEdit(BaseModel):
    """Fields an admin can change directly from the console."""

    title: str | None = None
    category: str | None = None
    description: str | None = None
    address: str | None = None
    city: str | None = None
    phone: str | None = None
    email: str | None = None
    website: str | None = None
    price_range: str | None = None
    is_published: bool | None = None
    is_featured: bool | None = None

    def changes(self) -> dict[str, str | bool]:
        return self.model_dump(exclude_none=True)


@dataclass
class ModerationOutput:
    success: bool
    listing: BusinessListing | None = None
    notification: str = ""
    error_code: str | None = None
    violations: list[FieldViolation] = field(default_factory=list)
