"""
In-progress form state for the listing and blog post wizards.

Each entity kind has its own closed record. The `touched` set holds fields
the user has edited; `auto_derived` holds fields whose value is still being
computed from other fields (slug from title, excerpt from content, ...).
A derived field leaves `auto_derived` as soon as the user gives it a value
that differs from the computed one.
"""

from __future__ import annotations

from typing import Annotated, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

DraftKind = Literal["listing", "post"]

LISTING_DERIVED_FIELDS = frozenset({"slug", "meta_title", "meta_description"})
POST_DERIVED_FIELDS = frozenset({"slug", "excerpt", "read_time"})

# Fields that exist on the record but are not user-editable form values.
_STATE_FIELDS = frozenset({"kind", "entity_id", "touched", "auto_derived"})


class _DraftBase(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    entity_id: UUID | None = None
    featured_image_url: str = ""
    featured_image_alt: str = ""
    # Filename of an image picked but not uploaded yet.
    featured_image_preview: str = ""
    touched: set[str] = Field(default_factory=set)
    auto_derived: set[str] = Field(default_factory=set)

    @classmethod
    def form_fields(cls) -> list[str]:
        return [name for name in cls.model_fields if name not in _STATE_FIELDS]

    @property
    def has_image(self) -> bool:
        return bool(self.featured_image_url or self.featured_image_preview)


class ListingDraft(_DraftBase):
    kind: Literal["listing"] = "listing"

    category: str = ""
    title: str = ""
    slug: str = ""
    description: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""
    phone: str = ""
    email: str = ""
    website: str = ""
    whatsapp_number: str = ""
    price_range: str = ""
    amenities: str = ""
    meta_title: str = ""
    meta_description: str = ""
    keywords: str = ""
    is_published: bool = False


class PostDraft(_DraftBase):
    kind: Literal["post"] = "post"

    title: str = ""
    slug: str = ""
    category: str = ""
    content: str = ""
    excerpt: str = ""
    meta_description: str = ""
    tags: list[str] = Field(default_factory=list)
    read_time: int = 1
    is_featured: bool = False
    published: bool = False


Draft = Annotated[ListingDraft | PostDraft, Field(discriminator="kind")]

DraftAdapter: TypeAdapter[ListingDraft | PostDraft] = TypeAdapter(Draft)


def draft_key(kind: DraftKind, entity_id: UUID | None = None) -> str:
    """Stable Draft Store key: "<prefix>-draft-<id>" or "<prefix>-draft-new"."""
    prefix = "listing" if kind == "listing" else "blog"
    return f"{prefix}-draft-{entity_id if entity_id else 'new'}"


def new_listing_draft() -> ListingDraft:
    return ListingDraft(auto_derived=set(LISTING_DERIVED_FIELDS))


def new_post_draft() -> PostDraft:
    return PostDraft(auto_derived=set(POST_DERIVED_FIELDS))
