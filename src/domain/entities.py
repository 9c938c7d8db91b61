from datetime import UTC, datetime
from typing import Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

# --- Enums / Literals ---
ApprovalStatus = Literal["pending", "approved", "rejected"]
UserStatus = Literal["active", "disabled"]
ListingSort = Literal["newest", "oldest", "most-viewed", "featured"]

ADMIN_ROLE = "admin"


def utc_now() -> datetime:
    return datetime.now(UTC)


# --- User & Auth ---

class User(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    email: str
    display_name: str
    password_hash: str
    roles: list[str] = Field(default_factory=list)
    status: UserStatus = "active"
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class SessionContext(BaseModel):
    """The signed-in actor, passed explicitly to components that need it."""

    model_config = ConfigDict(frozen=True)

    user_id: UUID
    email: str
    roles: frozenset[str] = frozenset()

    @property
    def is_admin(self) -> bool:
        return ADMIN_ROLE in self.roles


# --- Directory ---

class BusinessListing(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    user_id: UUID
    category: str
    title: str
    slug: str
    description: str

    address: str = ""
    city: str = ""
    state: str | None = None
    postal_code: str | None = None
    phone: str = ""
    email: str | None = None
    website: str | None = None
    whatsapp_number: str | None = None

    featured_image_url: str | None = None
    featured_image_alt: str | None = None
    price_range: str | None = None
    amenities: list[str] = Field(default_factory=list)

    meta_title: str | None = None
    meta_description: str | None = None
    keywords: list[str] = Field(default_factory=list)

    is_published: bool = False
    is_featured: bool = False
    approval_status: ApprovalStatus = "pending"
    rejection_reason: str | None = None
    approved_by: UUID | None = None
    approved_at: datetime | None = None

    views_count: int = 0
    contact_clicks: int = 0

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


# --- Blog ---

class BlogPost(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    author_id: UUID
    title: str
    slug: str
    category: str
    content: str
    excerpt: str = ""

    featured_image_url: str | None = None
    featured_image_alt: str | None = None
    meta_description: str | None = None
    tags: list[str] = Field(default_factory=list)
    read_time: int = 1

    is_featured: bool = False
    published: bool = False

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
