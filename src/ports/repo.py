from collections.abc import Sequence
from typing import Protocol
from uuid import UUID

from src.domain.entities import BlogPost, BusinessListing, User
from src.domain.query import OrderBy, Predicate


class UserRepoPort(Protocol):
    def get_by_email(self, email: str) -> User | None:
        ...

    def get_by_id(self, user_id: UUID) -> User | None:
        ...

    def list_all(self) -> list[User]:
        ...

    def save(self, user: User) -> None:
        ...


class ListingRepoPort(Protocol):
    def get_by_id(self, listing_id: UUID) -> BusinessListing | None:
        ...

    def get_by_slug(self, slug: str) -> BusinessListing | None:
        ...

    def select(
        self,
        predicates: Sequence[Predicate] = (),
        order: Sequence[OrderBy] = (),
        limit: int | None = None,
    ) -> list[BusinessListing]:
        ...

    def insert(self, listing: BusinessListing) -> BusinessListing:
        ...

    def update(self, listing: BusinessListing) -> BusinessListing:
        ...

    def increment(self, listing_id: UUID, column: str) -> BusinessListing | None:
        """Atomically add one to a counter column."""
        ...

    def delete(self, listing_id: UUID) -> None:
        ...


class PostRepoPort(Protocol):
    def get_by_id(self, post_id: UUID) -> BlogPost | None:
        ...

    def get_by_slug(self, slug: str) -> BlogPost | None:
        ...

    def select(
        self,
        predicates: Sequence[Predicate] = (),
        order: Sequence[OrderBy] = (),
        limit: int | None = None,
    ) -> list[BlogPost]:
        ...

    def insert(self, post: BlogPost) -> BlogPost:
        ...

    def update(self, post: BlogPost) -> BlogPost:
        ...

    def delete(self, post_id: UUID) -> None:
        ...
