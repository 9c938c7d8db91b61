"""Row change notifications published by the repos."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal
from uuid import UUID

ChangeKind = Literal["insert", "update", "delete"]

POSTS_TOPIC = "blog_posts"
LISTINGS_TOPIC = "business_listings"


@dataclass(frozen=True)
class ChangeEvent:
    topic: str
    kind: ChangeKind
    record_id: UUID
