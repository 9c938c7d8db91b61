"""
Moderation component port definitions.
"""

from __future__ import annotations

from typing import Protocol

from src.components.drafts.ports import TimePort
from src.ports.repo import ListingRepoPort


class QueryCachePort(Protocol):
    """Cache of query results keyed by string; invalidation is by key prefix."""

    def invalidate(self, prefix: str) -> int:
        """Drop every entry whose key starts with prefix. Returns the count."""
        ...


__all__ = ["ListingRepoPort", "QueryCachePort", "TimePort"]
