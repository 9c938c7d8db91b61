"""
Listings query component port definitions.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol

from src.ports.repo import ListingRepoPort


class QueryCachePort(Protocol):
    def get_or_load(self, key: str, loader: Callable[[], Any]) -> Any:
        """Return the cached value for key, calling loader on a miss."""
        ...


__all__ = ["ListingRepoPort", "QueryCachePort"]
