"""
Query result cache keyed by string.

Keys are namespaced by prefix ("business-listings:all:newest:") so one
invalidate("business-listings") drops every variant of a query.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any

from src.components.moderation import LISTING_CACHE_KEYS
from src.domain.events import LISTINGS_TOPIC, ChangeEvent

from .change_feed import ChangeFeed

logger = logging.getLogger(__name__)


class InMemoryQueryCache:
    def __init__(self) -> None:
        self._entries: dict[str, Any] = {}
        self._lock = threading.Lock()

    def get_or_load(self, key: str, loader: Callable[[], Any]) -> Any:
        with self._lock:
            if key in self._entries:
                return self._entries[key]
        value = loader()
        with self._lock:
            self._entries[key] = value
        return value

    def invalidate(self, prefix: str) -> int:
        with self._lock:
            stale = [k for k in self._entries if k.startswith(prefix)]
            for key in stale:
                del self._entries[key]
        if stale:
            logger.debug("Invalidated %d cached queries under %s", len(stale), prefix)
        return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def attach(self, feed: ChangeFeed) -> Callable[[], None]:
        """Drop cached listing queries whenever any listing row changes."""

        def on_listing_change(event: ChangeEvent) -> None:
            for key in LISTING_CACHE_KEYS:
                self.invalidate(key)

        return feed.subscribe(LISTINGS_TOPIC, on_listing_change)
