"""
Blog component port definitions.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from src.domain.events import ChangeEvent
from src.ports.repo import PostRepoPort


class ChangeFeedPort(Protocol):
    """Publishes row change notifications per topic."""

    def subscribe(self, topic: str, handler: Callable[[ChangeEvent], None]) -> Callable[[], None]:
        """Register handler; returns a function that unsubscribes it."""
        ...


__all__ = ["ChangeFeedPort", "PostRepoPort"]
