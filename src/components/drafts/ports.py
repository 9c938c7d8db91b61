"""
Drafts component port definitions.
"""

from __future__ import annotations

from typing import Protocol

from src.ports.clock import ClockPort


class DraftStorePort(Protocol):
    """Local key-value storage for serialized drafts."""

    def read(self, key: str) -> str | None:
        """Return the stored payload, or None."""
        ...

    def write(self, key: str, payload: str) -> None:
        """Store payload under key, replacing any previous value."""
        ...

    def remove(self, key: str) -> None:
        """Delete key if present."""
        ...

    def keys(self) -> list[str]:
        """List stored keys."""
        ...


# Components take the shared clock port under this name.
TimePort = ClockPort
