"""
Wizard component port definitions.
"""

from __future__ import annotations

from typing import Protocol


class ViewportPort(Protocol):
    """Whatever displays the wizard; asked to reset scroll on step changes."""

    def scroll_to_top(self) -> None:
        ...
