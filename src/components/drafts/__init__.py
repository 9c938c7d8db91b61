"""
Drafts component - Local auto-saved snapshots of in-progress forms.
"""

from ._impl import (
    DraftAutosaver,
    discard_draft,
    key_for,
    load_draft,
    save_draft,
)
from .models import DraftSnapshot
from .ports import DraftStorePort, TimePort

__all__ = [
    # Entry points
    "save_draft",
    "load_draft",
    "discard_draft",
    "key_for",
    "DraftAutosaver",
    # Models
    "DraftSnapshot",
    # Ports
    "DraftStorePort",
    "TimePort",
]
