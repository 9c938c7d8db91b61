"""
Drafts component models.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from src.domain.drafts import Draft


class DraftSnapshot(BaseModel):
    """What the Draft Store holds for one key."""

    key: str
    saved_at: datetime
    draft: Draft
