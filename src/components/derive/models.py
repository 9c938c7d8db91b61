"""
Derive component models.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.rules.models import DerivationRules


@dataclass(frozen=True)
class DerivationConfig:
    """Tunables for derived fields."""

    words_per_minute: int = 200
    excerpt_max: int = 160
    meta_description_max: int = 160

    @classmethod
    def from_rules(cls, rules: DerivationRules) -> DerivationConfig:
        return cls(
            words_per_minute=rules.words_per_minute,
            excerpt_max=rules.excerpt_max,
            meta_description_max=rules.meta_description_max,
        )
