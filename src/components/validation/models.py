"""
Validation component models.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.rules.models import ValidationRules


@dataclass(frozen=True)
class FieldViolation:
    """A single field-level validation failure."""

    field: str
    message: str
    code: str = "invalid"


@dataclass(frozen=True)
class ValidationConfig:
    """Thresholds used by the field checks."""

    slug_pattern: str = r"^[a-z0-9-]+$"
    listing_title_min: int = 5
    listing_title_max: int = 200
    body_min: int = 50
    phone_min: int = 10
    address_min: int = 10
    city_min: int = 2

    @classmethod
    def from_rules(cls, rules: ValidationRules) -> ValidationConfig:
        return cls(**rules.model_dump())
