"""
Validation component - Per-step and whole-draft field validation.
"""

from ._impl import (
    EMAIL_REGEX,
    LISTING_STEP_FIELDS,
    POST_STEP_FIELDS,
    step_fields,
    validate_all,
    validate_fields,
    validate_step,
)
from .models import FieldViolation, ValidationConfig

__all__ = [
    # Entry points
    "validate_step",
    "validate_all",
    "validate_fields",
    "step_fields",
    # Models
    "FieldViolation",
    "ValidationConfig",
    # Tables
    "EMAIL_REGEX",
    "LISTING_STEP_FIELDS",
    "POST_STEP_FIELDS",
]
