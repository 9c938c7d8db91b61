"""
Derive component - Slug, excerpt, read time and SEO field derivation.
"""

from ._impl import (
    LISTING_DERIVATIONS,
    POST_DERIVATIONS,
    RESUMES_ON_SOURCE_EDIT,
    derivations_for,
    derive_value,
    excerpt_from,
    meta_description_from,
    meta_title_from,
    read_time,
    record_user_edit,
    refresh_derived,
    slugify,
    word_count,
)
from .models import DerivationConfig

__all__ = [
    # Pure derivations
    "slugify",
    "excerpt_from",
    "read_time",
    "word_count",
    "meta_title_from",
    "meta_description_from",
    # Draft bookkeeping
    "LISTING_DERIVATIONS",
    "POST_DERIVATIONS",
    "RESUMES_ON_SOURCE_EDIT",
    "derivations_for",
    "derive_value",
    "refresh_derived",
    "record_user_edit",
    # Config
    "DerivationConfig",
]
