"""
Derived field computation.

Functional Core - pure functions over strings, plus the bookkeeping that
decides when a derived draft field is still allowed to follow its sources.

All derivations are total: empty input yields an empty slug, an empty
excerpt and a read time of 1.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable, Collection
from typing import Any

from src.domain.drafts import ListingDraft, PostDraft

from .models import DerivationConfig

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")
_MARKUP_CHARS = re.compile(r"[#*`\[\]()]")
_BLANK_LINE = re.compile(r"\n\s*\n")


# --- Pure derivations ---


def slugify(title: str) -> str:
    """Lowercase, collapse runs of non [a-z0-9] into "-", trim hyphens."""
    return _NON_SLUG_CHARS.sub("-", title.lower()).strip("-")


def word_count(content: str) -> int:
    return len(content.split())


def read_time(content: str, words_per_minute: int = 200) -> int:
    """Minutes to read at the given pace, never less than 1."""
    return max(1, math.ceil(word_count(content) / words_per_minute))


def excerpt_from(content: str, max_length: int = 160) -> str:
    """First paragraph of the content with markup punctuation removed."""
    plain = _MARKUP_CHARS.sub("", content).strip()
    first_paragraph = _BLANK_LINE.split(plain, maxsplit=1)[0]
    return first_paragraph[:max_length]


def meta_title_from(title: str, city: str = "") -> str:
    title = title.strip()
    city = city.strip()
    if not title:
        return ""
    return f"{title} - {city}" if city else title


def meta_description_from(description: str, max_length: int = 160) -> str:
    return description.strip()[:max_length]


# --- Draft bookkeeping ---

Deriver = Callable[[Any, DerivationConfig], Any]

# target field -> (source fields, derivation)
LISTING_DERIVATIONS: dict[str, tuple[tuple[str, ...], Deriver]] = {
    "slug": (("title",), lambda d, c: slugify(d.title)),
    "meta_title": (("title", "city"), lambda d, c: meta_title_from(d.title, d.city)),
    "meta_description": (
        ("description",),
        lambda d, c: meta_description_from(d.description, c.meta_description_max),
    ),
}

POST_DERIVATIONS: dict[str, tuple[tuple[str, ...], Deriver]] = {
    "slug": (("title",), lambda d, c: slugify(d.title)),
    "excerpt": (("content",), lambda d, c: excerpt_from(d.content, c.excerpt_max)),
    "read_time": (("content",), lambda d, c: read_time(d.content, c.words_per_minute)),
}


# Derived fields that resume following their sources on every source edit,
# even after the user typed a value of their own.
RESUMES_ON_SOURCE_EDIT = frozenset({"read_time"})


def derivations_for(draft: ListingDraft | PostDraft) -> dict[str, tuple[tuple[str, ...], Deriver]]:
    if isinstance(draft, ListingDraft):
        return LISTING_DERIVATIONS
    return POST_DERIVATIONS


def derive_value(
    draft: ListingDraft | PostDraft, target: str, config: DerivationConfig
) -> Any:
    """Value the target field would have if it were still auto-derived."""
    _, fn = derivations_for(draft)[target]
    return fn(draft, config)


def refresh_derived(
    draft: ListingDraft | PostDraft,
    changed_field: str,
    config: DerivationConfig,
    explicit: Collection[str] = (),
) -> list[str]:
    """
    Recompute every auto-derived field that depends on changed_field.

    Fields named in explicit were set by the same edit and are left alone.
    Returns the names of the fields that were updated.
    """
    updated: list[str] = []
    for target, (sources, fn) in derivations_for(draft).items():
        if changed_field not in sources or target in explicit:
            continue
        if target not in draft.auto_derived:
            if target not in RESUMES_ON_SOURCE_EDIT:
                continue
            draft.auto_derived.add(target)
        setattr(draft, target, fn(draft, config))
        updated.append(target)
    return updated


def record_user_edit(
    draft: ListingDraft | PostDraft, field_name: str, value: Any, config: DerivationConfig
) -> None:
    """
    Apply a value typed by the user.

    Editing a derived field to anything other than its computed value stops
    auto-derivation for that field. Slugs and SEO fields stay manual for the
    rest of the session; read time resumes on the next content edit.
    """
    derivations = derivations_for(draft)
    if field_name in derivations and field_name in draft.auto_derived:
        if value != derive_value(draft, field_name, config):
            draft.auto_derived.discard(field_name)

    setattr(draft, field_name, value)
    draft.touched.add(field_name)
