"""
Derive component unit tests.

Tests for slug, excerpt and read time derivation and the auto-derive flags.
"""

from __future__ import annotations

import re

import pytest

from src.components.derive import (
    DerivationConfig,
    excerpt_from,
    meta_title_from,
    read_time,
    record_user_edit,
    refresh_derived,
    slugify,
)
from src.domain.drafts import new_listing_draft, new_post_draft

SLUG_SHAPE = re.compile(r"^[a-z0-9]*(-[a-z0-9]+)*$")


@pytest.fixture
def config() -> DerivationConfig:
    return DerivationConfig()


# --- slugify ---


class TestSlugify:
    """Test slug derivation."""

    def test_basic_title(self) -> None:
        assert slugify("Modern 2 Bedroom Apartment") == "modern-2-bedroom-apartment"

    def test_collapses_punctuation_runs(self) -> None:
        assert slugify("Hello,   World!!") == "hello-world"

    def test_trims_leading_and_trailing(self) -> None:
        assert slugify("  --Top 10 Tips--  ") == "top-10-tips"

    def test_empty(self) -> None:
        assert slugify("") == ""
        assert slugify("!!!") == ""

    @pytest.mark.parametrize(
        "title",
        [
            "Café & Bar – Karachi",
            "a--b__c",
            "UPPER lower 123",
            "-",
            "émoji 🏠 listing",
            "tab\tand\nnewline",
        ],
    )
    def test_shape_and_idempotence(self, title: str) -> None:
        slug = slugify(title)
        assert SLUG_SHAPE.match(slug)
        assert slugify(slug) == slug


# --- read_time ---


class TestReadTime:
    """Test reading time derivation."""

    def test_empty_is_one_minute(self) -> None:
        assert read_time("") == 1

    def test_450_words_is_three_minutes(self) -> None:
        content = " ".join(["word"] * 450)
        assert read_time(content) == 3

    def test_exact_multiple(self) -> None:
        assert read_time(" ".join(["w"] * 400)) == 2

    def test_single_word(self) -> None:
        assert read_time("hello") == 1

    def test_custom_pace(self) -> None:
        assert read_time(" ".join(["w"] * 100), words_per_minute=50) == 2


# --- excerpt_from ---


class TestExcerpt:
    """Test excerpt derivation."""

    def test_strips_markup_and_takes_first_paragraph(self) -> None:
        content = "# Heading **bold** [link](url)\n\nSecond paragraph"
        assert excerpt_from(content) == "Heading bold linkurl"

    def test_truncates(self) -> None:
        assert len(excerpt_from("x" * 500)) == 160

    def test_empty(self) -> None:
        assert excerpt_from("") == ""


class TestMetaTitle:
    def test_with_city(self) -> None:
        assert meta_title_from("Dental Clinic", "Lahore") == "Dental Clinic - Lahore"

    def test_without_city(self) -> None:
        assert meta_title_from("Dental Clinic") == "Dental Clinic"


# --- Draft bookkeeping ---


class TestAutoSlug:
    """Test that the slug follows the title until the user diverges it."""

    def test_slug_follows_title(self, config: DerivationConfig) -> None:
        draft = new_listing_draft()
        record_user_edit(draft, "title", "Modern 2 Bedroom Apartment", config)
        refresh_derived(draft, "title", config)

        assert draft.slug == "modern-2-bedroom-apartment"

    def test_manual_slug_stops_derivation(self, config: DerivationConfig) -> None:
        draft = new_listing_draft()
        record_user_edit(draft, "title", "Modern 2 Bedroom Apartment", config)
        refresh_derived(draft, "title", config)

        record_user_edit(draft, "slug", "dha-apartment", config)
        record_user_edit(draft, "title", "Modern 3 Bedroom Apartment", config)
        refresh_derived(draft, "title", config)

        assert draft.slug == "dha-apartment"
        assert "slug" not in draft.auto_derived

    def test_typing_computed_value_keeps_derivation(self, config: DerivationConfig) -> None:
        draft = new_post_draft()
        record_user_edit(draft, "title", "SEO Tips", config)
        refresh_derived(draft, "title", config)
        record_user_edit(draft, "slug", "seo-tips", config)

        record_user_edit(draft, "title", "More SEO Tips", config)
        refresh_derived(draft, "title", config)

        assert draft.slug == "more-seo-tips"

    def test_read_time_follows_content(self, config: DerivationConfig) -> None:
        draft = new_post_draft()
        record_user_edit(draft, "content", " ".join(["word"] * 450), config)
        updated = refresh_derived(draft, "content", config)

        assert draft.read_time == 3
        assert "read_time" in updated
        assert "excerpt" in updated

    def test_read_time_resumes_after_manual_value(self, config: DerivationConfig) -> None:
        draft = new_post_draft()
        record_user_edit(draft, "read_time", 10, config)
        assert "read_time" not in draft.auto_derived

        record_user_edit(draft, "content", " ".join(["word"] * 1000), config)
        refresh_derived(draft, "content", config)

        assert draft.read_time == 5

    def test_explicit_target_is_left_alone(self, config: DerivationConfig) -> None:
        draft = new_post_draft()
        record_user_edit(draft, "excerpt", "Hand written.", config)
        record_user_edit(draft, "content", "Body text.", config)
        updated = refresh_derived(draft, "content", config, explicit={"excerpt"})

        assert draft.excerpt == "Hand written."
        assert "excerpt" not in updated

    def test_manual_excerpt_stays_manual(self, config: DerivationConfig) -> None:
        draft = new_post_draft()
        record_user_edit(draft, "excerpt", "Hand written.", config)
        record_user_edit(draft, "content", "Body text.", config)
        refresh_derived(draft, "content", config)

        assert draft.excerpt == "Hand written."
