"""
Drafts component unit tests.

Tests for draft save/load round-trips and debounced auto-save.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from src.components.drafts import (
    DraftAutosaver,
    discard_draft,
    key_for,
    load_draft,
    save_draft,
)
from src.domain.drafts import ListingDraft, PostDraft, new_listing_draft, new_post_draft

# --- Mock Implementations ---


class MockDraftStore:
    """In-memory draft store that counts writes."""

    def __init__(self) -> None:
        self._entries: dict[str, str] = {}
        self.writes = 0

    def read(self, key: str) -> str | None:
        return self._entries.get(key)

    def write(self, key: str, payload: str) -> None:
        self._entries[key] = payload
        self.writes += 1

    def remove(self, key: str) -> None:
        self._entries.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._entries)


class MockClock:
    """Mock clock for deterministic testing."""

    def __init__(self) -> None:
        self._time = datetime(2024, 6, 15, 12, 0, 0, tzinfo=UTC)

    def now_utc(self) -> datetime:
        return self._time

    def advance(self, seconds: float) -> None:
        self._time = self._time + timedelta(seconds=seconds)


@pytest.fixture
def store() -> MockDraftStore:
    return MockDraftStore()


@pytest.fixture
def clock() -> MockClock:
    return MockClock()


# --- Round trip ---


class TestRoundTrip:
    """A saved draft reloads with identical field values."""

    def test_listing_round_trip(self, store: MockDraftStore, clock: MockClock) -> None:
        draft = new_listing_draft()
        draft.title = "Modern 2 Bedroom Apartment"
        draft.amenities = "Parking, WiFi"
        draft.is_published = True
        draft.touched = {"title", "amenities"}

        save_draft(draft, store=store, clock=clock)
        loaded = load_draft(key_for(draft), store=store)

        assert isinstance(loaded, ListingDraft)
        assert loaded == draft

    def test_post_round_trip_keeps_kind_and_id(
        self, store: MockDraftStore, clock: MockClock
    ) -> None:
        draft = new_post_draft()
        draft.entity_id = uuid4()
        draft.tags = ["seo", "maps"]
        draft.read_time = 4

        save_draft(draft, store=store, clock=clock)
        loaded = load_draft(key_for(draft), store=store)

        assert isinstance(loaded, PostDraft)
        assert loaded == draft
        assert key_for(draft) == f"blog-draft-{draft.entity_id}"

    def test_missing_key(self, store: MockDraftStore) -> None:
        assert load_draft("listing-draft-new", store=store) is None

    def test_unreadable_entry_is_ignored(self, store: MockDraftStore) -> None:
        store.write("listing-draft-new", "{not json")
        assert load_draft("listing-draft-new", store=store) is None

    def test_save_overwrites_in_place(self, store: MockDraftStore, clock: MockClock) -> None:
        draft = new_listing_draft()
        save_draft(draft, store=store, clock=clock)
        draft.title = "Second version"
        save_draft(draft, store=store, clock=clock)

        assert store.keys() == ["listing-draft-new"]
        loaded = load_draft("listing-draft-new", store=store)
        assert loaded is not None and loaded.title == "Second version"

    def test_discard(self, store: MockDraftStore, clock: MockClock) -> None:
        draft = new_post_draft()
        save_draft(draft, store=store, clock=clock)
        discard_draft(key_for(draft), store=store)
        assert store.keys() == []


# --- Debounce ---


class TestAutosaver:
    """Test debounced auto-save."""

    def test_waits_for_quiet_period(self, store: MockDraftStore, clock: MockClock) -> None:
        saver = DraftAutosaver(store, clock, debounce_seconds=1.0)
        draft = new_listing_draft()

        for letter in "Clinic":
            draft.title += letter
            saver.schedule(draft)
            clock.advance(0.2)
            assert saver.tick() is False

        clock.advance(1.0)
        assert saver.tick() is True
        assert store.writes == 1

        loaded = load_draft("listing-draft-new", store=store)
        assert loaded is not None and loaded.title == "Clinic"

    def test_snapshot_is_isolated_from_later_edits(
        self, store: MockDraftStore, clock: MockClock
    ) -> None:
        saver = DraftAutosaver(store, clock, debounce_seconds=1.0)
        draft = new_listing_draft()
        draft.title = "First"
        saver.schedule(draft)
        draft.title = "Changed without schedule"

        saver.flush()
        loaded = load_draft("listing-draft-new", store=store)
        assert loaded is not None and loaded.title == "First"

    def test_flush_without_pending(self, store: MockDraftStore, clock: MockClock) -> None:
        saver = DraftAutosaver(store, clock)
        assert saver.flush() is False

    def test_cancel(self, store: MockDraftStore, clock: MockClock) -> None:
        saver = DraftAutosaver(store, clock)
        saver.schedule(new_post_draft())
        saver.cancel()
        clock.advance(5)
        assert saver.tick() is False
        assert store.writes == 0

    def test_discard_removes_entry_and_pending(
        self, store: MockDraftStore, clock: MockClock
    ) -> None:
        saver = DraftAutosaver(store, clock)
        draft = new_listing_draft()
        save_draft(draft, store=store, clock=clock)
        saver.schedule(draft)

        saver.discard(key_for(draft))

        assert store.keys() == []
        assert saver.has_pending is False
