from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from src.adapters.draft_store import InMemoryDraftStore
from src.api.wizard_registry import WizardRegistry
from src.components.wizard import WizardConfig
from src.domain.entities import BusinessListing, SessionContext

NOW = datetime(2024, 6, 15, 12, 0, 0, tzinfo=UTC)


class MockClock:
    def __init__(self) -> None:
        self._time = NOW

    def now_utc(self) -> datetime:
        return self._time

    def advance(self, seconds: float) -> None:
        self._time = self._time + timedelta(seconds=seconds)


@pytest.fixture
def registry():
    return WizardRegistry()


def session():
    return SessionContext(user_id=uuid4(), email="a@example.com", roles=frozenset({"member"}))


def open_listing(registry, who, store, entity=None):
    return registry.open(
        "listing",
        who,
        store=store,
        clock=MockClock(),
        config=WizardConfig(),
        debounce_seconds=1.0,
        entity=entity,
    )


def test_reopening_returns_the_same_wizard(registry):
    store = InMemoryDraftStore()
    who = session()

    first = open_listing(registry, who, store)
    first.set_field("title", "Sea Breeze Cafe")
    second = open_listing(registry, who, store)

    assert second is first
    assert len(registry) == 1


def test_wizards_are_per_user(registry):
    alice, bob = session(), session()
    wizard = open_listing(registry, alice, InMemoryDraftStore())

    assert registry.get(alice, wizard.key) is wizard
    assert registry.get(bob, wizard.key) is None


def test_edit_wizard_is_keyed_by_entity(registry):
    who = session()
    listing = BusinessListing(
        user_id=who.user_id, category="services", title="Plumber", slug="plumber", description="x"
    )

    wizard = open_listing(registry, who, InMemoryDraftStore(), entity=listing)

    assert wizard.key == f"listing-draft-{listing.id}"
    assert wizard.draft.title == "Plumber"


def test_close(registry):
    who = session()
    wizard = open_listing(registry, who, InMemoryDraftStore())

    registry.close(who, wizard.key)
    registry.close(who, wizard.key)

    assert registry.get(who, wizard.key) is None


def test_idle_wizards_are_evicted_after_saving():
    clock = MockClock()
    registry = WizardRegistry(clock=clock, idle_seconds=600)
    store = InMemoryDraftStore()
    who = session()
    wizard = registry.open(
        "listing",
        who,
        store=store,
        clock=clock,
        config=WizardConfig(),
        debounce_seconds=1.0,
    )
    wizard.set_field("title", "Sea Breeze Cafe")

    clock.advance(601)

    assert registry.get(who, wizard.key) is None
    assert len(registry) == 0
    assert store.read(wizard.key) is not None


def test_use_keeps_a_wizard_open():
    clock = MockClock()
    registry = WizardRegistry(clock=clock, idle_seconds=600)
    who = session()
    wizard = open_listing(registry, who, InMemoryDraftStore())

    for _ in range(3):
        clock.advance(400)
        assert registry.get(who, wizard.key) is wizard


def test_evict_idle_leaves_fresh_wizards(registry):
    who = session()
    open_listing(registry, who, InMemoryDraftStore())

    assert registry.evict_idle() == 0
    assert len(registry) == 1
