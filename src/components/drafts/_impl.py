"""
Draft persistence and debounced auto-save.

Drafts are overwritten in place on every save and removed after a
successful submission or an explicit discard.
"""

from __future__ import annotations

import logging
from datetime import timedelta

from pydantic import ValidationError

from src.domain.drafts import ListingDraft, PostDraft, draft_key

from .models import DraftSnapshot
from .ports import DraftStorePort, TimePort

logger = logging.getLogger(__name__)


def key_for(draft: ListingDraft | PostDraft) -> str:
    return draft_key(draft.kind, draft.entity_id)


def save_draft(
    draft: ListingDraft | PostDraft,
    *,
    store: DraftStorePort,
    clock: TimePort,
) -> DraftSnapshot:
    """Serialize the draft and overwrite its store entry."""
    snapshot = DraftSnapshot(key=key_for(draft), saved_at=clock.now_utc(), draft=draft)
    store.write(snapshot.key, snapshot.model_dump_json())
    return snapshot


def load_draft(key: str, *, store: DraftStorePort) -> ListingDraft | PostDraft | None:
    """
    Reload a saved draft.

    An unreadable entry is logged and treated as absent; it is left in place
    so the next save overwrites it.
    """
    payload = store.read(key)
    if payload is None:
        return None
    try:
        return DraftSnapshot.model_validate_json(payload).draft
    except ValidationError:
        logger.warning("Ignoring unreadable draft %s", key)
        return None


def discard_draft(key: str, *, store: DraftStorePort) -> None:
    store.remove(key)


class DraftAutosaver:
    """
    Debounced draft writer.

    Every change calls schedule(); the latest snapshot is written once no
    further change has arrived for `debounce_seconds` (checked by tick()),
    or immediately by flush().
    """

    def __init__(
        self,
        store: DraftStorePort,
        clock: TimePort,
        debounce_seconds: float = 1.0,
    ) -> None:
        self._store = store
        self._clock = clock
        self._debounce = timedelta(seconds=debounce_seconds)
        self._pending: ListingDraft | PostDraft | None = None
        self._changed_at = clock.now_utc()
        self.saves = 0

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    def schedule(self, draft: ListingDraft | PostDraft) -> None:
        self._pending = draft.model_copy(deep=True)
        self._changed_at = self._clock.now_utc()

    def tick(self) -> bool:
        """Write the pending snapshot if the debounce window has passed."""
        if self._pending is None:
            return False
        if self._clock.now_utc() - self._changed_at < self._debounce:
            return False
        return self.flush()

    def flush(self) -> bool:
        if self._pending is None:
            return False
        save_draft(self._pending, store=self._store, clock=self._clock)
        self._pending = None
        self.saves += 1
        return True

    def cancel(self) -> None:
        self._pending = None

    def discard(self, key: str) -> None:
        """Drop any pending write and remove the stored entry."""
        self._pending = None
        discard_draft(key, store=self._store)
